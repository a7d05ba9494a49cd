"""Command line interface for the vendor install tool."""
from __future__ import annotations

from argparse import ArgumentParser, ArgumentTypeError, Namespace
from pathlib import Path
from typing import Iterable
import math
import sys

from core.command_runner import CommandError, RecordingCommandRunner, SubprocessCommandRunner

from .config import FileDefaults, load_defaults
from .context import Console
from .environment import parse_env_assignments
from .errors import ConfigurationError, VendorInstallError
from .install import DEFAULT_SOURCE, DEFAULT_TOOLCHAIN, InstallOptions, VendorInstaller, split_commands


def _positive_float(text: str) -> float:
    try:
        value = float(text)
    except ValueError:
        value = math.nan
    if not math.isfinite(value) or value <= 0:
        raise ArgumentTypeError(f"expected a positive number of seconds, got '{text}'")
    return value


def _build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="go-vendorinstall",
        description="Install packages using a vendor directory as the source tree of a temporary GOPATH",
    )
    parser.add_argument("packages", nargs="*", metavar="PACKAGE", help="Import paths to install")
    parser.add_argument("--source", help=f"Source directory (default: {DEFAULT_SOURCE})")
    parser.add_argument("--target", help="Target directory (defaults to $GOBIN, if not set $GOPATH/bin)")
    parser.add_argument(
        "--commands",
        help="Comma separated list of commands to execute after install in the temporary environment",
    )
    parser.add_argument("--quiet", action="store_true", default=None, help="Disable informational output")
    parser.add_argument("--verbose", action="store_true", help="Enable debug output")
    parser.add_argument("--dry-run", action="store_true", help="Print commands without executing them")
    parser.add_argument("--toolchain", help=f"Toolchain binary to invoke (default: {DEFAULT_TOOLCHAIN})")
    parser.add_argument("--timeout", type=_positive_float, help="Abort each command after SECONDS")
    parser.add_argument(
        "--env",
        dest="environment",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Additional variable for the scoped environment (repeatable)",
    )
    parser.add_argument("--config", help="Defaults file (default: vendorinstall.{toml,json,yaml,yml} if present)")
    parser.add_argument(
        "--scope-process-env",
        action="store_true",
        help="Apply overrides to this process's environment instead of only the child's",
    )
    return parser


def _parse_arguments(argv: Iterable[str]) -> Namespace:
    return _build_parser().parse_args(list(argv))


def _build_options(args: Namespace, defaults: FileDefaults) -> InstallOptions:
    if args.commands is not None:
        commands = split_commands(args.commands)
    else:
        commands = defaults.commands

    environment = dict(defaults.environment)
    environment.update(parse_env_assignments(args.environment))

    quiet = args.quiet if args.quiet is not None else bool(defaults.quiet)
    return InstallOptions(
        packages=list(args.packages),
        source=args.source or defaults.source or DEFAULT_SOURCE,
        target=args.target or defaults.target,
        commands=commands,
        quiet=quiet,
        verbose=args.verbose,
        dry_run=args.dry_run,
        toolchain=args.toolchain or defaults.toolchain or DEFAULT_TOOLCHAIN,
        timeout=args.timeout if args.timeout is not None else defaults.timeout,
        environment=environment,
        scope_process_env=args.scope_process_env,
    )


def _emit_dry_run_output(runner: RecordingCommandRunner, console: Console) -> None:
    for line in runner.iter_formatted():
        console.dry(line)


def main(argv: Iterable[str] | None = None) -> int:
    args = _parse_arguments(sys.argv[1:] if argv is None else argv)
    console = Console.from_flags(quiet=bool(args.quiet), verbose=args.verbose, dry_run=args.dry_run)

    try:
        if not args.packages:
            raise ConfigurationError("no packages: specify a package")
        defaults = load_defaults(Path.cwd(), args.config)
        options = _build_options(args, defaults)
        console = Console.from_flags(quiet=options.quiet, verbose=options.verbose, dry_run=options.dry_run)

        runner: SubprocessCommandRunner | RecordingCommandRunner
        if options.dry_run:
            runner = RecordingCommandRunner()
        else:
            runner = SubprocessCommandRunner()

        VendorInstaller(command_runner=runner, console=console).run(options)

        if isinstance(runner, RecordingCommandRunner):
            _emit_dry_run_output(runner, console)
    except (VendorInstallError, CommandError) as exc:
        console.error(str(exc))
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

"""Run orchestration: workspace, links, scoped environment and delegated commands."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, MutableMapping, Sequence
import os
import shlex

from core.command_runner import CommandError, CommandResult, CommandRunner

from .context import Console
from .environment import EnvironmentScope, build_overrides, resolve_target_dir
from .errors import ConfigurationError
from .workspace import TemporaryWorkspace, link_vendor_tree


DEFAULT_SOURCE = "vendor"
DEFAULT_TOOLCHAIN = "go"


@dataclass(slots=True)
class InstallOptions:
    packages: List[str]
    source: str = DEFAULT_SOURCE
    target: str | None = None
    commands: List[List[str]] = field(default_factory=list)
    quiet: bool = False
    verbose: bool = False
    dry_run: bool = False
    toolchain: str = DEFAULT_TOOLCHAIN
    timeout: float | None = None
    environment: Dict[str, str] = field(default_factory=dict)
    scope_process_env: bool = False


@dataclass(slots=True)
class InstallReport:
    workspace: Path
    gobin: Path
    links: List[Path]
    results: List[CommandResult]


def split_commands(value: str | Iterable[str] | None) -> List[List[str]]:
    """Split follow-up commands into argument vectors.

    A string is treated as a comma separated list of command lines. Each
    line is tokenized with :func:`shlex.split`, so quoted arguments may
    contain spaces.
    """

    if value is None:
        return []
    lines: List[str]
    if isinstance(value, str):
        if not value.strip():
            return []
        lines = value.split(",")
    else:
        lines = list(value)

    commands: List[List[str]] = []
    for line in lines:
        try:
            argv = shlex.split(line)
        except ValueError as exc:
            raise ConfigurationError(f"Invalid follow-up command '{line}': {exc}") from exc
        if not argv:
            raise ConfigurationError("Empty follow-up command in command list")
        commands.append(argv)
    return commands


class VendorInstaller:
    """Builds packages from a vendor tree inside a throwaway workspace."""

    def __init__(self, *, command_runner: CommandRunner, console: Console) -> None:
        self._command_runner = command_runner
        self._console = console

    def run(self, options: InstallOptions) -> InstallReport:
        packages = list(options.packages)
        if not packages:
            raise ConfigurationError("no packages: specify a package")
        if not options.toolchain:
            raise ConfigurationError("no toolchain: specify a toolchain binary")
        for argv in options.commands:
            if not argv:
                raise ConfigurationError("Empty follow-up command in command list")

        with TemporaryWorkspace() as workspace:
            self._console.info(f"gopath: {workspace.root}")
            base_env = os.environ
            gobin = resolve_target_dir(options.target, base_env)
            self._console.info(f"gobin: {gobin}")

            links = link_vendor_tree(workspace.root, options.source)
            for link in links:
                self._console.debug(f"linked {link} -> {os.readlink(link)}")

            overrides = build_overrides(
                gopath=workspace.root,
                gobin=gobin,
                env=base_env,
                extra=options.environment,
            )
            target: MutableMapping[str, str]
            if options.scope_process_env:
                target = os.environ
            else:
                target = dict(os.environ)

            results: List[CommandResult] = []
            with EnvironmentScope(overrides, target=target) as scope:
                for variable in scope.variables:
                    self._console.debug(f"{variable.name}={variable.value}")
                env = dict(scope.target)
                results.append(
                    self._invoke(
                        [options.toolchain, "install", *packages],
                        cwd=workspace.root,
                        env=env,
                        timeout=options.timeout,
                        note="Install packages",
                    )
                )
                for argv in options.commands:
                    results.append(
                        self._invoke(
                            argv,
                            cwd=workspace.root,
                            env=env,
                            timeout=options.timeout,
                            note="Follow-up command",
                        )
                    )

            return InstallReport(workspace=workspace.root, gobin=gobin, links=links, results=results)

    def _invoke(
        self,
        command: Sequence[str],
        *,
        cwd: Path,
        env: Dict[str, str],
        timeout: float | None,
        note: str,
    ) -> CommandResult:
        self._console.info(self._command_runner.format_command(command))
        try:
            result = self._command_runner.run(command, cwd=cwd, env=env, timeout=timeout, note=note)
        except CommandError as exc:
            self._console.output(exc.result.output)
            raise
        if result.output:
            self._console.debug(result.output.rstrip())
        return result

"""Utilities for executing external commands with optional dry-run support."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Sequence
import os
import shlex
import subprocess


@dataclass
class CommandResult:
    """Represents the outcome of an executed command.

    ``output`` holds stdout and stderr interleaved as the child wrote them.
    ``returncode`` is ``None`` when the process never started or was killed
    after a timeout.
    """

    command: Sequence[str]
    returncode: int | None
    output: str


class CommandError(RuntimeError):
    """Raised when a command fails to start or exits unsuccessfully."""

    def __init__(self, result: CommandResult, reason: str | None = None):
        rendered = " ".join(map(shlex.quote, result.command))
        if reason is None:
            reason = f"exit code {result.returncode}"
        super().__init__(f"Command failed ({reason}): {rendered}")
        self.result = result
        self.reason = reason


class CommandRunner:
    """Abstract command runner interface."""

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        check: bool = True,
        note: str | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        raise NotImplementedError

    def format_command(self, command: Sequence[str]) -> str:
        return " ".join(shlex.quote(part) for part in command)


class SubprocessCommandRunner(CommandRunner):
    """Command runner that executes commands via :mod:`subprocess`."""

    @staticmethod
    def _merge_environment(env: Mapping[str, str] | None) -> Dict[str, str] | None:
        if env is None:
            return None
        merged = os.environ.copy()
        merged.update(env)
        return merged

    @staticmethod
    def _decode(data: bytes | str | None) -> str:
        if data is None:
            return ""
        if isinstance(data, str):
            return data
        return data.decode("utf-8", errors="replace")

    def _finalize(self, result: CommandResult, *, check: bool) -> CommandResult:
        if check and result.returncode != 0:
            raise CommandError(result)
        return result

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        check: bool = True,
        note: str | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        if not command:
            raise ValueError("Command must contain at least a program name")

        merged_env = self._merge_environment(env)
        try:
            process = subprocess.run(
                list(command),
                cwd=str(cwd) if cwd else None,
                env=merged_env,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                timeout=timeout,
                check=False,
            )
        except OSError as exc:
            # Covers a missing program, a non-executable file and a missing cwd.
            result = CommandResult(command=command, returncode=None, output="")
            raise CommandError(result, reason=exc.strerror or str(exc)) from exc
        except subprocess.TimeoutExpired as exc:
            result = CommandResult(command=command, returncode=None, output=self._decode(exc.output))
            raise CommandError(result, reason=f"timed out after {timeout}s") from exc

        return self._finalize(
            CommandResult(
                command=command,
                returncode=process.returncode,
                output=self._decode(process.stdout),
            ),
            check=check,
        )


@dataclass(slots=True)
class RecordedCommand:
    command: List[str]
    cwd: str | None
    env: Dict[str, str]
    note: str | None


class RecordingCommandRunner(CommandRunner):
    """Command runner that records commands instead of executing them."""

    def __init__(self) -> None:
        self.commands: List[RecordedCommand] = []

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        check: bool = True,
        note: str | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        self.commands.append(
            RecordedCommand(
                command=list(command),
                cwd=str(cwd) if cwd else None,
                env=dict(env) if env else {},
                note=note,
            )
        )
        return CommandResult(command=command, returncode=0, output="")

    def iter_commands(self) -> Iterable[RecordedCommand]:
        return iter(self.commands)

    def iter_formatted(self, *, workspace: Path | None = None) -> Iterable[str]:
        default_cwd = str(workspace) if workspace else None
        for record in self.commands:
            cmd = self.format_command(record.command)
            cwd = record.cwd or default_cwd
            parts: List[str] = ["[dry-run]"]
            if record.note:
                parts.append(record.note)
            if cwd:
                parts.append(f"(cwd={cwd})")
            parts.append(cmd)
            yield " ".join(parts)

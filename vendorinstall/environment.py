"""Output directory resolution and scoped environment overrides."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from types import TracebackType
from typing import Dict, Iterable, List, Mapping, MutableMapping
import os

from .errors import ConfigurationError, EnvironmentResolutionError


PATH_VAR = "PATH"
GOPATH_VAR = "GOPATH"
GOBIN_VAR = "GOBIN"


def default_gopath(env: Mapping[str, str]) -> Path:
    """Return the first ``GOPATH`` entry, or the toolchain default ``~/go``."""

    for entry in env.get(GOPATH_VAR, "").split(os.pathsep):
        if entry:
            return Path(entry)
    home = env.get("HOME") or os.path.expanduser("~")
    return Path(home) / "go"


def resolve_target_dir(explicit: str | Path | None, env: Mapping[str, str]) -> Path:
    """Resolve the install directory for built binaries.

    Order: ``explicit`` value, then ``GOBIN``, then ``<GOPATH>/bin``.
    The result is always absolute.
    """

    if explicit:
        candidate = Path(explicit)
    elif env.get(GOBIN_VAR):
        candidate = Path(env[GOBIN_VAR])
    else:
        candidate = default_gopath(env) / "bin"

    try:
        return Path(os.path.abspath(candidate))
    except OSError as exc:
        raise EnvironmentResolutionError(f"Failed to resolve target directory {candidate}: {exc}") from exc


def prepend_search_path(directory: Path, current: str | None) -> str:
    if not current:
        return str(directory)
    return f"{directory}{os.pathsep}{current}"


def build_overrides(
    *,
    gopath: Path,
    gobin: Path,
    env: Mapping[str, str],
    extra: Mapping[str, str] | None = None,
) -> Dict[str, str]:
    """Compute the scoped variables for a delegated build.

    ``PATH`` gains ``gobin`` in front so freshly installed binaries can be
    invoked by follow-up commands.
    """

    overrides: Dict[str, str] = {
        PATH_VAR: prepend_search_path(gobin, env.get(PATH_VAR)),
        GOPATH_VAR: str(gopath),
        GOBIN_VAR: str(gobin),
    }
    if extra:
        overrides.update(extra)
    return overrides


def parse_env_assignments(values: Iterable[str]) -> Dict[str, str]:
    """Parse ``NAME=VALUE`` strings; later duplicates win."""

    parsed: Dict[str, str] = {}
    for raw in values:
        name, sep, value = raw.partition("=")
        name = name.strip()
        if not sep or not name:
            raise ConfigurationError(f"Invalid environment assignment '{raw}', expected NAME=VALUE")
        parsed[name] = value
    return parsed


@dataclass(slots=True)
class ScopedVariable:
    name: str
    value: str
    previous: str | None
    was_set: bool


class EnvironmentScope:
    """Apply environment overrides for the duration of a ``with`` block.

    Works on any mutable mapping; defaults to :data:`os.environ`. Exit
    restores previous values, or removes variables that were unset, in
    reverse order of application.
    """

    def __init__(
        self,
        overrides: Mapping[str, str],
        *,
        target: MutableMapping[str, str] | None = None,
    ) -> None:
        self._overrides = dict(overrides)
        self._target = target if target is not None else os.environ
        self._applied: List[ScopedVariable] | None = None

    @property
    def target(self) -> MutableMapping[str, str]:
        return self._target

    @property
    def variables(self) -> List[ScopedVariable]:
        return list(self._applied or [])

    def __enter__(self) -> "EnvironmentScope":
        if self._applied is not None:
            raise RuntimeError("Environment scope is already active")
        self._applied = []
        try:
            for name, value in self._overrides.items():
                was_set = name in self._target
                entry = ScopedVariable(
                    name=name,
                    value=value,
                    previous=self._target.get(name) if was_set else None,
                    was_set=was_set,
                )
                self._target[name] = value
                self._applied.append(entry)
        except BaseException:
            self._restore()
            raise
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._restore()

    def _restore(self) -> None:
        applied = self._applied or []
        self._applied = None
        for entry in reversed(applied):
            if entry.was_set:
                self._target[entry.name] = entry.previous  # type: ignore[assignment]
            else:
                self._target.pop(entry.name, None)

"""Defaults file support for the vendor install tool."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping
import math

from core.config_loader import find_config_file, load_config_file

from .errors import ConfigurationError
from .install import split_commands


CONFIG_STEM = "vendorinstall"
SECTION = "vendorinstall"

_KNOWN_KEYS = {"source", "target", "commands", "quiet", "toolchain", "timeout", "environment"}


@dataclass(slots=True)
class FileDefaults:
    source: str | None = None
    target: str | None = None
    commands: List[List[str]] = field(default_factory=list)
    quiet: bool | None = None
    toolchain: str | None = None
    timeout: float | None = None
    environment: Dict[str, str] = field(default_factory=dict)
    path: Path | None = None


def locate_config(workspace: Path, explicit: str | None) -> Path | None:
    if explicit:
        path = Path(explicit)
        if not path.is_file():
            raise ConfigurationError(f"Configuration file not found: {path}")
        return path
    return find_config_file(workspace, [CONFIG_STEM])


def load_defaults(workspace: Path, explicit: str | None = None) -> FileDefaults:
    """Read the ``[vendorinstall]`` section of the defaults file, if any."""

    path = locate_config(workspace, explicit)
    if path is None:
        return FileDefaults()

    try:
        data = load_config_file(path)
    except (OSError, ValueError, TypeError) as exc:
        raise ConfigurationError(f"Failed to load {path}: {exc}") from exc

    section = data.get(SECTION, {})
    if not isinstance(section, Mapping):
        raise ConfigurationError(f"'{SECTION}' in {path} must be a table")
    return _parse_section(section, path)


def _parse_section(section: Mapping[str, Any], path: Path) -> FileDefaults:
    unknown = sorted(set(section) - _KNOWN_KEYS)
    if unknown:
        raise ConfigurationError(f"Unknown keys in {path}: {', '.join(unknown)}")

    defaults = FileDefaults(path=path)
    defaults.source = _optional_str(section, "source", path)
    defaults.target = _optional_str(section, "target", path)
    defaults.toolchain = _optional_str(section, "toolchain", path)

    commands = section.get("commands")
    if commands is not None and not isinstance(commands, str):
        if not isinstance(commands, list) or not all(isinstance(item, str) for item in commands):
            raise ConfigurationError(f"'commands' in {path} must be a string or a list of strings")
    # A string uses the same comma separated form as the command line flag.
    defaults.commands = split_commands(commands)

    quiet = section.get("quiet")
    if quiet is not None and not isinstance(quiet, bool):
        raise ConfigurationError(f"'quiet' in {path} must be a boolean")
    defaults.quiet = quiet

    timeout = section.get("timeout")
    if timeout is not None:
        valid = isinstance(timeout, (int, float)) and not isinstance(timeout, bool)
        if not valid or not math.isfinite(timeout) or timeout <= 0:
            raise ConfigurationError(f"'timeout' in {path} must be a positive number")
        defaults.timeout = float(timeout)

    environment = section.get("environment", {})
    if not isinstance(environment, Mapping):
        raise ConfigurationError(f"'environment' in {path} must be a table")
    defaults.environment = {str(key): str(value) for key, value in environment.items()}
    return defaults


def _optional_str(section: Mapping[str, Any], key: str, path: Path) -> str | None:
    value = section.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"'{key}' in {path} must be a string")
    return value

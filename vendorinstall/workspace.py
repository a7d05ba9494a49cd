"""Temporary workspace provisioning and vendor tree linking."""
from __future__ import annotations

from pathlib import Path
from types import TracebackType
from typing import List
import os
import shutil
import tempfile

from .errors import WorkspaceError


DEFAULT_PREFIX = "go-vendorinstall-gopath"
SOURCE_SUBDIR = "src"


class TemporaryWorkspace:
    """A uniquely named build root that is always removed on exit.

    Used as a context manager; ``root`` is only available while the
    workspace exists.
    """

    def __init__(self, *, prefix: str = DEFAULT_PREFIX) -> None:
        self._prefix = prefix
        self._root: Path | None = None

    @property
    def root(self) -> Path:
        if self._root is None:
            raise WorkspaceError("Workspace has not been created")
        return self._root

    def create(self) -> Path:
        if self._root is not None:
            return self._root
        try:
            created = tempfile.mkdtemp(prefix=self._prefix)
        except OSError as exc:
            raise WorkspaceError(f"Failed to create temporary workspace: {exc}") from exc
        self._root = Path(created).resolve()
        return self._root

    def remove(self) -> None:
        root = self._root
        if root is None:
            return
        self._root = None
        if not root.exists():
            return
        try:
            shutil.rmtree(root)
        except OSError as exc:
            raise WorkspaceError(f"Failed to remove temporary workspace {root}: {exc}") from exc

    def __enter__(self) -> "TemporaryWorkspace":
        self.create()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.remove()


def link_vendor_tree(workspace_root: Path, source: Path | str) -> List[Path]:
    """Symlink every immediate entry of ``source`` into ``<workspace_root>/src``.

    Link targets are absolute so they stay valid from any working directory.
    The first failure aborts the remaining links.
    """

    try:
        source_dir = Path(os.path.abspath(source))
    except OSError as exc:
        raise WorkspaceError(f"Failed to resolve source directory {source}: {exc}") from exc

    link_dir = workspace_root / SOURCE_SUBDIR
    try:
        link_dir.mkdir(mode=0o777, parents=True, exist_ok=True)
    except OSError as exc:
        raise WorkspaceError(f"Failed to create {link_dir}: {exc}") from exc

    try:
        names = sorted(entry.name for entry in os.scandir(source_dir))
    except OSError as exc:
        raise WorkspaceError(f"Failed to read source directory {source_dir}: {exc}") from exc

    links: List[Path] = []
    for name in names:
        real = source_dir / name
        link = link_dir / name
        try:
            os.symlink(real, link)
        except OSError as exc:
            raise WorkspaceError(f"Failed to link {link} -> {real}: {exc}") from exc
        links.append(link)
    return links

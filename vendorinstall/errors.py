"""Error taxonomy reported by the command line entry point."""
from __future__ import annotations


class VendorInstallError(RuntimeError):
    """Base class for failures that abort a run."""


class ConfigurationError(VendorInstallError):
    """Invalid arguments or configuration, detected before any side effect."""


class WorkspaceError(VendorInstallError):
    """Filesystem failure while provisioning, linking or removing the workspace."""


class EnvironmentResolutionError(VendorInstallError):
    """An environment-derived path could not be resolved."""

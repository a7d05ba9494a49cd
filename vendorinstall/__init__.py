"""Install packages from a vendor directory inside a temporary GOPATH."""
from __future__ import annotations

from .install import InstallOptions, InstallReport, VendorInstaller, split_commands

__version__ = "0.1.0"

__all__ = ["InstallOptions", "InstallReport", "VendorInstaller", "split_commands", "__version__"]

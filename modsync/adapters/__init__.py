"""Adapters — package-manager bindings for external tools.

Public re-exports for convenient access.
"""

from modsync.adapters.base import InvalidModuleName, PackageManager
from modsync.adapters.mock import InMemoryPackageManager
from modsync.adapters.powershell import PowerShellGetAdapter

__all__ = [
    "InMemoryPackageManager",
    "InvalidModuleName",
    "PackageManager",
    "PowerShellGetAdapter",
]

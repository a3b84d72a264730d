"""
Package manager base — the contract between the reconciler and a module registry.

The reconciler only talks to package managers through this protocol,
never directly to pwsh or any other tool.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from modsync.core.models.package import MODULE_NAME_PATTERN
from modsync.core.models.receipt import Receipt


class InvalidModuleName(ValueError):
    """Raised before any command is built for a name outside the allowed charset."""


def validate_module_name(name: str) -> str:
    if not MODULE_NAME_PATTERN.match(name):
        raise InvalidModuleName(f"Invalid module name: {name!r}")
    return name


class PackageManager(ABC):
    """Abstract base class for package query/management collaborators.

    Queries answer ``None`` (or an empty list) when the package is absent
    or the registry cannot resolve it — absence is not an error.
    Mutations return Receipts and NEVER raise for an operation failure.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The manager identifier (e.g., 'powershellget', 'memory')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the underlying tool can be invoked. Fast; never raises."""

    # ── Queries ─────────────────────────────────────────────────

    @abstractmethod
    def query_installed(self, name: str) -> str | None:
        """Highest locally installed version, or None."""

    @abstractmethod
    def query_latest(self, name: str) -> str | None:
        """Latest version published in the registry, or None."""

    @abstractmethod
    def list_installed_versions(self, name: str) -> list[str]:
        """Every locally installed version (parallel installs are possible)."""

    # ── Mutations ───────────────────────────────────────────────

    @abstractmethod
    def install(self, name: str) -> Receipt:
        """Current-user, forced, non-interactive install of the latest version."""

    @abstractmethod
    def reinstall(self, name: str) -> Receipt:
        """Plain forced install without scope or clobber switches (fallback)."""

    @abstractmethod
    def uninstall_version(self, name: str, version: str) -> Receipt:
        """Remove one exact installed version."""

    @abstractmethod
    def uninstall_all(self, name: str) -> Receipt:
        """Remove every installed version. Callers treat this as best-effort."""

    # ── Environment ─────────────────────────────────────────────

    def runtime_version(self) -> str | None:
        """Version of the underlying runtime, if it has one."""
        return None

    def profile_path(self) -> str | None:
        """Path of the current user's shell profile, if the runtime has one."""
        return None

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"

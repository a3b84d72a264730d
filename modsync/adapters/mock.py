"""
In-memory package manager — deterministic test double.

Simulates a module registry and a local module store without touching
pwsh. Installed versions and registry versions are plain dicts; any
(operation, package) pair can be configured to fail. Every call is
appended to ``call_log`` so tests can assert on ordering.
"""

from __future__ import annotations

from modsync.adapters.base import PackageManager
from modsync.core.models.receipt import Receipt
from modsync.core.services.versions import sort_versions


class InMemoryPackageManager(PackageManager):
    """Universal package-manager double for testing.

    Args:
        installed: ``{name: [versions]}`` present locally.
        registry: ``{name: latest_version}`` published remotely.
        available: What ``is_available`` reports.
    """

    def __init__(
        self,
        installed: dict[str, list[str]] | None = None,
        registry: dict[str, str] | None = None,
        available: bool = True,
        runtime: str | None = "PowerShell 7.4.6",
        profile: str | None = None,
    ):
        self._installed: dict[str, list[str]] = {
            name: list(versions) for name, versions in (installed or {}).items() if versions
        }
        self._registry: dict[str, str] = dict(registry or {})
        self._available = available
        self._runtime = runtime
        self._profile = profile
        self._failures: dict[tuple[str, str], str] = {}
        self._silent_failures: set[tuple[str, str]] = set()
        self._call_log: list[tuple[str, str]] = []

    @property
    def name(self) -> str:
        return "memory"

    @property
    def call_log(self) -> list[tuple[str, str]]:
        """Every ``(operation, package)`` this double has received, in order."""
        return self._call_log

    def calls(self, operation: str) -> list[str]:
        """Packages targeted by one kind of operation, in call order."""
        return [pkg for op, pkg in self._call_log if op == operation]

    @property
    def mutation_log(self) -> list[tuple[str, str]]:
        mutations = {"install", "reinstall", "uninstall_version", "uninstall_all"}
        return [(op, pkg) for op, pkg in self._call_log if op in mutations]

    def set_failure(self, operation: str, package: str, error: str = "Mock failure") -> None:
        """Configure an operation on a package to fail."""
        self._failures[(operation, package)] = error

    def set_silent_failure(self, operation: str, package: str) -> None:
        """Make an operation report success without changing anything."""
        self._silent_failures.add((operation, package))

    def installed_versions(self, name: str) -> list[str]:
        return list(self._installed.get(name, []))

    def is_available(self) -> bool:
        return self._available

    # ── Queries ─────────────────────────────────────────────────

    def query_installed(self, name: str) -> str | None:
        self._call_log.append(("query_installed", name))
        versions = sort_versions(self._installed.get(name, []))
        return versions[0] if versions else None

    def query_latest(self, name: str) -> str | None:
        self._call_log.append(("query_latest", name))
        return self._registry.get(name)

    def list_installed_versions(self, name: str) -> list[str]:
        self._call_log.append(("list_installed", name))
        return sort_versions(self._installed.get(name, []))

    # ── Mutations ───────────────────────────────────────────────

    def _fail_or_none(self, operation: str, name: str) -> Receipt | None:
        self._call_log.append((operation, name))
        error = self._failures.get((operation, name))
        if error is not None:
            return Receipt.failure(operation=operation, package=name, error=error)
        if (operation, name) in self._silent_failures:
            return Receipt.success(operation=operation, package=name, output="[mock] no-op")
        return None

    def _do_install(self, operation: str, name: str) -> Receipt:
        failed = self._fail_or_none(operation, name)
        if failed is not None:
            return failed
        latest = self._registry.get(name)
        if latest is None:
            return Receipt.failure(
                operation=operation,
                package=name,
                error=f"No match was found for the specified search criteria and module name '{name}'",
            )
        versions = self._installed.setdefault(name, [])
        if latest not in versions:
            versions.append(latest)
        return Receipt.success(operation=operation, package=name, output=f"[mock] {name} {latest}")

    def install(self, name: str) -> Receipt:
        return self._do_install("install", name)

    def reinstall(self, name: str) -> Receipt:
        return self._do_install("reinstall", name)

    def uninstall_version(self, name: str, version: str) -> Receipt:
        failed = self._fail_or_none("uninstall_version", name)
        if failed is not None:
            return failed
        versions = self._installed.get(name, [])
        if version not in versions:
            return Receipt.failure(
                operation="uninstall_version",
                package=name,
                error=f"No match was found for module '{name}' version {version}",
            )
        versions.remove(version)
        if not versions:
            del self._installed[name]
        return Receipt.success(operation="uninstall_version", package=name)

    def uninstall_all(self, name: str) -> Receipt:
        failed = self._fail_or_none("uninstall_all", name)
        if failed is not None:
            return failed
        self._installed.pop(name, None)
        return Receipt.success(operation="uninstall_all", package=name)

    # ── Environment ─────────────────────────────────────────────

    def runtime_version(self) -> str | None:
        return self._runtime

    def profile_path(self) -> str | None:
        return self._profile

    def reset(self) -> None:
        """Clear the call log and configured failures."""
        self._call_log.clear()
        self._failures.clear()
        self._silent_failures.clear()

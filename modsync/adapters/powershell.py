"""
PowerShellGet adapter — module queries and mutations through ``pwsh``.

Each call runs one non-interactive ``pwsh -NoProfile -Command <script>``
process. Scripts are assembled from validated, single-quote-escaped
names; nothing is ever passed through a system shell.

Cmdlet mapping:
    query_installed / list_installed_versions → Get-InstalledModule -AllVersions
    query_latest                              → Find-Module
    install                                   → Install-Module -Scope CurrentUser -Force -AllowClobber
    reinstall                                 → Install-Module -Force
    uninstall_version                         → Uninstall-Module -RequiredVersion
    uninstall_all                             → Get-InstalledModule -AllVersions | Uninstall-Module
"""

from __future__ import annotations

import logging
import re

from modsync.adapters.base import PackageManager, validate_module_name
from modsync.adapters.shell.command import command_available, run_command
from modsync.core.models.receipt import Receipt
from modsync.core.services.versions import sort_versions

logger = logging.getLogger(__name__)

_PREAMBLE = "$ProgressPreference = 'SilentlyContinue'; "

# A line of cmdlet output that is a bare module version.
_VERSION_LINE = re.compile(r"^v?\d+(\.\d+){0,3}(-[0-9A-Za-z.-]+)?$")

# Versions handed back to -RequiredVersion.
_VERSION_ARG = re.compile(r"^[0-9A-Za-z.+-]+$")


def ps_quote(value: str) -> str:
    """Quote a value as a PowerShell single-quoted string literal."""
    return "'" + value.replace("'", "''") + "'"


def _version_lines(output: str) -> list[str]:
    """Pick version strings out of cmdlet output, ignoring WARNING: noise."""
    return [
        line.strip()
        for line in output.splitlines()
        if _VERSION_LINE.match(line.strip())
    ]


class PowerShellGetAdapter(PackageManager):
    """Manage PowerShell Gallery modules with the PowerShellGet cmdlets.

    Args:
        executable: pwsh binary name or path.
        timeout: Seconds allowed for install/uninstall calls.
        query_timeout: Seconds allowed for read-only queries.
    """

    def __init__(
        self,
        executable: str = "pwsh",
        timeout: int = 600,
        query_timeout: int = 120,
    ):
        self._executable = executable
        self._timeout = timeout
        self._query_timeout = query_timeout

    @property
    def name(self) -> str:
        return "powershellget"

    @property
    def executable(self) -> str:
        return self._executable

    def is_available(self) -> bool:
        return command_available(self._executable)

    def _command(self, script: str) -> list[str]:
        return [
            self._executable,
            "-NoProfile",
            "-NonInteractive",
            "-Command",
            _PREAMBLE + script,
        ]

    def _run(self, script: str, *, operation: str, package: str, timeout: int) -> Receipt:
        receipt = run_command(
            self._command(script),
            operation=operation,
            package=package,
            timeout=timeout,
        )
        if receipt.failed:
            logger.debug("%s %s failed: %s", operation, package, receipt.error)
        return receipt

    # ── Queries ─────────────────────────────────────────────────

    def list_installed_versions(self, name: str) -> list[str]:
        validate_module_name(name)
        script = (
            f"Get-InstalledModule -Name {ps_quote(name)} -AllVersions "
            "-ErrorAction SilentlyContinue | "
            "ForEach-Object { $_.Version.ToString() }"
        )
        receipt = self._run(
            script, operation="list_installed", package=name, timeout=self._query_timeout
        )
        if receipt.failed:
            return []
        return sort_versions(_version_lines(receipt.output))

    def query_installed(self, name: str) -> str | None:
        versions = self.list_installed_versions(name)
        return versions[0] if versions else None

    def query_latest(self, name: str) -> str | None:
        validate_module_name(name)
        script = (
            f"Find-Module -Name {ps_quote(name)} -ErrorAction SilentlyContinue | "
            "Select-Object -First 1 | "
            "ForEach-Object { $_.Version.ToString() }"
        )
        receipt = self._run(
            script, operation="query_latest", package=name, timeout=self._query_timeout
        )
        if receipt.failed:
            return None
        versions = _version_lines(receipt.output)
        return versions[0] if versions else None

    # ── Mutations ───────────────────────────────────────────────

    def install(self, name: str) -> Receipt:
        validate_module_name(name)
        script = (
            f"Install-Module -Name {ps_quote(name)} -Scope CurrentUser "
            "-Force -AllowClobber -ErrorAction Stop"
        )
        return self._run(script, operation="install", package=name, timeout=self._timeout)

    def reinstall(self, name: str) -> Receipt:
        validate_module_name(name)
        script = f"Install-Module -Name {ps_quote(name)} -Force -ErrorAction Stop"
        return self._run(script, operation="reinstall", package=name, timeout=self._timeout)

    def uninstall_version(self, name: str, version: str) -> Receipt:
        validate_module_name(name)
        if not _VERSION_ARG.match(version):
            return Receipt.failure(
                operation="uninstall_version",
                package=name,
                error=f"Refusing to pass malformed version {version!r} to Uninstall-Module",
            )
        script = (
            f"Uninstall-Module -Name {ps_quote(name)} "
            f"-RequiredVersion {ps_quote(version)} -Force -ErrorAction Stop"
        )
        receipt = self._run(
            script, operation="uninstall_version", package=name, timeout=self._timeout
        )
        receipt.metadata["version"] = version
        return receipt

    def uninstall_all(self, name: str) -> Receipt:
        validate_module_name(name)
        script = (
            f"Get-InstalledModule -Name {ps_quote(name)} -AllVersions "
            "-ErrorAction SilentlyContinue | "
            "Uninstall-Module -Force -ErrorAction SilentlyContinue"
        )
        return self._run(script, operation="uninstall_all", package=name, timeout=self._timeout)

    # ── Environment ─────────────────────────────────────────────

    def runtime_version(self) -> str | None:
        receipt = run_command(
            [self._executable, "--version"],
            operation="runtime_version",
            timeout=self._query_timeout,
        )
        if receipt.failed or not receipt.output:
            return None
        return receipt.output.splitlines()[0].strip()

    def profile_path(self) -> str | None:
        receipt = self._run(
            "Write-Output $PROFILE",
            operation="profile_path",
            package="",
            timeout=self._query_timeout,
        )
        if receipt.failed or not receipt.output:
            return None
        return receipt.output.splitlines()[-1].strip()

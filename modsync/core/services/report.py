"""
System report — platform, PowerShell runtime, module versions, connection hints.

Read-only: nothing here mutates the workstation.
"""

from __future__ import annotations

import platform
import shutil

from modsync.adapters.base import PackageManager
from modsync.core.models.config import ToolConfig

TENANT_PLACEHOLDER = "TENANT"


def connection_hints(config: ToolConfig, tenant: str | None = None) -> list[str]:
    """Copy-paste connection commands, with the tenant substituted if given."""
    if not tenant:
        return list(config.connection_hints)
    return [hint.replace(TENANT_PLACEHOLDER, tenant) for hint in config.connection_hints]


def system_info() -> dict:
    system = platform.system()
    release = platform.mac_ver()[0] if system == "Darwin" else platform.release()
    return {
        "os": system,
        "release": release,
        "machine": platform.machine(),
    }


def build_report(
    config: ToolConfig,
    manager: PackageManager,
    tenant: str | None = None,
) -> dict:
    """Collect the full system report.

    Returns:
        {
            "system": {os, release, machine},
            "powershell": {available, path, version},
            "modules": [{name, description, installed_version}, ...],
            "connection_hints": [...],
        }
    """
    available = manager.is_available()
    powershell = {
        "available": available,
        "path": shutil.which(config.pwsh) if available else None,
        "version": manager.runtime_version() if available else None,
    }

    modules = []
    for target in config.targets:
        modules.append({
            "name": target.name,
            "description": target.description,
            "installed_version": manager.query_installed(target.name) if available else None,
        })

    return {
        "system": system_info(),
        "powershell": powershell,
        "modules": modules,
        "connection_hints": connection_hints(config, tenant),
    }

"""
Tool configuration model — loaded from modsync.yml or built from defaults.

The target set is an immutable value passed explicitly to the reconciler,
never process-wide state.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from modsync.core.models.package import TargetPackage

DEFAULT_TARGETS: tuple[TargetPackage, ...] = (
    TargetPackage(name="Az", description="Azure Resource Manager"),
    TargetPackage(name="Microsoft.Graph", description="Microsoft Graph (Entra ID, users, groups)"),
    TargetPackage(name="ExchangeOnlineManagement", description="Exchange Online"),
    TargetPackage(name="MicrosoftTeams", description="Microsoft Teams"),
    TargetPackage(
        name="Microsoft.Online.SharePoint.PowerShell",
        description="SharePoint Online",
    ),
)

DEFAULT_PROFILE_LINES: tuple[str, ...] = ("Import-Module MicrosoftTeams",)

DEFAULT_CONNECTION_HINTS: tuple[str, ...] = (
    'Connect-MgGraph -Scopes "User.Read.All"',
    "Connect-AzAccount",
    "Connect-ExchangeOnline",
    "Connect-MicrosoftTeams",
    "Connect-SPOService -Url https://TENANT-admin.sharepoint.com",
)


class ToolConfig(BaseModel):
    """Everything the CLI needs to know before it touches pwsh."""

    version: int = 1

    targets: tuple[TargetPackage, ...] = DEFAULT_TARGETS
    pwsh: str = "pwsh"
    timeout: int = Field(default=600, gt=0)         # install / uninstall, seconds
    query_timeout: int = Field(default=120, gt=0)   # Get-InstalledModule / Find-Module
    profile_lines: tuple[str, ...] = DEFAULT_PROFILE_LINES
    connection_hints: tuple[str, ...] = DEFAULT_CONNECTION_HINTS

    @field_validator("targets")
    @classmethod
    def _non_empty(cls, value: tuple[TargetPackage, ...]) -> tuple[TargetPackage, ...]:
        if not value:
            raise ValueError("At least one target module must be declared")
        return value

    def get_target(self, name: str) -> TargetPackage | None:
        """Look up a target by name (case-insensitive, as PowerShell is)."""
        for target in self.targets:
            if target.name.lower() == name.lower():
                return target
        return None

    def duplicate_target_names(self) -> list[str]:
        seen: set[str] = set()
        dupes: list[str] = []
        for target in self.targets:
            key = target.name.lower()
            if key in seen and target.name not in dupes:
                dupes.append(target.name)
            seen.add(key)
        return dupes

"""
Package models — the declared targets and their observed status.

A TargetPackage is declared intent ("this module must be present and
current"). A PackageStatus is what a query pass found for it. Statuses
are never persisted: they are recomputed on every pass.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from modsync.core.services.versions import is_newer

# Gallery module names: letters, digits, dots, dashes, underscores.
MODULE_NAME_PATTERN = re.compile(r"^[A-Za-z0-9._-]+$")


class PackageState(str, Enum):
    """Where a package sits in a reconciliation run."""

    ABSENT = "absent"
    CURRENT = "current"
    STALE = "stale"


class TargetPackage(BaseModel):
    """A module the tool manages. Immutable; identity is the name."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""

    @field_validator("name")
    @classmethod
    def _valid_name(cls, value: str) -> str:
        if not MODULE_NAME_PATTERN.match(value):
            raise ValueError(f"Invalid module name: {value!r}")
        return value


class PackageStatus(BaseModel):
    """Observed state of one target package.

    ``needs_update`` is derived, never supplied: it is true only when the
    package is installed, both versions are known, and the latest version
    is semantically greater than the installed one.
    """

    name: str
    description: str = ""
    installed_version: str | None = None
    latest_version: str | None = None
    is_installed: bool = False
    needs_update: bool = False

    @model_validator(mode="after")
    def _derive_flags(self) -> PackageStatus:
        self.is_installed = self.installed_version is not None
        self.needs_update = self.is_installed and is_newer(
            self.latest_version, self.installed_version
        )
        return self

    @classmethod
    def for_target(
        cls,
        target: TargetPackage,
        installed_version: str | None,
        latest_version: str | None,
    ) -> PackageStatus:
        return cls(
            name=target.name,
            description=target.description,
            installed_version=installed_version,
            latest_version=latest_version,
        )

    @property
    def state(self) -> PackageState:
        if not self.is_installed:
            return PackageState.ABSENT
        if self.needs_update:
            return PackageState.STALE
        return PackageState.CURRENT

    def to_dict(self) -> dict[str, Any]:
        data = self.model_dump(mode="json")
        data["state"] = self.state.value
        return data


class StatusSummary(BaseModel):
    """Counts over a status snapshot."""

    current: int = 0
    outdated: int = 0
    missing: int = 0
    total: int = 0
    names_outdated: list[str] = Field(default_factory=list)
    names_missing: list[str] = Field(default_factory=list)

    @property
    def has_drift(self) -> bool:
        return self.outdated > 0 or self.missing > 0

    @classmethod
    def from_statuses(cls, statuses: list[PackageStatus]) -> StatusSummary:
        summary = cls(total=len(statuses))
        for status in statuses:
            if status.state is PackageState.ABSENT:
                summary.missing += 1
                summary.names_missing.append(status.name)
            elif status.state is PackageState.STALE:
                summary.outdated += 1
                summary.names_outdated.append(status.name)
            else:
                summary.current += 1
        return summary

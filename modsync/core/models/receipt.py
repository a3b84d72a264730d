"""
Receipt model — the result contract between the reconciler and package managers.

The reconciler asks a package manager to do something (install, uninstall,
reinstall). The manager answers with a Receipt. Never exceptions.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class Receipt(BaseModel):
    """Result of a single package-manager operation.

    Receipts capture the full outcome of a mutating call. Package
    managers NEVER raise for an operation failure — it is captured here.
    """

    operation: str                  # install, reinstall, uninstall_version, uninstall_all
    package: str
    status: Literal["ok", "failed"] = "ok"

    started_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    output: str = ""
    error: str | None = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the operation succeeded."""
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        """Whether the operation failed."""
        return self.status == "failed"

    @classmethod
    def success(
        cls,
        operation: str,
        package: str,
        output: str = "",
        **kwargs: Any,
    ) -> Receipt:
        """Create a success receipt."""
        return cls(
            operation=operation,
            package=package,
            status="ok",
            output=output,
            **kwargs,
        )

    @classmethod
    def failure(
        cls,
        operation: str,
        package: str,
        error: str,
        **kwargs: Any,
    ) -> Receipt:
        """Create a failure receipt."""
        return cls(
            operation=operation,
            package=package,
            status="failed",
            error=error,
            **kwargs,
        )

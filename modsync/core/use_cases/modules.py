"""
Modules use case — check, install, update, or fix the target module set.

Runs one mode of the reconciler against a fresh status snapshot, then
re-queries so that the summary reflects ground truth rather than what
the install/uninstall calls claimed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from modsync.adapters.base import PackageManager
from modsync.adapters.powershell import PowerShellGetAdapter
from modsync.core.engine.reconciler import (
    BatchReport,
    ReconcileReport,
    compute_status,
    install_missing,
    missing,
    outdated,
    reconcile_all,
    update_outdated,
)
from modsync.core.models.config import ToolConfig
from modsync.core.models.package import PackageStatus, StatusSummary

logger = logging.getLogger(__name__)

MODES = ("check", "install", "update", "fix")


def default_manager(config: ToolConfig) -> PackageManager:
    """The real package manager for a config: PowerShellGet via pwsh."""
    return PowerShellGetAdapter(
        executable=config.pwsh,
        timeout=config.timeout,
        query_timeout=config.query_timeout,
    )


@dataclass
class ModulesResult:
    """Result of running one mode over the target set."""

    mode: str = "check"
    before: list[PackageStatus] = field(default_factory=list)
    after: list[PackageStatus] = field(default_factory=list)
    report: BatchReport | ReconcileReport | None = None
    attempted: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def statuses(self) -> list[PackageStatus]:
        """The most recent snapshot."""
        return self.after or self.before

    @property
    def summary(self) -> StatusSummary:
        return StatusSummary.from_statuses(self.statuses)

    @property
    def remaining_drift(self) -> list[str]:
        """Packages this run tried to fix that the refresh still shows as drifted."""
        drifted = {s.name for s in missing(self.after)} | {s.name for s in outdated(self.after)}
        return [name for name in self.attempted if name in drifted]

    @property
    def failed(self) -> bool:
        """Whether any per-package operation failed or left drift behind."""
        if self.error:
            return True
        if self.report is not None and self.report.failed > 0:
            return True
        return bool(self.remaining_drift)

    def to_dict(self) -> dict:
        result: dict = {"mode": self.mode}
        if self.error:
            result["error"] = self.error
            return result

        summary = self.summary
        result["modules"] = [s.to_dict() for s in self.statuses]
        result["summary"] = {
            "total": summary.total,
            "current": summary.current,
            "outdated": summary.outdated,
            "missing": summary.missing,
        }
        if self.report is not None:
            result["report"] = self.report.to_dict()
            result["remaining_drift"] = self.remaining_drift
        result["failed"] = self.failed
        return result


def check_modules(config: ToolConfig, manager: PackageManager) -> ModulesResult:
    """Compute status for every target; change nothing."""
    result = ModulesResult(mode="check")
    if not manager.is_available():
        result.error = f"PowerShell ('{config.pwsh}') not found. Install it first."
        return result

    result.before = compute_status(config.targets, manager)
    return result


def run_modules_action(
    mode: str,
    config: ToolConfig,
    manager: PackageManager,
    statuses: list[PackageStatus] | None = None,
    refresh: bool = True,
) -> ModulesResult:
    """Run install, update, or fix over the target set.

    Args:
        mode: One of ``install``, ``update``, ``fix``.
        config: Tool configuration holding the target set.
        manager: Package manager to act through.
        statuses: Optional pre-fetched snapshot. Computed if omitted.
        refresh: Re-query after acting. Callers that chain several
            actions pass False and re-query once themselves.

    Returns:
        ModulesResult with the before snapshot, the action report, and
        (when refreshing) the after snapshot.
    """
    if mode not in MODES or mode == "check":
        raise ValueError(f"Unknown action mode: {mode!r}")

    result = ModulesResult(mode=mode)
    if not manager.is_available():
        result.error = f"PowerShell ('{config.pwsh}') not found. Install it first."
        return result

    if statuses is None:
        statuses = compute_status(config.targets, manager)
    result.before = statuses

    if mode == "install":
        result.attempted = [s.name for s in missing(statuses)]
        result.report = install_missing(statuses, manager)
    elif mode == "update":
        result.attempted = [s.name for s in outdated(statuses)]
        result.report = update_outdated(statuses, manager)
    else:
        result.attempted = [s.name for s in outdated(statuses)] + [
            s.name for s in missing(statuses)
        ]
        result.report = reconcile_all(statuses, manager)

    if refresh and result.attempted:
        result.after = compute_status(config.targets, manager)
    elif refresh:
        result.after = list(statuses)

    logger.info(
        "%s finished: %d attempted, %d still drifted",
        mode, len(result.attempted), len(result.remaining_drift),
    )
    return result

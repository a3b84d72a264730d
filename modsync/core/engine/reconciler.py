"""
Module reconciler — close the gap between declared targets and installed modules.

Flow:
    targets → compute_status → (update_outdated → install_missing) → re-query

Everything is sequential and in declaration order. No failure aborts a
batch: each package's outcome is recorded and the loop moves on.
Updates are destructive replacements (remove every installed version,
then install fresh), never in-place upgrades: parallel-version conflicts
make in-place upgrade unreliable for these modules.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from modsync.adapters.base import PackageManager
from modsync.core.models.package import PackageStatus, TargetPackage

logger = logging.getLogger(__name__)


# ── Outcomes ────────────────────────────────────────────────────


@dataclass
class InstallOutcome:
    """Result of installing one missing package."""

    name: str
    success: bool
    error: str | None = None
    version: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "success": self.success,
            "error": self.error,
            "version": self.version,
        }


@dataclass
class UpdateOutcome:
    """Result of replacing one outdated package."""

    name: str
    success: bool
    from_version: str | None = None
    to_version: str | None = None
    error: str | None = None
    removal_errors: list[str] = field(default_factory=list)
    used_fallback: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "success": self.success,
            "from_version": self.from_version,
            "to_version": self.to_version,
            "error": self.error,
            "removal_errors": self.removal_errors,
            "used_fallback": self.used_fallback,
        }


@dataclass
class BatchReport:
    """Outcomes of one install or update batch."""

    action: str = ""
    outcomes: list[InstallOutcome | UpdateOutcome] = field(default_factory=list)
    nothing_to_do: bool = False

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.success)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if not o.success)

    @property
    def all_ok(self) -> bool:
        return self.failed == 0

    @property
    def status(self) -> str:
        if self.failed == 0:
            return "ok"
        if self.succeeded > 0:
            return "partial"
        return "failed"

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": self.action,
            "status": self.status,
            "nothing_to_do": self.nothing_to_do,
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "outcomes": [o.to_dict() for o in self.outcomes],
        }


@dataclass
class ReconcileReport:
    """Combined result of a fix-everything run."""

    updates: BatchReport = field(default_factory=lambda: BatchReport(action="update"))
    installs: BatchReport = field(default_factory=lambda: BatchReport(action="install"))
    nothing_to_do: bool = False

    @property
    def failed(self) -> int:
        return self.updates.failed + self.installs.failed

    @property
    def all_ok(self) -> bool:
        return self.failed == 0

    @property
    def status(self) -> str:
        if self.failed == 0:
            return "ok"
        if self.updates.succeeded + self.installs.succeeded > 0:
            return "partial"
        return "failed"

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "nothing_to_do": self.nothing_to_do,
            "updates": self.updates.to_dict(),
            "installs": self.installs.to_dict(),
        }


# ── Status ──────────────────────────────────────────────────────


def compute_status(
    targets: Iterable[TargetPackage],
    manager: PackageManager,
) -> list[PackageStatus]:
    """Query installed and latest versions for every target.

    Either version may be absent; that is reported, not raised. The
    returned list keeps the declaration order of ``targets``.
    """
    statuses: list[PackageStatus] = []
    for target in targets:
        installed = manager.query_installed(target.name)
        latest = manager.query_latest(target.name)
        status = PackageStatus.for_target(target, installed, latest)
        logger.debug(
            "%s: installed=%s latest=%s state=%s",
            target.name, installed, latest, status.state.value,
        )
        statuses.append(status)
    return statuses


def missing(statuses: Iterable[PackageStatus]) -> list[PackageStatus]:
    return [s for s in statuses if not s.is_installed]


def outdated(statuses: Iterable[PackageStatus]) -> list[PackageStatus]:
    return [s for s in statuses if s.is_installed and s.needs_update]


# ── Install ─────────────────────────────────────────────────────


def install_missing(
    statuses: list[PackageStatus],
    manager: PackageManager,
) -> BatchReport:
    """Install every package the snapshot reports as not installed."""
    report = BatchReport(action="install")
    todo = missing(statuses)

    if not todo:
        report.nothing_to_do = True
        logger.info("install: nothing to do")
        return report

    for status in todo:
        logger.info("Installing %s", status.name)
        receipt = manager.install(status.name)
        if receipt.ok:
            version = manager.query_installed(status.name)
            report.outcomes.append(InstallOutcome(name=status.name, success=True, version=version))
            logger.info("Installed %s %s", status.name, version or "(version unknown)")
        else:
            report.outcomes.append(
                InstallOutcome(name=status.name, success=False, error=receipt.error)
            )
            logger.warning("Failed to install %s: %s", status.name, receipt.error)

    return report


# ── Update ──────────────────────────────────────────────────────


def _remove_all_versions(name: str, manager: PackageManager) -> list[str]:
    """Remove every installed version of a package; return exact-removal errors.

    A failed exact-version removal (or an empty enumeration) triggers a
    best-effort uninstall-all sweep whose failure is only logged.
    """
    errors: list[str] = []
    versions = manager.list_installed_versions(name)

    for version in versions:
        receipt = manager.uninstall_version(name, version)
        if receipt.failed:
            errors.append(f"{version}: {receipt.error}")
            logger.warning("Could not remove %s %s: %s", name, version, receipt.error)

    if errors or not versions:
        sweep = manager.uninstall_all(name)
        if sweep.failed:
            logger.debug("Best-effort sweep of %s failed: %s", name, sweep.error)

    return errors


def _replace_package(status: PackageStatus, manager: PackageManager) -> UpdateOutcome:
    outcome = UpdateOutcome(name=status.name, success=False, from_version=status.installed_version)

    logger.info("Removing installed versions of %s", status.name)
    outcome.removal_errors = _remove_all_versions(status.name, manager)

    logger.info("Installing latest %s", status.name)
    receipt = manager.install(status.name)
    if receipt.failed:
        logger.warning(
            "Install of %s failed (%s); retrying with plain reinstall",
            status.name, receipt.error,
        )
        outcome.used_fallback = True
        fallback = manager.reinstall(status.name)
        if fallback.failed:
            outcome.error = f"install: {receipt.error}; reinstall: {fallback.error}"
            outcome.to_version = manager.query_installed(status.name)
            logger.warning("Failed to update %s: %s", status.name, outcome.error)
            return outcome

    outcome.success = True
    outcome.to_version = manager.query_installed(status.name)
    logger.info(
        "Updated %s %s -> %s",
        status.name, outcome.from_version, outcome.to_version or "(version unknown)",
    )
    return outcome


def update_outdated(
    statuses: list[PackageStatus],
    manager: PackageManager,
) -> BatchReport:
    """Replace every installed package the snapshot reports as stale."""
    report = BatchReport(action="update")
    todo = outdated(statuses)

    if not todo:
        report.nothing_to_do = True
        logger.info("update: nothing to do")
        return report

    for status in todo:
        report.outcomes.append(_replace_package(status, manager))

    return report


# ── Reconcile ───────────────────────────────────────────────────


def reconcile_all(
    statuses: list[PackageStatus],
    manager: PackageManager,
) -> ReconcileReport:
    """Fix everything: updates first, then installs, on one snapshot.

    Both phases read the snapshot taken before either ran; neither
    re-queries what the other changed.
    """
    if not missing(statuses) and not outdated(statuses):
        logger.info("reconcile: nothing to do")
        return ReconcileReport(
            updates=BatchReport(action="update", nothing_to_do=True),
            installs=BatchReport(action="install", nothing_to_do=True),
            nothing_to_do=True,
        )

    updates = update_outdated(statuses, manager)
    installs = install_missing(statuses, manager)
    return ReconcileReport(updates=updates, installs=installs)

"""
Tests for the module reconciler — status, install, update, reconcile.
"""

from modsync.adapters.mock import InMemoryPackageManager
from modsync.core.engine.reconciler import (
    BatchReport,
    ReconcileReport,
    compute_status,
    install_missing,
    reconcile_all,
    update_outdated,
)
from modsync.core.models.package import PackageState, PackageStatus, TargetPackage

# ── compute_status ───────────────────────────────────────────────────


class TestComputeStatus:
    def test_states(self, targets, manager):
        statuses = compute_status(targets, manager)
        assert [s.state for s in statuses] == [
            PackageState.STALE,
            PackageState.ABSENT,
            PackageState.CURRENT,
        ]

    def test_declaration_order_kept(self, manager):
        order = [TargetPackage(name=n) for n in ("C", "A", "B")]
        assert [s.name for s in compute_status(order, manager)] == ["C", "A", "B"]

    def test_unpublished_and_absent_is_not_an_error(self):
        mgr = InMemoryPackageManager()
        [status] = compute_status([TargetPackage(name="Ghost")], mgr)
        assert not status.is_installed
        assert status.latest_version is None
        assert not status.needs_update

    def test_installed_but_unpublished(self):
        mgr = InMemoryPackageManager(installed={"Local": ["1.0"]})
        [status] = compute_status([TargetPackage(name="Local")], mgr)
        assert status.is_installed
        assert not status.needs_update

    def test_reports_highest_parallel_version(self):
        mgr = InMemoryPackageManager(installed={"A": ["1.0", "1.5"]}, registry={"A": "1.5"})
        [status] = compute_status([TargetPackage(name="A")], mgr)
        assert status.installed_version == "1.5"
        assert not status.needs_update

    def test_queries_both_versions_per_target(self, targets, manager):
        compute_status(targets, manager)
        assert manager.calls("query_installed") == ["A", "B", "C"]
        assert manager.calls("query_latest") == ["A", "B", "C"]


# ── install_missing ──────────────────────────────────────────────────


class TestInstallMissing:
    def test_nothing_to_do(self):
        mgr = InMemoryPackageManager(installed={"A": ["1.0"]}, registry={"A": "1.0"})
        statuses = compute_status([TargetPackage(name="A")], mgr)
        report = install_missing(statuses, mgr)
        assert report.nothing_to_do
        assert report.all_ok
        assert report.status == "ok"
        assert mgr.mutation_log == []

    def test_installs_only_missing(self, targets, manager):
        statuses = compute_status(targets, manager)
        report = install_missing(statuses, manager)
        assert manager.calls("install") == ["B"]
        [outcome] = report.outcomes
        assert outcome.name == "B"
        assert outcome.success
        assert outcome.version == "3.0"

    def test_failure_does_not_abort_batch(self):
        mgr = InMemoryPackageManager(registry={"X": "1.0", "Y": "2.0", "Z": "3.0"})
        mgr.set_failure("install", "Y", error="network unreachable")
        statuses = compute_status([TargetPackage(name=n) for n in "XYZ"], mgr)
        report = install_missing(statuses, mgr)
        assert mgr.calls("install") == ["X", "Y", "Z"]
        assert [o.success for o in report.outcomes] == [True, False, True]
        assert report.outcomes[1].error == "network unreachable"
        assert report.status == "partial"

    def test_install_does_not_use_fallback(self):
        mgr = InMemoryPackageManager(registry={"X": "1.0"})
        mgr.set_failure("install", "X")
        statuses = compute_status([TargetPackage(name="X")], mgr)
        report = install_missing(statuses, mgr)
        assert report.status == "failed"
        assert mgr.calls("reinstall") == []


# ── update_outdated ──────────────────────────────────────────────────


class TestUpdateOutdated:
    def test_nothing_to_do(self):
        mgr = InMemoryPackageManager(installed={"A": ["2.0"]}, registry={"A": "2.0", "B": "1.0"})
        statuses = compute_status([TargetPackage(name="A"), TargetPackage(name="B")], mgr)
        report = update_outdated(statuses, mgr)
        assert report.nothing_to_do
        assert report.all_ok
        assert mgr.mutation_log == []

    def test_remove_then_install(self, targets, manager):
        statuses = compute_status(targets, manager)
        report = update_outdated(statuses, manager)
        assert manager.mutation_log == [("uninstall_version", "A"), ("install", "A")]
        [outcome] = report.outcomes
        assert outcome.success
        assert (outcome.from_version, outcome.to_version) == ("1.0", "2.0")
        assert manager.installed_versions("A") == ["2.0"]

    def test_every_parallel_version_removed(self):
        mgr = InMemoryPackageManager(installed={"A": ["1.0", "1.5"]}, registry={"A": "2.0"})
        statuses = compute_status([TargetPackage(name="A")], mgr)
        update_outdated(statuses, mgr)
        assert mgr.calls("uninstall_version") == ["A", "A"]
        assert mgr.installed_versions("A") == ["2.0"]

    def test_removal_failure_falls_back_to_sweep_and_still_installs(self):
        mgr = InMemoryPackageManager(installed={"A": ["1.0"]}, registry={"A": "2.0"})
        mgr.set_failure("uninstall_version", "A", error="module in use")
        statuses = compute_status([TargetPackage(name="A")], mgr)
        report = update_outdated(statuses, mgr)
        assert mgr.mutation_log == [
            ("uninstall_version", "A"),
            ("uninstall_all", "A"),
            ("install", "A"),
        ]
        [outcome] = report.outcomes
        assert outcome.success
        assert outcome.removal_errors == ["1.0: module in use"]

    def test_sweep_failure_is_suppressed(self):
        mgr = InMemoryPackageManager(installed={"A": ["1.0"]}, registry={"A": "2.0"})
        mgr.set_failure("uninstall_version", "A")
        mgr.set_failure("uninstall_all", "A", error="access denied")
        statuses = compute_status([TargetPackage(name="A")], mgr)
        report = update_outdated(statuses, mgr)
        assert ("install", "A") in mgr.mutation_log
        [outcome] = report.outcomes
        assert outcome.success
        assert outcome.error is None
        assert "access denied" not in " ".join(outcome.removal_errors)

    def test_empty_enumeration_sweeps_before_install(self):
        # Snapshot says 1.0 is installed, but enumeration finds nothing.
        mgr = InMemoryPackageManager(registry={"A": "2.0"})
        status = PackageStatus(name="A", installed_version="1.0", latest_version="2.0")
        report = update_outdated([status], mgr)
        assert mgr.mutation_log == [("uninstall_all", "A"), ("install", "A")]
        [outcome] = report.outcomes
        assert outcome.success
        assert outcome.removal_errors == []

    def test_no_sweep_when_exact_removal_succeeds(self, targets, manager):
        statuses = compute_status(targets, manager)
        update_outdated(statuses, manager)
        assert manager.calls("uninstall_all") == []

    def test_fallback_reinstall(self):
        mgr = InMemoryPackageManager(installed={"A": ["1.0"]}, registry={"A": "2.0"})
        mgr.set_failure("install", "A", error="clobber conflict")
        statuses = compute_status([TargetPackage(name="A")], mgr)
        report = update_outdated(statuses, mgr)
        assert mgr.mutation_log[-2:] == [("install", "A"), ("reinstall", "A")]
        [outcome] = report.outcomes
        assert outcome.success
        assert outcome.used_fallback
        assert outcome.to_version == "2.0"

    def test_install_and_fallback_both_fail(self):
        mgr = InMemoryPackageManager(
            installed={"A": ["1.0"], "B": ["1.0"]},
            registry={"A": "2.0", "B": "2.0"},
        )
        mgr.set_failure("install", "A", error="first")
        mgr.set_failure("reinstall", "A", error="second")
        statuses = compute_status([TargetPackage(name="A"), TargetPackage(name="B")], mgr)
        report = update_outdated(statuses, mgr)
        a, b = report.outcomes
        assert not a.success
        assert "first" in a.error and "second" in a.error
        assert b.success
        assert b.to_version == "2.0"
        assert report.status == "partial"

    def test_status_after_update_is_current(self, targets, manager):
        update_outdated(compute_status(targets, manager), manager)
        [a] = compute_status([targets[0]], manager)
        assert a.is_installed
        assert not a.needs_update

    def test_missing_packages_untouched(self, targets, manager):
        update_outdated(compute_status(targets, manager), manager)
        assert "B" not in [pkg for _, pkg in manager.mutation_log]


# ── reconcile_all ────────────────────────────────────────────────────


class TestReconcileAll:
    def test_nothing_to_do(self):
        mgr = InMemoryPackageManager(installed={"A": ["1.0"]}, registry={"A": "1.0"})
        report = reconcile_all(compute_status([TargetPackage(name="A")], mgr), mgr)
        assert isinstance(report, ReconcileReport)
        assert report.nothing_to_do
        assert report.all_ok
        assert mgr.mutation_log == []

    def test_updates_before_installs(self):
        # Missing package declared first; the update must still run first.
        mgr = InMemoryPackageManager(installed={"A": ["1.0"]}, registry={"A": "2.0", "B": "3.0"})
        targets = [TargetPackage(name="B"), TargetPackage(name="A")]
        reconcile_all(compute_status(targets, mgr), mgr)
        assert mgr.mutation_log == [
            ("uninstall_version", "A"),
            ("install", "A"),
            ("install", "B"),
        ]

    def test_worked_example(self):
        mgr = InMemoryPackageManager(installed={"A": ["1.0"]}, registry={"A": "2.0", "B": "3.0"})
        targets = [TargetPackage(name="A"), TargetPackage(name="B")]

        report = reconcile_all(compute_status(targets, mgr), mgr)

        [updated] = report.updates.outcomes
        assert (updated.name, updated.from_version, updated.to_version) == ("A", "1.0", "2.0")
        [installed] = report.installs.outcomes
        assert (installed.name, installed.version) == ("B", "3.0")

        final = compute_status(targets, mgr)
        assert [(s.installed_version, s.needs_update) for s in final] == [
            ("2.0", False),
            ("3.0", False),
        ]

    def test_only_missing(self):
        mgr = InMemoryPackageManager(registry={"B": "3.0"})
        report = reconcile_all(compute_status([TargetPackage(name="B")], mgr), mgr)
        assert report.updates.nothing_to_do
        assert report.installs.succeeded == 1
        assert not report.nothing_to_do

    def test_uses_single_snapshot(self):
        # A stale package whose update fails entirely is not re-offered to
        # the install phase, even though it may now be absent.
        mgr = InMemoryPackageManager(installed={"A": ["1.0"]}, registry={"A": "2.0"})
        mgr.set_failure("install", "A")
        mgr.set_failure("reinstall", "A")
        report = reconcile_all(compute_status([TargetPackage(name="A")], mgr), mgr)
        assert report.installs.nothing_to_do
        assert mgr.calls("install") == ["A"]
        assert report.status == "failed"

    def test_failure_isolated_to_one_package(self):
        mgr = InMemoryPackageManager(
            installed={"C": ["1.0"]},
            registry={"A": "1.0", "C": "2.0", "D": "1.0"},
        )
        mgr.set_failure("install", "C")
        mgr.set_failure("reinstall", "C")
        targets = [TargetPackage(name=n) for n in ("A", "C", "D")]
        report = reconcile_all(compute_status(targets, mgr), mgr)
        [c] = report.updates.outcomes
        assert c.name == "C"
        assert not c.success
        results = {o.name: o.success for o in report.installs.outcomes}
        assert results == {"A": True, "D": True}
        assert report.status == "partial"


# ── Reports ──────────────────────────────────────────────────────────


class TestReports:
    def test_batch_to_dict(self, targets, manager):
        report = install_missing(compute_status(targets, manager), manager)
        d = report.to_dict()
        assert d["action"] == "install"
        assert d["succeeded"] == 1
        assert d["outcomes"][0]["name"] == "B"

    def test_empty_batch_status(self):
        assert BatchReport().status == "ok"

    def test_reconcile_to_dict(self, targets, manager):
        d = reconcile_all(compute_status(targets, manager), manager).to_dict()
        assert d["status"] == "ok"
        assert d["updates"]["outcomes"][0]["to_version"] == "2.0"
        assert d["installs"]["outcomes"][0]["version"] == "3.0"

"""
CLI commands for module reconciliation — check, install, update, fix.

Thin wrappers over ``modsync.core.use_cases.modules``.
"""

from __future__ import annotations

import json
import sys

import click

from modsync.core.engine.reconciler import (
    BatchReport,
    InstallOutcome,
    ReconcileReport,
    UpdateOutcome,
    missing,
    outdated,
)
from modsync.core.use_cases.modules import (
    ModulesResult,
    check_modules,
    run_modules_action,
)
from modsync.ui.cli.helpers import (
    echo_statuses,
    echo_summary,
    get_config,
    get_confirm,
    get_manager,
)


def _echo_outcome(outcome: InstallOutcome | UpdateOutcome) -> None:
    if isinstance(outcome, UpdateOutcome):
        if outcome.success:
            fallback = " (via fallback reinstall)" if outcome.used_fallback else ""
            click.secho(
                f"   ✓ {outcome.name} v{outcome.from_version} → "
                f"v{outcome.to_version or '?'}{fallback}",
                fg="green",
            )
        else:
            click.secho(f"   ✗ {outcome.name}: {outcome.error}", fg="red")
        for err in outcome.removal_errors:
            click.secho(f"     │ removal: {err}", fg="yellow")
        return

    if outcome.success:
        click.secho(f"   ✓ {outcome.name} v{outcome.version or '?'}", fg="green")
    else:
        click.secho(f"   ✗ {outcome.name}: {outcome.error}", fg="red")


def _echo_batch(batch: BatchReport) -> None:
    title = {"install": "Installing missing modules", "update": "Updating modules (remove + reinstall)"}
    click.secho(f"\n⚡ {title.get(batch.action, batch.action)}", fg="cyan", bold=True)
    if batch.nothing_to_do:
        click.secho("   ✅ Nothing to do", fg="green")
        return
    for outcome in batch.outcomes:
        _echo_outcome(outcome)


def _echo_report(report: BatchReport | ReconcileReport) -> None:
    if isinstance(report, ReconcileReport):
        if report.nothing_to_do:
            click.secho("\n✅ Everything is installed and current. Nothing to do.", fg="green")
            return
        _echo_batch(report.updates)
        _echo_batch(report.installs)
        return
    _echo_batch(report)


def _finish(result: ModulesResult, as_json: bool) -> None:
    """Print the action result and exit 1 if anything failed."""
    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.failed:
            sys.exit(1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    if result.report is not None:
        _echo_report(result.report)

    if result.after and result.attempted:
        echo_statuses(result.after, title="Modules (after)")
    else:
        echo_summary(result.summary)

    if result.remaining_drift:
        click.echo()
        click.secho(
            f"   ⚠️  Still not current: {', '.join(result.remaining_drift)}",
            fg="yellow",
        )

    click.echo()
    if result.failed:
        sys.exit(1)


@click.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option(
    "--interactive", "-i", is_flag=True,
    help="Offer to update outdated and install missing modules.",
)
@click.option("--strict", is_flag=True, help="Exit 1 if any module is missing or outdated.")
@click.pass_context
def check(ctx: click.Context, as_json: bool, interactive: bool, strict: bool) -> None:
    """Show installed vs. latest version for every target module."""
    config = get_config(ctx)
    manager = get_manager(ctx)

    result = check_modules(config, manager)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.error or (strict and result.summary.has_drift):
            sys.exit(1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    echo_statuses(result.before)
    click.echo()

    if not interactive:
        if strict and result.summary.has_drift:
            sys.exit(1)
        return

    confirm = get_confirm(ctx)
    statuses = result.before
    any_failed = False
    attempted: list[str] = []

    # Same snapshot for both prompts: updates first, then installs.
    if outdated(statuses) and confirm("Update the outdated modules?"):
        updated = run_modules_action(
            "update", config, manager, statuses=statuses, refresh=False,
        )
        _echo_report(updated.report)
        any_failed = any_failed or updated.failed
        attempted += updated.attempted

    if missing(statuses) and confirm("Install the missing modules?"):
        installed = run_modules_action(
            "install", config, manager, statuses=statuses, refresh=False,
        )
        _echo_report(installed.report)
        any_failed = any_failed or installed.failed
        attempted += installed.attempted

    summary = result.summary
    if attempted:
        # One re-query covers both phases.
        final = check_modules(config, manager)
        echo_statuses(final.before, title="Modules (after)")
        summary = final.summary
        drifted = {s.name for s in missing(final.before) + outdated(final.before)}
        still = [name for name in attempted if name in drifted]
        if still:
            click.echo()
            click.secho(f"   ⚠️  Still not current: {', '.join(still)}", fg="yellow")
            any_failed = True
    click.echo()

    if any_failed or (strict and summary.has_drift):
        sys.exit(1)


@click.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def install(ctx: click.Context, as_json: bool) -> None:
    """Install every target module that is missing."""
    if not as_json:
        click.secho("📦 Checking for missing modules...", fg="cyan")
    result = run_modules_action("install", get_config(ctx), get_manager(ctx))
    _finish(result, as_json)


@click.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def update(ctx: click.Context, as_json: bool) -> None:
    """Replace every outdated module with its latest version."""
    if not as_json:
        click.secho("📦 Checking for outdated modules...", fg="cyan")
    result = run_modules_action("update", get_config(ctx), get_manager(ctx))
    _finish(result, as_json)


@click.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def fix(ctx: click.Context, as_json: bool) -> None:
    """Update outdated modules, then install missing ones."""
    if not as_json:
        click.secho("📦 Reconciling modules...", fg="cyan")
    result = run_modules_action("fix", get_config(ctx), get_manager(ctx))
    _finish(result, as_json)

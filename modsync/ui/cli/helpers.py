"""
Shared CLI plumbing — config, package manager, and confirm capability.

Tests (and other front ends) inject their own objects through
``ctx.obj``; commands never construct them directly.
"""

from __future__ import annotations

import sys
from typing import Callable

import click

from modsync.adapters.base import PackageManager
from modsync.core.config.loader import ConfigError, load_config
from modsync.core.models.config import ToolConfig
from modsync.core.models.package import PackageState, PackageStatus, StatusSummary

Confirm = Callable[[str], bool]


def get_config(ctx: click.Context) -> ToolConfig:
    """Load the tool config once per invocation; exit 1 if it is invalid."""
    config = ctx.obj.get("config")
    if config is not None:
        return config
    try:
        config = load_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)
    ctx.obj["config"] = config
    return config


def get_manager(ctx: click.Context) -> PackageManager:
    manager = ctx.obj.get("manager")
    if manager is None:
        from modsync.core.use_cases.modules import default_manager

        manager = default_manager(get_config(ctx))
        ctx.obj["manager"] = manager
    return manager


def get_confirm(ctx: click.Context, assume_yes: bool = False) -> Confirm:
    """The yes/no capability. Only the front end ever blocks on it."""
    if assume_yes:
        return lambda question: True
    confirm = ctx.obj.get("confirm")
    if confirm is not None:
        return confirm
    return lambda question: click.confirm(question, default=False)


# ── Rendering ───────────────────────────────────────────────────


def _v(version: str | None) -> str:
    return f"v{version}" if version else "?"


def echo_status(status: PackageStatus) -> None:
    if status.state is PackageState.ABSENT:
        available = f" ({_v(status.latest_version)} available)" if status.latest_version else ""
        click.secho(f"   ⚠️  {status.name}: not installed{available}", fg="yellow")
    elif status.state is PackageState.STALE:
        click.secho(
            f"   ⚠️  {status.name}: {_v(status.installed_version)} → "
            f"{_v(status.latest_version)} available",
            fg="yellow",
        )
    else:
        note = "up to date" if status.latest_version else "latest version unknown"
        click.secho(f"   ✅ {status.name}: {_v(status.installed_version)} ({note})", fg="green")


def echo_summary(summary: StatusSummary) -> None:
    click.echo()
    click.secho("   Summary:", fg="blue", bold=True)
    click.echo("     Installed and current: ", nl=False)
    click.secho(str(summary.current), fg="green")
    click.echo("     Outdated:              ", nl=False)
    click.secho(str(summary.outdated), fg="yellow" if summary.outdated else "green")
    click.echo("     Missing:               ", nl=False)
    click.secho(str(summary.missing), fg="yellow" if summary.missing else "green")


def echo_statuses(statuses: list[PackageStatus], title: str = "Modules") -> None:
    click.secho(f"\n📦 {title}", fg="cyan", bold=True)
    for status in statuses:
        echo_status(status)
    echo_summary(StatusSummary.from_statuses(statuses))

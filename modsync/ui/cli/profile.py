"""
CLI commands for the PowerShell profile — check, ensure.

Thin wrappers over ``modsync.core.services.profile``.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from modsync.core.services.profile import ProfileStatus, ensure_profile, profile_status
from modsync.ui.cli.helpers import get_config, get_confirm, get_manager


def _resolve_profile_path(ctx: click.Context, override: str | None) -> Path:
    """Explicit --path wins; otherwise ask pwsh for $PROFILE."""
    if override:
        return Path(override).expanduser()
    resolved = get_manager(ctx).profile_path()
    if not resolved:
        click.secho("❌ Could not resolve $PROFILE from PowerShell. Use --path.", fg="red")
        sys.exit(1)
    return Path(resolved)


def _status_or_exit(path: Path, required: list[str]) -> ProfileStatus:
    try:
        return profile_status(path, required)
    except UnicodeDecodeError:
        click.secho(f"❌ Cannot read {path}: not UTF-8 text. Re-save it as UTF-8.", fg="red")
        sys.exit(1)
    except OSError as e:
        click.secho(f"❌ Cannot read {path}: {e}", fg="red")
        sys.exit(1)


@click.group()
def profile() -> None:
    """PowerShell profile — check, ensure."""


@profile.command("check")
@click.option("--path", "path_override", default=None, help="Profile file (default: $PROFILE).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def profile_check(ctx: click.Context, path_override: str | None, as_json: bool) -> None:
    """Report whether the profile contains the required lines."""
    path = _resolve_profile_path(ctx, path_override)
    status = _status_or_exit(path, get_config(ctx).profile_lines)

    if as_json:
        click.echo(json.dumps(status.to_dict(), indent=2))
        return

    if not status.exists:
        click.secho(f"⚠️  Profile does not exist: {path}", fg="yellow")
        return

    click.secho(f"✅ Profile exists: {path}", fg="green")
    for line in status.present:
        click.secho(f"   ✓ {line}", fg="green")
    for line in status.missing:
        click.secho(f"   ✗ {line}", fg="yellow")


@profile.command("ensure")
@click.option("--path", "path_override", default=None, help="Profile file (default: $PROFILE).")
@click.option("--yes", "-y", "assume_yes", is_flag=True, help="Don't ask for confirmation.")
@click.pass_context
def profile_ensure(ctx: click.Context, path_override: str | None, assume_yes: bool) -> None:
    """Create the profile and append any missing required lines."""
    path = _resolve_profile_path(ctx, path_override)
    required = get_config(ctx).profile_lines
    status = _status_or_exit(path, required)

    if status.complete:
        click.secho(f"✅ Profile already complete: {path}", fg="green")
        return

    verb = "Add" if status.exists else "Create the profile with"
    question = f"{verb} {', '.join(repr(line) for line in status.missing)}?"
    if not get_confirm(ctx, assume_yes)(question):
        click.secho("   Skipped.", fg="yellow")
        return

    try:
        status = ensure_profile(path, required)
    except OSError as e:
        click.secho(f"❌ Cannot write {path}: {e}", fg="red")
        sys.exit(1)

    if status.created:
        click.secho(f"✅ Profile created: {path}", fg="green")
    for line in status.added:
        click.secho(f"   + {line}", fg="green")

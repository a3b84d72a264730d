"""
modsync — CLI entrypoint.

Usage:
    modsync                  # same as 'modsync check'
    modsync check --interactive
    modsync fix
    python -m modsync.main --help
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from modsync import __version__
from modsync.core.observability.logging_config import setup_logging


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="modsync")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to modsync.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """modsync — keep PowerShell cloud-admin modules installed and current."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("MODSYNC_LOG_LEVEL", "WARNING")

    setup_logging(
        level=level,
        log_file=os.environ.get("MODSYNC_LOG_FILE"),
        log_file_level=os.environ.get("MODSYNC_LOG_FILE_LEVEL"),
    )

    if ctx.invoked_subcommand is None:
        ctx.invoke(check)


@cli.group()
def config() -> None:
    """Configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate modsync.yml."""
    from modsync.core.use_cases.config_check import check_config

    result = check_config(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.valid:
        assert result.config is not None  # guaranteed when valid
        click.secho("✅ Configuration is valid", fg="green", bold=True)
        if result.config_path:
            click.echo(f"   File: {result.config_path}")
        click.echo(f"   Targets: {len(result.config.targets)}")
        for target in result.config.targets:
            click.echo(f"     • {target.name}")
        click.echo(f"   pwsh: {result.config.pwsh}")
    else:
        click.secho("❌ Configuration errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    if not result.valid:
        click.echo()
        sys.exit(1)

    click.echo()


# ── Register commands from modsync/ui/cli/ ──────────────────────

from modsync.ui.cli.modules import check, fix, install, update  # noqa: E402
from modsync.ui.cli.profile import profile  # noqa: E402
from modsync.ui.cli.report import hints, report  # noqa: E402

cli.add_command(check)
cli.add_command(install)
cli.add_command(update)
cli.add_command(fix)
cli.add_command(hints)
cli.add_command(report)
cli.add_command(profile)


if __name__ == "__main__":
    cli()

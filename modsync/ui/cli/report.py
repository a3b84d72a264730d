"""
CLI commands for reporting — connection hints and the system report.

Thin wrappers over ``modsync.core.services.report``.
"""

from __future__ import annotations

import json

import click

from modsync.core.services.report import build_report, connection_hints
from modsync.ui.cli.helpers import get_config, get_manager


def _echo_hints(hints: list[str]) -> None:
    click.secho("\n🔌 Connection commands:", fg="blue", bold=True)
    for hint in hints:
        click.echo(f"   {hint}")


@click.command()
@click.option("--tenant", default=None, help="Tenant name to substitute into the SharePoint URL.")
@click.pass_context
def hints(ctx: click.Context, tenant: str | None) -> None:
    """Print copy-paste connection commands for each service."""
    _echo_hints(connection_hints(get_config(ctx), tenant))
    click.echo()


@click.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--tenant", default=None, help="Tenant name to substitute into the SharePoint URL.")
@click.pass_context
def report(ctx: click.Context, as_json: bool, tenant: str | None) -> None:
    """Show system, PowerShell, and module versions, plus connection commands."""
    data = build_report(get_config(ctx), get_manager(ctx), tenant=tenant)

    if as_json:
        click.echo(json.dumps(data, indent=2))
        return

    system = data["system"]
    click.secho("\n🖥️  System:", fg="blue", bold=True)
    click.echo(f"   OS:      {system['os']} {system['release']}")
    click.echo(f"   Arch:    {system['machine']}")

    pwsh = data["powershell"]
    click.secho("\n⚡ PowerShell:", fg="blue", bold=True)
    if pwsh["available"]:
        click.echo(f"   Version: {pwsh['version'] or '?'}")
        click.echo(f"   Path:    {pwsh['path'] or '?'}")
    else:
        click.secho("   Status:  not installed", fg="yellow")

    click.secho("\n📦 Modules:", fg="blue", bold=True)
    for mod in data["modules"]:
        if mod["installed_version"]:
            click.secho(f"   {mod['name']:<42} v{mod['installed_version']}", fg="green")
        else:
            click.secho(f"   {mod['name']:<42} not installed", fg="yellow")

    _echo_hints(data["connection_hints"])
    click.echo()

"""
CLI commands for the package inventory.

Thin wrappers over ``devjanitor.core.use_cases.inventory``.

Usage::

    devjanitor packages list
    devjanitor packages list --manager conda --json
    devjanitor packages uninstall wget --manager brew
    devjanitor packages uninstall firefox --manager brew --cask --yes
"""

from __future__ import annotations

import json
import sys

import click

from devjanitor.core.models.config import UninstallOptions


@click.group()
def packages() -> None:
    """Packages — list and remove installed packages."""


# ── List ────────────────────────────────────────────────────────


@packages.command("list")
@click.option("--manager", "-m", default=None, help="Only this manager (brew, conda, pipx, ...).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_cmd(ctx: click.Context, manager: str | None, as_json: bool) -> None:
    """List installed packages across package managers."""
    from devjanitor.core.use_cases.inventory import run_inventory

    show_progress = not as_json and not ctx.obj.get("quiet", False)

    def progress(manager_id: str, text: str) -> None:
        if show_progress:
            click.secho(f"   [{manager_id}] {text}", fg="bright_black", err=True)

    result = run_inventory(
        config_path=ctx.obj.get("config_path"),
        manager=manager,
        on_progress=progress,
        discovery=ctx.obj.get("discovery"),
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.error:
            sys.exit(1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    if not result.packages:
        click.secho("No packages found.", fg="yellow")
        return

    current = None
    for pkg in result.packages:
        if pkg.manager != current:
            current = pkg.manager
            click.echo()
            click.secho(f"📦 {current} ({result.counts()[current]})", fg="cyan", bold=True)
        extra = pkg.environment or pkg.channel
        suffix = f"  [{extra}]" if extra else ""
        click.echo(f"   {pkg.name:<32} {pkg.version}{suffix}")

    click.echo()
    click.echo(f"   {len(result.packages)} package(s)")


# ── Uninstall ───────────────────────────────────────────────────


@packages.command()
@click.argument("name")
@click.option("--manager", "-m", required=True, help="Manager that owns the package.")
@click.option("--cask", is_flag=True, help="Homebrew: remove a cask instead of a formula.")
@click.option("--force", is_flag=True, help="Pass the manager's force switch.")
@click.option("--yes", "-y", is_flag=True, help="Don't ask for confirmation.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def uninstall(
    ctx: click.Context,
    name: str,
    manager: str,
    cask: bool,
    force: bool,
    yes: bool,
    as_json: bool,
) -> None:
    """Uninstall NAME through the given package manager."""
    from devjanitor.core.use_cases.inventory import run_uninstall

    if not yes:
        click.confirm(f"Uninstall {name} using {manager}?", abort=True)

    result = run_uninstall(
        name,
        manager,
        options=UninstallOptions(cask=cask, force=force),
        config_path=ctx.obj.get("config_path"),
        discovery=ctx.obj.get("discovery"),
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.removed else 1)

    if result.removed:
        click.secho(f"✅ Removed {name} ({result.manager})", fg="green")
        return

    click.secho(f"❌ {result.error}", fg="red")
    sys.exit(1)

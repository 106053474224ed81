"""
Dev Janitor — CLI entrypoint.

Usage:
    python -m devjanitor.main --help
    devjanitor discover
    devjanitor packages list --manager brew
    devjanitor config check
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from devjanitor import __version__
from devjanitor.core.observability.logging_config import setup_from_flags
from devjanitor.ui.cli.packages import packages

_STATUS_STYLE = {
    "available": ("✓", "green"),
    "path_missing": ("!", "yellow"),
    "not_installed": ("✗", "bright_black"),
}


@click.group()
@click.version_option(version=__version__, prog_name="devjanitor")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to package-managers.json (default: per-user config dir).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """Dev Janitor — find package managers and what they installed."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_from_flags(verbose=verbose, quiet=quiet, debug=debug)


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def discover(ctx: click.Context, as_json: bool) -> None:
    """Show which package managers are installed and how they were found."""
    from devjanitor.core.use_cases.inventory import run_discover

    result = run_discover(
        config_path=ctx.obj.get("config_path"),
        discovery=ctx.obj.get("discovery"),
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    quiet = ctx.obj.get("quiet", False)
    if not quiet:
        click.secho("\n🔎 Package managers", fg="cyan", bold=True)

    for status in result.statuses:
        mark, color = _STATUS_STYLE[status.status]
        click.secho(f"   {mark} {status.manager:<10}", fg=color, nl=False)
        if status.found_path:
            click.echo(f" {status.found_path}  ({status.discovery_method})")
        else:
            click.echo(f" {status.status}")
        if status.status == "path_missing" and status.message:
            click.secho(f"       {status.message}", fg="yellow")
        elif ctx.obj.get("verbose") and status.message:
            click.echo(f"       {status.message}")

    if not quiet:
        click.echo()
        click.echo(
            f"   {result.available_count} available, "
            f"{result.path_missing_count} installed outside PATH"
        )
        click.echo()


@cli.group()
def config() -> None:
    """Override file commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate package-managers.json."""
    from devjanitor.core.use_cases.config_check import check_config

    result = check_config(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.valid:
        click.secho("✅ Configuration is valid", fg="green", bold=True)
        if result.config_path:
            click.echo(f"   File: {result.config_path}")
        if result.config:
            click.echo(f"   Custom paths: {len(result.config.custom_paths)}")
            click.echo(f"   Disabled: {', '.join(result.config.disabled) or '-'}")
            if result.config.timeout:
                click.echo(f"   Timeout: {result.config.timeout:g}ms")
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


@config.command("path")
@click.pass_context
def config_path_cmd(ctx: click.Context) -> None:
    """Print where the override file is (or would be) read from."""
    from devjanitor.core.config.loader import CONFIG_FILE_NAMES, config_dir, find_config_file

    explicit = ctx.obj.get("config_path")
    path = explicit or find_config_file() or config_dir() / CONFIG_FILE_NAMES[0]
    click.echo(str(path))


cli.add_command(packages)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()

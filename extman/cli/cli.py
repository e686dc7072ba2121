"""extman CLI - inspect extension load and unload plans.

Usage:
    extman list                     - List extensions in the manifest
    extman plan-load net ui         - Show the order to load extensions in
    extman plan-unload net          - Show the order to unload extensions in
    extman check                    - Verify every extension can be loaded
"""

import json
import sys

import click

from extman import __version__
from extman.core.config import get_config
from extman.core.errors import ConfigError, ExtManError, format_exception_chain
from extman.core.logging import setup_logging
from extman.extensions.manifest import load_manifest
from extman.extensions.resolver import LoadOrderResolver, UnloadOrderResolver


def _registry(ctx: click.Context):
    try:
        return load_manifest(ctx.obj["manifest"]).to_registry()
    except ExtManError as e:
        click.echo(format_exception_chain(e), err=True)
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="extman")
@click.option(
    "--manifest", "-m",
    type=click.Path(dir_okay=False),
    default=None,
    help="Manifest file (defaults to EXTMAN_MANIFEST)"
)
@click.option("--verbose", "-v", is_flag=True, help="Log resolver activity")
@click.pass_context
def cli(ctx: click.Context, manifest: str | None, verbose: bool):
    """extman - Extension dependency manager.

    Computes safe load and unload orders for a set of extensions
    described by a JSON manifest.
    """
    config = get_config()
    issues = config.validate()
    if issues:
        error = ConfigError("Invalid configuration", details="; ".join(issues))
        click.echo(format_exception_chain(error), err=True)
        sys.exit(1)

    setup_logging(
        level="DEBUG" if verbose else config.log.level,
        format_type=config.log.format,
        log_dir=config.paths.logs_dir,
        file_enabled=config.log.file_enabled,
        console_enabled=config.log.console_enabled and verbose,
    )
    ctx.ensure_object(dict)
    ctx.obj["manifest"] = manifest or str(config.paths.manifest)


@cli.command("list")
@click.pass_context
def list_extensions(ctx: click.Context):
    """List extensions and their load status."""
    registry = _registry(ctx)

    if not len(registry):
        click.echo("No extensions registered.")
        return

    for ext_id in registry.known_ids():
        info = registry.info(ext_id)
        click.echo(f"{info.to_display_string()} ({registry.status(ext_id).value})")


@cli.command("plan-load")
@click.argument("ids", nargs=-1, required=True)
@click.option("--json", "as_json", is_flag=True, help="Print the plan as JSON")
@click.pass_context
def plan_load(ctx: click.Context, ids: tuple[str, ...], as_json: bool):
    """Show the order in which IDS and their dependencies load.

    Examples:
        extman plan-load net
        extman plan-load net ui --json
    """
    registry = _registry(ctx)

    try:
        plan = LoadOrderResolver(registry).resolve(ids)
    except ExtManError as e:
        click.echo(format_exception_chain(e), err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps([entry.model_dump(mode="json") for entry in plan], indent=2))
        return

    for step, entry in enumerate(plan, 1):
        click.echo(f"{step}. {entry.id} ({entry.mode.value})")


@cli.command("plan-unload")
@click.argument("ids", nargs=-1, required=True)
@click.option("--json", "as_json", is_flag=True, help="Print the order as JSON")
@click.pass_context
def plan_unload(ctx: click.Context, ids: tuple[str, ...], as_json: bool):
    """Show the order in which IDS, their dependents and unused dependencies unload."""
    registry = _registry(ctx)

    try:
        order = UnloadOrderResolver(registry).resolve(ids)
    except ExtManError as e:
        click.echo(format_exception_chain(e), err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(order, indent=2))
        return

    if not order:
        click.echo("Nothing to unload.")
        return

    for step, ext_id in enumerate(order, 1):
        click.echo(f"{step}. {ext_id}")


@cli.command()
@click.pass_context
def check(ctx: click.Context):
    """Verify that every extension in the manifest can be loaded."""
    registry = _registry(ctx)
    resolver = LoadOrderResolver(registry)
    failures = 0

    for ext_id in registry.known_ids():
        try:
            resolver.resolve([ext_id])
        except ExtManError as e:
            failures += 1
            click.echo(f"✗ {ext_id}", err=True)
            click.echo(format_exception_chain(e), err=True)
        else:
            click.echo(f"✓ {ext_id}")

    if failures:
        click.echo(f"\n{failures} extension(s) cannot be loaded.", err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()

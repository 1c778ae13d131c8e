"""CLI interface for Drivesite.

Command-line tool for serving a document tree and inspecting how URLs
resolve against it.
"""

import json
import logging
import sys
from pathlib import Path
from typing import NoReturn

import click

from drivesite.config import Config
from drivesite.core.errors import DrivesiteError
from drivesite.core.navigation import NavItem, build_nav_tree, build_navigation
from drivesite.core.provider import TreeLoader
from drivesite.core.resolver import index_redirect, resolve
from drivesite.core.tree import Branch

config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover drivesite.toml)",
)


@click.group()
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable debug logging",
)
def cli(verbose: bool) -> None:
    """Drivesite - serve a Drive-like document tree as a website."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@config_option
@click.option(
    "--listing",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Listing export file (overrides config)",
)
@click.option(
    "--content-dir",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Directory of exported document bodies (overrides config)",
)
@click.option(
    "--host",
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
@click.option(
    "--live-reload/--no-live-reload",
    default=None,
    help="Enable/disable live reload (overrides config, default: enabled)",
)
def serve(
    config_path: Path | None,
    listing: Path | None,
    content_dir: Path | None,
    host: str | None,
    port: int | None,
    live_reload: bool | None,
) -> None:
    """Start the site server."""
    from drivesite.server import run_server

    config = _load_config(config_path).with_overrides(
        host=host,
        port=port,
        listing=listing,
        content_dir=content_dir,
        live_reload_enabled=live_reload,
    )

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    click.echo(f"Listing: {config.store.listing}")
    click.echo(f"Content directory: {config.store.content_dir}")
    if config.live_reload.enabled:
        click.echo("Live reload: enabled")
    else:
        click.echo("Live reload: disabled")

    run_server(config)


@cli.command("resolve")
@click.argument("url_path")
@config_option
def resolve_command(url_path: str, config_path: Path | None) -> None:
    """Show how URL_PATH resolves and the navigation built for it."""
    target = index_redirect(url_path)
    if target is not None:
        click.echo(json.dumps({"redirect": target}))
        return

    config = _load_config(config_path)
    try:
        snapshot = TreeLoader(config.store.listing, root_id=config.store.root_id).load()
        node, parent = resolve(url_path, snapshot.root)
        if node is None:
            _fail(f"Not found: {url_path}")
        if isinstance(node, Branch):
            _fail(f"{url_path} resolves to a folder without an index document")

        meta = snapshot.get_meta(node.id)
        if meta.is_folder:
            _fail(f"{url_path} is an empty folder")
        navigation = build_navigation(
            url_path,
            node.breadcrumb,
            parent,
            meta.slug,
            get_meta=snapshot.get_meta,
        )
    except DrivesiteError as e:
        _fail(str(e))

    result = {
        "id": node.id,
        "title": meta.pretty_name,
        "slug": meta.slug,
        "parent": parent.id if parent is not None else None,
        **navigation.to_dict(),
    }
    click.echo(json.dumps(result, indent=2))


@cli.command()
@config_option
def tree(config_path: Path | None) -> None:
    """Print the site outline."""
    config = _load_config(config_path)
    try:
        snapshot = TreeLoader(config.store.listing, root_id=config.store.root_id).load()
        items = build_nav_tree(snapshot)
    except DrivesiteError as e:
        _fail(str(e))

    for line in _outline(items, 0):
        click.echo(line)


def _outline(items: list[NavItem], depth: int) -> list[str]:
    lines: list[str] = []
    for item in items:
        lines.append(f"{'  ' * depth}{item.title} ({item.path})")
        lines.extend(_outline(item.children, depth + 1))
    return lines


def _load_config(config_path: Path | None) -> Config:
    try:
        return Config.load(config_path)
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))


def _fail(message: str) -> NoReturn:
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    sys.exit(1)


def main() -> None:
    cli()

"""buttons CLI — index of button blocks in a Markdown vault.

Commands:
    buttons init [NAME]          create buttons.toml + .buttons/ and build the index
    buttons reindex              full rebuild of the index slot
    buttons list                 all indexed buttons
    buttons show ID              arguments of one button (--inherit, --arg KEY=VALUE)
    buttons swap ID [VALUE]      print or set a button's swap counter
    buttons watch                keep the index current as documents change
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import click

from buttons.backing import PersistedBacking
from buttons.config import ButtonsConfig, init_config, load_config
from buttons.db import Slot
from buttons.plugin import ButtonsPlugin
from buttons.vault import Vault
from buttons.watcher import run_from_config

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_cfg() -> ButtonsConfig:
    try:
        return load_config()
    except Exception as exc:
        raise click.ClickException(str(exc)) from exc


def _open_plugin(cfg: ButtonsConfig, *, rebuild: bool = False) -> ButtonsPlugin:
    """Plugin reading straight from the slot; builds the index if the slot is empty.

    A CLI process is short-lived, so the durable slot is its source of truth
    whatever backing buttons.toml selects for long-running processes.
    """
    cfg.ensure_dirs()
    backing = PersistedBacking(Slot.from_config(cfg), cfg.store.slot)
    plugin = ButtonsPlugin(Vault.from_config(cfg), backing)
    if rebuild or backing.load() is None:
        plugin.load()
    return plugin


def _parse_extra(pairs: tuple[str, ...]) -> dict[str, str]:
    extra: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            msg = f"--arg expects KEY=VALUE, got {pair!r}"
            raise click.BadParameter(msg, param_hint="--arg")
        extra[key.strip().lower()] = value.strip()
    return extra


def _echo_args(args: dict[str, str], as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps(args, indent=2))
        return
    width = max((len(k) for k in args), default=0)
    for key, value in args.items():
        click.echo(f"{key:<{width}}  {value}")


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="buttons")
@click.option("-v", "--verbose", is_flag=True, help="Log index activity to stderr")
def cli(verbose: bool) -> None:
    """buttons — index of button blocks in a Markdown vault."""
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(name)s %(levelname)s %(message)s")


# ---------------------------------------------------------------------------
# buttons init / reindex
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("name", required=False)
@click.option("--dir", "root", default=".", show_default=True, help="Project root")
def init(name: str | None, root: str) -> None:
    """Create buttons.toml and .buttons/ in the current vault."""
    root_path = Path(root).resolve()
    try:
        config_path = init_config(root_path, name=name)
        click.echo(f"Created {config_path}")
    except FileExistsError:
        click.echo("buttons.toml already exists — skipping init")

    try:
        cfg = load_config(root_path)
    except Exception as exc:
        raise click.ClickException(str(exc)) from exc
    plugin = _open_plugin(cfg, rebuild=True)
    click.echo(f"Index dir : {cfg.index_dir}")
    click.echo(f"Indexed {len(plugin.store)} buttons")


@cli.command()
def reindex() -> None:
    """Rebuild the index from every document in the vault."""
    cfg = _load_cfg()
    plugin = _open_plugin(cfg, rebuild=True)
    click.echo(f"Indexed {len(plugin.store)} buttons")


# ---------------------------------------------------------------------------
# buttons list / show
# ---------------------------------------------------------------------------


@cli.command("list")
@click.option("--json", "as_json", is_flag=True, help="Print entries as JSON")
def list_cmd(as_json: bool) -> None:
    """List indexed buttons: id, document, lines, swap."""
    plugin = _open_plugin(_load_cfg())
    entries = plugin.store.entries()
    if as_json:
        click.echo(json.dumps([e.to_dict() for e in entries], indent=2))
        return
    if not entries:
        click.echo("No buttons indexed.")
        return
    for e in entries:
        pos = e.position
        click.echo(f"{e.bare_id:<24} {e.path}:{pos.start.line + 1}-{pos.end.line + 1}  swap={e.swap}")


@cli.command()
@click.argument("button_id")
@click.option("--inherit", is_flag=True, help="Merge in arguments from the parent chain")
@click.option("--arg", "extra", multiple=True, metavar="KEY=VALUE", help="Override an argument (repeatable)")
@click.option("--json", "as_json", is_flag=True, help="Print arguments as JSON")
def show(button_id: str, inherit: bool, extra: tuple[str, ...], as_json: bool) -> None:
    """Print the arguments of button BUTTON_ID."""
    plugin = _open_plugin(_load_cfg())
    overrides = _parse_extra(extra)
    if inherit:
        args = asyncio.run(plugin.get_button_by_id(button_id))
        if args is not None:
            args = {**args, **overrides}
    else:
        rendered = asyncio.run(plugin.get_button_from_store(button_id, overrides))
        args = None if rendered is None else rendered.args
    if args is None:
        raise click.ClickException(f"Button not found: {button_id}")
    _echo_args(args, as_json)


# ---------------------------------------------------------------------------
# buttons swap
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("button_id")
@click.argument("value", type=int, required=False)
def swap(button_id: str, value: int | None) -> None:
    """Print the swap counter of BUTTON_ID, or set it to VALUE."""
    plugin = _open_plugin(_load_cfg())
    if value is None:
        current = plugin.get_swap(button_id)
    else:
        current = plugin.set_swap(button_id, value)
    if current is None:
        raise click.ClickException(f"Button not found: {button_id}")
    click.echo(str(current))


# ---------------------------------------------------------------------------
# buttons watch
# ---------------------------------------------------------------------------


@cli.command()
@click.option("--dir", "root", default=None, help="Project root (default: search upward from cwd)")
def watch(root: str | None) -> None:
    """Rebuild, then keep the index current as documents change (foreground)."""
    run_from_config(Path(root) if root else None)

"""CLI: mpc config show|set|reset"""

import json

import click
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from mpc_connect.models.config import MpcConfig

console = Console()

SETTABLE = sorted(name for name in MpcConfig.model_fields if name != "chain")


def _load_config() -> dict:
    from mpc_connect.cli.main import _load_config
    return _load_config()


def _save_config(cfg: dict) -> None:
    from mpc_connect.cli.main import _save_config
    _save_config(cfg)


def _get_config() -> MpcConfig:
    from mpc_connect.cli.main import _get_config
    return _get_config()


@click.group()
def config():
    """Saved settings."""


@config.command("show")
@click.option("--json-output", "--json", is_flag=True)
def config_show(json_output):
    """Show the effective configuration."""
    effective = _get_config()
    if json_output:
        click.echo(effective.model_dump_json(indent=2))
        return
    table = Table(title="mpc-connect configuration")
    table.add_column("Key", style="bold")
    table.add_column("Value")
    for key, value in effective.model_dump().items():
        table.add_row(key, json.dumps(value))
    table.add_row("poll budget (s)", f"{effective.poll_budget_seconds:g}")
    console.print(table)


@config.command("set")
@click.argument("key", type=click.Choice(SETTABLE))
@click.argument("value")
def config_set(key, value):
    """Save a setting."""
    cfg = _load_config()
    candidate = {**cfg, key: value}
    try:
        validated = MpcConfig.model_validate({k: v for k, v in candidate.items() if k in MpcConfig.model_fields})
    except ValidationError as e:
        console.print(f"[red]Invalid value for {key}: {e.errors()[0]['msg']}[/red]")
        raise SystemExit(1)
    cfg[key] = getattr(validated, key)
    _save_config(cfg)
    console.print(f"[green]{key} = {cfg[key]!r}[/green]")


@config.command("reset")
def config_reset():
    """Clear saved settings."""
    _save_config({})
    console.print("[green]Configuration reset.[/green]")

"""CLI: mpc encode, mpc decode"""

import json

import click
from rich.console import Console

from mpc_connect import base58
from mpc_connect.errors import DecodingError
from mpc_connect.transport.envelope import parse_token

console = Console()


@click.command("encode")
@click.argument("value")
@click.option("--hex", "is_hex", is_flag=True, help="VALUE is hex encoded bytes")
def encode_cmd(value: str, is_hex: bool):
    """Base58 encode VALUE."""
    try:
        data = bytes.fromhex(value) if is_hex else value.encode("utf-8")
    except ValueError as e:
        console.print(f"[red]Invalid hex: {e}[/red]")
        raise SystemExit(1)
    click.echo(base58.encode(data))


@click.command("decode")
@click.argument("token")
@click.option("--hex", "as_hex", is_flag=True, help="Print bytes as hex")
@click.option("--envelope", is_flag=True, help="Parse TOKEN as a request envelope")
def decode_cmd(token: str, as_hex: bool, envelope: bool):
    """Base58 decode TOKEN."""
    try:
        if envelope:
            parsed = parse_token(token)
            click.echo(json.dumps(parsed.to_wire(), indent=2))
            return
        raw = base58.decode(token)
    except DecodingError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)

    if as_hex:
        click.echo(raw.hex())
        return
    try:
        click.echo(raw.decode("utf-8"))
    except UnicodeDecodeError:
        click.echo(raw.hex())

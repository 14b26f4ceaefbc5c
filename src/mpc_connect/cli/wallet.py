"""CLI: mpc url, mpc connect, mpc sign-message"""

from typing import Any, Optional

import click
from rich.console import Console
from rich.panel import Panel

from mpc_connect.channel import RemoteChannel
from mpc_connect.client import AsyncMpcWallet
from mpc_connect.errors import MpcConnectError
from mpc_connect.models.account import WalletAccount
from mpc_connect.presentation import BrowserPresenter
from mpc_connect.transport.envelope import build_connect, new_session_id

console = Console()


def _load_config() -> dict:
    from mpc_connect.cli.main import _load_config
    return _load_config()


def _save_config(cfg: dict) -> None:
    from mpc_connect.cli.main import _save_config
    _save_config(cfg)


def _get_config():
    from mpc_connect.cli.main import _get_config
    return _get_config()


def _run(coro):
    from mpc_connect.cli.main import _run
    return _run(coro)


class ConsolePresenter:
    """Prints the companion URL; the user opens it or scans it elsewhere."""

    def present_request(self, url: str) -> Optional[Any]:
        console.print(Panel(url, title="Open on your companion device", expand=False))
        return url


def _presenter(open_browser: bool):
    return BrowserPresenter() if open_browser else ConsolePresenter()


@click.group()
def url():
    """Build companion URLs without polling."""


@url.command("connect")
@click.option("--redirect", default=None)
def url_connect(redirect: Optional[str]):
    """Print a companion URL for a fresh connect request."""

    async def _url():
        cfg = _get_config()
        envelope = build_connect(cfg.chain, new_session_id(), cfg.origin, redirect)
        async with RemoteChannel(cfg) as channel:
            click.echo(channel.companion_url(envelope))

    _run(_url())


@click.command("connect")
@click.option("--open", "open_browser", is_flag=True, help="Open the companion page in a browser")
def connect_cmd(open_browser: bool):
    """Connect to the companion signer and save its public key."""

    async def _connect():
        cfg = _get_config()
        async with AsyncMpcWallet(config=cfg, presenter=_presenter(open_browser)) as wallet:
            try:
                with console.status(f"Waiting for approval (up to {cfg.poll_budget_seconds:g}s)..."):
                    account = await wallet.connect()
            except MpcConnectError as e:
                console.print(f"[red]Connect failed: {e}[/red]")
                raise SystemExit(1)
        if account is None:
            console.print("[yellow]No answer from the companion signer.[/yellow]")
            raise SystemExit(2)
        _save_config({**_load_config(), "public_key": account.public_key})
        console.print(f"[green]Connected: {account.public_key}[/green]")

    _run(_connect())


@click.command("sign-message")
@click.argument("message")
@click.option("--open", "open_browser", is_flag=True, help="Open the companion page in a browser")
def sign_message_cmd(message: str, open_browser: bool):
    """Ask the companion signer to sign MESSAGE."""

    async def _sign():
        public_key = _load_config().get("public_key")
        if not public_key:
            console.print("[red]Not connected. Run `mpc connect` first.[/red]")
            raise SystemExit(1)
        cfg = _get_config()
        account = WalletAccount(public_key=public_key, connected=True)
        async with AsyncMpcWallet(config=cfg, presenter=_presenter(open_browser), account=account) as wallet:
            try:
                with console.status("Waiting for signature..."):
                    signature = await wallet.sign_message(message.encode("utf-8"))
            except MpcConnectError as e:
                console.print(f"[red]Signing failed: {e}[/red]")
                raise SystemExit(1)
        if signature is None:
            console.print("[yellow]No answer from the companion signer.[/yellow]")
            raise SystemExit(2)
        click.echo(signature if isinstance(signature, str) else repr(signature))

    _run(_sign())

"""
mpc-connect CLI — `mpc` command.

Commands:
  mpc encode <text>           Base58 encode text or hex bytes
  mpc decode <token>          Base58 decode, optionally as a request envelope
  mpc url connect             Print a companion URL for a connect request
  mpc connect                 Connect to the companion signer
  mpc sign-message <text>     Ask the companion signer to sign a message
  mpc config <cmd>            Show or change saved settings
"""

import asyncio
import json
import logging
from pathlib import Path

try:
    import click
    from rich.console import Console
except ImportError:
    raise SystemExit("CLI requires extras: pip install mpc-connect[cli]")

from mpc_connect.models.config import MpcConfig

console = Console()
CONFIG_FILE = Path.home() / ".mpc" / "config.json"


def _load_config() -> dict:
    try:
        return json.loads(CONFIG_FILE.read_text())
    except (FileNotFoundError, json.JSONDecodeError):
        return {}


def _save_config(cfg: dict) -> None:
    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    CONFIG_FILE.write_text(json.dumps(cfg, indent=2))


def _get_config() -> MpcConfig:
    cfg = _load_config()
    return MpcConfig.model_validate({k: v for k, v in cfg.items() if k in MpcConfig.model_fields})


def _run(coro):
    return asyncio.run(coro)


@click.group()
@click.version_option("0.1.0")
@click.option("-v", "--verbose", is_flag=True, help="Log polling activity")
def main(verbose: bool):
    """mpc-connect CLI — talk to an out-of-band companion signer."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


# Register subcommands from separate modules
from mpc_connect.cli.codec import encode_cmd, decode_cmd
from mpc_connect.cli.wallet import url, connect_cmd, sign_message_cmd
from mpc_connect.cli.config import config

main.add_command(encode_cmd)
main.add_command(decode_cmd)
main.add_command(url)
main.add_command(connect_cmd)
main.add_command(sign_message_cmd)
main.add_command(config)


if __name__ == "__main__":
    main()

"""
cordlink CLI — `cordlink` command.

Commands:
  cordlink auth login|status|logout   Store or clear the token
  cordlink gateway listen             Print inbound gateway frames
  cordlink guilds                     List guilds
  cordlink channels <guild-id>        List a guild's channels
  cordlink messages <channel-id>      Show recent messages
  cordlink send <channel-id> <text>   Post a message
"""

import asyncio
import json
import logging
import os
from pathlib import Path

try:
    import click
    from rich.console import Console
    from rich.logging import RichHandler
except ImportError:
    raise SystemExit("CLI requires extras: pip install cordlink[cli]")

from cordlink.client import Cordlink
from cordlink.errors import CordlinkError

console = Console()
CONFIG_FILE = Path.home() / ".cordlink" / "config.json"
TOKEN_ENV = "CORDLINK_TOKEN"


def _load_config() -> dict:
    try:
        return json.loads(CONFIG_FILE.read_text())
    except (FileNotFoundError, json.JSONDecodeError):
        return {}


def _save_config(cfg: dict) -> None:
    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    CONFIG_FILE.write_text(json.dumps(cfg, indent=2))


def _get_token() -> str:
    token = os.environ.get(TOKEN_ENV) or _load_config().get("token")
    if not token:
        console.print("[red]No token. Run `cordlink auth login` or set CORDLINK_TOKEN.[/red]")
        raise SystemExit(1)
    return token


def _get_client() -> Cordlink:
    cfg = _load_config()
    kwargs = {}
    if cfg.get("api_url"):
        kwargs["api_url"] = cfg["api_url"]
    if cfg.get("gateway_url"):
        kwargs["gateway_url"] = cfg["gateway_url"]
    return Cordlink(_get_token(), **kwargs)


def _run(coro):
    try:
        return asyncio.run(coro)
    except CordlinkError as e:
        console.print(str(e), style="red", markup=False)
        raise SystemExit(1)


@click.group()
@click.version_option("0.1.0")
@click.option("-v", "--verbose", count=True, help="-v for info logs, -vv for debug")
def main(verbose: int):
    """cordlink — Discord gateway and REST client."""
    level = {0: logging.WARNING, 1: logging.INFO}.get(verbose, logging.DEBUG)
    logging.basicConfig(level=level, format="%(message)s", handlers=[RichHandler(console=console)])


# Register subcommands from separate modules
from cordlink.cli.auth import auth
from cordlink.cli.gateway import gateway
from cordlink.cli.rest import guilds_cmd, channels_cmd, messages_cmd, send_cmd

main.add_command(auth)
main.add_command(gateway)
main.add_command(guilds_cmd)
main.add_command(channels_cmd)
main.add_command(messages_cmd)
main.add_command(send_cmd)


if __name__ == "__main__":
    main()

"""CLI: cordlink auth login|status|logout"""

import os

import click
from rich.console import Console

console = Console()


def _load_config() -> dict:
    from cordlink.cli.main import _load_config
    return _load_config()


def _save_config(cfg: dict) -> None:
    from cordlink.cli.main import _save_config
    _save_config(cfg)


@click.group()
def auth():
    """Token management."""


@auth.command("login")
@click.option("--token", default=None, help="Token to store (prompted if omitted)")
def auth_login(token):
    """Store a token in ~/.cordlink/config.json."""
    token = token or click.prompt("Token", hide_input=True)
    cfg = _load_config()
    _save_config({**cfg, "token": token.strip()})
    console.print("[green]Token saved to ~/.cordlink/config.json[/green]")


@auth.command("status")
def auth_status():
    """Show whether a token is configured."""
    from cordlink.cli.main import TOKEN_ENV
    if os.environ.get(TOKEN_ENV):
        console.print(f"[green]Using token from {TOKEN_ENV}[/green]")
    elif _load_config().get("token"):
        console.print("[green]Token configured[/green]")
    else:
        console.print("[yellow]No token. Run `cordlink auth login`.[/yellow]")


@auth.command("logout")
def auth_logout():
    """Forget the stored token."""
    cfg = _load_config()
    cfg.pop("token", None)
    _save_config(cfg)
    console.print("[green]Logged out.[/green]")

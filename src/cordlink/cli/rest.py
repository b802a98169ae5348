"""CLI: cordlink guilds|channels|messages|send"""

import json

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console()


def _get_client():
    from cordlink.cli.main import _get_client
    return _get_client()


def _run(coro):
    from cordlink.cli.main import _run
    return _run(coro)


def _dump(models) -> str:
    return json.dumps([m.model_dump(mode="json") for m in models], indent=2)


@click.command("guilds")
@click.option("--json-output", "--json", is_flag=True)
def guilds_cmd(json_output):
    """List guilds."""

    async def _list():
        client = _get_client()
        try:
            guilds = await client.rest.list_guilds()
        finally:
            await client.close()
        if json_output:
            click.echo(_dump(guilds))
            return
        table = Table(title=f"Guilds ({len(guilds)})")
        table.add_column("ID", style="bold")
        table.add_column("Name")
        table.add_column("Owner")
        for g in guilds:
            table.add_row(g.id, escape(g.name), "yes" if g.owner else "")
        console.print(table)

    _run(_list())


@click.command("channels")
@click.argument("guild_id")
@click.option("--json-output", "--json", is_flag=True)
def channels_cmd(guild_id, json_output):
    """List a guild's channels."""

    async def _list():
        client = _get_client()
        try:
            channels = await client.rest.list_channels(guild_id)
        finally:
            await client.close()
        if json_output:
            click.echo(_dump(channels))
            return
        table = Table(title=f"Channels ({len(channels)})")
        table.add_column("ID", style="bold")
        table.add_column("Name")
        table.add_column("Type")
        table.add_column("Topic")
        for c in channels:
            table.add_row(c.id, escape(c.name or ""), str(c.type), escape(c.topic or ""))
        console.print(table)

    _run(_list())


@click.command("messages")
@click.argument("channel_id")
@click.option("--limit", default=20, type=int)
@click.option("--json-output", "--json", is_flag=True)
def messages_cmd(channel_id, limit, json_output):
    """Show recent messages, oldest first."""

    async def _list():
        client = _get_client()
        try:
            messages = await client.rest.list_messages(channel_id, limit=limit)
        finally:
            await client.close()
        if json_output:
            click.echo(_dump(messages))
            return
        for m in reversed(messages):
            console.print(f"[green]{escape(m.author.username)}[/green]: {escape(m.content)}")

    _run(_list())


@click.command("send")
@click.argument("channel_id")
@click.argument("message")
def send_cmd(channel_id, message):
    """Post a message to a channel."""

    async def _send():
        client = _get_client()
        try:
            with console.status("Sending..."):
                sent = await client.rest.send_message(channel_id, message)
        finally:
            await client.close()
        console.print(f"[green]Sent message {sent.id}[/green]")

    _run(_send())

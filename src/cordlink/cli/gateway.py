"""CLI: cordlink gateway listen"""

import asyncio
import signal
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape

from cordlink.transport.envelope import peek_frame

console = Console()


def _get_client():
    from cordlink.cli.main import _get_client
    return _get_client()


def _run(coro):
    from cordlink.cli.main import _run
    return _run(coro)


def _describe(frame: str) -> str:
    peeked = peek_frame(frame)
    if peeked is None:
        return f"[dim]{escape(frame[:200])}[/dim]"
    label = escape(peeked.t) if peeked.t else f"op {peeked.op}"
    seq = f" [dim]#{peeked.s}[/dim]" if peeked.s is not None else ""
    return f"[cyan]{label}[/cyan]{seq}"


@click.group()
def gateway():
    """Gateway socket commands."""


@gateway.command("listen")
@click.option("--intents", default=None, type=int, help="Gateway intents bitfield")
@click.option("--reconnect", is_flag=True, help="Resume or re-identify after the session drops")
@click.option("--json-output", "--json", is_flag=True, help="Print raw frames")
def gateway_listen(intents: Optional[int], reconnect: bool, json_output: bool):
    """Connect and print inbound frames until Ctrl+C."""

    async def _listen():
        client = _get_client()
        gw = client.gateway(**({"intents": intents} if intents is not None else {}))

        def on_frame(frame: str) -> None:
            if json_output:
                click.echo(frame)
            else:
                console.print(_describe(frame))

        loop = asyncio.get_running_loop()
        try:
            loop.add_signal_handler(signal.SIGINT, gw.abort)
        except NotImplementedError:
            pass
        try:
            if reconnect:
                status = await gw.run_forever(on_frame)
            else:
                with console.status("Connecting to gateway..."):
                    await gw.start()
                console.print(f"[green]Connected[/green] [dim](heartbeat every {gw.heartbeat_interval_ms} ms)[/dim]")
                status = await gw.run(on_frame)
        finally:
            await client.close()
        message = f"[dim]Gateway closed: {status.reason.value}[/dim]"
        if status.error:
            message += f" [red]{escape(str(status.error))}[/red]"
        console.print(message)

    _run(_listen())

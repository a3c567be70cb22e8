"""
dash-insight CLI - query a Dash Insight explorer from the shell.
"""

from __future__ import annotations

import asyncio
import json
import sys
from collections.abc import Awaitable, Callable
from typing import Any

import typer
from loguru import logger
from pydantic import BaseModel

from dashinsight.client import InsightClient
from dashinsight.config import InsightSettings
from dashinsight.constants import DEFAULT_TIMEOUT
from dashinsight.errors import InsightError

app = typer.Typer(
    name="dash-insight",
    help="Dash Insight explorer client",
    add_completion=False,
)


def setup_logging(level: str = "INFO") -> None:
    """Configure loguru logging."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )


def build_client(settings: InsightSettings) -> InsightClient:
    return InsightClient.from_settings(settings)


def _to_jsonable(result: Any) -> Any:
    if isinstance(result, BaseModel):
        return result.model_dump(mode="json")
    if isinstance(result, list):
        return [_to_jsonable(item) for item in result]
    return result


def _run(ctx: typer.Context, call: Callable[[InsightClient], Awaitable[Any]]) -> None:
    settings: InsightSettings = ctx.obj

    async def _execute() -> Any:
        async with build_client(settings) as client:
            return await call(client)

    try:
        result = asyncio.run(_execute())
    except InsightError as e:
        logger.error(str(e))
        raise typer.Exit(1)

    typer.echo(json.dumps(_to_jsonable(result), indent=2))


@app.callback()
def main(
    ctx: typer.Context,
    url: str | None = typer.Option(None, "--url", "-u", envvar="INSIGHT_URL"),
    network: str = typer.Option(
        "mainnet", "--network", "-n", envvar="INSIGHT_NETWORK", help="mainnet | testnet or an alias"
    ),
    timeout: float = typer.Option(DEFAULT_TIMEOUT, "--timeout", envvar="INSIGHT_TIMEOUT"),
    log_level: str = typer.Option("INFO", "--log-level", "-l", envvar="INSIGHT_LOG_LEVEL"),
) -> None:
    setup_logging(log_level)
    try:
        ctx.obj = InsightSettings(url=url, network=network, timeout=timeout, log_level=log_level)
    except ValueError as e:
        logger.error(f"Invalid settings: {e}")
        raise typer.Exit(2)


@app.command()
def tx(ctx: typer.Context, txid: str = typer.Argument(..., help="Transaction id")) -> None:
    """Show a transaction."""
    _run(ctx, lambda client: client.get_transaction(txid))


@app.command()
def utxos(
    ctx: typer.Context, addresses: list[str] = typer.Argument(..., help="One or more addresses")
) -> None:
    """List unspent outputs for addresses."""
    _run(ctx, lambda client: client.get_utxos(addresses))


@app.command()
def address(ctx: typer.Context, addr: str = typer.Argument(..., help="Address")) -> None:
    """Show balance and history summary for an address."""
    _run(ctx, lambda client: client.address(addr))


@app.command()
def status(ctx: typer.Context) -> None:
    """Show the explorer's last block hash."""
    _run(ctx, lambda client: client.status())


@app.command()
def block(ctx: typer.Context, block_hash: str = typer.Argument(..., help="Block hash")) -> None:
    """Show a block."""
    _run(ctx, lambda client: client.get_block_by_hash(block_hash))


@app.command("last-block")
def last_block(ctx: typer.Context) -> None:
    """Show the chain tip hash."""
    _run(ctx, lambda client: client.get_last_block_hash())


@app.command()
def broadcast(
    ctx: typer.Context,
    raw_tx: str = typer.Argument(..., help="Signed transaction hex"),
    instant: bool = typer.Option(False, "--instant", "-i", help="Use InstantSend"),
) -> None:
    """Broadcast a signed transaction."""
    if instant:
        _run(ctx, lambda client: client.broadcast_instant(raw_tx))
    else:
        _run(ctx, lambda client: client.broadcast(raw_tx))


if __name__ == "__main__":
    app()

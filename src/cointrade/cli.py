"""Typer-based CLI for querying and trading through the exchange facades."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .errors import ExchangeError
from .exchanges.factory import EXCHANGES

if TYPE_CHECKING:
    from .di import AppContainer
    from .exchanges.base import BaseExchange


# Import with local function so tests can patch configuration loading
def _load_settings(config_path: Optional[Path] = None):
    from .config import load_settings
    return load_settings(config_path)


def _build_container(settings):
    from .di import build_container
    return build_container(settings)


def _configure_logging(level: str | None = None):
    from .logging import configure_logging
    return configure_logging(None, level)


app = typer.Typer(help="Unified crypto exchange CLI")
console = Console()
logger = logging.getLogger(__name__)


def run_cli(argv: list[str] | None = None) -> None:
    """Run CLI with optional argv parameter."""
    app(argv)


def init_components(config_path: Optional[Path] = None) -> "AppContainer":
    """Load settings and build the container with all configured exchanges."""
    settings = _load_settings(config_path)
    return _build_container(settings)


def _run(
    exchange: str,
    config: Optional[Path],
    action: Callable[["BaseExchange"], Awaitable[Any]],
) -> Any:
    """Resolve ``exchange`` from config, run ``action`` on it and close transports."""

    async def runner() -> Any:
        container = init_components(config)
        try:
            return await action(container.get_exchange(exchange))
        finally:
            await container.close()

    try:
        return asyncio.run(runner())
    except (ExchangeError, KeyError, ValueError) as e:
        logger.debug("Command failed: %s", e, exc_info=True)
        message = e.args[0] if isinstance(e, KeyError) and e.args else e
        console.print(f"[red]Error:[/red] {message}")
        raise typer.Exit(1)


@app.callback()
def main_options(
    log_level: Optional[str] = typer.Option(None, help="Log level (DEBUG, INFO, ...)"),
) -> None:
    _configure_logging(log_level)


@app.command()
def exchanges(
    config: Optional[Path] = typer.Option(None, help="Path to config file"),
) -> None:
    """List supported exchanges and whether they are configured."""
    settings = _load_settings(config)
    configured = {name.lower() for name, cfg in settings.exchanges.items() if cfg.enabled and cfg.credentials}

    table = Table(title="Exchanges")
    table.add_column("Exchange", style="cyan")
    table.add_column("Name", style="magenta")
    table.add_column("Base URL", style="dim")
    table.add_column("Configured", style="green")

    for key, exchange_class in EXCHANGES.items():
        table.add_row(
            key,
            exchange_class.name,
            exchange_class.default_base_url,
            "[green]yes[/green]" if key in configured else "[dim]no[/dim]",
        )

    console.print(table)


@app.command()
def price(
    exchange: str = typer.Argument(..., help="Exchange to query"),
    symbol: str = typer.Argument(..., help="Symbol as BASE/QUOTE"),
    config: Optional[Path] = typer.Option(None, help="Path to config file"),
) -> None:
    """Show the current price of a symbol."""
    result = _run(exchange, config, lambda ex: ex.get_current_price({"symbol": symbol}))
    console.print(f"[cyan]{result.exchange}[/cyan] [green]{result.symbol}[/green] [bold]{result.price}[/bold]")


@app.command()
def orderbook(
    exchange: str = typer.Argument(..., help="Exchange to query"),
    symbol: str = typer.Argument(..., help="Symbol as BASE/QUOTE"),
    depth: Optional[int] = typer.Option(None, help="Number of levels to request"),
    config: Optional[Path] = typer.Option(None, help="Path to config file"),
) -> None:
    """Show order book levels for a symbol."""
    book = _run(exchange, config, lambda ex: ex.get_order_book({"symbol": symbol, "depth": depth}))

    table = Table(title=f"{book.exchange} {book.market}")
    table.add_column("Bid size", style="green", justify="right")
    table.add_column("Bid", style="green", justify="right")
    table.add_column("Ask", style="red", justify="right")
    table.add_column("Ask size", style="red", justify="right")
    for level in book.levels:
        table.add_row(level.bid_size, level.bid_price, level.ask_price, level.ask_size)

    console.print(table)


@app.command()
def coins(
    exchange: str = typer.Argument(..., help="Exchange to query"),
    quote: Optional[str] = typer.Option(None, help="Only show markets quoted in this asset"),
    config: Optional[Path] = typer.Option(None, help="Path to config file"),
) -> None:
    """List tradable markets."""
    coin_list = _run(exchange, config, lambda ex: ex.get_coin_list())

    symbols = list(coin_list.symbols)
    if quote:
        symbols = [s for s in symbols if s.endswith(f"/{quote.upper()}")]

    if not symbols:
        console.print("[yellow]No markets found[/yellow]")
        return

    console.print("\n".join(symbols))
    console.print(f"\n[bold]Total markets:[/bold] {len(symbols)}")


@app.command()
def order_place(
    exchange: str = typer.Argument(..., help="Exchange to trade on"),
    symbol: str = typer.Argument(..., help="Symbol as BASE/QUOTE"),
    side: str = typer.Argument(..., help="buy or sell (or the exchange's own value)"),
    order_type: str = typer.Option("limit", "--type", help="limit or market"),
    price_: Optional[str] = typer.Option(None, "--price", help="Limit price"),
    amount: Optional[str] = typer.Option(None, help="Order amount"),
    config: Optional[Path] = typer.Option(None, help="Path to config file"),
) -> None:
    """Place an order."""
    request = {
        "symbol": symbol,
        "side": side,
        "order_type": order_type,
        "price": price_,
        "amount": amount,
    }
    order = _run(exchange, config, lambda ex: ex.place_order(request))
    console.print(Panel.fit(_order_text(order), title="Order Placed"))


@app.command()
def order_cancel(
    exchange: str = typer.Argument(..., help="Exchange to trade on"),
    order_id: str = typer.Argument(..., help="Order ID to cancel"),
    symbol: Optional[str] = typer.Option(None, help="Symbol as BASE/QUOTE (Binance, OKX)"),
    config: Optional[Path] = typer.Option(None, help="Path to config file"),
) -> None:
    """Cancel an order."""
    order = _run(exchange, config, lambda ex: ex.cancel_order({"order_id": order_id, "symbol": symbol}))
    console.print(Panel.fit(_order_text(order), title="Order Cancelled"))


def _order_text(order) -> str:
    return (
        f"Exchange: [cyan]{order.exchange}[/cyan]\n"
        f"Order ID: {order.order_id}\n"
        f"Market: [green]{order.market or 'N/A'}[/green]\n"
        f"Side: {order.side or 'N/A'}\n"
        f"Type: {order.order_type or 'N/A'}\n"
        f"Price: {order.price or 'N/A'}\n"
        f"Amount: {order.amount or 'N/A'}\n"
        f"State: {order.state or 'N/A'}"
    )


def main():
    """CLI main entry point."""
    app()


if __name__ == "__main__":
    main()

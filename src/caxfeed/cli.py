"""caxfeed CLI."""

import asyncio
import logging

import click
import yaml

from caxfeed.api.client import CaxClient
from caxfeed.api.errors import CaxApiError
from caxfeed.app import QuoteFeedApp
from caxfeed.config_loader import load_config_with_overrides
from caxfeed.constants import LOG_FORMAT


def _config_options(func):
    """Options shared by every command."""
    func = click.option("--base-url", help="Override API base URL")(func)
    func = click.option("--pair", help="Trading pair, e.g. ATN-USD")(func)
    func = click.option(
        "--config",
        type=click.Path(exists=True, dir_okay=False),
        default=None,
        help="Path to configuration file",
    )(func)
    return func


@click.group()
def cli():
    """caxfeed Command Line Interface."""
    pass


@cli.command()
@_config_options
@click.option("--interval", type=int, help="Polling interval in seconds (>= 1)")
@click.option("--count", type=click.IntRange(min=1), help="Stop after this many ticks")
@click.option("--log-level", help="Override log level")
def run(config, pair, base_url, interval, count, log_level):
    """Poll quotes and print mid-price points until interrupted."""

    def echo_point(point):
        click.echo(f"{point.timestamp}\t{point.price:.6g}")

    try:
        app = QuoteFeedApp(
            config,
            pair=pair,
            interval_seconds=interval,
            base_url=base_url,
            log_level=log_level,
            max_ticks=count,
            on_point=echo_point,
        )
        points = app.run()
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    click.echo(f"Collected {len(points)} price points")


@cli.command()
@_config_options
def quote(config, pair, base_url):
    """Fetch one quote and print it."""
    try:
        cfg = load_config_with_overrides(config, pair=pair, base_url=base_url)
        logging.basicConfig(level=cfg.environment.log_level.value, format=LOG_FORMAT)

        async def _fetch():
            async with CaxClient(cfg.api.base_url, cfg.api.timeout_seconds) as client:
                return await client.get_quote(cfg.poller.pair)

        q = asyncio.run(_fetch())
    except (CaxApiError, ValueError, yaml.YAMLError) as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    click.echo(f"{cfg.poller.pair} @ {q.timestamp}")
    click.echo(f"  bid {q.bid_price:.6g} x {q.bid_amount:g}")
    click.echo(f"  ask {q.ask_price:.6g} x {q.ask_amount:g}")
    click.echo(f"  mid {q.mid_price:.6g}  spread {q.spread:.6g}")


@cli.command()
@_config_options
def orderbooks(config, pair, base_url):
    """List order books and their trading parameters; --pair narrows it to one book."""
    try:
        cfg = load_config_with_overrides(config, pair=pair, base_url=base_url)
        logging.basicConfig(level=cfg.environment.log_level.value, format=LOG_FORMAT)

        async def _fetch():
            async with CaxClient(cfg.api.base_url, cfg.api.timeout_seconds) as client:
                return await client.get_order_books()

        books = asyncio.run(_fetch())
        if pair:
            books = [b for b in books if b.pair == cfg.poller.pair]
    except (CaxApiError, ValueError, yaml.YAMLError) as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    if pair and not books:
        click.echo(f"No order book for {cfg.poller.pair}", err=True)
        raise SystemExit(1)

    for book in books:
        click.echo(
            f"{book.pair:<12} base={book.base:<6} quote={book.quote:<6} "
            f"min_amount={book.min_amount:g} tick_size={book.tick_size:g}"
        )


if __name__ == "__main__":
    cli()

# Alias for __main__.py
main = cli

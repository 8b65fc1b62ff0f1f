"""
CLI entry point: stocko list | watch | buy | sell | health.

Every command loads config from --config (default config.yaml when present),
loads the store once, mutates it in memory and saves it once. Any stocko
error aborts the command with a non-zero exit.
"""

import logging
import sys
from contextlib import contextmanager
from typing import Iterator

import click
import yaml
from dotenv import load_dotenv

from config import AppConfig, load_config
from stocko_core.errors import StockoError

load_dotenv()

logger = logging.getLogger("stocko")

SECTIONS = ("portfolio", "watchlist", "archive")


def _setup_logging() -> None:
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s  %(message)s",
        stream=sys.stderr,
    )


class AliasedGroup(click.Group):
    """Group that also accepts short command aliases (l, w, b, s)."""

    aliases = {"l": "list", "w": "watch", "b": "buy", "s": "sell"}

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        return super().get_command(ctx, self.aliases.get(cmd_name, cmd_name))

    def resolve_command(self, ctx: click.Context, args: list[str]):
        _, cmd, rest = super().resolve_command(ctx, args)
        return cmd.name if cmd else None, cmd, rest


@contextmanager
def _abort_on_error() -> Iterator[None]:
    """Turn stocko and setup errors into a click error (message on stderr, exit 1)."""
    try:
        yield
    except (StockoError, ValueError, ImportError) as exc:
        logger.debug("Command failed", exc_info=True)
        raise click.ClickException(str(exc)) from exc


def _config(ctx: click.Context) -> AppConfig:
    if "config" not in ctx.obj:
        with _abort_on_error():
            try:
                cfg = load_config(ctx.obj["config_path"])
            except (FileNotFoundError, yaml.YAMLError) as exc:
                raise click.ClickException(str(exc)) from exc
        logging.getLogger().setLevel(cfg.logging.level_no)
        ctx.obj["config"] = cfg
    return ctx.obj["config"]


def _store(ctx: click.Context):
    from data.portfolio_store import PortfolioStore

    return PortfolioStore(_config(ctx).data.store_path)


def _fetcher(ctx: click.Context):
    """Quote fetcher for this invocation; tests inject one via ``obj={"fetcher": ...}``."""
    if ctx.obj.get("fetcher") is None:
        from data import get_quote_fetcher

        ctx.obj["fetcher"] = get_quote_fetcher(_config(ctx).data)
    return ctx.obj["fetcher"]


@click.group(cls=AliasedGroup)
@click.option("--config", "config_path", default=None, help="Path to config file (default: ./config.yaml if present).")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None) -> None:
    """stocko: track holdings, a watch list and closed positions from the terminal."""
    _setup_logging()
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


# ---------- stocko list ----------


@cli.command("list")
@click.option(
    "--section",
    "sections",
    multiple=True,
    type=click.Choice(SECTIONS),
    help="Only show this section (repeatable). Default: all three.",
)
@click.pass_context
def list_positions(ctx: click.Context, sections: tuple[str, ...]) -> None:
    """Show portfolio, watch list and archive with live prices and gains."""
    from cli.output import format_archive, format_portfolio, format_watchlist
    from stocko_core.quotes import compute_change

    store = _store(ctx)
    wanted = [s for s in SECTIONS if s in sections] if sections else list(SECTIONS)

    with _abort_on_error():
        collections = store.load()

        def quoted(bucket):
            fetcher = _fetcher(ctx)
            entries = []
            for symbol in sorted(bucket):
                position = bucket[symbol]
                quote = compute_change(fetcher.fetch_daily(position.symbol), provider=fetcher.provider)
                position.price = quote.close_today
                entries.append((position, quote))
            return entries

        for section in wanted:
            if section == "portfolio":
                entries = quoted(collections.portfolio) if collections.portfolio else []
                click.echo(format_portfolio(entries))
            elif section == "watchlist":
                entries = quoted(collections.watchlist) if collections.watchlist else []
                click.echo(format_watchlist(entries))
            else:
                archived = [collections.archive[s] for s in sorted(collections.archive)]
                click.echo(format_archive(archived))


# ---------- stocko watch ----------


@cli.command()
@click.argument("symbol")
@click.argument("exchange", required=False)
@click.pass_context
def watch(ctx: click.Context, symbol: str, exchange: str | None) -> None:
    """Add SYMBOL to the watch list. EXCHANGE is tsx, tsxv or nyse (default)."""
    from stocko_core.lifecycle import add_to_watchlist, resolve_symbol

    store = _store(ctx)
    with _abort_on_error():
        resolve_symbol(symbol, exchange)
        collections = store.load()
        fetcher = _fetcher(ctx)
        position = add_to_watchlist(collections, symbol, exchange, fetcher.fetch_daily)
        store.save(collections)
    click.echo(f"Watching {position.symbol} ({position.exchange.value})")


# ---------- stocko buy / sell ----------


def _order_options(fn):
    fn = click.option("-e", "--exchange", default=None, help="Exchange code: tsx, tsxv or nyse (default).")(fn)
    fn = click.option(
        "-p", "--price", "share_price", required=True,
        type=click.FloatRange(min=0, min_open=True), help="Price per share.",
    )(fn)
    fn = click.option("-s", "--shares", required=True, type=click.IntRange(min=1), help="Number of shares.")(fn)
    fn = click.argument("symbol")(fn)
    return click.pass_context(fn)


def _process_order(ctx: click.Context, symbol: str, exchange: str | None, shares: int, share_price: float) -> None:
    from cli.output import format_gain
    from stocko_core.contracts import ClosedPositionMetrics
    from stocko_core.ledger import compute_metrics, total_shares
    from stocko_core.lifecycle import apply_order, resolve_symbol

    store = _store(ctx)
    with _abort_on_error():
        resolve_symbol(symbol, exchange)
        collections = store.load()
        outcome = apply_order(collections, symbol, exchange, shares, share_price)
        store.save(collections)

    pos = outcome.position
    verb = "Bought" if shares > 0 else "Sold"
    line = f"{verb} {abs(shares)} {pos.symbol} @ {share_price:.2f}"
    if outcome.archived:
        m = compute_metrics(pos.orders)
        closed = ClosedPositionMetrics(total_spent=m.total_spent, total_sell=m.total_sell)
        line += f", position archived (realized {format_gain(closed.realized_gain, closed.realized_gain_pct)})"
    else:
        line += f", now holding {total_shares(pos.orders)}"
    click.echo(line)


@cli.command()
@_order_options
def buy(ctx: click.Context, symbol: str, shares: int, share_price: float, exchange: str | None) -> None:
    """Add shares of SYMBOL to your portfolio."""
    _process_order(ctx, symbol, exchange, shares, share_price)


@cli.command()
@_order_options
def sell(ctx: click.Context, symbol: str, shares: int, share_price: float, exchange: str | None) -> None:
    """Remove shares of SYMBOL from your portfolio; a full sale moves it to the archive."""
    _process_order(ctx, symbol, exchange, -shares, share_price)


# ---------- stocko health ----------


@cli.command()
@click.pass_context
def health(ctx: click.Context) -> None:
    """Check config, store file and quote provider credentials.

    Exit code 0 = healthy, 1 = unhealthy.
    """
    checks: list[tuple[str, bool, str]] = []

    try:
        cfg = load_config(ctx.obj["config_path"])
        origin = str(cfg.path) if cfg.path else "defaults"
        checks.append(("config", True, f"loaded ({origin}, source={cfg.data.source})"))
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        checks.append(("config", False, str(e)))
        _print_health(checks)
        raise SystemExit(1)
    ctx.obj["config"] = cfg

    try:
        store = _store(ctx)
        if store.exists():
            c = store.load()
            checks.append((
                "store", True,
                f"{store.path}: {len(c.portfolio)} open, {len(c.watchlist)} watched, {len(c.archive)} archived",
            ))
        else:
            checks.append(("store", True, f"{store.path} (not created yet)"))
    except StockoError as e:
        checks.append(("store", False, str(e)))

    try:
        fetcher = _fetcher(ctx)
        checks.append(("provider", True, f"{fetcher.provider} credentials present"))
    except (ValueError, ImportError) as e:
        checks.append(("provider", False, str(e)))

    _print_health(checks)
    healthy = all(ok for _, ok, _ in checks)
    raise SystemExit(0 if healthy else 1)


def _print_health(checks: list[tuple[str, bool, str]]) -> None:
    for name, ok, detail in checks:
        status = "OK" if ok else "FAIL"
        click.echo(f"  [{status}] {name}: {detail}")
    healthy = all(ok for _, ok, _ in checks)
    click.echo(f"\nHealth: {'HEALTHY' if healthy else 'UNHEALTHY'}")


if __name__ == "__main__":
    cli()

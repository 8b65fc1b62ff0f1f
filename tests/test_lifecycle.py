"""Tests for stocko_core.lifecycle: exchange resolution, buy/sell transitions, watch list."""

import copy

import pytest

from data.fetcher import StaticQuoteFetcher
from stocko_core.contracts import Collections, Exchange, Order, Position
from stocko_core.errors import InvalidExchange, InvalidShareQuantity, ProviderError
from stocko_core.ledger import compute_metrics
from stocko_core.lifecycle import add_to_watchlist, apply_order, parse_exchange, resolve_symbol


class TestExchange:
    @pytest.mark.parametrize(
        "code, exchange",
        [("tsx", Exchange.TSX), ("TSXV", Exchange.TSXV), ("Nyse", Exchange.NYSE), (None, Exchange.NYSE)],
    )
    def test_parse(self, code, exchange):
        assert parse_exchange(code) is exchange

    def test_unknown_code(self):
        with pytest.raises(InvalidExchange, match="lse"):
            parse_exchange("lse")

    @pytest.mark.parametrize(
        "code, expected",
        [("tsx", "SHOP.TO"), ("tsxv", "SHOP.V"), ("nyse", "SHOP"), (None, "SHOP")],
    )
    def test_resolve_symbol_suffix(self, code, expected):
        symbol, _ = resolve_symbol("shop", code)
        assert symbol == expected


class TestBuy:
    def test_first_buy_opens_position(self):
        c = Collections()
        outcome = apply_order(c, "aapl", None, 10, 5.0)
        assert outcome.opened is True
        assert outcome.archived is False
        assert list(c.portfolio) == ["AAPL"]
        pos = c.portfolio["AAPL"]
        assert pos.symbol == "AAPL"
        assert pos.exchange is Exchange.NYSE
        assert pos.orders == [Order(10, 5.0)]

    def test_second_buy_appends(self):
        c = Collections()
        apply_order(c, "AAPL", None, 10, 5.0)
        outcome = apply_order(c, "AAPL", None, 10, 7.0)
        assert outcome.opened is False
        assert c.portfolio["AAPL"].orders == [Order(10, 5.0), Order(10, 7.0)]
        assert compute_metrics(c.portfolio["AAPL"].orders).average_price == pytest.approx(6.0)

    def test_exchange_suffix_is_part_of_key(self):
        c = Collections()
        apply_order(c, "shop", "tsx", 5, 90.0)
        assert "SHOP.TO" in c.portfolio
        assert c.portfolio["SHOP.TO"].exchange is Exchange.TSX

    def test_invalid_exchange_leaves_collections_untouched(self):
        c = Collections()
        with pytest.raises(InvalidExchange):
            apply_order(c, "shop", "xyz", 5, 90.0)
        assert c == Collections()

    def test_zero_shares_rejected(self):
        c = Collections()
        with pytest.raises(ValueError):
            apply_order(c, "AAPL", None, 0, 5.0)
        assert c.portfolio == {}


class TestSell:
    def test_partial_sell_stays_in_portfolio(self):
        c = Collections()
        apply_order(c, "AAPL", None, 10, 5.0)
        outcome = apply_order(c, "AAPL", None, -4, 8.0)
        assert outcome.archived is False
        assert c.archive == {}
        assert compute_metrics(c.portfolio["AAPL"].orders).total_shares == 6

    def test_full_sell_moves_to_archive(self):
        c = Collections()
        apply_order(c, "AAPL", None, 10, 5.0)
        outcome = apply_order(c, "AAPL", None, -10, 8.0)
        assert outcome.archived is True
        assert "AAPL" not in c.portfolio
        archived = c.archive["AAPL"]
        assert archived.orders == [Order(10, 5.0), Order(-10, 8.0)]
        m = compute_metrics(archived.orders)
        assert m.total_spent == pytest.approx(50.0)
        assert m.total_sell == pytest.approx(80.0)
        assert m.realized_gain == pytest.approx(30.0)
        assert m.realized_gain_pct == pytest.approx(0.6)

    def test_oversell_raises_and_does_not_mutate(self):
        c = Collections()
        apply_order(c, "AAPL", None, 10, 5.0)
        before = copy.deepcopy(c)
        with pytest.raises(InvalidShareQuantity) as excinfo:
            apply_order(c, "AAPL", None, -11, 8.0)
        assert excinfo.value.symbol == "AAPL"
        assert excinfo.value.shares == 11
        assert "You do not have 11 shares of AAPL" in str(excinfo.value)
        assert c == before

    def test_sell_without_position_raises(self):
        c = Collections(watchlist={"AAPL": Position("AAPL")})
        before = copy.deepcopy(c)
        with pytest.raises(InvalidShareQuantity) as excinfo:
            apply_order(c, "aapl", None, -1, 8.0)
        assert excinfo.value.shares == 1
        assert c == before

    def test_sell_of_archived_symbol_raises(self):
        c = Collections()
        apply_order(c, "AAPL", None, 10, 5.0)
        apply_order(c, "AAPL", None, -10, 8.0)
        with pytest.raises(InvalidShareQuantity):
            apply_order(c, "AAPL", None, -1, 8.0)

    def test_rebuy_after_archive_opens_fresh_position(self):
        c = Collections()
        apply_order(c, "AAPL", None, 10, 5.0)
        apply_order(c, "AAPL", None, -10, 8.0)
        outcome = apply_order(c, "AAPL", None, 3, 9.0)
        assert outcome.opened is True
        assert c.portfolio["AAPL"].orders == [Order(3, 9.0)]
        assert len(c.archive["AAPL"].orders) == 2

    def test_second_close_replaces_archived_entry(self):
        c = Collections()
        apply_order(c, "AAPL", None, 10, 5.0)
        apply_order(c, "AAPL", None, -10, 8.0)
        apply_order(c, "AAPL", None, 3, 9.0)
        outcome = apply_order(c, "AAPL", None, -3, 7.0)
        assert outcome.archived is True
        assert list(c.archive) == ["AAPL"]
        assert c.archive["AAPL"].orders == [Order(3, 9.0), Order(-3, 7.0)]

    def test_previous_position_object_not_mutated(self):
        c = Collections()
        apply_order(c, "AAPL", None, 10, 5.0)
        held = c.portfolio["AAPL"]
        apply_order(c, "AAPL", None, 5, 6.0)
        assert held.orders == [Order(10, 5.0)]


class TestWatch:
    def test_adds_empty_position(self, fetcher: StaticQuoteFetcher):
        c = Collections()
        pos = add_to_watchlist(c, "shop", "tsx", fetcher.fetch_daily)
        assert pos.symbol == "SHOP.TO"
        assert c.watchlist["SHOP.TO"].orders == []
        assert c.watchlist["SHOP.TO"].exchange is Exchange.TSX
        assert fetcher.calls == ["SHOP.TO"]

    def test_overwrites_existing_entry(self, fetcher: StaticQuoteFetcher):
        c = Collections(watchlist={"AAPL": Position("AAPL", Exchange.TSX)})
        add_to_watchlist(c, "aapl", None, fetcher.fetch_daily)
        assert c.watchlist["AAPL"].exchange is Exchange.NYSE

    def test_independent_of_portfolio(self, fetcher: StaticQuoteFetcher):
        c = Collections()
        apply_order(c, "AAPL", None, 1, 1.0)
        add_to_watchlist(c, "AAPL", None, fetcher.fetch_daily)
        assert "AAPL" in c.portfolio
        assert "AAPL" in c.watchlist

    def test_fetch_failure_adds_nothing(self, fetcher: StaticQuoteFetcher):
        c = Collections()
        with pytest.raises(ProviderError):
            add_to_watchlist(c, "NOPE", None, fetcher.fetch_daily)
        assert c.watchlist == {}

    def test_invalid_exchange_skips_fetch(self, fetcher: StaticQuoteFetcher):
        c = Collections()
        with pytest.raises(InvalidExchange):
            add_to_watchlist(c, "AAPL", "moon", fetcher.fetch_daily)
        assert fetcher.calls == []

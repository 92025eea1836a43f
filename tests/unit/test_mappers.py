"""
Unit Tests for per-endpoint payload mappers

Tests:
- Balances, markets, depth, open order ids, created order id, market trades
- Every shape mismatch or unparseable number is a DecodeError
"""

import dataclasses
import os
import sys
from datetime import datetime
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from cryptsy.envelope import decode_envelope
from cryptsy.errors import DecodeError
from cryptsy.mappers import (
    map_balances,
    map_created_order_id,
    map_depth,
    map_market_trades,
    map_markets,
    map_order_ids,
)
from cryptsy.models import Balance, Market, MarketKey, Order, OrderBook, Trade


# =============================================================================
# Balances
# =============================================================================

class TestMapBalances:

    def test_documented_example(self) -> None:
        envelope = decode_envelope(
            '{"Success":"1","Error":"","Return":'
            '{"balances_available":{"BTC":"1.50000000","LTC":"0"}}}'
        )
        balances = map_balances(envelope.payload)

        assert balances == {
            "BTC": Balance(name="BTC", available=Decimal("1.5")),
            "LTC": Balance(name="LTC", available=Decimal("0")),
        }
        assert balances["BTC"].available == 1.5

    def test_absent_currency_is_absent(self) -> None:
        balances = map_balances({"balances_available": {"BTC": "1"}})
        assert "DOGE" not in balances

    def test_empty_list_means_no_balances(self) -> None:
        assert map_balances({"balances_available": []}) == {}

    def test_other_category(self) -> None:
        payload = {"balances_available": {}, "balances_hold": {"BTC": "0.25"}}
        assert map_balances(payload, category="balances_hold")["BTC"].available == Decimal("0.25")

    @pytest.mark.parametrize("payload", [
        None,
        "x",
        {},
        {"balances_available": "1"},
        {"balances_available": {"BTC": "abc"}},
        {"balances_available": {"BTC": None}},
        {"balances_available": {"BTC": "\u0661\u0662"}},
    ])
    def test_bad_payloads_raise(self, payload) -> None:
        with pytest.raises(DecodeError):
            map_balances(payload)


# =============================================================================
# Markets
# =============================================================================

LTC_BTC = {
    "marketid": "3",
    "label": "LTC/BTC",
    "primary_currency_code": "LTC",
    "primary_currency_name": "LiteCoin",
    "secondary_currency_code": "BTC",
    "secondary_currency_name": "BitCoin",
    "current_volume": "12.5",
}


class TestMapMarkets:

    def test_market_fields(self) -> None:
        markets = map_markets([LTC_BTC])
        key = MarketKey("LTC", "BTC", False)

        assert list(markets) == [key]
        market = markets[key]
        assert market == Market(
            market_id=3,
            label="LTC/BTC",
            primary_code="LTC",
            primary_name="LiteCoin",
            secondary_code="BTC",
            secondary_name="BitCoin",
            volume=Decimal("12.5"),
        )
        assert market.key == key

    def test_fees_are_unset(self) -> None:
        market = map_markets([LTC_BTC])[MarketKey("LTC", "BTC")]
        assert market.buy_fee is None
        assert market.sell_fee is None

    def test_market_fields_match_payload_fields(self) -> None:
        names = {f.name for f in dataclasses.fields(Market)}
        assert names == {
            "market_id", "label", "primary_code", "primary_name",
            "secondary_code", "secondary_name", "buy_fee", "sell_fee", "volume",
        }

    def test_volume_optional(self) -> None:
        entry = {k: v for k, v in LTC_BTC.items() if k != "current_volume"}
        assert map_markets([entry])[MarketKey("LTC", "BTC")].volume is None

    def test_empty_list(self) -> None:
        assert map_markets([]) == {}

    @pytest.mark.parametrize("change", [
        {"marketid": "three"},
        {"marketid": None},
        {"primary_currency_code": 7},
        {"label": ["x"]},
        {"label": None},
        {"primary_currency_name": None},
        {"current_volume": "lots"},
    ])
    def test_bad_fields_raise(self, change) -> None:
        entry = dict(LTC_BTC, **change)
        with pytest.raises(DecodeError):
            map_markets([entry])

    @pytest.mark.parametrize("missing", [
        "marketid",
        "label",
        "primary_currency_code",
        "primary_currency_name",
        "secondary_currency_code",
        "secondary_currency_name",
    ])
    def test_missing_required_fields_raise(self, missing) -> None:
        entry = {k: v for k, v in LTC_BTC.items() if k != missing}
        with pytest.raises(DecodeError):
            map_markets([entry])

    def test_codes_only_entry_is_rejected(self) -> None:
        entry = {"marketid": "3", "primary_currency_code": "LTC", "secondary_currency_code": "BTC"}
        with pytest.raises(DecodeError):
            map_markets([entry])

    @pytest.mark.parametrize("payload", [None, {}, {"a": 1}, ["x"]])
    def test_bad_shapes_raise(self, payload) -> None:
        with pytest.raises(DecodeError):
            map_markets(payload)


# =============================================================================
# Depth
# =============================================================================

class TestMapDepth:

    def test_documented_example(self) -> None:
        book = map_depth({"buy": [["100.5", "2.0"]], "sell": [["101.0", "1.0"]]})

        assert book == OrderBook(
            buy=(Order(Decimal("100.5"), Decimal("2.0")),),
            sell=(Order(Decimal("101.0"), Decimal("1.0")),),
        )

    def test_venue_order_is_preserved(self) -> None:
        book = map_depth({
            "sell": [["3", "1"], ["1", "1"], ["2", "1"]],
            "buy": [["0.5", "1"], ["0.9", "1"]],
        })
        assert [o.price for o in book.sell] == [Decimal("3"), Decimal("1"), Decimal("2")]
        assert [o.price for o in book.buy] == [Decimal("0.5"), Decimal("0.9")]

    def test_missing_side_is_empty(self) -> None:
        book = map_depth({"sell": [["1", "2"]]})
        assert book.buy == ()
        assert len(book.sell) == 1

    def test_empty_array_payload_is_empty_book(self) -> None:
        assert map_depth([]) == OrderBook()

    @pytest.mark.parametrize("payload", [
        None,
        "x",
        {"buy": "100"},
        {"buy": [["100"]]},
        {"buy": [["100", "1", "2"]]},
        {"buy": [{"price": "1", "quantity": "1"}]},
        {"sell": [["abc", "1"]]},
        {"sell": [["1", ""]]},
    ])
    def test_bad_payloads_raise(self, payload) -> None:
        with pytest.raises(DecodeError):
            map_depth(payload)


# =============================================================================
# Orders
# =============================================================================

class TestMapOrderIds:

    def test_collects_ids_as_set(self) -> None:
        payload = [
            {"orderid": "11", "marketid": "3", "quantity": "1"},
            {"orderid": "12", "marketid": "5"},
            {"orderid": "11"},
        ]
        assert map_order_ids(payload) == frozenset({11, 12})

    def test_empty(self) -> None:
        assert map_order_ids([]) == frozenset()

    @pytest.mark.parametrize("payload", [None, {}, [{"id": "1"}], [{"orderid": "x"}], ["11"]])
    def test_bad_payloads_raise(self, payload) -> None:
        with pytest.raises(DecodeError):
            map_order_ids(payload)


class TestMapCreatedOrderId:

    def test_top_level_orderid(self) -> None:
        envelope = decode_envelope('{"success":"1","orderid":"4242","moreinfo":"Order placed"}')
        assert map_created_order_id(envelope) == 4242

    def test_orderid_inside_return(self) -> None:
        envelope = decode_envelope('{"success":"1","return":{"orderid":"77"}}')
        assert map_created_order_id(envelope) == 77

    @pytest.mark.parametrize("body", [
        '{"success":"1"}',
        '{"success":"1","orderid":"x"}',
        '{"success":"1","return":{"id":"1"}}',
    ])
    def test_missing_or_bad_id_raises(self, body: str) -> None:
        with pytest.raises(DecodeError):
            map_created_order_id(decode_envelope(body))


# =============================================================================
# Market trades
# =============================================================================

class TestMapMarketTrades:

    def test_trades(self) -> None:
        payload = [
            {"tradeid": "9", "datetime": "2014-01-02 03:04:05", "tradeprice": "0.025",
             "quantity": "4", "total": "0.1", "initiate_ordertype": "Buy"},
        ]
        assert map_market_trades(payload) == (
            Trade(datetime(2014, 1, 2, 3, 4, 5), Decimal("0.025"), Decimal("4")),
        )

    @pytest.mark.parametrize("entry", [
        {"datetime": "yesterday", "tradeprice": "1", "quantity": "1"},
        {"tradeprice": "1", "quantity": "1"},
        {"datetime": "2014-01-02 03:04:05", "quantity": "1"},
        {"datetime": "2014-01-02 03:04:05", "tradeprice": "x", "quantity": "1"},
    ])
    def test_bad_entries_raise(self, entry) -> None:
        with pytest.raises(DecodeError):
            map_market_trades([entry])

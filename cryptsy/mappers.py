# ============================================================================
# Cryptsy Private API Client v1.0.0
# Domain Mappers - Payload shape checks per endpoint
# ============================================================================
#
# Purpose: Turn the loosely typed `return` payload of each endpoint into
#          typed domain objects
#
# Rules:
#   - Every shape is checked explicitly; a mismatch is CRYPTSY-DEC-001
#   - Every number goes through DecimalGateway; no silent zero defaults
#   - An empty JSON array stands in for an empty object (PHP json_encode)
#
# ============================================================================

import logging
from datetime import datetime
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple

from cryptsy.decimal_gateway import DecimalGateway
from cryptsy.envelope import Envelope
from cryptsy.errors import DecodeError, ErrorCode
from cryptsy.models import Balance, Market, MarketKey, Order, OrderBook, Trade

logger = logging.getLogger(__name__)

_gateway = DecimalGateway()

TRADE_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def _shape_error(what: str, expected: str, value: Any) -> DecodeError:
    logger.error(
        f"[{ErrorCode.DECODE}] Unexpected payload shape | "
        f"field={what} | expected={expected} | got={type(value).__name__}"
    )
    return DecodeError(
        f"{what}: expected {expected}, got {type(value).__name__}",
        payload=repr(value)[:200]
    )


def _as_mapping(value: Any, what: str) -> Mapping[str, Any]:
    if isinstance(value, dict):
        return value
    if isinstance(value, list) and not value:
        return {}
    raise _shape_error(what, "object", value)


def _as_list(value: Any, what: str) -> List[Any]:
    if isinstance(value, list):
        return value
    raise _shape_error(what, "array", value)


def _required_str(entry: Mapping[str, Any], name: str, what: str) -> str:
    if name not in entry:
        raise DecodeError(f"{what}: missing field '{name}'", payload=repr(entry)[:200])
    value = entry[name]
    if not isinstance(value, str):
        raise _shape_error(f"{what}.{name}", "string", value)
    return value


# ============================================================================
# Balances (getinfo)
# ============================================================================

def map_balances(payload: Any, category: str = "balances_available") -> Dict[str, Balance]:
    """
    Map getinfo's ``{category: {code: "amount"}}`` payload to balances.

    A currency absent from the map is absent from the result, not zero.

    Raises:
        DecodeError: If the category is missing or an amount does not parse
    """
    info = _as_mapping(payload, "getinfo")
    if category not in info:
        raise DecodeError(f"getinfo: missing '{category}'", payload=repr(info)[:200])

    amounts = _as_mapping(info[category], f"getinfo.{category}")

    balances = {}
    for code, amount in amounts.items():
        balances[code] = Balance(
            name=code,
            available=_gateway.to_decimal(amount, field_name=f"{category}.{code}")
        )
    return balances


# ============================================================================
# Markets (getmarkets)
# ============================================================================

def map_markets(payload: Any) -> Dict[MarketKey, Market]:
    """
    Map getmarkets' list of string maps to markets keyed by MarketKey.

    Fee rates are not part of this payload and stay unset. ``current_volume``
    is parsed when present.

    Raises:
        DecodeError: On a non-list payload, a missing code, name, label or
            marketid, or a field that does not parse
    """
    markets = {}
    for index, entry in enumerate(_as_list(payload, "getmarkets")):
        what = f"getmarkets[{index}]"
        if not isinstance(entry, dict):
            raise _shape_error(what, "object", entry)

        primary_code = _required_str(entry, "primary_currency_code", what)
        secondary_code = _required_str(entry, "secondary_currency_code", what)
        if "marketid" not in entry:
            raise DecodeError(f"{what}: missing field 'marketid'", payload=repr(entry)[:200])

        volume = None
        if entry.get("current_volume") is not None:
            volume = _gateway.to_decimal(entry["current_volume"], field_name=f"{what}.current_volume")

        market = Market(
            market_id=_gateway.to_int(entry["marketid"], field_name=f"{what}.marketid"),
            label=_required_str(entry, "label", what),
            primary_code=primary_code,
            primary_name=_required_str(entry, "primary_currency_name", what),
            secondary_code=secondary_code,
            secondary_name=_required_str(entry, "secondary_currency_name", what),
            volume=volume,
        )
        markets[market.key] = market
    return markets


# ============================================================================
# Order book depth (depth)
# ============================================================================

def _map_side(entries: Any, side: str) -> Tuple[Order, ...]:
    if entries is None:
        return ()
    orders = []
    for index, pair in enumerate(_as_list(entries, f"depth.{side}")):
        what = f"depth.{side}[{index}]"
        if not isinstance(pair, list) or len(pair) != 2:
            raise _shape_error(what, "[price, quantity]", pair)
        orders.append(Order(
            price=_gateway.to_decimal(pair[0], field_name=f"{what}.price"),
            quantity=_gateway.to_decimal(pair[1], field_name=f"{what}.quantity"),
        ))
    return tuple(orders)


def map_depth(payload: Any) -> OrderBook:
    """
    Map ``{"buy": [[price, qty], ...], "sell": [...]}`` to an OrderBook.

    Venue ordering is preserved. A side absent from the payload is empty.
    """
    depth = _as_mapping(payload, "depth")
    return OrderBook(
        buy=_map_side(depth.get("buy"), "buy"),
        sell=_map_side(depth.get("sell"), "sell"),
    )


# ============================================================================
# Orders (allmyorders, createorder)
# ============================================================================

def map_order_ids(payload: Any) -> FrozenSet[int]:
    """Collect the ``orderid`` of every open order."""
    order_ids = set()
    for index, entry in enumerate(_as_list(payload, "allmyorders")):
        what = f"allmyorders[{index}]"
        if not isinstance(entry, dict):
            raise _shape_error(what, "object", entry)
        if "orderid" not in entry:
            raise DecodeError(f"{what}: missing field 'orderid'", payload=repr(entry)[:200])
        order_ids.add(_gateway.to_int(entry["orderid"], field_name=f"{what}.orderid"))
    return frozenset(order_ids)


def map_created_order_id(envelope: Envelope) -> int:
    """
    Extract the id assigned by createorder.

    The venue puts ``orderid`` next to ``success`` in the envelope; an
    ``orderid`` inside ``return`` is accepted too.
    """
    order_id: Optional[Any] = envelope.get("orderid")
    if order_id is None and isinstance(envelope.payload, dict):
        order_id = envelope.payload.get("orderid")
    if order_id is None:
        logger.error(f"[{ErrorCode.DECODE}] createorder response has no orderid")
        raise DecodeError("createorder: missing field 'orderid'")
    return _gateway.to_int(order_id, field_name="createorder.orderid")


# ============================================================================
# Trades (markettrades)
# ============================================================================

def map_market_trades(payload: Any) -> Tuple[Trade, ...]:
    """Map markettrades' list of trades, keeping venue order (newest first)."""
    trades = []
    for index, entry in enumerate(_as_list(payload, "markettrades")):
        what = f"markettrades[{index}]"
        if not isinstance(entry, dict):
            raise _shape_error(what, "object", entry)

        raw_time = _required_str(entry, "datetime", what)
        try:
            traded_at = datetime.strptime(raw_time, TRADE_TIME_FORMAT)
        except ValueError as e:
            raise DecodeError(
                f"{what}.datetime: cannot parse {raw_time!r}", payload=raw_time
            ) from e

        if "tradeprice" not in entry or "quantity" not in entry:
            raise DecodeError(f"{what}: missing tradeprice/quantity", payload=repr(entry)[:200])

        trades.append(Trade(
            time=traded_at,
            price=_gateway.to_decimal(entry["tradeprice"], field_name=f"{what}.tradeprice"),
            quantity=_gateway.to_decimal(entry["quantity"], field_name=f"{what}.quantity"),
        ))
    return tuple(trades)

# ============================================================================
# Cryptsy Private API Client v1.0.0
# Domain Models
# ============================================================================
#
# Purpose: Immutable value objects returned by the client
#
# All quantities and prices are decimal.Decimal parsed from the venue's
# decimal strings. Objects are frozen and compared by value.
#
# ============================================================================

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple

from cryptsy.errors import InvalidOrderTypeError


class ActionType(str, Enum):
    """Order side accepted by createorder."""
    BUY = "buy"
    SELL = "sell"

    @classmethod
    def parse(cls, value) -> "ActionType":
        """
        Coerce a string or ActionType into ActionType.

        Raises:
            InvalidOrderTypeError: If value is not exactly "buy" or "sell"
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidOrderTypeError(
                f"Order type must be one of {[a.value for a in cls]}, got {value!r}"
            ) from None


@dataclass(frozen=True)
class Balance:
    """Available balance for a single currency."""
    name: str
    available: Decimal


@dataclass(frozen=True)
class MarketKey:
    """
    Stable lookup key for a tradeable pair.

    Independent of the venue's numeric market id. ``reversed`` marks the
    same pair addressed in the opposite quote direction.
    """
    primary: str
    secondary: str
    reversed: bool = False

    def flipped(self) -> "MarketKey":
        """Key for the same pair quoted the other way round."""
        return MarketKey(self.secondary, self.primary, not self.reversed)


@dataclass(frozen=True)
class Market:
    """
    A tradeable pair as listed by getmarkets.

    buy_fee / sell_fee are normalized percentages (0.002 == 0.2%). getmarkets
    carries no fee fields, so they stay None unless a caller supplies them.
    """
    market_id: int
    label: str
    primary_code: str
    primary_name: str
    secondary_code: str
    secondary_name: str
    buy_fee: Optional[Decimal] = None
    sell_fee: Optional[Decimal] = None
    volume: Optional[Decimal] = None

    @property
    def key(self) -> MarketKey:
        return MarketKey(self.primary_code, self.secondary_code, False)


@dataclass(frozen=True)
class Order:
    """Order book entry. Side comes from the bucket it was decoded from."""
    price: Decimal
    quantity: Decimal


@dataclass(frozen=True)
class OrderBook:
    """Depth for one market, each side kept in the order the venue sent it."""
    buy: Tuple[Order, ...] = field(default_factory=tuple)
    sell: Tuple[Order, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Trade:
    """A recent trade on a market."""
    time: datetime
    price: Decimal
    quantity: Decimal


@dataclass(frozen=True)
class OrderAction:
    """Request to buy or sell ``quantity`` at ``price`` in ``market``."""
    market: MarketKey
    action: ActionType
    price: Decimal
    quantity: Decimal

    def __post_init__(self) -> None:
        # frozen: bypass __setattr__ to normalise the action
        object.__setattr__(self, "action", ActionType.parse(self.action))

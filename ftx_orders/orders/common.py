"""Domain value types shared by the order request descriptors."""
from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, NewType


OrderId = NewType("OrderId", int)


class Side(str, Enum):
    BUY = "buy"
    SELL = "sell"


class OrderType(str, Enum):
    MARKET = "market"
    LIMIT = "limit"
    STOP = "stop"
    TRAILING_STOP = "trailingStop"
    TAKE_PROFIT = "takeProfit"


class OrderStatus(str, Enum):
    """Lifecycle label reported by the exchange, never set by the client."""

    NEW = "new"
    OPEN = "open"
    CLOSED = "closed"
    # Conditional orders report these instead of open/closed.
    TRIGGERED = "triggered"
    CANCELLED = "cancelled"


TRIGGER_ORDER_TYPES = frozenset({OrderType.STOP, OrderType.TRAILING_STOP, OrderType.TAKE_PROFIT})


def to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def to_decimal(value: Any) -> Decimal:
    """Convert a JSON scalar to ``Decimal`` without going through binary float rounding."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Cannot interpret boolean {value!r} as a decimal.")
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"Invalid decimal value {value!r}.") from exc


def to_timestamp(value: datetime) -> int:
    """Integer Unix seconds; naive datetimes are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp())

"""Response shapes returned by the order endpoints."""
from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from .common import (
    TRIGGER_ORDER_TYPES,
    OrderId,
    OrderStatus,
    OrderType,
    Side,
    to_camel,
    to_decimal,
)


class OrderDecodeError(ValueError):
    """Raised when an order payload lacks a required field or carries an unknown enum value."""


class ResponseKind(Enum):
    ORDER = "order"
    ORDER_LIST = "order_list"
    TEXT = "text"


def _parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, (int, float, Decimal)):
        return datetime.fromtimestamp(float(value), tz=timezone.utc)
    parsed = datetime.fromisoformat(str(value))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_flag(value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"Expected a JSON boolean, got {value!r}.")
    return value


_REQUIRED = ("id", "market", "type", "side", "size", "status", "created_at")

_CONVERTERS = {
    "id": lambda v: OrderId(int(v)),
    "type": OrderType,
    "side": Side,
    "status": OrderStatus,
    "price": to_decimal,
    "size": to_decimal,
    "filled_size": to_decimal,
    "remaining_size": to_decimal,
    "avg_fill_price": to_decimal,
    "trigger_price": to_decimal,
    "order_price": to_decimal,
    "reduce_only": _parse_flag,
    "ioc": _parse_flag,
    "post_only": _parse_flag,
    "liquidation": _parse_flag,
    "retry_until_filled": _parse_flag,
    "created_at": _parse_datetime,
}


@dataclass(frozen=True)
class OrderInfo:
    id: OrderId
    market: str
    future: Optional[str]
    type: OrderType
    side: Side
    price: Optional[Decimal]  # null for new market orders
    size: Decimal
    reduce_only: Optional[bool]
    ioc: Optional[bool]
    post_only: Optional[bool]
    status: OrderStatus
    filled_size: Optional[Decimal]
    remaining_size: Optional[Decimal]
    avg_fill_price: Optional[Decimal]
    liquidation: Optional[bool]
    created_at: datetime
    client_id: Optional[str]
    retry_until_filled: Optional[bool]
    trigger_price: Optional[Decimal]
    order_price: Optional[Decimal]
    triggered_at: Optional[str]
    error: Optional[str]

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "OrderInfo":
        """Build from an exchange payload.

        Keys are matched by their camelCase wire name. Optional keys that are
        missing or null decode to ``None``; keys the model does not know about
        are ignored.
        """
        if not isinstance(payload, dict):
            raise OrderDecodeError(f"Expected an order object, got {type(payload).__name__}.")
        values: Dict[str, Any] = {}
        for f in fields(cls):
            raw = payload.get(to_camel(f.name))
            if raw is None:
                if f.name in _REQUIRED:
                    raise OrderDecodeError(f"Order payload is missing '{to_camel(f.name)}'.")
                values[f.name] = None
                continue
            converter = _CONVERTERS.get(f.name)
            try:
                values[f.name] = converter(raw) if converter else raw
            except (TypeError, ValueError) as exc:
                raise OrderDecodeError(f"Invalid value for '{to_camel(f.name)}': {raw!r}") from exc
        return cls(**values)

    @property
    def is_trigger_order(self) -> bool:
        return self.type in TRIGGER_ORDER_TYPES or self.trigger_price is not None

    @property
    def has_error(self) -> bool:
        return bool(self.error)


def decode_response(kind: ResponseKind, payload: Any) -> Any:
    if kind is ResponseKind.ORDER:
        return OrderInfo.from_dict(payload)
    if kind is ResponseKind.ORDER_LIST:
        if not isinstance(payload, list):
            raise OrderDecodeError(f"Expected a list of orders, got {type(payload).__name__}.")
        return [OrderInfo.from_dict(entry) for entry in payload]
    if not isinstance(payload, str):
        raise OrderDecodeError(f"Expected a confirmation message, got {type(payload).__name__}.")
    return payload

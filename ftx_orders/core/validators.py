"""Input validation helpers."""
from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from ..orders.common import OrderId, OrderType, Side, to_decimal


def normalize_market(market: str) -> str:
    if not market or not market.strip():
        raise ValueError("Market must be a non-empty string.")
    return market.strip().upper()


def validate_side(side: str | Side) -> Side:
    if isinstance(side, Side):
        return side
    try:
        return Side(str(side).strip().lower())
    except ValueError as exc:
        raise ValueError(f"Side must be buy or sell. Got '{side}'.") from exc


def validate_order_type(order_type: str | OrderType) -> OrderType:
    if isinstance(order_type, OrderType):
        return order_type
    lookup = {member.value.lower(): member for member in OrderType}
    lookup.update({member.name.lower(): member for member in OrderType})
    normalized = str(order_type).strip().lower().replace("-", "_")
    if normalized not in lookup:
        allowed = ", ".join(member.value for member in OrderType)
        raise ValueError(f"Order type must be one of {allowed}. Got '{order_type}'.")
    return lookup[normalized]


def _positive_decimal(value: Any, label: str) -> Decimal:
    try:
        number = to_decimal(value)
    except ValueError as exc:
        raise ValueError(f"{label} must be a number.") from exc
    if not number.is_finite() or number <= 0:
        raise ValueError(f"{label} must be greater than zero.")
    return number


def validate_size(size: Any) -> Decimal:
    return _positive_decimal(size, "Size")


def validate_price(price: Any | None) -> Decimal | None:
    if price is None:
        return None
    return _positive_decimal(price, "Price")


def validate_order_id(order_id: Any) -> OrderId:
    try:
        value = int(str(order_id))
    except ValueError as exc:
        raise ValueError(f"Order id must be an integer. Got '{order_id}'.") from exc
    if value <= 0:
        raise ValueError("Order id must be positive.")
    return OrderId(value)


def validate_client_id(client_id: str) -> str:
    if not client_id or not client_id.strip():
        raise ValueError("Client id must be a non-empty string.")
    return client_id.strip()


def validate_limit(limit: int | None) -> int | None:
    if limit is None:
        return None
    if int(limit) <= 0:
        raise ValueError("Limit must be a positive integer.")
    return int(limit)


def parse_datetime(value: str | int | None) -> datetime | None:
    """Accept Unix seconds or an ISO-8601 string; naive values are taken as UTC."""
    if value is None or value == "":
        return None
    text = str(value).strip()
    if text.lstrip("-").isdigit():
        return datetime.fromtimestamp(int(text), tz=timezone.utc)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise ValueError(f"Time must be Unix seconds or ISO-8601. Got '{value}'.") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed

"""Read-only order descriptors: open orders, single order lookups and history."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .base import GET, Request, optional, path_param, timestamp
from .common import OrderId, Side
from .models import ResponseKind


@dataclass(frozen=True)
class GetOpenOrders(Request):
    METHOD = GET
    PATH = "/orders"
    OPTIMIZED_ACCESS_SUPPORTED = True
    RESPONSE = ResponseKind.ORDER_LIST

    market: Optional[str] = optional()

    @classmethod
    def all_market(cls) -> "GetOpenOrders":
        return cls()

    @classmethod
    def with_market(cls, market: str) -> "GetOpenOrders":
        return cls(market=market)


@dataclass(frozen=True)
class GetOrder(Request):
    METHOD = GET
    PATH = "/orders/{id}"
    RESPONSE = ResponseKind.ORDER

    id: OrderId = path_param()


@dataclass(frozen=True)
class GetOrderByClientId(Request):
    METHOD = GET
    PATH = "/orders/by_client_id/{client_id}"
    RESPONSE = ResponseKind.ORDER

    client_id: str = path_param()


@dataclass(frozen=True)
class GetOrderHistory(Request):
    """Filled and cancelled orders, newest first. Every filter is optional."""

    METHOD = GET
    PATH = "/orders/history"
    RESPONSE = ResponseKind.ORDER_LIST

    market: Optional[str] = optional()
    side: Optional[Side] = optional()
    limit: Optional[int] = optional()
    start_time: Optional[datetime] = timestamp()
    end_time: Optional[datetime] = timestamp()

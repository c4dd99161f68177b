"""Cancel descriptors. The exchange answers each with a plain confirmation message."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .base import DELETE, Request, optional, path_param
from .common import OrderId, Side
from .models import ResponseKind


@dataclass(frozen=True)
class CancelOrder(Request):
    METHOD = DELETE
    PATH = "/orders/{id}"
    OPTIMIZED_ACCESS_SUPPORTED = True
    RESPONSE = ResponseKind.TEXT

    id: OrderId = path_param()


@dataclass(frozen=True)
class CancelTriggerOrder(Request):
    METHOD = DELETE
    PATH = "/conditional_orders/{id}"
    RESPONSE = ResponseKind.TEXT

    id: OrderId = path_param()


@dataclass(frozen=True)
class CancelAllOrder(Request):
    METHOD = DELETE
    PATH = "/orders"
    RESPONSE = ResponseKind.TEXT

    market: Optional[str] = optional()
    side: Optional[Side] = optional()
    conditional_orders_only: Optional[bool] = optional()
    limit_orders_only: Optional[bool] = optional()

    @classmethod
    def with_market(cls, market: str) -> "CancelAllOrder":
        return cls(market=market)


@dataclass(frozen=True)
class CancelOrderByClientId(Request):
    METHOD = DELETE
    PATH = "/orders/by_client_id/{client_id}"
    OPTIMIZED_ACCESS_SUPPORTED = True
    RESPONSE = ResponseKind.TEXT

    client_id: str = path_param()

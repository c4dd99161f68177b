"""Order placement and modification descriptors."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from .base import POST, Request, nullable, optional, path_param, required
from .common import OrderId, OrderType, Side
from .models import ResponseKind


@dataclass(frozen=True)
class PlaceOrder(Request):
    """Market or limit order.

    ``price`` is sent even when it is ``None``: the exchange only accepts a
    market order when the key is present with a null value.
    """

    METHOD = POST
    PATH = "/orders"
    OPTIMIZED_ACCESS_SUPPORTED = True
    RESPONSE = ResponseKind.ORDER

    market: str = required()
    side: Side = required()
    price: Optional[Decimal] = nullable()
    type: OrderType = required()
    size: Decimal = required()
    reduce_only: bool = required(default=False)
    ioc: bool = required(default=False)
    post_only: bool = required(default=False)
    client_id: Optional[str] = optional()
    reject_on_price_band: bool = required(default=False)

    @classmethod
    def market_order(
        cls,
        market: str,
        side: Side,
        size: Decimal,
        reduce_only: bool = False,
        ioc: bool = False,
        client_id: Optional[str] = None,
    ) -> "PlaceOrder":
        return cls(
            market=market,
            side=side,
            price=None,
            type=OrderType.MARKET,
            size=size,
            reduce_only=reduce_only,
            ioc=ioc,
            client_id=client_id,
        )

    @classmethod
    def limit_order(
        cls,
        market: str,
        side: Side,
        price: Decimal,
        size: Decimal,
        reduce_only: bool = False,
        ioc: bool = False,
        post_only: bool = False,
        client_id: Optional[str] = None,
        reject_on_price_band: bool = False,
    ) -> "PlaceOrder":
        return cls(
            market=market,
            side=side,
            price=price,
            type=OrderType.LIMIT,
            size=size,
            reduce_only=reduce_only,
            ioc=ioc,
            post_only=post_only,
            client_id=client_id,
            reject_on_price_band=reject_on_price_band,
        )


@dataclass(frozen=True)
class ModifyOrder(Request):
    METHOD = POST
    PATH = "/orders/{id}/modify"
    RESPONSE = ResponseKind.ORDER

    id: OrderId = path_param()
    price: Optional[Decimal] = optional()
    size: Optional[Decimal] = optional()
    client_id: Optional[str] = optional()


@dataclass(frozen=True)
class ModifyOrderByClientId(Request):
    METHOD = POST
    PATH = "/orders/by_client_id/{client_id}/modify"
    RESPONSE = ResponseKind.ORDER

    client_id: str = path_param()
    price: Optional[Decimal] = optional()
    size: Optional[Decimal] = optional()


@dataclass(frozen=True)
class PlaceTriggerOrder(Request):
    """Conditional order (stop, trailing stop or take profit).

    ``order_price`` turns a triggered stop/take-profit into a limit order;
    ``trail_value`` only applies to trailing stops.
    """

    METHOD = POST
    PATH = "/conditional_orders"
    RESPONSE = ResponseKind.ORDER

    market: str = required()
    side: Side = required()
    size: Decimal = required()
    type: OrderType = required()
    trigger_price: Decimal = required()
    reduce_only: Optional[bool] = optional()
    retry_until_filled: Optional[bool] = optional()
    order_price: Optional[Decimal] = optional()
    trail_value: Optional[Decimal] = optional()

"""High level order desk facade used by the CLI."""
from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from .config import FtxConfig
from .rest_client import FtxApiError, FtxRestClient
from .validators import (
    normalize_market,
    validate_order_id,
    validate_order_type,
    validate_price,
    validate_side,
    validate_size,
)
from ..orders.base import OrderResult, Request
from ..orders.cancellation import CancelAllOrder, CancelOrder
from ..orders.common import Side, TRIGGER_ORDER_TYPES, to_decimal
from ..orders.models import OrderDecodeError
from ..orders.placement import PlaceOrder, PlaceTriggerOrder
from ..orders.queries import GetOpenOrders

LOGGER = logging.getLogger(__name__)


class OrderDesk:
    """Validates caller input, builds descriptors and runs them through the REST client."""

    def __init__(self, client: FtxRestClient):
        self._client = client

    @classmethod
    def from_config(cls, config: FtxConfig) -> "OrderDesk":
        return cls(FtxRestClient.from_config(config))

    def execute(self, request: Request) -> OrderResult:
        name = type(request).__name__
        LOGGER.info("Submitting %s %s %s", name, request.method(), request.path())
        try:
            raw = self._client.request_raw(request)
            response = request.decode(raw)
        except (FtxApiError, OrderDecodeError, requests.RequestException) as exc:
            LOGGER.error("%s failed: %s", name, exc, exc_info=True)
            return OrderResult(
                request=request,
                response=None,
                raw_response=getattr(exc, "response", None),
                is_success=False,
                error_message=str(exc),
            )
        LOGGER.info("%s accepted: %s", name, raw)
        if getattr(response, "has_error", False):
            LOGGER.warning("%s returned an order carrying an exchange error: %s", name, response.error)
        return OrderResult(request=request, response=response, raw_response=raw, is_success=True)

    def place_market_order(
        self,
        market: str,
        side: str | Side,
        size: Any,
        reduce_only: bool = False,
        client_id: Optional[str] = None,
    ) -> OrderResult:
        request = PlaceOrder.market_order(
            market=normalize_market(market),
            side=validate_side(side),
            size=validate_size(size),
            reduce_only=reduce_only,
            client_id=client_id,
        )
        return self.execute(request)

    def place_limit_order(
        self,
        market: str,
        side: str | Side,
        size: Any,
        price: Any,
        post_only: bool = False,
        ioc: bool = False,
        reduce_only: bool = False,
        client_id: Optional[str] = None,
    ) -> OrderResult:
        validated_price = validate_price(price)
        if validated_price is None:
            raise ValueError("Price is required for limit orders.")
        request = PlaceOrder.limit_order(
            market=normalize_market(market),
            side=validate_side(side),
            price=validated_price,
            size=validate_size(size),
            reduce_only=reduce_only,
            ioc=ioc,
            post_only=post_only,
            client_id=client_id,
        )
        return self.execute(request)

    def place_trigger_order(
        self,
        market: str,
        side: str | Side,
        size: Any,
        order_type: str,
        trigger_price: Any,
        order_price: Any = None,
        trail_value: Any = None,
        reduce_only: Optional[bool] = None,
        retry_until_filled: Optional[bool] = None,
    ) -> OrderResult:
        validated_type = validate_order_type(order_type)
        if validated_type not in TRIGGER_ORDER_TYPES:
            raise ValueError(f"'{validated_type.value}' is not a trigger order type.")
        validated_trigger = validate_price(trigger_price)
        if validated_trigger is None:
            raise ValueError("Trigger price is required for trigger orders.")
        request = PlaceTriggerOrder(
            market=normalize_market(market),
            side=validate_side(side),
            size=validate_size(size),
            type=validated_type,
            trigger_price=validated_trigger,
            reduce_only=reduce_only,
            retry_until_filled=retry_until_filled,
            order_price=validate_price(order_price),
            trail_value=to_decimal(trail_value) if trail_value is not None else None,
        )
        return self.execute(request)

    def cancel_order(self, order_id: Any) -> OrderResult:
        return self.execute(CancelOrder(validate_order_id(order_id)))

    def cancel_all_orders(self, market: Optional[str] = None) -> OrderResult:
        if market:
            return self.execute(CancelAllOrder.with_market(normalize_market(market)))
        return self.execute(CancelAllOrder())

    def open_orders(self, market: Optional[str] = None) -> OrderResult:
        if market:
            return self.execute(GetOpenOrders.with_market(normalize_market(market)))
        return self.execute(GetOpenOrders.all_market())

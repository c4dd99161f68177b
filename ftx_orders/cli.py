"""Command line interface for the FTX order tools."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict, is_dataclass
from typing import Any, Dict

from .core.bot import OrderDesk
from .core.config import FtxConfig
from .core.logger import setup_logging
from .core.validators import (
    normalize_market,
    parse_datetime,
    validate_client_id,
    validate_limit,
    validate_order_id,
    validate_order_type,
    validate_price,
    validate_side,
    validate_size,
)
from .orders.base import OrderResult, Request, encode_value
from .orders.cancellation import CancelAllOrder, CancelOrder, CancelOrderByClientId, CancelTriggerOrder
from .orders.common import TRIGGER_ORDER_TYPES, to_decimal
from .orders.placement import ModifyOrder, ModifyOrderByClientId, PlaceOrder, PlaceTriggerOrder
from .orders.queries import GetOpenOrders, GetOrder, GetOrderByClientId, GetOrderHistory

LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ftx-orders",
        description="Place, modify, query and cancel FTX orders from the command line.",
    )
    parser.add_argument(
        "--log-file",
        default="ftx_orders.log",
        help="Path to write log output (default: ftx_orders.log)",
    )
    parser.add_argument(
        "--raw-json",
        action="store_true",
        help="Print raw JSON responses instead of the human-friendly summary.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the request that would be sent without contacting the exchange.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    open_parser = subparsers.add_parser("open", help="List open orders")
    open_parser.add_argument("--market", help="Only orders for this market, e.g. BTC-PERP")

    market_parser = subparsers.add_parser("market", help="Place a market order")
    _add_common_order_arguments(market_parser)
    market_parser.add_argument("--ioc", action="store_true", help="Immediate-or-cancel")

    limit_parser = subparsers.add_parser("limit", help="Place a limit order")
    _add_common_order_arguments(limit_parser)
    limit_parser.add_argument("price", help="Limit price")
    limit_parser.add_argument("--ioc", action="store_true", help="Immediate-or-cancel")
    limit_parser.add_argument("--post-only", action="store_true", help="Reject if the order would take liquidity")
    limit_parser.add_argument(
        "--reject-on-price-band",
        action="store_true",
        help="Reject instead of clamping when the price is outside the allowed band",
    )

    trigger_parser = subparsers.add_parser("trigger", help="Place a stop, trailing stop or take profit order")
    trigger_parser.add_argument("market", help="Market name, e.g. BTC-PERP")
    trigger_parser.add_argument("side", help="Order side buy or sell")
    trigger_parser.add_argument("size", help="Order size")
    trigger_parser.add_argument("type", help="stop, trailingStop or takeProfit")
    trigger_parser.add_argument("trigger_price", help="Price that activates the order")
    trigger_parser.add_argument("--order-price", help="Limit price once triggered (market if omitted)")
    trigger_parser.add_argument("--trail-value", help="Trail distance for trailing stops")
    trigger_parser.add_argument("--reduce-only", action="store_true", default=None)
    trigger_parser.add_argument("--retry-until-filled", action="store_true", default=None)

    modify_parser = subparsers.add_parser("modify", help="Modify an order by id")
    modify_parser.add_argument("order_id", help="Exchange order id")
    _add_modify_arguments(modify_parser)
    modify_parser.add_argument("--client-id", help="New client id for the replacement order")

    modify_client_parser = subparsers.add_parser("modify-client", help="Modify an order by client id")
    modify_client_parser.add_argument("client_id", help="Client-assigned order id")
    _add_modify_arguments(modify_client_parser)

    get_parser = subparsers.add_parser("get", help="Fetch an order by id")
    get_parser.add_argument("order_id", help="Exchange order id")

    get_client_parser = subparsers.add_parser("get-client", help="Fetch an order by client id")
    get_client_parser.add_argument("client_id", help="Client-assigned order id")

    cancel_parser = subparsers.add_parser("cancel", help="Cancel an order by id")
    cancel_parser.add_argument("order_id", help="Exchange order id")

    cancel_trigger_parser = subparsers.add_parser("cancel-trigger", help="Cancel a trigger order by id")
    cancel_trigger_parser.add_argument("order_id", help="Exchange trigger order id")

    cancel_client_parser = subparsers.add_parser("cancel-client", help="Cancel an order by client id")
    cancel_client_parser.add_argument("client_id", help="Client-assigned order id")

    cancel_all_parser = subparsers.add_parser("cancel-all", help="Cancel all matching orders")
    cancel_all_parser.add_argument("--market", help="Only orders for this market")
    cancel_all_parser.add_argument("--side", help="Only buy or sell orders")
    cancel_all_parser.add_argument(
        "--conditional-only", action="store_true", default=None, help="Only trigger orders"
    )
    cancel_all_parser.add_argument(
        "--limit-only", action="store_true", default=None, help="Only limit orders"
    )

    history_parser = subparsers.add_parser("history", help="Show order history")
    history_parser.add_argument("--market", help="Only orders for this market")
    history_parser.add_argument("--side", help="Only buy or sell orders")
    history_parser.add_argument("--limit", type=int, help="Maximum number of orders")
    history_parser.add_argument("--start", help="Start time (Unix seconds or ISO-8601)")
    history_parser.add_argument("--end", help="End time (Unix seconds or ISO-8601)")

    return parser


def _add_common_order_arguments(sub_parser: argparse.ArgumentParser) -> None:
    sub_parser.add_argument("market", help="Market name, e.g. BTC-PERP")
    sub_parser.add_argument("side", help="Order side buy or sell")
    sub_parser.add_argument("size", help="Order size (base asset amount)")
    sub_parser.add_argument("--reduce-only", action="store_true", help="Only reduce an existing position")
    sub_parser.add_argument("--client-id", help="Client-assigned order id")


def _add_modify_arguments(sub_parser: argparse.ArgumentParser) -> None:
    sub_parser.add_argument("--price", help="New price")
    sub_parser.add_argument("--size", help="New size")


def build_request(args: argparse.Namespace) -> Request:
    """Validate parsed arguments and turn them into an order descriptor."""
    command = args.command
    if command == "open":
        if args.market:
            return GetOpenOrders.with_market(normalize_market(args.market))
        return GetOpenOrders.all_market()
    if command == "market":
        return PlaceOrder.market_order(
            market=normalize_market(args.market),
            side=validate_side(args.side),
            size=validate_size(args.size),
            reduce_only=args.reduce_only,
            ioc=args.ioc,
            client_id=_optional_client_id(args.client_id),
        )
    if command == "limit":
        return PlaceOrder.limit_order(
            market=normalize_market(args.market),
            side=validate_side(args.side),
            price=validate_price(args.price),
            size=validate_size(args.size),
            reduce_only=args.reduce_only,
            ioc=args.ioc,
            post_only=args.post_only,
            client_id=_optional_client_id(args.client_id),
            reject_on_price_band=args.reject_on_price_band,
        )
    if command == "trigger":
        order_type = validate_order_type(args.type)
        if order_type not in TRIGGER_ORDER_TYPES:
            raise ValueError(f"'{order_type.value}' is not a trigger order type.")
        return PlaceTriggerOrder(
            market=normalize_market(args.market),
            side=validate_side(args.side),
            size=validate_size(args.size),
            type=order_type,
            trigger_price=validate_price(args.trigger_price),
            reduce_only=args.reduce_only,
            retry_until_filled=args.retry_until_filled,
            order_price=validate_price(args.order_price),
            trail_value=to_decimal(args.trail_value) if args.trail_value is not None else None,
        )
    if command == "modify":
        return ModifyOrder(
            id=validate_order_id(args.order_id),
            price=validate_price(args.price),
            size=validate_size(args.size) if args.size is not None else None,
            client_id=_optional_client_id(args.client_id),
        )
    if command == "modify-client":
        return ModifyOrderByClientId(
            client_id=validate_client_id(args.client_id),
            price=validate_price(args.price),
            size=validate_size(args.size) if args.size is not None else None,
        )
    if command == "get":
        return GetOrder(validate_order_id(args.order_id))
    if command == "get-client":
        return GetOrderByClientId(validate_client_id(args.client_id))
    if command == "cancel":
        return CancelOrder(validate_order_id(args.order_id))
    if command == "cancel-trigger":
        return CancelTriggerOrder(validate_order_id(args.order_id))
    if command == "cancel-client":
        return CancelOrderByClientId(validate_client_id(args.client_id))
    if command == "cancel-all":
        return CancelAllOrder(
            market=normalize_market(args.market) if args.market else None,
            side=validate_side(args.side) if args.side else None,
            conditional_orders_only=args.conditional_only,
            limit_orders_only=args.limit_only,
        )
    if command == "history":
        return GetOrderHistory(
            market=normalize_market(args.market) if args.market else None,
            side=validate_side(args.side) if args.side else None,
            limit=validate_limit(args.limit),
            start_time=parse_datetime(args.start),
            end_time=parse_datetime(args.end),
        )
    raise ValueError(f"Unknown command '{command}'.")


def _optional_client_id(client_id: str | None) -> str | None:
    return validate_client_id(client_id) if client_id is not None else None


def describe_request(request: Request) -> Dict[str, Any]:
    return {
        "operation": type(request).__name__,
        "method": request.method(),
        "path": request.path(),
        "auth": request.requires_auth(),
        "optimized_access": request.supports_optimized_access(),
        "body": request.to_body(),
    }


def _jsonable(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return {key: _jsonable(item) for key, item in asdict(value).items()}
    if isinstance(value, list):
        return [_jsonable(item) for item in value]
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return encode_value(value)


def _result_as_summary(payload: Dict[str, Any], raw_json: bool) -> str:
    if raw_json:
        return json.dumps(_jsonable(payload), indent=2, default=str)
    lines = ["Order Summary:"]
    for key, value in payload.items():
        lines.append(f"  - {key}: {_jsonable(value)}")
    return "\n".join(lines)


def _build_result_payload(result: OrderResult) -> Dict[str, Any]:
    payload = describe_request(result.request)
    payload.update(
        {
            "success": result.is_success,
            "error_message": result.error_message,
            "response": result.response,
        }
    )
    return payload


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_file)
    LOGGER.info("Starting CLI with args: %s", args)

    try:
        request = build_request(args)
    except ValueError as exc:
        LOGGER.error("Validation error: %s", exc)
        parser.error(str(exc))
        return 1

    if args.dry_run:
        print(_result_as_summary(describe_request(request), args.raw_json))
        return 0

    try:
        config = FtxConfig.from_env()
    except EnvironmentError as exc:
        LOGGER.error("Configuration error: %s", exc)
        parser.error(str(exc))
        return 1

    desk = OrderDesk.from_config(config)
    try:
        result = desk.execute(request)
    except Exception as exc:  # pragma: no cover - catch-all for CLI robustness
        LOGGER.exception("Unexpected error: %s", exc)
        print(f"Unexpected error: {exc}", file=sys.stderr)
        return 1

    print(_result_as_summary(_build_result_payload(result), args.raw_json))
    return 0 if result.is_success else 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())

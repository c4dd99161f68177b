"""Unit tests for the signed REST transport and the order desk."""
from __future__ import annotations

import hashlib
import hmac
import json
import sys
from decimal import Decimal
from pathlib import Path

import pytest
import requests

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from ftx_orders.core.bot import OrderDesk
from ftx_orders.core.config import FtxConfig
from ftx_orders.core.rest_client import FtxApiError, FtxRestClient, sign_request
from ftx_orders.orders.cancellation import CancelAllOrder, CancelOrder
from ftx_orders.orders.common import OrderId, Side
from ftx_orders.orders.placement import PlaceOrder
from ftx_orders.orders.queries import GetOpenOrders, GetOrderHistory

FIXED_NOW = 1_700_000_000.0

ORDER_PAYLOAD = {
    "id": 42,
    "market": "BTC-PERP",
    "type": "limit",
    "side": "sell",
    "price": 35000.5,
    "size": 0.25,
    "status": "open",
    "createdAt": "2021-01-01T00:00:00+00:00",
}


class DummyResponse:
    def __init__(self, payload, status_code: int = 200) -> None:
        self._payload = payload
        self.status_code = status_code

    def json(self, **kwargs):
        if isinstance(self._payload, Exception):
            raise self._payload
        # Mimic requests: parse the serialized body with the caller's hooks.
        return json.loads(json.dumps(self._payload), **kwargs)

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")


class DummySession:
    """Records each call and answers with a canned response."""

    def __init__(self, response: DummyResponse) -> None:
        self.response = response
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        return self.response


def _config(**overrides) -> FtxConfig:
    values = dict(api_key="key", api_secret="secret")
    values.update(overrides)
    return FtxConfig(**values)


def _client(payload, status_code: int = 200, **config_overrides):
    session = DummySession(DummyResponse(payload, status_code))
    client = FtxRestClient(_config(**config_overrides), session=session, clock=lambda: FIXED_NOW)
    return client, session


def test_sign_request_matches_hmac_sha256() -> None:
    expected = hmac.new(b"secret", b"1000GET/api/orders", hashlib.sha256).hexdigest()
    assert sign_request("secret", 1000, "get", "/api/orders") == expected


def test_prepare_post_sends_json_body_and_signs_it() -> None:
    client, _ = _client({"success": True, "result": ORDER_PAYLOAD})
    request = PlaceOrder.market_order(market="BTC-PERP", side=Side.BUY, size=Decimal("1"))

    call = client.prepare(request)

    assert call.method == "POST"
    assert call.url == "https://ftx.com/api/orders"
    assert json.loads(call.body)["price"] is None
    ts = int(FIXED_NOW * 1000)
    assert call.headers["FTX-KEY"] == "key"
    assert call.headers["FTX-TS"] == str(ts)
    assert call.headers["FTX-SIGN"] == sign_request("secret", ts, "POST", "/api/orders", call.body)
    assert "FTX-SUBACCOUNT" not in call.headers


def test_prepare_get_moves_body_into_signed_query() -> None:
    client, _ = _client({"success": True, "result": []})
    call = client.prepare(GetOrderHistory(market="BTC-PERP", side=Side.SELL, limit=10))

    assert call.params == {"market": "BTC-PERP", "side": "sell", "limit": 10}
    assert call.body == ""
    ts = int(FIXED_NOW * 1000)
    assert call.headers["FTX-SIGN"] == sign_request(
        "secret", ts, "GET", "/api/orders/history?market=BTC-PERP&side=sell&limit=10"
    )


def test_prepare_adds_quoted_subaccount() -> None:
    client, _ = _client({"success": True, "result": "ok"}, subaccount="my sub")
    call = client.prepare(CancelOrder(OrderId(1)))
    assert call.headers["FTX-SUBACCOUNT"] == "my%20sub"


@pytest.mark.parametrize(
    "request_obj,expected_base",
    [
        (GetOpenOrders.all_market(), "https://fast.example/api"),
        (CancelOrder(OrderId(1)), "https://fast.example/api"),
        (CancelAllOrder(), "https://ftx.com/api"),
    ],
)
def test_optimized_access_routing(request_obj, expected_base) -> None:
    client, _ = _client({"success": True}, optimized_base_url="https://fast.example/api")
    assert client.prepare(request_obj).url.startswith(expected_base)


def test_request_decodes_order_with_exact_decimals() -> None:
    client, session = _client({"success": True, "result": ORDER_PAYLOAD})
    request = PlaceOrder.limit_order(
        market="BTC-PERP", side=Side.SELL, price=Decimal("35000.5"), size=Decimal("0.25")
    )

    info = client.request(request)

    assert info.id == 42
    assert info.price == Decimal("35000.5")
    assert info.size == Decimal("0.25")
    method, url, kwargs = session.calls[0]
    assert (method, url) == ("POST", "https://ftx.com/api/orders")
    assert kwargs["timeout"] == 10.0
    assert kwargs["params"] is None


def test_request_raises_on_failed_envelope() -> None:
    client, _ = _client({"success": False, "error": "Not logged in"}, status_code=401)
    with pytest.raises(FtxApiError) as excinfo:
        client.request(CancelOrder(OrderId(1)))
    assert excinfo.value.message == "Not logged in"
    assert excinfo.value.status_code == 401


def test_request_raises_on_non_json_success() -> None:
    client, _ = _client(ValueError("no json"), status_code=200)
    with pytest.raises(FtxApiError):
        client.request(CancelOrder(OrderId(1)))


def test_order_desk_returns_failed_result_instead_of_raising() -> None:
    client, _ = _client({"success": False, "error": "Order already closed"}, status_code=400)
    result = OrderDesk(client).cancel_order(7)
    assert result.is_success is False
    assert result.error_message == "Order already closed"
    assert result.response is None


def test_order_desk_places_validated_limit_order() -> None:
    client, session = _client({"success": True, "result": ORDER_PAYLOAD})
    result = OrderDesk(client).place_limit_order("btc-perp", "SELL", "0.25", "35000.5")

    assert result.is_success is True
    assert result.response.market == "BTC-PERP"
    body = json.loads(session.calls[0][2]["data"])
    assert body["market"] == "BTC-PERP"
    assert body["side"] == "sell"
    assert body["price"] == "35000.5"


def test_order_desk_rejects_non_trigger_type() -> None:
    client, session = _client({"success": True})
    with pytest.raises(ValueError):
        OrderDesk(client).place_trigger_order("BTC-PERP", "sell", "1", "limit", "30000")
    assert session.calls == []


def test_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    import ftx_orders.core.config as config_module

    monkeypatch.setattr(config_module, "_DOTENV_LOADED", True)
    monkeypatch.setenv("FTX_API_KEY", "k")
    monkeypatch.setenv("FTX_API_SECRET", "s")
    monkeypatch.setenv("FTX_SUBACCOUNT", "hedge")
    monkeypatch.setenv("FTX_BASE_URL", "https://example.test/api/")
    monkeypatch.delenv("FTX_OPTIMIZED_BASE_URL", raising=False)
    monkeypatch.setenv("FTX_TIMEOUT", "2.5")

    config = FtxConfig.from_env()

    assert config.subaccount == "hedge"
    assert config.base_url == "https://example.test/api"
    assert config.optimized_base_url is None
    assert config.timeout == 2.5


def test_config_requires_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    import ftx_orders.core.config as config_module

    monkeypatch.setattr(config_module, "_DOTENV_LOADED", True)
    monkeypatch.delenv("FTX_API_KEY", raising=False)
    monkeypatch.delenv("FTX_API_SECRET", raising=False)
    with pytest.raises(EnvironmentError):
        FtxConfig.from_env()

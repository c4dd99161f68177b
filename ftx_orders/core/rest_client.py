"""Signed HTTP transport that executes order descriptors against the FTX REST API."""
from __future__ import annotations

import hashlib
import hmac
import json
import logging
import time
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable, Dict, Optional
from urllib.parse import quote, urlencode, urlsplit

import requests

from ..orders.base import GET, Request
from .config import FtxConfig

LOGGER = logging.getLogger(__name__)


class FtxApiError(Exception):
    """The exchange rejected the call or answered with something other than a success envelope."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@dataclass
class PreparedCall:
    method: str
    url: str
    params: Dict[str, Any] = field(default_factory=dict)
    body: str = ""
    headers: Dict[str, str] = field(default_factory=dict)


def sign_request(secret: str, ts: int, method: str, path: str, body: str = "") -> str:
    """Hex HMAC-SHA256 over ``ts + METHOD + path(?query) + body``."""
    payload = f"{ts}{method.upper()}{path}{body}"
    return hmac.new(secret.encode(), payload.encode(), hashlib.sha256).hexdigest()


def _query_value(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


class FtxRestClient:
    """Turns descriptors into signed HTTP calls and decodes the ``result`` of the reply."""

    def __init__(
        self,
        config: FtxConfig,
        session: Optional[requests.Session] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config
        self._session = session or requests.Session()
        self._clock = clock

    @classmethod
    def from_config(cls, config: FtxConfig) -> "FtxRestClient":
        LOGGER.info("Using FTX REST endpoint at %s", config.base_url)
        if config.optimized_base_url:
            LOGGER.info("Optimized access endpoint enabled at %s", config.optimized_base_url)
        return cls(config)

    def base_url_for(self, request: Request) -> str:
        if self._config.optimized_base_url and request.supports_optimized_access():
            return self._config.optimized_base_url
        return self._config.base_url

    def prepare(self, request: Request) -> PreparedCall:
        method = request.method()
        payload = request.to_body()
        call = PreparedCall(method=method, url=self.base_url_for(request) + request.path())

        sign_path = urlsplit(call.url).path
        if method == GET:
            call.params = {key: _query_value(value) for key, value in payload.items()}
            if call.params:
                sign_path += "?" + urlencode(call.params)
        elif payload:
            call.body = json.dumps(payload, separators=(",", ":"))
            call.headers["Content-Type"] = "application/json"

        if request.requires_auth():
            ts = int(self._clock() * 1000)
            call.headers["FTX-KEY"] = self._config.api_key
            call.headers["FTX-TS"] = str(ts)
            call.headers["FTX-SIGN"] = sign_request(
                self._config.api_secret, ts, method, sign_path, call.body
            )
            if self._config.subaccount:
                call.headers["FTX-SUBACCOUNT"] = quote(self._config.subaccount)
        return call

    def request(self, request: Request) -> Any:
        """Execute ``request`` and return its decoded response."""
        return request.decode(self.request_raw(request))

    def request_raw(self, request: Request) -> Any:
        """Execute ``request`` and return the undecoded ``result`` member of the reply."""
        call = self.prepare(request)
        LOGGER.debug("%s %s params=%s body=%s", call.method, call.url, call.params, call.body)
        response = self._session.request(
            call.method,
            call.url,
            params=call.params or None,
            data=call.body or None,
            headers=call.headers,
            timeout=self._config.timeout,
        )
        try:
            envelope = response.json(parse_float=Decimal)
        except ValueError:
            response.raise_for_status()
            raise FtxApiError("Response body is not JSON.", status_code=response.status_code)

        if not isinstance(envelope, dict) or not envelope.get("success", False):
            error = envelope.get("error") if isinstance(envelope, dict) else None
            raise FtxApiError(
                error or f"Request failed with HTTP {response.status_code}.",
                status_code=response.status_code,
            )
        return envelope.get("result")

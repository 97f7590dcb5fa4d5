from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

import httpx

from upbit_client.auth import build_query_string, ensure_credentials, signed_headers
from upbit_client.errors import (
    ConfigurationError,
    RemoteError,
    TransportError,
    ValidationError,
    remote_error_from_response,
)
from upbit_client.models import Account, Candle, Order, Orderbook, Ticker, TradeTick
from upbit_client.normalizers import (
    normalize_account,
    normalize_candle,
    normalize_order,
    normalize_orderbook,
    normalize_ticker,
    normalize_trade_tick,
)
from upbit_client.settings import Settings
from upbit_client.types import Credentials, NormalizedOrder, OrderRequest
from upbit_client.validation import order_params, validate_order

logger = logging.getLogger("upbit_client.client")

DEFAULT_BASE_URL = "https://api.upbit.com"

ACCOUNTS_PATH = "/v1/accounts"
TICKER_PATH = "/v1/ticker"
CANDLE_MINUTES_PATH = "/v1/candles/minutes/{unit}"
CANDLE_SECONDS_PATH = "/v1/candles/seconds"
CANDLE_DAYS_PATH = "/v1/candles/days"
ORDERBOOK_PATH = "/v1/orderbook"
TRADES_TICKS_PATH = "/v1/trades/ticks"
ORDERS_PATH = "/v1/orders"
ORDER_PATH = "/v1/order"

MINUTE_UNITS = (1, 3, 5, 10, 15, 30, 60, 240)

_DEFAULT_MINUTE_CANDLE_COUNT = 60
_MAX_CANDLE_COUNT = 200
_MAX_ORDERBOOK_COUNT = 30
_MAX_TRADE_TICK_COUNT = 500
_MAX_DAYS_AGO = 7
_FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def _clamp(value: int, low: int, high: int) -> int:
    return min(max(int(value), low), high)


def _compact_params(params: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in params.items() if v is not None}


def _join_markets(markets: Sequence[str] | str, *, what: str) -> str:
    if isinstance(markets, str):
        markets = [markets]
    cleaned = [m.strip() for m in markets if m and m.strip()]
    if not cleaned:
        raise ValidationError(f"At least one market is required for {what}.", field="markets")
    return ",".join(cleaned)


def _require_market(market: str, *, what: str) -> str:
    if not market or not market.strip():
        raise ValidationError(f"Market is required for {what}.", field="market")
    return market.strip()


class UpbitClient:
    """Async client for the Upbit REST API.

    Quotation calls are unauthenticated. Exchange calls (accounts, orders) need
    credentials; they are checked on each call, not at construction, so a client
    can be built first and given keys later with `set_credentials`.
    """

    def __init__(
        self,
        *,
        access_key: str | None = None,
        secret_key: str | None = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._credentials: Credentials | None = None
        if (access_key or "").strip() and (secret_key or "").strip():
            self._credentials = ensure_credentials(access_key, secret_key)
        self._base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_seconds),
            headers={"Accept": "application/json"},
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> UpbitClient:
        return cls(
            access_key=settings.upbit_access_key,
            secret_key=settings.upbit_secret_key,
            base_url=settings.upbit_base_url,
            timeout_seconds=settings.upbit_timeout_seconds,
            transport=transport,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def set_credentials(self, *, access_key: str, secret_key: str) -> None:
        # Swapped as one object; requests already signing keep the pair they read.
        self._credentials = ensure_credentials(access_key, secret_key)

    def _require_credentials(self) -> Credentials:
        if self._credentials is None:
            raise ConfigurationError("Upbit credentials are not configured.")
        return self._credentials

    # Quotation

    async def get_ticker(self, markets: Sequence[str] | str) -> list[Ticker]:
        joined = _join_markets(markets, what="ticker")
        raw = await self._request(
            "GET",
            TICKER_PATH,
            params={"markets": joined},
            fallback_message="Failed to fetch Upbit ticker.",
        )
        return [normalize_ticker(row) for row in raw]

    async def get_minute_candles(
        self,
        market: str,
        *,
        unit: int = 1,
        count: int | None = None,
        to: str | None = None,
    ) -> list[Candle]:
        market = _require_market(market, what="candles")
        if unit not in MINUTE_UNITS:
            raise ValidationError(
                f"Minute candle unit must be one of {', '.join(map(str, MINUTE_UNITS))}.",
                field="unit",
            )
        if count is None:
            count = _DEFAULT_MINUTE_CANDLE_COUNT
        raw = await self._request(
            "GET",
            CANDLE_MINUTES_PATH.format(unit=unit),
            params={
                "market": market,
                "to": to or None,
                "count": _clamp(count, 1, _MAX_CANDLE_COUNT),
            },
            fallback_message="Failed to fetch Upbit candles.",
        )
        return [normalize_candle(row) for row in raw]

    get_candles = get_minute_candles

    async def get_second_candles(
        self,
        market: str,
        *,
        count: int | None = None,
        to: str | None = None,
    ) -> list[Candle]:
        market = _require_market(market, what="candles")
        raw = await self._request(
            "GET",
            CANDLE_SECONDS_PATH,
            params={
                "market": market,
                "to": to or None,
                "count": None if count is None else _clamp(count, 1, _MAX_CANDLE_COUNT),
            },
            fallback_message="Failed to fetch Upbit second candles.",
        )
        return [normalize_candle(row) for row in raw]

    async def get_day_candles(
        self,
        market: str,
        *,
        count: int | None = None,
        to: str | None = None,
        converting_price_unit: str | None = None,
    ) -> list[Candle]:
        market = _require_market(market, what="candles")
        raw = await self._request(
            "GET",
            CANDLE_DAYS_PATH,
            params={
                "market": market,
                "to": to or None,
                "count": None if count is None else _clamp(count, 1, _MAX_CANDLE_COUNT),
                "converting_price_unit": converting_price_unit or None,
            },
            fallback_message="Failed to fetch Upbit day candles.",
        )
        return [normalize_candle(row) for row in raw]

    async def get_orderbook(
        self,
        markets: Sequence[str] | str,
        *,
        level: str | int | float | None = None,
        count: int | None = None,
    ) -> list[Orderbook]:
        joined = _join_markets(markets, what="orderbook")
        raw = await self._request(
            "GET",
            ORDERBOOK_PATH,
            params={
                "markets": joined,
                "level": None if level is None else str(level),
                "count": None if count is None else _clamp(count, 1, _MAX_ORDERBOOK_COUNT),
            },
            fallback_message="Failed to fetch Upbit orderbook.",
        )
        return [normalize_orderbook(row) for row in raw]

    async def get_trade_ticks(
        self,
        market: str,
        *,
        to: str | None = None,
        count: int | None = None,
        cursor: str | None = None,
        days_ago: int | None = None,
    ) -> list[TradeTick]:
        market = _require_market(market, what="trade ticks")
        if days_ago is not None and not 1 <= days_ago <= _MAX_DAYS_AGO:
            raise ValidationError(
                f"days_ago must be between 1 and {_MAX_DAYS_AGO}.",
                field="days_ago",
            )
        raw = await self._request(
            "GET",
            TRADES_TICKS_PATH,
            params={
                "market": market,
                "to": to or None,
                "count": None if count is None else _clamp(count, 1, _MAX_TRADE_TICK_COUNT),
                "cursor": cursor or None,
                "days_ago": days_ago,
            },
            fallback_message="Failed to fetch Upbit trade ticks.",
        )
        return [normalize_trade_tick(row) for row in raw]

    # Exchange

    async def get_accounts(self) -> list[Account]:
        credentials = self._require_credentials()
        raw = await self._request(
            "GET",
            ACCOUNTS_PATH,
            headers=signed_headers(credentials),
            fallback_message="Failed to fetch Upbit accounts.",
        )
        return [normalize_account(row) for row in raw]

    async def place_order(
        self,
        request: OrderRequest | NormalizedOrder | Mapping[str, Any],
    ) -> Order:
        order = validate_order(request)
        credentials = self._require_credentials()
        # The body sent must be byte-identical to the string the hash covers.
        query_string = build_query_string(order_params(order))
        headers = signed_headers(credentials, query_string)
        headers["Content-Type"] = _FORM_CONTENT_TYPE

        logger.info(
            "placing order",
            extra={
                "market": order.market,
                "ord_type": order.ord_type,
                "identifier": order.identifier,
            },
        )
        raw = await self._request(
            "POST",
            ORDERS_PATH,
            headers=headers,
            content=query_string,
            fallback_message="Failed to place Upbit order.",
        )
        placed = normalize_order(raw)
        logger.info(
            "order accepted",
            extra={
                "market": placed.market,
                "ord_type": placed.ord_type,
                "order_uuid": placed.uuid,
            },
        )
        return placed

    async def cancel_order(
        self,
        *,
        uuid: str | None = None,
        identifier: str | None = None,
    ) -> Order:
        uuid = (uuid or "").strip() or None
        identifier = (identifier or "").strip() or None
        if (uuid is None) == (identifier is None):
            raise ValidationError("Exactly one of uuid or identifier is required.", field="uuid")
        credentials = self._require_credentials()
        query_string = build_query_string([("uuid", uuid), ("identifier", identifier)])

        logger.info("cancelling order", extra={"order_uuid": uuid, "identifier": identifier})
        raw = await self._request(
            "DELETE",
            f"{ORDER_PATH}?{query_string}",
            headers=signed_headers(credentials, query_string),
            fallback_message="Failed to cancel Upbit order.",
        )
        return normalize_order(raw)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        content: str | None = None,
        fallback_message: str,
    ) -> Any:
        url = f"{self._base_url}{path}"
        logger.debug("request", extra={"path": path})
        try:
            response = await self._client.request(
                method,
                url,
                params=_compact_params(params) if params else None,
                headers=headers,
                content=content.encode("utf-8") if content is not None else None,
            )
        except httpx.TransportError as exc:
            raise TransportError(f"{fallback_message} {exc}".strip(), cause=exc) from exc

        if response.status_code >= 400:
            error: RemoteError = remote_error_from_response(
                response,
                fallback_message=fallback_message,
            )
            logger.warning(
                "upbit request failed: %s",
                error.message,
                extra={"path": path.split("?", 1)[0], "status": error.status, "code": error.code},
            )
            raise error

        try:
            return response.json()
        except ValueError as exc:
            logger.warning(
                "upbit response is not json",
                extra={"path": path.split("?", 1)[0], "status": response.status_code},
            )
            raise RemoteError(
                fallback_message,
                status=response.status_code,
                payload=response.text,
            ) from exc

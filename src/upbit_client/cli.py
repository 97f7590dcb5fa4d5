from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import asdict
from typing import Any, Awaitable, Callable, Optional

import typer

from upbit_client.auth import build_query_string, query_hash
from upbit_client.client import UpbitClient
from upbit_client.errors import UpbitError
from upbit_client.logging_utils import configure_logging
from upbit_client.settings import Settings
from upbit_client.types import OrderRequest
from upbit_client.validation import order_params, validate_order

app = typer.Typer(no_args_is_help=True, add_completion=False)
logger = logging.getLogger("upbit_client")


def _build_client(settings: Settings) -> UpbitClient:
    return UpbitClient.from_settings(settings)


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, list):
        return [_to_jsonable(v) for v in value]
    if hasattr(value, "__dataclass_fields__"):
        return asdict(value)
    return value


def _echo_json(value: Any) -> None:
    typer.echo(json.dumps(_to_jsonable(value), ensure_ascii=False, indent=2))


def _fail(error: UpbitError) -> typer.Exit:
    typer.echo(f"Error: {error}", err=True)
    return typer.Exit(code=1)


def _call(action: Callable[[UpbitClient], Awaitable[Any]]) -> None:
    settings = Settings()
    configure_logging(settings.log_level)

    async def _run() -> Any:
        client = _build_client(settings)
        try:
            return await action(client)
        finally:
            await client.aclose()

    try:
        result = asyncio.run(_run())
    except UpbitError as e:
        raise _fail(e) from e
    _echo_json(result)


@app.command()
def show_config() -> None:
    settings = Settings()
    configure_logging(settings.log_level)
    redacted = settings.model_dump()
    redacted["upbit_access_key"] = "***" if redacted["upbit_access_key"] else ""
    redacted["upbit_secret_key"] = "***" if redacted["upbit_secret_key"] else ""
    typer.echo(json.dumps(redacted, indent=2))


@app.command()
def ticker(
    markets: list[str] = typer.Argument(..., help="Market codes, e.g. KRW-BTC KRW-ETH."),
) -> None:
    """
    Current price snapshot for one or more markets.
    """
    _call(lambda client: client.get_ticker(markets))


@app.command()
def candles(
    market: str = typer.Argument(..., help="Market code, e.g. KRW-BTC."),
    resolution: str = typer.Option("minute", help="minute|second|day"),
    unit: int = typer.Option(1, help="Minute unit (1, 3, 5, 10, 15, 30, 60, 240)."),
    count: Optional[int] = typer.Option(None, help="Number of candles (1-200)."),
    to: Optional[str] = typer.Option(None, help="End time (ISO-8601), exclusive."),
) -> None:
    if resolution == "minute":
        _call(lambda client: client.get_minute_candles(market, unit=unit, count=count, to=to))
    elif resolution == "second":
        _call(lambda client: client.get_second_candles(market, count=count, to=to))
    elif resolution == "day":
        _call(lambda client: client.get_day_candles(market, count=count, to=to))
    else:
        raise typer.BadParameter("resolution must be one of minute, second, day")


@app.command()
def orderbook(
    markets: list[str] = typer.Argument(..., help="Market codes, e.g. KRW-BTC."),
    level: Optional[str] = typer.Option(None, help="Price grouping unit (KRW markets only)."),
    count: Optional[int] = typer.Option(None, help="Number of levels (1-30)."),
) -> None:
    _call(lambda client: client.get_orderbook(markets, level=level, count=count))


@app.command()
def trades(
    market: str = typer.Argument(..., help="Market code, e.g. KRW-BTC."),
    count: Optional[int] = typer.Option(None, help="Number of trades (1-500)."),
    to: Optional[str] = typer.Option(None, help="End time (HHmmss or HH:mm:ss, UTC)."),
    cursor: Optional[str] = typer.Option(None, help="sequential_id to page from."),
    days_ago: Optional[int] = typer.Option(None, help="Day offset (1-7)."),
) -> None:
    """
    Recent trades for a market.
    """
    _call(
        lambda client: client.get_trade_ticks(
            market,
            count=count,
            to=to,
            cursor=cursor,
            days_ago=days_ago,
        )
    )


@app.command()
def accounts() -> None:
    _call(lambda client: client.get_accounts())


@app.command()
def order(
    market: str = typer.Option(..., help="Market code, e.g. KRW-BTC."),
    side: str = typer.Option(..., help="bid|ask"),
    ord_type: Optional[str] = typer.Option(None, help="limit|price|market|best (default: limit)."),
    price: Optional[float] = typer.Option(None, help="Unit price, or KRW total for price/best."),
    volume: Optional[float] = typer.Option(None, help="Order quantity."),
    time_in_force: Optional[str] = typer.Option(None, help="ioc|fok|post_only"),
    identifier: Optional[str] = typer.Option(None, help="Client order id."),
    smp_type: Optional[str] = typer.Option(None, help="cancel_maker|cancel_taker|reduce"),
    submit: bool = typer.Option(False, "--submit", help="Actually place the order."),
) -> None:
    """
    Validate an order and print its wire body; with --submit, place it.
    """
    request = OrderRequest(
        market=market,
        side=side,  # type: ignore[arg-type]
        ord_type=ord_type,  # type: ignore[arg-type]
        price=price,
        volume=volume,
        time_in_force=time_in_force,  # type: ignore[arg-type]
        identifier=identifier,
        smp_type=smp_type,  # type: ignore[arg-type]
    )
    if submit:
        _call(lambda client: client.place_order(request))
        return

    configure_logging(Settings().log_level)
    try:
        validated = validate_order(request)
    except UpbitError as e:
        raise _fail(e) from e
    params = order_params(validated)
    query_string = build_query_string(params)
    logger.info(
        "order validated",
        extra={"market": validated.market, "ord_type": validated.ord_type},
    )
    _echo_json(
        {
            "body": dict(params),
            "query_string": query_string,
            "query_hash": query_hash(query_string),
        }
    )


@app.command()
def cancel(
    uuid: Optional[str] = typer.Option(None, help="Order uuid."),
    identifier: Optional[str] = typer.Option(None, help="Client order id."),
) -> None:
    _call(lambda client: client.cancel_order(uuid=uuid, identifier=identifier))

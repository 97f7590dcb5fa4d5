from __future__ import annotations

import logging
import math
from decimal import Decimal
from typing import Any, Mapping

from upbit_client.errors import ValidationError
from upbit_client.types import (
    ORDER_TYPES,
    SIDES,
    SMP_TYPES,
    TIME_IN_FORCE_VALUES,
    BestBuyOrder,
    BestSellOrder,
    LimitOrder,
    MarketBuyOrder,
    MarketSellOrder,
    NormalizedOrder,
    Number,
    OrderRequest,
)

logger = logging.getLogger("upbit_client.validation")

_DEFAULT_ORDER_TYPE = "limit"


def is_positive_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return False
    if isinstance(value, Decimal):
        return value.is_finite() and value > 0
    return math.isfinite(value) and value > 0


def format_number(value: Number) -> str:
    """Render a validated number as a plain decimal string (no exponent, no trailing `.0`)."""
    if isinstance(value, int):
        return str(value)
    d = value if isinstance(value, Decimal) else Decimal(repr(value))
    return format(d.normalize(), "f")


def _as_request(request: OrderRequest | NormalizedOrder | Mapping[str, Any]) -> OrderRequest:
    if isinstance(request, OrderRequest):
        return request
    if isinstance(request, Mapping):
        return OrderRequest.from_mapping(request)
    return OrderRequest(
        market=request.market,
        side=request.side,
        ord_type=request.ord_type,
        price=getattr(request, "price", None),
        volume=getattr(request, "volume", None),
        time_in_force=getattr(request, "time_in_force", None),
        identifier=request.identifier,
        smp_type=request.smp_type,
    )


def _check_fields(request: OrderRequest) -> None:
    if not isinstance(request.market, str) or not request.market.strip():
        raise ValidationError("Invalid order payload. Market is required.", field="market")
    if request.side not in SIDES:
        raise ValidationError("Invalid order payload. Side must be bid or ask.", field="side")
    if request.ord_type is not None and request.ord_type not in ORDER_TYPES:
        raise ValidationError(
            "Order type must be one of limit, price, market, best.",
            field="ord_type",
        )
    if request.volume is not None and not is_positive_number(request.volume):
        raise ValidationError("Volume must be a finite number greater than 0.", field="volume")
    if request.price is not None and not is_positive_number(request.price):
        raise ValidationError("Price must be a finite number greater than 0.", field="price")
    if request.identifier is not None and not isinstance(request.identifier, str):
        raise ValidationError("Identifier must be a string.", field="identifier")
    if request.time_in_force is not None and request.time_in_force not in TIME_IN_FORCE_VALUES:
        raise ValidationError(
            "timeInForce must be one of ioc, fok, post_only.",
            field="time_in_force",
        )
    if request.smp_type is not None and request.smp_type not in SMP_TYPES:
        raise ValidationError(
            "smpType must be one of cancel_maker, cancel_taker, reduce.",
            field="smp_type",
        )


def validate_order(request: OrderRequest | NormalizedOrder | Mapping[str, Any]) -> NormalizedOrder:
    """Check an order against the rules of its order type and return the typed variant.

    Stops at the first violation. The returned order always has an explicit
    `ord_type`, a trimmed market and a trimmed (or dropped, if blank) identifier.
    Price and volume are returned unchanged.
    """
    req = _as_request(request)
    _check_fields(req)

    ord_type = req.ord_type
    if ord_type is None:
        logger.debug("order type not given, defaulting to limit", extra={"market": req.market})
        ord_type = _DEFAULT_ORDER_TYPE

    market = req.market.strip()
    identifier = (req.identifier or "").strip() or None
    side, price, volume, tif, smp = req.side, req.price, req.volume, req.time_in_force, req.smp_type

    match ord_type:
        case "price":
            if side != "bid":
                raise ValidationError(
                    "Market buy must use side=bid and ordType=price",
                    field="side",
                )
            if tif is not None:
                raise ValidationError(
                    "Market buy should not set timeInForce.",
                    field="time_in_force",
                )
            if price is None:
                raise ValidationError("Market buy requires price (KRW total).", field="price")
            if volume is not None:
                raise ValidationError("Market buy should omit volume.", field="volume")
            return MarketBuyOrder(market=market, price=price, identifier=identifier, smp_type=smp)

        case "market":
            if side != "ask":
                raise ValidationError(
                    "Market sell must use side=ask and ordType=market",
                    field="side",
                )
            if tif is not None:
                raise ValidationError(
                    "Market sell should not set timeInForce.",
                    field="time_in_force",
                )
            if volume is None:
                raise ValidationError("Market sell requires volume.", field="volume")
            if price is not None:
                raise ValidationError("Market sell should omit price.", field="price")
            return MarketSellOrder(
                market=market,
                volume=volume,
                identifier=identifier,
                smp_type=smp,
            )

        case "limit":
            if price is None or volume is None:
                raise ValidationError(
                    "Limit orders require both price and volume.",
                    field="price" if price is None else "volume",
                )
            if tif == "post_only" and smp is not None:
                raise ValidationError(
                    "post_only cannot be combined with smpType.",
                    field="smp_type",
                )
            return LimitOrder(
                market=market,
                side=side,
                price=price,
                volume=volume,
                time_in_force=tif,
                identifier=identifier,
                smp_type=smp,
            )

        case _:
            if tif not in ("ioc", "fok"):
                raise ValidationError(
                    "Best orders require timeInForce of ioc or fok.",
                    field="time_in_force",
                )
            if side == "bid":
                if price is None:
                    raise ValidationError("Best bid requires price (total).", field="price")
                if volume is not None:
                    raise ValidationError("Best bid should omit volume.", field="volume")
                return BestBuyOrder(
                    market=market,
                    price=price,
                    time_in_force=tif,
                    identifier=identifier,
                    smp_type=smp,
                )
            if volume is None:
                raise ValidationError("Best ask requires volume.", field="volume")
            if price is not None:
                raise ValidationError("Best ask should omit price.", field="price")
            return BestSellOrder(
                market=market,
                volume=volume,
                time_in_force=tif,
                identifier=identifier,
                smp_type=smp,
            )


def order_params(order: NormalizedOrder) -> list[tuple[str, str]]:
    """Wire body of a validated order, in the order the query hash is computed over."""
    params: list[tuple[str, str]] = [
        ("ord_type", order.ord_type),
        ("market", order.market),
        ("side", order.side),
    ]
    match order:
        case LimitOrder():
            params.append(("price", format_number(order.price)))
            params.append(("volume", format_number(order.volume)))
            if order.time_in_force:
                params.append(("time_in_force", order.time_in_force))
        case MarketBuyOrder():
            params.append(("price", format_number(order.price)))
        case MarketSellOrder():
            params.append(("volume", format_number(order.volume)))
        case BestBuyOrder():
            params.append(("time_in_force", order.time_in_force))
            params.append(("price", format_number(order.price)))
        case BestSellOrder():
            params.append(("time_in_force", order.time_in_force))
            params.append(("volume", format_number(order.volume)))

    if order.identifier:
        params.append(("identifier", order.identifier))
    if order.smp_type:
        params.append(("smp_type", order.smp_type))
    return params


def order_body(order: NormalizedOrder) -> dict[str, str]:
    return dict(order_params(order))

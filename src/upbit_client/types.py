from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Literal, Mapping, Union

Side = Literal["bid", "ask"]
OrderType = Literal["limit", "price", "market", "best"]
TimeInForce = Literal["ioc", "fok", "post_only"]
BestTimeInForce = Literal["ioc", "fok"]
SmpType = Literal["cancel_maker", "cancel_taker", "reduce"]

Number = Union[int, float, Decimal]

SIDES: tuple[str, ...] = ("bid", "ask")
ORDER_TYPES: tuple[str, ...] = ("limit", "price", "market", "best")
TIME_IN_FORCE_VALUES: tuple[str, ...] = ("ioc", "fok", "post_only")
SMP_TYPES: tuple[str, ...] = ("cancel_maker", "cancel_taker", "reduce")


@dataclass(frozen=True)
class Credentials:
    access_key: str
    secret_key: str

    def __repr__(self) -> str:
        return f"Credentials(access_key={self.access_key!r}, secret_key='***')"


# camelCase aliases accepted when an order arrives as a mapping (JSON payloads).
_ORDER_KEY_ALIASES = {
    "ordType": "ord_type",
    "timeInForce": "time_in_force",
    "smpType": "smp_type",
}


@dataclass(frozen=True)
class OrderRequest:
    """Caller-side order input.

    Fields are loosely typed on purpose: this is what `validate_order` checks.
    `ord_type` may be omitted, in which case the order is treated as `limit`.
    """

    market: str
    side: Side
    ord_type: OrderType | None = None
    price: Number | None = None
    volume: Number | None = None
    time_in_force: TimeInForce | None = None
    identifier: str | None = None
    smp_type: SmpType | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> OrderRequest:
        fields: dict[str, Any] = {}
        for key, value in data.items():
            name = _ORDER_KEY_ALIASES.get(key, key)
            if name in _ORDER_REQUEST_FIELDS:
                fields[name] = value
        fields.setdefault("market", "")
        fields.setdefault("side", "")
        return cls(**fields)


_ORDER_REQUEST_FIELDS = frozenset(OrderRequest.__dataclass_fields__)


@dataclass(frozen=True)
class LimitOrder:
    market: str
    side: Side
    price: Number
    volume: Number
    time_in_force: TimeInForce | None = None
    identifier: str | None = None
    smp_type: SmpType | None = None
    ord_type: Literal["limit"] = "limit"


@dataclass(frozen=True)
class MarketBuyOrder:
    # `price` is the total KRW amount to spend.
    market: str
    price: Number
    identifier: str | None = None
    smp_type: SmpType | None = None
    side: Literal["bid"] = "bid"
    ord_type: Literal["price"] = "price"


@dataclass(frozen=True)
class MarketSellOrder:
    market: str
    volume: Number
    identifier: str | None = None
    smp_type: SmpType | None = None
    side: Literal["ask"] = "ask"
    ord_type: Literal["market"] = "market"


@dataclass(frozen=True)
class BestBuyOrder:
    market: str
    price: Number
    time_in_force: BestTimeInForce
    identifier: str | None = None
    smp_type: SmpType | None = None
    side: Literal["bid"] = "bid"
    ord_type: Literal["best"] = "best"


@dataclass(frozen=True)
class BestSellOrder:
    market: str
    volume: Number
    time_in_force: BestTimeInForce
    identifier: str | None = None
    smp_type: SmpType | None = None
    side: Literal["ask"] = "ask"
    ord_type: Literal["best"] = "best"


NormalizedOrder = Union[LimitOrder, MarketBuyOrder, MarketSellOrder, BestBuyOrder, BestSellOrder]

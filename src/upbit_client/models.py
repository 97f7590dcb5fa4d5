from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from upbit_client.types import OrderType, Side, SmpType, TimeInForce


@dataclass(frozen=True)
class Account:
    currency: str
    balance: float
    locked: float
    avg_buy_price: float
    avg_buy_price_modified: bool
    unit_currency: str


@dataclass(frozen=True)
class Ticker:
    market: str
    trade_date: str
    trade_time: str
    trade_date_kst: str
    trade_time_kst: str
    trade_price: float
    opening_price: float
    high_price: float
    low_price: float
    prev_closing_price: float
    change: Literal["RISE", "EVEN", "FALL"]
    change_price: float
    change_rate: float
    signed_change_price: float
    signed_change_rate: float
    trade_volume: float
    acc_trade_price: float
    acc_trade_price_24h: float
    acc_trade_volume: float
    acc_trade_volume_24h: float
    trade_timestamp: float
    timestamp: float
    highest_52_week_price: float
    highest_52_week_date: str
    lowest_52_week_price: float
    lowest_52_week_date: str


@dataclass(frozen=True)
class Candle:
    market: str
    timestamp: int
    time_kst: str
    opening_price: float
    high_price: float
    low_price: float
    trade_price: float
    acc_trade_price: float
    acc_trade_volume: float
    # Minute unit (1, 3, 5, ...); 1 for second/day candles.
    unit: int = 1


@dataclass(frozen=True)
class OrderbookUnit:
    ask_price: float
    bid_price: float
    ask_size: float
    bid_size: float
    level: float | None = None


@dataclass(frozen=True)
class Orderbook:
    market: str
    timestamp: float
    total_ask_size: float
    total_bid_size: float
    orderbook_units: list[OrderbookUnit] = field(default_factory=list)
    level: float | None = None


@dataclass(frozen=True)
class TradeTick:
    market: str
    trade_date_utc: str
    trade_time_utc: str
    timestamp: float
    trade_price: float
    trade_volume: float
    prev_closing_price: float
    change_price: float
    ask_bid: Literal["ASK", "BID"]
    sequential_id: int


@dataclass(frozen=True)
class Order:
    uuid: str
    side: Side
    ord_type: OrderType
    price: float | None
    state: str
    market: str
    created_at: str
    volume: float | None
    # None once the order is fully filled.
    remaining_volume: float | None
    reserved_fee: float | None
    remaining_fee: float | None
    paid_fee: float | None
    locked: float | None
    executed_volume: float | None
    trade_count: int
    time_in_force: TimeInForce | None = None
    identifier: str | None = None
    smp_type: SmpType | None = None
    prevented_volume: float = 0.0
    prevented_locked: float = 0.0

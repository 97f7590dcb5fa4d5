from __future__ import annotations

import math
import time
from decimal import Decimal
from typing import Any

from upbit_client.models import Account, Candle, Order, Orderbook, OrderbookUnit, Ticker, TradeTick
from upbit_client.types import SMP_TYPES, TIME_IN_FORCE_VALUES, OrderType, SmpType, TimeInForce


def _parse_number(value: Any) -> float | None:
    if isinstance(value, str):
        value = value.replace(",", "").strip()
        if not value:
            return None
    if isinstance(value, bool):
        return float(value)
    if not isinstance(value, (str, int, float, Decimal)):
        return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    return parsed if math.isfinite(parsed) else None


def to_number(value: Any) -> float:
    """Parse a wire number that may be a JSON number or a comma-formatted string.

    Unparsable or non-finite input yields 0.
    """
    parsed = _parse_number(value)
    return 0.0 if parsed is None else parsed


def to_nullable_number(value: Any) -> float | None:
    """Like `to_number`, but absent or unparsable input stays None."""
    return _parse_number(value)


def _now_ms() -> int:
    return int(time.time() * 1000)


def _first_present(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


def _order_type(value: Any) -> OrderType:
    if value in ("limit", "price", "market"):
        return value
    return "best"


def _time_in_force(value: Any) -> TimeInForce | None:
    return value if value in TIME_IN_FORCE_VALUES else None


def _smp_type(value: Any) -> SmpType | None:
    return value if value in SMP_TYPES else None


def normalize_account(raw: dict[str, Any]) -> Account:
    return Account(
        currency=str(raw.get("currency", "")),
        balance=to_number(raw.get("balance")),
        locked=to_number(raw.get("locked")),
        avg_buy_price=to_number(raw.get("avg_buy_price")),
        avg_buy_price_modified=bool(raw.get("avg_buy_price_modified")),
        unit_currency=raw.get("unit_currency") or "KRW",
    )


def normalize_ticker(raw: dict[str, Any]) -> Ticker:
    trade_timestamp = raw.get("trade_timestamp")
    timestamp = raw.get("timestamp")
    return Ticker(
        market=raw["market"],
        trade_date=raw.get("trade_date", ""),
        trade_time=raw.get("trade_time", ""),
        trade_date_kst=raw.get("trade_date_kst", ""),
        trade_time_kst=raw.get("trade_time_kst", ""),
        trade_price=to_number(raw.get("trade_price")),
        opening_price=to_number(raw.get("opening_price")),
        high_price=to_number(raw.get("high_price")),
        low_price=to_number(raw.get("low_price")),
        prev_closing_price=to_number(raw.get("prev_closing_price")),
        change=raw.get("change", "EVEN"),
        change_price=to_number(raw.get("change_price")),
        change_rate=to_number(raw.get("change_rate")),
        signed_change_price=to_number(raw.get("signed_change_price")),
        signed_change_rate=to_number(raw.get("signed_change_rate")),
        trade_volume=to_number(raw.get("trade_volume")),
        acc_trade_price=to_number(raw.get("acc_trade_price")),
        acc_trade_price_24h=to_number(raw.get("acc_trade_price_24h")),
        acc_trade_volume=to_number(raw.get("acc_trade_volume")),
        acc_trade_volume_24h=to_number(raw.get("acc_trade_volume_24h")),
        trade_timestamp=to_number(_first_present(trade_timestamp, timestamp, _now_ms())),
        timestamp=to_number(_first_present(timestamp, trade_timestamp, _now_ms())),
        highest_52_week_price=to_number(raw.get("highest_52_week_price")),
        highest_52_week_date=raw.get("highest_52_week_date", ""),
        lowest_52_week_price=to_number(raw.get("lowest_52_week_price")),
        lowest_52_week_date=raw.get("lowest_52_week_date", ""),
    )


def normalize_candle(raw: dict[str, Any]) -> Candle:
    return Candle(
        market=raw["market"],
        timestamp=int(to_number(raw.get("timestamp"))),
        time_kst=raw.get("candle_date_time_kst", ""),
        opening_price=to_number(raw.get("opening_price")),
        high_price=to_number(raw.get("high_price")),
        low_price=to_number(raw.get("low_price")),
        trade_price=to_number(raw.get("trade_price")),
        acc_trade_price=to_number(raw.get("candle_acc_trade_price")),
        acc_trade_volume=to_number(raw.get("candle_acc_trade_volume")),
        unit=int(raw.get("unit") or 1),
    )


def _level(value: Any) -> float | None:
    return None if value is None else to_number(value)


def normalize_orderbook_unit(raw: dict[str, Any]) -> OrderbookUnit:
    return OrderbookUnit(
        ask_price=to_number(raw.get("ask_price")),
        bid_price=to_number(raw.get("bid_price")),
        ask_size=to_number(raw.get("ask_size")),
        bid_size=to_number(raw.get("bid_size")),
        level=_level(raw.get("level")),
    )


def normalize_orderbook(raw: dict[str, Any]) -> Orderbook:
    units = raw.get("orderbook_units") or []
    return Orderbook(
        market=raw["market"],
        timestamp=to_number(_first_present(raw.get("timestamp"), _now_ms())),
        total_ask_size=to_number(raw.get("total_ask_size")),
        total_bid_size=to_number(raw.get("total_bid_size")),
        orderbook_units=[normalize_orderbook_unit(unit) for unit in units],
        level=_level(raw.get("level")),
    )


def normalize_trade_tick(raw: dict[str, Any]) -> TradeTick:
    return TradeTick(
        market=raw["market"],
        trade_date_utc=raw.get("trade_date_utc", ""),
        trade_time_utc=raw.get("trade_time_utc", ""),
        timestamp=to_number(raw.get("timestamp")),
        trade_price=to_number(raw.get("trade_price")),
        trade_volume=to_number(raw.get("trade_volume")),
        prev_closing_price=to_number(raw.get("prev_closing_price")),
        change_price=to_number(raw.get("change_price")),
        ask_bid=raw.get("ask_bid", "BID"),
        sequential_id=int(to_number(raw.get("sequential_id"))),
    )


def normalize_order(raw: dict[str, Any]) -> Order:
    return Order(
        uuid=raw["uuid"],
        side=raw["side"],
        ord_type=_order_type(raw.get("ord_type")),
        price=to_nullable_number(raw.get("price")),
        state=raw.get("state", ""),
        market=raw["market"],
        created_at=raw.get("created_at", ""),
        volume=to_nullable_number(raw.get("volume")),
        remaining_volume=to_nullable_number(raw.get("remaining_volume")),
        reserved_fee=to_nullable_number(raw.get("reserved_fee")),
        remaining_fee=to_nullable_number(raw.get("remaining_fee")),
        paid_fee=to_nullable_number(raw.get("paid_fee")),
        locked=to_nullable_number(raw.get("locked")),
        executed_volume=to_nullable_number(raw.get("executed_volume")),
        trade_count=int(raw.get("trade_count") or 0),
        time_in_force=_time_in_force(raw.get("time_in_force")),
        identifier=raw.get("identifier") or None,
        smp_type=_smp_type(raw.get("smp_type")),
        prevented_volume=to_number(_first_present(raw.get("prevented_volume"), 0)),
        prevented_locked=to_number(_first_present(raw.get("prevented_locked"), 0)),
    )

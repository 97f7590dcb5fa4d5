import pytest

from upbit_client.normalizers import (
    normalize_account,
    normalize_candle,
    normalize_order,
    normalize_orderbook,
    normalize_ticker,
    normalize_trade_tick,
    to_nullable_number,
    to_number,
)


def test_to_number_strips_commas() -> None:
    assert to_number("50,000,000") == 50000000


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (1234.5, 1234.5),
        ("  0.25 ", 0.25),
        ("abc", 0.0),
        ("", 0.0),
        (None, 0.0),
        ("NaN", 0.0),
        (float("inf"), 0.0),
        ({"x": 1}, 0.0),
    ],
)
def test_to_number_falls_back_to_zero(value: object, expected: float) -> None:
    assert to_number(value) == expected


def test_to_nullable_number_keeps_none() -> None:
    assert to_nullable_number(None) is None
    assert to_nullable_number("1,000") == 1000


@pytest.mark.parametrize("value", ["", "n/a", "abc", "NaN", float("inf"), {"x": 1}])
def test_to_nullable_number_unparsable_is_none(value: object) -> None:
    assert to_nullable_number(value) is None


def test_normalize_order_unparsable_nullable_fields_are_none() -> None:
    order = normalize_order(
        {
            "uuid": "u",
            "side": "bid",
            "ord_type": "limit",
            "market": "KRW-BTC",
            "price": "abc",
            "remaining_volume": "",
            "executed_volume": "0.5",
        }
    )
    assert order.price is None
    assert order.remaining_volume is None
    assert order.executed_volume == 0.5


def test_normalize_order_keeps_nullable_fields() -> None:
    order = normalize_order(
        {
            "uuid": "order-uuid",
            "side": "bid",
            "ord_type": "limit",
            "price": "50,000,000",
            "state": "done",
            "market": "KRW-BTC",
            "created_at": "2024-01-01T00:00:00+09:00",
            "volume": "1",
            "remaining_volume": None,
            "reserved_fee": "25000",
            "remaining_fee": "0",
            "paid_fee": "25000",
            "locked": "0",
            "executed_volume": "1",
            "trade_count": 2,
            "time_in_force": "ioc",
            "smp_type": "reduce",
        }
    )
    assert order.price == 50000000
    assert order.remaining_volume is None
    assert order.executed_volume == 1
    assert order.trade_count == 2
    assert order.time_in_force == "ioc"
    assert order.smp_type == "reduce"
    assert order.prevented_volume == 0
    assert order.identifier is None


def test_normalize_order_tolerates_sparse_response() -> None:
    order = normalize_order(
        {"uuid": "u", "side": "ask", "ord_type": "best", "state": "wait", "market": "KRW-BTC"}
    )
    assert order.ord_type == "best"
    assert order.price is None
    assert order.volume is None
    assert order.trade_count == 0
    assert order.time_in_force is None


def test_normalize_order_maps_unknown_values() -> None:
    order = normalize_order(
        {
            "uuid": "u",
            "side": "ask",
            "ord_type": "something_new",
            "market": "KRW-BTC",
            "time_in_force": "gtc",
            "smp_type": "other",
        }
    )
    assert order.ord_type == "best"
    assert order.time_in_force is None
    assert order.smp_type is None


def test_normalize_account_defaults_unit_currency() -> None:
    account = normalize_account(
        {
            "currency": "BTC",
            "balance": "0.5",
            "locked": "0.1",
            "avg_buy_price": "51,000,000",
            "avg_buy_price_modified": False,
        }
    )
    assert account.balance == 0.5
    assert account.avg_buy_price == 51000000
    assert account.unit_currency == "KRW"


def test_normalize_ticker_falls_back_between_timestamps() -> None:
    ticker = normalize_ticker(
        {"market": "KRW-BTC", "trade_price": "95,000,000", "change": "RISE", "timestamp": 1700000000000}
    )
    assert ticker.trade_price == 95000000
    assert ticker.trade_timestamp == 1700000000000
    assert ticker.timestamp == 1700000000000


def test_normalize_candle_defaults_unit() -> None:
    candle = normalize_candle(
        {
            "market": "KRW-BTC",
            "candle_date_time_kst": "2023-01-01T00:00:00",
            "timestamp": 1672531200000,
            "opening_price": 1000,
            "high_price": "1,100",
            "low_price": 900,
            "trade_price": 1050,
            "candle_acc_trade_price": 1000000,
            "candle_acc_trade_volume": 1000,
        }
    )
    assert candle.unit == 1
    assert candle.high_price == 1100
    assert candle.time_kst == "2023-01-01T00:00:00"


def test_normalize_orderbook_units() -> None:
    book = normalize_orderbook(
        {
            "market": "KRW-BTC",
            "timestamp": 1700000000000,
            "total_ask_size": "1.5",
            "total_bid_size": 2,
            "orderbook_units": [
                {"ask_price": "100", "bid_price": 99, "ask_size": "0.5", "bid_size": "1"},
            ],
            "level": 0,
        }
    )
    assert book.total_ask_size == 1.5
    assert book.orderbook_units[0].ask_price == 100
    assert book.orderbook_units[0].level is None
    assert book.level == 0


def test_normalize_orderbook_without_units() -> None:
    book = normalize_orderbook({"market": "KRW-BTC", "timestamp": 1, "orderbook_units": None})
    assert book.orderbook_units == []
    assert book.level is None


def test_normalize_trade_tick() -> None:
    tick = normalize_trade_tick(
        {
            "market": "KRW-BTC",
            "trade_date_utc": "2023-01-01",
            "trade_time_utc": "12:00:00",
            "timestamp": 1672574400000,
            "trade_price": 20000000,
            "trade_volume": 0.1,
            "prev_closing_price": 19500000,
            "change_price": 500000,
            "ask_bid": "BID",
            "sequential_id": 1001,
        }
    )
    assert tick.trade_price == 20000000
    assert tick.ask_bid == "BID"
    assert tick.sequential_id == 1001

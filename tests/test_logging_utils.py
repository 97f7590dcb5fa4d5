import io
import json
import logging
import sys

from upbit_client.logging_utils import JsonFormatter, configure_logging


def test_json_formatter_includes_structured_extras() -> None:
    record = logging.LogRecord(
        name="upbit_client.client",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="upbit request failed: %s",
        args=("bad",),
        exc_info=None,
    )
    record.path = "/v1/orders"
    record.status = 400
    record.code = "invalid_parameter"

    payload = json.loads(JsonFormatter().format(record))

    assert payload["level"] == "WARNING"
    assert payload["logger"] == "upbit_client.client"
    assert payload["msg"] == "upbit request failed: bad"
    assert payload["path"] == "/v1/orders"
    assert payload["status"] == 400
    assert payload["code"] == "invalid_parameter"
    assert "market" not in payload


def _record(msg: str, exc_info=None) -> logging.LogRecord:  # type: ignore[no-untyped-def]
    return logging.LogRecord(
        name="upbit_client",
        level=logging.ERROR,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )


def test_json_formatter_skips_none_extras_and_uses_utc_millis() -> None:
    record = _record("cancelling order")
    record.order_uuid = None
    record.identifier = "my-order-1"

    payload = json.loads(JsonFormatter().format(record))

    assert "order_uuid" not in payload
    assert payload["identifier"] == "my-order-1"
    assert payload["ts"].endswith("+00:00")
    assert len(payload["ts"].split("T")[1].split("+")[0]) == len("00:00:00.000")


def test_json_formatter_never_emits_secret_fields() -> None:
    record = _record("signed")
    record.secret_key = "do-not-log"
    record.market = "KRW-BTC"

    payload = json.loads(JsonFormatter(fields=("market", "secret_key")).format(record))

    assert payload["market"] == "KRW-BTC"
    assert "secret_key" not in payload


def test_json_formatter_reports_exception_type() -> None:
    try:
        raise ValueError("boom")
    except ValueError:
        record = _record("failed", exc_info=sys.exc_info())

    payload = json.loads(JsonFormatter().format(record))

    assert payload["exc_type"] == "ValueError"
    assert "boom" in payload["exc"]


def test_configure_logging_writes_json_lines_to_stream() -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    stream = io.StringIO()
    try:
        configure_logging("info", stream=stream)
        logging.getLogger("upbit_client.client").info("placing order", extra={"market": "KRW-BTC"})
        logging.getLogger("upbit_client.client").debug("hidden")
        assert logging.getLogger("httpx").level == logging.WARNING
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)

    lines = stream.getvalue().splitlines()
    assert len(lines) == 1
    assert json.loads(lines[0])["market"] == "KRW-BTC"

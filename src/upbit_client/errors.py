from __future__ import annotations

from typing import Any

import httpx

_DEFAULT_FALLBACK_MESSAGE = "Failed to fetch Upbit data."
# Top-level envelope plus one nested level, e.g. {"error": {"message": ...}}.
_MAX_EXTRACT_DEPTH = 2


class UpbitError(RuntimeError):
    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        code: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code
        self.cause = cause


class ConfigurationError(UpbitError):
    pass


class ValidationError(UpbitError):
    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field

    def __str__(self) -> str:
        if self.field:
            return f"{self.field}: {self.message}"
        return self.message


class RemoteError(UpbitError):
    def __init__(
        self,
        message: str,
        *,
        status: int,
        code: str | None = None,
        payload: Any = None,
    ) -> None:
        super().__init__(message, status=status, code=code)
        self.payload = payload

    def __str__(self) -> str:
        if self.code:
            return f"{self.message} (status={self.status} code={self.code})"
        return f"{self.message} (status={self.status})"


class TransportError(UpbitError):
    pass


def extract_message(value: Any, *, _depth: int = 0) -> str | None:
    """Pull a human readable message out of an error envelope.

    Checks `message`, then `error`, then `name`; nested objects under `message`
    or `error` are searched one more level down.
    """
    if isinstance(value, str):
        return value
    if not isinstance(value, dict) or _depth >= _MAX_EXTRACT_DEPTH:
        return None
    for key in ("message", "error"):
        candidate = value.get(key)
        if isinstance(candidate, str):
            return candidate
        if isinstance(candidate, dict):
            nested = extract_message(candidate, _depth=_depth + 1)
            if nested is not None:
                return nested
    name = value.get("name")
    if isinstance(name, str):
        return name
    return None


def extract_error_code(value: Any, *, _depth: int = 0) -> str | None:
    if isinstance(value, str):
        return value
    if not isinstance(value, dict) or _depth >= _MAX_EXTRACT_DEPTH:
        return None
    name = value.get("name")
    if isinstance(name, str) and name:
        return name
    nested = value.get("error")
    if isinstance(nested, dict):
        return extract_error_code(nested, _depth=_depth + 1)
    return None


def remote_error_from_response(
    response: httpx.Response,
    *,
    fallback_message: str = _DEFAULT_FALLBACK_MESSAGE,
) -> RemoteError:
    payload: Any
    try:
        payload = response.json()
    except ValueError:
        payload = response.text

    message = extract_message(payload)
    # A bare text body (proxy error page, etc.) is not an exchange error code.
    code = extract_error_code(payload) if isinstance(payload, dict) else None
    return RemoteError(
        message or fallback_message,
        status=response.status_code,
        code=code,
        payload=payload,
    )


def is_upbit_error(error: object) -> bool:
    return isinstance(error, UpbitError)


def is_order_error(error: object, code: str | None = None) -> bool:
    """True when `error` carries an exchange error code (optionally a specific one)."""
    if not isinstance(error, UpbitError):
        return False
    if code is None:
        return bool(error.code)
    return error.code == code

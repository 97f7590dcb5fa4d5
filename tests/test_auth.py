import hashlib

import jwt
import pytest

from upbit_client.auth import (
    build_auth_payload,
    build_query_string,
    ensure_credentials,
    query_hash,
    signed_headers,
)
from upbit_client.errors import ConfigurationError
from upbit_client.types import Credentials

SECRET = "test-secret-key-0123456789abcdef0123456789"
CREDENTIALS = Credentials(access_key="test-access", secret_key=SECRET)


def _decode(headers: dict[str, str]) -> dict[str, str]:
    scheme, token = headers["Authorization"].split(" ", 1)
    assert scheme == "Bearer"
    return jwt.decode(token, SECRET, algorithms=["HS256"])


def test_query_hash_matches_reference_digest() -> None:
    qs = "ord_type=limit&market=KRW-BTC&side=bid&price=50000000&volume=1"
    assert query_hash(qs) == (
        "9b3333d810c7d7ae836485ee436fadac1e64b3d6982aa45ee5cdf5fd7d18efa8"
        "2e61da677d314a4fc8e3a48719aabe2cea9f120aa8e8ff4ace107ea4cd0c61ed"
    )


def test_query_hash_is_sha512_over_utf8() -> None:
    qs = "identifier=%EC%A3%BC%EB%AC%B81"
    assert query_hash(qs) == hashlib.sha512(qs.encode("utf-8")).hexdigest()


def test_build_query_string_keeps_given_order() -> None:
    assert build_query_string([("b", "2"), ("a", "1")]) == "b=2&a=1"


def test_build_query_string_drops_none_and_encodes() -> None:
    qs = build_query_string([("uuid", None), ("identifier", "my order/1")])
    assert qs == "identifier=my+order%2F1"


def test_auth_payload_for_read_call_has_no_hash() -> None:
    payload = build_auth_payload(CREDENTIALS)
    assert set(payload) == {"access_key", "nonce"}
    assert payload["access_key"] == "test-access"


def test_auth_payload_for_write_call_binds_query_hash() -> None:
    qs = "ord_type=price&market=KRW-BTC&side=bid&price=10000"
    payload = build_auth_payload(CREDENTIALS, qs)
    assert payload["query_hash"] == query_hash(qs)
    assert payload["query_hash_alg"] == "SHA512"


def test_signed_headers_carry_bearer_jwt() -> None:
    qs = "ord_type=market&market=KRW-BTC&side=ask&volume=1"
    claims = _decode(signed_headers(CREDENTIALS, qs))
    assert claims["access_key"] == "test-access"
    assert claims["query_hash"] == query_hash(qs)
    assert claims["query_hash_alg"] == "SHA512"
    assert claims["nonce"]


def test_nonce_is_fresh_per_call() -> None:
    first = _decode(signed_headers(CREDENTIALS))
    second = _decode(signed_headers(CREDENTIALS))
    assert first["nonce"] != second["nonce"]


def test_ensure_credentials_trims_keys() -> None:
    creds = ensure_credentials("  access ", " secret\n")
    assert creds == Credentials(access_key="access", secret_key="secret")


@pytest.mark.parametrize(
    ("access_key", "secret_key"),
    [(None, "secret"), ("access", None), ("", "secret"), ("access", "   ")],
)
def test_ensure_credentials_rejects_missing_keys(
    access_key: str | None,
    secret_key: str | None,
) -> None:
    with pytest.raises(ConfigurationError):
        ensure_credentials(access_key, secret_key)


def test_credentials_repr_hides_secret() -> None:
    assert SECRET not in repr(CREDENTIALS)

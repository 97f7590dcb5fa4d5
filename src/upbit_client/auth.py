from __future__ import annotations

import hashlib
import uuid
from typing import Any, Iterable
from urllib.parse import urlencode

import jwt

from upbit_client.errors import ConfigurationError
from upbit_client.types import Credentials

QUERY_HASH_ALG = "SHA512"
_JWT_ALGORITHM = "HS256"


def ensure_credentials(access_key: str | None, secret_key: str | None) -> Credentials:
    access = (access_key or "").strip()
    secret = (secret_key or "").strip()
    if not access or not secret:
        raise ConfigurationError("Upbit credentials are not configured.")
    return Credentials(access_key=access, secret_key=secret)


def build_query_string(params: Iterable[tuple[str, Any]]) -> str:
    # Order is significant: the exchange recomputes the hash over the string as sent.
    return urlencode([(key, str(value)) for key, value in params if value is not None])


def query_hash(query_string: str) -> str:
    return hashlib.sha512(query_string.encode("utf-8")).hexdigest()


def build_auth_payload(credentials: Credentials, query_string: str | None = None) -> dict[str, str]:
    payload = {
        "access_key": credentials.access_key,
        "nonce": str(uuid.uuid4()),
    }
    if query_string:
        payload["query_hash"] = query_hash(query_string)
        payload["query_hash_alg"] = QUERY_HASH_ALG
    return payload


def sign_payload(payload: dict[str, Any], credentials: Credentials) -> str:
    return jwt.encode(payload, credentials.secret_key, algorithm=_JWT_ALGORITHM)


def build_auth_headers(payload: dict[str, Any], credentials: Credentials) -> dict[str, str]:
    return {"Authorization": f"Bearer {sign_payload(payload, credentials)}"}


def signed_headers(credentials: Credentials, query_string: str | None = None) -> dict[str, str]:
    """Authorization header for one request; a new nonce every call."""
    return build_auth_headers(build_auth_payload(credentials, query_string), credentials)

__all__ = [
    "BestBuyOrder",
    "BestSellOrder",
    "ConfigurationError",
    "Credentials",
    "LimitOrder",
    "MarketBuyOrder",
    "MarketSellOrder",
    "OrderRequest",
    "RemoteError",
    "TransportError",
    "UpbitClient",
    "UpbitError",
    "ValidationError",
    "build_auth_headers",
    "build_query_string",
    "is_order_error",
    "is_upbit_error",
    "order_params",
    "query_hash",
    "validate_order",
]

from upbit_client.auth import build_auth_headers, build_query_string, query_hash
from upbit_client.client import UpbitClient
from upbit_client.errors import (
    ConfigurationError,
    RemoteError,
    TransportError,
    UpbitError,
    ValidationError,
    is_order_error,
    is_upbit_error,
)
from upbit_client.types import (
    BestBuyOrder,
    BestSellOrder,
    Credentials,
    LimitOrder,
    MarketBuyOrder,
    MarketSellOrder,
    OrderRequest,
)
from upbit_client.validation import order_params, validate_order

"""Core utilities and shared functionality."""

from cryptosim.core.timezone import (
    now_utc,
    to_utc,
    parse_datetime_utc,
    UTC,
)
from cryptosim.core.exceptions import (
    AppError,
    InvalidArgumentError,
    InsufficientFundsError,
    UnknownAssetError,
    InsufficientHoldingsError,
    InvalidStateError,
    PriceUnavailableError,
    PersistenceError,
)

__all__ = [
    "now_utc",
    "to_utc",
    "parse_datetime_utc",
    "UTC",
    "AppError",
    "InvalidArgumentError",
    "InsufficientFundsError",
    "UnknownAssetError",
    "InsufficientHoldingsError",
    "InvalidStateError",
    "PriceUnavailableError",
    "PersistenceError",
]

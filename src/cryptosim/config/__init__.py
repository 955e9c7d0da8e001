"""Configuration package."""

from cryptosim.config.settings import (
    DEFAULT_STARTING_CASH,
    SELL_TAX_RATE,
    Settings,
    get_settings,
    set_settings,
    reset_settings,
)

__all__ = [
    "DEFAULT_STARTING_CASH",
    "SELL_TAX_RATE",
    "Settings",
    "get_settings",
    "set_settings",
    "reset_settings",
]

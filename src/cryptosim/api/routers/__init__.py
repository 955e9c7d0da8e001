"""API routers package."""

from cryptosim.api.routers.ledger import router as ledger_router
from cryptosim.api.routers.portfolio import router as portfolio_router
from cryptosim.api.routers.market import router as market_router

__all__ = [
    "ledger_router",
    "portfolio_router",
    "market_router",
]

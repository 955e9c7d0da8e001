"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from cryptosim.app_context import get_app_context
from cryptosim.config.settings import get_settings
from cryptosim.config.logging_config import setup_logging
from cryptosim.api.routers import ledger_router, portfolio_router, market_router
from cryptosim.core.exceptions import AppError

# HTTP status per error code; anything else is a 400
ERROR_STATUS = {
    "UNKNOWN_ASSET": 404,
    "INSUFFICIENT_FUNDS": 409,
    "INSUFFICIENT_HOLDINGS": 409,
    "PRICE_UNAVAILABLE": 503,
    "PERSISTENCE_ERROR": 503,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    setup_logging()
    context = get_app_context()
    if not context.is_initialized:
        context.initialize()
    yield
    # Shutdown
    context.close()


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Paper trading ledger for simulated crypto portfolios",
    version=settings.app_version,
    lifespan=lifespan,
)

# Include routers
app.include_router(ledger_router)
app.include_router(portfolio_router)
app.include_router(market_router)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Global handler for application errors."""
    return JSONResponse(
        status_code=ERROR_STATUS.get(exc.code, 400),
        content={"error": exc.code, "message": exc.message},
    )


@app.get("/health")
def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/")
def root() -> dict[str, str]:
    """Root endpoint with API info."""
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }

"""
Pytest configuration and fixtures for the paper trading ledger tests.

This module provides:
- A deterministic clock for transaction timestamps
- In-memory SQLite database fixtures
- Deterministic and failing market data providers
- Engine, repository and service fixtures
- A FastAPI test client wired to an isolated AppContext
"""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, StaticPool
from sqlalchemy.orm import sessionmaker, Session

from cryptosim.app_context import AppContext, set_app_context
from cryptosim.config.settings import reset_settings
from cryptosim.core.timezone import UTC
from cryptosim.domain.models import Holding, LedgerState, Transaction, TransactionKind
from cryptosim.domain.views import Quote
from cryptosim.main import app
from cryptosim.repositories.json_file import JsonFileLedgerStateRepository
from cryptosim.repositories.sqlalchemy.database import Base
# Import ORM models to register them with Base before creating tables
from cryptosim.repositories.sqlalchemy import orm_models  # noqa: F401
from cryptosim.repositories.sqlalchemy import SqlAlchemyLedgerStateRepository
from cryptosim.services import (
    LedgerEngine,
    MarketDataService,
    TradingService,
    AnalysisService,
)


# =============================================================================
# TIME HELPERS
# =============================================================================


def utc_datetime(
    year: int,
    month: int,
    day: int,
    hour: int = 10,
    minute: int = 0,
    second: int = 0,
) -> datetime:
    """Create a UTC-aware datetime."""
    return UTC.localize(datetime(year, month, day, hour, minute, second))


class SteppingClock:
    """Clock returning a fixed start time, advancing by a step on every call."""

    def __init__(self, start: datetime, step: timedelta = timedelta(minutes=1)):
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        now = self.current
        self.current = self.current + self.step
        return now


@pytest.fixture
def fixed_now() -> datetime:
    """Fixed 'now' timestamp for deterministic tests."""
    return utc_datetime(2024, 6, 15, 14, 30, 0)


@pytest.fixture
def clock(fixed_now) -> SteppingClock:
    return SteppingClock(fixed_now)


# =============================================================================
# ENGINE FIXTURES
# =============================================================================


@pytest.fixture
def engine(clock) -> LedgerEngine:
    """Fresh ledger with 10000 starting cash and the default 2% sell tax."""
    return LedgerEngine(
        starting_cash=Decimal("10000"),
        tax_rate=Decimal("0.02"),
        clock=clock,
    )


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="function")
def test_engine():
    """Create test database engine with shared in-memory SQLite."""
    # Reset settings for clean state
    reset_settings()

    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def test_session_factory(test_engine) -> sessionmaker:
    """Session factory bound to the in-memory test database."""
    return sessionmaker(bind=test_engine, autoflush=False, expire_on_commit=False)


@pytest.fixture(scope="function")
def test_session(test_session_factory) -> Session:
    """Create test database session for inspecting stored rows."""
    session = test_session_factory()
    try:
        yield session
    finally:
        session.close()


# =============================================================================
# REPOSITORY FIXTURES
# =============================================================================


@pytest.fixture
def ledger_repo(test_session_factory) -> SqlAlchemyLedgerStateRepository:
    """Provide test SQLAlchemy LedgerStateRepository."""
    return SqlAlchemyLedgerStateRepository(test_session_factory)


@pytest.fixture
def json_repo(tmp_path) -> JsonFileLedgerStateRepository:
    """Provide a JSON file repository in a temp directory."""
    return JsonFileLedgerStateRepository(tmp_path / "ledger.json")


# =============================================================================
# MARKET DATA FIXTURES
# =============================================================================


class DeterministicMarketProvider:
    """
    Deterministic market data provider for testing.

    Provides fixed prices with no randomness. Prices can be changed by
    assigning to ``prices``.
    """

    FIXED_PRICES = {
        "bitcoin": (Decimal("65000"), Decimal("2.50")),
        "ethereum": (Decimal("3500"), Decimal("-1.25")),
        "solana": (Decimal("150"), Decimal("4.10")),
        "dogecoin": (Decimal("0.12"), Decimal("-3.00")),
    }

    def __init__(self, as_of: Optional[datetime] = None):
        self._as_of = as_of or utc_datetime(2024, 6, 15, 16, 0, 0)
        self.prices = dict(self.FIXED_PRICES)
        self.calls = 0

    def list_assets(self) -> list[str]:
        return list(self.prices)

    def get_quotes(self, asset_ids: list[str]) -> dict[str, Quote]:
        """Return deterministic quotes for requested assets."""
        self.calls += 1
        result = {}
        for asset_id in asset_ids:
            if asset_id in self.prices:
                price, change = self.prices[asset_id]
                result[asset_id] = Quote(
                    asset_id=asset_id,
                    symbol=asset_id[:3].upper(),
                    name=asset_id.capitalize(),
                    price=price,
                    change_percent_24h=change,
                    as_of=self._as_of,
                )
        return result


class FailingMarketProvider:
    """Market provider that always raises an exception."""

    def list_assets(self) -> list[str]:
        return ["bitcoin"]

    def get_quotes(self, asset_ids: list[str]) -> dict[str, Quote]:
        raise ConnectionError("Network unavailable")


@pytest.fixture
def deterministic_provider(fixed_now) -> DeterministicMarketProvider:
    """Provide deterministic market data provider."""
    return DeterministicMarketProvider(as_of=fixed_now)


@pytest.fixture
def failing_provider() -> FailingMarketProvider:
    """Provide a market provider that always fails."""
    return FailingMarketProvider()


@pytest.fixture
def market_data_service(deterministic_provider) -> MarketDataService:
    """Provide test MarketDataService with deterministic provider."""
    return MarketDataService(
        provider=deterministic_provider,
        cache_ttl_seconds=60,
    )


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def trading_service(engine, market_data_service, ledger_repo) -> TradingService:
    """Provide test TradingService persisting to in-memory SQLite."""
    return TradingService(
        engine=engine,
        market_data_service=market_data_service,
        repository=ledger_repo,
    )


@pytest.fixture
def analysis_service(engine, market_data_service) -> AnalysisService:
    """Provide test AnalysisService."""
    return AnalysisService(
        engine=engine,
        market_data_service=market_data_service,
    )


# =============================================================================
# API TEST CLIENT FIXTURE
# =============================================================================


@pytest.fixture
def app_context(engine, ledger_repo, deterministic_provider) -> AppContext:
    """AppContext wired to the test engine, SQLite repo and deterministic prices."""
    return AppContext(
        repository=ledger_repo,
        provider=deterministic_provider,
        engine=engine,
    )


@pytest.fixture
def client(app_context) -> TestClient:
    """Provide FastAPI test client bound to the test AppContext."""
    set_app_context(app_context)
    with TestClient(app) as c:
        yield c
    set_app_context(None)


# =============================================================================
# HELPER FUNCTIONS (exported for use in tests)
# =============================================================================


def assert_decimal_equal(
    actual: Decimal,
    expected: Decimal,
    tolerance: Decimal = Decimal("0.00000001"),
) -> None:
    """Assert two Decimals are equal within tolerance."""
    diff = abs(actual - expected)
    assert diff <= tolerance, f"Expected {expected}, got {actual} (diff={diff})"


def make_transaction(
    txn_id: str,
    asset_id: str = "bitcoin",
    quantity: Decimal = Decimal("1"),
    unit_price: Decimal = Decimal("100"),
    kind: TransactionKind = TransactionKind.BUY,
    timestamp: Optional[datetime] = None,
    tax_withheld: Optional[Decimal] = None,
) -> Transaction:
    """Helper to build a Transaction with sensible defaults."""
    return Transaction(
        id=txn_id,
        asset_id=asset_id,
        quantity=quantity,
        unit_price=unit_price,
        kind=kind,
        timestamp=timestamp or utc_datetime(2024, 6, 1),
        tax_withheld=tax_withheld,
    )


def make_state(
    cash_balance: Decimal = Decimal("9800"),
    holdings: Optional[dict[str, Holding]] = None,
    transactions: Optional[list[Transaction]] = None,
) -> LedgerState:
    """Helper to build a consistent LedgerState (one BTC bought at 100 by default)."""
    if holdings is None:
        holdings = {
            "bitcoin": Holding(
                asset_id="bitcoin",
                quantity=Decimal("2"),
                average_cost=Decimal("100"),
            )
        }
    if transactions is None:
        transactions = [
            make_transaction("txn-1", quantity=Decimal("2"), unit_price=Decimal("100")),
        ]
    return LedgerState(
        cash_balance=cash_balance,
        holdings=holdings,
        transactions=transactions,
    )

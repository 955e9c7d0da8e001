"""Application context for in-process service management.

Owns the single LedgerEngine instance and wires it to the market data
service and the configured persistence backend.
"""

from pathlib import Path
from typing import Optional

from cryptosim.config.settings import Settings, set_settings, get_settings
from cryptosim.repositories.protocols import LedgerStateRepository
from cryptosim.repositories.json_file import JsonFileLedgerStateRepository
from cryptosim.repositories.sqlalchemy import (
    SqlAlchemyLedgerStateRepository,
    open_ledger_database,
    close_ledger_database,
)
from cryptosim.providers.market_data_provider import MarketDataProvider
from cryptosim.providers.stub_provider import StubMarketDataProvider
from cryptosim.services import (
    LedgerEngine,
    MarketDataService,
    TradingService,
    AnalysisService,
)


class AppContext:
    """
    Application context providing in-process access to all services.

    The API layer reaches the ledger only through this object, which keeps
    exactly one engine per process.
    """

    def __init__(
        self,
        repository: Optional[LedgerStateRepository] = None,
        provider: Optional[MarketDataProvider] = None,
        engine: Optional[LedgerEngine] = None,
    ):
        self._repository = repository
        self._provider = provider
        self._engine = engine
        self._owns_database = False
        self._initialized = False

        # Service instances (lazy initialized)
        self._market_data_service: Optional[MarketDataService] = None
        self._trading_service: Optional[TradingService] = None
        self._analysis_service: Optional[AnalysisService] = None

    def initialize(self, data_dir: Optional[Path] = None) -> None:
        """
        Initialize the context and load the saved ledger.

        Args:
            data_dir: Data directory path. Uses settings default if not provided.
        """
        if data_dir:
            settings = get_settings().model_copy(update={"data_dir": data_dir})
            set_settings(settings)

        self.trading.load()
        self._initialized = True

    @property
    def is_initialized(self) -> bool:
        """Check if context is initialized."""
        return self._initialized

    @property
    def settings(self) -> Settings:
        return get_settings()

    def _build_repository(self) -> LedgerStateRepository:
        settings = get_settings()
        backend = settings.persistence_backend.lower()
        if backend == "json":
            return JsonFileLedgerStateRepository(settings.get_state_file())
        if backend == "sqlite":
            session_factory = open_ledger_database(settings.get_database_url())
            self._owns_database = True
            return SqlAlchemyLedgerStateRepository(session_factory)
        raise ValueError(f"Unknown persistence backend: {settings.persistence_backend}")

    # Accessors

    @property
    def repository(self) -> LedgerStateRepository:
        if self._repository is None:
            self._repository = self._build_repository()
        return self._repository

    @property
    def engine(self) -> LedgerEngine:
        """Get the LedgerEngine instance."""
        if self._engine is None:
            settings = get_settings()
            self._engine = LedgerEngine(
                starting_cash=settings.default_starting_cash,
                tax_rate=settings.sell_tax_rate,
            )
        return self._engine

    @property
    def market_data(self) -> MarketDataService:
        """Get the MarketDataService instance."""
        if self._market_data_service is None:
            settings = get_settings()
            provider = self._provider or StubMarketDataProvider(seed=settings.market_data_seed)
            self._market_data_service = MarketDataService(
                provider=provider,
                cache_ttl_seconds=settings.market_data_cache_ttl_seconds,
            )
        return self._market_data_service

    @property
    def trading(self) -> TradingService:
        """Get the TradingService instance."""
        if self._trading_service is None:
            self._trading_service = TradingService(
                engine=self.engine,
                market_data_service=self.market_data,
                repository=self.repository,
            )
        return self._trading_service

    @property
    def analysis(self) -> AnalysisService:
        """Get the AnalysisService instance."""
        if self._analysis_service is None:
            self._analysis_service = AnalysisService(
                engine=self.engine,
                market_data_service=self.market_data,
                base_currency=get_settings().base_currency,
                lock=self.trading.lock,
            )
        return self._analysis_service

    def close(self) -> None:
        """Clean up resources."""
        if self._owns_database:
            close_ledger_database()
            self._owns_database = False


# Global application context (one ledger per process)
_app_context: Optional[AppContext] = None


def get_app_context() -> AppContext:
    """Get or create the global application context."""
    global _app_context
    if _app_context is None:
        _app_context = AppContext()
    return _app_context


def set_app_context(context: Optional[AppContext]) -> None:
    """Set the global application context."""
    global _app_context
    _app_context = context

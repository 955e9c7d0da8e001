"""Application-level exceptions."""


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, code: str = "APP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class InvalidArgumentError(AppError):
    """Raised when a buy/sell receives a non-positive quantity or price."""

    def __init__(self, message: str):
        super().__init__(message, code="INVALID_ARGUMENT")


class InsufficientFundsError(AppError):
    """Raised when a buy costs more than the available cash."""

    def __init__(self, required: str, available: str):
        super().__init__(
            f"Insufficient funds: required {required}, available {available}",
            code="INSUFFICIENT_FUNDS",
        )


class UnknownAssetError(AppError):
    """Raised when selling an asset with no holding."""

    def __init__(self, asset_id: str):
        self.asset_id = asset_id
        super().__init__(f"No holding for asset: {asset_id}", code="UNKNOWN_ASSET")


class InsufficientHoldingsError(AppError):
    """Raised when attempting to sell more units than owned."""

    def __init__(self, asset_id: str, requested: str, available: str):
        super().__init__(
            f"Insufficient holdings of {asset_id}: requested {requested}, available {available}",
            code="INSUFFICIENT_HOLDINGS",
        )


class InvalidStateError(AppError):
    """Raised when a ledger snapshot violates a ledger invariant."""

    def __init__(self, message: str):
        super().__init__(message, code="INVALID_STATE")


class PriceUnavailableError(AppError):
    """Raised when the market feed has no price for an asset."""

    def __init__(self, asset_id: str):
        self.asset_id = asset_id
        super().__init__(f"No market price available for: {asset_id}", code="PRICE_UNAVAILABLE")


class PersistenceError(AppError):
    """Raised when ledger state cannot be saved or loaded."""

    def __init__(self, message: str):
        super().__init__(message, code="PERSISTENCE_ERROR")

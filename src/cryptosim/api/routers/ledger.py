"""Ledger endpoints: trades, history, reset, export/import."""

from decimal import Decimal
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query

from cryptosim.api.deps import get_trading_service
from cryptosim.api.schemas import (
    TradeRequest,
    TransactionResponse,
    TransactionListResponse,
    LedgerStateResponse,
    SellPreviewResponse,
    MaxBuyResponse,
)
from cryptosim.domain.models import TransactionKind
from cryptosim.repositories import ledger_codec
from cryptosim.services import TradingService
from cryptosim.services.trading_service import normalize_asset_id

router = APIRouter(prefix="/ledger", tags=["ledger"])


@router.get("", response_model=LedgerStateResponse)
def get_ledger(
    trading: TradingService = Depends(get_trading_service),
) -> LedgerStateResponse:
    """Return the current ledger snapshot."""
    return LedgerStateResponse.from_domain(trading.snapshot())


@router.post("/buy", response_model=TransactionResponse, status_code=201)
def buy(
    data: TradeRequest,
    trading: TradingService = Depends(get_trading_service),
) -> TransactionResponse:
    """Buy an asset at the given price, or at the market price when omitted."""
    txn = trading.buy(data.asset_id, data.quantity, data.unit_price)
    return TransactionResponse.from_domain(txn)


@router.post("/sell", response_model=TransactionResponse, status_code=201)
def sell(
    data: TradeRequest,
    trading: TradingService = Depends(get_trading_service),
) -> TransactionResponse:
    """Sell an asset at the given price, or at the market price when omitted."""
    txn = trading.sell(data.asset_id, data.quantity, data.unit_price)
    return TransactionResponse.from_domain(txn)


@router.get("/sell/preview", response_model=SellPreviewResponse)
def preview_sell(
    asset_id: str = Query(..., description="Asset id, e.g. bitcoin"),
    quantity: Decimal = Query(...),
    unit_price: Optional[Decimal] = Query(None, description="Defaults to market price"),
    trading: TradingService = Depends(get_trading_service),
) -> SellPreviewResponse:
    """Gross, tax and net proceeds of a prospective sale."""
    asset_id = normalize_asset_id(asset_id)
    if unit_price is None:
        unit_price = trading.current_price(asset_id)
    preview = trading.preview_sell(asset_id, quantity, unit_price)
    return SellPreviewResponse(
        asset_id=asset_id,
        quantity=quantity,
        unit_price=unit_price,
        gross_proceeds=preview.gross_proceeds,
        tax=preview.tax,
        net_proceeds=preview.net_proceeds,
    )


@router.get("/max-buy", response_model=MaxBuyResponse)
def max_buy(
    asset_id: str = Query(...),
    unit_price: Optional[Decimal] = Query(None, description="Defaults to market price"),
    trading: TradingService = Depends(get_trading_service),
) -> MaxBuyResponse:
    """Largest quantity the current cash can buy."""
    asset_id = normalize_asset_id(asset_id)
    if unit_price is None:
        unit_price = trading.current_price(asset_id)
    return MaxBuyResponse(
        asset_id=asset_id,
        unit_price=unit_price,
        max_quantity=trading.max_buy_quantity(asset_id, unit_price),
    )


@router.post("/reset", response_model=LedgerStateResponse)
def reset(
    trading: TradingService = Depends(get_trading_service),
) -> LedgerStateResponse:
    """Clear holdings and history and restore the starting cash."""
    return LedgerStateResponse.from_domain(trading.reset())


@router.get("/transactions", response_model=TransactionListResponse)
def list_transactions(
    asset_id: Optional[str] = Query(None),
    kind: Optional[TransactionKind] = Query(None),
    trading: TradingService = Depends(get_trading_service),
) -> TransactionListResponse:
    """Transaction history, newest first."""
    transactions = trading.history(asset_id=asset_id, kind=kind)
    return TransactionListResponse(
        transactions=[TransactionResponse.from_domain(t) for t in transactions],
        total=len(transactions),
    )


@router.get("/export")
def export_ledger(
    trading: TradingService = Depends(get_trading_service),
) -> dict[str, Any]:
    """Export the ledger in its persistence format."""
    return ledger_codec.state_to_dict(trading.snapshot())


@router.post("/import", response_model=LedgerStateResponse)
def import_ledger(
    record: dict[str, Any] = Body(...),
    trading: TradingService = Depends(get_trading_service),
) -> LedgerStateResponse:
    """Replace the ledger with an exported record. Invalid records are rejected whole."""
    state = ledger_codec.state_from_dict(record)
    return LedgerStateResponse.from_domain(trading.restore(state))

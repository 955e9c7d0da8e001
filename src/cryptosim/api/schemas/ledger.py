"""Pydantic schemas for ledger endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from cryptosim.domain.models import Holding, LedgerState, Transaction, TransactionKind


class TradeRequest(BaseModel):
    """Request body for a buy or sell. unit_price defaults to the market price."""

    asset_id: str = Field(..., min_length=1)
    quantity: Decimal
    unit_price: Optional[Decimal] = None


class TransactionResponse(BaseModel):
    """Response schema for a ledger transaction."""

    id: str
    asset_id: str
    quantity: Decimal
    unit_price: Decimal
    kind: TransactionKind
    timestamp: datetime
    tax_withheld: Optional[Decimal] = None
    gross_amount: Decimal
    net_cash_impact: Decimal

    @classmethod
    def from_domain(cls, txn: Transaction) -> "TransactionResponse":
        return cls(
            id=txn.id,
            asset_id=txn.asset_id,
            quantity=txn.quantity,
            unit_price=txn.unit_price,
            kind=txn.kind,
            timestamp=txn.timestamp,
            tax_withheld=txn.tax_withheld,
            gross_amount=txn.gross_amount,
            net_cash_impact=txn.net_cash_impact,
        )


class TransactionListResponse(BaseModel):
    """Response schema for transaction history (newest first)."""

    transactions: list[TransactionResponse]
    total: int


class HoldingResponse(BaseModel):
    """Response schema for a single holding."""

    asset_id: str
    quantity: Decimal
    average_cost: Decimal

    @classmethod
    def from_domain(cls, holding: Holding) -> "HoldingResponse":
        return cls(
            asset_id=holding.asset_id,
            quantity=holding.quantity,
            average_cost=holding.average_cost,
        )


class LedgerStateResponse(BaseModel):
    """Response schema for a full ledger snapshot."""

    cash_balance: Decimal
    holdings: list[HoldingResponse]
    transactions: list[TransactionResponse]

    @classmethod
    def from_domain(cls, state: LedgerState) -> "LedgerStateResponse":
        return cls(
            cash_balance=state.cash_balance,
            holdings=[HoldingResponse.from_domain(h) for h in state.holdings.values()],
            transactions=[TransactionResponse.from_domain(t) for t in state.transactions],
        )


class SellPreviewResponse(BaseModel):
    """Response schema for a sale proceeds preview."""

    asset_id: str
    quantity: Decimal
    unit_price: Decimal
    gross_proceeds: Decimal
    tax: Decimal
    net_proceeds: Decimal


class MaxBuyResponse(BaseModel):
    """Response schema for the largest affordable buy."""

    asset_id: str
    unit_price: Decimal
    max_quantity: Decimal

"""Serialization of LedgerState to and from plain JSON-compatible dicts.

Record layout::

    {
        "cashBalance": "9947.00",
        "holdings": [{"assetId": "bitcoin", "quantity": "1", "averageCost": "100"}],
        "transactions": [
            {"id": "...", "assetId": "bitcoin", "quantity": "1", "unitPrice": "150",
             "kind": "SELL", "timestamp": "2024-06-15T14:30:00+00:00", "taxWithheld": "3.00"}
        ]
    }

Decimals are written as strings so values survive the round trip exactly.
"""

import json
from decimal import Decimal, InvalidOperation
from typing import Any

from cryptosim.core.exceptions import InvalidStateError
from cryptosim.core.timezone import parse_datetime_utc, to_utc
from cryptosim.domain.models import Holding, LedgerState, Transaction, TransactionKind


def state_to_dict(state: LedgerState) -> dict[str, Any]:
    """Convert a ledger state into the persistence record."""
    return {
        "cashBalance": str(state.cash_balance),
        "holdings": [
            {
                "assetId": h.asset_id,
                "quantity": str(h.quantity),
                "averageCost": str(h.average_cost),
            }
            for h in state.holdings.values()
        ],
        "transactions": [_transaction_to_dict(t) for t in state.transactions],
    }


def _transaction_to_dict(txn: Transaction) -> dict[str, Any]:
    data = {
        "id": txn.id,
        "assetId": txn.asset_id,
        "quantity": str(txn.quantity),
        "unitPrice": str(txn.unit_price),
        "kind": txn.kind.value,
        "timestamp": to_utc(txn.timestamp).isoformat(),
    }
    if txn.tax_withheld is not None:
        data["taxWithheld"] = str(txn.tax_withheld)
    return data


def state_from_dict(data: Any) -> LedgerState:
    """
    Build a ledger state from a persistence record.

    Raises InvalidStateError on a structurally malformed record. Ledger
    invariants are checked later, when the state is restored into an engine.
    """
    if not isinstance(data, dict):
        raise InvalidStateError("Ledger record must be an object")
    try:
        holdings: dict[str, Holding] = {}
        for item in data.get("holdings", []):
            holding = Holding(
                asset_id=item["assetId"],
                quantity=_decimal(item["quantity"]),
                average_cost=_decimal(item["averageCost"]),
            )
            if holding.asset_id in holdings:
                raise InvalidStateError(f"Duplicate holding for asset: {holding.asset_id}")
            holdings[holding.asset_id] = holding

        transactions = [
            Transaction(
                id=item["id"],
                asset_id=item["assetId"],
                quantity=_decimal(item["quantity"]),
                unit_price=_decimal(item["unitPrice"]),
                kind=TransactionKind(item["kind"]),
                timestamp=parse_datetime_utc(item["timestamp"]),
                tax_withheld=(
                    _decimal(item["taxWithheld"])
                    if item.get("taxWithheld") is not None
                    else None
                ),
            )
            for item in data.get("transactions", [])
        ]

        return LedgerState(
            cash_balance=_decimal(data["cashBalance"]),
            holdings=holdings,
            transactions=transactions,
        )
    except InvalidStateError:
        raise
    except (KeyError, TypeError, ValueError, OverflowError) as exc:
        raise InvalidStateError(f"Malformed ledger record: {exc!r}") from exc


def _decimal(value: Any) -> Decimal:
    if isinstance(value, bool):
        raise ValueError(f"expected a decimal string, got {value!r}")
    if isinstance(value, float):
        value = str(value)
    try:
        return Decimal(value)
    except InvalidOperation as exc:
        raise ValueError(f"not a decimal: {value!r}") from exc


def dumps(state: LedgerState) -> str:
    """Serialize a ledger state to a JSON string."""
    return json.dumps(state_to_dict(state), indent=2)


def loads(text: str) -> LedgerState:
    """Parse a JSON string produced by dumps()."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidStateError(f"Ledger record is not valid JSON: {exc}") from exc
    return state_from_dict(data)

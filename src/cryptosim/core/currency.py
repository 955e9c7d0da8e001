"""Display currency conversion and number formatting.

The ledger always stores and computes in the base currency (USD). These
helpers are applied to outputs for display only.
"""

from decimal import Decimal, ROUND_HALF_UP

from cryptosim.core.exceptions import InvalidArgumentError

# Static rates relative to USD
CURRENCY_RATES: dict[str, Decimal] = {
    "USD": Decimal("1"),
    "EUR": Decimal("0.91"),
    "PLN": Decimal("3.94"),
}

_CURRENCY_SYMBOLS = {"USD": "$", "EUR": "€", "PLN": "zł"}

_CENT = Decimal("0.01")


def supported_currencies() -> list[str]:
    return list(CURRENCY_RATES)


def convert_amount(amount: Decimal, currency: str, base_currency: str = "USD") -> Decimal:
    """Convert an amount from the base currency into a display currency."""
    currency = currency.upper()
    base_currency = base_currency.upper()
    for code in (currency, base_currency):
        if code not in CURRENCY_RATES:
            raise InvalidArgumentError(f"Unsupported currency: {code}")
    if currency == base_currency:
        return amount
    return amount / CURRENCY_RATES[base_currency] * CURRENCY_RATES[currency]


def format_currency(amount: Decimal, currency: str = "USD") -> str:
    """Format an amount with two decimals and a currency sign, e.g. ``$1,234.50``."""
    currency = currency.upper()
    rounded = amount.quantize(_CENT, rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    body = f"{abs(rounded):,.2f}"
    symbol = _CURRENCY_SYMBOLS.get(currency)
    if symbol is None:
        return f"{sign}{body} {currency}"
    if currency == "PLN":
        return f"{sign}{body} {symbol}"
    return f"{sign}{symbol}{body}"


def format_percentage(value: Decimal) -> str:
    """Format a percentage value (already multiplied by 100)."""
    return f"{value.quantize(_CENT, rounding=ROUND_HALF_UP)}%"


def format_crypto(amount: Decimal) -> str:
    """Format a crypto quantity with precision depending on its magnitude."""
    if amount < Decimal("0.01"):
        places = 8
    elif amount < 1:
        places = 6
    elif amount < 1000:
        places = 4
    else:
        places = 2
    return f"{amount.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)}"

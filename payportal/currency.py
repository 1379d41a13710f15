"""
Currency Converter — fixed-rate conversion into the settlement currency.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from payportal.errors import InvalidAmount, UnsupportedCurrency

SETTLEMENT_CURRENCY = "ZAR"

# Units of settlement currency per unit of source currency
RATES = {
    "USD": Decimal("19.12"),
    "EUR": Decimal("21.22"),
    "GBP": Decimal("23.11"),
    SETTLEMENT_CURRENCY: Decimal("1"),
}

SUPPORTED_CURRENCIES = tuple(RATES)

CENTS = Decimal("0.01")


def rate_for(currency):
    code = (currency or "").strip() if isinstance(currency, str) else currency
    if code not in RATES:
        raise UnsupportedCurrency(f"Unsupported currency: {currency}")
    return RATES[code]


def parse_amount(amount, cents=False):
    """
    Coerce user input to a positive finite Decimal.
    Floats go through str() so 0.1 stays 0.1. With cents=True the value is
    rounded half-up to cents and must still be positive afterwards.
    """
    if isinstance(amount, bool) or amount is None:
        raise InvalidAmount(f"Invalid amount: {amount!r}")
    if isinstance(amount, float):
        amount = str(amount)
    try:
        value = Decimal(amount.strip() if isinstance(amount, str) else amount)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidAmount(f"Invalid amount: {amount!r}")
    if not value.is_finite() or value <= 0:
        raise InvalidAmount(f"Amount must be a positive number, got {amount!r}")
    if cents:
        value = value.quantize(CENTS, rounding=ROUND_HALF_UP)
        if value <= 0:
            raise InvalidAmount(f"Amount is less than one cent: {amount!r}")
    return value


def convert(currency, amount):
    """Return `amount` of `currency` expressed in ZAR, rounded to cents."""
    rate = rate_for(currency)
    value = parse_amount(amount)
    converted = (value * rate).quantize(CENTS, rounding=ROUND_HALF_UP)
    if converted <= 0:
        raise InvalidAmount(f"Amount is less than one cent once converted: {amount!r}")
    return converted


def format_amount(value):
    """Two-decimal string for the wire, e.g. Decimal('191.2') -> '191.20'."""
    if value is None:
        return None
    return f"{Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP):.2f}"

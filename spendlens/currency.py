"""Static-rate currency conversion and display formatting."""

from decimal import ROUND_HALF_UP, Decimal

from .models import Currency

# Units of each currency per USD, fixed at build time
RATES: dict[Currency, float] = {
    Currency.USD: 1.0,
    Currency.GBP: 0.79,
    Currency.EUR: 0.92,
    Currency.JPY: 149.50,
    Currency.CNY: 7.24,
    Currency.NGN: 1550.00,
}

SYMBOLS: dict[Currency, str] = {
    Currency.USD: "$",
    Currency.GBP: "£",
    Currency.EUR: "€",
    Currency.JPY: "¥",
    Currency.CNY: "¥",
    Currency.NGN: "₦",
}

NAMES: dict[Currency, str] = {
    Currency.USD: "US Dollar",
    Currency.GBP: "British Pound",
    Currency.EUR: "Euro",
    Currency.JPY: "Japanese Yen",
    Currency.CNY: "Chinese Yuan",
    Currency.NGN: "Nigerian Naira",
}

# Rendered without minor units
WHOLE_UNIT_CURRENCIES = frozenset({Currency.JPY, Currency.NGN})


def _quantize(amount: float, places: int) -> Decimal:
    exponent = Decimal(1).scaleb(-places)
    return Decimal(str(amount)).quantize(exponent, rounding=ROUND_HALF_UP)


def convert(amount: float, currency: Currency) -> float:
    """Convert a USD amount into ``currency``."""
    return amount * RATES[Currency(currency)]


def format_currency(amount: float, currency: Currency) -> str:
    """Format an amount already expressed in ``currency``.

    Whole-unit currencies are rounded half-up with no decimals; the rest show
    exactly two decimals. Both use thousands separators.

    >>> format_currency(1234.5, Currency.USD)
    '$1,234.50'
    >>> format_currency(1234.5, Currency.JPY)
    '¥1,235'
    """
    currency = Currency(currency)
    symbol = SYMBOLS[currency]
    if currency in WHOLE_UNIT_CURRENCIES:
        return f"{symbol}{_quantize(amount, 0):,.0f}"
    return f"{symbol}{_quantize(amount, 2):,.2f}"


def format_compact(amount: float, currency: Currency) -> str:
    """Short form for chart axes and cards.

    >>> format_compact(1_500_000, Currency.USD)
    '$1.5M'
    """
    currency = Currency(currency)
    symbol = SYMBOLS[currency]
    if amount >= 1_000_000:
        return f"{symbol}{_quantize(amount / 1_000_000, 1)}M"
    if amount >= 1_000:
        return f"{symbol}{_quantize(amount / 1_000, 1)}K"
    if currency in WHOLE_UNIT_CURRENCIES:
        return f"{symbol}{_quantize(amount, 0)}"
    return f"{symbol}{_quantize(amount, 2)}"


def display(amount_usd: float, currency: Currency, compact: bool = False) -> str:
    """Convert a USD amount and format it for display."""
    converted = convert(amount_usd, currency)
    if compact:
        return format_compact(converted, currency)
    return format_currency(converted, currency)

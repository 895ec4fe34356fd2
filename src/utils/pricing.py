"""Price display helpers."""
from typing import Dict

CURRENCY_SYMBOLS: Dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
}


def format_price(price: float, currency: str = "USD", show_decimals: bool = True) -> str:
    """
    Format a price for display, e.g. ``format_price(1234.5) == "$1,234.50"``.

    Unknown currencies are prefixed with their code ("CAD 12.00").
    """
    amount = f"{float(price):,.2f}" if show_decimals else f"{round(float(price)):,}"
    symbol = CURRENCY_SYMBOLS.get(currency.upper())
    if symbol is None:
        return f"{currency.upper()} {amount}"
    if amount.startswith("-"):
        return f"-{symbol}{amount[1:]}"
    return f"{symbol}{amount}"


def calculate_discount_percentage(original_price: float, current_price: float) -> int:
    """Whole-percent discount from ``original_price``; 0 when there is no discount."""
    if original_price <= current_price:
        return 0
    discount = (original_price - current_price) / original_price * 100
    return int(discount + 0.5)

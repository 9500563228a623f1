import os

from dotenv import load_dotenv

load_dotenv()

CURRENCY_SYMBOL = os.getenv("CURRENCY_SYMBOL", "¥")


def format_currency(amount: float, symbol: str = CURRENCY_SYMBOL) -> str:
    """Format a float as currency string, e.g. '¥1,234.56' or '-¥12.00'."""
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def format_signed(amount: float, symbol: str = CURRENCY_SYMBOL) -> str:
    """Format with +/- sign."""
    sign = "+" if amount >= 0 else "-"
    return f"{sign}{symbol}{abs(amount):,.2f}"

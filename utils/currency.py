def format_currency(amount: float, symbol: str = "R$") -> str:
    """Format a float in Brazilian style, e.g. 'R$ 1.234,56'."""
    sign = "-" if amount < 0 else ""
    text = f"{abs(amount):,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}{symbol} {text}"


def format_signed(amount: float, symbol: str = "R$") -> str:
    """Format with +/- sign."""
    sign = "+" if amount >= 0 else "-"
    return f"{sign}{format_currency(abs(amount), symbol)}"

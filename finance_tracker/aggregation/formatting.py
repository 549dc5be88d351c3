"""Display formatting for amounts and recurring payment periods."""

from decimal import ROUND_HALF_UP, Decimal

from finance_tracker.models.records import RecurringPayment


_CENT = Decimal("0.01")


def format_currency(amount: Decimal, symbol: str = "£") -> str:
    """
    Two decimals, thousands separators, symbol before the digits.

    Negative amounts put the sign before the symbol: -£80.00.
    """
    rounded = Decimal(amount).quantize(_CENT, rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    return f"{sign}{symbol}{abs(rounded):,.2f}"


def recurring_period_label(payment: RecurringPayment) -> str:
    """E.g. 'Mar 2024 to ongoing' or 'Mar 2024 to Jun 2025'."""
    start = payment.start_date.strftime("%b %Y")
    if payment.is_open_ended:
        return f"{start} to ongoing"
    return f"{start} to {payment.end_date.strftime('%b %Y')}"

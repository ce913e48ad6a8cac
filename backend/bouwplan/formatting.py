"""Formatting helpers for euro amounts and percentages.

Amounts follow Dutch notation as shown in the wizard and dashboard
(e.g. '€ 330.000' rather than '€330,000.00').
"""

from __future__ import annotations


def _dutch_thousands(amount: float) -> str:
    return f"{amount:,.0f}".replace(",", ".")


def format_currency(amount: float) -> str:
    """Format an amount as whole euros with dot thousand separators.

    - 330000 -> '€ 330.000'
    - -20000 -> '-€ 20.000'
    """
    sign = "-" if amount < 0 else ""
    return f"{sign}€ {_dutch_thousands(abs(amount))}"


def format_cost_range(low: float, high: float) -> str:
    """Format a low/high pair.

    - Millions (high >= 1M): '€ 1,2M - € 1,4M'
    - Below 1M: '€ 330.000 - € 365.000'
    """
    if high >= 1_000_000:
        low_m = f"{low / 1_000_000:.1f}".replace(".", ",")
        high_m = f"{high / 1_000_000:.1f}".replace(".", ",")
        return f"€ {low_m}M - € {high_m}M"
    return f"{format_currency(low)} - {format_currency(high)}"


def format_percent(percent: int) -> str:
    return f"{percent}%"

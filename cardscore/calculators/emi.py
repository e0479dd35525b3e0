"""Equated monthly installment (EMI) for an amortizing loan."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


def to_pkr(value: Decimal) -> Decimal:
    """Round to 2 decimal places."""
    return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def calculate_emi(principal: Decimal, annual_rate_percent: Decimal, tenure_months: int) -> Decimal:
    """Monthly installment by the standard amortization formula.

    EMI = P·r·(1+r)^n / ((1+r)^n − 1), with r the monthly rate.
    Zero tenure → 0; zero rate → straight-line P / n.
    """
    if tenure_months <= 0 or principal <= 0:
        return Decimal("0.00")

    monthly_rate = annual_rate_percent / Decimal("100") / Decimal("12")
    if monthly_rate == 0:
        return to_pkr(principal / tenure_months)

    growth = (Decimal("1") + monthly_rate) ** tenure_months
    return to_pkr(principal * monthly_rate * growth / (growth - Decimal("1")))

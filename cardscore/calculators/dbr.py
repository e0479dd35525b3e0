"""Debt Burden Ratio (DBR) calculator: stage A of the DBR module.

Pure Python, Decimal arithmetic. Implements:
- Net income fallback chain: reported net → gross − deductions → gross → default
- Total monthly obligations: existing EMIs + 5% of card limit + OD interest / 12 + proposed EMI
- DBR % = obligations / net income × 100
- Dynamic threshold from the average of an income band score and an obligations band score

Dynamic threshold (on the band average):
  ≥ 40 → 30%   (high income / low obligations: strictest)
  ≥ 30 → 35%
  ≥ 20 → 40%
  else → 45%

Status: pass if DBR % ≤ threshold, else fail. A pass for an applicant older than
the age override (65) becomes "conditionally fail - redirect to RRU".
"""

from __future__ import annotations

import logging
from decimal import Decimal

from cardscore.calculators.emi import calculate_emi, to_pkr
from cardscore.config import settings
from cardscore.models.enums import DbrStatus, IncomeSource
from cardscore.schemas.applicant import ObligationsInput
from cardscore.schemas.scoring import DbrComputation

logger = logging.getLogger(__name__)

CREDIT_CARD_RATE = Decimal("0.05")

# (upper bound inclusive, band score); None = no upper bound
_INCOME_BANDS: tuple[tuple[Decimal | None, int], ...] = (
    (Decimal("10000"), 10),
    (Decimal("100000"), 20),
    (Decimal("1000000"), 30),
    (None, 40),
)

# Inverse sense: lower obligations score higher
_OBLIGATION_BANDS: tuple[tuple[Decimal | None, int], ...] = (
    (Decimal("10000"), 50),
    (Decimal("100000"), 40),
    (Decimal("1000000"), 30),
    (Decimal("10000000"), 20),
    (None, 10),
)

# (minimum band average, threshold %)
_THRESHOLDS: tuple[tuple[Decimal, Decimal], ...] = (
    (Decimal("40"), Decimal("30")),
    (Decimal("30"), Decimal("35")),
    (Decimal("20"), Decimal("40")),
)
_LENIENT_THRESHOLD = Decimal("45")


def _band(value: Decimal, bands: tuple[tuple[Decimal | None, int], ...]) -> int:
    for upper, score in bands:
        if upper is None or value <= upper:
            return score
    raise AssertionError("band table must end with an open bound")


def income_band_score(net_income: Decimal) -> int:
    """Band score of monthly net income (10–40)."""
    return _band(net_income, _INCOME_BANDS)


def obligations_band_score(total_obligations: Decimal) -> int:
    """Band score of total monthly obligations (50–10, lower obligations score higher)."""
    return _band(total_obligations, _OBLIGATION_BANDS)


def dynamic_threshold(income_score: int, obligations_score: int) -> Decimal:
    """DBR threshold (%) from the average of the two band scores."""
    average = Decimal(income_score + obligations_score) / 2
    for minimum, threshold in _THRESHOLDS:
        if average >= minimum:
            return threshold
    return _LENIENT_THRESHOLD


def resolve_net_income(
    net_monthly_income: Decimal | None,
    gross_monthly_income: Decimal | None = None,
    taxes_and_deductions: Decimal | None = None,
) -> tuple[Decimal, IncomeSource]:
    """Pick the income DBR divides by. Never fails: ends at a conservative default."""
    if net_monthly_income is not None and net_monthly_income > 0:
        return net_monthly_income, IncomeSource.REPORTED_NET

    if gross_monthly_income is not None and gross_monthly_income > 0:
        deductions = taxes_and_deductions or Decimal("0")
        derived = gross_monthly_income - deductions
        if deductions > 0 and derived > 0:
            return derived, IncomeSource.GROSS_MINUS_DEDUCTIONS
        return gross_monthly_income, IncomeSource.GROSS

    return settings.engine.dbr_default_net_income, IncomeSource.DEFAULT


def calculate_dbr(
    obligations: ObligationsInput,
    net_monthly_income: Decimal | None,
    gross_monthly_income: Decimal | None = None,
    taxes_and_deductions: Decimal | None = None,
    applicant_age: int | None = None,
) -> DbrComputation:
    """Compute DBR percentage, dynamic threshold and pass/fail status.

    Args:
        obligations: Existing and proposed monthly obligations.
        net_monthly_income: Reported net income (may be missing or non-positive).
        gross_monthly_income: Gross income for the fallback chain.
        taxes_and_deductions: Deductions subtracted from gross in the fallback chain.
        applicant_age: Used when ``obligations.applicant_age`` is not set.

    Returns:
        DbrComputation with percentage, threshold, status and the full breakdown.
    """
    net_income, income_source = resolve_net_income(
        net_monthly_income, gross_monthly_income, taxes_and_deductions
    )
    if income_source is not IncomeSource.REPORTED_NET:
        logger.info("DBR net income fallback: %s = %s", income_source.value, net_income)

    cc_component = to_pkr(obligations.credit_card_limit * CREDIT_CARD_RATE)
    od_component = to_pkr(obligations.overdraft_annual_interest / 12)
    proposed_emi = calculate_emi(
        obligations.proposed_loan_amount,
        obligations.annual_rate_percent,
        obligations.proposed_tenure_months,
    )
    existing = to_pkr(obligations.existing_emis)
    total_obligations = existing + cc_component + od_component + proposed_emi

    dbr = total_obligations / net_income * 100

    income_score = income_band_score(net_income)
    obligations_score = obligations_band_score(total_obligations)
    threshold = dynamic_threshold(income_score, obligations_score)

    status = DbrStatus.PASS if dbr <= threshold else DbrStatus.FAIL

    age = obligations.applicant_age if obligations.applicant_age is not None else applicant_age
    if status is DbrStatus.PASS and age is not None and age > settings.engine.dbr_age_override:
        status = DbrStatus.CONDITIONAL_FAIL

    result = DbrComputation(
        dbr_percentage=to_pkr(dbr),
        threshold=threshold,
        status=status,
        net_income=to_pkr(net_income),
        total_obligations=to_pkr(total_obligations),
        income_band_score=income_score,
        obligations_band_score=obligations_score,
        band_average=Decimal(income_score + obligations_score) / 2,
        existing_emis=existing,
        credit_card_component=cc_component,
        overdraft_component=od_component,
        proposed_emi=proposed_emi,
        income_source=income_source,
    )
    logger.debug(
        "DBR computed: %s%% vs threshold %s%% → %s",
        result.dbr_percentage,
        result.threshold,
        result.status.value,
    )
    return result

"""Income evaluator: threshold, stability and tenure.

Three additive components, total capped at 100, never a hard stop:
- Threshold (60): net income against the minimum for employment × salary transfer × ETB
- Stability (25): net / gross ratio ≥ 0.8 → 25, ≥ 0.6 → 20, else 10
- Tenure (15): ≥ 5 years → 15, ≥ 3 → 12, ≥ 1 → 8, else 0
"""

from __future__ import annotations

import logging
from decimal import Decimal

from cardscore.models.enums import EmploymentType, ModuleName, SalaryTransfer
from cardscore.schemas.scoring import ModuleScore

logger = logging.getLogger(__name__)

MODULE = ModuleName.INCOME

THRESHOLD_POINTS = 60

# (employment type, salary transfer) → (ETB minimum, NTB minimum), monthly net PKR
INCOME_THRESHOLDS: dict[tuple[EmploymentType, SalaryTransfer], tuple[Decimal, Decimal]] = {
    (EmploymentType.PERMANENT, SalaryTransfer.SALARY_TRANSFER): (Decimal("40000"), Decimal("45000")),
    (EmploymentType.PERMANENT, SalaryTransfer.NON_SALARY_TRANSFER): (Decimal("45000"), Decimal("50000")),
    (EmploymentType.CONTRACTUAL, SalaryTransfer.SALARY_TRANSFER): (Decimal("60000"), Decimal("65000")),
    (EmploymentType.CONTRACTUAL, SalaryTransfer.NON_SALARY_TRANSFER): (Decimal("65000"), Decimal("70000")),
}

# Salary transfer does not apply to self-employed and business income
BUSINESS_THRESHOLDS: tuple[Decimal, Decimal] = (Decimal("100000"), Decimal("120000"))

# (minimum ratio, points, label)
_STABILITY_BANDS: tuple[tuple[Decimal, int, str], ...] = (
    (Decimal("0.8"), 25, "High"),
    (Decimal("0.6"), 20, "Medium"),
)
_STABILITY_FLOOR = (10, "Low")

# (minimum years, points, label)
_TENURE_BANDS: tuple[tuple[Decimal, int, str], ...] = (
    (Decimal("5"), 15, "Excellent"),
    (Decimal("3"), 12, "Good"),
    (Decimal("1"), 8, "Acceptable"),
)


def minimum_income(
    employment_type: EmploymentType,
    salary_transfer: SalaryTransfer,
    is_existing_customer: bool,
) -> Decimal | None:
    """Minimum net income for this profile; None when no table row applies."""
    if employment_type in (EmploymentType.SELF_EMPLOYED, EmploymentType.BUSINESS):
        row = BUSINESS_THRESHOLDS
    else:
        row = INCOME_THRESHOLDS.get((employment_type, salary_transfer))
    if row is None:
        return None
    etb, ntb = row
    return etb if is_existing_customer else ntb


def stability_points(net: Decimal | None, gross: Decimal | None) -> tuple[int, str]:
    if net is None or gross is None or net <= 0 or gross <= 0:
        return 0, "Stability not measurable (missing gross/net income)"
    ratio = net / gross
    percent = f"{ratio * 100:.1f}%"
    for minimum, points, label in _STABILITY_BANDS:
        if ratio >= minimum:
            return points, f"{label} stability ratio: {percent} → +{points}"
    points, label = _STABILITY_FLOOR
    return points, f"{label} stability ratio: {percent} → +{points}"


def tenure_points(years: Decimal) -> tuple[int, str]:
    shown = years.normalize()
    for minimum, points, label in _TENURE_BANDS:
        if years >= minimum:
            return points, f"{label} tenure: {shown:f} years → +{points}"
    return 0, f"Low tenure: {shown:f} years → +0"


def evaluate_income(
    net_income: Decimal | None,
    gross_income: Decimal | None,
    employment_type: EmploymentType,
    salary_transfer: SalaryTransfer,
    is_existing_customer: bool,
    tenure_years: Decimal,
) -> ModuleScore:
    """Score income adequacy, net/gross stability and employment tenure."""
    notes: list[str] = []
    score = 0

    if employment_type is EmploymentType.PROBATION:
        notes.append("Probation case → Score based on DBR, no threshold credit")
    else:
        minimum = minimum_income(employment_type, salary_transfer, is_existing_customer)
        shown = net_income if net_income is not None else Decimal("0")
        if minimum is not None and net_income is not None and net_income >= minimum:
            score += THRESHOLD_POINTS
            notes.append(f"Income threshold met: PKR {shown:,} ≥ {minimum:,} → +{THRESHOLD_POINTS}")
        elif minimum is None:
            notes.append(f"Income threshold NOT met: no threshold for employment type '{employment_type.value}'")
        else:
            notes.append(f"Income threshold NOT met: PKR {shown:,} < {minimum:,}")

    points, note = stability_points(net_income, gross_income)
    score += points
    notes.append(note)

    points, note = tenure_points(tenure_years)
    score += points
    notes.append(note)

    logger.debug("Income score %s (%s, %s)", score, employment_type.value, salary_transfer.value)
    return ModuleScore.ok(MODULE, min(score, 100), notes=notes)

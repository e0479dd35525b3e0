"""Credit limit and card-type assignment.

Pure Python, Decimal arithmetic. The assigned limit is the most restrictive of:
- Income-based limit: net income × a multiple from the bracket table below
- DBR-based limit: residual income at 40% DBR, capitalized at 5% monthly servicing
- Regulatory cap: remaining room under the SBP exposure caps

Income multiples (ETB / NTB):
  < 20,000   → 2.5  / 2.0
  < 50,000   → 3.0  / 2.5
  < 100,000  → 3.5  / 2.75
  < 150,000  → 4.0  / 3.25
  otherwise  → 5.0  / 3.75
Self-employed overrides to 2.75 / 2.5; contractual × 0.9; salary transfer × 1.1.
Segments: pensioner → 2.0; remittance → 1.0 / 0.8; MVC × 1.2 capped at 4.5.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from cardscore.models.enums import CardType, EmploymentType, LimitOutcome, SalaryTransfer
from cardscore.schemas.applicant import ApplicantRecord, CbsSummary
from cardscore.schemas.scoring import CreditLimitResult

# (exclusive upper bound, ETB multiple, NTB multiple)
_INCOME_MULTIPLES: tuple[tuple[Decimal | None, Decimal, Decimal], ...] = (
    (Decimal("20000"), Decimal("2.5"), Decimal("2.0")),
    (Decimal("50000"), Decimal("3.0"), Decimal("2.5")),
    (Decimal("100000"), Decimal("3.5"), Decimal("2.75")),
    (Decimal("150000"), Decimal("4.0"), Decimal("3.25")),
    (None, Decimal("5.0"), Decimal("3.75")),
)

MAX_DBR = Decimal("0.40")
CARD_SERVICING_RATE = Decimal("0.05")

# SBP regulatory caps (PKR)
TOTAL_EXPOSURE_CAP = Decimal("7000000")
UNSECURED_EXPOSURE_CAP = Decimal("3000000")
CARD_AND_PERSONAL_LOAN_CAP = Decimal("3000000")

CARD_RANGES: dict[CardType, tuple[Decimal, Decimal]] = {
    CardType.SILVER: (Decimal("25000"), Decimal("125000")),
    CardType.GOLD: (Decimal("125001"), Decimal("299999")),
    CardType.PLATINUM: (Decimal("300000"), Decimal("7000000")),
}

_CARD_BASE_SCORE: dict[CardType, Decimal] = {
    CardType.PLATINUM: Decimal("100"),
    CardType.GOLD: Decimal("80"),
    CardType.SILVER: Decimal("60"),
}


def _whole(value: Decimal) -> Decimal:
    return value.quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def income_multiple(applicant: ApplicantRecord, net_income: Decimal) -> Decimal:
    """Limit multiple of monthly net income for this applicant."""
    is_etb = applicant.is_existing_customer

    multiple = Decimal("0")
    for upper, etb_multiple, ntb_multiple in _INCOME_MULTIPLES:
        if upper is None or net_income < upper:
            multiple = etb_multiple if is_etb else ntb_multiple
            break

    if applicant.employment_type is EmploymentType.SELF_EMPLOYED:
        multiple = Decimal("2.75") if is_etb else Decimal("2.5")
    elif applicant.employment_type is EmploymentType.CONTRACTUAL:
        multiple *= Decimal("0.9")

    if applicant.salary_transfer_flag is SalaryTransfer.SALARY_TRANSFER:
        multiple *= Decimal("1.1")

    if applicant.is_pensioner:
        multiple = Decimal("2.0")
    elif applicant.is_remittance_customer:
        multiple = Decimal("1.0") if is_etb else Decimal("0.8")
    elif applicant.is_mvc:
        multiple = min(multiple * Decimal("1.2"), Decimal("4.5"))

    return multiple


def regulatory_cap(cbs: CbsSummary) -> Decimal:
    """Remaining room under the tightest SBP exposure cap, never negative."""
    remaining = min(
        TOTAL_EXPOSURE_CAP - cbs.total_exposure,
        UNSECURED_EXPOSURE_CAP - cbs.unsecured_exposure,
        CARD_AND_PERSONAL_LOAN_CAP - (cbs.credit_card_exposure + cbs.personal_loan_exposure),
    )
    return max(Decimal("0"), remaining)


def card_type_for(limit: Decimal) -> CardType:
    if limit >= CARD_RANGES[CardType.PLATINUM][0]:
        return CardType.PLATINUM
    if limit >= CARD_RANGES[CardType.GOLD][0]:
        return CardType.GOLD
    return CardType.SILVER


def _limit_score(limit: Decimal, card_type: CardType, outcome: LimitOutcome) -> Decimal:
    if outcome is LimitOutcome.DECLINE:
        return Decimal("0")
    if outcome is LimitOutcome.CAP:
        return Decimal("50")
    low, high = CARD_RANGES[card_type]
    position = (limit - low) / (high - low)
    return _whole(min(_CARD_BASE_SCORE[card_type] + position * 20, Decimal("100")))


def assign_credit_limit(
    applicant: ApplicantRecord,
    cbs: CbsSummary,
    net_income: Decimal,
) -> CreditLimitResult:
    """Assign a card limit and tier.

    Args:
        applicant: Applicant record (relationship, employment, segments).
        cbs: CBS summary carrying the eCIB exposures.
        net_income: Monthly net income actually used by DBR.

    Returns:
        CreditLimitResult with the limit, card type and APPROVE / CAP / DECLINE outcome.
    """
    notes: list[str] = []

    multiple = income_multiple(applicant, net_income)
    income_based = _whole(net_income * multiple)
    notes.append(f"Income-based limit: PKR {income_based:,} ({multiple.normalize()}x net income)")

    dbr_based = _whole(net_income * (Decimal("1") - MAX_DBR) / CARD_SERVICING_RATE)
    notes.append(f"DBR-based limit: PKR {dbr_based:,}")

    cap = regulatory_cap(cbs)
    notes.append(f"Regulatory cap: PKR {cap:,}")

    final_limit = min(income_based, dbr_based, cap)
    card_type = card_type_for(final_limit)
    low, high = CARD_RANGES[card_type]
    notes.append(f"Card type: {card_type.value} (PKR {low:,} - {high:,})")

    outcome = LimitOutcome.APPROVE
    reason = ""
    if final_limit < CARD_RANGES[CardType.SILVER][0]:
        outcome = LimitOutcome.DECLINE
        reason = "Assignable limit below the minimum card limit"
    elif cbs.total_exposure + final_limit > TOTAL_EXPOSURE_CAP:
        outcome = LimitOutcome.CAP
        reason = "Total exposure exceeds SBP limit"
    elif cbs.unsecured_exposure + final_limit > UNSECURED_EXPOSURE_CAP:
        outcome = LimitOutcome.CAP
        reason = "Unsecured exposure exceeds SBP limit"
    elif card_type is CardType.PLATINUM and applicant.is_existing_customer and not (
        applicant.is_cross_sell or applicant.is_mvc or applicant.is_remittance_customer
    ):
        outcome = LimitOutcome.CAP
        reason = "Card type not eligible for customer profile"
    if reason:
        notes.append(f"{outcome.value}: {reason}")

    return CreditLimitResult(
        assigned_limit=final_limit,
        card_type=card_type,
        outcome=outcome,
        score=_limit_score(final_limit, card_type, outcome),
        reason=reason,
        income_multiple=multiple,
        income_based_limit=income_based,
        dbr_based_limit=dbr_based,
        regulatory_cap=cap,
        notes=tuple(notes),
    )

"""DBR evaluator: stage B point banding over a stage A computation.

Source precedence for stage A: the data engine's precomputed result on the CBS
summary, else ``calculate_dbr`` over the obligations, else NO_DBR_DATA.

Banding on a pass:
  ≤ 10% → 100   ≤ 20% → 75   ≤ 30% → 50   ≤ 40% → 25   > 40% → 0
A fail (or conditional fail) scores 0 with a hard stop.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from cardscore.calculators.dbr import calculate_dbr
from cardscore.models.enums import DbrStatus, ModuleName
from cardscore.schemas.applicant import EvaluationContext
from cardscore.schemas.scoring import DbrComputation, ModuleScore

logger = logging.getLogger(__name__)

MODULE = ModuleName.DBR

FLAG_DBR_FAIL = "DBR_FAIL"
FLAG_REFER_RRU = "REFER_RRU"
FLAG_NO_DBR_DATA = "NO_DBR_DATA"

# (upper bound inclusive %, points, range label)
_POINT_BANDS: tuple[tuple[Decimal, int, str], ...] = (
    (Decimal("10"), 100, "1-10%"),
    (Decimal("20"), 75, "10-20%"),
    (Decimal("30"), 50, "20-30%"),
    (Decimal("40"), 25, "30-40%"),
)


def dbr_points(dbr_percentage: Decimal) -> tuple[int, str]:
    for upper, points, label in _POINT_BANDS:
        if dbr_percentage <= upper:
            return points, label
    return 0, ">40%"


def resolve_dbr(ctx: EvaluationContext) -> DbrComputation | None:
    """Stage A result for this run, or None when no DBR data is available."""
    if ctx.cbs.dbr is not None:
        return ctx.cbs.dbr
    if ctx.obligations is None:
        return None
    applicant = ctx.applicant
    return calculate_dbr(
        ctx.obligations,
        applicant.net_monthly_income,
        applicant.gross_monthly_income,
        applicant.taxes_and_deductions,
        applicant_age=ctx.age,
    )


def score_dbr(computation: DbrComputation | None) -> ModuleScore:
    """Band a stage A result into points.

    Args:
        computation: Stage A result; None when neither the data engine nor the
            obligations input supplied one.
    """
    if computation is None:
        logger.warning("No DBR data available, DBR scored 0")
        return ModuleScore.ok(MODULE, 0, notes=["No DBR data available from data engine"], flags=[FLAG_NO_DBR_DATA])

    pct = computation.dbr_percentage
    notes = [
        f"DBR: {pct:.2f}%",
        f"Net Income: PKR {computation.net_income:,}",
        f"Total Obligations: PKR {computation.total_obligations:,}",
        f"DBR Threshold: {computation.threshold}% (Dynamic)",
        f"Status: {computation.status.value.upper()}",
    ]

    if computation.status is DbrStatus.FAIL:
        notes.append("DBR status is FAIL - Score 0")
        logger.info("DBR hard stop: %s%% above threshold %s%%", pct, computation.threshold)
        return ModuleScore.stopped(
            MODULE,
            f"DBR {pct:.2f}% exceeds threshold {computation.threshold}%",
            notes=notes,
            flags=[FLAG_DBR_FAIL],
        )

    if computation.status is DbrStatus.CONDITIONAL_FAIL:
        notes.append("Applicant age above DBR age limit - refer to RRU, Score 0")
        logger.info("DBR conditional fail: referred to RRU")
        return ModuleScore.stopped(
            MODULE,
            "DBR conditionally failed - redirect to RRU",
            notes=notes,
            flags=[FLAG_DBR_FAIL, FLAG_REFER_RRU],
        )

    points, label = dbr_points(pct)
    notes.append(f"DBR {pct:.2f}% ({label}) → Score {points}/100")
    return ModuleScore.ok(MODULE, points, notes=notes)


def evaluate_dbr(ctx: EvaluationContext) -> ModuleScore:
    return score_dbr(resolve_dbr(ctx))

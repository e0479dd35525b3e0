"""Decision engine: runs every evaluator and aggregates one decision.

Pure Python orchestrator. No network access: the data-access layer fetches
(or falls back) before calling ``evaluate``, and fallback records are scored
exactly like real ones.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from cardscore.calculators.credit_limit import assign_credit_limit
from cardscore.calculators.dbr import resolve_net_income
from cardscore.calculators.system_checks import run_system_checks
from cardscore.decision.aggregator import aggregate, external_score
from cardscore.evaluators import EVALUATORS, resolve_dbr, score_dbr
from cardscore.models.enums import Decision, ModuleName
from cardscore.schemas.applicant import (
    ApplicantRecord,
    CbsSummary,
    EvaluationContext,
    ObligationsInput,
    SystemChecksInput,
)
from cardscore.schemas.scoring import DbrComputation, DecisionResult, ModuleScore

logger = logging.getLogger(__name__)


def _limit_income(applicant: ApplicantRecord, dbr: DbrComputation | None) -> Decimal:
    if dbr is not None and dbr.net_income > 0:
        return dbr.net_income
    income, _ = resolve_net_income(
        applicant.net_monthly_income,
        applicant.gross_monthly_income,
        applicant.taxes_and_deductions,
    )
    return income


def evaluate(
    applicant: ApplicantRecord,
    obligations: ObligationsInput | None = None,
    cbs_summary: CbsSummary | None = None,
    *,
    system_checks: SystemChecksInput | None = None,
    as_of: date | None = None,
) -> DecisionResult:
    """Evaluate one credit-card application.

    Args:
        applicant: Applicant record.
        obligations: DBR inputs; None when the obligations source was unavailable.
        cbs_summary: External application / behavioral scores and optional
            precomputed DBR.
        system_checks: Screening flags; when given, an advisory screening
            summary is attached. It never changes the score or decision.
        as_of: Date ages are computed on; defaults to today. Pass it explicitly
            for reproducible runs.

    Returns:
        DecisionResult, with a credit limit attached unless DECLINED.
    """
    ctx = EvaluationContext(
        applicant=applicant,
        obligations=obligations,
        cbs=cbs_summary or CbsSummary(),
        as_of=as_of or date.today(),
    )

    # stage A runs once; its result feeds both the DBR score and the audit detail
    dbr = resolve_dbr(ctx)
    scores: dict[ModuleName, ModuleScore] = {
        module: score_dbr(dbr) if module is ModuleName.DBR else evaluator(ctx)
        for module, evaluator in EVALUATORS.items()
    }
    scores[ModuleName.APPLICATION] = external_score(
        ModuleName.APPLICATION, ctx.cbs.application_score, ctx.cbs.application_breakdown
    )
    scores[ModuleName.BEHAVIORAL] = external_score(
        ModuleName.BEHAVIORAL, ctx.cbs.behavioral_score, ctx.cbs.behavioral_breakdown
    )

    result = aggregate(scores, applicant.customer_type, application_id=applicant.application_id)

    update: dict[str, object] = {"dbr": dbr}
    if result.decision is not Decision.DECLINED:
        update["credit_limit"] = assign_credit_limit(applicant, ctx.cbs, _limit_income(applicant, dbr))
    if system_checks is not None:
        screening = run_system_checks(system_checks, ctx.cbs.total_exposure, ctx.cbs.unsecured_exposure)
        update["system_checks"] = screening
        if screening.has_hits:
            update["warnings"] = (*result.warnings, f"System checks hit: {', '.join(screening.critical_hits)}")
    result = result.model_copy(update=update)

    logger.info(
        "Decision %s for application %s: score %s, risk %s",
        result.decision.value,
        applicant.application_id or "-",
        result.final_score,
        result.risk_level.value,
    )
    return result

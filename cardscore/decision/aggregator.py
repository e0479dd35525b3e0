"""Decision aggregator: weighted sum, hard-stop override, bucketing.

Pure Python, total over its inputs: a missing module scores 0 and is reported
as a warning, never raised.

Buckets (final score, rounded to 0.01 half-up):
  ≥ 70 → APPROVED / LOW
  ≥ 50 → CONDITIONAL / MEDIUM
  else → DECLINED / HIGH
A hard stop on Age, SPU or DBR forces DECLINED / HIGH; the score is still reported.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from cardscore.config import settings
from cardscore.decision.weights import weights_for
from cardscore.evaluators import CRITICAL_MODULES
from cardscore.evaluators.city import FLAG_ANNEXURE_A
from cardscore.evaluators.dbr import FLAG_NO_DBR_DATA, FLAG_REFER_RRU
from cardscore.evaluators.eamvu import FLAG_NOT_SUBMITTED
from cardscore.models.enums import CustomerType, Decision, ModuleName, RiskLevel
from cardscore.schemas.scoring import DecisionResult, ModuleScore, clamp_score

logger = logging.getLogger(__name__)

FLAG_MISSING_SCORE = "MISSING_SCORE"

ACTION_APPROVED = "Proceed with issuance"
ACTION_CONDITIONAL = "Requires manager review"
ACTION_DECLINED = "Decline, consider alternative products"
ACTION_REFER_RRU = "Refer to RRU for manual review"

_FLAG_WARNINGS: dict[str, str] = {
    FLAG_NO_DBR_DATA: "No DBR data available; DBR scored 0",
    FLAG_ANNEXURE_A: "Address matches an Annexure A high-risk area",
    FLAG_NOT_SUBMITTED: "EAMVU verification not submitted",
}


def external_score(
    module: ModuleName,
    value: Decimal | None,
    breakdown: Mapping[str, Any] | None = None,
) -> ModuleScore:
    """Wrap an externally computed 0–100 score (application / behavioral)."""
    label = module.value.capitalize()
    if value is None:
        return ModuleScore.ok(module, 0, notes=[f"{label} score not available → 0"], flags=[FLAG_MISSING_SCORE])
    notes = [f"{label} score: {value}"]
    notes.extend(f"{key}: {item}" for key, item in (breakdown or {}).items())
    return ModuleScore.ok(module, value, notes=notes)


def _round_score(value: Decimal) -> Decimal:
    return clamp_score(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def bucket(final_score: Decimal) -> tuple[Decision, RiskLevel, str]:
    """Decision, risk level and action for a score without hard stops."""
    if final_score >= settings.engine.decision_approve_cutoff:
        return Decision.APPROVED, RiskLevel.LOW, ACTION_APPROVED
    if final_score >= settings.engine.decision_conditional_cutoff:
        return Decision.CONDITIONAL, RiskLevel.MEDIUM, ACTION_CONDITIONAL
    return Decision.DECLINED, RiskLevel.HIGH, ACTION_DECLINED


def _warnings(scores: Mapping[ModuleName, ModuleScore], weights: Mapping[ModuleName, Decimal]) -> list[str]:
    warnings: list[str] = []
    for module, score in scores.items():
        for flag in score.flags:
            if flag in _FLAG_WARNINGS:
                warnings.append(_FLAG_WARNINGS[flag])
            elif flag == FLAG_MISSING_SCORE and weights.get(module, Decimal("0")) > 0:
                warnings.append(f"{module.value.capitalize()} score missing; scored 0")
    return list(dict.fromkeys(warnings))


def aggregate(
    module_scores: Mapping[ModuleName, ModuleScore],
    customer_type: CustomerType,
    application_id: str | None = None,
) -> DecisionResult:
    """Combine module scores into one decision.

    Args:
        module_scores: One ModuleScore per module; absent modules score 0.
        customer_type: Selects the ETB or NTB weight table.
        application_id: Echoed on the result for audit.

    Returns:
        DecisionResult with the final score, decision, per-module weighted
        contributions, hard-stop reasons and warnings.
    """
    table = weights_for(customer_type)

    scores: dict[ModuleName, ModuleScore] = {}
    for module in ModuleName:
        score = module_scores.get(module)
        if score is None:
            score = ModuleScore.ok(module, 0, notes=["Module not evaluated → 0"], flags=[FLAG_MISSING_SCORE])
        scores[module] = score

    weighted = {module: scores[module].raw_score * table.weight(module) for module in ModuleName}
    final_score = _round_score(sum(weighted.values(), Decimal("0")))

    hard_stops = [
        f"{module.value}: {scores[module].hard_stop.reason}"
        for module in ModuleName
        if module in CRITICAL_MODULES and scores[module].hard_stop is not None
    ]

    if hard_stops:
        decision, risk_level, action = Decision.DECLINED, RiskLevel.HIGH, ACTION_DECLINED
        if FLAG_REFER_RRU in scores[ModuleName.DBR].flags:
            action = ACTION_REFER_RRU
        logger.info("Hard stop override → DECLINED (%s)", "; ".join(hard_stops))
    else:
        decision, risk_level, action = bucket(final_score)

    return DecisionResult(
        final_score=final_score,
        decision=decision,
        risk_level=risk_level,
        action_required=action,
        customer_type=customer_type,
        module_scores=scores,
        weights=dict(table.weights),
        weighted_scores=weighted,
        hard_stops=tuple(hard_stops),
        warnings=tuple(_warnings(scores, table.weights)),
        application_id=application_id,
    )

"""Pydantic schemas for evaluator, calculator and decision outputs.

Pure data classes: no business logic beyond invariants on the values
themselves (score clamping, flag de-duplication). Every model is frozen:
a decision run builds fresh instances and nothing mutates them afterwards.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cardscore.models.enums import (
    CardType,
    CheckStatus,
    CustomerType,
    DbrRiskCategory,
    DbrStatus,
    Decision,
    IncomeSource,
    LimitOutcome,
    ModuleName,
    RiskLevel,
)

SCORE_MIN = Decimal("0")
SCORE_MAX = Decimal("100")


def clamp_score(value: Decimal) -> Decimal:
    """Clamp a score into [0, 100]."""
    return max(SCORE_MIN, min(SCORE_MAX, value))


# ---------------------------------------------------------------------------
# Module scores
# ---------------------------------------------------------------------------


class HardStop(BaseModel):
    """A module-level override that forces the decision to DECLINED."""

    model_config = ConfigDict(frozen=True)

    reason: str


class ModuleScore(BaseModel):
    """Output of one evaluator (or one external score) for one decision run.

    Either a graded score (``hard_stop is None``) or a hard stop, in which case
    ``raw_score`` is 0 and ``hard_stop.reason`` explains why. Build through
    ``ModuleScore.ok`` / ``ModuleScore.stopped``.
    """

    model_config = ConfigDict(frozen=True)

    module: ModuleName
    raw_score: Decimal
    notes: tuple[str, ...] = ()
    flags: tuple[str, ...] = ()
    hard_stop: HardStop | None = None

    @field_validator("raw_score", mode="before")
    @classmethod
    def _clamp(cls, v: Any) -> Decimal:
        value = v if isinstance(v, Decimal) else Decimal(str(v))
        return clamp_score(value)

    @field_validator("flags")
    @classmethod
    def _unique_flags(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        # keep first occurrence, preserve order
        return tuple(dict.fromkeys(v))

    @property
    def is_hard_stop(self) -> bool:
        return self.hard_stop is not None

    @classmethod
    def ok(
        cls,
        module: ModuleName,
        score: Decimal | int,
        notes: list[str] | tuple[str, ...] = (),
        flags: list[str] | tuple[str, ...] = (),
    ) -> ModuleScore:
        """Graded result."""
        return cls(module=module, raw_score=score, notes=tuple(notes), flags=tuple(flags))

    @classmethod
    def stopped(
        cls,
        module: ModuleName,
        reason: str,
        notes: list[str] | tuple[str, ...] = (),
        flags: list[str] | tuple[str, ...] = (),
    ) -> ModuleScore:
        """Hard-stop result: score 0, decision forced to DECLINED."""
        return cls(
            module=module,
            raw_score=Decimal("0"),
            notes=tuple(notes),
            flags=tuple(flags),
            hard_stop=HardStop(reason=reason),
        )


# ---------------------------------------------------------------------------
# DBR stage A
# ---------------------------------------------------------------------------


class DbrComputation(BaseModel):
    """Debt-burden-ratio stage A result: percentage, dynamic threshold, status.

    Produced by ``calculators.dbr.calculate_dbr`` or supplied precomputed by the
    data engine, in which case the breakdown fields may be absent.
    """

    model_config = ConfigDict(frozen=True)

    dbr_percentage: Decimal            # e.g. Decimal("18.00")
    threshold: Decimal                 # 30 / 35 / 40 / 45
    status: DbrStatus
    net_income: Decimal = Decimal("0")
    total_obligations: Decimal = Decimal("0")

    # Band scoring behind the dynamic threshold
    income_band_score: int | None = None
    obligations_band_score: int | None = None
    band_average: Decimal | None = None

    # Obligation components (monthly)
    existing_emis: Decimal | None = None
    credit_card_component: Decimal | None = None   # 5% of card limit
    overdraft_component: Decimal | None = None     # annual OD interest / 12
    proposed_emi: Decimal | None = None

    income_source: IncomeSource | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, v: Any) -> Any:
        # the data engine sends the bare label, any casing
        if isinstance(v, str):
            text = v.strip().lower()
            if text.startswith("conditional"):
                return DbrStatus.CONDITIONAL_FAIL
            return text
        return v

    @property
    def risk_category(self) -> DbrRiskCategory:
        """DBR percentage relative to its threshold."""
        if self.dbr_percentage > self.threshold:
            return DbrRiskCategory.CRITICAL
        if self.dbr_percentage > self.threshold * Decimal("0.8"):
            return DbrRiskCategory.HIGH
        if self.dbr_percentage > self.threshold * Decimal("0.6"):
            return DbrRiskCategory.MEDIUM
        return DbrRiskCategory.LOW


# ---------------------------------------------------------------------------
# Credit limit
# ---------------------------------------------------------------------------


class CreditLimitResult(BaseModel):
    """Credit-limit and card-type assignment for an approvable applicant."""

    model_config = ConfigDict(frozen=True)

    assigned_limit: Decimal
    card_type: CardType
    outcome: LimitOutcome
    score: Decimal
    reason: str = ""
    income_multiple: Decimal
    income_based_limit: Decimal
    dbr_based_limit: Decimal
    regulatory_cap: Decimal
    notes: tuple[str, ...] = ()


# ---------------------------------------------------------------------------
# System checks
# ---------------------------------------------------------------------------


class ScreeningCheck(BaseModel):
    """One screening check: its status and what it found."""

    model_config = ConfigDict(frozen=True)

    status: CheckStatus
    notes: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()


class SystemChecksResult(BaseModel):
    """Advisory screening summary. Reported beside the decision, never scored."""

    model_config = ConfigDict(frozen=True)

    overall_status: CheckStatus
    score: int
    checks: dict[str, ScreeningCheck]
    critical_hits: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def has_hits(self) -> bool:
        return bool(self.critical_hits)


# ---------------------------------------------------------------------------
# Decision
# ---------------------------------------------------------------------------


class DecisionResult(BaseModel):
    """Final aggregate of one decision run, complete enough for audit review."""

    model_config = ConfigDict(frozen=True)

    final_score: Decimal
    decision: Decision
    risk_level: RiskLevel
    action_required: str
    customer_type: CustomerType

    module_scores: dict[ModuleName, ModuleScore]
    weights: dict[ModuleName, Decimal]
    weighted_scores: dict[ModuleName, Decimal]

    hard_stops: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()

    dbr: DbrComputation | None = None
    credit_limit: CreditLimitResult | None = None
    system_checks: SystemChecksResult | None = None

    application_id: str | None = Field(default=None, description="Echoed for audit, never scored")

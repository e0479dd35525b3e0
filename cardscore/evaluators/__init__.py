"""Risk evaluators and their static registry.

Each evaluator is a pure function over one ``EvaluationContext``; none reads
another's output, so the registry can be walked in any order.
"""

from __future__ import annotations

from collections.abc import Callable

from cardscore.evaluators.age import evaluate_age
from cardscore.evaluators.city import evaluate_city
from cardscore.evaluators.dbr import evaluate_dbr, resolve_dbr, score_dbr
from cardscore.evaluators.eamvu import evaluate_eamvu
from cardscore.evaluators.income import evaluate_income
from cardscore.evaluators.spu import evaluate_spu
from cardscore.models.enums import ModuleName
from cardscore.schemas.applicant import EvaluationContext
from cardscore.schemas.scoring import ModuleScore


def _age(ctx: EvaluationContext) -> ModuleScore:
    a = ctx.applicant
    return evaluate_age(ctx.age, a.occupation, a.employment_type, a.is_retired)


def _city(ctx: EvaluationContext) -> ModuleScore:
    a = ctx.applicant
    return evaluate_city(a.current_address, a.office_address, a.cluster)


def _income(ctx: EvaluationContext) -> ModuleScore:
    a = ctx.applicant
    return evaluate_income(
        a.net_monthly_income,
        a.gross_monthly_income,
        a.employment_type,
        a.salary_transfer_flag,
        a.is_existing_customer,
        a.employment_tenure_years,
    )


def _spu(ctx: EvaluationContext) -> ModuleScore:
    a = ctx.applicant
    return evaluate_spu(a.spu_blacklist_check, a.spu_credit_card_30k_check, a.spu_negative_list_check)


def _eamvu(ctx: EvaluationContext) -> ModuleScore:
    return evaluate_eamvu(ctx.applicant.eamvu_submitted)


EVALUATORS: dict[ModuleName, Callable[[EvaluationContext], ModuleScore]] = {
    ModuleName.AGE: _age,
    ModuleName.CITY: _city,
    ModuleName.INCOME: _income,
    ModuleName.SPU: _spu,
    ModuleName.EAMVU: _eamvu,
    ModuleName.DBR: evaluate_dbr,
}

# Modules whose hard stop forces a decline
CRITICAL_MODULES: frozenset[ModuleName] = frozenset({ModuleName.AGE, ModuleName.SPU, ModuleName.DBR})

__all__ = [
    "CRITICAL_MODULES",
    "EVALUATORS",
    "evaluate_age",
    "evaluate_city",
    "evaluate_dbr",
    "evaluate_eamvu",
    "evaluate_income",
    "evaluate_spu",
    "resolve_dbr",
    "score_dbr",
]

"""Domain enums shared by schemas, evaluators and the decision engine."""

from cardscore.models.enums import (
    CardType,
    CheckStatus,
    Cluster,
    CustomerType,
    DbrRiskCategory,
    DbrStatus,
    Decision,
    EmploymentType,
    IncomeSource,
    LimitOutcome,
    ModuleName,
    RiskLevel,
    SalaryTransfer,
)

__all__ = [
    "CardType",
    "CheckStatus",
    "Cluster",
    "CustomerType",
    "DbrRiskCategory",
    "DbrStatus",
    "Decision",
    "EmploymentType",
    "IncomeSource",
    "LimitOutcome",
    "ModuleName",
    "RiskLevel",
    "SalaryTransfer",
]

"""Domain enums used across the evaluators, schemas and the decision engine.

All enums use the str mixin so they serialize cleanly into audit payloads.
"""

from __future__ import annotations

from enum import Enum

# Spellings seen in LOS payloads, normalized to a canonical employment type
_EMPLOYMENT_ALIASES: dict[str, str] = {
    "employed": "permanent",
    "salaried": "permanent",
    "self employed": "self_employed",
    "self-employed": "self_employed",
    "selfemployed": "self_employed",
}


class EmploymentType(str, Enum):
    """How the applicant earns: selects the income threshold row."""

    PERMANENT = "permanent"
    CONTRACTUAL = "contractual"
    SELF_EMPLOYED = "self_employed"
    BUSINESS = "business"
    PROBATION = "probation"
    OTHER = "other"  # no threshold row → threshold never met

    @classmethod
    def _missing_(cls, value: object) -> EmploymentType | None:
        if not isinstance(value, str):
            return None
        key = value.strip().lower()
        key = _EMPLOYMENT_ALIASES.get(key, key)
        for member in cls:
            if member.value == key:
                return member
        return None


class SalaryTransfer(str, Enum):
    """Whether the salary is credited to an account with the bank."""

    SALARY_TRANSFER = "salary_transfer"
    NON_SALARY_TRANSFER = "non_salary_transfer"


class CustomerType(str, Enum):
    """Relationship status: selects the weight table."""

    ETB = "ETB"  # existing to bank
    NTB = "NTB"  # new to bank


class Cluster(str, Enum):
    """Regional clusters with a fixed city-module bonus."""

    FEDERAL = "FEDERAL"
    SOUTH = "SOUTH"
    NORTHERN_PUNJAB = "NORTHERN_PUNJAB"
    NORTH = "NORTH"
    SOUTHERN_PUNJAB = "SOUTHERN_PUNJAB"
    KP = "KP"


class ModuleName(str, Enum):
    """Every score that feeds the weighted sum."""

    AGE = "age"
    CITY = "city"
    INCOME = "income"
    SPU = "spu"
    EAMVU = "eamvu"
    DBR = "dbr"
    APPLICATION = "application"
    BEHAVIORAL = "behavioral"


class DbrStatus(str, Enum):
    """Stage A outcome of the debt-burden-ratio check."""

    PASS = "pass"
    FAIL = "fail"
    CONDITIONAL_FAIL = "conditionally fail - redirect to RRU"


class DbrRiskCategory(str, Enum):
    """DBR percentage relative to its dynamic threshold."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class IncomeSource(str, Enum):
    """Which rung of the net-income fallback chain DBR used."""

    REPORTED_NET = "reported_net"
    GROSS_MINUS_DEDUCTIONS = "gross_minus_deductions"
    GROSS = "gross"
    DEFAULT = "default"


class Decision(str, Enum):
    """Final outcome of a decision run."""

    APPROVED = "APPROVED"
    CONDITIONAL = "CONDITIONAL"
    DECLINED = "DECLINED"


class RiskLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class CardType(str, Enum):
    """Card tier implied by the assigned limit."""

    SILVER = "SILVER"
    GOLD = "GOLD"
    PLATINUM = "PLATINUM"


class LimitOutcome(str, Enum):
    APPROVE = "APPROVE"
    CAP = "CAP"
    DECLINE = "DECLINE"


class CheckStatus(str, Enum):
    """Outcome of one mandatory screening check (eCIB, VERISYS, AFD, PEP, World Check)."""

    CLEAN = "CLEAN"
    HIT = "HIT"
    PENDING = "PENDING"

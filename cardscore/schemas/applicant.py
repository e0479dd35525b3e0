"""Pydantic schemas for everything the engine consumes.

Pure data classes. Lenient coercion happens here, at the boundary, so the
evaluators can rely on typed values: boolean-like flags, numeric strings,
employment-type aliases and LOS date formats are all normalized on the way in.
Values that cannot be used become None/defaults instead of validation errors.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cardscore.decoders.birthdate import age_on, parse_birth_date
from cardscore.decoders.flags import as_bool
from cardscore.models.enums import CustomerType, EmploymentType, SalaryTransfer
from cardscore.schemas.scoring import DbrComputation

logger = logging.getLogger(__name__)

# Raw flag values as they arrive from LOS / CBS: bool, 0/1, "yes", "Y", None...
FlagValue = bool | int | float | str | None


def lenient_decimal(value: Any) -> Decimal | None:
    """Coerce a payload number to Decimal; None for missing or non-numeric values."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    try:
        result = Decimal(str(value).replace(",", "").strip())
    except (InvalidOperation, ValueError):
        return None
    return result if result.is_finite() else None


def _decimal_or_zero(value: Any) -> Decimal:
    result = lenient_decimal(value)
    return result if result is not None else Decimal("0")


# ---------------------------------------------------------------------------
# Applicant
# ---------------------------------------------------------------------------


class Address(BaseModel):
    """One postal address (current residence or office)."""

    model_config = ConfigDict(frozen=True)

    house: str = ""
    street: str = ""
    district: str = ""
    landmark: str = ""
    city: str = ""
    postal_code: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str:
        # LOS normalizes JSON null to False; neither is address text
        if v is None or v is False:
            return ""
        return str(v).strip()

    def lines(self) -> list[str]:
        """Non-empty address lines in postal order."""
        parts = [self.house, self.street, self.district, self.landmark, self.city, self.postal_code]
        return [p for p in parts if p]


class ApplicantRecord(BaseModel):
    """Applicant demographic, employment and check data for one decision run.

    Identity fields (id, name, CNIC) are carried for audit only and never scored.
    """

    model_config = ConfigDict(frozen=True)

    # Identity
    application_id: str | None = None
    full_name: str | None = None
    cnic: str | None = None

    # Demographics / employment
    date_of_birth: date | None = None
    occupation: str = ""
    employment_type: EmploymentType = EmploymentType.PERMANENT
    is_retired: bool = False
    employment_tenure_years: Decimal = Decimal("0")

    # Income
    net_monthly_income: Decimal | None = None
    gross_monthly_income: Decimal | None = None
    taxes_and_deductions: Decimal | None = None

    # Relationship
    is_existing_customer: bool = False
    salary_transfer_flag: SalaryTransfer = SalaryTransfer.SALARY_TRANSFER

    # Geography
    current_address: Address = Field(default_factory=Address)
    office_address: Address = Field(default_factory=Address)
    cluster: str | None = None

    # SPU / EAMVU checks, raw as received
    spu_blacklist_check: FlagValue = None
    spu_credit_card_30k_check: FlagValue = None
    spu_negative_list_check: FlagValue = None
    eamvu_submitted: FlagValue = None

    # Special segments (credit-limit assignment only)
    is_pensioner: bool = False
    is_remittance_customer: bool = False
    is_cross_sell: bool = False
    is_mvc: bool = False

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def _parse_dob(cls, v: Any) -> date | None:
        return parse_birth_date(v)

    @field_validator("occupation", mode="before")
    @classmethod
    def _occupation_text(cls, v: Any) -> str:
        if v is None or v is False:
            return ""
        return str(v).strip()

    @field_validator("employment_type", mode="before")
    @classmethod
    def _employment_type(cls, v: Any) -> EmploymentType:
        if v is None or v is False or (isinstance(v, str) and not v.strip()):
            return EmploymentType.PERMANENT
        if isinstance(v, EmploymentType):
            return v
        try:
            return EmploymentType(v)
        except ValueError:
            logger.debug("Unknown employment type %r, treated as OTHER", v)
            return EmploymentType.OTHER

    @field_validator(
        "is_retired",
        "is_existing_customer",
        "is_pensioner",
        "is_remittance_customer",
        "is_cross_sell",
        "is_mvc",
        mode="before",
    )
    @classmethod
    def _flag(cls, v: Any) -> bool:
        return as_bool(v)

    @field_validator("salary_transfer_flag", mode="before")
    @classmethod
    def _salary_transfer(cls, v: Any) -> SalaryTransfer:
        if isinstance(v, SalaryTransfer):
            return v
        if isinstance(v, bool):
            return SalaryTransfer.SALARY_TRANSFER if v else SalaryTransfer.NON_SALARY_TRANSFER
        if v is None or (isinstance(v, str) and not v.strip()):
            return SalaryTransfer.SALARY_TRANSFER
        text = str(v).strip().lower()
        if text in {s.value for s in SalaryTransfer}:
            return SalaryTransfer(text)
        return SalaryTransfer.SALARY_TRANSFER if as_bool(text) else SalaryTransfer.NON_SALARY_TRANSFER

    @field_validator("net_monthly_income", "gross_monthly_income", "taxes_and_deductions", mode="before")
    @classmethod
    def _optional_amount(cls, v: Any) -> Decimal | None:
        return lenient_decimal(v)

    @field_validator("employment_tenure_years", mode="before")
    @classmethod
    def _tenure(cls, v: Any) -> Decimal:
        return _decimal_or_zero(v)

    @field_validator("cluster", mode="before")
    @classmethod
    def _cluster(cls, v: Any) -> str | None:
        if v is None or v is False:
            return None
        text = str(v).strip()
        return text or None

    @property
    def customer_type(self) -> CustomerType:
        return CustomerType.ETB if self.is_existing_customer else CustomerType.NTB


# ---------------------------------------------------------------------------
# Obligations (DBR stage A input)
# ---------------------------------------------------------------------------


class ObligationsInput(BaseModel):
    """Monthly debt-burden inputs. Amounts in PKR, rate in percent per year."""

    model_config = ConfigDict(frozen=True)

    existing_emis: Decimal = Decimal("0")
    credit_card_limit: Decimal = Decimal("0")
    overdraft_annual_interest: Decimal = Decimal("0")  # outstanding-balance proxy, divided by 12
    proposed_loan_amount: Decimal = Decimal("0")
    proposed_tenure_months: int = 0
    annual_rate_percent: Decimal = Decimal("0")
    applicant_age: int | None = None

    @field_validator(
        "existing_emis",
        "credit_card_limit",
        "overdraft_annual_interest",
        "proposed_loan_amount",
        "annual_rate_percent",
        mode="before",
    )
    @classmethod
    def _amount(cls, v: Any) -> Decimal:
        return max(_decimal_or_zero(v), Decimal("0"))

    @field_validator("proposed_tenure_months", mode="before")
    @classmethod
    def _months(cls, v: Any) -> int:
        amount = lenient_decimal(v)
        return int(amount) if amount is not None and amount > 0 else 0

    @field_validator("applicant_age", mode="before")
    @classmethod
    def _age(cls, v: Any) -> int | None:
        amount = lenient_decimal(v)
        return int(amount) if amount is not None else None


# ---------------------------------------------------------------------------
# CBS summary (external scores + optional upstream DBR)
# ---------------------------------------------------------------------------


class CbsSummary(BaseModel):
    """Bureau / core-banking summary supplied by the caller.

    ``application_score`` and ``behavioral_score`` are opaque 0–100 values from
    the external scorecards; their breakdown maps are kept for audit display.
    ``dbr`` carries a stage A result computed by the data engine, if any.
    """

    model_config = ConfigDict(frozen=True)

    application_score: Decimal | None = None
    behavioral_score: Decimal | None = None
    application_breakdown: dict[str, Any] = Field(default_factory=dict)
    behavioral_breakdown: dict[str, Any] = Field(default_factory=dict)

    dbr: DbrComputation | None = None

    # eCIB exposures (credit-limit regulatory caps)
    total_exposure: Decimal = Decimal("0")
    unsecured_exposure: Decimal = Decimal("0")
    credit_card_exposure: Decimal = Decimal("0")
    personal_loan_exposure: Decimal = Decimal("0")

    @field_validator("application_score", "behavioral_score", mode="before")
    @classmethod
    def _score(cls, v: Any) -> Decimal | None:
        return lenient_decimal(v)

    @field_validator(
        "total_exposure",
        "unsecured_exposure",
        "credit_card_exposure",
        "personal_loan_exposure",
        mode="before",
    )
    @classmethod
    def _exposure(cls, v: Any) -> Decimal:
        return _decimal_or_zero(v)


# ---------------------------------------------------------------------------
# System checks (advisory screening input)
# ---------------------------------------------------------------------------


class SystemChecksInput(BaseModel):
    """Mandatory screening flags and detail from eCIB, VERISYS, AFD, PEP and World Check.

    A ``*_check`` flag says whether that check was performed. VERISYS match
    fields count as failed only when explicitly false; ``world_check_result``
    is None when the screening did not run and True on a sanctions hit.
    """

    model_config = ConfigDict(frozen=True)

    ecib_individual_check: bool = False
    ecib_corporate_check: bool = False
    verisys_cnic_check: bool = False
    afd_delinquency_check: bool = False
    afd_compliance_check: bool = False
    pep_check: bool = False
    world_check_result: bool | None = None

    # eCIB delinquency history
    last_12m_delinquency: int = 0
    last_6m_delinquency: int = 0
    last_2m_delinquency: int = 0
    dpd_30_count: int = 0
    dpd_60_count: int = 0
    dpd_90_count: int = 0

    # VERISYS detail
    cnic_valid: bool | None = None
    name_match: bool | None = None
    dob_match: bool | None = None
    address_match: bool | None = None
    biometric_verified: bool | None = None

    # AFD detail
    cross_product_delinquency: bool = False
    negative_database_hit: bool = False
    compliance_issues: bool = False

    # PEP detail
    is_pep: bool = False
    pep_risk_level: str = "UNKNOWN"

    @field_validator(
        "ecib_individual_check",
        "ecib_corporate_check",
        "verisys_cnic_check",
        "afd_delinquency_check",
        "afd_compliance_check",
        "pep_check",
        "cross_product_delinquency",
        "negative_database_hit",
        "compliance_issues",
        "is_pep",
        mode="before",
    )
    @classmethod
    def _flag(cls, v: Any) -> bool:
        return as_bool(v)

    @field_validator(
        "world_check_result",
        "cnic_valid",
        "name_match",
        "dob_match",
        "address_match",
        "biometric_verified",
        mode="before",
    )
    @classmethod
    def _optional_flag(cls, v: Any) -> bool | None:
        return None if v is None else as_bool(v)

    @field_validator(
        "last_12m_delinquency",
        "last_6m_delinquency",
        "last_2m_delinquency",
        "dpd_30_count",
        "dpd_60_count",
        "dpd_90_count",
        mode="before",
    )
    @classmethod
    def _count(cls, v: Any) -> int:
        amount = lenient_decimal(v)
        return int(amount) if amount is not None and amount > 0 else 0

    @field_validator("pep_risk_level", mode="before")
    @classmethod
    def _risk_level(cls, v: Any) -> str:
        if v is None or v is False:
            return "UNKNOWN"
        return str(v).strip().upper() or "UNKNOWN"


# ---------------------------------------------------------------------------
# Evaluation context
# ---------------------------------------------------------------------------


class EvaluationContext(BaseModel):
    """Everything one evaluator may read, bundled for the registry contract."""

    model_config = ConfigDict(frozen=True)

    applicant: ApplicantRecord
    obligations: ObligationsInput | None = None
    cbs: CbsSummary = Field(default_factory=CbsSummary)
    as_of: date

    @property
    def age(self) -> int | None:
        """Applicant age on ``as_of``; None if birth date missing or future-dated."""
        return age_on(self.applicant.date_of_birth, self.as_of)

"""LOS / CBS / data-engine payloads → engine input schemas.

LOS sends snake_case with legacy names (``total_income``, ``eavmu_submitted``,
``is_ubl_customer``, ``curr_*`` / ``office_*`` address parts); some clients send
camelCase. Each engine field lists the keys it accepts, first present wins.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from cardscore.decoders.flags import as_bool
from cardscore.schemas.applicant import Address, ApplicantRecord, CbsSummary, ObligationsInput, SystemChecksInput
from cardscore.schemas.scoring import DbrComputation

logger = logging.getLogger(__name__)

_APPLICANT_ALIASES: dict[str, tuple[str, ...]] = {
    "application_id": ("application_id", "los_id", "losId", "id"),
    "full_name": ("full_name", "fullName", "name"),
    "cnic": ("cnic",),
    "date_of_birth": ("date_of_birth", "dateOfBirth", "dob"),
    "occupation": ("occupation",),
    "employment_type": ("employment_type", "employmentType"),
    "employment_tenure_years": ("length_of_employment", "employment_tenure_years", "employmentTenureYears"),
    "net_monthly_income": ("total_income", "net_monthly_income", "netMonthlyIncome"),
    "gross_monthly_income": ("gross_monthly_income", "grossMonthlyIncome"),
    "taxes_and_deductions": ("taxes_and_deductions", "taxesAndDeductions"),
    "is_existing_customer": ("is_ubl_customer", "is_existing_customer", "isExistingCustomer"),
    "salary_transfer_flag": ("salary_transfer_flag", "salaryTransferFlag"),
    "cluster": ("cluster",),
    "spu_blacklist_check": ("spu_black_list_check", "spu_blacklist_check"),
    "spu_credit_card_30k_check": ("spu_credit_card_30k_check",),
    "spu_negative_list_check": ("spu_negative_list_check",),
    "eamvu_submitted": ("eavmu_submitted", "eamvu_submitted", "eamvuSubmitted"),
    "is_pensioner": ("is_pensioner", "pensioner"),
    "is_remittance_customer": ("is_remittance_customer", "remittance_customer"),
    "is_cross_sell": ("is_cross_sell", "cross_sell"),
    "is_mvc": ("is_mvc", "mvc"),
}

_CURRENT_ADDRESS_KEYS: dict[str, str] = {
    "house": "curr_house_apt",
    "street": "curr_street",
    "district": "curr_tehsil_district",
    "landmark": "curr_landmark",
    "city": "curr_city",
    "postal_code": "curr_postal_code",
}

_OFFICE_ADDRESS_KEYS: dict[str, str] = {
    "house": "office_address",
    "street": "office_street",
    "district": "office_district",
    "landmark": "office_landmark",
    "city": "office_city",
    "postal_code": "office_postal_code",
}

_OBLIGATION_ALIASES: dict[str, tuple[str, ...]] = {
    "existing_emis": ("existing_emis", "total_emi", "existingEmis"),
    "credit_card_limit": ("credit_card_limit", "existing_credit_card_limit", "creditCardLimit"),
    "overdraft_annual_interest": ("overdraft_annual_interest", "outstanding_balance", "overdraft"),
    "proposed_loan_amount": ("proposed_loan_amount", "amount_requested", "loan_amount"),
    "proposed_tenure_months": ("proposed_tenure_months", "tenure_months", "tenure"),
    "annual_rate_percent": ("annual_rate_percent", "interest_rate", "rate"),
}

_CBS_ALIASES: dict[str, tuple[str, ...]] = {
    "application_score": ("application_score", "applicationScore"),
    "behavioral_score": ("behavioral_score", "behavioralScore", "behaviour_score"),
    "application_breakdown": ("application_breakdown", "applicationBreakdown"),
    "behavioral_breakdown": ("behavioral_breakdown", "behavioralBreakdown"),
    "total_exposure": ("total_exposure",),
    "unsecured_exposure": ("unsecured_exposure",),
    "credit_card_exposure": ("credit_card_exposure",),
    "personal_loan_exposure": ("personal_loan_exposure",),
}

_SYSTEM_CHECK_FLAGS: tuple[str, ...] = (
    "ecib_individual_check",
    "ecib_corporate_check",
    "verisys_cnic_check",
    "afd_delinquency_check",
    "afd_compliance_check",
    "pep_check",
    "world_check_result",
)

# nested detail object → {payload key: input field}
_SYSTEM_CHECK_DETAIL: dict[str, dict[str, str]] = {
    "ecib_data": {
        "last_12m_delinquency": "last_12m_delinquency",
        "last_6m_delinquency": "last_6m_delinquency",
        "last_2m_delinquency": "last_2m_delinquency",
        "dpd_30_count": "dpd_30_count",
        "dpd_60_count": "dpd_60_count",
        "dpd_90_count": "dpd_90_count",
    },
    "verisys_data": {
        "cnic_valid": "cnic_valid",
        "name_match": "name_match",
        "dob_match": "dob_match",
        "address_match": "address_match",
        "biometric_verified": "biometric_verified",
    },
    "afd_data": {
        "cross_product_delinquency": "cross_product_delinquency",
        "negative_database_hit": "negative_database_hit",
        "compliance_issues": "compliance_issues",
    },
    "pep_data": {"is_pep": "is_pep", "risk_level": "pep_risk_level"},
}

_DEFAULT_DBR_THRESHOLD = 40


def normalize_api_data(data: Any) -> Any:
    """Replace JSON nulls with False, recursively through objects and arrays."""
    if isinstance(data, Mapping):
        return {key: False if value is None else normalize_api_data(value) for key, value in data.items()}
    if isinstance(data, list):
        return [False if item is None else normalize_api_data(item) for item in data]
    return data


def _pick(payload: Mapping[str, Any], aliases: dict[str, tuple[str, ...]]) -> dict[str, Any]:
    picked: dict[str, Any] = {}
    for field, keys in aliases.items():
        for key in keys:
            if key in payload:
                picked[field] = payload[key]
                break
    return picked


def _address(payload: Mapping[str, Any], keys: dict[str, str]) -> Address:
    return Address(**{field: payload.get(key) for field, key in keys.items()})


def applicant_from_payload(payload: Mapping[str, Any]) -> ApplicantRecord:
    """Build an ApplicantRecord from an LOS application payload."""
    fields = _pick(payload, _APPLICANT_ALIASES)
    # nulls arrive as False; identity fields are plain text or absent
    for key in ("application_id", "full_name", "cnic"):
        if fields.get(key) is False:
            fields.pop(key)
        elif key in fields:
            fields[key] = str(fields[key])

    status = str(payload.get("employment_status") or "").strip().lower()
    fields["is_retired"] = status == "retired" or as_bool(payload.get("is_retired"))

    fields["current_address"] = _address(payload, _CURRENT_ADDRESS_KEYS)
    fields["office_address"] = _address(payload, _OFFICE_ADDRESS_KEYS)
    return ApplicantRecord(**fields)


def obligations_from_payload(payload: Mapping[str, Any]) -> ObligationsInput | None:
    """Obligations from the application payload; None when it carries none."""
    fields = _pick(payload, _OBLIGATION_ALIASES)
    if not fields:
        return None
    return ObligationsInput(**fields)


def dbr_from_payload(payload: Mapping[str, Any] | None) -> DbrComputation | None:
    """Data-engine DBR response → DbrComputation; None when it has no usable DBR."""
    if not payload or payload.get("dbr") in (None, False) or not payload.get("status"):
        return None
    details = payload.get("dbr_details")
    if not isinstance(details, Mapping):
        details = {}
    try:
        return DbrComputation(
            dbr_percentage=payload["dbr"],
            threshold=payload.get("threshold") or _DEFAULT_DBR_THRESHOLD,
            status=payload["status"],
            net_income=details.get("net_income") or 0,
            total_obligations=details.get("total_obligations") or 0,
        )
    except ValidationError as exc:
        logger.warning("Data-engine DBR response unusable (%s error(s)), ignoring it", exc.error_count())
        return None


def cbs_from_payload(
    cbs_payload: Mapping[str, Any] | None,
    dbr_payload: Mapping[str, Any] | None = None,
) -> CbsSummary:
    """CBS summary from the CBS and data-engine responses (either may be missing)."""
    fields = _pick(cbs_payload or {}, _CBS_ALIASES)
    for key in ("application_breakdown", "behavioral_breakdown"):
        if not isinstance(fields.get(key), Mapping):
            fields.pop(key, None)
    for key in ("application_score", "behavioral_score"):
        if fields.get(key) is False:
            fields[key] = None
    return CbsSummary(**fields, dbr=dbr_from_payload(dbr_payload))


def system_checks_from_payload(payload: Mapping[str, Any]) -> SystemChecksInput | None:
    """Screening flags and detail from the application payload; None when it carries none."""
    fields = {key: payload[key] for key in _SYSTEM_CHECK_FLAGS if key in payload}
    # a null World Check result means the screening did not run
    if fields.get("world_check_result") is False:
        fields["world_check_result"] = None
    for section, keys in _SYSTEM_CHECK_DETAIL.items():
        detail = payload.get(section)
        if isinstance(detail, Mapping):
            fields.update({field: detail[key] for key, field in keys.items() if key in detail})
    if not fields:
        return None
    return SystemChecksInput(**fields)


def fallback_application(application_id: int | str) -> dict[str, Any]:
    """Documented stand-in payload used when the LOS application API is unavailable.

    Deterministic so the same id always yields the same decision. Describes a
    salaried, non-salary-transfer NTB applicant in Karachi with clean checks and
    no EAMVU submission.
    """
    return {
        "application_id": str(application_id),
        "full_name": f"Fallback Applicant {application_id}",
        "cnic": "",
        "date_of_birth": "1990-01-01",
        "occupation": "Salaried",
        "employment_status": "employed",
        "employment_type": "permanent",
        "length_of_employment": 2,
        "total_income": 60000,
        "gross_monthly_income": 75000,
        "is_ubl_customer": False,
        "salary_transfer_flag": "non_salary_transfer",
        "curr_city": "Karachi",
        "office_city": "Karachi",
        "cluster": "SOUTH",
        "spu_black_list_check": False,
        "spu_credit_card_30k_check": False,
        "spu_negative_list_check": False,
        "eavmu_submitted": False,
        "loan_type": "credit_card",
    }

"""Mandatory system checks: eCIB, VERISYS, AFD, PEP and World Check screening.

Advisory only. The result is reported beside the decision and never feeds
the weighted score, the decision buckets or the hard-stop set.

eCIB (performed when either the individual or corporate check ran):
  HIT      delinquency in the last 2 months, or any 90+ DPD
  HIT      more than 1 delinquency in the last 6 months, or more than 1 at 60+ DPD
  WARNING  more than 2 delinquencies in the last 12 months, or more than 2 at 30+ DPD
  HIT      unsecured exposure above PKR 3M, or total exposure above PKR 7M
VERISYS: HIT when the CNIC, biometrics, name, DOB or address is explicitly not verified.
AFD: HIT on cross-product delinquency, a negative-database hit or compliance issues.
PEP: HIT when the applicant is a politically exposed person.
World Check: HIT on a sanctions / negative screening hit.

A check that did not run is PENDING. Overall: HIT if any check hit, PENDING if
none ran, else CLEAN.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from cardscore.calculators.credit_limit import TOTAL_EXPOSURE_CAP, UNSECURED_EXPOSURE_CAP
from cardscore.models.enums import CheckStatus
from cardscore.schemas.applicant import SystemChecksInput
from cardscore.schemas.scoring import ScreeningCheck, SystemChecksResult

logger = logging.getLogger(__name__)

# check key → label used in hit messages
CHECK_LABELS: dict[str, str] = {
    "ecib": "eCIB",
    "verisys": "VERISYS",
    "afd": "AFD",
    "pep": "PEP",
    "world_check": "World Check",
}


def _pass_fail(flag: bool) -> str:
    return "PASS" if flag else "FAIL"


def check_ecib(
    checks: SystemChecksInput,
    total_exposure: Decimal = Decimal("0"),
    unsecured_exposure: Decimal = Decimal("0"),
) -> ScreeningCheck:
    if not (checks.ecib_individual_check or checks.ecib_corporate_check):
        return ScreeningCheck(status=CheckStatus.PENDING, notes=("eCIB checks not performed - PENDING",))

    notes: list[str] = []
    warnings: list[str] = []

    delinquency = "CLEAN"
    if checks.last_2m_delinquency > 0 or checks.dpd_90_count > 0:
        delinquency = "HIT"
        notes.append("eCIB HIT: Delinquency in last 2 months or 90+ DPD")
    elif checks.last_6m_delinquency > 1 or checks.dpd_60_count > 1:
        delinquency = "HIT"
        notes.append("eCIB HIT: More than 1 delinquency in last 6 months or 60+ DPD")
    elif checks.last_12m_delinquency > 2 or checks.dpd_30_count > 2:
        delinquency = "WARNING"
        warnings.append("eCIB WARNING: High delinquency in last 12 months")

    exposure = "WITHIN_LIMITS"
    if unsecured_exposure > UNSECURED_EXPOSURE_CAP:
        exposure = "EXCEEDED"
        notes.append("eCIB HIT: Unsecured exposure exceeds PKR 3M limit")
    elif total_exposure > TOTAL_EXPOSURE_CAP:
        exposure = "EXCEEDED"
        notes.append("eCIB HIT: Total exposure exceeds PKR 7M limit")

    notes.append(f"eCIB Individual Check: {_pass_fail(checks.ecib_individual_check)}")
    notes.append(f"eCIB Corporate Check: {_pass_fail(checks.ecib_corporate_check)}")
    notes.append(f"Delinquency Status: {delinquency}")
    notes.append(f"Exposure Status: {exposure}")

    hit = delinquency == "HIT" or exposure == "EXCEEDED"
    return ScreeningCheck(
        status=CheckStatus.HIT if hit else CheckStatus.CLEAN,
        notes=tuple(notes),
        warnings=tuple(warnings),
    )


def check_verisys(checks: SystemChecksInput) -> ScreeningCheck:
    if not checks.verisys_cnic_check:
        return ScreeningCheck(status=CheckStatus.PENDING, notes=("VERISYS check not performed - PENDING",))

    cnic_valid = checks.cnic_valid is not False
    biometric = checks.biometric_verified is not False
    data_match = all(v is not False for v in (checks.name_match, checks.dob_match, checks.address_match))

    notes: list[str] = []
    if not cnic_valid:
        notes.append("VERISYS HIT: Invalid CNIC")
    if not biometric:
        notes.append("VERISYS HIT: Biometric verification failed")
    if not data_match:
        notes.append("VERISYS HIT: Data mismatch detected")
    notes.append(f"CNIC Valid: {'YES' if cnic_valid else 'NO'}")
    notes.append(f"Biometric Verified: {'YES' if biometric else 'NO'}")
    notes.append(f"Data Match: {'YES' if data_match else 'NO'}")

    clean = cnic_valid and biometric and data_match
    return ScreeningCheck(status=CheckStatus.CLEAN if clean else CheckStatus.HIT, notes=tuple(notes))


def check_afd(checks: SystemChecksInput) -> ScreeningCheck:
    if not (checks.afd_delinquency_check or checks.afd_compliance_check):
        return ScreeningCheck(status=CheckStatus.PENDING, notes=("AFD checks not performed - PENDING",))

    findings = (
        (checks.cross_product_delinquency, "AFD HIT: Cross-product delinquency detected"),
        (checks.negative_database_hit, "AFD HIT: Negative database hit"),
        (checks.compliance_issues, "AFD HIT: Compliance issues detected"),
    )
    notes = [message for found, message in findings if found]
    notes.append(f"AFD Delinquency Check: {_pass_fail(checks.afd_delinquency_check)}")
    notes.append(f"AFD Compliance Check: {_pass_fail(checks.afd_compliance_check)}")

    hit = any(found for found, _ in findings)
    return ScreeningCheck(status=CheckStatus.HIT if hit else CheckStatus.CLEAN, notes=tuple(notes))


def check_pep(checks: SystemChecksInput) -> ScreeningCheck:
    if not checks.pep_check:
        return ScreeningCheck(status=CheckStatus.PENDING, notes=("PEP check not performed - PENDING",))
    if checks.is_pep:
        return ScreeningCheck(
            status=CheckStatus.HIT,
            notes=(f"PEP HIT: Politically Exposed Person - {checks.pep_risk_level} risk",),
        )
    return ScreeningCheck(status=CheckStatus.CLEAN, notes=("Is PEP: NO",))


def check_world(checks: SystemChecksInput) -> ScreeningCheck:
    if checks.world_check_result is None:
        return ScreeningCheck(status=CheckStatus.PENDING, notes=("World Check not performed - PENDING",))
    if checks.world_check_result:
        return ScreeningCheck(status=CheckStatus.HIT, notes=("World Check HIT: Sanctions/negative screening hit",))
    return ScreeningCheck(status=CheckStatus.CLEAN, notes=("World Check: CLEAN",))


def run_system_checks(
    checks: SystemChecksInput,
    total_exposure: Decimal = Decimal("0"),
    unsecured_exposure: Decimal = Decimal("0"),
) -> SystemChecksResult:
    """Run every screening check and summarize them.

    Args:
        checks: Screening flags and detail.
        total_exposure: eCIB total exposure, PKR.
        unsecured_exposure: eCIB unsecured exposure, PKR.

    Returns:
        SystemChecksResult; score 0 on any hit, else 100.
    """
    results = {
        "ecib": check_ecib(checks, total_exposure, unsecured_exposure),
        "verisys": check_verisys(checks),
        "afd": check_afd(checks),
        "pep": check_pep(checks),
        "world_check": check_world(checks),
    }

    hits = tuple(f"{CHECK_LABELS[key]} Critical Hit" for key, r in results.items() if r.status is CheckStatus.HIT)
    warnings = tuple(w for r in results.values() for w in r.warnings)

    if hits:
        overall = CheckStatus.HIT
    elif all(r.status is CheckStatus.PENDING for r in results.values()):
        overall = CheckStatus.PENDING
    else:
        overall = CheckStatus.CLEAN

    logger.debug("System checks %s (%d hit(s))", overall.value, len(hits))
    return SystemChecksResult(
        overall_status=overall,
        score=0 if hits else 100,
        checks=results,
        critical_hits=hits,
        warnings=warnings,
    )

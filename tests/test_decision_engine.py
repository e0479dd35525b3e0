"""End-to-end tests for ``evaluate``: registry, aggregation and credit limit together."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from unittest.mock import patch

import pytest

from cardscore.calculators.dbr import calculate_dbr
from cardscore.decision import evaluate, validate_application
from cardscore.models.enums import CardType, CheckStatus, Decision, ModuleName, RiskLevel
from cardscore.schemas.applicant import Address, ApplicantRecord, CbsSummary, ObligationsInput, SystemChecksInput
from cardscore.schemas.scoring import DbrComputation

AS_OF = date(2026, 1, 1)


def _applicant(**overrides) -> ApplicantRecord:
    """ETB salaried applicant, age 35, clean checks, Karachi / Lahore, FEDERAL."""
    data = {
        "application_id": "APP-1",
        "date_of_birth": "1990-06-15",
        "occupation": "Engineer",
        "employment_type": "permanent",
        "employment_tenure_years": 4,
        "net_monthly_income": 42000,
        "gross_monthly_income": 50000,
        "is_existing_customer": True,
        "salary_transfer_flag": "salary_transfer",
        "current_address": Address(street="Block 5 Clifton", city="Karachi"),
        "office_address": Address(street="Gulberg III", city="Lahore"),
        "cluster": "FEDERAL",
        "spu_blacklist_check": False,
        "spu_credit_card_30k_check": "no",
        "spu_negative_list_check": None,
        "eamvu_submitted": True,
    }
    data.update(overrides)
    return ApplicantRecord(**data)


def _cbs(**overrides) -> CbsSummary:
    data = {
        "application_score": 80,
        "behavioral_score": 60,
        "dbr": DbrComputation(dbr_percentage=Decimal("18"), threshold=Decimal("35"), status="pass"),
    }
    data.update(overrides)
    return CbsSummary(**data)


class TestApprovedApplication:
    """Scores 100 / 70 / 97 / 100 / 100 / 75 / 80 / 60 under ETB weights."""

    @pytest.fixture()
    def result(self):
        return evaluate(_applicant(), None, _cbs(), as_of=AS_OF)

    def test_module_scores(self, result) -> None:
        raw = {m: s.raw_score for m, s in result.module_scores.items()}
        assert raw == {
            ModuleName.AGE: Decimal("100"),
            ModuleName.CITY: Decimal("70"),
            ModuleName.INCOME: Decimal("97"),
            ModuleName.SPU: Decimal("100"),
            ModuleName.EAMVU: Decimal("100"),
            ModuleName.DBR: Decimal("75"),
            ModuleName.APPLICATION: Decimal("80"),
            ModuleName.BEHAVIORAL: Decimal("60"),
        }

    def test_decision(self, result) -> None:
        assert result.final_score == Decimal("80.45")
        assert result.decision is Decision.APPROVED
        assert result.risk_level is RiskLevel.LOW

    def test_dbr_attached(self, result) -> None:
        assert result.dbr.dbr_percentage == Decimal("18")

    def test_credit_limit_assigned(self, result) -> None:
        """No upstream net income on the DBR → applicant's 42,000 × 3.3."""
        assert result.credit_limit is not None
        assert result.credit_limit.assigned_limit == Decimal("138600")
        assert result.credit_limit.card_type is CardType.GOLD

    def test_idempotent(self, result) -> None:
        assert evaluate(_applicant(), None, _cbs(), as_of=AS_OF) == result

    def test_no_screening_without_input(self, result) -> None:
        assert result.system_checks is None


class TestSystemChecks:
    """Screening is reported beside the decision and never changes it."""

    def test_hits_do_not_change_decision(self) -> None:
        checks = SystemChecksInput(pep_check=True, is_pep=True, world_check_result=True)
        result = evaluate(_applicant(), None, _cbs(), system_checks=checks, as_of=AS_OF)

        assert result.final_score == Decimal("80.45")
        assert result.decision is Decision.APPROVED
        assert result.hard_stops == ()
        assert result.system_checks.overall_status is CheckStatus.HIT
        assert "System checks hit: PEP Critical Hit, World Check Critical Hit" in result.warnings

    def test_exposures_come_from_cbs(self) -> None:
        checks = SystemChecksInput(ecib_individual_check=True)
        cbs = _cbs(unsecured_exposure=3500000)
        result = evaluate(_applicant(), None, cbs, system_checks=checks, as_of=AS_OF)
        assert result.system_checks.checks["ecib"].status is CheckStatus.HIT

    def test_clean_adds_no_warning(self) -> None:
        checks = SystemChecksInput(verisys_cnic_check=True)
        result = evaluate(_applicant(), None, _cbs(), system_checks=checks, as_of=AS_OF)
        assert result.system_checks.overall_status is CheckStatus.CLEAN
        assert not any(w.startswith("System checks hit") for w in result.warnings)


class TestHardStops:
    def test_self_employed_age_70_declined(self) -> None:
        applicant = _applicant(occupation="Self Employed Consultant", date_of_birth="1955-03-01")
        result = evaluate(applicant, None, _cbs(), as_of=AS_OF)

        assert result.module_scores[ModuleName.AGE].is_hard_stop
        assert result.decision is Decision.DECLINED
        assert result.risk_level is RiskLevel.HIGH
        assert result.credit_limit is None

    def test_spu_blacklist_declined_despite_high_score(self) -> None:
        result = evaluate(_applicant(spu_blacklist_check="yes"), None, _cbs(), as_of=AS_OF)
        assert result.final_score == Decimal("75.45")
        assert result.decision is Decision.DECLINED
        assert result.hard_stops == ("spu: SPU hit: BLACKLIST",)

    def test_future_birth_date_declined(self) -> None:
        result = evaluate(_applicant(date_of_birth="2030-01-01"), None, _cbs(), as_of=AS_OF)
        assert result.module_scores[ModuleName.AGE].is_hard_stop
        assert result.decision is Decision.DECLINED

    def test_dbr_fail_from_obligations(self) -> None:
        obligations = ObligationsInput(existing_emis=Decimal("30000"))
        result = evaluate(_applicant(), obligations, _cbs(dbr=None), as_of=AS_OF)
        assert result.dbr.dbr_percentage == Decimal("71.43")
        assert result.module_scores[ModuleName.DBR].flags == ("DBR_FAIL",)
        assert result.decision is Decision.DECLINED

    def test_dbr_computed_once(self) -> None:
        obligations = ObligationsInput(existing_emis=Decimal("30000"))
        with patch("cardscore.evaluators.dbr.calculate_dbr", wraps=calculate_dbr) as spy:
            result = evaluate(_applicant(), obligations, _cbs(dbr=None), as_of=AS_OF)
        spy.assert_called_once()
        assert result.dbr.dbr_percentage == Decimal("71.43")
        assert result.module_scores[ModuleName.DBR].flags == ("DBR_FAIL",)

    def test_dbr_age_override_routes_to_rru(self) -> None:
        applicant = _applicant(occupation="Self employed", date_of_birth="1960-01-01")
        obligations = ObligationsInput(existing_emis=Decimal("2000"))
        result = evaluate(applicant, obligations, _cbs(dbr=None), as_of=AS_OF)

        assert result.module_scores[ModuleName.AGE].raw_score == Decimal("0")  # 66 > 65
        assert "REFER_RRU" in result.module_scores[ModuleName.DBR].flags
        assert result.action_required == "Refer to RRU for manual review"


class TestMissingData:
    def test_no_dbr_data_is_soft(self) -> None:
        result = evaluate(_applicant(), None, _cbs(dbr=None), as_of=AS_OF)
        dbr = result.module_scores[ModuleName.DBR]

        assert dbr.flags == ("NO_DBR_DATA",)
        assert not dbr.is_hard_stop
        assert result.hard_stops == ()
        assert result.dbr is None
        assert "No DBR data available; DBR scored 0" in result.warnings
        assert result.final_score == Decimal("39.20")

    def test_no_cbs_summary(self) -> None:
        result = evaluate(_applicant(), ObligationsInput(), None, as_of=AS_OF)
        assert result.module_scores[ModuleName.APPLICATION].raw_score == Decimal("0")
        assert "Application score missing; scored 0" in result.warnings
        assert "Behavioral score missing; scored 0" in result.warnings

    def test_scores_always_in_range(self) -> None:
        applicant = ApplicantRecord()
        result = evaluate(applicant, None, None, as_of=AS_OF)
        for score in result.module_scores.values():
            assert Decimal("0") <= score.raw_score <= Decimal("100")
        assert Decimal("0") <= result.final_score <= Decimal("100")
        assert result.decision is Decision.DECLINED


class TestValidateApplication:
    def test_clean_record(self) -> None:
        assert validate_application(_applicant(), as_of=AS_OF) == []

    def test_problems_listed(self) -> None:
        applicant = ApplicantRecord(net_monthly_income=0)
        problems = validate_application(applicant, as_of=AS_OF)
        assert problems == [
            "Date of birth is missing or invalid",
            "Current city is missing",
            "Office city is missing",
            "Net monthly income is missing or not positive",
            "EAMVU submission flag is missing",
        ]

    def test_future_birth_date(self) -> None:
        problems = validate_application(_applicant(date_of_birth="2030-01-01"), as_of=AS_OF)
        assert problems == ["Date of birth is in the future"]

    def test_net_above_gross(self) -> None:
        problems = validate_application(_applicant(net_monthly_income=60000), as_of=AS_OF)
        assert problems == ["Net monthly income exceeds gross monthly income"]

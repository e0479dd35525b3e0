"""Tests for the six risk evaluators.

Each evaluator is exercised directly with its typed inputs; the registry
adapters are covered in test_decision_engine.py.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from cardscore.evaluators import (
    CRITICAL_MODULES,
    EVALUATORS,
    evaluate_age,
    evaluate_city,
    evaluate_eamvu,
    evaluate_income,
    evaluate_spu,
    resolve_dbr,
    score_dbr,
)
from cardscore.models.enums import DbrStatus, EmploymentType, ModuleName, SalaryTransfer
from cardscore.schemas.applicant import Address, ApplicantRecord, CbsSummary, EvaluationContext, ObligationsInput
from cardscore.schemas.scoring import DbrComputation


def _dbr(pct: str, threshold: str = "35", status: DbrStatus | str = DbrStatus.PASS) -> DbrComputation:
    return DbrComputation(dbr_percentage=Decimal(pct), threshold=Decimal(threshold), status=status)


class TestRegistry:
    def test_six_internal_evaluators(self) -> None:
        assert set(EVALUATORS) == {
            ModuleName.AGE,
            ModuleName.CITY,
            ModuleName.INCOME,
            ModuleName.SPU,
            ModuleName.EAMVU,
            ModuleName.DBR,
        }

    def test_critical_modules(self) -> None:
        assert CRITICAL_MODULES == {ModuleName.AGE, ModuleName.SPU, ModuleName.DBR}


# ── Age ──────────────────────────────────────────────────────────────


class TestAgeSelfEmployed:
    def test_self_employed_age_70_hard_stop(self) -> None:
        """'Self Employed Consultant', age 70 → hard stop."""
        result = evaluate_age(70, occupation="Self Employed Consultant")
        assert result.is_hard_stop
        assert result.raw_score == Decimal("0")

    @pytest.mark.parametrize("age", [22, 40, 65])
    def test_in_range(self, age) -> None:
        assert evaluate_age(age, occupation="self employed trader").raw_score == Decimal("100")

    def test_below_range(self) -> None:
        assert evaluate_age(21, occupation="Self").is_hard_stop

    def test_employment_type_marks_self_employed(self) -> None:
        result = evaluate_age(64, occupation="Consultant", employment_type=EmploymentType.SELF_EMPLOYED)
        assert result.raw_score == Decimal("100")

    def test_self_employed_wins_over_retired(self) -> None:
        assert evaluate_age(64, occupation="self", is_retired=True).raw_score == Decimal("100")


class TestAgeRetired:
    def test_before_60(self) -> None:
        result = evaluate_age(55, is_retired=True)
        assert result.raw_score == Decimal("75")
        assert "Retired before 60" in result.notes[0]

    def test_near_60(self) -> None:
        result = evaluate_age(61, is_retired=True)
        assert result.raw_score == Decimal("75")
        assert "Retired at/near 60–61" in result.notes[0]

    @pytest.mark.parametrize("age", [19, 62])
    def test_out_of_range(self, age) -> None:
        assert evaluate_age(age, is_retired=True).is_hard_stop


class TestAgeSalaried:
    @pytest.mark.parametrize("age", [21, 35, 60])
    def test_full_score(self, age) -> None:
        assert evaluate_age(age, occupation="Engineer").raw_score == Decimal("100")

    @pytest.mark.parametrize("age", [20, 61])
    def test_edge_tolerance(self, age) -> None:
        assert evaluate_age(age).raw_score == Decimal("80")

    @pytest.mark.parametrize("age", [19, 62, 0])
    def test_hard_stop(self, age) -> None:
        assert evaluate_age(age).is_hard_stop

    def test_missing_birth_date(self) -> None:
        result = evaluate_age(None)
        assert result.is_hard_stop
        assert "birth date" in result.hard_stop.reason


# ── City ─────────────────────────────────────────────────────────────


class TestCity:
    def test_both_covered_federal(self) -> None:
        """Karachi + Lahore, FEDERAL, no Annexure A → 40 + 30 = 70."""
        result = evaluate_city(Address(city="Karachi"), Address(city="Lahore"), "FEDERAL")
        assert result.raw_score == Decimal("70")
        assert result.flags == ()
        assert not result.is_hard_stop

    def test_one_covered(self) -> None:
        result = evaluate_city(Address(city="Karachi"), Address(city="Multan"), "SOUTHERN_PUNJAB")
        assert result.raw_score == Decimal("30")

    def test_case_insensitive(self) -> None:
        result = evaluate_city(Address(city="karachi"), Address(city=" LAHORE "), "federal")
        assert result.raw_score == Decimal("70")

    def test_unknown_cluster(self) -> None:
        result = evaluate_city(Address(city="Quetta"), Address(city="Quetta"), "WEST")
        assert result.raw_score == Decimal("0")

    def test_annexure_a_penalty(self) -> None:
        current = Address(house="House 12", district="Lyari", city="Karachi")
        result = evaluate_city(current, Address(city="Karachi"), "SOUTH")
        assert result.raw_score == Decimal("35")  # -30 + 40 + 25
        assert result.flags == ("AnnexureA",)

    def test_annexure_a_in_office_address(self) -> None:
        office = Address(street="near landhi industrial area", city="Karachi")
        result = evaluate_city(Address(city="Karachi"), office, "SOUTH")
        assert "AnnexureA" in result.flags

    def test_clamped_at_zero(self) -> None:
        result = evaluate_city(Address(district="Hangu", city="Hangu"), Address(city="Kohat"), None)
        assert result.raw_score == Decimal("0")
        assert "AnnexureA" in result.flags

    def test_notes_show_coverage(self) -> None:
        result = evaluate_city(Address(city="Karachi"), Address(city="Multan"), "SOUTH")
        assert "Living city: 'Karachi' → Full Coverage" in result.notes
        assert "Working city: 'Multan' → Not Full Coverage" in result.notes


# ── Income ───────────────────────────────────────────────────────────


class TestIncome:
    def test_permanent_etb_salary_transfer(self) -> None:
        """42,000 net / 50,000 gross, 4 years → 60 + 25 + 12 = 97."""
        result = evaluate_income(
            Decimal("42000"),
            Decimal("50000"),
            EmploymentType.PERMANENT,
            SalaryTransfer.SALARY_TRANSFER,
            True,
            Decimal("4"),
        )
        assert result.raw_score == Decimal("97")

    def test_threshold_not_met_for_ntb(self) -> None:
        result = evaluate_income(
            Decimal("42000"),
            Decimal("50000"),
            EmploymentType.PERMANENT,
            SalaryTransfer.SALARY_TRANSFER,
            False,
            Decimal("4"),
        )
        assert result.raw_score == Decimal("37")

    @pytest.mark.parametrize(
        ("employment", "transfer", "etb", "minimum"),
        [
            (EmploymentType.PERMANENT, SalaryTransfer.NON_SALARY_TRANSFER, True, "45000"),
            (EmploymentType.PERMANENT, SalaryTransfer.NON_SALARY_TRANSFER, False, "50000"),
            (EmploymentType.CONTRACTUAL, SalaryTransfer.SALARY_TRANSFER, True, "60000"),
            (EmploymentType.CONTRACTUAL, SalaryTransfer.SALARY_TRANSFER, False, "65000"),
            (EmploymentType.CONTRACTUAL, SalaryTransfer.NON_SALARY_TRANSFER, True, "65000"),
            (EmploymentType.CONTRACTUAL, SalaryTransfer.NON_SALARY_TRANSFER, False, "70000"),
            (EmploymentType.SELF_EMPLOYED, SalaryTransfer.SALARY_TRANSFER, True, "100000"),
            (EmploymentType.BUSINESS, SalaryTransfer.NON_SALARY_TRANSFER, False, "120000"),
        ],
    )
    def test_threshold_table(self, employment, transfer, etb, minimum) -> None:
        at = evaluate_income(Decimal(minimum), None, employment, transfer, etb, Decimal("0"))
        below = evaluate_income(Decimal(minimum) - 1, None, employment, transfer, etb, Decimal("0"))
        assert at.raw_score == Decimal("60")
        assert below.raw_score == Decimal("0")

    def test_probation_skips_threshold(self) -> None:
        result = evaluate_income(
            Decimal("500000"),
            Decimal("500000"),
            EmploymentType.PROBATION,
            SalaryTransfer.SALARY_TRANSFER,
            True,
            Decimal("0"),
        )
        assert result.raw_score == Decimal("25")
        assert "Probation case → Score based on DBR, no threshold credit" in result.notes

    def test_other_employment_never_meets_threshold(self) -> None:
        result = evaluate_income(
            Decimal("500000"), None, EmploymentType.OTHER, SalaryTransfer.SALARY_TRANSFER, True, Decimal("0")
        )
        assert result.raw_score == Decimal("0")

    @pytest.mark.parametrize(
        ("net", "gross", "points"),
        [("80", "100", 25), ("79", "100", 20), ("60", "100", 20), ("59", "100", 10)],
    )
    def test_stability(self, net, gross, points) -> None:
        result = evaluate_income(
            Decimal(net), Decimal(gross), EmploymentType.OTHER, SalaryTransfer.SALARY_TRANSFER, True, Decimal("0")
        )
        assert result.raw_score == Decimal(points)

    def test_stability_not_measurable(self) -> None:
        result = evaluate_income(
            Decimal("50000"), Decimal("0"), EmploymentType.OTHER, SalaryTransfer.SALARY_TRANSFER, True, Decimal("0")
        )
        assert result.raw_score == Decimal("0")
        assert "Stability not measurable (missing gross/net income)" in result.notes

    @pytest.mark.parametrize(("years", "points"), [("5", 15), ("3", 12), ("1", 8), ("0.5", 0), ("0", 0)])
    def test_tenure(self, years, points) -> None:
        result = evaluate_income(None, None, EmploymentType.OTHER, SalaryTransfer.SALARY_TRANSFER, True, Decimal(years))
        assert result.raw_score == Decimal(points)

    def test_maximum_is_100(self) -> None:
        result = evaluate_income(
            Decimal("200000"),
            Decimal("200000"),
            EmploymentType.PERMANENT,
            SalaryTransfer.SALARY_TRANSFER,
            True,
            Decimal("10"),
        )
        assert result.raw_score == Decimal("100")


# ── SPU ──────────────────────────────────────────────────────────────


class TestSpu:
    def test_blacklist_hit(self) -> None:
        """Blacklist 'yes', others false → hard stop, flags [BLACKLIST]."""
        result = evaluate_spu("yes", False, False)
        assert result.is_hard_stop
        assert result.raw_score == Decimal("0")
        assert result.flags == ("BLACKLIST",)

    def test_multiple_hits(self) -> None:
        result = evaluate_spu(False, "Y", 1)
        assert result.flags == ("CREDITCARD_30K", "NEGATIVE_LIST")

    def test_clean(self) -> None:
        result = evaluate_spu(None, "no", 0)
        assert result.raw_score == Decimal("100")
        assert result.flags == ()
        assert not result.is_hard_stop


# ── EAMVU ────────────────────────────────────────────────────────────


class TestEamvu:
    @pytest.mark.parametrize("value", [True, 1, "1", "true", "yes"])
    def test_submitted(self, value) -> None:
        assert evaluate_eamvu(value).raw_score == Decimal("100")

    @pytest.mark.parametrize("value", [False, None, 0, "no", ""])
    def test_not_submitted(self, value) -> None:
        result = evaluate_eamvu(value)
        assert result.raw_score == Decimal("0")
        assert not result.is_hard_stop


# ── DBR stage B ──────────────────────────────────────────────────────


class TestDbrBanding:
    def test_pass_18_percent(self) -> None:
        """DBR 18%, threshold 35, pass → 75."""
        result = score_dbr(_dbr("18"))
        assert result.raw_score == Decimal("75")
        assert not result.is_hard_stop

    @pytest.mark.parametrize(
        ("pct", "points"),
        [("5", 100), ("10", 100), ("10.01", 75), ("20", 75), ("25", 50), ("30", 50), ("35", 25), ("40", 25)],
    )
    def test_bands(self, pct, points) -> None:
        assert score_dbr(_dbr(pct, threshold="45")).raw_score == Decimal(points)

    def test_above_40_on_pass_scores_zero(self) -> None:
        result = score_dbr(_dbr("42", threshold="45"))
        assert result.raw_score == Decimal("0")
        assert not result.is_hard_stop

    def test_fail_hard_stop(self) -> None:
        result = score_dbr(_dbr("50", status=DbrStatus.FAIL))
        assert result.is_hard_stop
        assert result.flags == ("DBR_FAIL",)

    def test_conditional_fail_refers_to_rru(self) -> None:
        result = score_dbr(_dbr("12", status="conditionally fail - redirect to RRU"))
        assert result.is_hard_stop
        assert result.flags == ("DBR_FAIL", "REFER_RRU")

    def test_no_data_is_soft(self) -> None:
        result = score_dbr(None)
        assert result.raw_score == Decimal("0")
        assert result.flags == ("NO_DBR_DATA",)
        assert not result.is_hard_stop


class TestDbrSourcePrecedence:
    def _ctx(self, obligations=None, dbr=None) -> EvaluationContext:
        return EvaluationContext(
            applicant=ApplicantRecord(net_monthly_income=Decimal("100000"), date_of_birth="1990-01-01"),
            obligations=obligations,
            cbs=CbsSummary(dbr=dbr),
            as_of=date(2026, 1, 1),
        )

    def test_precomputed_wins(self) -> None:
        upstream = _dbr("18")
        ctx = self._ctx(obligations=ObligationsInput(existing_emis=Decimal("90000")), dbr=upstream)
        assert resolve_dbr(ctx) == upstream

    def test_computed_from_obligations(self) -> None:
        ctx = self._ctx(obligations=ObligationsInput(existing_emis=Decimal("8000")))
        result = resolve_dbr(ctx)
        assert result.dbr_percentage == Decimal("8.00")
        assert result.status is DbrStatus.PASS

    def test_no_source(self) -> None:
        assert resolve_dbr(self._ctx()) is None

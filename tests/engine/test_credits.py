"""Tests for education credits, EIC and the Child Tax Credit."""

from decimal import Decimal

from taxometer.engine.credits import (
    calculate_child_tax_credit,
    calculate_education_credits,
    calculate_eic,
    evaluate_credits,
)
from taxometer.engine.income import IncomeSummary
from taxometer.engine.models import Dependent, TaxPayer, TuitionExpense
from taxometer.engine.results import AlertSeverity, ComplianceAlert
from taxometer.tax.year_config import FilingStatus, TaxYearConfig


def _wages(amount: str) -> IncomeSummary:
    return IncomeSummary(wages=Decimal(amount))


def _aotc_student(amount: str = "5000") -> TuitionExpense:
    return TuitionExpense(amount=Decimal(amount), half_time=True, first_four_years=True)


class TestEducationCredits:
    """Tests for AOTC and LLC."""

    def test_aotc_full_credit(self, profile: TaxYearConfig) -> None:
        result = calculate_education_credits(
            [_aotc_student()], Decimal("50000"), FilingStatus.SINGLE, profile
        )
        assert result.aotc_refundable == Decimal("1000")
        assert result.aotc_nonrefundable == Decimal("1500")
        assert result.llc_nonrefundable == Decimal("0")

    def test_aotc_halfway_through_phaseout(self, profile: TaxYearConfig) -> None:
        result = calculate_education_credits(
            [_aotc_student()], Decimal("85000"), FilingStatus.SINGLE, profile
        )
        assert result.aotc_refundable + result.aotc_nonrefundable == Decimal("1250")
        assert result.aotc_refundable == Decimal("500")
        assert result.aotc_nonrefundable == Decimal("750")

    def test_fully_phased_out(self, profile: TaxYearConfig) -> None:
        result = calculate_education_credits(
            [_aotc_student()], Decimal("95000"), FilingStatus.SINGLE, profile
        )
        assert result.aotc_refundable == Decimal("0")
        assert result.aotc_nonrefundable == Decimal("0")

    def test_aotc_per_student(self, profile: TaxYearConfig) -> None:
        result = calculate_education_credits(
            [_aotc_student(), _aotc_student("2000")], Decimal("100000"),
            FilingStatus.MARRIED_JOINT, profile,
        )
        assert result.aotc_refundable == Decimal("1800")
        assert result.aotc_nonrefundable == Decimal("2700")

    def test_llc_capped_expenses(self, profile: TaxYearConfig) -> None:
        graduate = TuitionExpense(amount=Decimal("12000"), half_time=True, first_four_years=False)
        result = calculate_education_credits(
            [graduate], Decimal("50000"), FilingStatus.SINGLE, profile
        )
        assert result.llc_nonrefundable == Decimal("2000")
        assert result.aotc_nonrefundable == Decimal("0")

    def test_drug_conviction_falls_back_to_llc(self, profile: TaxYearConfig) -> None:
        student = TuitionExpense(
            amount=Decimal("5000"), half_time=True, first_four_years=True, drug_conviction=True
        )
        result = calculate_education_credits(
            [student], Decimal("50000"), FilingStatus.SINGLE, profile
        )
        assert result.aotc_refundable == Decimal("0")
        assert result.llc_nonrefundable == Decimal("1000")


class TestEarnedIncomeCredit:
    """Tests for EIC eligibility and phaseout."""

    def test_joint_one_child_in_phaseout(
        self, profile: TaxYearConfig, mfj_payer_with_child: TaxPayer, alerts: list[ComplianceAlert]
    ) -> None:
        eic = calculate_eic(_wages("50000"), mfj_payer_with_child, Decimal("50000"), profile, alerts)
        # 12,870 x 34% - (50,000 - 30,940) x 15.98%
        assert eic == Decimal("1330.012")

    def test_no_children_low_income(
        self, profile: TaxYearConfig, single_payer: TaxPayer, alerts: list[ComplianceAlert]
    ) -> None:
        eic = calculate_eic(_wages("8000"), single_payer, Decimal("8000"), profile, alerts)
        assert eic == Decimal("612")

    def test_married_separate_ineligible(
        self, profile: TaxYearConfig, alerts: list[ComplianceAlert]
    ) -> None:
        payer = TaxPayer(filing_status=FilingStatus.MARRIED_SEPARATE)
        eic = calculate_eic(_wages("8000"), payer, Decimal("8000"), profile, alerts)
        assert eic == Decimal("0")
        assert alerts == []

    def test_investment_income_limit(
        self, profile: TaxYearConfig, single_payer: TaxPayer, alerts: list[ComplianceAlert]
    ) -> None:
        summary = IncomeSummary(wages=Decimal("8000"), investment_income=Decimal("12000"))
        eic = calculate_eic(summary, single_payer, Decimal("20000"), profile, alerts)

        assert eic == Decimal("0")
        assert len(alerts) == 1
        assert alerts[0].code == "EIC_INV_LIMIT"
        assert alerts[0].severity == AlertSeverity.WARNING
        assert alerts[0].form_source == "Schedule EIC"

    def test_married_separate_over_investment_limit_alerts(
        self, profile: TaxYearConfig, alerts: list[ComplianceAlert]
    ) -> None:
        payer = TaxPayer(filing_status=FilingStatus.MARRIED_SEPARATE)
        summary = IncomeSummary(wages=Decimal("8000"), investment_income=Decimal("15000"))
        eic = calculate_eic(summary, payer, Decimal("23000"), profile, alerts)

        assert eic == Decimal("0")
        assert [alert.code for alert in alerts] == ["EIC_INV_LIMIT"]

    def test_never_negative(
        self, profile: TaxYearConfig, single_payer: TaxPayer, alerts: list[ComplianceAlert]
    ) -> None:
        eic = calculate_eic(_wages("90000"), single_payer, Decimal("90000"), profile, alerts)
        assert eic == Decimal("0")


class TestChildTaxCredit:
    """Tests for CTC phaseout and the refundable ACTC split."""

    def test_refundable_and_nonrefundable_split(
        self, profile: TaxYearConfig, mfj_payer_with_child: TaxPayer
    ) -> None:
        ctc = calculate_child_tax_credit(
            _wages("50000"), mfj_payer_with_child, Decimal("50000"), Decimal("1850"), profile
        )
        assert ctc.potential == Decimal("2000")
        assert ctc.refundable == Decimal("1700")
        assert ctc.nonrefundable == Decimal("300")

    def test_phaseout_rounds_up_to_next_thousand(self, profile: TaxYearConfig) -> None:
        payer = TaxPayer(filing_status=FilingStatus.SINGLE, dependents=[Dependent(age=5)])
        ctc = calculate_child_tax_credit(
            _wages("210500"), payer, Decimal("210500"), Decimal("40000"), profile
        )
        # 11 steps of $50
        assert ctc.potential == Decimal("1450")
        assert ctc.refundable == Decimal("1450")
        assert ctc.nonrefundable == Decimal("0")

    def test_nonrefundable_limited_by_tax(self, profile: TaxYearConfig) -> None:
        payer = TaxPayer(
            filing_status=FilingStatus.MARRIED_JOINT,
            dependents=[Dependent(age=3), Dependent(age=6)],
        )
        ctc = calculate_child_tax_credit(
            _wages("50000"), payer, Decimal("50000"), Decimal("100"), profile
        )
        assert ctc.refundable == Decimal("3400")
        assert ctc.nonrefundable == Decimal("100")

    def test_low_earned_income_limits_refund(
        self, profile: TaxYearConfig, mfj_payer_with_child: TaxPayer
    ) -> None:
        ctc = calculate_child_tax_credit(
            _wages("6500"), mfj_payer_with_child, Decimal("6500"), Decimal("0"), profile
        )
        assert ctc.refundable == Decimal("600")
        assert ctc.nonrefundable == Decimal("0")

    def test_seventeen_year_old_qualifies_for_eic_only(
        self, profile: TaxYearConfig, alerts: list[ComplianceAlert]
    ) -> None:
        payer = TaxPayer(filing_status=FilingStatus.SINGLE, dependents=[Dependent(age=17)])
        ctc = calculate_child_tax_credit(
            _wages("20000"), payer, Decimal("20000"), Decimal("500"), profile
        )
        eic = calculate_eic(_wages("20000"), payer, Decimal("20000"), profile, alerts)

        assert ctc.potential == Decimal("0")
        assert eic > Decimal("0")


class TestEvaluateCredits:
    def test_education_credits_reduce_ctc_room(
        self, profile: TaxYearConfig, mfj_payer_with_child: TaxPayer, alerts: list[ComplianceAlert]
    ) -> None:
        credits = evaluate_credits(
            _wages("50000"),
            mfj_payer_with_child,
            [_aotc_student()],
            Decimal("50000"),
            Decimal("1850"),
            profile,
            alerts,
        )
        assert credits.aotc_nonrefundable == Decimal("1500")
        # Only 350 of income tax is left for the CTC
        assert credits.ctc_nonrefundable == Decimal("300")
        assert credits.ctc_refundable == Decimal("1700")
        assert credits.eic == Decimal("1330.012")
        assert credits.energy_credit == Decimal("0")
        assert credits.adoption_credit == Decimal("0")

    def test_lifetime_learning_reduces_ctc_room(
        self, profile: TaxYearConfig, mfj_payer_with_child: TaxPayer, alerts: list[ComplianceAlert]
    ) -> None:
        credits = evaluate_credits(
            _wages("50000"),
            mfj_payer_with_child,
            [TuitionExpense(amount=Decimal("5000"))],
            Decimal("50000"),
            Decimal("1200"),
            profile,
            alerts,
        )
        assert credits.llc_nonrefundable == Decimal("1000")
        # 1,200 of income tax less the 1,000 LLC
        assert credits.ctc_nonrefundable == Decimal("200")
        assert credits.ctc_refundable == Decimal("1700")

    def test_ctc_room_exhausted(
        self, profile: TaxYearConfig, mfj_payer_with_child: TaxPayer, alerts: list[ComplianceAlert]
    ) -> None:
        credits = evaluate_credits(
            _wages("50000"),
            mfj_payer_with_child,
            [_aotc_student()],
            Decimal("50000"),
            Decimal("1500"),
            profile,
            alerts,
        )
        assert credits.ctc_nonrefundable == Decimal("0")

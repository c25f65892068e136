"""Tests for income classification."""

from decimal import Decimal

from taxometer.engine.income import IncomeSummary, classify_income
from taxometer.engine.models import (
    BusinessIncome,
    CapitalGainIncome,
    DividendIncome,
    InterestIncome,
    IsoExerciseIncome,
    OtherIncome,
    PassiveIncome,
    SocialSecurityIncome,
    WageIncome,
)
from taxometer.engine.results import AlertSeverity, ComplianceAlert


class TestClassifyIncome:
    """Tests for routing income records into category totals."""

    def test_wages_and_withholding(self, alerts: list[ComplianceAlert]) -> None:
        summary = classify_income(
            [
                WageIncome(amount=60000, withholding=6000),
                WageIncome(amount=20000, withholding=1500, medicare_wages=21000),
            ],
            alerts,
        )
        assert summary.wages == Decimal("80000")
        assert summary.medicare_wages == Decimal("81000")
        assert summary.ss_wages == Decimal("80000")
        assert summary.total_withholding == Decimal("7500")
        assert alerts == []

    def test_interest_split_by_exemption(self, alerts: list[ComplianceAlert]) -> None:
        summary = classify_income(
            [
                InterestIncome(amount=500),
                InterestIncome(amount=800, tax_exempt_type="muni"),
            ],
            alerts,
        )
        assert summary.taxable_interest == Decimal("500")
        assert summary.tax_exempt_interest == Decimal("800")
        assert summary.investment_income == Decimal("500")

    def test_dividends(self, alerts: list[ComplianceAlert]) -> None:
        summary = classify_income(
            [DividendIncome(amount=800, qualified=True), DividendIncome(amount=200)], alerts
        )
        assert summary.qualified_dividends == Decimal("800")
        assert summary.ordinary_dividends == Decimal("200")
        assert summary.total_dividends == Decimal("1000")
        assert summary.preferential_income == Decimal("800")

    def test_capital_gain_buckets(self, alerts: list[ComplianceAlert]) -> None:
        summary = classify_income(
            [
                CapitalGainIncome(amount=10000, cost_basis=4000, gain_type="long_term"),
                CapitalGainIncome(amount=3000, cost_basis=1000),
                CapitalGainIncome(amount=5000, cost_basis=2000, gain_type="collectibles_28"),
                CapitalGainIncome(amount=9000, cost_basis=8000, gain_type="unrecaptured_1250_25"),
            ],
            alerts,
        )
        assert summary.long_term_gain == Decimal("6000")
        assert summary.short_term_gain == Decimal("2000")
        assert summary.collectibles_gain == Decimal("3000")
        assert summary.unrecaptured_1250_gain == Decimal("1000")
        assert summary.capital_gains == Decimal("12000")
        assert summary.investment_income == Decimal("12000")

    def test_wash_sale_flagged_but_loss_counted(self, alerts: list[ComplianceAlert]) -> None:
        summary = classify_income(
            [CapitalGainIncome(amount=1000, cost_basis=3000, wash_sale_loss_disallowed=500)],
            alerts,
        )
        assert summary.short_term_gain == Decimal("-2000")
        assert summary.investment_income == Decimal("0")
        assert [a.code for a in alerts] == ["WASH_SALE"]
        assert alerts[0].severity == AlertSeverity.INFO

    def test_business_income_and_sstb_flag(self, alerts: list[ComplianceAlert]) -> None:
        summary = classify_income(
            [
                BusinessIncome(amount=90000, expenses=10000, naics_code="541110",
                               w2_wages_paid=20000, ubia=50000),
                BusinessIncome(amount=10000, expenses=2000, sstb=False),
            ],
            alerts,
        )
        assert summary.business_net_income == Decimal("88000")
        assert summary.qbi_income == Decimal("88000")
        assert summary.qbi_w2_wages == Decimal("20000")
        assert summary.qbi_ubia == Decimal("50000")
        assert summary.has_sstb is True
        assert [a.code for a in alerts] == ["SSTB_FLAG"]

    def test_passive_income_and_losses(self, alerts: list[ComplianceAlert]) -> None:
        summary = classify_income(
            [
                PassiveIncome(amount=5000, property_id="duplex"),
                PassiveIncome(amount=-8000, property_id="condo"),
                PassiveIncome(amount=-1000),
            ],
            alerts,
        )
        assert summary.passive_income == Decimal("5000")
        assert summary.passive_losses == [("condo", Decimal("8000")), ("unknown", Decimal("1000"))]
        assert summary.total_passive_loss == Decimal("9000")
        assert summary.investment_income == Decimal("5000")

    def test_social_security_iso_and_other(self, alerts: list[ComplianceAlert]) -> None:
        summary = classify_income(
            [
                SocialSecurityIncome(amount=24000),
                IsoExerciseIncome(amount=0, bargain_element=50000),
                OtherIncome(amount=7000, withholding=700),
            ],
            alerts,
        )
        assert summary.ss_benefits == Decimal("24000")
        assert summary.iso_bargain_element == Decimal("50000")
        assert summary.total_withholding == Decimal("700")
        assert summary.core_income == Decimal("0")

    def test_empty_input(self, alerts: list[ComplianceAlert]) -> None:
        assert classify_income([], alerts) == IncomeSummary()

    def test_earned_and_core_income(self, alerts: list[ComplianceAlert]) -> None:
        summary = classify_income(
            [
                WageIncome(amount=40000),
                BusinessIncome(amount=15000, expenses=5000),
                InterestIncome(amount=300),
                DividendIncome(amount=200, qualified=True),
            ],
            alerts,
        )
        assert summary.earned_income == Decimal("50000")
        assert summary.core_income == Decimal("50500")

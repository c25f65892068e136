"""Tests for NIIT and Additional Medicare Tax."""

from decimal import Decimal

from taxometer.engine.adjustments import SelfEmploymentTax
from taxometer.engine.income import IncomeSummary
from taxometer.engine.passive import PassiveLossResult
from taxometer.engine.surtax import calculate_surtaxes, net_investment_income
from taxometer.tax.year_config import FilingStatus, TaxYearConfig

NO_SE = SelfEmploymentTax(net_earnings=Decimal("0"))


class TestNetInvestmentIncomeTax:
    """Tests for Form 8960."""

    def test_limited_by_magi_excess(self, profile: TaxYearConfig) -> None:
        summary = IncomeSummary(
            wages=Decimal("180000"),
            medicare_wages=Decimal("180000"),
            taxable_interest=Decimal("50000"),
        )
        result = calculate_surtaxes(
            summary, PassiveLossResult(), NO_SE, Decimal("230000"), FilingStatus.SINGLE, profile
        )
        # 3.8% of the 30,000 MAGI excess, not the 50,000 NII
        assert result.niit == Decimal("1140.000")
        assert result.medicare_surtax == Decimal("0")

    def test_below_threshold(self, profile: TaxYearConfig) -> None:
        summary = IncomeSummary(wages=Decimal("100000"), taxable_interest=Decimal("50000"))
        result = calculate_surtaxes(
            summary, PassiveLossResult(), NO_SE, Decimal("150000"), FilingStatus.SINGLE, profile
        )
        assert result.niit == Decimal("0")
        assert result.net_investment_income == Decimal("0")

    def test_municipal_interest_raises_magi(self, profile: TaxYearConfig) -> None:
        summary = IncomeSummary(
            wages=Decimal("195000"),
            ordinary_dividends=Decimal("5000"),
            tax_exempt_interest=Decimal("10000"),
        )
        result = calculate_surtaxes(
            summary, PassiveLossResult(), NO_SE, Decimal("200000"), FilingStatus.SINGLE, profile
        )
        assert result.magi_niit == Decimal("210000")
        assert result.niit == Decimal("190.000")

    def test_allowed_passive_loss_reduces_nii(self) -> None:
        summary = IncomeSummary(passive_income=Decimal("40000"), long_term_gain=Decimal("5000"))
        passive = PassiveLossResult(allowed_loss=Decimal("10000"))
        assert net_investment_income(summary, passive) == Decimal("35000")


class TestAdditionalMedicareTax:
    """Tests for Form 8959."""

    def test_wages_over_threshold(self, profile: TaxYearConfig) -> None:
        summary = IncomeSummary(wages=Decimal("250000"), medicare_wages=Decimal("250000"))
        result = calculate_surtaxes(
            summary, PassiveLossResult(), NO_SE, Decimal("250000"), FilingStatus.SINGLE, profile
        )
        assert result.medicare_surtax == Decimal("450.000")

    def test_self_employment_earnings_count(self, profile: TaxYearConfig) -> None:
        summary = IncomeSummary(wages=Decimal("150000"), medicare_wages=Decimal("150000"))
        se = SelfEmploymentTax(net_earnings=Decimal("100000"))
        result = calculate_surtaxes(
            summary, PassiveLossResult(), se, Decimal("250000"), FilingStatus.SINGLE, profile
        )
        assert result.medicare_surtax == Decimal("450.000")

    def test_joint_threshold(self, profile: TaxYearConfig) -> None:
        summary = IncomeSummary(wages=Decimal("250000"), medicare_wages=Decimal("250000"))
        result = calculate_surtaxes(
            summary, PassiveLossResult(), NO_SE, Decimal("250000"), FilingStatus.MARRIED_JOINT, profile
        )
        assert result.medicare_surtax == Decimal("0")

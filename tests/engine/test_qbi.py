"""Tests for the Section 199A QBI deduction."""

from decimal import Decimal

from taxometer.engine.income import IncomeSummary
from taxometer.engine.qbi import compute_qbi_deduction, wage_ubia_limit
from taxometer.tax.year_config import FilingStatus, TaxYearConfig

STANDARD = Decimal("15600")


def _business(
    qbi: str = "100000",
    *,
    sstb: bool = False,
    w2_wages: str = "0",
    ubia: str = "0",
    long_term_gain: str = "0",
) -> IncomeSummary:
    return IncomeSummary(
        business_net_income=Decimal(qbi),
        qbi_income=Decimal(qbi),
        has_sstb=sstb,
        qbi_w2_wages=Decimal(w2_wages),
        qbi_ubia=Decimal(ubia),
        long_term_gain=Decimal(long_term_gain),
    )


class TestComputeQbiDeduction:
    """Tests for thresholds, SSTB phaseout and wage limits."""

    def test_below_threshold_limited_by_taxable_income(self, profile: TaxYearConfig) -> None:
        result = compute_qbi_deduction(
            _business(), Decimal("0"), Decimal("100000"), STANDARD, FilingStatus.SINGLE, profile
        )
        # 20% of taxable income before QBI (84,400)
        assert result.deduction == Decimal("16880")
        assert result.taxable_income == Decimal("67520")

    def test_below_threshold_full_20_percent(self, profile: TaxYearConfig) -> None:
        result = compute_qbi_deduction(
            _business(), Decimal("0"), Decimal("150000"), STANDARD, FilingStatus.SINGLE, profile
        )
        assert result.deduction == Decimal("20000")
        assert result.phase_in_fraction == Decimal("0")

    def test_deductible_se_tax_reduces_qbi(self, profile: TaxYearConfig) -> None:
        result = compute_qbi_deduction(
            _business(), Decimal("5000"), Decimal("150000"), STANDARD, FilingStatus.SINGLE, profile
        )
        assert result.qbi_adjusted == Decimal("95000")
        assert result.deduction == Decimal("19000")

    def test_sstb_above_upper_threshold(self, profile: TaxYearConfig) -> None:
        result = compute_qbi_deduction(
            _business(sstb=True), Decimal("0"), Decimal("300000"), STANDARD,
            FilingStatus.SINGLE, profile,
        )
        assert result.deduction == Decimal("0")

    def test_sstb_in_phaseout_range(self, profile: TaxYearConfig) -> None:
        # Tentative taxable income 222,300 is halfway through 197,300-247,300
        result = compute_qbi_deduction(
            _business(sstb=True), Decimal("0"), Decimal("237900"), STANDARD,
            FilingStatus.SINGLE, profile,
        )
        assert result.phase_in_fraction == Decimal("0.5")
        assert result.deduction == Decimal("10000")

    def test_non_sstb_above_upper_uses_wage_limit(self, profile: TaxYearConfig) -> None:
        result = compute_qbi_deduction(
            _business(w2_wages="30000"), Decimal("0"), Decimal("300000"), STANDARD,
            FilingStatus.SINGLE, profile,
        )
        assert result.wage_limit == Decimal("15000")
        assert result.deduction == Decimal("15000")

    def test_non_sstb_in_range_phases_in_limit(self, profile: TaxYearConfig) -> None:
        result = compute_qbi_deduction(
            _business(w2_wages="20000"), Decimal("0"), Decimal("237900"), STANDARD,
            FilingStatus.SINGLE, profile,
        )
        # 20,000 - (20,000 - 10,000) x 0.5
        assert result.deduction == Decimal("15000")

    def test_net_capital_gain_reduces_cap(self, profile: TaxYearConfig) -> None:
        result = compute_qbi_deduction(
            _business(long_term_gain="40000"), Decimal("0"), Decimal("100000"), STANDARD,
            FilingStatus.SINGLE, profile,
        )
        assert result.deduction == Decimal("8880")

    def test_no_qbi(self, profile: TaxYearConfig) -> None:
        result = compute_qbi_deduction(
            _business(qbi="-5000"), Decimal("0"), Decimal("80000"), STANDARD,
            FilingStatus.SINGLE, profile,
        )
        assert result.deduction == Decimal("0")
        assert result.taxable_income == Decimal("64400")

    def test_joint_thresholds_apply(self, profile: TaxYearConfig) -> None:
        result = compute_qbi_deduction(
            _business(sstb=True), Decimal("0"), Decimal("300000"), Decimal("31500"),
            FilingStatus.MARRIED_JOINT, profile,
        )
        assert result.deduction == Decimal("20000")


class TestWageUbiaLimit:
    def test_greater_of_two_tests(self, profile: TaxYearConfig) -> None:
        assert wage_ubia_limit(Decimal("10000"), Decimal("1000000"), profile) == Decimal("27500")
        assert wage_ubia_limit(Decimal("40000"), Decimal("0"), profile) == Decimal("20000")

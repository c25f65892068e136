"""Tests for regular tax and capital gains stacking."""

from decimal import Decimal

import pytest

from taxometer.engine.brackets import calculate_regular_tax, progressive_tax
from taxometer.tax.year_config import TAX_YEAR_2024, FilingStatus, TaxYearConfig


class TestProgressiveTax:
    """Tests for marginal bracket math."""

    def test_single_44400(self, profile: TaxYearConfig) -> None:
        result = progressive_tax(Decimal("44400"), profile.ordinary_brackets[FilingStatus.SINGLE])
        # 11,925 x 10% + 32,475 x 12%
        assert result.tax == Decimal("5089.50")
        assert result.marginal_rate == Decimal("0.12")
        assert len(result.bracket_breakdown) == 2

    def test_zero_income(self, profile: TaxYearConfig) -> None:
        result = progressive_tax(Decimal("0"), profile.ordinary_brackets[FilingStatus.SINGLE])
        assert result.tax == Decimal("0")
        assert result.marginal_rate == Decimal("0")
        assert result.bracket_breakdown == []

    def test_top_bracket(self, profile: TaxYearConfig) -> None:
        result = progressive_tax(Decimal("1000000"), profile.ordinary_brackets[FilingStatus.SINGLE])
        assert result.tax == Decimal("327020.25")
        assert result.marginal_rate == Decimal("0.37")

    def test_exactly_at_bracket_boundary(self, profile: TaxYearConfig) -> None:
        result = progressive_tax(Decimal("11925"), profile.ordinary_brackets[FilingStatus.SINGLE])
        assert result.tax == Decimal("1192.50")
        assert result.marginal_rate == Decimal("0.10")

    def test_2024_profile(self) -> None:
        result = progressive_tax(
            Decimal("45400"), TAX_YEAR_2024.ordinary_brackets[FilingStatus.SINGLE]
        )
        assert result.tax == Decimal("5216")

    @pytest.mark.parametrize("status", list(FilingStatus))
    def test_monotone_non_decreasing(self, profile: TaxYearConfig, status: FilingStatus) -> None:
        brackets = profile.ordinary_brackets[status]
        previous = Decimal("-1")
        for amount in range(0, 1_000_001, 25_000):
            tax = progressive_tax(Decimal(amount), brackets).tax
            assert tax >= previous
            previous = tax


class TestCalculateRegularTax:
    """Tests for preferential income stacked on ordinary income."""

    def test_preferential_stacking(self, profile: TaxYearConfig) -> None:
        result = calculate_regular_tax(
            Decimal("60000"), Decimal("20000"), FilingStatus.SINGLE, profile
        )
        assert result.ordinary_taxable == Decimal("40000")
        assert result.ordinary_tax == Decimal("4561.50")
        # 8,350 at 0% then 11,650 at 15%
        assert result.preferential_tax == Decimal("1747.50")
        assert result.total == Decimal("6309.00")

    def test_preferential_above_taxable_income(self, profile: TaxYearConfig) -> None:
        result = calculate_regular_tax(
            Decimal("10000"), Decimal("20000"), FilingStatus.SINGLE, profile
        )
        assert result.ordinary_taxable == Decimal("0")
        assert result.preferential_income == Decimal("10000")
        assert result.total == Decimal("0")

    def test_net_capital_loss_not_preferential(self, profile: TaxYearConfig) -> None:
        result = calculate_regular_tax(
            Decimal("50000"), Decimal("-3000"), FilingStatus.SINGLE, profile
        )
        assert result.ordinary_taxable == Decimal("50000")
        assert result.preferential_income == Decimal("0")

    def test_high_income_20_percent(self, profile: TaxYearConfig) -> None:
        result = calculate_regular_tax(
            Decimal("700000"), Decimal("100000"), FilingStatus.SINGLE, profile
        )
        # Stacking starts at 600,000, above the 15% bracket
        assert result.preferential_tax == Decimal("20000.00")

"""Tests for tax year profiles."""

from datetime import date
from decimal import Decimal

import pytest

from taxometer.tax.year_config import (
    TAX_YEAR_2024,
    TAX_YEAR_2025,
    TAX_YEAR_CONFIGS,
    FilingStatus,
    TaxYearConfig,
    get_tax_year_config,
)


class TestGetTaxYearConfig:
    """Tests for the profile registry."""

    def test_returns_registered_years(self) -> None:
        assert get_tax_year_config(2024) is TAX_YEAR_2024
        assert get_tax_year_config(2025) is TAX_YEAR_2025

    def test_unknown_year_raises_value_error(self) -> None:
        with pytest.raises(ValueError, match="No tax configuration for year 1999"):
            get_tax_year_config(1999)

    def test_registry_years_match_profiles(self) -> None:
        for year, config in TAX_YEAR_CONFIGS.items():
            assert config.tax_year == year

    def test_profile_is_frozen(self) -> None:
        with pytest.raises(AttributeError):
            TAX_YEAR_2025.ss_wage_base = Decimal("1")  # type: ignore[misc]


class TestProfileTables:
    """Every status-keyed table covers all four filing statuses."""

    @pytest.mark.parametrize("config", [TAX_YEAR_2024, TAX_YEAR_2025])
    def test_tables_cover_all_statuses(self, config: TaxYearConfig) -> None:
        for table in (
            config.ordinary_brackets,
            config.ltcg_brackets,
            config.standard_deduction,
            config.amt_exemption,
            config.amt_phaseout_start,
            config.niit_threshold,
            config.additional_medicare_threshold,
            config.ss_benefit_base1,
            config.ss_benefit_base2,
        ):
            assert set(table) == set(FilingStatus)

    @pytest.mark.parametrize("config", [TAX_YEAR_2024, TAX_YEAR_2025])
    def test_brackets_ascend_and_end_open(self, config: TaxYearConfig) -> None:
        for brackets in (*config.ordinary_brackets.values(), *config.ltcg_brackets.values()):
            limits = [limit for limit, _ in brackets[:-1]]
            assert limits == sorted(limits)
            assert brackets[-1][0] is None

    def test_2025_standard_deduction(self) -> None:
        assert TAX_YEAR_2025.standard_deduction[FilingStatus.SINGLE] == Decimal("15600")
        assert TAX_YEAR_2025.standard_deduction[FilingStatus.MARRIED_JOINT] == Decimal("31500")
        assert TAX_YEAR_2025.standard_deduction[FilingStatus.HEAD_HOUSEHOLD] == Decimal("23625")

    def test_eic_has_four_schedules(self) -> None:
        assert len(TAX_YEAR_2025.eic_schedules) == 4


class TestProfileHelpers:
    """Tests for status-dependent lookups."""

    def test_additional_deduction_by_status(self) -> None:
        assert TAX_YEAR_2025.additional_deduction_65_blind(FilingStatus.SINGLE) == Decimal("2000")
        assert TAX_YEAR_2025.additional_deduction_65_blind(FilingStatus.HEAD_HOUSEHOLD) == Decimal("2000")
        assert TAX_YEAR_2025.additional_deduction_65_blind(FilingStatus.MARRIED_JOINT) == Decimal("1600")

    def test_salt_cap_halved_for_mfs(self) -> None:
        assert TAX_YEAR_2025.salt_cap_for(FilingStatus.SINGLE) == Decimal("10000")
        assert TAX_YEAR_2025.salt_cap_for(FilingStatus.MARRIED_SEPARATE) == Decimal("5000")

    def test_mortgage_cap_grandfathered_before_cutoff(self) -> None:
        assert TAX_YEAR_2025.mortgage_debt_cap_for(date(2015, 6, 1)) == Decimal("1000000")
        assert TAX_YEAR_2025.mortgage_debt_cap_for(date(2017, 12, 16)) == Decimal("750000")
        assert TAX_YEAR_2025.mortgage_debt_cap_for(None) == Decimal("750000")

    def test_eic_schedule_caps_at_three_children(self) -> None:
        assert TAX_YEAR_2025.eic_schedule(5) is TAX_YEAR_2025.eic_schedules[3]
        assert TAX_YEAR_2025.eic_schedule(0) is TAX_YEAR_2025.eic_schedules[0]

    def test_joint_thresholds(self) -> None:
        assert TAX_YEAR_2025.ctc_phaseout_threshold(FilingStatus.MARRIED_JOINT) == Decimal("400000")
        assert TAX_YEAR_2025.ctc_phaseout_threshold(FilingStatus.SINGLE) == Decimal("200000")
        assert TAX_YEAR_2025.qbi_thresholds(FilingStatus.MARRIED_JOINT).lower == Decimal("394600")
        assert TAX_YEAR_2025.education_phaseout(FilingStatus.SINGLE).upper == Decimal("90000")
        assert TAX_YEAR_2025.student_loan_phaseout(FilingStatus.MARRIED_JOINT).upper == Decimal("195000")

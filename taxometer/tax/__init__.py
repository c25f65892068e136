"""Tax calculation utilities and year-specific configurations."""

from taxometer.tax.money import ZERO, phaseout_factor, round_money, to_decimal
from taxometer.tax.year_config import (
    TAX_YEAR_2024,
    TAX_YEAR_2025,
    TAX_YEAR_CONFIGS,
    EicSchedule,
    FilingStatus,
    PhaseoutRange,
    TaxYearConfig,
    get_tax_year_config,
)

__all__ = [
    "FilingStatus",
    "TaxYearConfig",
    "PhaseoutRange",
    "EicSchedule",
    "TAX_YEAR_2024",
    "TAX_YEAR_2025",
    "TAX_YEAR_CONFIGS",
    "get_tax_year_config",
    "ZERO",
    "to_decimal",
    "phaseout_factor",
    "round_money",
]

"""Tax year-specific constants and thresholds.

This module centralizes every tax-law figure the engine uses (brackets,
deduction amounts, phaseout ranges, credit schedules) into a single frozen
"tax year profile" that is passed into the computation explicitly.

Example:
    >>> from taxometer.tax.year_config import FilingStatus, get_tax_year_config
    >>> config = get_tax_year_config(2025)
    >>> config.standard_deduction[FilingStatus.MARRIED_JOINT]
    Decimal('31500')
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum


class FilingStatus(str, Enum):
    """Federal filing status."""

    SINGLE = "single"
    MARRIED_JOINT = "married_joint"
    MARRIED_SEPARATE = "married_separate"
    HEAD_HOUSEHOLD = "head_household"

    @property
    def is_married(self) -> bool:
        return self in (FilingStatus.MARRIED_JOINT, FilingStatus.MARRIED_SEPARATE)


# (upper_bound, rate); None for upper_bound means no limit
Brackets = tuple[tuple[Decimal | None, Decimal], ...]


@dataclass(frozen=True)
class PhaseoutRange:
    """Income range over which a benefit phases out linearly."""

    lower: Decimal
    upper: Decimal


@dataclass(frozen=True)
class EicSchedule:
    """Earned Income Credit parameters for one qualifying-child count.

    Attributes:
        rate: Credit (phase-in) rate.
        max_earned: Earned income at which the maximum credit is reached.
        phase_start_single: Phaseout start for all statuses except MFJ.
        phase_start_joint: Phaseout start for married filing jointly.
        phase_rate: Phaseout rate.
    """

    rate: Decimal
    max_earned: Decimal
    phase_start_single: Decimal
    phase_start_joint: Decimal
    phase_rate: Decimal

    def phase_start(self, status: FilingStatus) -> Decimal:
        if status == FilingStatus.MARRIED_JOINT:
            return self.phase_start_joint
        return self.phase_start_single


def _by_status(
    single: str, married_joint: str, married_separate: str, head_household: str
) -> dict[FilingStatus, Decimal]:
    return {
        FilingStatus.SINGLE: Decimal(single),
        FilingStatus.MARRIED_JOINT: Decimal(married_joint),
        FilingStatus.MARRIED_SEPARATE: Decimal(married_separate),
        FilingStatus.HEAD_HOUSEHOLD: Decimal(head_household),
    }


def _brackets(*rows: tuple[str | None, str]) -> Brackets:
    return tuple(
        (Decimal(limit) if limit is not None else None, Decimal(rate))
        for limit, rate in rows
    )


@dataclass(frozen=True)
class TaxYearConfig:
    """Tax year-specific constants and thresholds.

    All monetary values are Decimal for precision in tax calculations.
    This dataclass is frozen to prevent accidental modification. Tables keyed
    by ``FilingStatus`` cover all four statuses; figures the law only splits
    as "married filing jointly vs. everyone else" are stored as a pair and
    resolved through the helper methods.

    Attributes:
        tax_year: The tax year these values apply to.
        ordinary_brackets: Marginal brackets per filing status.
        ltcg_brackets: 0%/15%/20% capital gains brackets per filing status.
        standard_deduction: Base standard deduction per filing status.
        ss_wage_base: Social Security wage base limit.
        amt_exemption: AMT exemption per filing status.
        eic_schedules: EIC schedules for 0, 1, 2 and 3+ qualifying children.
    """

    tax_year: int

    # Ordinary income and capital gains brackets
    ordinary_brackets: dict[FilingStatus, Brackets]
    ltcg_brackets: dict[FilingStatus, Brackets]

    # Standard deductions
    standard_deduction: dict[FilingStatus, Decimal]
    additional_deduction_unmarried: Decimal
    additional_deduction_married: Decimal

    # Social Security / Medicare
    ss_wage_base: Decimal
    ss_rate_employee: Decimal = Decimal("0.062")
    medicare_rate: Decimal = Decimal("0.0145")

    # Self-employment tax (combined employer + employee rates)
    se_ss_rate: Decimal = Decimal("0.124")  # 12.4% (6.2% x 2)
    se_medicare_rate: Decimal = Decimal("0.029")  # 2.9% (1.45% x 2)
    se_net_earnings_factor: Decimal = Decimal("0.9235")  # 92.35% of net SE income
    se_minimum_net_earnings: Decimal = Decimal("400")
    se_tax_deduction_rate: Decimal = Decimal("0.5")

    # HSA contribution limits
    hsa_limit_self: Decimal = Decimal("0")
    hsa_limit_family: Decimal = Decimal("0")
    hsa_catchup: Decimal = Decimal("1000")

    # Student loan interest
    student_loan_cap: Decimal = Decimal("2500")
    student_loan_phaseout_single: PhaseoutRange = PhaseoutRange(
        Decimal("80000"), Decimal("95000")
    )
    student_loan_phaseout_mfj: PhaseoutRange = PhaseoutRange(
        Decimal("165000"), Decimal("195000")
    )

    # Itemized deductions
    salt_cap: Decimal = Decimal("10000")
    salt_cap_mfs: Decimal = Decimal("5000")
    mortgage_debt_cap: Decimal = Decimal("750000")
    mortgage_debt_cap_grandfathered: Decimal = Decimal("1000000")
    mortgage_grandfather_date: date = date(2017, 12, 16)
    medical_agi_floor_rate: Decimal = Decimal("0.075")

    # Taxable Social Security benefits (provisional income bases)
    ss_benefit_base1: dict[FilingStatus, Decimal] = field(
        default_factory=lambda: _by_status("25000", "32000", "0", "25000")
    )
    ss_benefit_base2: dict[FilingStatus, Decimal] = field(
        default_factory=lambda: _by_status("34000", "44000", "0", "34000")
    )

    # Passive Activity Loss limits
    pal_allowance: Decimal = Decimal("25000")
    pal_phaseout_start: Decimal = Decimal("100000")
    pal_phaseout_rate: Decimal = Decimal("0.5")

    # QBI (Qualified Business Income) deduction
    qbi_rate: Decimal = Decimal("0.20")
    qbi_threshold_single: PhaseoutRange = PhaseoutRange(Decimal("0"), Decimal("0"))
    qbi_threshold_mfj: PhaseoutRange = PhaseoutRange(Decimal("0"), Decimal("0"))
    qbi_wage_limit_rate: Decimal = Decimal("0.50")
    qbi_wage_ubia_wage_rate: Decimal = Decimal("0.25")
    qbi_ubia_rate: Decimal = Decimal("0.025")

    # Alternative Minimum Tax
    amt_exemption: dict[FilingStatus, Decimal] = field(default_factory=dict)
    amt_phaseout_start: dict[FilingStatus, Decimal] = field(default_factory=dict)
    amt_phaseout_rate: Decimal = Decimal("0.25")
    amt_bracket_boundary: Decimal = Decimal("0")
    amt_rate_low: Decimal = Decimal("0.26")
    amt_rate_high: Decimal = Decimal("0.28")

    # Earned Income Credit, indexed by qualifying children (0, 1, 2, 3+)
    eic_investment_income_limit: Decimal = Decimal("0")
    eic_schedules: tuple[EicSchedule, ...] = ()

    # Child Tax Credit
    ctc_per_child: Decimal = Decimal("2000")
    ctc_phaseout_single: Decimal = Decimal("200000")
    ctc_phaseout_mfj: Decimal = Decimal("400000")
    ctc_phaseout_step: Decimal = Decimal("1000")
    ctc_phaseout_per_step: Decimal = Decimal("50")  # $50 per $1,000 over threshold
    actc_max_per_child: Decimal = Decimal("1700")
    actc_rate: Decimal = Decimal("0.15")
    actc_earned_income_floor: Decimal = Decimal("2500")
    ctc_age_limit: int = 17

    # Education credits
    aotc_full_rate_expenses: Decimal = Decimal("2000")
    aotc_max_expenses: Decimal = Decimal("4000")
    aotc_second_tier_rate: Decimal = Decimal("0.25")
    aotc_refundable_rate: Decimal = Decimal("0.40")
    aotc_refundable_cap: Decimal = Decimal("1000")
    education_phaseout_single: PhaseoutRange = PhaseoutRange(
        Decimal("80000"), Decimal("90000")
    )
    education_phaseout_mfj: PhaseoutRange = PhaseoutRange(
        Decimal("160000"), Decimal("180000")
    )
    llc_rate: Decimal = Decimal("0.20")
    llc_max_expenses: Decimal = Decimal("10000")

    # Net Investment Income Tax and Additional Medicare Tax
    niit_rate: Decimal = Decimal("0.038")
    niit_threshold: dict[FilingStatus, Decimal] = field(
        default_factory=lambda: _by_status("200000", "250000", "125000", "200000")
    )
    additional_medicare_rate: Decimal = Decimal("0.009")
    additional_medicare_threshold: dict[FilingStatus, Decimal] = field(
        default_factory=lambda: _by_status("200000", "250000", "125000", "200000")
    )

    def additional_deduction_65_blind(self, status: FilingStatus) -> Decimal:
        """Per-flag add-on for age 65+ or blindness."""
        if status in (FilingStatus.SINGLE, FilingStatus.HEAD_HOUSEHOLD):
            return self.additional_deduction_unmarried
        return self.additional_deduction_married

    def student_loan_phaseout(self, status: FilingStatus) -> PhaseoutRange:
        if status == FilingStatus.MARRIED_JOINT:
            return self.student_loan_phaseout_mfj
        return self.student_loan_phaseout_single

    def education_phaseout(self, status: FilingStatus) -> PhaseoutRange:
        if status == FilingStatus.MARRIED_JOINT:
            return self.education_phaseout_mfj
        return self.education_phaseout_single

    def qbi_thresholds(self, status: FilingStatus) -> PhaseoutRange:
        if status == FilingStatus.MARRIED_JOINT:
            return self.qbi_threshold_mfj
        return self.qbi_threshold_single

    def ctc_phaseout_threshold(self, status: FilingStatus) -> Decimal:
        if status == FilingStatus.MARRIED_JOINT:
            return self.ctc_phaseout_mfj
        return self.ctc_phaseout_single

    def salt_cap_for(self, status: FilingStatus) -> Decimal:
        if status == FilingStatus.MARRIED_SEPARATE:
            return self.salt_cap_mfs
        return self.salt_cap

    def mortgage_debt_cap_for(self, origination_date: date | None) -> Decimal:
        """Acquisition debt cap; loans before 2017-12-16 keep the $1M limit."""
        if origination_date is not None and origination_date < self.mortgage_grandfather_date:
            return self.mortgage_debt_cap_grandfathered
        return self.mortgage_debt_cap

    def eic_schedule(self, qualifying_children: int) -> EicSchedule:
        index = min(max(qualifying_children, 0), len(self.eic_schedules) - 1)
        return self.eic_schedules[index]


# 2024 Configuration - IRS published values (Rev. Proc. 2023-34)
TAX_YEAR_2024 = TaxYearConfig(
    tax_year=2024,
    ordinary_brackets={
        FilingStatus.SINGLE: _brackets(
            ("11600", "0.10"),
            ("47150", "0.12"),
            ("100525", "0.22"),
            ("191950", "0.24"),
            ("243725", "0.32"),
            ("609350", "0.35"),
            (None, "0.37"),
        ),
        FilingStatus.MARRIED_JOINT: _brackets(
            ("23200", "0.10"),
            ("94300", "0.12"),
            ("201050", "0.22"),
            ("383900", "0.24"),
            ("487450", "0.32"),
            ("731200", "0.35"),
            (None, "0.37"),
        ),
        FilingStatus.MARRIED_SEPARATE: _brackets(
            ("11600", "0.10"),
            ("47150", "0.12"),
            ("100525", "0.22"),
            ("191950", "0.24"),
            ("243725", "0.32"),
            ("365600", "0.35"),
            (None, "0.37"),
        ),
        FilingStatus.HEAD_HOUSEHOLD: _brackets(
            ("16550", "0.10"),
            ("63100", "0.12"),
            ("100500", "0.22"),
            ("191950", "0.24"),
            ("243700", "0.32"),
            ("609350", "0.35"),
            (None, "0.37"),
        ),
    },
    ltcg_brackets={
        FilingStatus.SINGLE: _brackets(("47025", "0"), ("518900", "0.15"), (None, "0.20")),
        FilingStatus.MARRIED_JOINT: _brackets(("94050", "0"), ("583750", "0.15"), (None, "0.20")),
        FilingStatus.MARRIED_SEPARATE: _brackets(("47025", "0"), ("291850", "0.15"), (None, "0.20")),
        FilingStatus.HEAD_HOUSEHOLD: _brackets(("63000", "0"), ("551350", "0.15"), (None, "0.20")),
    },
    standard_deduction=_by_status("14600", "29200", "14600", "21900"),
    additional_deduction_unmarried=Decimal("1950"),
    additional_deduction_married=Decimal("1550"),
    ss_wage_base=Decimal("168600"),
    hsa_limit_self=Decimal("4150"),
    hsa_limit_family=Decimal("8300"),
    qbi_threshold_single=PhaseoutRange(Decimal("191950"), Decimal("241950")),
    qbi_threshold_mfj=PhaseoutRange(Decimal("383900"), Decimal("483900")),
    amt_exemption=_by_status("85700", "133300", "66650", "85700"),
    amt_phaseout_start=_by_status("609350", "1218700", "609350", "609350"),
    amt_bracket_boundary=Decimal("232600"),
    eic_investment_income_limit=Decimal("11600"),
    eic_schedules=(
        EicSchedule(Decimal("0.0765"), Decimal("8260"), Decimal("10330"), Decimal("17250"), Decimal("0.0765")),
        EicSchedule(Decimal("0.34"), Decimal("12390"), Decimal("22720"), Decimal("29640"), Decimal("0.1598")),
        EicSchedule(Decimal("0.40"), Decimal("17400"), Decimal("22720"), Decimal("29640"), Decimal("0.2106")),
        EicSchedule(Decimal("0.45"), Decimal("17400"), Decimal("22720"), Decimal("29640"), Decimal("0.2106")),
    ),
)

# 2025 Configuration - Rev. Proc. 2024-40 with 2025 legislative updates
TAX_YEAR_2025 = TaxYearConfig(
    tax_year=2025,
    ordinary_brackets={
        FilingStatus.SINGLE: _brackets(
            ("11925", "0.10"),
            ("48475", "0.12"),
            ("103350", "0.22"),
            ("197300", "0.24"),
            ("250525", "0.32"),
            ("626350", "0.35"),
            (None, "0.37"),
        ),
        FilingStatus.MARRIED_JOINT: _brackets(
            ("23850", "0.10"),
            ("96950", "0.12"),
            ("206700", "0.22"),
            ("394600", "0.24"),
            ("501050", "0.32"),
            ("751600", "0.35"),
            (None, "0.37"),
        ),
        FilingStatus.MARRIED_SEPARATE: _brackets(
            ("11925", "0.10"),
            ("48475", "0.12"),
            ("103350", "0.22"),
            ("197300", "0.24"),
            ("250525", "0.32"),
            ("375800", "0.35"),
            (None, "0.37"),
        ),
        FilingStatus.HEAD_HOUSEHOLD: _brackets(
            ("17000", "0.10"),
            ("64850", "0.12"),
            ("103350", "0.22"),
            ("197300", "0.24"),
            ("250500", "0.32"),
            ("626350", "0.35"),
            (None, "0.37"),
        ),
    },
    ltcg_brackets={
        FilingStatus.SINGLE: _brackets(("48350", "0"), ("533400", "0.15"), (None, "0.20")),
        FilingStatus.MARRIED_JOINT: _brackets(("96700", "0"), ("600050", "0.15"), (None, "0.20")),
        FilingStatus.MARRIED_SEPARATE: _brackets(("48350", "0"), ("300025", "0.15"), (None, "0.20")),
        FilingStatus.HEAD_HOUSEHOLD: _brackets(("64750", "0"), ("566700", "0.15"), (None, "0.20")),
    },
    standard_deduction=_by_status("15600", "31500", "15600", "23625"),
    additional_deduction_unmarried=Decimal("2000"),
    additional_deduction_married=Decimal("1600"),
    ss_wage_base=Decimal("176100"),
    hsa_limit_self=Decimal("4300"),
    hsa_limit_family=Decimal("8550"),
    qbi_threshold_single=PhaseoutRange(Decimal("197300"), Decimal("247300")),
    qbi_threshold_mfj=PhaseoutRange(Decimal("394600"), Decimal("494600")),
    amt_exemption=_by_status("88100", "137000", "68500", "88100"),
    amt_phaseout_start=_by_status("626350", "1252700", "626350", "626350"),
    amt_bracket_boundary=Decimal("232600"),
    eic_investment_income_limit=Decimal("11950"),
    eic_schedules=(
        EicSchedule(Decimal("0.0765"), Decimal("8490"), Decimal("10620"), Decimal("18120"), Decimal("0.0765")),
        EicSchedule(Decimal("0.34"), Decimal("12870"), Decimal("23450"), Decimal("30940"), Decimal("0.1598")),
        EicSchedule(Decimal("0.40"), Decimal("18060"), Decimal("23450"), Decimal("30940"), Decimal("0.2106")),
        EicSchedule(Decimal("0.45"), Decimal("18060"), Decimal("23450"), Decimal("30940"), Decimal("0.2106")),
    ),
)

# Registry of available tax year configurations
TAX_YEAR_CONFIGS: dict[int, TaxYearConfig] = {
    2024: TAX_YEAR_2024,
    2025: TAX_YEAR_2025,
}


def get_tax_year_config(year: int) -> TaxYearConfig:
    """Get configuration for a specific tax year.

    Args:
        year: The tax year (e.g., 2025).

    Returns:
        TaxYearConfig for the specified year.

    Raises:
        ValueError: If no configuration exists for the requested year.

    Example:
        >>> config = get_tax_year_config(2025)
        >>> print(config.ss_wage_base)
        176100
    """
    if year not in TAX_YEAR_CONFIGS:
        available = sorted(TAX_YEAR_CONFIGS.keys())
        raise ValueError(
            f"No tax configuration for year {year}. Available years: {available}"
        )
    return TAX_YEAR_CONFIGS[year]

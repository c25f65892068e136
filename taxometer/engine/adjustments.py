"""Above-the-line adjustments.

- Deductible half of self-employment tax
- HSA contribution deduction, prorated by eligible months
- Student loan interest, phased out by a MAGI proxy
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from taxometer.engine.income import IncomeSummary
from taxometer.engine.models import (
    DeductionItem,
    HsaContribution,
    StudentLoanInterest,
    TaxPayer,
)
from taxometer.engine.results import AlertSeverity, ComplianceAlert
from taxometer.tax.money import ZERO, phaseout_factor
from taxometer.tax.year_config import TaxYearConfig

MONTHS_PER_YEAR = Decimal("12")


@dataclass
class SelfEmploymentTax:
    """Schedule SE result.

    Attributes:
        net_earnings: 92.35% of business net income.
        social_security_tax: 12.4% portion, limited by the remaining wage base.
        medicare_tax: 2.9% portion, uncapped.
        deductible_portion: Half of the total, taken as an adjustment.
    """

    net_earnings: Decimal
    social_security_tax: Decimal = ZERO
    medicare_tax: Decimal = ZERO
    deductible_portion: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.social_security_tax + self.medicare_tax


@dataclass
class AdjustmentResult:
    """Above-the-line adjustments and the figures later stages reuse."""

    self_employment: SelfEmploymentTax
    hsa_deduction: Decimal
    student_loan_deduction: Decimal
    magi_student_loan: Decimal

    @property
    def deductible_se_tax(self) -> Decimal:
        return self.self_employment.deductible_portion

    @property
    def total(self) -> Decimal:
        return self.deductible_se_tax + self.hsa_deduction + self.student_loan_deduction


def calculate_self_employment_tax(
    business_net_income: Decimal, ss_wages: Decimal, config: TaxYearConfig
) -> SelfEmploymentTax:
    """Compute SE tax on business net income.

    The Social Security portion only applies to the wage base not already
    used up by W-2 Social Security wages (box 3).

    Example:
        >>> se = calculate_self_employment_tax(Decimal("50000"), Decimal("0"), TAX_YEAR_2025)
        >>> se.total
        Decimal('7064.7750000')
    """
    net_earnings = business_net_income * config.se_net_earnings_factor
    if net_earnings <= config.se_minimum_net_earnings:
        return SelfEmploymentTax(net_earnings=net_earnings)

    wage_base_remaining = max(ZERO, config.ss_wage_base - ss_wages)
    ss_taxable = min(net_earnings, wage_base_remaining)
    social_security_tax = ss_taxable * config.se_ss_rate
    medicare_tax = net_earnings * config.se_medicare_rate

    return SelfEmploymentTax(
        net_earnings=net_earnings,
        social_security_tax=social_security_tax,
        medicare_tax=medicare_tax,
        deductible_portion=(social_security_tax + medicare_tax) * config.se_tax_deduction_rate,
    )


def calculate_hsa_deduction(
    contributions: Sequence[HsaContribution],
    payer: TaxPayer,
    config: TaxYearConfig,
    alerts: list[ComplianceAlert],
) -> Decimal:
    """Sum HSA contributions, each capped at its prorated limit."""
    deduction = ZERO
    for contribution in contributions:
        annual_limit = (
            config.hsa_limit_family if contribution.coverage == "family" else config.hsa_limit_self
        )
        months = contribution.eligible_months
        if months < 12:
            alerts.append(
                ComplianceAlert(
                    code="HSA_PRORATION",
                    severity=AlertSeverity.INFO,
                    message="HSA limit prorated by eligible months.",
                    form_source="Form 8889",
                )
            )

        allowed = annual_limit * months / MONTHS_PER_YEAR
        if payer.is_over_65:
            allowed += config.hsa_catchup

        deduction += min(contribution.amount, allowed)
        if contribution.amount > allowed:
            alerts.append(
                ComplianceAlert(
                    code="HSA_EXCESS",
                    severity=AlertSeverity.WARNING,
                    message="HSA Excess contribution detected.",
                    form_source="Form 8889",
                )
            )
    return deduction


def compute_adjustments(
    summary: IncomeSummary,
    payer: TaxPayer,
    deductions: Sequence[DeductionItem],
    config: TaxYearConfig,
    alerts: list[ComplianceAlert],
) -> AdjustmentResult:
    """Compute all above-the-line adjustments.

    Args:
        summary: Classified income totals.
        payer: Taxpayer (age drives the HSA catch-up; status the phaseouts).
        deductions: All deduction records; only HSA and student loan are read.
        config: Tax year profile.
        alerts: Alert list to append to.

    Returns:
        AdjustmentResult with each adjustment and the student loan MAGI.
    """
    self_employment = calculate_self_employment_tax(
        summary.business_net_income, summary.ss_wages, config
    )

    hsa_deduction = calculate_hsa_deduction(
        [d for d in deductions if isinstance(d, HsaContribution)], payer, config, alerts
    )

    magi_student_loan = (
        summary.core_income
        + summary.passive_income
        + self_employment.deductible_portion
        + hsa_deduction
    )
    phaseout = config.student_loan_phaseout(payer.filing_status)
    factor = phaseout_factor(magi_student_loan, phaseout.lower, phaseout.upper)

    student_loan_deduction = ZERO
    for item in deductions:
        if isinstance(item, StudentLoanInterest):
            student_loan_deduction += min(item.amount, config.student_loan_cap) * factor

    return AdjustmentResult(
        self_employment=self_employment,
        hsa_deduction=hsa_deduction,
        student_loan_deduction=student_loan_deduction,
        magi_student_loan=magi_student_loan,
    )

"""Qualified Business Income deduction (Section 199A).

Below the lower threshold the deduction is a flat 20% of QBI. Between the
lower and upper thresholds SSTB income is phased out and non-SSTB income is
phased into the W-2 wage / UBIA limitation. Above the upper threshold SSTB
income gets nothing and non-SSTB income is fully limited. The result is then
capped at 20% of taxable income before QBI less net capital gain.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from taxometer.engine.income import IncomeSummary
from taxometer.tax.money import ONE, ZERO
from taxometer.tax.year_config import FilingStatus, TaxYearConfig


@dataclass
class QBIResult:
    """QBI deduction and the figures it was derived from.

    Attributes:
        qbi_adjusted: QBI less the deductible SE tax.
        tentative_taxable_income: AGI minus the selected deduction, floored at 0.
        phase_in_fraction: 0 below the lower threshold, 1 at/above the upper.
        wage_limit: Greater of the wage and the wage-plus-UBIA limitation.
        deduction: Final QBI deduction.
        taxable_income: Tentative taxable income minus the deduction.
    """

    qbi_adjusted: Decimal
    tentative_taxable_income: Decimal
    phase_in_fraction: Decimal = ZERO
    wage_limit: Decimal = ZERO
    deduction: Decimal = ZERO

    @property
    def taxable_income(self) -> Decimal:
        return max(ZERO, self.tentative_taxable_income - self.deduction)


def wage_ubia_limit(w2_wages: Decimal, ubia: Decimal, config: TaxYearConfig) -> Decimal:
    """Greater of 50% of W-2 wages or 25% of W-2 wages plus 2.5% of UBIA."""
    wage_only = w2_wages * config.qbi_wage_limit_rate
    wage_and_ubia = w2_wages * config.qbi_wage_ubia_wage_rate + ubia * config.qbi_ubia_rate
    return max(wage_only, wage_and_ubia)


def compute_qbi_deduction(
    summary: IncomeSummary,
    deductible_se_tax: Decimal,
    agi: Decimal,
    deduction_used: Decimal,
    status: FilingStatus,
    config: TaxYearConfig,
) -> QBIResult:
    """Compute the Section 199A deduction.

    Args:
        summary: Classified income totals (QBI income, wages, UBIA, SSTB flag).
        deductible_se_tax: Deductible half of SE tax.
        agi: Adjusted Gross Income.
        deduction_used: Selected standard or itemized deduction.
        status: Filing status.
        config: Tax year profile.

    Returns:
        QBIResult; ``deduction`` is zero when QBI is not positive.
    """
    qbi_adjusted = summary.qbi_income - deductible_se_tax
    tentative = max(ZERO, agi - deduction_used)
    result = QBIResult(qbi_adjusted=qbi_adjusted, tentative_taxable_income=tentative)
    if qbi_adjusted <= ZERO:
        return result

    thresholds = config.qbi_thresholds(status)
    over_threshold = max(ZERO, tentative - thresholds.lower)
    fraction = min(ONE, over_threshold / (thresholds.upper - thresholds.lower))
    result.phase_in_fraction = fraction

    amount = qbi_adjusted * config.qbi_rate
    above_lower = tentative > thresholds.lower
    above_upper = tentative > thresholds.upper

    if summary.has_sstb:
        if above_upper:
            amount = ZERO
        elif above_lower:
            amount = amount * (ONE - fraction)
    elif above_lower:
        limit = wage_ubia_limit(summary.qbi_w2_wages, summary.qbi_ubia, config)
        result.wage_limit = limit
        if above_upper:
            amount = min(amount, limit)
        else:
            amount -= max(ZERO, amount - limit) * fraction

    net_capital_gain = max(ZERO, summary.preferential_income)
    overall_limit = max(ZERO, (tentative - net_capital_gain) * config.qbi_rate)
    result.deduction = min(amount, overall_limit)
    return result

"""Net Investment Income Tax and Additional Medicare Tax."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from taxometer.engine.adjustments import SelfEmploymentTax
from taxometer.engine.income import IncomeSummary
from taxometer.engine.passive import PassiveLossResult
from taxometer.tax.money import ZERO
from taxometer.tax.year_config import FilingStatus, TaxYearConfig


@dataclass
class SurtaxResult:
    """NIIT and Additional Medicare Tax.

    Attributes:
        magi_niit: AGI plus tax-exempt interest.
        net_investment_income: NII, computed only when MAGI exceeds the threshold.
        niit: 3.8% Net Investment Income Tax.
        medicare_surtax: 0.9% Additional Medicare Tax.
    """

    magi_niit: Decimal
    net_investment_income: Decimal = ZERO
    niit: Decimal = ZERO
    medicare_surtax: Decimal = ZERO


def net_investment_income(summary: IncomeSummary, passive: PassiveLossResult) -> Decimal:
    """Net passive income plus taxable interest, dividends and capital gains."""
    return (
        summary.passive_income
        - passive.allowed_loss
        + summary.taxable_interest
        + summary.total_dividends
        + summary.capital_gains
    )


def calculate_surtaxes(
    summary: IncomeSummary,
    passive: PassiveLossResult,
    self_employment: SelfEmploymentTax,
    agi: Decimal,
    status: FilingStatus,
    config: TaxYearConfig,
) -> SurtaxResult:
    """Compute NIIT (Form 8960) and Additional Medicare Tax (Form 8959).

    Example:
        >>> summary = IncomeSummary(wages=Decimal("250000"), medicare_wages=Decimal("250000"))
        >>> se = SelfEmploymentTax(net_earnings=Decimal("0"))
        >>> calculate_surtaxes(summary, PassiveLossResult(), se, Decimal("250000"),
        ...                    FilingStatus.SINGLE, TAX_YEAR_2025).medicare_surtax
        Decimal('450.000')
    """
    magi = agi + summary.tax_exempt_interest
    result = SurtaxResult(magi_niit=magi)

    threshold = config.niit_threshold[status]
    if magi > threshold:
        nii = net_investment_income(summary, passive)
        result.net_investment_income = nii
        result.niit = max(ZERO, min(nii, magi - threshold) * config.niit_rate)

    medicare_base = summary.medicare_wages + self_employment.net_earnings
    excess = max(ZERO, medicare_base - config.additional_medicare_threshold[status])
    result.medicare_surtax = excess * config.additional_medicare_rate
    return result

"""Alternative Minimum Tax (Form 6251)."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from taxometer.engine.brackets import RegularTaxResult
from taxometer.engine.deductions import DeductionResult
from taxometer.tax.money import ZERO
from taxometer.tax.year_config import FilingStatus, TaxYearConfig


@dataclass
class AMTResult:
    """AMT computation details.

    Attributes:
        amti: Alternative Minimum Taxable Income.
        exemption: Exemption after the 25% phaseout.
        amt_base: AMTI less exemption.
        tentative_minimum_tax: 26%/28% tax on the ordinary part plus
            preferential-rate tax.
        amt: Excess of tentative minimum tax over regular tax.
    """

    amti: Decimal
    exemption: Decimal
    amt_base: Decimal
    tentative_minimum_tax: Decimal
    amt: Decimal


def amt_addback(deduction: DeductionResult, config: TaxYearConfig, status: FilingStatus) -> Decimal:
    """Deduction amount disallowed for AMT.

    The standard deduction is added back in full; for itemizers only the
    capped SALT deduction comes back.
    """
    if deduction.method == "standard":
        return deduction.standard_amount
    return min(deduction.itemized.salt_total, config.salt_cap_for(status))


def calculate_amt(
    taxable_income: Decimal,
    deduction: DeductionResult,
    iso_bargain_element: Decimal,
    regular: RegularTaxResult,
    status: FilingStatus,
    config: TaxYearConfig,
) -> AMTResult:
    """Compute AMT owed on top of regular tax.

    Args:
        taxable_income: Regular taxable income.
        deduction: Deduction selection (for the addback).
        iso_bargain_element: ISO exercise preference item.
        regular: Regular tax result; its preferential tax carries over.
        status: Filing status.
        config: Tax year profile.

    Returns:
        AMTResult; ``amt`` is never negative.
    """
    amti = taxable_income + amt_addback(deduction, config, status) + iso_bargain_element

    exemption_base = config.amt_exemption[status]
    excess = max(ZERO, amti - config.amt_phaseout_start[status])
    exemption = max(ZERO, exemption_base - excess * config.amt_phaseout_rate)
    amt_base = max(ZERO, amti - exemption)

    amt_ordinary = max(ZERO, amt_base - regular.preferential_income)
    boundary = config.amt_bracket_boundary
    if amt_ordinary <= boundary:
        ordinary_tax = amt_ordinary * config.amt_rate_low
    else:
        ordinary_tax = boundary * config.amt_rate_low + (amt_ordinary - boundary) * config.amt_rate_high

    tentative = ordinary_tax + regular.preferential_tax
    return AMTResult(
        amti=amti,
        exemption=exemption,
        amt_base=amt_base,
        tentative_minimum_tax=tentative,
        amt=max(ZERO, tentative - regular.total),
    )

"""Regular income tax using marginal brackets.

Ordinary income is taxed through the ordinary brackets first. Preferential
income (long-term gains and qualified dividends) is then stacked on top of
ordinary taxable income and taxed through the capital gains brackets.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from taxometer.tax.money import ZERO
from taxometer.tax.year_config import Brackets, FilingStatus, TaxYearConfig


@dataclass
class BracketTax:
    """Tax from one pass through a bracket table.

    Attributes:
        tax: Total tax.
        marginal_rate: Rate of the highest bracket reached.
        bracket_breakdown: List of dicts with bracket, rate, and tax_in_bracket.
    """

    tax: Decimal
    marginal_rate: Decimal
    bracket_breakdown: list[dict] = field(default_factory=list)


@dataclass
class RegularTaxResult:
    """Regular tax on ordinary and preferential income."""

    ordinary_taxable: Decimal
    preferential_income: Decimal
    ordinary_tax: Decimal
    preferential_tax: Decimal
    marginal_rate: Decimal
    bracket_breakdown: list[dict] = field(default_factory=list)

    @property
    def total(self) -> Decimal:
        return self.ordinary_tax + self.preferential_tax


def progressive_tax(taxable_income: Decimal, brackets: Brackets) -> BracketTax:
    """Calculate tax using marginal brackets.

    Args:
        taxable_income: Amount to tax.
        brackets: (upper_bound, rate) pairs; None marks the open top bracket.

    Returns:
        BracketTax with tax, marginal rate and per-bracket breakdown.

    Example:
        >>> progressive_tax(Decimal("44400"), TAX_YEAR_2025.ordinary_brackets[FilingStatus.SINGLE]).tax
        Decimal('5089.50')
    """
    tax = ZERO
    marginal_rate = ZERO
    previous_limit = ZERO
    breakdown: list[dict] = []

    for upper_bound, rate in brackets:
        if taxable_income <= previous_limit:
            break

        top = taxable_income if upper_bound is None else min(taxable_income, upper_bound)
        in_bracket = top - previous_limit
        tax_in_bracket = in_bracket * rate
        tax += tax_in_bracket
        marginal_rate = rate
        breakdown.append(
            {"bracket": upper_bound, "rate": rate, "tax_in_bracket": tax_in_bracket}
        )

        if upper_bound is None:
            break
        previous_limit = upper_bound

    return BracketTax(tax=tax, marginal_rate=marginal_rate, bracket_breakdown=breakdown)


def stacked_preferential_tax(
    preferential_income: Decimal, ordinary_taxable: Decimal, brackets: Brackets
) -> Decimal:
    """Tax preferential income stacked on top of ordinary taxable income.

    Each capital gains bracket only has room above the current stacking
    position, which starts at ordinary taxable income.
    """
    tax = ZERO
    remaining = preferential_income
    position = ordinary_taxable

    for upper_bound, rate in brackets:
        if remaining <= ZERO:
            break
        if upper_bound is None:
            space = remaining
        else:
            space = max(ZERO, upper_bound - position)
        taxed_here = min(remaining, space)
        tax += taxed_here * rate
        remaining -= taxed_here
        position += taxed_here

    return tax


def calculate_regular_tax(
    taxable_income: Decimal,
    preferential_income: Decimal,
    status: FilingStatus,
    config: TaxYearConfig,
) -> RegularTaxResult:
    """Calculate regular tax with preferential-rate stacking.

    Args:
        taxable_income: Taxable income after all deductions.
        preferential_income: Long-term gain plus qualified dividends.
        status: Filing status.
        config: Tax year profile.

    Returns:
        RegularTaxResult with ordinary and preferential components.
    """
    preferential = max(ZERO, min(preferential_income, taxable_income))
    ordinary_taxable = max(ZERO, taxable_income - preferential)
    ordinary = progressive_tax(ordinary_taxable, config.ordinary_brackets[status])
    preferential_tax = stacked_preferential_tax(
        preferential, ordinary_taxable, config.ltcg_brackets[status]
    )

    return RegularTaxResult(
        ordinary_taxable=ordinary_taxable,
        preferential_income=preferential,
        ordinary_tax=ordinary.tax,
        preferential_tax=preferential_tax,
        marginal_rate=ordinary.marginal_rate,
        bracket_breakdown=ordinary.bracket_breakdown,
    )

"""Gross income, AGI and deduction selection.

- Taxable Social Security benefits (provisional income two-tier formula)
- Gross income and AGI
- Itemized deductions (mortgage debt cap, SALT cap, charity, medical floor)
- Standard deduction with age 65 / blindness add-ons
- Standard vs. itemized selection
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from taxometer.engine.income import IncomeSummary
from taxometer.engine.models import (
    CharitableContribution,
    DeductionItem,
    MedicalExpense,
    MortgageInterest,
    StateLocalTax,
    TaxPayer,
)
from taxometer.engine.passive import PassiveLossResult
from taxometer.engine.results import AlertSeverity, ComplianceAlert
from taxometer.tax.money import ZERO
from taxometer.tax.year_config import FilingStatus, TaxYearConfig

HALF = Decimal("0.5")
EIGHTY_FIVE_PERCENT = Decimal("0.85")


@dataclass
class ItemizedDeductionBreakdown:
    """Breakdown of itemized deduction components.

    Attributes:
        mortgage_interest: Mortgage interest after the acquisition debt cap.
        charitable_cash: Cash charitable contributions.
        medical: Medical expenses above the AGI floor.
        salt_total: State/local income and property taxes before the cap.
        salt_deducted: SALT after the cap.
    """

    mortgage_interest: Decimal = ZERO
    charitable_cash: Decimal = ZERO
    medical: Decimal = ZERO
    salt_total: Decimal = ZERO
    salt_deducted: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.mortgage_interest + self.charitable_cash + self.medical + self.salt_deducted


@dataclass
class DeductionResult:
    """Result of income totals and deduction selection.

    Attributes:
        method: Either "standard" or "itemized".
        amount: The deduction amount to use.
        standard_amount: Standard deduction including add-ons.
        itemized: Itemized deduction breakdown.
        taxable_ss_benefits: Taxable portion of Social Security benefits.
        gross_income: Total income including taxable Social Security.
        agi: Gross income minus adjustments, floored at zero.
    """

    method: str
    amount: Decimal
    standard_amount: Decimal
    itemized: ItemizedDeductionBreakdown
    taxable_ss_benefits: Decimal
    gross_income: Decimal
    agi: Decimal

    @property
    def itemized_amount(self) -> Decimal:
        return self.itemized.total


def taxable_social_security(
    benefits: Decimal,
    other_income: Decimal,
    tax_exempt_interest: Decimal,
    status: FilingStatus,
    config: TaxYearConfig,
) -> Decimal:
    """Taxable portion of Social Security benefits.

    Provisional income is other income plus tax-exempt interest plus half of
    the benefits. Up to 50% of benefits are taxable between the two base
    amounts and up to 85% above the second base.

    Args:
        benefits: Gross Social Security benefits.
        other_income: Income before Social Security.
        tax_exempt_interest: Municipal bond interest.
        status: Filing status.
        config: Tax year profile.

    Returns:
        Taxable benefit amount.
    """
    if benefits == ZERO:
        return ZERO

    base1 = config.ss_benefit_base1[status]
    base2 = config.ss_benefit_base2[status]
    provisional_income = other_income + tax_exempt_interest + HALF * benefits

    if provisional_income <= base1:
        return ZERO
    if provisional_income <= base2:
        return min(HALF * benefits, HALF * (provisional_income - base1))

    first_tier = min(HALF * benefits, HALF * (base2 - base1))
    return min(
        EIGHTY_FIVE_PERCENT * benefits,
        EIGHTY_FIVE_PERCENT * (provisional_income - base2) + first_tier,
    )


def get_standard_deduction(payer: TaxPayer, config: TaxYearConfig) -> Decimal:
    """Standard deduction with one add-on per age 65+ or blindness flag.

    Spouse flags only count for the married statuses.

    Example:
        >>> get_standard_deduction(TaxPayer(filing_status="single"), TAX_YEAR_2025)
        Decimal('15600')
    """
    status = payer.filing_status
    flags = [payer.is_over_65, payer.is_blind]
    if status.is_married:
        flags += [payer.spouse_is_over_65, payer.spouse_is_blind]
    add_on_count = sum(1 for flag in flags if flag)
    return config.standard_deduction[status] + add_on_count * config.additional_deduction_65_blind(
        status
    )


def compute_itemized_deductions(
    deductions: Sequence[DeductionItem],
    agi: Decimal,
    status: FilingStatus,
    config: TaxYearConfig,
    alerts: list[ComplianceAlert],
) -> ItemizedDeductionBreakdown:
    """Compute Schedule A itemized deductions.

    Mortgage interest is scaled by cap / balance when the loan balance exceeds
    the acquisition debt cap ($1,000,000 for loans originated before
    2017-12-16, $750,000 after). Only cash charitable gifts count. Medical
    expenses count above 7.5% of AGI. SALT is capped.

    Args:
        deductions: All deduction records.
        agi: Adjusted Gross Income (for the medical floor).
        status: Filing status (for the SALT cap).
        config: Tax year profile.
        alerts: Alert list; mortgage cap findings are appended.

    Returns:
        ItemizedDeductionBreakdown.
    """
    mortgage_interest = ZERO
    charitable_cash = ZERO
    medical_expenses = ZERO
    salt_total = ZERO

    for item in deductions:
        if isinstance(item, MortgageInterest):
            deductible = item.amount
            cap = config.mortgage_debt_cap_for(item.origination_date)
            if item.balance > cap:
                ratio = cap / item.balance
                deductible = item.amount * cap / item.balance
                alerts.append(
                    ComplianceAlert(
                        code="MORTGAGE_LIMIT",
                        severity=AlertSeverity.INFO,
                        message=f"Mortgage interest limited by debt cap. Ratio: {ratio:.2f}",
                        form_source="Schedule A",
                    )
                )
            mortgage_interest += deductible
        elif isinstance(item, StateLocalTax):
            salt_total += item.amount
        elif isinstance(item, CharitableContribution):
            if item.cash:
                charitable_cash += item.amount
        elif isinstance(item, MedicalExpense):
            medical_expenses += item.amount

    medical_floor = agi * config.medical_agi_floor_rate
    return ItemizedDeductionBreakdown(
        mortgage_interest=mortgage_interest,
        charitable_cash=charitable_cash,
        medical=max(ZERO, medical_expenses - medical_floor),
        salt_total=salt_total,
        salt_deducted=min(salt_total, config.salt_cap_for(status)),
    )


def select_deduction(
    summary: IncomeSummary,
    passive: PassiveLossResult,
    adjustments: Decimal,
    payer: TaxPayer,
    deductions: Sequence[DeductionItem],
    config: TaxYearConfig,
    alerts: list[ComplianceAlert],
) -> DeductionResult:
    """Compute gross income and AGI, then pick standard or itemized.

    Itemized wins only when strictly greater; ties go to the standard
    deduction.

    Args:
        summary: Classified income totals.
        passive: Passive loss limitation result.
        adjustments: Total above-the-line adjustments.
        payer: Taxpayer profile.
        deductions: All deduction records.
        config: Tax year profile.
        alerts: Alert list to append to.

    Returns:
        DeductionResult with gross income, AGI and the selected deduction.
    """
    status = payer.filing_status
    income_before_ss = summary.core_income + (summary.passive_income - passive.allowed_loss)
    taxable_ss = taxable_social_security(
        summary.ss_benefits, income_before_ss, summary.tax_exempt_interest, status, config
    )
    gross_income = income_before_ss + taxable_ss
    agi = max(ZERO, gross_income - adjustments)

    itemized = compute_itemized_deductions(deductions, agi, status, config, alerts)
    standard_amount = get_standard_deduction(payer, config)

    if itemized.total > standard_amount:
        method, amount = "itemized", itemized.total
    else:
        method, amount = "standard", standard_amount

    return DeductionResult(
        method=method,
        amount=amount,
        standard_amount=standard_amount,
        itemized=itemized,
        taxable_ss_benefits=taxable_ss,
        gross_income=gross_income,
        agi=agi,
    )

"""Tax credits.

Credits are evaluated in a fixed order because the nonrefundable Child Tax
Credit is limited by the income tax left after the education credits:

1. American Opportunity Tax Credit (partly refundable)
2. Lifetime Learning Credit (nonrefundable)
3. Earned Income Credit (refundable)
4. Child Tax Credit / Additional Child Tax Credit
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from taxometer.engine.income import IncomeSummary
from taxometer.engine.models import DeductionItem, TaxPayer, TuitionExpense
from taxometer.engine.results import AlertSeverity, ComplianceAlert, CreditsBreakdown
from taxometer.tax.money import ZERO, phaseout_factor
from taxometer.tax.year_config import FilingStatus, TaxYearConfig


@dataclass
class EducationCredits:
    """AOTC and LLC amounts after the AGI phaseout."""

    aotc_nonrefundable: Decimal = ZERO
    aotc_refundable: Decimal = ZERO
    llc_nonrefundable: Decimal = ZERO


@dataclass
class ChildTaxCredit:
    """CTC split into the nonrefundable part and the refundable ACTC."""

    potential: Decimal = ZERO
    nonrefundable: Decimal = ZERO
    refundable: Decimal = ZERO


def aotc_for_expenses(expenses: Decimal, config: TaxYearConfig) -> Decimal:
    """AOTC before phaseout: 100% of the first $2,000 plus 25% of the next $2,000.

    Example:
        >>> aotc_for_expenses(Decimal("5000"), TAX_YEAR_2025)
        Decimal('2500.00')
    """
    capped = min(expenses, config.aotc_max_expenses)
    first_tier = min(capped, config.aotc_full_rate_expenses)
    second_tier = max(ZERO, capped - config.aotc_full_rate_expenses)
    return first_tier + second_tier * config.aotc_second_tier_rate


def calculate_education_credits(
    deductions: Sequence[DeductionItem],
    agi: Decimal,
    status: FilingStatus,
    config: TaxYearConfig,
) -> EducationCredits:
    """AOTC per eligible student record, LLC for the remaining tuition.

    Both credits share the same MAGI phaseout range. 40% of each AOTC, up to
    $1,000 per record, is refundable.
    """
    result = EducationCredits()
    phaseout = config.education_phaseout(status)
    factor = phaseout_factor(agi, phaseout.lower, phaseout.upper)
    if factor <= ZERO:
        return result

    llc_expenses = ZERO
    for item in deductions:
        if not isinstance(item, TuitionExpense):
            continue
        if not item.is_aotc_eligible:
            llc_expenses += item.amount
            continue
        credit = aotc_for_expenses(item.amount, config) * factor
        refundable = min(credit * config.aotc_refundable_rate, config.aotc_refundable_cap)
        result.aotc_refundable += refundable
        result.aotc_nonrefundable += credit - refundable

    if llc_expenses > ZERO:
        capped = min(llc_expenses, config.llc_max_expenses)
        result.llc_nonrefundable = capped * config.llc_rate * factor

    return result


def calculate_eic(
    summary: IncomeSummary,
    payer: TaxPayer,
    agi: Decimal,
    config: TaxYearConfig,
    alerts: list[ComplianceAlert],
) -> Decimal:
    """Earned Income Credit.

    Investment income above the annual limit disqualifies the return and
    raises a warning, for every filing status. Married filing separately is
    otherwise not eligible.
    """
    if summary.investment_income > config.eic_investment_income_limit:
        alerts.append(
            ComplianceAlert(
                code="EIC_INV_LIMIT",
                severity=AlertSeverity.WARNING,
                message="Investment income exceeds EIC limit.",
                form_source="Schedule EIC",
            )
        )
        return ZERO

    status = payer.filing_status
    if status == FilingStatus.MARRIED_SEPARATE:
        return ZERO

    children = sum(1 for dep in payer.dependents if dep.is_eic_qualifying_child)
    schedule = config.eic_schedule(children)
    earned = summary.earned_income

    max_credit = min(earned, schedule.max_earned) * schedule.rate
    phaseout_income = max(earned, agi)
    reduction = max(ZERO, phaseout_income - schedule.phase_start(status)) * schedule.phase_rate
    return max(ZERO, max_credit - reduction)


def calculate_child_tax_credit(
    summary: IncomeSummary,
    payer: TaxPayer,
    agi: Decimal,
    tax_available: Decimal,
    config: TaxYearConfig,
) -> ChildTaxCredit:
    """Child Tax Credit with the Additional Child Tax Credit.

    The credit is reduced by $50 for each $1,000 (or fraction) of AGI over
    the threshold. The refundable ACTC is 15% of earned income over $2,500,
    capped per child and by the phased-out credit. Whatever is left is
    nonrefundable and limited to ``tax_available``.

    Example:
        >>> payer = TaxPayer(filing_status="married_joint", dependents=[{"age": 10}])
        >>> ctc = calculate_child_tax_credit(
        ...     IncomeSummary(wages=Decimal("50000")), payer, Decimal("50000"),
        ...     Decimal("2000"), TAX_YEAR_2025)
        >>> ctc.refundable, ctc.nonrefundable
        (Decimal('1700'), Decimal('300'))
    """
    children = sum(
        1 for dep in payer.dependents if dep.is_ctc_qualifying_child(config.ctc_age_limit)
    )
    if children == 0:
        return ChildTaxCredit()

    potential = config.ctc_per_child * children
    threshold = config.ctc_phaseout_threshold(payer.filing_status)
    if agi > threshold:
        steps = math.ceil((agi - threshold) / config.ctc_phaseout_step)
        potential = max(ZERO, potential - steps * config.ctc_phaseout_per_step)

    earned_excess = max(ZERO, summary.earned_income - config.actc_earned_income_floor)
    refundable = min(
        earned_excess * config.actc_rate,
        config.actc_max_per_child * children,
        potential,
    )
    nonrefundable = min(max(ZERO, potential - refundable), max(ZERO, tax_available))
    return ChildTaxCredit(potential=potential, nonrefundable=nonrefundable, refundable=refundable)


def evaluate_credits(
    summary: IncomeSummary,
    payer: TaxPayer,
    deductions: Sequence[DeductionItem],
    agi: Decimal,
    total_income_tax: Decimal,
    config: TaxYearConfig,
    alerts: list[ComplianceAlert],
) -> CreditsBreakdown:
    """Evaluate every credit and return the per-credit breakdown.

    Args:
        summary: Classified income totals.
        payer: Taxpayer profile (filing status, dependents).
        deductions: All deduction records (tuition drives education credits).
        agi: Adjusted Gross Income.
        total_income_tax: Regular tax plus AMT.
        config: Tax year profile.
        alerts: Alert list to append to.

    Returns:
        CreditsBreakdown; credits without a computation are zero.
    """
    status = payer.filing_status
    education = calculate_education_credits(deductions, agi, status, config)
    eic = calculate_eic(summary, payer, agi, config, alerts)

    tax_after_education = total_income_tax - education.aotc_nonrefundable - education.llc_nonrefundable
    ctc = calculate_child_tax_credit(summary, payer, agi, tax_after_education, config)

    return CreditsBreakdown(
        ctc_nonrefundable=ctc.nonrefundable,
        ctc_refundable=ctc.refundable,
        eic=eic,
        aotc_nonrefundable=education.aotc_nonrefundable,
        aotc_refundable=education.aotc_refundable,
        llc_nonrefundable=education.llc_nonrefundable,
    )

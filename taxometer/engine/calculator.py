"""Tax liability calculator.

``compute`` runs one deterministic pass over a taxpayer's records:

    classify income -> adjustments -> passive loss limit -> AGI and deduction
    -> QBI -> regular tax -> AMT -> credits -> surtaxes -> result

All intermediate values stay unrounded Decimals. Findings along the way are
collected as compliance alerts; malformed input never raises.

Example:
    >>> from taxometer.engine import TaxPayer, WageIncome, compute
    >>> result = compute(TaxPayer(filing_status="single"), [WageIncome(amount=60000)], [])
    >>> result.taxable_income
    Decimal('44400')
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from taxometer.core.config import settings
from taxometer.core.logging import calculation_context, get_logger
from taxometer.engine.adjustments import AdjustmentResult, compute_adjustments
from taxometer.engine.amt import AMTResult, calculate_amt
from taxometer.engine.brackets import RegularTaxResult, calculate_regular_tax
from taxometer.engine.credits import evaluate_credits
from taxometer.engine.deductions import DeductionResult, select_deduction
from taxometer.engine.income import IncomeSummary, classify_income
from taxometer.engine.models import DeductionItem, IncomeItem, TaxPayer
from taxometer.engine.passive import PassiveLossResult, limit_passive_losses
from taxometer.engine.qbi import QBIResult, compute_qbi_deduction
from taxometer.engine.results import (
    AGGREGATED_PASSIVE_KEY,
    CarryoverState,
    ComplianceAlert,
    CreditsBreakdown,
    TaxResult,
)
from taxometer.engine.surtax import SurtaxResult, calculate_surtaxes
from taxometer.tax.money import ZERO
from taxometer.tax.year_config import TaxYearConfig, get_tax_year_config

logger = get_logger(__name__)


def assemble_result(
    payer: TaxPayer,
    config: TaxYearConfig,
    summary: IncomeSummary,
    adjustments: AdjustmentResult,
    passive: PassiveLossResult,
    deduction: DeductionResult,
    qbi: QBIResult,
    regular: RegularTaxResult,
    amt: AMTResult,
    credits: CreditsBreakdown,
    surtaxes: SurtaxResult,
    alerts: list[ComplianceAlert],
) -> TaxResult:
    """Combine stage outputs into the final TaxResult.

    Liability is income tax plus SE tax, NIIT and Additional Medicare Tax,
    less nonrefundable credits, floored at zero. Refundable credits count as
    payments when computing the refund or amount due.
    """
    total_income_tax = regular.total + amt.amt
    liability = max(
        ZERO,
        total_income_tax
        + adjustments.self_employment.total
        + surtaxes.niit
        + surtaxes.medicare_surtax
        - credits.total_nonrefundable,
    )

    payments = summary.total_withholding
    balance = payments + credits.total_refundable - liability
    gross_income = deduction.gross_income
    effective_rate = liability / gross_income if gross_income > ZERO else ZERO

    payroll_tax = (
        summary.wages * config.ss_rate_employee + summary.medicare_wages * config.medicare_rate
    )

    passive_carryover: dict[str, Decimal] = {}
    if passive.suspended_loss > ZERO:
        passive_carryover[AGGREGATED_PASSIVE_KEY] = passive.suspended_loss

    return TaxResult(
        tax_year=config.tax_year,
        filing_status=payer.filing_status,
        gross_income=gross_income,
        adjustments=adjustments.total,
        agi=deduction.agi,
        magi_niit=surtaxes.magi_niit,
        magi_roth=deduction.agi,
        magi_student_loan=adjustments.magi_student_loan,
        standard_deduction=deduction.standard_amount,
        itemized_deduction=deduction.itemized_amount,
        deduction_used=deduction.amount,
        deduction_type=deduction.method,
        qbi_deduction=qbi.deduction,
        taxable_income=qbi.taxable_income,
        taxable_ordinary=regular.ordinary_taxable,
        taxable_ltcg=regular.preferential_income,
        taxable_1250=summary.unrecaptured_1250_gain,
        taxable_collectibles=summary.collectibles_gain,
        regular_tax=regular.total,
        alternative_minimum_tax=amt.amt,
        total_income_tax=total_income_tax,
        credits=credits,
        payroll_tax=payroll_tax,
        self_employment_tax=adjustments.self_employment.total,
        niit=surtaxes.niit,
        medicare_surtax=surtaxes.medicare_surtax,
        total_tax_liability=liability,
        total_payments=payments,
        refund=max(ZERO, balance),
        amount_due=max(ZERO, -balance),
        effective_rate=effective_rate,
        marginal_rate=regular.marginal_rate,
        compliance_alerts=alerts,
        carryovers=CarryoverState(year=config.tax_year, passive_losses=passive_carryover),
    )


def _compute(
    payer: TaxPayer,
    incomes: Sequence[IncomeItem],
    deductions: Sequence[DeductionItem],
    config: TaxYearConfig,
) -> TaxResult:
    status = payer.filing_status
    alerts: list[ComplianceAlert] = []

    summary = classify_income(incomes, alerts)
    adjustments = compute_adjustments(summary, payer, deductions, config, alerts)
    passive = limit_passive_losses(summary, adjustments.total, status, config, alerts)
    deduction = select_deduction(
        summary, passive, adjustments.total, payer, deductions, config, alerts
    )
    qbi = compute_qbi_deduction(
        summary, adjustments.deductible_se_tax, deduction.agi, deduction.amount, status, config
    )
    regular = calculate_regular_tax(
        qbi.taxable_income, summary.preferential_income, status, config
    )
    amt = calculate_amt(
        qbi.taxable_income, deduction, summary.iso_bargain_element, regular, status, config
    )
    credits = evaluate_credits(
        summary, payer, deductions, deduction.agi, regular.total + amt.amt, config, alerts
    )
    surtaxes = calculate_surtaxes(
        summary, passive, adjustments.self_employment, deduction.agi, status, config
    )

    return assemble_result(
        payer,
        config,
        summary,
        adjustments,
        passive,
        deduction,
        qbi,
        regular,
        amt,
        credits,
        surtaxes,
        alerts,
    )


def compute(
    payer: TaxPayer,
    incomes: Sequence[IncomeItem],
    deductions: Sequence[DeductionItem],
    profile: TaxYearConfig | None = None,
) -> TaxResult:
    """Compute the federal tax liability for one return.

    Args:
        payer: Taxpayer profile.
        incomes: Income records.
        deductions: Deduction and credit-expense records.
        profile: Tax year profile. Defaults to ``settings.default_tax_year``.

    Returns:
        TaxResult with every intermediate figure and compliance alert.
    """
    config = profile or get_tax_year_config(settings.default_tax_year)
    with calculation_context(tax_year=config.tax_year):
        result = _compute(payer, incomes, deductions, config)
        logger.debug(
            "tax_result_computed",
            filing_status=result.filing_status.value,
            agi=result.agi,
            taxable_income=result.taxable_income,
            total_tax_liability=result.total_tax_liability,
            refund=result.refund,
            amount_due=result.amount_due,
            alert_count=len(result.compliance_alerts),
        )
    return result

"""Income classification.

Partitions raw income records into the category totals every later stage
consumes. No rounding is applied here.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal

from taxometer.engine.models import (
    BusinessIncome,
    CapitalGainIncome,
    CapitalGainType,
    DividendIncome,
    IncomeItem,
    InterestIncome,
    IsoExerciseIncome,
    PassiveIncome,
    SocialSecurityIncome,
    WageIncome,
)
from taxometer.engine.results import AlertSeverity, ComplianceAlert
from taxometer.tax.money import ZERO


@dataclass
class IncomeSummary:
    """Aggregated income from all income records.

    Attributes:
        wages: Sum of W-2 box 1 wages.
        medicare_wages: Sum of W-2 box 5 wages (box 1 when not reported).
        ss_wages: Sum of W-2 box 3 wages (box 1 when not reported).
        taxable_interest: Interest that is not municipal.
        tax_exempt_interest: Municipal bond interest.
        qualified_dividends: Dividends taxed at capital gain rates.
        ordinary_dividends: Non-qualified dividends.
        short_term_gain: Net short-term gain (negative for a net loss).
        long_term_gain: Net long-term gain.
        unrecaptured_1250_gain: Unrecaptured Section 1250 gain.
        collectibles_gain: 28% rate collectibles gain.
        investment_income: Investment income used for the EIC limit.
        business_net_income: Gross receipts minus expenses, all businesses.
        qbi_income: QBI-eligible business income.
        qbi_w2_wages: W-2 wages paid by the businesses.
        qbi_ubia: Unadjusted basis of qualified property.
        has_sstb: True if any business is a specified service trade.
        passive_income: Sum of non-negative passive records.
        passive_losses: (property id, loss as a positive number) per loss record.
        ss_benefits: Gross Social Security benefits.
        iso_bargain_element: ISO bargain element (AMT preference).
        total_withholding: Federal withholding across every record.
    """

    wages: Decimal = ZERO
    medicare_wages: Decimal = ZERO
    ss_wages: Decimal = ZERO
    taxable_interest: Decimal = ZERO
    tax_exempt_interest: Decimal = ZERO
    qualified_dividends: Decimal = ZERO
    ordinary_dividends: Decimal = ZERO
    short_term_gain: Decimal = ZERO
    long_term_gain: Decimal = ZERO
    unrecaptured_1250_gain: Decimal = ZERO
    collectibles_gain: Decimal = ZERO
    investment_income: Decimal = ZERO
    business_net_income: Decimal = ZERO
    qbi_income: Decimal = ZERO
    qbi_w2_wages: Decimal = ZERO
    qbi_ubia: Decimal = ZERO
    has_sstb: bool = False
    passive_income: Decimal = ZERO
    passive_losses: list[tuple[str, Decimal]] = field(default_factory=list)
    ss_benefits: Decimal = ZERO
    iso_bargain_element: Decimal = ZERO
    total_withholding: Decimal = ZERO

    @property
    def total_dividends(self) -> Decimal:
        return self.qualified_dividends + self.ordinary_dividends

    @property
    def total_passive_loss(self) -> Decimal:
        return sum((loss for _, loss in self.passive_losses), ZERO)

    @property
    def earned_income(self) -> Decimal:
        """Earned income for EIC and ACTC: wages plus business net income."""
        return self.wages + self.business_net_income

    @property
    def preferential_income(self) -> Decimal:
        """Income taxed at capital gain rates: LTCG plus qualified dividends."""
        return self.long_term_gain + self.qualified_dividends

    @property
    def capital_gains(self) -> Decimal:
        """Net realized gain across all four holding-period buckets."""
        return (
            self.short_term_gain
            + self.long_term_gain
            + self.unrecaptured_1250_gain
            + self.collectibles_gain
        )

    @property
    def core_income(self) -> Decimal:
        """Wages, taxable interest, dividends, business income and capital gains.

        This is the common base of the MAGI proxies and of gross income.
        Passive income and Social Security are added separately where each
        rule calls for them.
        """
        return (
            self.wages
            + self.taxable_interest
            + self.total_dividends
            + self.business_net_income
            + self.capital_gains
        )


def _add_capital_gain(
    summary: IncomeSummary, item: CapitalGainIncome, alerts: list[ComplianceAlert]
) -> None:
    gain = item.gain
    if item.wash_sale_loss_disallowed and gain < ZERO:
        # Flagged only; the disallowed loss still counts in the totals
        alerts.append(
            ComplianceAlert(
                code="WASH_SALE",
                severity=AlertSeverity.INFO,
                message="Wash sale detected. Loss disallowed.",
                form_source="Form 8949",
            )
        )

    if item.gain_type == CapitalGainType.LONG_TERM:
        summary.long_term_gain += gain
    elif item.gain_type == CapitalGainType.COLLECTIBLES_28:
        summary.collectibles_gain += gain
    elif item.gain_type == CapitalGainType.UNRECAPTURED_1250_25:
        summary.unrecaptured_1250_gain += gain
    else:
        summary.short_term_gain += gain

    if gain > ZERO:
        summary.investment_income += gain


def _add_business(
    summary: IncomeSummary, item: BusinessIncome, alerts: list[ComplianceAlert]
) -> None:
    net = item.net_income
    summary.business_net_income += net
    summary.qbi_income += net
    summary.qbi_w2_wages += item.w2_wages_paid
    summary.qbi_ubia += item.ubia
    if item.is_sstb:
        summary.has_sstb = True
        alerts.append(
            ComplianceAlert(
                code="SSTB_FLAG",
                severity=AlertSeverity.INFO,
                message="SSTB Limitations may apply to QBI.",
                form_source="Form 8995",
            )
        )


def classify_income(
    incomes: Iterable[IncomeItem], alerts: list[ComplianceAlert]
) -> IncomeSummary:
    """Route every income record into its category totals.

    Args:
        incomes: Validated income records.
        alerts: Alert list; wash sale and SSTB findings are appended.

    Returns:
        IncomeSummary with totals by category.

    Example:
        >>> alerts = []
        >>> summary = classify_income([WageIncome(amount=60000)], alerts)
        >>> summary.wages
        Decimal('60000')
    """
    summary = IncomeSummary()

    for item in incomes:
        summary.total_withholding += item.withholding
        amount = item.amount

        if isinstance(item, WageIncome):
            summary.wages += amount
            summary.medicare_wages += item.effective_medicare_wages
            summary.ss_wages += item.effective_ss_wages
        elif isinstance(item, InterestIncome):
            if item.is_tax_exempt:
                summary.tax_exempt_interest += amount
            else:
                summary.taxable_interest += amount
                summary.investment_income += amount
        elif isinstance(item, DividendIncome):
            if item.qualified:
                summary.qualified_dividends += amount
            else:
                summary.ordinary_dividends += amount
            summary.investment_income += amount
        elif isinstance(item, CapitalGainIncome):
            _add_capital_gain(summary, item, alerts)
        elif isinstance(item, BusinessIncome):
            _add_business(summary, item, alerts)
        elif isinstance(item, PassiveIncome):
            if amount >= ZERO:
                summary.passive_income += amount
                summary.investment_income += amount
            else:
                summary.passive_losses.append((item.property_id, abs(amount)))
        elif isinstance(item, SocialSecurityIncome):
            summary.ss_benefits += amount
        elif isinstance(item, IsoExerciseIncome):
            summary.iso_bargain_element += item.bargain_element
        # OtherIncome contributes withholding only

    return summary

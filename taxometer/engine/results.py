"""Result data structures produced by the tax engine.

All monetary values are unrounded Decimals; rounding to cents happens only
when a result is presented (see ``taxometer.engine.output``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from taxometer.tax.money import ZERO
from taxometer.tax.year_config import FilingStatus

AGGREGATED_PASSIVE_KEY = "aggregated"


class AlertSeverity(str, Enum):
    """Compliance alert severity."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class ComplianceAlert:
    """Advisory finding raised during calculation; never blocks computation.

    Attributes:
        code: Stable machine-readable code (e.g. "HSA_EXCESS").
        severity: info, warning or error.
        message: Human-readable explanation.
        form_source: IRS form or schedule the finding relates to, if any.
    """

    code: str
    severity: AlertSeverity
    message: str
    form_source: str | None = None


@dataclass(frozen=True)
class CreditsBreakdown:
    """Per-credit nonrefundable and refundable amounts.

    Credits without a computation yet (child care, saver's, foreign tax,
    adoption, energy) are carried as zero so the shape stays stable.
    """

    ctc_nonrefundable: Decimal = ZERO
    ctc_refundable: Decimal = ZERO
    eic: Decimal = ZERO
    aotc_nonrefundable: Decimal = ZERO
    aotc_refundable: Decimal = ZERO
    llc_nonrefundable: Decimal = ZERO
    child_care_credit: Decimal = ZERO
    saver_credit: Decimal = ZERO
    foreign_tax_credit: Decimal = ZERO
    adoption_credit: Decimal = ZERO
    energy_credit: Decimal = ZERO
    other: Decimal = ZERO

    @property
    def total_nonrefundable(self) -> Decimal:
        return (
            self.ctc_nonrefundable
            + self.aotc_nonrefundable
            + self.llc_nonrefundable
            + self.child_care_credit
            + self.saver_credit
            + self.foreign_tax_credit
            + self.adoption_credit
            + self.energy_credit
            + self.other
        )

    @property
    def total_refundable(self) -> Decimal:
        return self.ctc_refundable + self.eic + self.aotc_refundable


@dataclass(frozen=True)
class CarryoverState:
    """Amounts carried forward to the next tax year.

    Only suspended passive losses are computed today; they are stored under a
    single aggregated key rather than per property. The other fields are
    reserved and stay zero.

    Attributes:
        year: Tax year these carryovers come FROM.
        passive_losses: Suspended passive losses by key.
    """

    year: int
    capital_loss: Decimal = ZERO
    charitable: Decimal = ZERO
    nol: Decimal = ZERO
    amt_credit: Decimal = ZERO
    passive_losses: dict[str, Decimal] = field(default_factory=dict)
    qbi_losses: Decimal = ZERO

    @property
    def has_passive_loss_carryover(self) -> bool:
        return any(amount > ZERO for amount in self.passive_losses.values())

    @property
    def total_passive_loss(self) -> Decimal:
        return sum(self.passive_losses.values(), ZERO)


@dataclass(frozen=True)
class TaxResult:
    """Complete output of one tax calculation.

    Attributes:
        gross_income: Total income including taxable Social Security.
        adjustments: Above-the-line adjustments (SE tax half, HSA, student loan).
        agi: Adjusted Gross Income, floored at zero.
        magi_niit: MAGI for NIIT (AGI + tax-exempt interest).
        magi_roth: MAGI for Roth IRA limits (AGI).
        magi_student_loan: Income proxy used for the student loan phaseout.
        deduction_used: max(standard, itemized).
        deduction_type: "standard" or "itemized".
        taxable_income: Taxable income after deduction and QBI deduction.
        taxable_ordinary: Portion taxed at ordinary rates.
        taxable_ltcg: Portion taxed at preferential rates (LTCG + qualified dividends).
        taxable_1250: Unrecaptured Section 1250 gain.
        taxable_collectibles: 28% rate collectibles gain.
        total_income_tax: Regular tax plus AMT.
        payroll_tax: Employee FICA on wages (informational, not in liability).
        total_tax_liability: Tax after nonrefundable credits, floored at zero.
        refund: Positive balance, or zero.
        amount_due: Negative balance as a positive number, or zero.
        effective_rate: Liability divided by gross income.
        marginal_rate: Highest ordinary bracket rate reached.
    """

    tax_year: int
    filing_status: FilingStatus

    gross_income: Decimal
    adjustments: Decimal
    agi: Decimal
    magi_niit: Decimal
    magi_roth: Decimal
    magi_student_loan: Decimal

    standard_deduction: Decimal
    itemized_deduction: Decimal
    deduction_used: Decimal
    deduction_type: str
    qbi_deduction: Decimal

    taxable_income: Decimal
    taxable_ordinary: Decimal
    taxable_ltcg: Decimal
    taxable_1250: Decimal
    taxable_collectibles: Decimal

    regular_tax: Decimal
    alternative_minimum_tax: Decimal
    total_income_tax: Decimal
    credits: CreditsBreakdown

    payroll_tax: Decimal
    self_employment_tax: Decimal
    niit: Decimal
    medicare_surtax: Decimal

    total_tax_liability: Decimal
    total_payments: Decimal
    refund: Decimal
    amount_due: Decimal

    effective_rate: Decimal
    marginal_rate: Decimal
    compliance_alerts: list[ComplianceAlert] = field(default_factory=list)
    carryovers: CarryoverState | None = None

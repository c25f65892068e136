"""Passive activity loss limitation (Form 8582).

Passive losses first offset passive income dollar for dollar. Losses beyond
that are allowed only up to the $25,000 special allowance for active rental
participation, which phases out at 50 cents per dollar of MAGI over
$100,000 and is unavailable to married taxpayers filing separately.
Everything else is suspended and carried forward.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from taxometer.engine.income import IncomeSummary
from taxometer.engine.results import AlertSeverity, ComplianceAlert
from taxometer.tax.money import ZERO
from taxometer.tax.year_config import FilingStatus, TaxYearConfig


@dataclass
class PassiveLossResult:
    """Allowed and suspended passive losses.

    Attributes:
        total_losses: Sum of all passive losses (positive number).
        allowed_loss: Loss deductible this year.
        suspended_loss: Loss carried forward.
        special_allowance: Special allowance available after phaseout.
        magi: MAGI proxy used for the allowance phaseout.
    """

    total_losses: Decimal = ZERO
    allowed_loss: Decimal = ZERO
    suspended_loss: Decimal = ZERO
    special_allowance: Decimal = ZERO
    magi: Decimal = ZERO


def special_allowance(magi: Decimal, status: FilingStatus, config: TaxYearConfig) -> Decimal:
    """Rental real estate special allowance after the MAGI phaseout.

    Example:
        >>> special_allowance(Decimal("120000"), FilingStatus.SINGLE, TAX_YEAR_2025)
        Decimal('15000.0')
    """
    if status == FilingStatus.MARRIED_SEPARATE:
        return ZERO
    excess = max(ZERO, magi - config.pal_phaseout_start)
    return max(ZERO, config.pal_allowance - excess * config.pal_phaseout_rate)


def limit_passive_losses(
    summary: IncomeSummary,
    adjustments: Decimal,
    status: FilingStatus,
    config: TaxYearConfig,
    alerts: list[ComplianceAlert],
) -> PassiveLossResult:
    """Apply the passive loss limitation.

    Args:
        summary: Classified income totals (passive income and raw losses).
        adjustments: Total above-the-line adjustments.
        status: Filing status.
        config: Tax year profile.
        alerts: Alert list; a warning is appended when losses are suspended.

    Returns:
        PassiveLossResult with allowed and suspended amounts.
    """
    total_losses = summary.total_passive_loss
    if total_losses <= ZERO:
        return PassiveLossResult()

    if summary.passive_income >= total_losses:
        return PassiveLossResult(total_losses=total_losses, allowed_loss=total_losses)

    magi = summary.core_income + adjustments
    allowance = special_allowance(magi, status, config)
    offset_by_income = summary.passive_income
    allowance_used = min(allowance, total_losses - offset_by_income)
    allowed = offset_by_income + allowance_used
    suspended = total_losses - allowed

    if suspended > ZERO:
        alerts.append(
            ComplianceAlert(
                code="PASSIVE_SUSPEND",
                severity=AlertSeverity.WARNING,
                message=f"Passive loss of ${suspended:,.0f} suspended.",
                form_source="Form 8582",
            )
        )

    return PassiveLossResult(
        total_losses=total_losses,
        allowed_loss=allowed,
        suspended_loss=suspended,
        special_allowance=allowance,
        magi=magi,
    )

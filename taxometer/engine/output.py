"""Presentation of tax results.

Rounding to cents happens here and nowhere else in the engine:
- result_to_dict: JSON-ready dict, money to cents and rates to 4 places
- result_to_json: orjson-encoded bytes
- generate_summary_notes: Markdown summary for review
"""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any

import orjson

from taxometer.engine.results import CreditsBreakdown, TaxResult
from taxometer.tax.money import ZERO, round_money

RATE_PLACES = Decimal("0.0001")
RATE_FIELDS = frozenset({"effective_rate", "marginal_rate"})


def _round_rate(value: Decimal) -> Decimal:
    return value.quantize(RATE_PLACES, rounding=ROUND_HALF_UP)


def _format_currency(amount: Decimal) -> str:
    """Format Decimal as currency string.

    Args:
        amount: Decimal amount.

    Returns:
        Formatted string like "$1,234.56".
    """
    return f"${round_money(amount):,.2f}"


def _format_percent(rate: Decimal) -> str:
    return f"{rate * 100:.2f}%"


def _present(name: str, value: Any) -> Any:
    if isinstance(value, Decimal):
        return _round_rate(value) if name in RATE_FIELDS else round_money(value)
    if isinstance(value, Enum):
        return value.value
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: _present(f.name, getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, dict):
        return {key: _present(key, item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_present(name, item) for item in value]
    return value


def result_to_dict(result: TaxResult) -> dict[str, Any]:
    """Convert a TaxResult to a JSON-ready dict.

    Money is rounded to cents (ROUND_HALF_UP) and rates to four places.
    Decimals are kept as Decimal; credit totals are added to the credits
    mapping.
    """
    data = _present("result", result)
    data["credits"]["total_nonrefundable"] = round_money(result.credits.total_nonrefundable)
    data["credits"]["total_refundable"] = round_money(result.credits.total_refundable)
    return data


def _default(obj: Any) -> Any:
    if isinstance(obj, Decimal):
        return str(obj)
    raise TypeError(f"Type is not JSON serializable: {type(obj).__name__}")


def result_to_json(result: TaxResult) -> bytes:
    """Serialize a TaxResult to JSON bytes via orjson.

    Decimal amounts are written as strings so no precision is lost.
    """
    return orjson.dumps(result_to_dict(result), default=_default)


def _credit_lines(credits: CreditsBreakdown) -> list[str]:
    entries = [
        ("Child Tax Credit", credits.ctc_nonrefundable),
        ("Additional Child Tax Credit (refundable)", credits.ctc_refundable),
        ("Earned Income Credit (refundable)", credits.eic),
        ("American Opportunity Credit", credits.aotc_nonrefundable),
        ("American Opportunity Credit (refundable)", credits.aotc_refundable),
        ("Lifetime Learning Credit", credits.llc_nonrefundable),
    ]
    return [f"- **{label}:** {_format_currency(amount)}" for label, amount in entries if amount > ZERO]


def generate_summary_notes(result: TaxResult) -> str:
    """Generate a Markdown summary of a TaxResult for review.

    Sections cover income, deduction, tax, credits, balance and compliance
    alerts.

    Args:
        result: Complete TaxResult.

    Returns:
        Markdown document as a string.
    """
    lines: list[str] = []

    lines.append(
        f"# Tax Summary - Tax Year {result.tax_year} "
        f"({result.filing_status.value.replace('_', ' ').title()})"
    )
    lines.append("")

    # 1. Income
    lines.append("## 1. Income")
    lines.append("")
    lines.append(f"- **Gross Income:** {_format_currency(result.gross_income)}")
    lines.append(f"- **Adjustments:** {_format_currency(result.adjustments)}")
    lines.append(f"- **AGI:** {_format_currency(result.agi)}")
    lines.append("")

    # 2. Deduction
    lines.append("## 2. Deduction")
    lines.append("")
    lines.append(
        f"- **{result.deduction_type.title()} Deduction:** "
        f"{_format_currency(result.deduction_used)}"
    )
    if result.qbi_deduction > ZERO:
        lines.append(f"- **QBI Deduction:** {_format_currency(result.qbi_deduction)}")
    lines.append(f"- **Taxable Income:** {_format_currency(result.taxable_income)}")
    lines.append("")

    # 3. Tax
    lines.append("## 3. Tax")
    lines.append("")
    lines.append(f"- **Regular Tax:** {_format_currency(result.regular_tax)}")
    if result.alternative_minimum_tax > ZERO:
        lines.append(
            f"- **Alternative Minimum Tax:** {_format_currency(result.alternative_minimum_tax)}"
        )
    if result.self_employment_tax > ZERO:
        lines.append(f"- **Self-Employment Tax:** {_format_currency(result.self_employment_tax)}")
    if result.niit > ZERO:
        lines.append(f"- **Net Investment Income Tax:** {_format_currency(result.niit)}")
    if result.medicare_surtax > ZERO:
        lines.append(f"- **Additional Medicare Tax:** {_format_currency(result.medicare_surtax)}")
    lines.append(f"- **Total Tax Liability:** {_format_currency(result.total_tax_liability)}")
    lines.append(f"- **Effective Rate:** {_format_percent(result.effective_rate)}")
    lines.append(f"- **Marginal Rate:** {_format_percent(result.marginal_rate)}")
    lines.append("")

    # 4. Credits
    lines.append("## 4. Credits")
    lines.append("")
    credit_lines = _credit_lines(result.credits)
    lines.extend(credit_lines or ["No credits claimed."])
    lines.append("")

    # 5. Balance
    lines.append("## 5. Balance")
    lines.append("")
    lines.append(f"- **Total Payments:** {_format_currency(result.total_payments)}")
    if result.refund > ZERO:
        lines.append(f"- **Refund:** {_format_currency(result.refund)}")
    else:
        lines.append(f"- **Amount Due:** {_format_currency(result.amount_due)}")
    lines.append("")

    # 6. Compliance Alerts
    lines.append("## 6. Compliance Alerts")
    lines.append("")
    if result.compliance_alerts:
        for alert in result.compliance_alerts:
            source = f" ({alert.form_source})" if alert.form_source else ""
            lines.append(f"- **{alert.severity.value.upper()}** `{alert.code}`{source}: {alert.message}")
    else:
        lines.append("No compliance alerts.")
    lines.append("")

    return "\n".join(lines)

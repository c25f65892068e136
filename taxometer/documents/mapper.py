"""Map extraction payloads to engine records.

Extraction output and data entry screens describe records with source form
tags (``w2``, ``1099_int``, ``charity_goods``...) and keep form-specific
fields under ``details``. This module resolves the tag to an engine
category, flattens the details onto the record and validates it into an
IncomeItem or DeductionItem. Unknown tags fall back to ``other``.
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from taxometer.core.config import settings
from taxometer.core.logging import get_logger
from taxometer.documents.models import (
    PaystubDeduction,
    PaystubExtraction,
    PaystubTaxType,
    ReceiptCategory,
    ReceiptExtraction,
)
from taxometer.engine.models import (
    CharitableContribution,
    DeductionCategory,
    DeductionItem,
    IncomeCategory,
    IncomeItem,
    MedicalExpense,
    OtherDeduction,
    WageIncome,
    deduction_item_adapter,
    income_item_adapter,
)
from taxometer.tax.money import ZERO
from taxometer.tax.year_config import TaxYearConfig, get_tax_year_config

logger = get_logger(__name__)

# Source form tag -> (category, extra fields implied by the tag)
INCOME_TAGS: dict[str, tuple[IncomeCategory, dict[str, Any]]] = {
    "w2": (IncomeCategory.WAGE, {}),
    "1099_int": (IncomeCategory.INTEREST, {}),
    "1099_div": (IncomeCategory.DIVIDEND, {}),
    "stock": (IncomeCategory.CAPITAL_GAIN, {}),
    "1099_b": (IncomeCategory.CAPITAL_GAIN, {}),
    "1099_nec": (IncomeCategory.BUSINESS, {}),
    "schedule_c": (IncomeCategory.BUSINESS, {}),
    "rental": (IncomeCategory.PASSIVE, {}),
    "k1_passive": (IncomeCategory.PASSIVE, {}),
    "ssa_1099": (IncomeCategory.SOCIAL_SECURITY, {}),
    "iso_exercise": (IncomeCategory.ISO_EXERCISE, {}),
    "retirement_dist": (IncomeCategory.OTHER, {}),
}

DEDUCTION_TAGS: dict[str, tuple[DeductionCategory, dict[str, Any]]] = {
    "mortgage": (DeductionCategory.MORTGAGE, {}),
    "state_tax": (DeductionCategory.SALT, {"kind": "income"}),
    "property_tax": (DeductionCategory.SALT, {"kind": "property"}),
    "charity_cash": (DeductionCategory.CHARITY, {"cash": True}),
    "charity_goods": (DeductionCategory.CHARITY, {"cash": False}),
    "medical": (DeductionCategory.MEDICAL, {}),
    "hsa_contrib": (DeductionCategory.HSA, {}),
    "student_loan": (DeductionCategory.STUDENT_LOAN, {}),
    "tuition_fees": (DeductionCategory.TUITION, {}),
    "energy_credit": (DeductionCategory.ENERGY_CREDIT, {}),
    "adoption_credit": (DeductionCategory.ADOPTION_CREDIT, {}),
    "educator_expense": (DeductionCategory.OTHER, {}),
    "fsa_health": (DeductionCategory.OTHER, {}),
    "fsa_dependent_care": (DeductionCategory.OTHER, {}),
}

RESERVED_KEYS = ("details", "type", "category")


def _source_tag(payload: Mapping[str, Any]) -> str:
    tag = payload.get("type") or payload.get("category") or ""
    return str(tag).strip().lower()


def _flatten(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Merge ``details`` into the top-level fields; top-level keys win."""
    details = payload.get("details")
    record: dict[str, Any] = dict(details) if isinstance(details, Mapping) else {}
    record.update({k: v for k, v in payload.items() if k not in RESERVED_KEYS})
    return record


def _resolve(
    tag: str, tags: Mapping[str, tuple[Any, dict[str, Any]]], categories: type, kind: str
) -> tuple[Any, dict[str, Any]]:
    if tag in tags:
        return tags[tag]
    try:
        return categories(tag), {}
    except ValueError:
        logger.warning("unknown_record_tag", record_kind=kind, tag=tag or None)
        return categories("other"), {}


def parse_income_item(payload: Mapping[str, Any]) -> IncomeItem:
    """Validate an income payload into an IncomeItem.

    Args:
        payload: ``{type|category, amount, withholding, description, details}``.
            Either a source form tag or an engine category is accepted.

    Returns:
        The IncomeItem variant for the resolved category.

    Example:
        >>> item = parse_income_item({"type": "w2", "amount": 85000,
        ...                           "details": {"w2_box5_med_wages": 90000}})
        >>> item.category, item.medicare_wages
        ('wage', Decimal('90000'))
    """
    category, implied = _resolve(_source_tag(payload), INCOME_TAGS, IncomeCategory, "income")
    record = {**_flatten(payload), **implied, "category": category.value}
    return income_item_adapter.validate_python(record)


def parse_deduction_item(payload: Mapping[str, Any]) -> DeductionItem:
    """Validate a deduction payload into a DeductionItem.

    Args:
        payload: ``{category|type, amount, description, details}``.

    Returns:
        The DeductionItem variant for the resolved category.
    """
    category, implied = _resolve(
        _source_tag(payload), DEDUCTION_TAGS, DeductionCategory, "deduction"
    )
    record = {**_flatten(payload), **implied, "category": category.value}
    return deduction_item_adapter.validate_python(record)


def _wages_less_pre_tax(paystub: PaystubExtraction, reduces: str) -> Decimal:
    total = paystub.gross_pay_ytd
    for deduction in paystub.deductions:
        if deduction.is_pre_tax and getattr(deduction, reduces):
            total -= deduction.amount_ytd
    return total


def _box12_total(deductions: list[PaystubDeduction], *categories: str) -> Decimal:
    return sum(
        (d.amount_ytd for d in deductions if d.category in categories), ZERO
    )


def paystub_to_income_item(
    paystub: PaystubExtraction, config: TaxYearConfig | None = None
) -> WageIncome:
    """Derive W-2 style wages from a year-to-date paystub.

    Box 1, 3 and 5 wages are YTD gross pay less the pre-tax deductions that
    reduce federal, Social Security and Medicare wages respectively. Box 3 is
    capped at the Social Security wage base.

    Args:
        paystub: Extracted paystub.
        config: Tax year profile for the wage base. Defaults to the
            configured default year.

    Returns:
        WageIncome with federal withholding from the YTD tax lines.
    """
    if config is None:
        config = get_tax_year_config(settings.default_tax_year)

    box1 = _wages_less_pre_tax(paystub, "reduces_fed")
    box3 = min(_wages_less_pre_tax(paystub, "reduces_ss"), config.ss_wage_base)
    box5 = _wages_less_pre_tax(paystub, "reduces_med")

    logger.debug(
        "paystub_mapped",
        employer=paystub.metadata.employer_name or None,
        box1=box1,
        box3=box3,
        box5=box5,
        box12_code_d=_box12_total(paystub.deductions, "401k", "403b"),
        box12_code_w=_box12_total(paystub.deductions, "hsa"),
    )

    return WageIncome(
        id=paystub.id,
        description=paystub.metadata.employer_name or "Employer",
        amount=box1,
        withholding=paystub.tax_ytd(PaystubTaxType.FED_WITHHOLDING),
        ss_wages=box3,
        medicare_wages=box5,
    )


def receipt_to_deduction_item(receipt: ReceiptExtraction) -> DeductionItem:
    """Convert a scanned receipt to a deduction record.

    Charity receipts become cash contributions and medical receipts medical
    expenses; everything else (including business) is recorded as other.
    """
    description = receipt.description or receipt.vendor
    if receipt.category == ReceiptCategory.CHARITY:
        return CharitableContribution(description=description, amount=receipt.total, cash=True)
    if receipt.category == ReceiptCategory.MEDICAL:
        return MedicalExpense(description=description, amount=receipt.total)
    return OtherDeduction(description=description, amount=receipt.total)

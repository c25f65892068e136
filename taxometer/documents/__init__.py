"""Document extraction boundary.

Turns loosely-typed extraction payloads (tagged records, paystubs, receipts)
into validated engine records.
"""

from taxometer.documents.mapper import (
    parse_deduction_item,
    parse_income_item,
    paystub_to_income_item,
    receipt_to_deduction_item,
)
from taxometer.documents.models import (
    PaystubDeduction,
    PaystubEarning,
    PaystubExtraction,
    PaystubMetadata,
    PaystubTax,
    PaystubTaxType,
    ReceiptCategory,
    ReceiptExtraction,
)

__all__ = [
    "parse_income_item",
    "parse_deduction_item",
    "paystub_to_income_item",
    "receipt_to_deduction_item",
    "PaystubExtraction",
    "PaystubMetadata",
    "PaystubEarning",
    "PaystubTax",
    "PaystubTaxType",
    "PaystubDeduction",
    "ReceiptExtraction",
    "ReceiptCategory",
]

"""Pydantic models for document extraction payloads.

This module defines the loosely-typed shapes produced by the image
extraction service and the data entry screens:
- PaystubExtraction: year-to-date payroll data (earnings, taxes, deductions)
- ReceiptExtraction: a scanned receipt (vendor, total, category)

Payloads use camelCase keys; snake_case names are accepted too. Every
monetary field is a Decimal and missing or malformed numbers become zero.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from taxometer.tax.money import ZERO, to_bool, to_date, to_decimal, to_text

Money = Annotated[Decimal, BeforeValidator(to_decimal)]
Flag = Annotated[bool, BeforeValidator(to_bool)]
Text = Annotated[str, BeforeValidator(to_text)]


class _Extraction(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore", frozen=True
    )


class PaystubTaxType(str, Enum):
    """Kind of tax withheld on a paystub."""

    FED_WITHHOLDING = "fed_withholding"
    SOCIAL_SECURITY = "ss"
    MEDICARE = "med"
    STATE_WITHHOLDING = "state_withholding"
    SDI = "sdi"
    SUI = "sui"
    LOCAL = "local"
    OTHER = "other"


class PaystubEarning(_Extraction):
    description: Text = ""
    type: Text = "regular"
    amount_current: Money = ZERO
    amount_ytd: Money = Field(default=ZERO, alias="amountYTD")


class PaystubTax(_Extraction):
    """One tax line; only the YTD amount feeds the W-2 mapping."""

    description: Text = ""
    authority: Literal["federal", "state", "local"] = "federal"
    type: PaystubTaxType = PaystubTaxType.OTHER
    amount_current: Money = ZERO
    amount_ytd: Money = Field(default=ZERO, alias="amountYTD")

    @field_validator("authority", mode="before")
    @classmethod
    def default_authority(cls, v: object) -> str:
        text = str(v or "").strip().lower()
        return text if text in ("state", "local") else "federal"

    @field_validator("type", mode="before")
    @classmethod
    def default_type(cls, v: object) -> PaystubTaxType:
        try:
            return PaystubTaxType(str(v or "").strip().lower())
        except ValueError:
            return PaystubTaxType.OTHER


class PaystubDeduction(_Extraction):
    """Payroll deduction with flags for the wage bases it reduces.

    Only pre-tax deductions reduce W-2 boxes 1, 3 and 5.
    """

    description: Text = ""
    type: Literal["pre_tax", "after_tax"] = "after_tax"
    category: Text = "other"
    amount_current: Money = ZERO
    amount_ytd: Money = Field(default=ZERO, alias="amountYTD")
    reduces_fed: Flag = False
    reduces_ss: Flag = Field(default=False, alias="reducesSS")
    reduces_med: Flag = False
    reduces_state: Flag = False

    @field_validator("type", mode="before")
    @classmethod
    def default_type(cls, v: object) -> str:
        return "pre_tax" if str(v or "").strip().lower() == "pre_tax" else "after_tax"

    @property
    def is_pre_tax(self) -> bool:
        return self.type == "pre_tax"


class PaystubMetadata(_Extraction):
    employer_name: Text = ""
    employer_id: str | None = None
    pay_date: str | None = None
    pay_frequency: Text = "biweekly"
    state_of_employment: Text = ""


class PaystubExtraction(_Extraction):
    """Year-to-date paystub as extracted from an image or entered by hand."""

    id: Text = ""
    metadata: PaystubMetadata = Field(default_factory=PaystubMetadata)
    earnings: list[PaystubEarning] = Field(default_factory=list)
    taxes: list[PaystubTax] = Field(default_factory=list)
    deductions: list[PaystubDeduction] = Field(default_factory=list)
    gross_pay_current: Money = ZERO
    gross_pay_ytd: Money = Field(default=ZERO, alias="grossPayYTD")
    net_pay_current: Money = ZERO
    net_pay_ytd: Money = Field(default=ZERO, alias="netPayYTD")

    @field_validator("metadata", mode="before")
    @classmethod
    def default_metadata(cls, v: object) -> object:
        return {} if v is None else v

    @field_validator("earnings", "taxes", "deductions", mode="before")
    @classmethod
    def default_lines(cls, v: object) -> object:
        return [] if v is None else v

    def tax_ytd(self, tax_type: PaystubTaxType) -> Decimal:
        """YTD amount of the first tax line of the given type, or zero."""
        for tax in self.taxes:
            if tax.type == tax_type:
                return tax.amount_ytd
        return ZERO


class ReceiptCategory(str, Enum):
    CHARITY = "charity"
    MEDICAL = "medical"
    BUSINESS = "business"
    OTHER = "other"


class ReceiptExtraction(_Extraction):
    """Scanned receipt."""

    vendor: Text = "Unknown"
    receipt_date: Annotated[date | None, BeforeValidator(to_date)] = Field(default=None, alias="date")
    total: Money = ZERO
    category: ReceiptCategory = ReceiptCategory.OTHER
    description: Text = ""
    confidence: Annotated[Decimal, BeforeValidator(to_decimal)] = ZERO

    @field_validator("category", mode="before")
    @classmethod
    def default_category(cls, v: object) -> ReceiptCategory:
        """Unrecognized categories fall back to "other"."""
        try:
            return ReceiptCategory(str(v or "").strip().lower())
        except ValueError:
            return ReceiptCategory.OTHER

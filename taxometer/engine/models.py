"""Pydantic models for the tax engine inputs.

This module defines the validated input records for a calculation:
- TaxPayer / Dependent: filing status, age and blindness flags, dependents
- IncomeItem: tagged union of per-category income records
- DeductionItem: tagged union of per-category deduction records

Every numeric field is coerced through ``to_decimal`` when the record is
built, so partially filled forms and extracted data never carry NaN, None or
strings into the calculation. Records are frozen after construction.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    TypeAdapter,
    field_validator,
    model_validator,
)

from taxometer.engine.sstb import is_sstb
from taxometer.tax.money import (
    ZERO,
    to_bool,
    to_date,
    to_decimal,
    to_int,
    to_optional_decimal,
    to_text,
)
from taxometer.tax.year_config import FilingStatus

# Type aliases for coerced fields
Money = Annotated[Decimal, BeforeValidator(to_decimal)]
OptionalMoney = Annotated[Decimal | None, BeforeValidator(to_optional_decimal)]
Flag = Annotated[bool, BeforeValidator(to_bool)]
Count = Annotated[int, BeforeValidator(to_int)]
OptionalDate = Annotated[date | None, BeforeValidator(to_date)]
Text = Annotated[str, BeforeValidator(to_text)]


def _choice(*names: str) -> AliasChoices:
    return AliasChoices(*names)


class IncomeCategory(str, Enum):
    """Income record category (the union tag)."""

    WAGE = "wage"
    INTEREST = "interest"
    DIVIDEND = "dividend"
    CAPITAL_GAIN = "capital_gain"
    PASSIVE = "passive"
    BUSINESS = "business"
    SOCIAL_SECURITY = "social_security"
    ISO_EXERCISE = "iso_exercise"
    OTHER = "other"


class DeductionCategory(str, Enum):
    """Deduction record category (the union tag)."""

    MORTGAGE = "mortgage"
    SALT = "salt"
    CHARITY = "charity"
    MEDICAL = "medical"
    HSA = "hsa"
    STUDENT_LOAN = "student_loan"
    TUITION = "tuition"
    ENERGY_CREDIT = "energy_credit"
    ADOPTION_CREDIT = "adoption_credit"
    OTHER = "other"


class CapitalGainType(str, Enum):
    """Holding period / rate class of a capital gain."""

    SHORT_TERM = "short_term"
    LONG_TERM = "long_term"
    COLLECTIBLES_28 = "collectibles_28"
    UNRECAPTURED_1250_25 = "unrecaptured_1250_25"


def _enum_or_default(enum_cls: type[Enum], default: Enum):
    def coerce(value: object) -> Enum:
        if isinstance(value, enum_cls):
            return value
        try:
            return enum_cls(str(value).strip().lower())
        except ValueError:
            return default

    return coerce


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


# =============================================================================
# Taxpayer
# =============================================================================


class Dependent(_Record):
    """Dependent claimed on the return.

    Age, student and disability flags drive EIC and CTC eligibility.
    """

    id: Text = ""
    first_name: Text = ""
    last_name: Text = ""
    relationship: Literal["child", "parent", "sibling", "other"] = "child"
    age: Count = 0
    months_lived_with: Count = Field(
        default=12, validation_alias=_choice("months_lived_with", "monthsLivedWith")
    )
    is_student: Flag = Field(default=False, validation_alias=_choice("is_student", "isStudent"))
    is_disabled: Flag = Field(default=False, validation_alias=_choice("is_disabled", "isDisabled"))

    @field_validator("relationship", mode="before")
    @classmethod
    def default_relationship(cls, v: object) -> str:
        """Unknown relationships are treated as "other"."""
        text = str(v or "").strip().lower()
        return text if text in ("child", "parent", "sibling", "other") else "other"

    @property
    def is_eic_qualifying_child(self) -> bool:
        """Under 19, under 24 and a student, or permanently disabled."""
        return self.age < 19 or (self.is_student and self.age < 24) or self.is_disabled

    def is_ctc_qualifying_child(self, age_limit: int) -> bool:
        return self.age < age_limit


class TaxPayer(_Record):
    """Primary taxpayer profile.

    Spouse fields are only meaningful for the married filing statuses and are
    ignored otherwise.
    """

    first_name: Text = ""
    last_name: Text = ""
    filing_status: FilingStatus = Field(
        default=FilingStatus.SINGLE, validation_alias=_choice("filing_status", "filingStatus")
    )
    is_over_65: Flag = Field(default=False, validation_alias=_choice("is_over_65", "isOver65"))
    is_blind: Flag = Field(default=False, validation_alias=_choice("is_blind", "isBlind"))
    spouse_is_over_65: Flag = Field(
        default=False, validation_alias=_choice("spouse_is_over_65", "spouseIsOver65")
    )
    spouse_is_blind: Flag = Field(
        default=False, validation_alias=_choice("spouse_is_blind", "spouseIsBlind")
    )
    dependents: tuple[Dependent, ...] = ()

    @field_validator("filing_status", mode="before")
    @classmethod
    def coerce_filing_status(cls, v: object) -> FilingStatus:
        return _enum_or_default(FilingStatus, FilingStatus.SINGLE)(v)

    @field_validator("dependents", mode="before")
    @classmethod
    def coerce_dependents(cls, v: object) -> object:
        """Non-list values become empty; entries that are not records are dropped."""
        if not isinstance(v, (list, tuple)):
            return ()
        return tuple(d for d in v if isinstance(d, (Mapping, Dependent)))


# =============================================================================
# Income records
# =============================================================================


class _IncomeBase(_Record):
    id: Text = ""
    description: Text = ""
    owner: Literal["primary", "spouse"] = "primary"
    amount: Money = ZERO
    withholding: Money = ZERO

    @field_validator("owner", mode="before")
    @classmethod
    def default_owner(cls, v: object) -> str:
        return "spouse" if str(v or "").strip().lower() == "spouse" else "primary"


class WageIncome(_IncomeBase):
    """W-2 wages; ``amount`` is box 1."""

    category: Literal["wage"] = "wage"
    ss_wages: OptionalMoney = Field(
        default=None, validation_alias=_choice("ss_wages", "w2_box3_ss_wages")
    )
    medicare_wages: OptionalMoney = Field(
        default=None, validation_alias=_choice("medicare_wages", "w2_box5_med_wages")
    )

    @property
    def effective_medicare_wages(self) -> Decimal:
        """Box 5 wages, falling back to box 1 when not reported."""
        return self.medicare_wages or self.amount

    @property
    def effective_ss_wages(self) -> Decimal:
        return self.ss_wages or self.amount


class InterestIncome(_IncomeBase):
    """1099-INT interest; municipal interest is tax-exempt."""

    category: Literal["interest"] = "interest"
    tax_exempt_type: Literal["none", "muni", "treasury"] = "none"

    @field_validator("tax_exempt_type", mode="before")
    @classmethod
    def default_tax_exempt_type(cls, v: object) -> str:
        text = str(v or "").strip().lower()
        return text if text in ("muni", "treasury") else "none"

    @property
    def is_tax_exempt(self) -> bool:
        return self.tax_exempt_type == "muni"


class DividendIncome(_IncomeBase):
    """1099-DIV dividends."""

    category: Literal["dividend"] = "dividend"
    qualified: Flag = Field(default=False, validation_alias=_choice("qualified", "dividend_qualified"))


class CapitalGainIncome(_IncomeBase):
    """Sale of a capital asset; ``amount`` is the proceeds."""

    category: Literal["capital_gain"] = "capital_gain"
    cost_basis: Money = ZERO
    gain_type: CapitalGainType = Field(
        default=CapitalGainType.SHORT_TERM,
        validation_alias=_choice("gain_type", "capital_gain_type"),
    )
    wash_sale_loss_disallowed: Money = ZERO
    acquisition_date: OptionalDate = None
    sale_date: OptionalDate = None

    @field_validator("gain_type", mode="before")
    @classmethod
    def coerce_gain_type(cls, v: object) -> CapitalGainType:
        return _enum_or_default(CapitalGainType, CapitalGainType.SHORT_TERM)(v)

    @property
    def gain(self) -> Decimal:
        return self.amount - self.cost_basis


class BusinessIncome(_IncomeBase):
    """Schedule C / 1099-NEC business income; ``amount`` is gross receipts."""

    category: Literal["business"] = "business"
    expenses: Money = Field(default=ZERO, validation_alias=_choice("expenses", "business_expense_total"))
    sstb: bool | None = Field(default=None, validation_alias=_choice("sstb", "qbi_sstb"))
    naics_code: Text = ""
    business_activity: Text = ""
    w2_wages_paid: Money = Field(
        default=ZERO, validation_alias=_choice("w2_wages_paid", "qbi_w2_wages_paid")
    )
    ubia: Money = Field(default=ZERO, validation_alias=_choice("ubia", "qbi_ubia"))

    @field_validator("sstb", mode="before")
    @classmethod
    def coerce_sstb(cls, v: object) -> bool | None:
        return None if v is None else to_bool(v)

    @property
    def net_income(self) -> Decimal:
        return self.amount - self.expenses

    @property
    def is_sstb(self) -> bool:
        """Explicit flag wins; otherwise classify from NAICS code and activity."""
        if self.sstb is not None:
            return self.sstb
        if not (self.naics_code or self.business_activity):
            return False
        return is_sstb(self.naics_code, self.business_activity, self.description)


class PassiveIncome(_IncomeBase):
    """Rental / passive activity; a negative amount is a loss."""

    category: Literal["passive"] = "passive"
    property_id: str = Field(
        default="unknown", validation_alias=_choice("property_id", "rental_property_id")
    )

    @field_validator("property_id", mode="before")
    @classmethod
    def default_property_id(cls, v: object) -> str:
        text = str(v or "").strip()
        return text or "unknown"


class SocialSecurityIncome(_IncomeBase):
    """SSA-1099 benefits."""

    category: Literal["social_security"] = "social_security"


class IsoExerciseIncome(_IncomeBase):
    """Incentive stock option exercise; only the bargain element matters (AMT)."""

    category: Literal["iso_exercise"] = "iso_exercise"
    bargain_element: Money = Field(
        default=ZERO, validation_alias=_choice("bargain_element", "iso_bargain_element")
    )


class OtherIncome(_IncomeBase):
    category: Literal["other"] = "other"


IncomeItem = Annotated[
    Union[
        WageIncome,
        InterestIncome,
        DividendIncome,
        CapitalGainIncome,
        BusinessIncome,
        PassiveIncome,
        SocialSecurityIncome,
        IsoExerciseIncome,
        OtherIncome,
    ],
    Field(discriminator="category"),
]

income_item_adapter: TypeAdapter[IncomeItem] = TypeAdapter(IncomeItem)


# =============================================================================
# Deduction records
# =============================================================================


class _DeductionBase(_Record):
    id: Text = ""
    description: Text = ""
    amount: Money = ZERO


class MortgageInterest(_DeductionBase):
    """Form 1098 mortgage interest; balance and origination date drive the debt cap."""

    category: Literal["mortgage"] = "mortgage"
    origination_date: OptionalDate = Field(
        default=None, validation_alias=_choice("origination_date", "mortgage_origination_date")
    )
    balance: Money = Field(default=ZERO, validation_alias=_choice("balance", "mortgage_balance"))


class StateLocalTax(_DeductionBase):
    """State/local income tax or property tax (SALT)."""

    category: Literal["salt"] = "salt"
    kind: Literal["income", "property"] = "income"

    @field_validator("kind", mode="before")
    @classmethod
    def default_kind(cls, v: object) -> str:
        return "property" if str(v or "").strip().lower() == "property" else "income"


class CharitableContribution(_DeductionBase):
    category: Literal["charity"] = "charity"
    cash: Flag = True


class MedicalExpense(_DeductionBase):
    category: Literal["medical"] = "medical"


class HsaContribution(_DeductionBase):
    """HSA contribution; the annual limit is prorated by eligible months."""

    category: Literal["hsa"] = "hsa"
    coverage: Literal["self", "family"] = Field(
        default="self", validation_alias=_choice("coverage", "hsa_coverage_type")
    )
    months_eligible: Count = Field(
        default=12, validation_alias=_choice("months_eligible", "hsa_months_eligible")
    )

    @model_validator(mode="before")
    @classmethod
    def family_coverage_flag(cls, data: object) -> object:
        """A truthy ``hsa_family_coverage`` flag selects family coverage."""
        if not isinstance(data, Mapping):
            return data
        if data.get("coverage") is None and data.get("hsa_coverage_type") is None:
            if to_bool(data.get("hsa_family_coverage")):
                return {**data, "coverage": "family"}
        return data

    @field_validator("coverage", mode="before")
    @classmethod
    def default_coverage(cls, v: object) -> str:
        return "family" if str(v or "").strip().lower() == "family" else "self"

    @property
    def eligible_months(self) -> int:
        """Missing or non-positive months mean a full year; capped at 12."""
        if self.months_eligible <= 0:
            return 12
        return min(self.months_eligible, 12)


class StudentLoanInterest(_DeductionBase):
    category: Literal["student_loan"] = "student_loan"


class TuitionExpense(_DeductionBase):
    """Form 1098-T qualified tuition; flags decide AOTC vs. LLC."""

    category: Literal["tuition"] = "tuition"
    student_id: Text = ""
    half_time: Flag = Field(default=False, validation_alias=_choice("half_time", "student_is_half_time"))
    first_four_years: Flag = Field(
        default=True, validation_alias=_choice("first_four_years", "student_first_4_years")
    )
    drug_conviction: Flag = Field(
        default=False, validation_alias=_choice("drug_conviction", "student_drug_conviction")
    )

    @property
    def is_aotc_eligible(self) -> bool:
        return self.half_time and self.first_four_years and not self.drug_conviction


class EnergyCreditExpense(_DeductionBase):
    category: Literal["energy_credit"] = "energy_credit"
    improvement_type: Literal["solar", "windows", "hvac", "other"] = Field(
        default="other", validation_alias=_choice("improvement_type", "energy_improvement_type")
    )

    @field_validator("improvement_type", mode="before")
    @classmethod
    def default_improvement_type(cls, v: object) -> str:
        text = str(v or "").strip().lower()
        return text if text in ("solar", "windows", "hvac") else "other"


class AdoptionCreditExpense(_DeductionBase):
    category: Literal["adoption_credit"] = "adoption_credit"
    employer_assistance: Money = Field(
        default=ZERO, validation_alias=_choice("employer_assistance", "adoption_employer_assistance")
    )


class OtherDeduction(_DeductionBase):
    category: Literal["other"] = "other"


DeductionItem = Annotated[
    Union[
        MortgageInterest,
        StateLocalTax,
        CharitableContribution,
        MedicalExpense,
        HsaContribution,
        StudentLoanInterest,
        TuitionExpense,
        EnergyCreditExpense,
        AdoptionCreditExpense,
        OtherDeduction,
    ],
    Field(discriminator="category"),
]

deduction_item_adapter: TypeAdapter[DeductionItem] = TypeAdapter(DeductionItem)

"""Tax liability engine.

This module provides:
- Input records: TaxPayer, Dependent, IncomeItem and DeductionItem variants
- compute: one deterministic pass from records to a TaxResult
- Result structures: TaxResult, CreditsBreakdown, CarryoverState, ComplianceAlert
- Presentation helpers: cents rounding, JSON and Markdown summaries
"""

from taxometer.engine.calculator import assemble_result, compute
from taxometer.engine.models import (
    AdoptionCreditExpense,
    BusinessIncome,
    CapitalGainIncome,
    CapitalGainType,
    CharitableContribution,
    DeductionCategory,
    DeductionItem,
    Dependent,
    DividendIncome,
    EnergyCreditExpense,
    HsaContribution,
    IncomeCategory,
    IncomeItem,
    InterestIncome,
    IsoExerciseIncome,
    MedicalExpense,
    MortgageInterest,
    OtherDeduction,
    OtherIncome,
    PassiveIncome,
    SocialSecurityIncome,
    StateLocalTax,
    StudentLoanInterest,
    TaxPayer,
    TuitionExpense,
    WageIncome,
)
from taxometer.engine.output import (
    generate_summary_notes,
    result_to_dict,
    result_to_json,
)
from taxometer.engine.results import (
    AlertSeverity,
    CarryoverState,
    ComplianceAlert,
    CreditsBreakdown,
    TaxResult,
)

__all__ = [
    # Calculation
    "compute",
    "assemble_result",
    # Inputs
    "TaxPayer",
    "Dependent",
    "IncomeCategory",
    "IncomeItem",
    "WageIncome",
    "InterestIncome",
    "DividendIncome",
    "CapitalGainIncome",
    "CapitalGainType",
    "BusinessIncome",
    "PassiveIncome",
    "SocialSecurityIncome",
    "IsoExerciseIncome",
    "OtherIncome",
    "DeductionCategory",
    "DeductionItem",
    "MortgageInterest",
    "StateLocalTax",
    "CharitableContribution",
    "MedicalExpense",
    "HsaContribution",
    "StudentLoanInterest",
    "TuitionExpense",
    "EnergyCreditExpense",
    "AdoptionCreditExpense",
    "OtherDeduction",
    # Results
    "TaxResult",
    "CreditsBreakdown",
    "CarryoverState",
    "ComplianceAlert",
    "AlertSeverity",
    # Presentation
    "result_to_dict",
    "result_to_json",
    "generate_summary_notes",
]

"""Pytest configuration and shared fixtures for tests."""

import pytest

from taxometer.engine.models import Dependent, TaxPayer
from taxometer.engine.results import ComplianceAlert
from taxometer.tax.year_config import TAX_YEAR_2025, FilingStatus, TaxYearConfig


@pytest.fixture
def profile() -> TaxYearConfig:
    """2025 tax year profile.

    Returns:
        TaxYearConfig for 2025.
    """
    return TAX_YEAR_2025


@pytest.fixture
def alerts() -> list[ComplianceAlert]:
    """Empty alert list that stages append to.

    Returns:
        Mutable list of ComplianceAlert.
    """
    return []


@pytest.fixture
def single_payer() -> TaxPayer:
    """Single filer under 65 with no dependents."""
    return TaxPayer(filing_status=FilingStatus.SINGLE)


@pytest.fixture
def mfj_payer_with_child() -> TaxPayer:
    """Married filing jointly with one 10-year-old child."""
    return TaxPayer(
        filing_status=FilingStatus.MARRIED_JOINT,
        dependents=[Dependent(first_name="Ava", age=10)],
    )

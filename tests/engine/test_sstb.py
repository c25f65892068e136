"""Tests for SSTB classification."""

import pytest

from taxometer.engine.sstb import classify_sstb, is_sstb


class TestClassifySstb:
    @pytest.mark.parametrize(
        ("naics", "field"),
        [
            ("541110", "law"),
            ("541211", "accounting"),
            ("621111", "health"),
            ("524292", "actuarial science"),
            ("541611", "consulting"),
            ("523120", "financial services"),
        ],
    )
    def test_naics_prefix(self, naics: str, field: str) -> None:
        result = classify_sstb(naics)
        assert result.is_sstb is True
        assert result.field == field
        assert naics in (result.reason or "")

    def test_naics_with_separators(self) -> None:
        assert classify_sstb("5411-10").field == "law"

    def test_keyword_fallback(self) -> None:
        result = classify_sstb("", "Independent IT consultant")
        assert result.is_sstb is True
        assert result.field == "consulting"

    def test_business_name_keyword(self) -> None:
        assert is_sstb("", "", "Main Street Dental") is True

    def test_non_sstb(self) -> None:
        result = classify_sstb("238220", "Plumbing repair", "Joe's Plumbing")
        assert result.is_sstb is False
        assert result.field is None
        assert result.reason is None

    def test_keyword_requires_word_boundary(self) -> None:
        assert is_sstb("", "Sportswear retail") is False

"""SSTB (Specified Service Trade or Business) classification.

Business income records may arrive without an explicit SSTB flag (typically
when extracted from a 1099-NEC or Schedule C). In that case the QBI engine
falls back to this classifier, which looks at the NAICS code first and the
free-text activity/name second.

Reference: IRS Reg. 1.199A-5

Example:
    >>> classify_sstb("541110", "", "Smith Law").is_sstb
    True
    >>> classify_sstb("238220", "Plumbing repair", "").is_sstb
    False
"""

from __future__ import annotations

import re
from dataclasses import dataclass

# Field of service by NAICS prefix, longest prefix wins
SSTB_NAICS_PREFIXES: dict[str, str] = {
    "621": "health",
    "622": "health",
    "5411": "law",
    "5412": "accounting",
    "524292": "actuarial science",
    "711": "performing arts",
    "5416": "consulting",
    "611620": "athletics",
    "713940": "athletics",
    "523": "financial services",
    "5312": "brokerage services",
}

SSTB_KEYWORDS: dict[str, tuple[str, ...]] = {
    "law": ("law firm", "attorney", "lawyer", "legal services"),
    "health": (
        "physician",
        "doctor",
        "medical",
        "dental",
        "dentist",
        "chiropractic",
        "optometry",
        "veterinary",
    ),
    "accounting": ("cpa", "accountant", "accounting", "tax prep", "bookkeeping"),
    "consulting": ("consulting", "consultant"),
    "financial services": (
        "financial advisor",
        "investment advisor",
        "wealth management",
        "portfolio management",
    ),
    "brokerage services": ("broker", "brokerage"),
    "performing arts": ("actor", "actress", "musician", "performer"),
    "athletics": ("athlete", "sports"),
}

_KEYWORD_PATTERNS: list[tuple[str, str, re.Pattern[str]]] = [
    (field_name, keyword, re.compile(rf"\b{re.escape(keyword)}\b"))
    for field_name, keywords in SSTB_KEYWORDS.items()
    for keyword in keywords
]


@dataclass(frozen=True)
class SstbClassification:
    """Outcome of SSTB classification.

    Attributes:
        is_sstb: True if the business is a specified service trade or business.
        field: Field of service (e.g. "law"), or None.
        reason: Human-readable explanation, or None if not an SSTB.
    """

    is_sstb: bool
    field: str | None = None
    reason: str | None = None


def classify_sstb(
    naics_code: str,
    business_activity: str = "",
    business_name: str = "",
) -> SstbClassification:
    """Classify whether a business is an SSTB.

    Args:
        naics_code: NAICS business code from Schedule C (may be blank).
        business_activity: Description of business activity.
        business_name: Name of the business.

    Returns:
        SstbClassification with the matched field and reason.
    """
    digits = re.sub(r"\D", "", naics_code or "")
    for prefix_length in range(min(len(digits), 6), 2, -1):
        prefix = digits[:prefix_length]
        if prefix in SSTB_NAICS_PREFIXES:
            field_name = SSTB_NAICS_PREFIXES[prefix]
            return SstbClassification(
                is_sstb=True,
                field=field_name,
                reason=f"NAICS {digits} is in the {field_name} field",
            )

    text = f"{business_activity} {business_name}".lower()
    for field_name, keyword, pattern in _KEYWORD_PATTERNS:
        if pattern.search(text):
            return SstbClassification(
                is_sstb=True,
                field=field_name,
                reason=f"Business description contains '{keyword}'",
            )

    return SstbClassification(is_sstb=False)


def is_sstb(
    naics_code: str,
    business_activity: str = "",
    business_name: str = "",
) -> bool:
    """Simple check if business is an SSTB."""
    return classify_sstb(naics_code, business_activity, business_name).is_sstb

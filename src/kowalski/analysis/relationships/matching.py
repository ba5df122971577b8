"""Column-name matching for join key discovery."""

from __future__ import annotations

import re

from kowalski.analysis.relationships.models import MatchType

ID_PATTERNS = (
    re.compile(r"^id$", re.IGNORECASE),
    re.compile(r"^.*_id$", re.IGNORECASE),
    re.compile(r"^.*Id$"),  # camelCase, e.g. customerId
    re.compile(r"^pk$", re.IGNORECASE),
    re.compile(r"^fk_", re.IGNORECASE),
    re.compile(r"^.*_key$", re.IGNORECASE),
    re.compile(r"^.*_code$", re.IGNORECASE),
    re.compile(r"^uuid$", re.IGNORECASE),
    re.compile(r"^guid$", re.IGNORECASE),
)

# Canonical entity name -> common abbreviations and synonyms
SYNONYMS: dict[str, tuple[str, ...]] = {
    "customer": ("cust", "client", "buyer"),
    "product": ("prod", "item", "sku"),
    "order": ("ord", "purchase", "transaction"),
    "employee": ("emp", "staff", "worker"),
    "department": ("dept", "div", "division"),
    "category": ("cat", "type", "class"),
    "user": ("usr", "account", "member"),
}

KEY_SUFFIXES = ("_id", "_key", "_code", "_num")

_SEPARATORS = re.compile(r"[_\-\s]+")
_CAMEL_ID = re.compile(r"(?<=[a-z0-9])I[dD]$")
_KEY_PREFIX = re.compile(r"^(fk|pk)_")
_KEY_SUFFIX = re.compile(r"_?(id|key|code|num|number)$")


def is_key_name(name: str) -> bool:
    """True if the column name looks like a primary or foreign key."""
    return any(p.search(name) for p in ID_PATTERNS)


def normalize_column_name(name: str) -> str:
    """Canonical form for name comparison.

    ``customerId``, ``Customer-ID``, ``customer_id`` and ``fk_customer_id``
    all normalize to ``customer_id``.
    """
    name = _CAMEL_ID.sub("_id", name).lower()
    name = _SEPARATORS.sub("_", name)
    return _KEY_PREFIX.sub("", name)


def _stem(normalized: str) -> str:
    return _KEY_SUFFIX.sub("", normalized)


def fuzzy_match(normalized1: str, normalized2: str) -> bool:
    """Same stem, or both stems mention a form of the same synonym group."""
    base1, base2 = _stem(normalized1), _stem(normalized2)
    if base1 == base2:
        return True
    for canonical, variants in SYNONYMS.items():
        forms = (canonical, *variants)
        if any(f in base1 for f in forms) and any(f in base2 for f in forms):
            return True
    return False


def has_similar_structure(name1: str, name2: str) -> bool:
    """Both names end with the same id-like suffix."""
    lowered1, lowered2 = name1.lower(), name2.lower()
    return any(lowered1.endswith(s) and lowered2.endswith(s) for s in KEY_SUFFIXES)


def get_match_type(name1: str, name2: str) -> MatchType | None:
    """How two column names relate, or None if they are unrelated.

    Unrelated names are never matched, even when their values overlap.
    """
    normalized1 = normalize_column_name(name1)
    normalized2 = normalize_column_name(name2)
    if normalized1 == normalized2:
        return MatchType.EXACT
    if fuzzy_match(normalized1, normalized2):
        return MatchType.FUZZY
    if has_similar_structure(name1, name2):
        return MatchType.VALUE_OVERLAP
    return None

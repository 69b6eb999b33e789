"""Deterministic transaction categorization.

A transaction is matched against the user's categories in two passes:

1. Keywords. The lowercased ``name + " " + merchant_name`` is searched for
   each category's keywords, categories in stored order and keywords in
   stored order. The first substring hit wins; there is no scoring.
2. Provider category. When no keyword hits and the provider labelled the
   transaction (e.g. ``FOOD_AND_DRINK``), the label selects one or more
   static buckets of generic words. The first user category holding a
   keyword that contains one of those words wins. This is coarser than
   pass 1 on purpose.

No match returns None (uncategorized).
"""

from __future__ import annotations

from typing import Iterable, Protocol, Sequence, TypeVar


class MatchableCategory(Protocol):
    keywords: list[str] | None


class MatchableTransaction(Protocol):
    name: str | None
    merchant_name: str | None
    provider_category: str | None


C = TypeVar("C", bound=MatchableCategory)

# Ordering matters: buckets are consulted top to bottom.
PROVIDER_CATEGORY_BUCKETS: list[tuple[str, tuple[str, ...]]] = [
    ("FOOD_AND_DRINK", ("food", "restaurant", "dining", "grocery")),
    ("TRANSPORTATION", ("gas", "uber", "lyft", "transit", "parking")),
    ("ENTERTAINMENT", ("movie", "theater", "concert", "game")),
    ("SHOPPING", ("amazon", "store", "retail", "mall")),
    ("BILLS_AND_UTILITIES", ("utility", "electric", "water", "internet", "phone")),
    ("HEALTHCARE", ("medical", "doctor", "pharmacy", "hospital")),
    ("EDUCATION", ("school", "tuition", "book", "course")),
    ("TRAVEL", ("hotel", "flight", "vacation", "trip")),
]


def build_search_text(name: str | None, merchant_name: str | None) -> str:
    return f"{name or ''} {merchant_name or ''}".lower()


def match_by_keywords(search_text: str, categories: Iterable[C]) -> C | None:
    """Return the first category owning a keyword contained in ``search_text``."""
    for category in categories:
        for keyword in category.keywords or []:
            if keyword and keyword.lower() in search_text:
                return category
    return None


def match_by_provider_category(
    provider_category: str | None, categories: Sequence[C]
) -> C | None:
    """Map a provider category label onto a user category via generic words."""
    if not provider_category:
        return None

    for bucket, generic_words in PROVIDER_CATEGORY_BUCKETS:
        if bucket not in provider_category:
            continue
        for category in categories:
            for keyword in category.keywords or []:
                lowered = keyword.lower()
                if any(word in lowered for word in generic_words):
                    return category
    return None


def categorize(transaction: MatchableTransaction, categories: Sequence[C]) -> C | None:
    """Pick the category for a transaction, or None when nothing matches.

    Args:
        transaction: Anything with ``name``, ``merchant_name`` and
            ``provider_category`` attributes.
        categories: The user's categories in enumeration order.

    Returns:
        The matching category object from ``categories``.
    """
    search_text = build_search_text(transaction.name, transaction.merchant_name)
    matched = match_by_keywords(search_text, categories)
    if matched is not None:
        return matched
    return match_by_provider_category(transaction.provider_category, categories)


def suggested_keywords(name: str | None, merchant_name: str | None) -> list[str]:
    """Keywords a user could add to catch similar transactions."""
    candidates = [(name or "").lower()]
    if merchant_name:
        candidates.append(merchant_name.lower())
    return [keyword for keyword in candidates if keyword and len(keyword) > 2]


def merge_keywords(existing: Iterable[str] | None, additions: Iterable[str]) -> list[str]:
    """Append ``additions`` to ``existing``, dropping exact duplicates, order kept."""
    merged: list[str] = []
    for keyword in list(existing or []) + list(additions):
        if keyword and keyword not in merged:
            merged.append(keyword)
    return merged

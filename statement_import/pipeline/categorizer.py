"""
Categorizer

Assigns a category (and maybe a subcategory) to each candidate row.

Three tiers, first success wins:
1. Merchant keywords found in the description (MERCHANT_MAPPINGS)
2. Exact, case-insensitive match of the CSV's category label against the
   known category names, then against their subcategory names
3. Substring match, either direction, between label and category name

When every tier fails the row lands in "Otros". Categorization never fails.
"""

from collections.abc import Sequence
from typing import Optional

from statement_import.config.merchants import MERCHANT_MAPPINGS
from statement_import.models.transaction import (
    FALLBACK_CATEGORY,
    CandidateTransaction,
    CategoryDefinition,
    CategoryMatch,
    MerchantMapping,
)


def detect_category_from_description(
    description: Optional[str],
    mappings: Sequence[MerchantMapping] = MERCHANT_MAPPINGS,
) -> Optional[CategoryMatch]:
    """
    Find the first merchant mapping with a keyword inside the description.

    Matching is a substring search against the uppercased description, in
    table order. Returns None when no mapping matches.
    """
    if not description:
        return None

    upper = description.upper()

    for mapping in mappings:
        if any(keyword in upper for keyword in mapping.keywords):
            return CategoryMatch(
                category=mapping.category,
                sub_category=mapping.sub_category,
            )

    return None


def map_category(
    raw_label: Optional[str],
    available_categories: Sequence[CategoryDefinition],
    description: Optional[str] = None,
) -> CategoryMatch:
    """
    Resolve a row's category from its description and CSV label.

    A merchant match on the description always outranks the label.
    """
    if description:
        detected = detect_category_from_description(description)
        if detected:
            return detected

    cleaned = (raw_label or "").strip().lower()
    if not cleaned:
        return CategoryMatch(category=FALLBACK_CATEGORY)

    for cat in available_categories:
        if cat.name.lower() == cleaned:
            return CategoryMatch(category=cat.name)

        for sub in cat.sub_categories:
            if sub.lower() == cleaned:
                return CategoryMatch(category=cat.name, sub_category=sub)

    for cat in available_categories:
        name = cat.name.lower()
        if cleaned in name or name in cleaned:
            return CategoryMatch(category=cat.name)

    return CategoryMatch(category=FALLBACK_CATEGORY)


def detect_subcategory(
    description: Optional[str],
    category: str,
    categories: Sequence[CategoryDefinition],
) -> Optional[str]:
    """
    Return the first subcategory of ``category`` named inside the description.

    None when the category is unknown or no subcategory name appears.
    """
    if not description:
        return None

    lowered = description.lower()
    owner = next((c for c in categories if c.name == category), None)
    if owner is None:
        return None

    for sub in owner.sub_categories:
        if sub.lower() in lowered:
            return sub

    return None


def categorize_candidates(
    candidates: Sequence[CandidateTransaction],
    categories: Sequence[CategoryDefinition],
) -> list[CandidateTransaction]:
    """
    Return copies of the candidates with category and subcategory filled in.
    """
    categorized = []
    for candidate in candidates:
        match = map_category(candidate.raw_category, categories, candidate.description)
        sub_category = match.sub_category or detect_subcategory(
            candidate.description, match.category, categories
        )
        categorized.append(candidate.model_copy(update={
            "category": match.category,
            "sub_category": sub_category,
        }))
    return categorized

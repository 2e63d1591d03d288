"""
Relation label normalization and strength ordering.

normalize_relation maps free text to a canonical category through the
synonym table. stronger_relation is the only conflict-resolution rule used
when the same ordered pair receives several answers.
"""

from typing import Dict, Mapping, Optional, Sequence


def build_normalization_map(relation_groups: Mapping[str, Sequence[str]]) -> Dict[str, str]:
    """
    Invert canonical -> variants groups into a variant -> canonical table.

    Variants are lowercased. When a variant is listed under several
    categories, the last group wins.
    """
    table: Dict[str, str] = {}
    for canon, variants in relation_groups.items():
        for variant in variants:
            table[variant.lower()] = canon
    return table


def normalize_relation(raw: Optional[str], synonyms: Mapping[str, str]) -> Optional[str]:
    """
    Canonical category for a raw answer.

    Returns None for a missing or blank answer. Otherwise the synonym
    table's category for the trimmed, lowercased text, or that text itself
    when it has no synonym entry.
    """
    if not raw:
        return None
    key = raw.strip().lower()
    if not key:
        return None
    return synonyms.get(key, key)


def relation_rank(category: Optional[str], hierarchy: Sequence[str]) -> Optional[int]:
    """Index of ``category`` in the hierarchy, None if unranked."""
    if category is None:
        return None
    try:
        return list(hierarchy).index(category)
    except ValueError:
        return None


def stronger_relation(
    current: Optional[str], candidate: Optional[str], hierarchy: Sequence[str]
) -> Optional[str]:
    """
    Pick the stronger of two canonical categories.

    Rules, in order:
        - a missing side loses to the other one
        - two unranked categories: ``current`` is kept (first seen wins)
        - ranked beats unranked
        - smaller hierarchy index wins
        - equal rank: ``candidate`` wins (later answer overrides)
    """
    if not current:
        return candidate
    if not candidate:
        return current

    current_rank = relation_rank(current, hierarchy)
    candidate_rank = relation_rank(candidate, hierarchy)

    if current_rank is None and candidate_rank is None:
        return current
    if current_rank is None:
        return candidate
    if candidate_rank is None:
        return current
    return current if current_rank < candidate_rank else candidate


__all__ = [
    "build_normalization_map",
    "normalize_relation",
    "relation_rank",
    "stronger_relation",
]

"""
Heuristic Ranker

Ranks cards against a free-text query without any network access.
Used directly when the AI ranker is unavailable and as its fallback on any failure.
"""

from typing import List, Sequence, Tuple

from models import Benefit, Card, RankedItem, RankedResult


HEURISTIC_REASONING = "Heuristic ranking fallback used."


def benefit_matches(benefit: Benefit, needle: str) -> bool:
    """
    Substring match of a lower-cased needle against category or description

    Args:
        benefit: Benefit to inspect
        needle: Already lower-cased search text

    Returns:
        True if the category or description contains the needle
    """
    if needle in benefit.category.lower():
        return True
    return bool(benefit.description) and needle in benefit.description.lower()


def relevant_benefits(card: Card, query: str) -> List[Benefit]:
    """Benefits of a card matching the query, in card order."""
    needle = query.strip().lower()
    if not needle:
        return []
    return [b for b in card.benefits if benefit_matches(b, needle)]


def score_card(card: Card, query: str) -> float:
    relevant = relevant_benefits(card, query)
    if not relevant:
        return 0
    return max(b.value for b in relevant)


def score_cards(query: str, cards: Sequence[Card]) -> List[Tuple[str, float]]:
    """
    (name, score) pairs sorted by score descending

    sorted() is stable, so equal scores keep catalog order.
    """
    scored = [(card.name, score_card(card, query)) for card in cards]
    return sorted(scored, key=lambda pair: pair[1], reverse=True)


def rank(query: str, cards: Sequence[Card]) -> RankedResult:
    """
    Deterministic ranking by best matching benefit value

    Args:
        query: Free-text user query
        cards: Catalog snapshot

    Returns:
        RankedResult covering every card, tagged as heuristic
    """
    return RankedResult(
        results=[RankedItem(name=name) for name, _ in score_cards(query, cards)],
        reasoning=HEURISTIC_REASONING,
        source="heuristic",
    )

"""
Result Resolver

Maps ranked card names back to catalog records and derives the display
metadata for the results table: a short label for the query, the key used to
pick each row's best-match benefit, and the row contents themselves.
"""

from typing import Dict, List, Optional, Sequence, Tuple

from models import (
    CATEGORIES,
    Benefit,
    BenefitType,
    Card,
    RankedResult,
    ResolvedSearchResult,
    ResultRow,
)
from agents.heuristic_ranker import relevant_benefits


DEFAULT_DISPLAY_QUERY = "Top Picks"
PLACEHOLDER = "—"
EMPTY_RESULT_MESSAGE = (
    'No matching cards found. Try searching for popular categories like '
    '"Amazon", "Travel", "Dining", or "Fuel".'
)


def _max_value_benefit(benefits: Sequence[Benefit]) -> Optional[Benefit]:
    """Highest-value benefit; the first one wins on ties."""
    best = None
    for benefit in benefits:
        if best is None or benefit.value > best.value:
            best = benefit
    return best


def derive_display_label(raw_query: str, top_card: Optional[Card]) -> Tuple[str, str]:
    """
    Short label for the query plus the normalized key used for row highlighting

    Args:
        raw_query: Query as typed by the user
        top_card: First resolved card, if any

    Returns:
        (display_query, match_key)
    """
    lowered = raw_query.lower()
    for category in CATEGORIES:
        if category.lower() in lowered:
            return category, category.lower()

    if top_card is not None:
        top_benefit = _max_value_benefit(top_card.benefits)
        if top_benefit is not None:
            return top_benefit.category, top_benefit.category.lower()

    return DEFAULT_DISPLAY_QUERY, ""


def best_match_benefit(card: Card, key: str) -> Optional[Benefit]:
    """
    Benefit shown in a card's row

    Highest-value benefit matching the key, else the card's highest-value
    benefit, else None.
    """
    pool = relevant_benefits(card, key) or card.benefits
    return _max_value_benefit(pool)


def format_benefit(benefit: Optional[Benefit]) -> str:
    if benefit is None:
        return PLACEHOLDER
    value = f"{benefit.value:g}"
    suffix = " RP" if benefit.type == BenefitType.REWARD_POINTS else ""
    return f"{benefit.category}: {value}%{suffix}"


def build_rows(
    cards: Sequence[Card],
    reasons: Dict[str, Optional[str]],
    match_key: str,
    raw_query: str,
) -> List[ResultRow]:
    key = match_key or raw_query
    rows = []
    for card in cards:
        best = best_match_benefit(card, key)
        rows.append(ResultRow(
            name=card.name,
            best_benefit=best,
            best_benefit_label=format_benefit(best),
            description=card.description or PLACEHOLDER,
            reason=reasons.get(card.name) or PLACEHOLDER,
        ))
    return rows


def resolve(ranked: RankedResult, cards: Sequence[Card], raw_query: str) -> ResolvedSearchResult:
    """
    Turn a ranking into display-ready search results

    Args:
        ranked: Output of the AI or heuristic ranker
        cards: The catalog snapshot that was ranked
        raw_query: Query as typed by the user

    Returns:
        ResolvedSearchResult in rank order; names missing from the catalog are dropped
    """
    # Duplicate names: the later card wins
    name_to_card = {card.name: card for card in cards}

    resolved: List[Card] = []
    seen = set()
    for item in ranked.results:
        card = name_to_card.get(item.name)
        if card is None or item.name in seen:
            continue
        seen.add(item.name)
        resolved.append(card)

    reasons: Dict[str, Optional[str]] = {}
    for item in ranked.results:
        reasons[item.name] = item.reason

    display_query, match_key = derive_display_label(raw_query, resolved[0] if resolved else None)

    return ResolvedSearchResult(
        query=raw_query,
        cards=resolved,
        reasons=reasons,
        reasoning=ranked.reasoning,
        display_query=display_query,
        match_key=match_key,
        rows=build_rows(resolved, reasons, match_key, raw_query),
        source=ranked.source,
        empty_message=None if resolved else EMPTY_RESULT_MESSAGE,
    )

"""
Card search service

Runs one "find the best card" search: AI ranking (with heuristic fallback)
followed by result resolution, and keeps the display state of the latest search.

Searches are not queued. Each search takes a monotonic request id; a search
whose ranking finishes after a newer search has started still returns its own
result to its caller, but never overwrites the display state.
"""

import itertools
import logging
from typing import Optional, Protocol, Sequence, Tuple

from models import Card, RankedResult, ResolvedSearchResult
from agents.result_resolver import resolve

logger = logging.getLogger(__name__)

STATUS_IDLE = "idle"
STATUS_SEARCHING = "searching"
STATUS_RESOLVED = "resolved"


class Ranker(Protocol):
    async def rank(self, query: str, cards: Sequence[Card]) -> RankedResult:
        ...


class CardSearchService:
    """Search entry point shared by the HTTP layer"""

    def __init__(self, ranker: Ranker):
        self.ranker = ranker
        self._request_ids = itertools.count(1)
        self.latest_request_id = 0
        self.status = STATUS_IDLE
        self.active_query: Optional[str] = None
        self.result: Optional[ResolvedSearchResult] = None
        self.snapshot: Tuple[Card, ...] = ()

    def on_snapshot(self, cards: Sequence[Card]) -> None:
        """Catalog subscription callback; the next search ranks this snapshot."""
        self.snapshot = tuple(cards)

    def is_latest(self, request_id: int) -> bool:
        return request_id == self.latest_request_id

    async def search(self, query: str, cards: Sequence[Card]) -> Optional[ResolvedSearchResult]:
        """
        Rank and resolve cards for a query

        Args:
            query: Free-text query; blank queries are ignored
            cards: Catalog snapshot to rank

        Returns:
            ResolvedSearchResult, or None for a blank query (state unchanged)
        """
        effective_query = (query or "").strip()
        if not effective_query:
            return None

        # Later catalog updates must not leak into this search
        snapshot = tuple(cards)

        request_id = next(self._request_ids)
        self.latest_request_id = request_id
        self.status = STATUS_SEARCHING
        self.active_query = effective_query
        self.result = None

        try:
            ranked = await self.ranker.rank(effective_query, snapshot)
            result = resolve(ranked, snapshot, effective_query)
        finally:
            # Searching never outlives the latest request, even when ranking raises
            if self.is_latest(request_id) and self.status == STATUS_SEARCHING:
                self.status = STATUS_IDLE

        if self.is_latest(request_id):
            self.result = result
            self.status = STATUS_RESOLVED
        else:
            logger.info(
                "Discarding stale search result (request %d, latest %d)",
                request_id,
                self.latest_request_id,
            )
        return result

    async def search_latest(self, query: str) -> Optional[ResolvedSearchResult]:
        """Search against the most recent catalog snapshot."""
        return await self.search(query, self.snapshot)

    def clear(self) -> None:
        """
        Drop the displayed result and return to idle

        Any search still in flight becomes stale and will not be applied.
        """
        self.latest_request_id = next(self._request_ids)
        self.status = STATUS_IDLE
        self.active_query = None
        self.result = None

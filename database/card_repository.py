"""
Card repository

Catalog store on top of the MongoDB cards collection: read-all, read-one,
create, update and change subscription. Documents are keyed by a slug of the
card name and written with merge semantics ($set), so fields a caller does
not send are preserved.
"""

import logging
import threading
from datetime import datetime, timezone
from typing import Callable, Iterator, List, Optional, Sequence

from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from models import Card
from database.card_mapper import card_to_document, document_to_card, slugify
from utils.index import measure_time

logger = logging.getLogger(__name__)

SnapshotCallback = Callable[[List[Card]], None]


class CardNotFoundError(LookupError):
    """No card document with the given id."""


class CardRepository:
    """MongoDB-backed card catalog"""

    def __init__(self, collection: Collection, watch_interval_ms: int = 1000):
        """
        Args:
            collection: The cards collection
            watch_interval_ms: Max wait per change-stream poll; bounds how long unsubscribe takes
        """
        self.collection = collection
        self.watch_interval_ms = watch_interval_ms

    @measure_time("cards.get_all", verbose=False)
    def get_all(self) -> List[Card]:
        """Full catalog snapshot, ordered by document id."""
        return [document_to_card(doc) for doc in self.collection.find({}).sort("_id", 1)]

    def get(self, card_id: str) -> Card:
        doc = self.collection.find_one({"_id": card_id})
        if doc is None:
            raise CardNotFoundError(card_id)
        return document_to_card(doc)

    def list_with_ids(self) -> List[dict]:
        return [
            {"id": doc["_id"], "card": document_to_card(doc)}
            for doc in self.collection.find({}).sort("_id", 1)
        ]

    def allocate_id(self, name: str, reserved: Sequence[str] = ()) -> str:
        """Free document id for a card name: its slug, or slug-2, slug-3, ..."""
        base = slugify(name)
        candidate = base
        suffix = 1
        while candidate in reserved or self.collection.find_one({"_id": candidate}, {"_id": 1}) is not None:
            suffix += 1
            candidate = f"{base}-{suffix}"
        return candidate

    def create(self, card: Card, reserved: Sequence[str] = ()) -> str:
        """
        Store a new card

        Args:
            card: Card to store
            reserved: Ids already taken by the caller's own pending writes

        Returns:
            The new document id (name slug, with -2, -3, ... on collision)
        """
        card_id = self.allocate_id(card.name, reserved)
        now = datetime.now(timezone.utc)
        self.collection.update_one(
            {"_id": card_id},
            {"$set": {**card_to_document(card), "createdAt": now}},
            upsert=True,
        )
        logger.info("Card created: %s", card_id)
        return card_id

    def update(self, card: Card, card_id: Optional[str] = None) -> str:
        """
        Merge an edited card into its document

        Args:
            card: Edited card
            card_id: Document to update. When omitted the id is derived from
                the card's current name and the document is upserted, so a
                renamed card lands in a new document.

        Returns:
            The id that was written

        Raises:
            CardNotFoundError: card_id was given but does not exist
        """
        target = card_id or slugify(card.name)
        now = datetime.now(timezone.utc)
        result = self.collection.update_one(
            {"_id": target},
            {"$set": {**card_to_document(card), "updatedAt": now}},
            upsert=card_id is None,
        )
        if card_id is not None and result.matched_count == 0:
            raise CardNotFoundError(card_id)
        logger.info("Card updated: %s", target)
        return target

    def snapshots(self, stop_event: Optional[threading.Event] = None) -> Iterator[List[Card]]:
        """
        Lazy stream of full catalog snapshots

        Yields the current catalog first, then a fresh full snapshot after
        every change event. Each call opens its own change stream, so the
        sequence can be restarted by calling again.

        Args:
            stop_event: Ends the stream once set (checked between polls)
        """
        with self.collection.watch(max_await_time_ms=self.watch_interval_ms) as stream:
            yield self.get_all()
            while stream.alive:
                if stop_event is not None and stop_event.is_set():
                    return
                change = stream.try_next()
                if change is None:
                    continue
                yield self.get_all()

    def subscribe(self, on_change: SnapshotCallback) -> Callable[[], None]:
        """
        Call on_change with every catalog snapshot from a background thread

        Returns:
            unsubscribe function; waits for the thread to finish its current poll
        """
        stop_event = threading.Event()

        def _run():
            try:
                for cards in self.snapshots(stop_event):
                    if stop_event.is_set():
                        break
                    on_change(cards)
            except PyMongoError as e:
                # Change streams need a replica set; the catalog still works without them
                logger.warning("Card subscription stopped: %s", e)

        thread = threading.Thread(target=_run, name="card-subscription", daemon=True)
        thread.start()

        def unsubscribe():
            stop_event.set()
            # the worker notices the stop between polls
            thread.join(timeout=self.watch_interval_ms / 1000 + 1)
            if thread.is_alive():
                logger.warning("Card subscription thread did not stop in time")

        return unsubscribe

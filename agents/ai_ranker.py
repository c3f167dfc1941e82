"""
AI Ranker Agent

Asks an LLM to rank the card catalog for a free-text query and explain why.
The model output is only loosely structured, so the first JSON object in the
reply is extracted and parsed permissively (several field aliases, bare strings,
the older rankedCardNames shape).

Any failure (no client, transport error, timeout, unparseable or wrongly shaped
reply) falls back to the heuristic ranker. rank() never raises.
"""

import os
import re
import json
import logging
from typing import Any, Dict, List, Optional, Sequence

from openai import AsyncOpenAI
from dotenv import load_dotenv

from models import Card, RankedItem, RankedResult, RankResponse
from agents import heuristic_ranker
from security.prompt_validator import PromptValidator
from utils.index import measure_time

load_dotenv()

logger = logging.getLogger(__name__)

MAX_RESULTS = 5

NAME_KEYS = ("name", "card", "title")
REASON_KEYS = ("reason", "why", "explanation")

SYSTEM_PROMPT = """You are a credit card rewards expert. Rank the given credit cards for the user's query.
Return STRICT JSON with keys: results (array of up to 5 objects with keys name and optional reason) and reasoning (short string)."""

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


class AIRankingError(ValueError):
    """Raised internally when the model reply cannot be turned into a ranking."""


def compact_cards(cards: Sequence[Card]) -> List[Dict[str, Any]]:
    """
    Strip cards down to the fields that matter for ranking

    Args:
        cards: Catalog snapshot

    Returns:
        JSON-ready dicts with name, bankName, cardType, feesAndCharges and
        benefits reduced to category/type/value/description
    """
    compact = []
    for card in cards:
        compact.append({
            "name": card.name,
            "bankName": card.bankName.value,
            "cardType": card.cardType.value,
            "feesAndCharges": card.feesAndCharges.model_dump(mode="json", exclude_none=True),
            "benefits": [
                {
                    "category": b.category,
                    "type": b.type.value,
                    "value": b.value,
                    "description": b.description or "",
                }
                for b in card.benefits
            ],
        })
    return compact


def build_prompt(query: str, compact: List[Dict[str, Any]]) -> str:
    user_prompt = f"Query: {query}\nCards: {json.dumps(compact, ensure_ascii=False)}"
    return f"{SYSTEM_PROMPT}\n\n{user_prompt}"


def extract_json_object(text: Optional[str]) -> Optional[str]:
    """
    First '{' through last '}' of the reply

    The model may wrap the JSON in prose; the span is greedy so nested
    objects stay intact.
    """
    if not text:
        return None
    match = _JSON_OBJECT.search(text)
    return match.group(0) if match else None


def _first_present(obj: Dict[str, Any], keys: Sequence[str]) -> Any:
    for key in keys:
        if obj.get(key) is not None:
            return obj[key]
    return None


def _to_ranked_item(entry: Any) -> Optional[RankedItem]:
    if isinstance(entry, str):
        return RankedItem(name=entry) if entry else None
    if isinstance(entry, dict):
        name = _first_present(entry, NAME_KEYS)
        reason = _first_present(entry, REASON_KEYS)
        name = "" if name is None else str(name)
        if not name:
            return None
        return RankedItem(name=name, reason=None if reason is None else str(reason))
    return None


def parse_ranking(payload: Any) -> RankedResult:
    """
    Validate and normalize a parsed model reply

    Args:
        payload: Result of json.loads on the extracted object

    Returns:
        RankedResult with at most MAX_RESULTS entries, tagged as ai

    Raises:
        AIRankingError: Neither results nor rankedCardNames is a list
    """
    if not isinstance(payload, dict):
        raise AIRankingError("Model reply is not a JSON object")

    reasoning = payload.get("reasoning")
    if not isinstance(reasoning, str):
        reasoning = None

    results = payload.get("results")
    if isinstance(results, list):
        items = [item for item in map(_to_ranked_item, results) if item is not None]
        return RankedResult(results=items[:MAX_RESULTS], reasoning=reasoning, source="ai")

    # Older replies only carried a list of names
    names = payload.get("rankedCardNames")
    if isinstance(names, list):
        items = [RankedItem(name=n) for n in names if isinstance(n, str)]
        return RankedResult(results=items[:MAX_RESULTS], reasoning=reasoning, source="ai")

    raise AIRankingError("Model reply has neither results nor rankedCardNames")


def parse_model_reply(text: Optional[str]) -> RankedResult:
    raw = extract_json_object(text)
    if raw is None:
        raise AIRankingError("No JSON object found in model reply")
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        raise AIRankingError(f"Model reply is not valid JSON: {e}") from e
    return parse_ranking(payload)


class AIRanker:
    """LLM-backed card ranker with heuristic fallback"""

    def __init__(
        self,
        client: Optional[AsyncOpenAI] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        validator: Optional[PromptValidator] = None,
    ):
        """
        Args:
            client: Shared AsyncOpenAI client (None disables the AI step)
            model: Model name (env AI_RANK_MODEL, default gpt-5-mini)
            timeout: Per-request timeout in seconds (env AI_RANK_TIMEOUT_SECONDS, default 20)
            validator: Prompt-injection detector for the query
        """
        self.client = client
        self.model = model or os.getenv("AI_RANK_MODEL", "gpt-5-mini")
        self.timeout = timeout if timeout is not None else float(os.getenv("AI_RANK_TIMEOUT_SECONDS", "20"))
        self.validator = validator or PromptValidator()

    @property
    def enabled(self) -> bool:
        return self.client is not None

    async def _complete(self, prompt: str) -> Optional[str]:
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            timeout=self.timeout,
        )
        return response.choices[0].message.content

    @measure_time("ai_rank")
    async def rank(self, query: str, cards: Sequence[Card]) -> RankedResult:
        """
        Rank cards for a query, degrading to the heuristic on any failure

        Args:
            query: Free-text user query
            cards: Catalog snapshot

        Returns:
            RankedResult (source "ai" on success, "heuristic" otherwise)
        """
        if not self.enabled:
            logger.info("AI ranking disabled, using heuristic")
            return heuristic_ranker.rank(query, cards)

        is_valid, matched = self.validator.validate(query)
        if not is_valid:
            logger.warning("[SECURITY] Prompt attack patterns %s, skipping AI ranking", matched)
            return heuristic_ranker.rank(query, cards)

        prompt = build_prompt(self.validator.sanitize(query), compact_cards(cards))
        try:
            text = await self._complete(prompt)
            return parse_model_reply(text)
        except Exception as e:
            logger.warning("AI ranking failed, falling back to heuristic: %s", e)
            return heuristic_ranker.rank(query, cards)

    async def rank_card_names(self, query: str, cards: Sequence[Card]) -> RankResponse:
        """Ranking in the {rankedCardNames, reasoning} shape served by POST /rank."""
        ranked = await self.rank(query.strip(), cards)
        return RankResponse(
            rankedCardNames=[item.name for item in ranked.results],
            reasoning=ranked.reasoning,
        )

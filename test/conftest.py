"""
Shared test fixtures

Catalog fixtures, an in-memory MongoDB (mongomock) and a stubbed AsyncOpenAI client.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import mongomock
import pytest

from models import Card
from database.card_repository import CardRepository
from database.mongodb_client import MongoDBClient


@pytest.fixture
def catalog():
    """
    Small catalog

    "amazon" scores 5 for both the Amazon Pay card (category) and Millennia
    (description of its Online Shopping benefit), in that catalog order.
    """
    return [
        Card.model_validate({
            "name": "Amazon Pay ICICI Credit Card",
            "bankName": "ICICI Bank",
            "cardType": "cobrand",
            "description": "Best for Amazon shopping",
            "benefits": [
                {"category": "Amazon", "type": "cashback", "value": 5, "description": "For Prime members"},
                {"category": "Amazon", "type": "cashback", "value": 3, "description": "For non-Prime members"},
                {"category": "General", "type": "cashback", "value": 1},
            ],
        }),
        Card.model_validate({
            "name": "Flipkart Axis Bank Credit Card",
            "bankName": "Axis Bank",
            "cardType": "cobrand",
            "description": "Best for Flipkart shopping and partner merchants",
            "benefits": [
                {"category": "Flipkart", "type": "cashback", "value": 5},
                {"category": "Uber", "type": "cashback", "value": 4},
                {"category": "General", "type": "cashback", "value": 1.5},
            ],
        }),
        Card.model_validate({
            "name": "HDFC Millennia Credit Card",
            "bankName": "HDFC Bank",
            "description": "Cashback on popular online merchants",
            "benefits": [
                {"category": "Online Shopping", "type": "cashback", "value": 5,
                 "description": "Accelerated cashback on Amazon and Flipkart"},
                {"category": "Amazon", "type": "cashback", "value": 2.5},
                {"category": "General", "type": "cashback", "value": 1},
            ],
        }),
        Card.model_validate({
            "name": "ICICI Bank Sapphiro Credit Card",
            "bankName": "ICICI Bank",
            "cardType": "premium",
            "benefits": [
                {"category": "Travel", "type": "reward_points", "value": 4},
                {"category": "Dining", "type": "reward_points", "value": 4},
                {"category": "General", "type": "reward_points", "value": 1},
            ],
        }),
    ]


@pytest.fixture
def cards_by_name(catalog):
    return {card.name: card for card in catalog}


@pytest.fixture
def mongo_client():
    client = MongoDBClient(
        db_name="cardwise_test",
        collection_name="cards",
        client=mongomock.MongoClient(),
    )
    yield client
    client.close()


@pytest.fixture
def repository(mongo_client):
    return CardRepository(mongo_client.get_collection())


@pytest.fixture
def seeded_repository(repository, catalog):
    for card in catalog:
        repository.create(card)
    return repository


def make_openai_client(content=None, error=None):
    """
    AsyncOpenAI stand-in whose chat.completions.create returns `content`
    (or raises `error`)
    """
    response = SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))]
    )
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=response, side_effect=error)
    client.close = AsyncMock()
    return client


@pytest.fixture
def openai_client_factory():
    return make_openai_client

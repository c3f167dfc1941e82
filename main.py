from fastapi import Body, Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional
import logging
import os

import uvicorn
from dotenv import load_dotenv
from openai import AsyncOpenAI
from pydantic import ValidationError
from pymongo.errors import PyMongoError

from models import (
    CATEGORIES,
    POPULAR_QUERIES,
    Card,
    CardCreatedResponse,
    RankRequest,
    RankResponse,
    SearchRequest,
)
from agents.ai_ranker import AIRanker
from agents.card_search import CardSearchService
from database.card_repository import CardNotFoundError, CardRepository
from database.mongodb_client import MongoDBClient
from security.admin_auth import require_admin_auth

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("cardwise")

PLACEHOLDER_API_KEY = "your_openai_api_key_here"


def _openai_key_configured() -> bool:
    api_key = os.getenv("OPENAI_API_KEY")
    return bool(api_key) and api_key != PLACEHOLDER_API_KEY


def _build_openai_client() -> Optional[AsyncOpenAI]:
    if not _openai_key_configured():
        logger.warning("OPENAI_API_KEY is not set; search will use heuristic ranking only.")
        return None
    return AsyncOpenAI(api_key=os.getenv("OPENAI_API_KEY"))


def _build_mongo_client() -> Optional[MongoDBClient]:
    try:
        return MongoDBClient()
    except (ValueError, ConnectionError) as e:
        logger.error("MongoDB initialization failed: %s", e)
        logger.error("Card catalog endpoints will be unavailable.")
        return None


def create_app(
    mongo_client: Optional[MongoDBClient] = None,
    openai_client: Optional[AsyncOpenAI] = None,
    subscribe_catalog: bool = True,
) -> FastAPI:
    """
    Build the API application

    Args:
        mongo_client: Shared MongoDB client (built from the environment when omitted)
        openai_client: Shared AsyncOpenAI client (built from OPENAI_API_KEY when omitted)
        subscribe_catalog: Follow catalog changes through a change stream
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting card search service...")

        owns_mongo = mongo_client is None
        mongo = mongo_client or _build_mongo_client()
        repository = CardRepository(mongo.get_collection()) if mongo else None

        owns_openai = openai_client is None
        ai_client = openai_client or _build_openai_client()
        search_service = CardSearchService(AIRanker(client=ai_client))

        unsubscribe = None
        if repository is not None and subscribe_catalog:
            unsubscribe = repository.subscribe(search_service.on_snapshot)

        app.state.mongo_client = mongo
        app.state.card_repository = repository
        app.state.ai_ranker = search_service.ranker
        app.state.search_service = search_service
        app.state.catalog_subscribed = unsubscribe is not None
        logger.info("Service ready (catalog: %s, AI ranking: %s)",
                    "available" if repository else "unavailable",
                    "enabled" if ai_client else "disabled")

        yield

        logger.info("Shutting down...")
        if unsubscribe:
            unsubscribe()
        if owns_openai and ai_client is not None:
            await ai_client.close()
        if owns_mongo and mongo is not None:
            mongo.close()

    app = FastAPI(
        title="Cardwise",
        description="Credit card catalog with AI-ranked best card search",
        version="0.1.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_routes(app)
    return app


# ========== Dependencies ==========

def get_repository(request: Request) -> CardRepository:
    repository = getattr(request.app.state, "card_repository", None)
    if repository is None:
        raise HTTPException(status_code=503, detail="Card catalog is unavailable. Check the MongoDB configuration.")
    return repository


def get_search_service(request: Request) -> CardSearchService:
    return request.app.state.search_service


def _current_catalog(request: Request, repository: CardRepository) -> List[Card]:
    """Latest subscribed snapshot, or a fresh read when there is none yet."""
    search_service = request.app.state.search_service
    if request.app.state.catalog_subscribed and search_service.snapshot:
        return list(search_service.snapshot)
    try:
        return repository.get_all()
    except PyMongoError as e:
        raise HTTPException(status_code=503, detail=f"Failed to read the card catalog: {e}")


def _register_routes(app: FastAPI) -> None:

    @app.get("/")
    async def root():
        """Service information."""
        return {
            "service": "Cardwise credit card search",
            "version": "0.1.0",
            "endpoints": {
                "GET /cards": "List the card catalog",
                "GET /cards/{card_id}": "Card detail",
                "POST /cards": "Add a card (admin)",
                "PUT /cards/{card_id}": "Update a card (admin)",
                "GET /categories": "Benefit categories and popular searches",
                "POST /search": "Find the best cards for a query",
                "POST /rank": "Rank a supplied card list (server-side ranking)",
                "GET /health": "Service status"
            }
        }

    @app.get("/health")
    async def health_check(request: Request):
        mongo = getattr(request.app.state, "mongo_client", None)
        if mongo is None:
            mongodb_status = "unavailable"
        else:
            mongodb_status = "connected" if mongo.health_check() else "disconnected"
        ai_ranker = request.app.state.ai_ranker
        return {
            "status": "healthy",
            "mongodb": mongodb_status,
            "ai_ranking": "enabled" if ai_ranker.enabled else "disabled",
            "openai_api_key": "configured" if _openai_key_configured() else "not_configured"
        }

    @app.get("/categories")
    async def get_categories():
        return {"categories": CATEGORIES, "popular_queries": POPULAR_QUERIES}

    @app.get("/cards")
    async def list_cards(repository: CardRepository = Depends(get_repository)):
        try:
            entries = repository.list_with_ids()
        except PyMongoError as e:
            raise HTTPException(status_code=503, detail=f"Failed to read the card catalog: {e}")
        cards = [{"id": entry["id"], **entry["card"].model_dump(mode="json")} for entry in entries]
        return {"cards": cards, "total": len(cards)}

    @app.get("/cards/{card_id}")
    async def get_card(card_id: str, repository: CardRepository = Depends(get_repository)):
        try:
            card = repository.get(card_id)
        except CardNotFoundError:
            raise HTTPException(status_code=404, detail=f"Card not found: {card_id}")
        return {"id": card_id, **card.model_dump(mode="json")}

    @app.post(
        "/cards",
        status_code=201,
        response_model=CardCreatedResponse,
        dependencies=[Depends(require_admin_auth)],
    )
    async def create_card(card: Card, repository: CardRepository = Depends(get_repository)):
        try:
            card_id = repository.create(card)
        except PyMongoError as e:
            raise HTTPException(status_code=500, detail=f"Failed to save the card: {e}")
        return CardCreatedResponse(id=card_id, name=card.name)

    @app.put(
        "/cards/{card_id}",
        response_model=CardCreatedResponse,
        dependencies=[Depends(require_admin_auth)],
    )
    async def update_card(card_id: str, card: Card, repository: CardRepository = Depends(get_repository)):
        try:
            repository.update(card, card_id=card_id)
        except CardNotFoundError:
            raise HTTPException(status_code=404, detail=f"Card not found: {card_id}")
        except PyMongoError as e:
            raise HTTPException(status_code=500, detail=f"Failed to update the card: {e}")
        return CardCreatedResponse(id=card_id, name=card.name)

    @app.post("/search")
    async def search_cards(
        payload: SearchRequest,
        request: Request,
        repository: CardRepository = Depends(get_repository),
        search_service: CardSearchService = Depends(get_search_service),
    ):
        """
        Find the best cards for a free-text query

        - **query**: merchant, category or spending description (e.g. "I shop a lot on Flipkart")

        A blank query is ignored. Ranking failures never surface here; the
        heuristic ranking is used instead and `source` says which one ran.
        """
        if not payload.query.strip():
            return {"status": "ignored", "detail": "Empty query"}

        cards = _current_catalog(request, repository)
        result = await search_service.search(payload.query, cards)
        return result.model_dump(mode="json")

    @app.post("/rank", response_model=RankResponse)
    async def rank_cards(request: Request, payload: Dict[str, Any] = Body(...)):
        """
        Rank a caller-supplied card list

        Accepts {query, cards} and returns {rankedCardNames, reasoning}. The
        model credential stays on the server.
        """
        try:
            rank_request = RankRequest.model_validate(payload)
        except ValidationError:
            raise HTTPException(status_code=400, detail="Invalid payload")

        return await request.app.state.ai_ranker.rank_card_names(rank_request.query, rank_request.cards)


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=True,
        log_level="info"
    )

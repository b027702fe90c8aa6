"""
SRM Guide - Application Entry Point
====================================
FastAPI application factory.  Composes the shared services once per app
and stores them on ``app.state`` for the route handlers:

    config          → ``Settings``
    ai_client       → ``GeminiClient`` (one instance, read-only after start)
    conversations   → ``ConversationRegistry``
    question_store  → ``QuestionStore``
    search          → ``SearchAggregator``

Every service can be injected, which is how the tests swap in fakes.

Run:
    python -m srmguide.src.main
    uvicorn srmguide.src.main:create_app --factory
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI

from srmguide.config.settings import Settings, settings
from srmguide.src.api.routes import router
from srmguide.src.core.ai_client import GeminiClient
from srmguide.src.core.conversation import ConversationRegistry
from srmguide.src.core.search import SearchAggregator
from srmguide.src.database.record_store import QuestionStore
from srmguide.src.utils.logger import get_logger

logger = get_logger(__name__)


def create_app(ai_client: GeminiClient | None = None, question_store: Any | None = None, config: Settings | None = None) -> FastAPI:
    """Build the API with its service graph wired up."""
    cfg = config or settings
    client = ai_client or GeminiClient(config=cfg)
    store = question_store if question_store is not None else QuestionStore(config=cfg)

    app = FastAPI(title="SRM Guide", version="0.1.0")
    app.state.config = cfg
    app.state.ai_client = client
    app.state.conversations = ConversationRegistry(client)
    app.state.question_store = store
    app.state.search = SearchAggregator(store, config=cfg)
    app.include_router(router)

    logger.info("[API] App created (env=%s, ai_available=%s).", cfg.ENV, client.configured)
    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("srmguide.src.main:create_app", factory=True, host="127.0.0.1", port=8000)

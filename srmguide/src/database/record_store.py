"""
SRM Guide - Community Q&A Record Store
========================================
Async store for the community question board, backed by MongoDB via
``motor``.  Two collections:

``questions``::

    {
        "_id": str (uuid4),
        "user_id": str,
        "title": str,
        "content": str,
        "category": str,
        "status": "open" | "answered" | "closed",
        "upvotes": int,
        "created_at": datetime
    }

``answers``::

    {
        "_id": str (uuid4),
        "question_id": str,
        "user_id": str,
        "content": str,
        "upvotes": int,
        "is_best_answer": bool,
        "created_at": datetime
    }

Records are returned as plain dicts with ``_id`` renamed to ``id``.
Driver errors propagate to the caller.

Usage:
    from srmguide.src.database.record_store import QuestionStore
    store = QuestionStore()
    hits = await store.search_questions("attendance", limit=10)
"""

from __future__ import annotations

import re
import uuid
from datetime import datetime, timezone
from typing import Any, Literal

import motor.motor_asyncio

from srmguide.config.settings import Settings, settings
from srmguide.src.utils.logger import get_logger

logger = get_logger(__name__)

# ── Type aliases ───────────────────────────────────────────────────────
Record = dict[str, Any]
QuestionSort = Literal["recent", "popular", "unanswered"]

CATEGORIES: tuple[str, ...] = ("academics", "exams", "attendance", "hostel", "clubs", "placement", "general")
QUESTION_STATUSES: tuple[str, ...] = ("open", "answered", "closed")
_UPDATABLE_QUESTION_FIELDS: frozenset[str] = frozenset({"title", "content", "category", "status", "upvotes"})


# ══════════════════════════════════════════════════════════════════════
#  MONGODB SINGLETON CLIENT
# ══════════════════════════════════════════════════════════════════════

_mongo_client: motor.motor_asyncio.AsyncIOMotorClient | None = None


def _get_mongo_client(config: Settings) -> motor.motor_asyncio.AsyncIOMotorClient:
    """Return (or create) the module-level async MongoDB client."""
    global _mongo_client
    if _mongo_client is None:
        _mongo_client = motor.motor_asyncio.AsyncIOMotorClient(config.MONGO_URI.get_secret_value())
        logger.info("[STORE] MongoDB async client created (singleton).")
    return _mongo_client


def _to_record(doc: Record | None) -> Record | None:
    if doc is None:
        return None
    record = dict(doc)
    record["id"] = str(record.pop("_id"))
    return record


# ══════════════════════════════════════════════════════════════════════
#  QUESTION STORE
# ══════════════════════════════════════════════════════════════════════


class QuestionStore:
    """
    Questions and answers for the community board.

    Parameters
    ----------
    database
        Optional motor database (or a test double exposing
        ``db["questions"]`` / ``db["answers"]``).  Defaults to
        ``settings.MONGO_DB_NAME`` on the shared client.
    config
        Settings instance.  Defaults to the module singleton.
    """

    __slots__ = ("_questions", "_answers")

    def __init__(self, database: Any | None = None, config: Settings | None = None) -> None:
        cfg = config or settings
        db = database if database is not None else _get_mongo_client(cfg)[cfg.MONGO_DB_NAME]
        self._questions = db["questions"]
        self._answers = db["answers"]

    # ── Questions ─────────────────────────────────────────────────────

    async def search_questions(self, text: str, limit: int = 10) -> list[Record]:
        """Case-insensitive substring match on title or content, at most *limit* rows."""
        pattern = {"$regex": re.escape(text), "$options": "i"}
        cursor = self._questions.find({"$or": [{"title": pattern}, {"content": pattern}]}, {"title": 1, "content": 1, "category": 1, "created_at": 1}).limit(limit)
        docs = await cursor.to_list(length=limit)
        logger.debug("[STORE] search_questions(%r) → %d row(s).", text, len(docs))
        return [_to_record(doc) for doc in docs]  # type: ignore[misc]


    async def insert_question(self, user_id: str, title: str, content: str, category: str = "general") -> Record:
        """Create an open question with zero upvotes and return it."""
        if category not in CATEGORIES:
            raise ValueError(f"Unknown category: {category}")
        doc: Record = {"_id": uuid.uuid4().hex, "user_id": user_id, "title": title, "content": content, "category": category, "status": "open", "upvotes": 0, "created_at": datetime.now(timezone.utc)}
        await self._questions.insert_one(doc)
        logger.info("[STORE] Question %s created in '%s'.", doc["_id"], category)
        return _to_record(doc)  # type: ignore[return-value]


    async def update_question(self, question_id: str, **fields: Any) -> bool:
        """Update whitelisted fields.  Returns True if a question matched."""
        unknown = set(fields) - _UPDATABLE_QUESTION_FIELDS
        if unknown:
            raise ValueError(f"Cannot update question field(s): {', '.join(sorted(unknown))}")
        if "status" in fields and fields["status"] not in QUESTION_STATUSES:
            raise ValueError(f"Unknown status: {fields['status']}")
        if not fields:
            return await self.get_question(question_id) is not None
        result = await self._questions.update_one({"_id": question_id}, {"$set": fields})
        return result.matched_count > 0


    async def get_question(self, question_id: str) -> Record | None:
        return _to_record(await self._questions.find_one({"_id": question_id}))


    async def list_questions(self, category: str | None = None, sort: QuestionSort = "recent", limit: int = 50) -> list[Record]:
        """Board listing, optionally filtered by category."""
        query: Record = {}
        if category:
            query["category"] = category
        if sort == "unanswered":
            query["status"] = "open"
        order = [("upvotes", -1)] if sort == "popular" else [("created_at", -1)]
        docs = await self._questions.find(query).sort(order).limit(limit).to_list(length=limit)
        return [_to_record(doc) for doc in docs]  # type: ignore[misc]

    # ── Answers ───────────────────────────────────────────────────────

    async def insert_answer(self, question_id: str, user_id: str, content: str) -> Record:
        doc: Record = {"_id": uuid.uuid4().hex, "question_id": question_id, "user_id": user_id, "content": content, "upvotes": 0, "is_best_answer": False, "created_at": datetime.now(timezone.utc)}
        await self._answers.insert_one(doc)
        logger.info("[STORE] Answer %s added to question %s.", doc["_id"], question_id)
        return _to_record(doc)  # type: ignore[return-value]


    async def list_answers(self, question_id: str) -> list[Record]:
        """Best answer first, then by upvotes."""
        docs = await self._answers.find({"question_id": question_id}).sort([("is_best_answer", -1), ("upvotes", -1)]).to_list(length=None)
        return [_to_record(doc) for doc in docs]  # type: ignore[misc]


    async def upvote_answer(self, answer_id: str) -> bool:
        result = await self._answers.update_one({"_id": answer_id}, {"$inc": {"upvotes": 1}})
        return result.matched_count > 0


    async def mark_best_answer(self, question_id: str, answer_id: str) -> bool:
        """Make *answer_id* the only best answer of *question_id*."""
        await self._answers.update_many({"question_id": question_id}, {"$set": {"is_best_answer": False}})
        result = await self._answers.update_one({"_id": answer_id, "question_id": question_id}, {"$set": {"is_best_answer": True}})
        if result.matched_count:
            logger.info("[STORE] Answer %s marked best for question %s.", answer_id, question_id)
        return result.matched_count > 0

"""
SRM Guide - API Routes
=======================
Thin controllers: validate the request, delegate to the services stored
on ``app.state`` by ``create_app``, format the response.  No business
logic lives here.

Endpoints:
  - GET  /health                         → service + API-key status
  - POST /chat                           → open a conversation
  - GET  /chat/suggestions               → sample questions
  - GET  /chat/{chat_id}                 → conversation state
  - POST /chat/{chat_id}/message         → submit a user turn
  - GET  /search?q=                      → site search
  - POST /questions, GET /questions      → community board
  - GET  /questions/{question_id}        → question + answers
  - POST /questions/{question_id}/answers
  - POST /answers/{answer_id}/upvote
  - POST /questions/{question_id}/answers/{answer_id}/best
  - POST /blog/generate                  → AI blog draft
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, HTTPException, Query, Request
from pydantic import BaseModel, Field

from srmguide.config.prompt_templates import SAMPLE_QUESTIONS
from srmguide.src.core.config_gate import api_key_status
from srmguide.src.core.conversation import ConversationOrchestrator, ConversationState
from srmguide.src.database.record_store import QuestionSort
from srmguide.src.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


# ── Request models ─────────────────────────────────────────────────────

class MessageRequest(BaseModel):
    text: str


class QuestionCreateRequest(BaseModel):
    user_id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    category: str = "general"


class AnswerCreateRequest(BaseModel):
    user_id: str = Field(min_length=1)
    content: str = Field(min_length=1)


class BlogRequest(BaseModel):
    topic: str = Field(min_length=1)


# ── Helpers ────────────────────────────────────────────────────────────

def serialise_state(state: ConversationState) -> dict[str, Any]:
    return {
        "messages": [{"id": m.id, "text": m.text, "sender": m.sender.value, "created_at": m.created_at.isoformat(), "pending": m.pending} for m in state.messages],
        "busy": state.busy,
        "last_error": state.last_error,
    }


def _conversation(request: Request, chat_id: str) -> ConversationOrchestrator:
    try:
        return request.app.state.conversations.get(chat_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


# ── Health ─────────────────────────────────────────────────────────────

@router.get("/health")
def health(request: Request) -> dict[str, Any]:
    config = request.app.state.config
    return {
        "status": "ok",
        "model": config.LLM_MODEL,
        "ai_available": request.app.state.ai_client.configured,
        "api_key": asdict(api_key_status(config)),
        "conversations": len(request.app.state.conversations),
    }


# ── Chat ───────────────────────────────────────────────────────────────

@router.post("/chat")
def create_chat(request: Request) -> dict[str, Any]:
    chat_id, orchestrator = request.app.state.conversations.create()
    return {"chat_id": chat_id, "state": serialise_state(orchestrator.state)}


@router.get("/chat/suggestions")
def chat_suggestions() -> dict[str, Any]:
    return {"items": list(SAMPLE_QUESTIONS)}


@router.get("/chat/{chat_id}")
def get_chat(request: Request, chat_id: str) -> dict[str, Any]:
    orchestrator = _conversation(request, chat_id)
    return {"chat_id": chat_id, "state": serialise_state(orchestrator.state)}


@router.post("/chat/{chat_id}/message")
async def post_message(request: Request, chat_id: str, body: MessageRequest) -> dict[str, Any]:
    orchestrator = _conversation(request, chat_id)
    state = await orchestrator.submit(body.text)
    return {"chat_id": chat_id, "state": serialise_state(state)}


# ── Search ─────────────────────────────────────────────────────────────

@router.get("/search")
async def search(request: Request, q: str = Query(default="")) -> dict[str, Any]:
    results = await request.app.state.search.search(q)
    return {"query": q, "items": [asdict(result) for result in results]}


# ── Community board ────────────────────────────────────────────────────

@router.post("/questions", status_code=201)
async def create_question(request: Request, body: QuestionCreateRequest) -> dict[str, Any]:
    try:
        return await request.app.state.question_store.insert_question(body.user_id, body.title, body.content, body.category)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get("/questions")
async def list_questions(request: Request, category: str | None = None, sort: QuestionSort = "recent") -> dict[str, Any]:
    items = await request.app.state.question_store.list_questions(category=category, sort=sort)
    return {"items": items}


@router.get("/questions/{question_id}")
async def get_question(request: Request, question_id: str) -> dict[str, Any]:
    store = request.app.state.question_store
    question = await store.get_question(question_id)
    if question is None:
        raise HTTPException(status_code=404, detail=f"Question not found: {question_id}")
    return {"question": question, "answers": await store.list_answers(question_id)}


@router.post("/questions/{question_id}/answers", status_code=201)
async def create_answer(request: Request, question_id: str, body: AnswerCreateRequest) -> dict[str, Any]:
    store = request.app.state.question_store
    if await store.get_question(question_id) is None:
        raise HTTPException(status_code=404, detail=f"Question not found: {question_id}")
    return await store.insert_answer(question_id, body.user_id, body.content)


@router.post("/answers/{answer_id}/upvote")
async def upvote_answer(request: Request, answer_id: str) -> dict[str, Any]:
    if not await request.app.state.question_store.upvote_answer(answer_id):
        raise HTTPException(status_code=404, detail=f"Answer not found: {answer_id}")
    return {"answer_id": answer_id, "upvoted": True}


@router.post("/questions/{question_id}/answers/{answer_id}/best")
async def mark_best_answer(request: Request, question_id: str, answer_id: str) -> dict[str, Any]:
    if not await request.app.state.question_store.mark_best_answer(question_id, answer_id):
        raise HTTPException(status_code=404, detail=f"Answer {answer_id} not found on question {question_id}")
    return {"question_id": question_id, "best_answer_id": answer_id}


# ── Blog ───────────────────────────────────────────────────────────────

@router.post("/blog/generate")
async def generate_blog(request: Request, body: BlogRequest) -> dict[str, Any]:
    content = await request.app.state.ai_client.generate_blog_content(body.topic)
    return {"topic": body.topic, "content": content}

"""
SRM Guide - Conversation Orchestrator
======================================
Mediates between the message list the chat page renders and the
``GeminiClient``.

State Model
-----------
A conversation is an immutable ``ConversationState``: an ordered tuple of
frozen ``Message`` records plus a ``busy`` flag and ``last_error``.  Every
change produces a new state through the pure transition helpers below,
so each step of a submission can be tested as (old state, event) → new
state.

Submission Flow
---------------
    1. Blank text, or a submission already in flight → no-op.
    2. Configuration gate closed → user message + fixed "unavailable"
       reply (not pending); the AI client is never called.
    3. Append user message + pending "Thinking…" placeholder, mark busy.
    4. Success → placeholder gets the answer, ``last_error`` cleared.
    5. Failure → placeholder and ``last_error`` get the explanation.
       A client that raises instead is logged and treated as ``Unknown``.
    6. Always → not busy.

Concurrency
-----------
Single event loop.  ``busy`` is set before the first ``await``, so a
second ``submit`` arriving while the first is suspended is dropped, not
queued.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum

from srmguide.config.prompt_templates import ASSISTANT_UNAVAILABLE_RESPONSE, NEW_CHAT_GREETING, PLACEHOLDER_TEXT
from srmguide.src.core.ai_client import ERROR_MESSAGES, ErrorKind, Failure, GeminiClient, Success
from srmguide.src.core.config_gate import is_ai_available
from srmguide.src.utils.logger import get_logger
from srmguide.src.utils.text_utils import is_blank

logger = get_logger(__name__)

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ══════════════════════════════════════════════════════════════════════
#  DATA MODEL
# ══════════════════════════════════════════════════════════════════════


class Sender(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True, slots=True)
class Message:
    id: int
    text: str
    sender: Sender
    created_at: datetime
    pending: bool = False


@dataclass(frozen=True, slots=True)
class ConversationState:
    messages: tuple[Message, ...] = field(default_factory=tuple)
    busy: bool = False
    last_error: str | None = None

    @classmethod
    def with_greeting(cls, clock: Clock = _utc_now) -> ConversationState:
        """New conversation opened by the assistant's welcome message."""
        greeting = Message(id=1, text=NEW_CHAT_GREETING, sender=Sender.ASSISTANT, created_at=clock())
        return cls(messages=(greeting,))

    @property
    def pending_message(self) -> Message | None:
        return next((m for m in self.messages if m.pending), None)


# ══════════════════════════════════════════════════════════════════════
#  PURE TRANSITIONS
# ══════════════════════════════════════════════════════════════════════


def next_message_id(state: ConversationState) -> int:
    """Monotonic id: one past the largest id in the conversation."""
    return max((m.id for m in state.messages), default=0) + 1


def append_messages(state: ConversationState, *messages: Message) -> ConversationState:
    return replace(state, messages=state.messages + messages)


def replace_message(state: ConversationState, message_id: int, text: str) -> ConversationState:
    """Return *state* with message *message_id* finalised to *text*."""
    updated = tuple(replace(m, text=text, pending=False) if m.id == message_id else m for m in state.messages)
    return replace(state, messages=updated)


# ══════════════════════════════════════════════════════════════════════
#  ORCHESTRATOR
# ══════════════════════════════════════════════════════════════════════


class ConversationOrchestrator:
    """
    Owns one conversation's state and its single in-flight AI request.

    Parameters
    ----------
    client
        The ``GeminiClient`` used for answers (injected).
    gate
        Zero-argument availability check.  Defaults to
        ``is_ai_available`` over the client's settings.
    state
        Initial state.  Defaults to an empty conversation.
    clock
        Timestamp source for new messages.
    """

    __slots__ = ("_client", "_gate", "_state", "_clock")

    def __init__(self, client: GeminiClient, gate: Callable[[], bool] | None = None, state: ConversationState | None = None, clock: Clock = _utc_now) -> None:
        self._client = client
        self._gate = gate or (lambda: is_ai_available(client.config))
        self._state = state or ConversationState()
        self._clock = clock


    @property
    def state(self) -> ConversationState:
        return self._state


    async def submit(self, text: str) -> ConversationState:
        """Run one user turn and return the resulting state."""
        # ── 1. Drop blank / concurrent submissions ────────────────────
        if is_blank(text):
            logger.debug("[CHAT] Ignoring blank submission.")
            return self._state
        if self._state.busy:
            logger.info("[CHAT] Submission dropped — a request is already in flight.")
            return self._state

        now = self._clock()
        user_id = next_message_id(self._state)
        user_message = Message(id=user_id, text=text, sender=Sender.USER, created_at=now)

        # ── 2. Gate closed → canned reply, no AI call ─────────────────
        if not self._gate():
            logger.info("[CHAT] Assistant unavailable — replying with FAQ pointer.")
            reply = Message(id=user_id + 1, text=ASSISTANT_UNAVAILABLE_RESPONSE, sender=Sender.ASSISTANT, created_at=now)
            self._state = replace(append_messages(self._state, user_message, reply), busy=False)
            return self._state

        # ── 3. Optimistic placeholder ─────────────────────────────────
        placeholder = Message(id=user_id + 1, text=PLACEHOLDER_TEXT, sender=Sender.ASSISTANT, created_at=now, pending=True)
        self._state = replace(append_messages(self._state, user_message, placeholder), busy=True)

        try:
            outcome = await self._client.request(text)

            # ── 4/5. Reconcile placeholder ────────────────────────────
            if isinstance(outcome, Success):
                self._state = replace(replace_message(self._state, placeholder.id, outcome.text), last_error=None)
            elif isinstance(outcome, Failure):
                logger.warning("[CHAT] Assistant turn %d failed: %s", placeholder.id, outcome.kind.value)
                self._state = replace(replace_message(self._state, placeholder.id, outcome.message), last_error=outcome.message)
        except Exception:
            # ── 5b. Unexpected fault → finalise as Unknown ─────────────
            logger.exception("[CHAT] Assistant turn %d raised unexpectedly.", placeholder.id)
            message = ERROR_MESSAGES[ErrorKind.UNKNOWN]
            self._state = replace(replace_message(self._state, placeholder.id, message), last_error=message)
        finally:
            # ── 6. Always release ─────────────────────────────────────
            self._state = replace(self._state, busy=False)

        return self._state


# ══════════════════════════════════════════════════════════════════════
#  REGISTRY
# ══════════════════════════════════════════════════════════════════════


class ConversationRegistry:
    """
    In-process map of chat id → orchestrator for the HTTP layer.

    Conversations live as long as the process; nothing is evicted.
    """

    __slots__ = ("_client", "_gate", "_conversations")

    def __init__(self, client: GeminiClient, gate: Callable[[], bool] | None = None) -> None:
        self._client = client
        self._gate = gate
        self._conversations: dict[str, ConversationOrchestrator] = {}


    def create(self) -> tuple[str, ConversationOrchestrator]:
        chat_id = uuid.uuid4().hex
        orchestrator = ConversationOrchestrator(self._client, gate=self._gate, state=ConversationState.with_greeting())
        self._conversations[chat_id] = orchestrator
        logger.info("[CHAT] New conversation: %s", chat_id)
        return chat_id, orchestrator


    def get(self, chat_id: str) -> ConversationOrchestrator:
        orchestrator = self._conversations.get(chat_id)
        if orchestrator is None:
            raise KeyError(f"Conversation not found: {chat_id}")
        return orchestrator


    def __len__(self) -> int:
        return len(self._conversations)

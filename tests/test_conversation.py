"""Unit tests for the conversation orchestrator and its pure transitions."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from helpers import FakeChatModel
from srmguide.config.prompt_templates import ASSISTANT_UNAVAILABLE_RESPONSE, NEW_CHAT_GREETING, PLACEHOLDER_TEXT, QUOTA_EXCEEDED_MESSAGE
from srmguide.config.settings import Settings
from srmguide.src.core.ai_client import ERROR_MESSAGES, ErrorKind, Failure, GeminiClient, Success
from srmguide.src.core.conversation import ConversationOrchestrator, ConversationRegistry, ConversationState, Message, Sender, append_messages, next_message_id, replace_message

FIXED_NOW = datetime(2024, 7, 15, 9, 30, tzinfo=timezone.utc)


def _clock() -> datetime:
    return FIXED_NOW


def _mock_client(*outcomes: object) -> MagicMock:
    client = MagicMock(spec=GeminiClient)
    client.request = AsyncMock(side_effect=list(outcomes))
    return client


def _orchestrator(client: object, gate_open: bool = True, state: ConversationState | None = None) -> ConversationOrchestrator:
    return ConversationOrchestrator(client, gate=lambda: gate_open, state=state, clock=_clock)  # type: ignore[arg-type]


# ══════════════════════════════════════════════════════════════════════
#  PURE TRANSITIONS
# ══════════════════════════════════════════════════════════════════════


class TestTransitions:

    def test_next_id_on_empty_state(self) -> None:
        assert next_message_id(ConversationState()) == 1

    def test_next_id_is_one_past_max(self) -> None:
        state = ConversationState(messages=(Message(3, "a", Sender.USER, FIXED_NOW), Message(7, "b", Sender.ASSISTANT, FIXED_NOW)))
        assert next_message_id(state) == 8

    def test_append_does_not_mutate_original(self) -> None:
        original = ConversationState()
        updated = append_messages(original, Message(1, "hi", Sender.USER, FIXED_NOW))
        assert original.messages == ()
        assert len(updated.messages) == 1

    def test_replace_finalises_pending_message(self) -> None:
        state = ConversationState(messages=(Message(1, "q", Sender.USER, FIXED_NOW), Message(2, PLACEHOLDER_TEXT, Sender.ASSISTANT, FIXED_NOW, pending=True)))
        updated = replace_message(state, 2, "answer")
        assert updated.messages[1].text == "answer"
        assert updated.messages[1].pending is False
        assert updated.messages[0] is state.messages[0]
        assert state.pending_message is not None
        assert updated.pending_message is None

    def test_greeting_state(self) -> None:
        state = ConversationState.with_greeting(_clock)
        assert len(state.messages) == 1
        greeting = state.messages[0]
        assert (greeting.id, greeting.text, greeting.sender, greeting.pending) == (1, NEW_CHAT_GREETING, Sender.ASSISTANT, False)
        assert state.busy is False
        assert state.last_error is None


# ══════════════════════════════════════════════════════════════════════
#  SUBMIT
# ══════════════════════════════════════════════════════════════════════


class TestSubmit:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    async def test_blank_input_is_a_no_op(self, text: str) -> None:
        client = _mock_client()
        orchestrator = _orchestrator(client)
        before = orchestrator.state

        after = await orchestrator.submit(text)

        assert after is before
        client.request.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_gate_closed_replies_without_calling_client(self) -> None:
        client = _mock_client()
        orchestrator = _orchestrator(client, gate_open=False)

        state = await orchestrator.submit("What is the attendance rule?")

        client.request.assert_not_awaited()
        assert [m.sender for m in state.messages] == [Sender.USER, Sender.ASSISTANT]
        assert state.messages[1].text == ASSISTANT_UNAVAILABLE_RESPONSE
        assert state.messages[1].pending is False
        assert state.busy is False

    @pytest.mark.asyncio
    async def test_success_replaces_placeholder(self) -> None:
        client = _mock_client(Success(text="75% minimum."))
        orchestrator = _orchestrator(client)

        state = await orchestrator.submit("What is the attendance rule?")

        client.request.assert_awaited_once_with("What is the attendance rule?")
        assert len(state.messages) == 2
        user, reply = state.messages
        assert (user.id, user.text, user.sender) == (1, "What is the attendance rule?", Sender.USER)
        assert (reply.id, reply.text, reply.sender, reply.pending) == (2, "75% minimum.", Sender.ASSISTANT, False)
        assert state.busy is False
        assert state.last_error is None

    @pytest.mark.asyncio
    async def test_failure_sets_last_error(self) -> None:
        client = _mock_client(Failure(kind=ErrorKind.QUOTA_EXCEEDED, message=QUOTA_EXCEEDED_MESSAGE))
        orchestrator = _orchestrator(client)

        state = await orchestrator.submit("hello")

        assert state.messages[-1].text == QUOTA_EXCEEDED_MESSAGE
        assert state.messages[-1].pending is False
        assert state.last_error == QUOTA_EXCEEDED_MESSAGE
        assert state.busy is False

    @pytest.mark.asyncio
    async def test_success_clears_previous_error(self) -> None:
        client = _mock_client(Failure(kind=ErrorKind.OVERLOADED, message="busy"), Success(text="ok now"))
        orchestrator = _orchestrator(client)

        first = await orchestrator.submit("one")
        second = await orchestrator.submit("two")

        assert first.last_error == "busy"
        assert second.last_error is None
        assert [m.id for m in second.messages] == [1, 2, 3, 4]

    @pytest.mark.asyncio
    async def test_ids_continue_after_greeting(self) -> None:
        client = _mock_client(Success(text="Hi!"))
        orchestrator = _orchestrator(client, state=ConversationState.with_greeting(_clock))

        state = await orchestrator.submit("hello")

        assert [m.id for m in state.messages] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_busy_state_drops_submission(self) -> None:
        client = _mock_client()
        busy_state = ConversationState(busy=True)
        orchestrator = _orchestrator(client, state=busy_state)

        after = await orchestrator.submit("hello")

        assert after is busy_state
        client.request.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_concurrent_submission_is_dropped(self) -> None:
        release = asyncio.Event()

        async def slow_request(text: str) -> Success:
            await release.wait()
            return Success(text=f"answer to {text}")

        client = MagicMock(spec=GeminiClient)
        client.request = AsyncMock(side_effect=slow_request)
        orchestrator = _orchestrator(client)

        first = asyncio.create_task(orchestrator.submit("first"))
        await asyncio.sleep(0)

        in_flight = orchestrator.state
        assert in_flight.busy is True
        assert in_flight.pending_message is not None
        assert in_flight.pending_message.text == PLACEHOLDER_TEXT

        dropped = await orchestrator.submit("second")
        assert dropped is in_flight

        release.set()
        final = await first

        assert client.request.await_count == 1
        assert [m.text for m in final.messages] == ["first", "answer to first"]
        assert final.busy is False

    @pytest.mark.asyncio
    async def test_client_exception_finalises_placeholder(self) -> None:
        client = MagicMock(spec=GeminiClient)
        client.request = AsyncMock(side_effect=[RuntimeError("unexpected"), Success(text="back again")])
        orchestrator = _orchestrator(client)

        first = await orchestrator.submit("one")

        assert first.busy is False
        assert first.pending_message is None
        assert first.messages[-1].text == ERROR_MESSAGES[ErrorKind.UNKNOWN]
        assert first.last_error == ERROR_MESSAGES[ErrorKind.UNKNOWN]

        second = await orchestrator.submit("two")

        assert [m for m in second.messages if m.pending] == []
        assert second.messages[-1].text == "back again"
        assert second.last_error is None

    @pytest.mark.asyncio
    async def test_end_to_end_with_real_client(self, configured_settings: Settings) -> None:
        client = GeminiClient(llm=FakeChatModel("75% minimum."), config=configured_settings)
        orchestrator = ConversationOrchestrator(client, clock=_clock)

        state = await orchestrator.submit("What is the attendance rule?")

        assert [m.text for m in state.messages] == ["What is the attendance rule?", "75% minimum."]
        assert state.busy is False

    @pytest.mark.asyncio
    async def test_default_gate_follows_client_settings(self, unconfigured_settings: Settings) -> None:
        orchestrator = ConversationOrchestrator(GeminiClient(config=unconfigured_settings), clock=_clock)

        state = await orchestrator.submit("hello")

        assert state.messages[-1].text == ASSISTANT_UNAVAILABLE_RESPONSE


# ══════════════════════════════════════════════════════════════════════
#  REGISTRY
# ══════════════════════════════════════════════════════════════════════


class TestRegistry:

    def test_create_and_get(self) -> None:
        registry = ConversationRegistry(_mock_client(), gate=lambda: True)

        chat_id, orchestrator = registry.create()

        assert registry.get(chat_id) is orchestrator
        assert len(registry) == 1
        assert orchestrator.state.messages[0].text == NEW_CHAT_GREETING

    def test_ids_are_unique(self) -> None:
        registry = ConversationRegistry(_mock_client(), gate=lambda: True)
        ids = {registry.create()[0] for _ in range(5)}
        assert len(ids) == 5

    def test_unknown_id_raises(self) -> None:
        registry = ConversationRegistry(_mock_client())
        with pytest.raises(KeyError):
            registry.get("missing")

    @pytest.mark.asyncio
    async def test_conversations_are_independent(self) -> None:
        registry = ConversationRegistry(_mock_client(Success(text="Hi!")), gate=lambda: True)
        _, a = registry.create()
        _, b = registry.create()

        await a.submit("hello")

        assert len(a.state.messages) == 3
        assert len(b.state.messages) == 1

"""
SRM Guide - AI Client
======================
Owns the connection to Gemini: builds the SRM-specific prompt, issues
the call, retries transient failures with exponential backoff, and maps
every failure to a typed ``ErrorKind`` carrying a pre-authored
explanation.  No UI knowledge lives here.

Architecture
------------
``classify_failure``
    The single mapping from a raw upstream failure to an ``ErrorKind``.
    Gemini does not expose a stable error contract, so this is substring
    sniffing over the failure text.  Update the marker tuples below when
    the upstream wording changes; call sites never inspect error text.

``RetryPolicy``
    ``max_attempts`` total attempts; delay before attempt *k+1* is
    ``base_delay_ms * 2**(k-1)`` (2s, 4s, 8s, 16s, 32s by default).
    No jitter.  Only ``Overloaded`` failures are retried.

``GeminiClient``
    Request flow:
        1. Reject blank input (``ValueError``).
        2. Unconfigured → ``NotConfigured`` (no network call).
        3. Compose prompt → context + question + persona.
        4. Call Gemini under ``RetryPolicy`` and an overall deadline.
        5. Blank text → ``EmptyResponse``.
        6. Return the text.

Usage:
    from srmguide.src.core.ai_client import GeminiClient
    client = GeminiClient()
    outcome = await client.request("When do cycle tests happen?")
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from langchain_core.messages import HumanMessage

from srmguide.config.prompt_templates import BLOG_FAILURE_RESPONSE, BLOG_PROMPT_TEMPLATE, BLOG_UNAVAILABLE_RESPONSE, CHAT_PROMPT_TEMPLATE, EMPTY_RESPONSE_MESSAGE, INVALID_CREDENTIAL_MESSAGE, NOT_CONFIGURED_MESSAGE, OVERLOADED_MESSAGE, PERSONA_INSTRUCTION, QUOTA_EXCEEDED_MESSAGE, SRM_CONTEXT, UNKNOWN_ERROR_MESSAGE
from srmguide.config.settings import Settings, settings
from srmguide.src.core.config_gate import is_ai_available
from srmguide.src.utils.logger import get_logger
from srmguide.src.utils.text_utils import is_blank

logger = get_logger(__name__)

Sleeper = Callable[[float], Awaitable[None]]


# ══════════════════════════════════════════════════════════════════════
#  ERROR TAXONOMY
# ══════════════════════════════════════════════════════════════════════


class ErrorKind(str, Enum):
    NOT_CONFIGURED = "not_configured"
    INVALID_CREDENTIAL = "invalid_credential"
    QUOTA_EXCEEDED = "quota_exceeded"
    OVERLOADED = "overloaded"
    EMPTY_RESPONSE = "empty_response"
    UNKNOWN = "unknown"


ERROR_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.NOT_CONFIGURED: NOT_CONFIGURED_MESSAGE,
    ErrorKind.INVALID_CREDENTIAL: INVALID_CREDENTIAL_MESSAGE,
    ErrorKind.QUOTA_EXCEEDED: QUOTA_EXCEEDED_MESSAGE,
    ErrorKind.OVERLOADED: OVERLOADED_MESSAGE,
    ErrorKind.EMPTY_RESPONSE: EMPTY_RESPONSE_MESSAGE,
    ErrorKind.UNKNOWN: UNKNOWN_ERROR_MESSAGE,
}


class AIClientError(Exception):
    """A classified AI failure; ``message`` is safe to show to students."""

    def __init__(self, kind: ErrorKind, message: str | None = None) -> None:
        self.kind = kind
        self.message = message or ERROR_MESSAGES[kind]
        super().__init__(self.message)


# ── Failure markers (checked in this order, case-insensitive) ─────────
_CREDENTIAL_MARKERS: tuple[str, ...] = ("api key",)
_QUOTA_MARKERS: tuple[str, ...] = ("quota", "limit", "429")
_OVERLOAD_MARKERS: tuple[str, ...] = ("overloaded", "503", "temporarily unavailable")


def classify_failure(signal: BaseException | str) -> ErrorKind:
    """
    Map a raw upstream failure (exception or its text) to an ``ErrorKind``.

    Credential complaints win over quota markers, which win over overload
    markers, so a ``429`` that also mentions overload is still terminal.
    Anything unmatched is ``Unknown``.
    """
    if isinstance(signal, AIClientError):
        return signal.kind

    text = str(signal).casefold()
    if any(marker in text for marker in _CREDENTIAL_MARKERS):
        return ErrorKind.INVALID_CREDENTIAL
    if any(marker in text for marker in _QUOTA_MARKERS):
        return ErrorKind.QUOTA_EXCEEDED
    if any(marker in text for marker in _OVERLOAD_MARKERS):
        return ErrorKind.OVERLOADED
    return ErrorKind.UNKNOWN


def is_transient(signal: BaseException | str) -> bool:
    """Only overload signals are worth retrying."""
    return classify_failure(signal) is ErrorKind.OVERLOADED


# ══════════════════════════════════════════════════════════════════════
#  RETRY POLICY & OUTCOMES
# ══════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    max_attempts: int = 6
    base_delay_ms: float = 2000.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be ≥ 1, got {self.max_attempts}")
        if self.base_delay_ms < 0:
            raise ValueError(f"base_delay_ms must be ≥ 0, got {self.base_delay_ms}")

    @classmethod
    def from_settings(cls, config: Settings) -> RetryPolicy:
        return cls(max_attempts=config.AI_MAX_ATTEMPTS, base_delay_ms=float(config.AI_RETRY_BASE_DELAY_MS))

    def delay_for(self, attempt: int) -> float:
        """Milliseconds to wait after failed attempt *attempt* (1-based)."""
        return self.base_delay_ms * 2 ** (attempt - 1)


@dataclass(frozen=True, slots=True)
class Success:
    text: str


@dataclass(frozen=True, slots=True)
class Failure:
    kind: ErrorKind
    message: str


RequestOutcome = Success | Failure


# ══════════════════════════════════════════════════════════════════════
#  CHAT MODEL PROTOCOL
# ══════════════════════════════════════════════════════════════════════


@runtime_checkable
class ChatModel(Protocol):
    """Anything LangChain-shaped that can answer a list of messages."""

    async def ainvoke(self, input: Any, **kwargs: Any) -> Any: ...


def build_prompt(user_message: str) -> str:
    """Wrap the student's question with SRM context and the persona line."""
    return CHAT_PROMPT_TEMPLATE.format(context=SRM_CONTEXT, question=user_message, persona=PERSONA_INSTRUCTION)


def _extract_text(response: Any) -> str:
    """Pull plain text out of a LangChain message (str or content parts)."""
    content = getattr(response, "content", response)
    if content is None:
        return ""
    if isinstance(content, list):
        parts: list[str] = []
        for item in content:
            if isinstance(item, dict):
                parts.append(str(item.get("text", "")))
            else:
                parts.append(str(item))
        return "".join(parts)
    return str(content)


# ══════════════════════════════════════════════════════════════════════
#  GEMINI CLIENT
# ══════════════════════════════════════════════════════════════════════


class GeminiClient:
    """
    Explicitly constructed AI client; inject one per composition root.

    Parameters
    ----------
    llm
        Optional chat model.  Defaults to ``ChatGoogleGenerativeAI``
        built from *config* when the configuration gate passes.
    config
        Settings instance.  Defaults to the module singleton.
    policy
        Retry policy.  Defaults to the values in *config*.
    sleep
        Awaitable used for backoff delays (seconds).  Tests pass a
        recorder instead of ``asyncio.sleep``.
    """

    __slots__ = ("_config", "_policy", "_sleep", "_llm")

    def __init__(self, llm: ChatModel | None = None, config: Settings | None = None, policy: RetryPolicy | None = None, sleep: Sleeper = asyncio.sleep) -> None:
        self._config = config or settings
        self._policy = policy or RetryPolicy.from_settings(self._config)
        self._sleep = sleep
        self._llm = llm if llm is not None else self._init_llm(self._config)


    @staticmethod
    def _init_llm(config: Settings) -> ChatModel | None:
        """Initialise Gemini via LangChain, or return None when gated off."""
        if not is_ai_available(config):
            logger.info("[AI] Gemini API key not configured — assistant disabled.")
            return None

        from langchain_google_genai import ChatGoogleGenerativeAI

        try:
            # Single SDK attempt: RetryPolicy owns retrying.
            llm = ChatGoogleGenerativeAI(model=config.LLM_MODEL, temperature=config.LLM_TEMPERATURE, google_api_key=config.GEMINI_API_KEY.get_secret_value().strip(), max_retries=1, timeout=config.LLM_TIMEOUT_SECONDS)  # type: ignore[union-attr]
        except Exception:
            logger.warning("[AI] Gemini client could not be created — assistant disabled.", exc_info=True)
            return None

        logger.info("[AI] LLM initialised: %s (temperature=%.1f)", config.LLM_MODEL, config.LLM_TEMPERATURE)
        return llm


    @property
    def configured(self) -> bool:
        return self._llm is not None


    @property
    def config(self) -> Settings:
        return self._config


    @property
    def policy(self) -> RetryPolicy:
        return self._policy


    async def generate_response(self, user_message: str) -> str:
        """
        Answer one student question.

        Raises
        ------
        ValueError
            If *user_message* is blank.
        AIClientError
            With ``kind`` set to the classified failure.
        """
        if is_blank(user_message):
            raise ValueError("user_message must not be empty")
        if self._llm is None:
            logger.info("[AI] Request rejected — assistant not configured.")
            raise AIClientError(ErrorKind.NOT_CONFIGURED)

        prompt = build_prompt(user_message)
        t_start = time.perf_counter()
        answer = await self._within_deadline(self._generate_with_retry(prompt, self._policy.max_attempts))

        elapsed_ms = (time.perf_counter() - t_start) * 1000
        logger.info("[AI] Response generated in %.1fms (%d chars)", elapsed_ms, len(answer))
        return answer


    async def request(self, user_message: str) -> RequestOutcome:
        """``generate_response`` folded into a ``Success``/``Failure`` value."""
        try:
            text = await self.generate_response(user_message)
        except AIClientError as exc:
            return Failure(kind=exc.kind, message=exc.message)
        return Success(text=text)


    async def generate_blog_content(self, topic: str) -> str:
        """
        Draft an HTML blog post for freshers about *topic*.

        Single attempt under the request deadline, no backoff.  Never
        raises on upstream failure: returns a fixed explanation instead,
        since the result is rendered straight into a page.
        """
        if is_blank(topic):
            raise ValueError("topic must not be empty")
        if self._llm is None:
            return BLOG_UNAVAILABLE_RESPONSE

        prompt = BLOG_PROMPT_TEMPLATE.format(topic=topic.strip())
        try:
            return await self._within_deadline(self._generate_with_retry(prompt, 1))
        except AIClientError as exc:
            logger.warning("[AI] Blog generation failed (%s).", exc.kind.value)
            return BLOG_FAILURE_RESPONSE


    async def _within_deadline(self, call: Awaitable[str]) -> str:
        """Await *call* under ``AI_REQUEST_DEADLINE_SECONDS``; expiry is ``Overloaded``."""
        deadline = self._config.AI_REQUEST_DEADLINE_SECONDS
        if deadline is None:
            return await call
        try:
            return await asyncio.wait_for(call, timeout=deadline)
        except asyncio.TimeoutError as exc:
            logger.warning("[AI] Request deadline of %.1fs exceeded.", deadline)
            raise AIClientError(ErrorKind.OVERLOADED) from exc


    async def _generate_with_retry(self, prompt: str, max_attempts: int) -> str:
        """Invoke the model up to *max_attempts* times, backing off on ``Overloaded``."""

        for attempt in range(1, max_attempts + 1):
            try:
                response = await self._llm.ainvoke([HumanMessage(content=prompt)])  # type: ignore[union-attr]
            except Exception as exc:
                kind = classify_failure(exc)

                if kind is ErrorKind.UNKNOWN:
                    logger.exception("[AI] Unclassified upstream failure on attempt %d.", attempt)
                    raise AIClientError(kind) from exc
                if kind is not ErrorKind.OVERLOADED:
                    logger.warning("[AI] Terminal upstream failure on attempt %d: %s", attempt, kind.value)
                    raise AIClientError(kind) from exc
                if attempt >= max_attempts:
                    logger.warning("[AI] Upstream still overloaded after %d attempts — giving up.", attempt)
                    raise AIClientError(ErrorKind.OVERLOADED) from exc

                delay_ms = self._policy.delay_for(attempt)
                logger.warning("[AI] Transient failure on attempt %d/%d; retrying in %.0fms.", attempt, max_attempts, delay_ms)
                await self._sleep(delay_ms / 1000)
                continue

            text = _extract_text(response)
            if not text.strip():
                logger.warning("[AI] Upstream returned an empty response on attempt %d.", attempt)
                raise AIClientError(ErrorKind.EMPTY_RESPONSE)
            return text

        raise AIClientError(ErrorKind.UNKNOWN)

"""tests/helpers.py

Test doubles: a scripted chat model standing in for Gemini and a sleep
recorder for backoff assertions.
"""

from __future__ import annotations

from typing import Any

from langchain_core.messages import AIMessage


class FakeChatModel:
    """Replays a script of replies/exceptions; the last entry repeats."""

    def __init__(self, *script: Any) -> None:
        self._script = list(script)
        self.calls: list[Any] = []

    async def ainvoke(self, input: Any, **kwargs: Any) -> Any:
        self.calls.append(input)
        item = self._script.pop(0) if len(self._script) > 1 else self._script[0]
        if isinstance(item, BaseException):
            raise item
        if isinstance(item, str):
            return AIMessage(content=item)
        return item


class SleepRecorder:
    """Async stand-in for ``asyncio.sleep`` that records delays in ms."""

    def __init__(self) -> None:
        self.delays_ms: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays_ms.append(seconds * 1000)

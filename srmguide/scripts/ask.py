"""
SRM Guide - Command-Line Assistant
===================================
Talk to the assistant or search the site from a terminal.

Modes:
    --question TEXT   Ask one question, print the reply, exit.
    --search QUERY    Print ranked site-search results, exit.
    (no flag)         Interactive chat; empty line or Ctrl-D quits.

Search runs against the static FAQ / blog table only unless
``--with-board`` is given, which also queries MongoDB.

Usage:
    python -m srmguide.scripts.ask --question "When do cycle tests happen?"
    python -m srmguide.scripts.ask --search attendance --with-board
    python -m srmguide.scripts.ask
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import time
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from srmguide.config.settings import Settings
    from srmguide.src.core.conversation import ConversationOrchestrator

# ── Ensure project root is importable when run directly ────────────────
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))


# ── CLI Argument Parsing ───────────────────────────────────────────────

def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="ask", description="SRM Guide — ask the AI assistant or search the site.")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--question", "-q", default=None, help="Ask a single question and exit.")
    mode.add_argument("--search", "-s", default=None, help="Search FAQ, blog (and the board with --with-board) and exit.")
    parser.add_argument("--with-board", action="store_true", default=False, help="Include community board questions from MongoDB in search.")
    return parser.parse_args(argv)


# ── Main Orchestration ─────────────────────────────────────────────────

def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    # ── 0. Load settings + .env (timed) ────────────────────────────────
    t_settings = time.perf_counter()
    try:
        from srmguide.config.settings import settings
    except Exception as exc:
        print("\n[FATAL] Configuration error — check your .env file:\n")
        print(f"  {exc}")
        print()
        return 1
    settings_ms = (time.perf_counter() - t_settings) * 1000

    from srmguide.src.utils.logger import get_logger
    logger = get_logger(__name__)
    logger.info("Settings loaded in %.1fms", settings_ms)

    if args.search is not None:
        return asyncio.run(_run_search(args.search, args.with_board))

    _print_header(settings)

    from srmguide.src.core.ai_client import GeminiClient
    from srmguide.src.core.conversation import ConversationOrchestrator

    orchestrator = ConversationOrchestrator(GeminiClient(config=settings))

    if args.question is not None:
        return asyncio.run(_ask_once(orchestrator, args.question))
    return asyncio.run(_repl(orchestrator))


async def _ask_once(orchestrator: ConversationOrchestrator, question: str) -> int:
    state = await orchestrator.submit(question)
    if len(state.messages) < 2:
        print("Nothing to ask — the question was empty.")
        return 2
    print(state.messages[-1].text)
    return 1 if state.last_error else 0


async def _repl(orchestrator: ConversationOrchestrator) -> int:
    print("Ask about SRM (empty line to quit).\n")
    while True:
        try:
            line = await asyncio.to_thread(input, "you > ")
        except EOFError:
            break
        if not line.strip():
            break
        state = await orchestrator.submit(line)
        print(f"bot > {state.messages[-1].text}\n")
    return 0


async def _run_search(query: str, with_board: bool) -> int:
    from srmguide.src.core.search import SearchAggregator

    store = None
    if with_board:
        from srmguide.src.database.record_store import QuestionStore

        store = QuestionStore()

    results = await SearchAggregator(store).search(query)
    if not results:
        print(f"No results for {query!r}.")
        return 0

    print()
    for i, result in enumerate(results, 1):
        print(f"[{i}] {result.title}  ({result.kind.value}, relevance {result.relevance:.1f})")
        print(f"    {result.url}")
        print(f"    {result.content}")
    print()
    return 0


# ── Pretty-print helpers ──────────────────────────────────────────────

def _print_header(settings: Settings) -> None:
    from srmguide.src.core.config_gate import api_key_status

    status = api_key_status(settings)
    if status.configured and settings.GEMINI_API_KEY is not None:
        key_val = settings.GEMINI_API_KEY.get_secret_value().strip()
        masked = f"****{key_val[-4:]}" if len(key_val) > 4 else "****"
    elif status.is_default:
        masked = "placeholder value (not configured)"
    else:
        masked = "missing (not configured)"

    print()
    print("=" * 60)
    print("  SRM GUIDE — AI Assistant")
    print("=" * 60)
    print(f"  Environment  : {settings.ENV}")
    print(f"  Model        : {settings.LLM_MODEL}")
    print(f"  Max attempts : {settings.AI_MAX_ATTEMPTS}")
    print(f"  API Key      : {masked}")
    print("=" * 60)
    print()


# ── Entry point ────────────────────────────────────────────────────────

if __name__ == "__main__":
    sys.exit(main())

"""
SRM Guide - Site Search
========================
Merges keyword search over the community Q&A board with the static
FAQ / blog table.  Read-only and side-effect-free.

Ranking
-------
- Board question: 1.0 on title match, 0.7 on content match, 0.5 if the
  store matched it on neither visible field.
- Static entry (title, content or keyword match): 1.0 on title match,
  else 0.8.
- Board results first, then static; stable sort by relevance
  descending; truncate to ``SEARCH_RESULTS_LIMIT``.

A failing board query is logged and the whole search returns ``[]``;
search never surfaces an error to the student.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

from srmguide.config.settings import Settings, settings
from srmguide.config.static_content import STATIC_REFERENCE_ENTRIES, ReferenceEntry
from srmguide.src.utils.logger import get_logger
from srmguide.src.utils.text_utils import contains_ci, normalise_query, truncate_snippet

logger = get_logger(__name__)


class ResultKind(str, Enum):
    QUESTION = "question"
    FAQ_ENTRY = "faq"
    BLOG_POST = "blog"


@dataclass(frozen=True, slots=True)
class SearchResult:
    id: str
    title: str
    content: str
    kind: ResultKind
    url: str
    relevance: float
    category: str | None = None


class QuestionSearcher(Protocol):
    """The slice of ``QuestionStore`` that search depends on."""

    async def search_questions(self, text: str, limit: int = 10) -> list[dict[str, Any]]: ...


class SearchAggregator:
    """
    Parameters
    ----------
    store
        Board search backend.  ``None`` searches the static table only.
    static_entries
        Reference table.  Defaults to the FAQ + blog table.
    config
        Settings instance for the page and result limits.
    """

    __slots__ = ("_store", "_static", "_remote_limit", "_results_limit")

    def __init__(self, store: QuestionSearcher | None = None, static_entries: Iterable[ReferenceEntry] = STATIC_REFERENCE_ENTRIES, config: Settings | None = None) -> None:
        cfg = config or settings
        self._store = store
        self._static = tuple(static_entries)
        self._remote_limit = cfg.SEARCH_REMOTE_LIMIT
        self._results_limit = cfg.SEARCH_RESULTS_LIMIT


    async def search(self, query: str) -> list[SearchResult]:
        query = normalise_query(query)
        if not query:
            return []

        try:
            results = await self._search_board(query)
        except Exception:
            logger.exception("[SEARCH] Board query failed for %r — returning no results.", query)
            return []

        results.extend(self.search_static(query))
        results.sort(key=lambda r: r.relevance, reverse=True)
        logger.debug("[SEARCH] %r → %d result(s) before truncation.", query, len(results))
        return results[: self._results_limit]


    async def _search_board(self, query: str) -> list[SearchResult]:
        if self._store is None:
            return []

        records = await self._store.search_questions(query, limit=self._remote_limit)
        results: list[SearchResult] = []
        for record in records[: self._remote_limit]:
            title = str(record.get("title", ""))
            content = str(record.get("content", ""))
            if contains_ci(title, query):
                relevance = 1.0
            elif contains_ci(content, query):
                relevance = 0.7
            else:
                relevance = 0.5
            results.append(SearchResult(id=str(record["id"]), title=title, content=truncate_snippet(content), kind=ResultKind.QUESTION, url=f"/community/question/{record['id']}", relevance=relevance, category=record.get("category")))
        return results


    def search_static(self, query: str) -> list[SearchResult]:
        """Filter the reference table by title, content or keyword."""
        needle = query.casefold()
        results: list[SearchResult] = []
        for entry in self._static:
            title = str(entry["title"])
            content = str(entry["content"])
            keywords = entry.get("keywords", ())
            title_hit = contains_ci(title, needle)
            if not (title_hit or contains_ci(content, needle) or any(needle in str(kw).casefold() for kw in keywords)):
                continue
            results.append(SearchResult(id=str(entry["id"]), title=title, content=content, kind=ResultKind(entry["kind"]), url=str(entry["url"]), relevance=1.0 if title_hit else 0.8, category=str(entry["category"]) if entry.get("category") else None))
        return results

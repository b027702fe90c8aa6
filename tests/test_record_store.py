"""Unit tests for the MongoDB-backed question store (collections mocked)."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from srmguide.src.database.record_store import QuestionStore


def _cursor(docs: list[dict]) -> MagicMock:
    cursor = MagicMock()
    cursor.limit.return_value = cursor
    cursor.sort.return_value = cursor
    cursor.to_list = AsyncMock(return_value=docs)
    return cursor


def _collection(docs: list[dict] | None = None, matched: int = 1, found: dict | None = None) -> MagicMock:
    collection = MagicMock()
    collection.find.return_value = _cursor(docs or [])
    collection.find_one = AsyncMock(return_value=found)
    collection.insert_one = AsyncMock()
    collection.update_one = AsyncMock(return_value=MagicMock(matched_count=matched))
    collection.update_many = AsyncMock(return_value=MagicMock(matched_count=matched))
    return collection


def _store(questions: MagicMock | None = None, answers: MagicMock | None = None) -> tuple[QuestionStore, MagicMock, MagicMock]:
    questions = questions or _collection()
    answers = answers or _collection()
    database = {"questions": questions, "answers": answers}
    return QuestionStore(database=database), questions, answers


class TestQuestions:

    @pytest.mark.asyncio
    async def test_search_builds_escaped_case_insensitive_filter(self) -> None:
        store, questions, _ = _store(_collection([{"_id": "q1", "title": "75% rule?", "content": "..."}]))

        records = await store.search_questions("75%+", limit=10)

        query = questions.find.call_args.args[0]
        pattern = {"$regex": r"75%\+", "$options": "i"}
        assert query == {"$or": [{"title": pattern}, {"content": pattern}]}
        questions.find.return_value.limit.assert_called_once_with(10)
        assert records == [{"id": "q1", "title": "75% rule?", "content": "..."}]

    @pytest.mark.asyncio
    async def test_insert_question_defaults(self) -> None:
        store, questions, _ = _store()

        record = await store.insert_question("u1", "Hostel timings?", "When is curfew?", category="hostel")

        doc = questions.insert_one.await_args.args[0]
        assert doc["status"] == "open"
        assert doc["upvotes"] == 0
        assert record["id"] == doc["_id"]
        assert "_id" not in record

    @pytest.mark.asyncio
    async def test_insert_rejects_unknown_category(self) -> None:
        store, questions, _ = _store()
        with pytest.raises(ValueError):
            await store.insert_question("u1", "t", "c", category="sports-betting")
        questions.insert_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_question(self) -> None:
        store, questions, _ = _store()

        assert await store.update_question("q1", status="answered") is True
        questions.update_one.assert_awaited_once_with({"_id": "q1"}, {"$set": {"status": "answered"}})

    @pytest.mark.asyncio
    @pytest.mark.parametrize("fields", [{"user_id": "x"}, {"status": "deleted"}])
    async def test_update_rejects_bad_fields(self, fields: dict) -> None:
        store, _, _ = _store()
        with pytest.raises(ValueError):
            await store.update_question("q1", **fields)

    @pytest.mark.asyncio
    async def test_get_missing_question(self) -> None:
        store, _, _ = _store(_collection(found=None))
        assert await store.get_question("nope") is None

    @pytest.mark.asyncio
    async def test_list_unanswered_in_category(self) -> None:
        store, questions, _ = _store()

        await store.list_questions(category="exams", sort="unanswered")

        assert questions.find.call_args.args[0] == {"category": "exams", "status": "open"}
        questions.find.return_value.sort.assert_called_once_with([("created_at", -1)])

    @pytest.mark.asyncio
    async def test_list_popular_sorts_by_upvotes(self) -> None:
        store, questions, _ = _store()

        await store.list_questions(sort="popular")

        assert questions.find.call_args.args[0] == {}
        questions.find.return_value.sort.assert_called_once_with([("upvotes", -1)])


class TestAnswers:

    @pytest.mark.asyncio
    async def test_insert_answer(self) -> None:
        store, _, answers = _store()

        record = await store.insert_answer("q1", "u2", "Gates close at 9pm.")

        doc = answers.insert_one.await_args.args[0]
        assert (doc["question_id"], doc["upvotes"], doc["is_best_answer"]) == ("q1", 0, False)
        assert record["id"] == doc["_id"]

    @pytest.mark.asyncio
    async def test_list_answers_best_first(self) -> None:
        store, _, answers = _store(answers=_collection([{"_id": "a1", "is_best_answer": True}, {"_id": "a2", "is_best_answer": False}]))

        records = await store.list_answers("q1")

        answers.find.return_value.sort.assert_called_once_with([("is_best_answer", -1), ("upvotes", -1)])
        assert [r["id"] for r in records] == ["a1", "a2"]

    @pytest.mark.asyncio
    async def test_upvote_unknown_answer(self) -> None:
        store, _, answers = _store(answers=_collection(matched=0))

        assert await store.upvote_answer("missing") is False
        answers.update_one.assert_awaited_once_with({"_id": "missing"}, {"$inc": {"upvotes": 1}})

    @pytest.mark.asyncio
    async def test_mark_best_answer_clears_others_first(self) -> None:
        store, _, answers = _store()

        assert await store.mark_best_answer("q1", "a2") is True

        answers.update_many.assert_awaited_once_with({"question_id": "q1"}, {"$set": {"is_best_answer": False}})
        answers.update_one.assert_awaited_once_with({"_id": "a2", "question_id": "q1"}, {"$set": {"is_best_answer": True}})

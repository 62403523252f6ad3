import pytest

from app.core import AppError, ErrorCode
from app.llm.errors import LLMRetryableError
from app.models.question_record import QuestionRecord
from app.services.question_service import QuestionService

from conftest import make_refusal, make_study


def test_duplicate_check_is_case_and_whitespace_insensitive(db):
    svc = QuestionService(db)
    svc.save_result("Who was Moses?", {"isRelevant": True}, "admin")

    assert svc.is_duplicate("  who WAS moses?  ")
    assert not svc.is_duplicate("Who was Aaron?")


def test_tracking_row_is_not_a_duplicate(db):
    svc = QuestionService(db)
    svc.track("What is grace?", None)
    assert not svc.is_duplicate("What is grace?")


def test_save_result_completes_tracking_row_in_place(db):
    svc = QuestionService(db)
    tracked = svc.track("What is grace?", "user-1")

    out = svc.save_result("what is grace?", {"isRelevant": True}, None)

    assert out.created is True
    assert out.record.id == tracked.id
    assert out.record.slug == tracked.slug
    assert db.query(QuestionRecord).count() == 1


def test_save_result_is_idempotent(db):
    svc = QuestionService(db)
    first = svc.save_result("Who was Noah?", {"v": 1}, "system")
    second = svc.save_result("WHO WAS NOAH?", {"v": 2}, "system")

    assert first.created is True
    assert second.created is False
    assert second.record.id == first.record.id
    assert second.record.result == {"v": 1}


def test_colliding_slugs_get_suffixes(db):
    svc = QuestionService(db)
    a = svc.save_result("what is hell", {"v": 1}, None).record.slug
    b = svc.track("What is hell?!", None).slug

    assert a == "what-is-hell"
    assert b.startswith("what-is-hell-")


def test_get_page_hides_incomplete_records(db):
    svc = QuestionService(db)
    rec = svc.track("Who was Ruth?", None)

    with pytest.raises(AppError) as exc:
        svc.get_page(rec.slug)
    assert exc.value.code == ErrorCode.NOT_FOUND


def test_search_uses_cache_before_calling_llm(db):
    def answer(q):
        raise AssertionError("LLM should not be called")

    QuestionService(db).save_result("Who was Moses?", {"cached": True}, None)
    result = QuestionService(db, answer_fn=answer).search(" who was moses? ")
    assert result == {"cached": True}


def test_search_saves_relevant_answers(db):
    svc = QuestionService(db, answer_fn=make_study)
    result = svc.search("Who was Elijah?")

    assert result["isRelevant"] is True
    assert result["content"]["literalAnswer"] == "Answer to Who was Elijah?"
    assert svc.is_duplicate("who was elijah?")


def test_search_does_not_save_refusals(db):
    svc = QuestionService(db, answer_fn=lambda q: make_refusal())
    result = svc.search("best pizza in town")

    assert result["isRelevant"] is False
    assert db.query(QuestionRecord).count() == 0


def test_search_maps_llm_failure_to_502(db):
    def answer(q):
        raise LLMRetryableError("provider down")

    with pytest.raises(AppError) as exc:
        QuestionService(db, answer_fn=answer).search("Who was Moses?")
    assert exc.value.code == ErrorCode.LLM_ERROR
    assert exc.value.status_code == 502

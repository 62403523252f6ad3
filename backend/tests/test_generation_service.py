import asyncio
import threading
import time

import pytest

from app.constants.statuses import ItemStatus
from app.core import AppError, ErrorCode
from app.core.config import settings
from app.llm.errors import LLMRetryableError
from app.models.generation_status import GenerationStatus
from app.models.question_record import QuestionRecord
from app.repos.generation_status.write import GenerationStatusWriteRepo
from app.services.generation_service import GenerationService
from app.services.question_service import QuestionService

from conftest import make_refusal, make_study


def _no_questions(count):
    raise AssertionError("question generator should not be called")


def _service(db, *, questions=_no_questions, answer=make_study):
    return GenerationService(db, question_fn=questions, answer_fn=answer)


# ----------------------------
# start / stop / reset
# ----------------------------
def test_start_sets_running_state(db):
    remaining, status = _service(db).start(target=10, owner_user_id="admin")

    assert remaining == settings.DAILY_GENERATION_LIMIT
    assert status.is_generating is True
    assert status.target == 10
    assert status.progress == 0
    assert status.started_at is not None


def test_second_start_fails_and_leaves_state_untouched(db):
    svc = _service(db)
    svc.start(target=10, owner_user_id="admin")

    with pytest.raises(AppError) as exc:
        svc.start(target=99, owner_user_id="other")

    assert exc.value.code == ErrorCode.ALREADY_RUNNING
    status = svc.status()
    assert status.is_generating is True
    assert status.target == 10


def test_start_refused_when_daily_quota_used(db, monkeypatch):
    monkeypatch.setattr(settings, "DAILY_GENERATION_LIMIT", 1)
    QuestionService(db).save_result("Who was Moses?", {"v": 1}, "system")

    with pytest.raises(AppError) as exc:
        _service(db).start(target=10, owner_user_id="admin")

    assert exc.value.code == ErrorCode.QUOTA_EXCEEDED
    assert exc.value.details == {"today_count": 1, "limit": 1}
    assert _service(db).status().is_generating is False


def test_stop_when_not_running_fails(db):
    with pytest.raises(AppError) as exc:
        _service(db).stop()
    assert exc.value.code == ErrorCode.NOT_RUNNING


def test_stop_keeps_progress(db):
    svc = _service(db)
    svc.start(target=10, owner_user_id="admin")
    GenerationStatusWriteRepo(db).add_progress(4, now=svc.status().started_at)
    db.commit()

    status = svc.stop()
    assert status.is_generating is False
    assert status.progress == 4


def test_reset_zeroes_even_while_running(db):
    svc = _service(db)
    svc.start(target=10, owner_user_id="admin")
    GenerationStatusWriteRepo(db).add_progress(3, now=svc.status().started_at)
    db.commit()

    status = svc.reset()
    assert status.is_generating is False
    assert status.progress == 0
    assert status.target == settings.DEFAULT_GENERATION_TARGET
    assert status.started_at is None


def test_status_row_is_provisioned_when_missing(db):
    db.query(GenerationStatus).delete()
    db.commit()

    status = _service(db).status()
    assert status.is_generating is False
    assert status.progress == 0


# ----------------------------
# tick
# ----------------------------
def test_tick_while_paused_does_nothing(db):
    report = asyncio.run(_service(db).tick())

    assert report.skipped is True
    assert report.outcomes == []


def test_tick_at_target_stops_without_llm_calls(db):
    svc = _service(db)
    svc.start(target=2, owner_user_id="admin")
    GenerationStatusWriteRepo(db).add_progress(2, now=svc.status().started_at)
    db.commit()

    report = asyncio.run(svc.tick())

    assert report.completed is True
    assert svc.status().is_generating is False
    assert svc.status().progress == 2


def test_tick_with_no_questions_reports_failure(db):
    svc = _service(db, questions=lambda n: [])
    svc.start(target=10, owner_user_id="admin")

    report = asyncio.run(svc.tick())

    assert report.ok is False
    assert svc.status().progress == 0
    assert svc.status().is_generating is True


def test_tick_mixed_batch_counts_only_saved_items(db):
    QuestionService(db).save_result("Who was Moses?", {"v": 1}, "system")

    def answer(question):
        if question == "What is grace?":
            raise LLMRetryableError("provider down")
        return make_study(question)

    svc = _service(
        db,
        questions=lambda n: ["who was moses?", "What is grace?", "Who was Noah?"],
        answer=answer,
    )
    svc.start(target=10, owner_user_id="admin")

    report = asyncio.run(svc.tick())

    assert report.ok is True
    assert (report.saved_count, report.skipped_count, report.failed_count) == (1, 1, 1)
    assert svc.status().progress == 1
    assert svc.status().last_run_at is not None

    noah = QuestionService(db).read.find_complete_by_query("who was noah?")
    assert noah is not None
    assert noah.user_id == "admin"
    assert noah.slug == "who-was-noah"


def test_tick_off_topic_answer_is_failed_and_not_saved(db):
    svc = _service(db, questions=lambda n: ["Best pizza in town?"], answer=lambda q: make_refusal())
    svc.start(target=10, owner_user_id="admin")

    report = asyncio.run(svc.tick())

    assert report.failed_count == 1
    assert db.query(QuestionRecord).count() == 0
    assert svc.status().progress == 0


def test_tick_reaching_target_auto_stops(db):
    svc = _service(db, questions=lambda n: ["Who was Ruth?", "Who was Boaz?"])
    svc.start(target=2, owner_user_id="admin")

    report = asyncio.run(svc.tick())

    assert report.saved_count == 2
    assert report.completed is True
    status = svc.status()
    assert status.is_generating is False
    assert status.progress == 2


def test_tick_runs_items_concurrently(db, monkeypatch):
    monkeypatch.setattr(settings, "GENERATION_BATCH_SIZE", 3)
    barrier = threading.Barrier(3, timeout=5)

    def answer(question):
        # only passes if all three items are in flight together
        barrier.wait()
        return make_study(question)

    svc = _service(db, questions=lambda n: ["Who was Ruth?", "Who was Boaz?", "Who was Naomi?"], answer=answer)
    svc.start(target=10, owner_user_id="admin")

    report = asyncio.run(svc.tick())

    assert report.saved_count == 3
    assert svc.status().progress == 3


def test_slow_item_times_out_without_sinking_the_batch(db, monkeypatch):
    monkeypatch.setattr(settings, "GENERATION_ITEM_TIMEOUT_SECONDS", 1)

    def answer(question):
        if question == "Who was Boaz?":
            time.sleep(3)
            raise LLMRetryableError("too late")
        return make_study(question)

    svc = _service(db, questions=lambda n: ["Who was Ruth?", "Who was Boaz?"], answer=answer)
    svc.start(target=10, owner_user_id="admin")

    report = asyncio.run(svc.tick())

    statuses = sorted(o.status.value for o in report.outcomes)
    assert statuses == [ItemStatus.FAILED.value, ItemStatus.SAVED.value]
    assert svc.status().progress == 1


def test_timed_out_item_is_not_saved_after_the_fact(db, monkeypatch):
    monkeypatch.setattr(settings, "GENERATION_ITEM_TIMEOUT_SECONDS", 1)

    def answer(question):
        time.sleep(1.5)
        return make_study(question)

    svc = _service(db, questions=lambda n: ["Who was Boaz?"], answer=answer)
    svc.start(target=10, owner_user_id="admin")

    # asyncio.run waits for the abandoned worker thread before returning
    report = asyncio.run(svc.tick())

    assert report.failed_count == 1
    assert svc.status().progress == 0
    assert db.query(QuestionRecord).count() == 0


def test_process_question_past_deadline_does_not_save(db):
    svc = _service(db)

    outcome = svc.process_question("Who was Naomi?", "admin", deadline=time.monotonic() - 1)

    assert outcome.status == ItemStatus.FAILED
    assert db.query(QuestionRecord).count() == 0


def test_restart_keeps_progress(db):
    svc = _service(db)
    svc.start(target=10, owner_user_id="admin")
    GenerationStatusWriteRepo(db).add_progress(4, now=svc.status().started_at)
    db.commit()

    stopped = svc.stop()
    with pytest.raises(AppError) as exc:
        svc.stop()
    assert exc.value.code == ErrorCode.NOT_RUNNING
    assert svc.status() == stopped

    _, status = svc.start(target=10, owner_user_id="admin")
    assert status.is_generating is True
    assert status.progress == 4
    assert svc.status().progress == 4

from fastapi import Depends
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_generation_service, get_question_service
from app.auth.jwt import create_access_token
from app.core.config import settings
from app.main import app
from app.services.generation_service import GenerationService
from app.services.question_service import QuestionService

from conftest import make_study


def _use_generation(questions, answer=make_study):
    def dep(db: Session = Depends(get_db)):
        return GenerationService(db, question_fn=questions, answer_fn=answer)

    app.dependency_overrides[get_generation_service] = dep


def _use_questions(answer):
    def dep(db: Session = Depends(get_db)):
        return QuestionService(db, answer_fn=answer)

    app.dependency_overrides[get_question_service] = dep


# ----------------------------
# Auth
# ----------------------------
def test_login_issues_admin_token(client):
    resp = client.post("/auth/login", json={"username": "admin", "password": "admin-password"})
    assert resp.status_code == 200, resp.text
    token = resp.json()["access_token"]

    check = client.get("/api/admin/check-access", headers={"Authorization": f"Bearer {token}"})
    assert check.status_code == 200
    assert check.json()["is_admin"] is True


def test_login_rejects_bad_password(client):
    resp = client.post("/auth/login", json={"username": "admin", "password": "nope"})
    assert resp.status_code == 401
    assert resp.json()["error"]["code"] == "UNAUTHORIZED"


def test_admin_routes_require_token(client):
    assert client.get("/api/admin/generation/status").status_code == 401
    resp = client.get("/api/admin/generation/status", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401


def test_admin_routes_reject_non_admin(client):
    token = create_access_token(subject="someone@example.com")
    resp = client.get("/api/admin/generation/status", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 403


def test_allowed_email_is_admin(client):
    token = create_access_token(subject="Editor@Example.com")
    resp = client.get("/api/admin/check-access", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200


# ----------------------------
# Generation control
# ----------------------------
def test_start_stop_reset_flow(client, admin_headers):
    resp = client.post("/api/admin/generation/start", json={"target": 10}, headers=admin_headers)
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["ok"] is True
    assert body["status"]["is_generating"] is True
    assert body["status"]["target"] == 10

    again = client.post("/api/admin/generation/start", json={"target": 10}, headers=admin_headers)
    assert again.status_code == 400
    assert again.json()["error"]["code"] == "ALREADY_RUNNING"

    status = client.get("/api/admin/generation/status", headers=admin_headers).json()
    assert status["is_generating"] is True
    assert status["progress"] == 0

    stop = client.post("/api/admin/generation/stop", headers=admin_headers)
    assert stop.status_code == 200
    assert stop.json()["status"]["is_generating"] is False

    stop_again = client.post("/api/admin/generation/stop", headers=admin_headers)
    assert stop_again.status_code == 400
    assert stop_again.json()["error"]["code"] == "NOT_RUNNING"

    reset = client.post("/api/admin/generation/reset", headers=admin_headers)
    assert reset.status_code == 200
    assert reset.json()["status"]["progress"] == 0


def test_start_validates_target(client, admin_headers):
    resp = client.post("/api/admin/generation/start", json={"target": 0}, headers=admin_headers)
    assert resp.status_code == 422


def test_stats(client, admin_headers):
    resp = client.get("/api/admin/stats", headers=admin_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["total_questions"] == 0
    assert body["daily_limit"] == settings.DAILY_GENERATION_LIMIT
    assert body["is_running"] is False


def test_generate_questions_preview(client, admin_headers):
    _use_generation(lambda n: [f"Question number {i}?" for i in range(n)])
    resp = client.post("/api/admin/generate-questions", json={"count": 3}, headers=admin_headers)
    assert resp.status_code == 200, resp.text
    assert resp.json()["count"] == 3


# ----------------------------
# Cron tick
# ----------------------------
def test_cron_requires_secret(client):
    assert client.get("/api/cron/generate-questions").status_code == 401
    resp = client.get("/api/cron/generate-questions", headers={"Authorization": "Bearer wrong"})
    assert resp.status_code == 401


def test_cron_fails_closed_without_secret(client, cron_headers, monkeypatch):
    monkeypatch.setattr(settings, "CRON_SECRET", None)
    resp = client.get("/api/cron/generate-questions", headers=cron_headers)
    assert resp.status_code == 503
    assert resp.json()["error"]["code"] == "CONFIG_ERROR"


def test_cron_tick_while_paused(client, cron_headers):
    _use_generation(lambda n: [])
    resp = client.get("/api/cron/generate-questions", headers=cron_headers)
    assert resp.status_code == 200, resp.text
    assert resp.json()["skipped"] is True


def test_cron_tick_generates_batch(client, admin_headers, cron_headers):
    _use_generation(lambda n: ["Who was Ruth?", "Who was Boaz?"])
    client.post("/api/admin/generation/start", json={"target": 10}, headers=admin_headers)

    resp = client.get("/api/cron/generate-questions", headers=cron_headers)
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["saved_count"] == 2
    assert body["progress"] == 2

    page = client.get("/api/questions/who-was-ruth")
    assert page.status_code == 200
    assert page.json()["result"]["content"]["literalAnswer"] == "Answer to Who was Ruth?"


# ----------------------------
# Public search
# ----------------------------
def test_search_then_page_and_listing(client):
    _use_questions(make_study)
    resp = client.post("/api/search", json={"query": "Who was Elijah?"})
    assert resp.status_code == 200, resp.text
    assert resp.json()["isRelevant"] is True

    listing = client.get("/api/searches", params={"limit": 10}).json()["items"]
    assert [i["slug"] for i in listing] == ["who-was-elijah"]

    page = client.get("/api/questions/who-was-elijah")
    assert page.status_code == 200
    assert page.json()["query"] == "Who was Elijah?"


def test_track_search_records_owner(client, admin_headers):
    resp = client.post("/api/track-search", json={"query": "What is grace?"}, headers=admin_headers)
    assert resp.status_code == 200, resp.text
    assert resp.json()["slug"] == "what-is-grace"

    # tracking rows have no study page yet
    assert client.get("/api/questions/what-is-grace").status_code == 404


def test_unknown_question_page_is_404(client):
    resp = client.get("/api/questions/does-not-exist")
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "NOT_FOUND"


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}
    assert client.get("/api/db/health").json()["db"] == "connected"


def test_stale_token_on_public_routes_is_treated_as_anonymous(client):
    _use_questions(make_study)
    headers = {"Authorization": "Bearer not-a-jwt"}

    tracked = client.post("/api/track-search", json={"query": "What is grace?"}, headers=headers)
    assert tracked.status_code == 200, tracked.text

    searched = client.post("/api/search", json={"query": "Who was Elijah?"}, headers=headers)
    assert searched.status_code == 200, searched.text
    assert searched.json()["isRelevant"] is True


def test_similar_topics_route(client):
    _use_questions(make_study)
    client.post("/api/search", json={"query": "Who was the prophet Elijah?"})
    client.post("/api/search", json={"query": "Who was the prophet Elisha?"})

    resp = client.post(
        "/api/similar-topics",
        json={"query": "Who was the prophet Elijah?", "searchTopic": "prophets", "keyTerms": [{"term": "Prophet"}]},
    )
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert [t["query"] for t in body] == ["Who was the prophet Elisha?"]
    assert body[0]["score"] > 0
    assert body[0]["slug"]


def test_check_setup_requires_admin(client):
    assert client.get("/api/admin/check-setup").status_code == 401


def test_check_setup_reports_configuration(client, admin_headers):
    resp = client.get("/api/admin/check-setup", headers=admin_headers)
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["environment"]["has_cron_secret"] is True
    assert body["environment"]["has_gemini_key"] is False
    assert body["database"]["connected"] is True
    assert body["database"]["status_row_exists"] is True
    assert body["database"]["generation_status"]["is_generating"] is False


def test_check_setup_reports_missing_status_row(client, admin_headers, db):
    from app.models.generation_status import GenerationStatus

    db.query(GenerationStatus).delete()
    db.commit()

    body = client.get("/api/admin/check-setup", headers=admin_headers).json()
    assert body["database"]["connected"] is True
    assert body["database"]["status_row_exists"] is False
    # diagnostics never provision the row
    assert db.query(GenerationStatus).count() == 0


def test_unhandled_errors_become_internal_error():
    def broken():
        raise RuntimeError("boom")

    app.dependency_overrides[get_question_service] = broken
    client = TestClient(app, raise_server_exceptions=False)

    resp = client.get("/api/searches")
    assert resp.status_code == 500
    assert resp.json()["error"]["code"] == "INTERNAL_ERROR"

import os
import tempfile

# Settings are read at import time; point the app at a throwaway sqlite file first.
_DB_DIR = tempfile.mkdtemp(prefix="scripture-study-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret"
os.environ["ADMIN_USERNAME"] = "admin"
os.environ["ADMIN_PASSWORD"] = "admin-password"
os.environ["ALLOWED_ADMIN_EMAILS"] = "editor@example.com"
os.environ["CRON_SECRET"] = "cron-secret"
os.environ["GEMINI_API_KEY"] = ""

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.auth.jwt import create_access_token  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.db.session import SessionLocal, engine  # noqa: E402
from app.main import app  # noqa: E402
from app.models.generation_status import GenerationStatus, STATUS_KEY  # noqa: E402
from app.schemas.study import StudyContent, StudyResponse  # noqa: E402


@pytest.fixture(autouse=True)
def schema():
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as db:
        db.add(GenerationStatus(key=STATUS_KEY, is_generating=False, progress=0, target=500))
        db.commit()
    yield
    app.dependency_overrides.clear()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {create_access_token(subject='admin')}"}


@pytest.fixture
def cron_headers():
    return {"Authorization": "Bearer cron-secret"}


def make_study(question: str) -> StudyResponse:
    return StudyResponse(
        is_relevant=True,
        content=StudyContent(
            literal_answer=f"Answer to {question}",
            search_topic=question,
        ),
    )


def make_refusal() -> StudyResponse:
    return StudyResponse(is_relevant=False, refusal_message="I can only help with biblical topics.")

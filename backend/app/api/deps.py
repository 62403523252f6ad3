from typing import Generator
from fastapi import Depends
from sqlalchemy.orm import Session

from app.db.session import SessionLocal
from app.services.generation_service import GenerationService
from app.services.question_service import QuestionService

def get_db() -> Generator[Session, None, None]:
    """
    Yields a DB session per request.
    Ensures the session is closed even on exceptions.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_question_service(db: Session = Depends(get_db)) -> QuestionService:
    return QuestionService(db=db)


def get_generation_service(db: Session = Depends(get_db)) -> GenerationService:
    """
    Generation run service. Item pipelines open their own sessions from SessionLocal;
    tests override this dependency to swap the LLM callables.
    """
    return GenerationService(db=db)

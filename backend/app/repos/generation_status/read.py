"""
generation_status/read.py
- Purpose: Read the generation status singleton.
"""

from sqlalchemy.orm import Session

from app.models.generation_status import GenerationStatus, STATUS_KEY


class GenerationStatusReadRepo:
    def __init__(self, db: Session):
        self.db = db

    def get(self) -> GenerationStatus | None:
        # Writes are bulk UPDATEs; always reload instead of trusting the identity map
        return (
            self.db.query(GenerationStatus)
            .filter(GenerationStatus.key == STATUS_KEY)
            .execution_options(populate_existing=True)
            .first()
        )

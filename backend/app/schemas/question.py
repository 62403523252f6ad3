from datetime import datetime
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SearchRequest(BaseModel):
    query: str = Field(min_length=1, max_length=500)


class TrackSearchResponse(BaseModel):
    ok: bool = True
    id: str
    slug: str


class SearchListItem(BaseModel):
    query: str
    slug: str | None = None
    created_at: datetime


class QuestionPage(BaseModel):
    query: str
    slug: str
    result: dict[str, Any]
    created_at: datetime


class InterlinearRequest(BaseModel):
    reference: str = Field(min_length=1, max_length=100)


class SearchListResponse(BaseModel):
    items: List[SearchListItem]


class SimilarTopicsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    query: str = Field(min_length=1, max_length=500)
    search_topic: str | None = Field(default=None, alias="searchTopic")
    key_terms: List[str] = Field(default_factory=list, alias="keyTerms")

    @field_validator("key_terms", mode="before")
    @classmethod
    def _terms(cls, v):
        # accepts plain strings or the {"term", "definition"} objects of a study record
        out = []
        for kt in v or []:
            term = kt.get("term") if isinstance(kt, dict) else kt
            if isinstance(term, str) and term.strip():
                out.append(term.strip())
        return out


class SimilarTopic(BaseModel):
    query: str
    slug: str | None = None
    score: int
    created_at: datetime

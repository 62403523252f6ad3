"""
study.py
- Purpose: Shape of the study record the LLM produces for one question.
- Field names are camelCase on the wire (stored JSON + LLM schema); snake_case in Python.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Language = Literal["Hebrew", "Greek", "Aramaic"]
Tradition = Literal["Jewish", "Christian", "Historical"]

DEFAULT_LOCATION = "Israel"
DEFAULT_REGION = "The Holy Land"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class KeyTerm(CamelModel):
    term: str
    definition: str


class ScriptureReference(CamelModel):
    reference: str
    text: str


class GeographicalAnchor(CamelModel):
    location: str = DEFAULT_LOCATION
    region: str = DEFAULT_REGION


class InterlinearWord(CamelModel):
    original: str
    transliteration: str
    english: str
    part_of_speech: str


class InterlinearData(CamelModel):
    reference: str
    language: Language
    words: List[InterlinearWord]


class OriginalWord(CamelModel):
    word: str
    original: str
    transliteration: str
    language: Language
    definition: str
    usage: str


class Commentary(CamelModel):
    source: str
    text: str
    tradition: Tradition


class BookStats(CamelModel):
    book: str
    count: float


class StudyContent(CamelModel):
    literal_answer: str
    key_terms: List[KeyTerm] = Field(default_factory=list)
    search_topic: str
    geographical_anchor: GeographicalAnchor = Field(default_factory=GeographicalAnchor)
    interlinear: Optional[InterlinearData] = None
    scripture_references: List[ScriptureReference] = Field(default_factory=list)
    historical_context: str = ""
    original_language_analysis: List[OriginalWord] = Field(default_factory=list)
    theological_insight: str = ""
    commentary_synthesis: List[Commentary] = Field(default_factory=list)
    biblical_book_frequency: List[BookStats] = Field(default_factory=list)


class StudyResponse(CamelModel):
    is_relevant: bool
    refusal_message: Optional[str] = None
    content: Optional[StudyContent] = None

    def to_record(self) -> dict:
        """JSON stored in searches.result and returned by the API."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

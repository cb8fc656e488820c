from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

YES_THRESHOLD = 75
MAYBE_THRESHOLD = 55


class Decision(str, Enum):
    YES = "YES"
    MAYBE = "MAYBE"
    NO = "NO"


def decision_for_score(score: int) -> Decision:
    if score >= YES_THRESHOLD:
        return Decision.YES
    if score >= MAYBE_THRESHOLD:
        return Decision.MAYBE
    return Decision.NO


class EvaluationSettings(BaseModel):
    overview: Optional[str] = Field(default=None, max_length=1500)
    must_have_keywords: Optional[List[str]] = Field(default=None, max_length=30)
    nice_to_have_keywords: Optional[List[str]] = Field(default=None, max_length=30)
    custom_prompt: Optional[str] = Field(default=None, max_length=2000)


class KeywordMatch(BaseModel):
    keyword: str
    matched: bool
    source: Literal["answers", "resume", "both"] = "answers"


class EvaluationMetadata(BaseModel):
    """Diagnostic trail stored next to every evaluation.

    Keys are camelCase when dumped with ``by_alias=True`` so stored records
    keep their historical shape.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, protected_namespaces=())

    model_used: Optional[str] = None
    ai_model_attempts: Optional[List[str]] = None
    resume_analyzed: Optional[bool] = None
    resume_url: Optional[str] = None
    resume_text_preview: Optional[str] = None
    resume_text: Optional[str] = None
    notes: Optional[str] = None
    raw_response_preview: Optional[str] = None
    # which path produced the result: ai, default (no API key) or heuristic
    source: Optional[Literal["ai", "default", "heuristic"]] = None
    keyword_matches: Optional[List[KeywordMatch]] = None
    # heuristic path only
    highlights: Optional[List[str]] = None
    resume_included: Optional[bool] = None

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

    def add_note(self, note: str) -> None:
        self.notes = f"{self.notes} | {note}" if self.notes else note


class EvaluationOutput(BaseModel):
    score: int = Field(..., ge=0, le=100)
    decision: Decision
    summary: str
    strengths: List[str] = Field(default_factory=list)
    risks: List[str] = Field(default_factory=list)
    metadata: EvaluationMetadata = Field(default_factory=EvaluationMetadata)


class AiSuccess(BaseModel):
    score: int
    summary: str
    strengths: List[str]
    risks: List[str]
    metadata: EvaluationMetadata


class AiFailure(BaseModel):
    message: str
    metadata: EvaluationMetadata


AiOutcome = Union[AiSuccess, AiFailure]

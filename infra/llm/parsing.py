import json
import math
import re
from typing import Any, List, Optional

from pydantic import BaseModel, ValidationError, field_validator

from domain.evaluation_models import KeywordMatch

_CODE_FENCE = re.compile(r"```(?:json)?([\s\S]*?)```", re.IGNORECASE)
_SOURCES = {"answers", "resume", "both"}


def extract_json_payload(raw: str) -> str:
    """Cut the JSON object out of a model reply.

    Fenced blocks are unwrapped recursively, otherwise the text between the
    first ``{`` and the last ``}`` is kept. Anything else comes back trimmed
    so ``json.loads`` reports the problem.
    """
    trimmed = raw.strip()
    if trimmed.startswith("```"):
        match = _CODE_FENCE.search(trimmed)
        if match and match.group(1):
            return extract_json_payload(match.group(1))
    first = trimmed.find("{")
    last = trimmed.rfind("}")
    if first != -1 and last >= first:
        return trimmed[first:last + 1]
    return trimmed


def _to_string_list(value: Any) -> List[str]:
    if isinstance(value, list):
        items = [item.strip() for item in value if isinstance(item, str)]
        return [item for item in items if item]
    if isinstance(value, str) and value.strip():
        return [value.strip()]
    return []


def _coerce_matched(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() == "true"


class EvaluationPayload(BaseModel):
    score: float
    summary: str
    strengths: List[str] = []
    risks: List[str] = []
    keyword_matches: Optional[List[KeywordMatch]] = None

    @field_validator("score", mode="before")
    @classmethod
    def _finite_score(cls, value):
        if isinstance(value, bool) or value is None:
            raise ValueError("response has no valid score")
        if isinstance(value, str):
            value = value.strip()
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise ValueError("response has no valid score") from None
        if not math.isfinite(number):
            raise ValueError("response has no valid score")
        return number

    @field_validator("summary", mode="before")
    @classmethod
    def _non_empty_summary(cls, value):
        if not isinstance(value, str) or not value.strip():
            raise ValueError("response has no summary")
        return value.strip()

    @field_validator("strengths", "risks", mode="before")
    @classmethod
    def _ensure_list(cls, value):
        return _to_string_list(value)

    @field_validator("keyword_matches", mode="before")
    @classmethod
    def _normalize_matches(cls, value):
        if not isinstance(value, list):
            return None
        matches = []
        for entry in value:
            if not isinstance(entry, dict):
                continue
            keyword = entry.get("keyword")
            keyword = keyword.strip() if isinstance(keyword, str) else ""
            if not keyword:
                continue
            source = entry.get("source")
            matches.append({
                "keyword": keyword,
                "matched": _coerce_matched(entry.get("matched")),
                "source": source if source in _SOURCES else "answers",
            })
        return matches or None

    def rounded_score(self) -> int:
        # half-up rounding, clamped to the 0-100 contract
        return max(0, min(100, math.floor(self.score + 0.5)))


def parse_evaluation_payload(raw_text: str) -> EvaluationPayload:
    if not raw_text or not raw_text.strip():
        raise ValueError("Empty response returned by model")
    try:
        data = json.loads(extract_json_payload(raw_text))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Model response was not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError("Model response was not a JSON object")
    data.setdefault("keyword_matches", data.pop("keywordMatches", None))
    try:
        return EvaluationPayload.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Model response failed validation: {exc}") from exc

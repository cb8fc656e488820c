"""Deterministic fallback scoring used when no model can evaluate a submission."""
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from domain.evaluation_models import (
    Decision,
    EvaluationMetadata,
    EvaluationOutput,
    decision_for_score,
)

BASE_SCORE = 50
MAX_SCORE = 95
TECH_SCORE_CAP = 45
UNKNOWN_TECH_POINTS = 1

KEYWORD_WEIGHTS: Dict[str, int] = {
    "react": 10,
    "next": 10,
    "typescript": 8,
    "prisma": 6,
    "postgres": 5,
    "node": 5,
    "graphql": 4,
    "tailwind": 3,
    "ai": 4,
    "leadership": 3,
}

MISSING_MOTIVATION = "Missing motivation statement"
NOT_AI_EVALUATED = "Application could not be AI-evaluated."
FALLBACK_NOTE = "Fallback heuristics were used."

_CLOSING = {
    Decision.YES: "Strong technical alignment and communication depth make this applicant worth advancing.",
    Decision.MAYBE: "Signals are promising but require manual review to confirm fit.",
    Decision.NO: "Key competency gaps were detected; review the risks before moving forward.",
}


@dataclass
class Signals:
    score: int = 0
    strengths: List[str] = field(default_factory=list)
    risks: List[str] = field(default_factory=list)
    highlights: List[str] = field(default_factory=list)


def score_technologies(raw: Any) -> Signals:
    if isinstance(raw, list):
        text = ", ".join(str(item) for item in raw)
    elif isinstance(raw, str):
        text = raw
    else:
        return Signals()

    technologies = [t.strip().lower() for t in re.split(r"[\n,]", text)]
    signals = Signals()
    for tech in filter(None, technologies):
        weight = KEYWORD_WEIGHTS.get(tech)
        if weight:
            signals.score += weight
            signals.highlights.append(tech)
        else:
            signals.score += UNKNOWN_TECH_POINTS
    signals.score = min(signals.score, TECH_SCORE_CAP)
    signals.strengths = [f"{tech} expertise" for tech in signals.highlights]
    return signals


def score_narrative(raw: Any) -> Signals:
    value = raw if isinstance(raw, str) else ""
    if not value:
        return Signals(score=-10, risks=[MISSING_MOTIVATION])

    signals = Signals()
    sentences = [s for s in re.split(r"[.!?]+", value) if len(s.strip()) > 5]
    lowered = value.lower()

    # the checks overlap on purpose; several can fire for one answer
    if len(value) > 200:
        signals.score += 12
        signals.strengths.append("Provides detailed motivation")
    if len(sentences) >= 4:
        signals.score += 10
        signals.strengths.append("Communicates in complete thoughts")
    if "team" in lowered:
        signals.score += 4
        signals.strengths.append("Mentions collaborative work")
    if "learning" in lowered:
        signals.score += 3
        signals.strengths.append("Highlights growth mindset")
    if len(value) < 80:
        signals.score -= 8
        signals.risks.append("Response is too short")
    return signals


def _years(raw: Any) -> Optional[float]:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        return float(raw)
    if isinstance(raw, str):
        try:
            return float(raw.strip())
        except ValueError:
            return None
    return None


def score_experience(raw: Any) -> Signals:
    years = _years(raw)
    if years is None:
        return Signals()
    if years >= 5:
        return Signals(score=12, strengths=["5+ years of hands-on experience"])
    if years >= 2:
        return Signals(score=8)
    return Signals(score=-5, risks=["Limited commercial experience"])


def _first_present(answers: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = answers.get(key)
        if value is not None:
            return value
    return None


def _dedupe(items: List[str]) -> List[str]:
    return list(dict.fromkeys(items))


def heuristic_evaluation(
    applicant_name: str,
    answers: Dict[str, Any],
    form_title: str,
    resume_url: Optional[str] = None,
    resume_text: Optional[str] = None,
) -> EvaluationOutput:
    tech = score_technologies(_first_present(answers, "technologies", "techStack"))
    narrative = score_narrative(_first_present(answers, "motivation", "about"))
    experience = score_experience(answers.get("yearsExperience"))

    score = BASE_SCORE + tech.score + narrative.score + experience.score
    score = max(0, min(score, MAX_SCORE))
    decision = decision_for_score(score)

    summary = (
        f"{applicant_name} is evaluated for {form_title} with a score of {score}. "
        + _CLOSING[decision]
    )
    metadata = EvaluationMetadata(
        highlights=tech.highlights,
        resume_included=bool(resume_url or resume_text),
        resume_analyzed=bool(resume_text),
        resume_text_preview=resume_text[:500] if resume_text else None,
        resume_text=resume_text or None,
        notes=FALLBACK_NOTE,
        source="heuristic",
    )
    return EvaluationOutput(
        score=score,
        decision=decision,
        summary=summary,
        strengths=_dedupe(tech.strengths + narrative.strengths + experience.strengths),
        risks=_dedupe(narrative.risks + experience.risks),
        metadata=metadata,
    )

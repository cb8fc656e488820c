import json
from typing import Any, Dict, Optional

from domain.evaluation_models import EvaluationSettings

RESUME_CHAR_BUDGET = 6000
NOT_SPECIFIED = "Not specified"
NO_OVERVIEW = "No overview provided."

EVALUATION_PROMPT = """You are a technical hiring evaluator. Review the information below and respond with JSON only.

Position: {form_title}
General expectations: {overview}
Must-have keywords: {must_have}
Nice-to-have keywords: {nice_to_have}
{custom_instruction}

Candidate form answers:
{answers}

{resume_section}

Response format:
{{
  "score": number (0-100),
  "summary": string,
  "strengths": string[],
  "risks": string[],
  "keywordMatches": [{{ "keyword": string, "matched": boolean, "source": "answers"|"resume"|"both" }}]
}}

The score field is required and must be an integer between 0 and 100. Keep the summary short and clear."""

RESUME_SECTION = """Text extracted from the candidate's resume:
{resume}
(Summarize the resume if it is longer)"""

NO_RESUME_SECTION = "The candidate did not upload a resume or its content could not be read."


def build_evaluation_prompt(
    form_title: str,
    evaluation: Optional[EvaluationSettings],
    answers: Dict[str, Any],
    resume_text: Optional[str] = None,
) -> str:
    evaluation = evaluation or EvaluationSettings()
    must_have = ", ".join(evaluation.must_have_keywords or []) or NOT_SPECIFIED
    nice_to_have = ", ".join(evaluation.nice_to_have_keywords or []) or NOT_SPECIFIED
    custom_instruction = (
        f"The form owner also gave this instruction: {evaluation.custom_prompt}"
        if evaluation.custom_prompt else ""
    )
    resume_section = (
        RESUME_SECTION.format(resume=resume_text[:RESUME_CHAR_BUDGET])
        if resume_text else NO_RESUME_SECTION
    )
    return EVALUATION_PROMPT.format(
        form_title=form_title,
        overview=evaluation.overview or NO_OVERVIEW,
        must_have=must_have,
        nice_to_have=nice_to_have,
        custom_instruction=custom_instruction,
        answers=json.dumps(answers, indent=2, ensure_ascii=False, default=str),
        resume_section=resume_section,
    )

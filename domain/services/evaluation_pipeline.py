import logging
from typing import Any, Dict, List, Optional

from app.settings import candidate_models, settings
from domain.errors import ModelsExhaustedError
from domain.evaluation_models import (
    AiFailure,
    AiOutcome,
    AiSuccess,
    EvaluationMetadata,
    EvaluationOutput,
    EvaluationSettings,
    decision_for_score,
)
from domain.services.heuristics import NOT_AI_EVALUATED, heuristic_evaluation
from infra.llm.client import GenerateFn, generate_content, invoke_models
from infra.llm.prompts import build_evaluation_prompt
from infra.pdf.parser import extract_pdf_text_from_url

logger = logging.getLogger(__name__)

RESUME_PREVIEW_CHARS = 500
MISSING_KEY_SCORE = 60


def _usable(text: Optional[str]) -> Optional[str]:
    return text if text and text.strip() else None


def _missing_key_result(metadata: EvaluationMetadata, resume_text: Optional[str]) -> AiSuccess:
    metadata.notes = "Gemini API key is missing."
    metadata.source = "default"
    # kept so a later re-evaluation can still use an uploaded résumé
    metadata.resume_text = resume_text
    metadata.resume_text_preview = resume_text[:RESUME_PREVIEW_CHARS] if resume_text else None
    return AiSuccess(
        score=MISSING_KEY_SCORE,
        summary="Gemini API key is not configured; a default evaluation was applied.",
        strengths=[],
        risks=["AI evaluation could not be performed."],
        metadata=metadata,
    )


async def evaluate_with_ai(
    form_title: str,
    evaluation: Optional[EvaluationSettings],
    answers: Dict[str, Any],
    resume_url: Optional[str] = None,
    resume_text: Optional[str] = None,
    *,
    models: Optional[List[str]] = None,
    generate: GenerateFn = generate_content,
) -> AiOutcome:
    metadata = EvaluationMetadata(resume_url=resume_url)
    if not settings.GEMINI_API_KEY:
        logger.warning("GEMINI_API_KEY not set; returning default evaluation")
        return _missing_key_result(metadata, _usable(resume_text))

    try:
        if not resume_text and resume_url:
            extraction = await extract_pdf_text_from_url(resume_url)
            metadata.resume_analyzed = extraction.success
            resume_text = extraction.text
            logger.info("Résumé fetched from %s: success=%s length=%d",
                        resume_url, extraction.success, len(extraction.text))
        resume_text = _usable(resume_text)
        metadata.resume_text = resume_text
        metadata.resume_text_preview = resume_text[:RESUME_PREVIEW_CHARS] if resume_text else None

        models = models if models is not None else candidate_models(settings)
        metadata.ai_model_attempts = list(models)
        prompt = build_evaluation_prompt(form_title, evaluation, answers, resume_text)
        logger.info("Invoking models %s (resume=%s answers=%s)",
                    models, bool(resume_text), sorted(answers))
        invocation = await invoke_models(prompt, models, generate)
    except ModelsExhaustedError as exc:
        metadata.notes = f"AI request failed: {exc}"
        metadata.raw_response_preview = exc.raw_response_preview
        return AiFailure(message=str(exc), metadata=metadata)
    except Exception as exc:
        logger.exception("AI evaluation failed before a model answered")
        metadata.notes = f"AI request failed: {exc}"
        return AiFailure(message=str(exc) or exc.__class__.__name__, metadata=metadata)

    payload = invocation.payload
    metadata.model_used = invocation.model_used
    metadata.source = "ai"
    metadata.keyword_matches = payload.keyword_matches
    if metadata.resume_analyzed is None:
        metadata.resume_analyzed = bool(resume_text)
    if invocation.failure_notes:
        metadata.notes = "Previous attempts: " + " | ".join(invocation.failure_notes)
    return AiSuccess(
        score=payload.rounded_score(),
        summary=payload.summary,
        strengths=payload.strengths,
        risks=payload.risks,
        metadata=metadata,
    )


def _fallback(
    applicant_name: str,
    answers: Dict[str, Any],
    form_title: str,
    resume_url: Optional[str],
    resume_text: Optional[str],
    failure: Optional[AiFailure] = None,
) -> EvaluationOutput:
    if failure is not None:
        resume_text = resume_text or failure.metadata.resume_text
    output = heuristic_evaluation(
        applicant_name, answers, form_title,
        resume_url=resume_url, resume_text=_usable(resume_text),
    )
    if failure is not None:
        output.risks.append(NOT_AI_EVALUATED)
        output.metadata.ai_model_attempts = failure.metadata.ai_model_attempts
        output.metadata.raw_response_preview = failure.metadata.raw_response_preview
        output.metadata.resume_url = resume_url
        output.metadata.add_note(failure.metadata.notes or f"AI request failed: {failure.message}")
    return output


async def evaluate_submission(
    applicant_name: str,
    answers: Dict[str, Any],
    form_title: str,
    resume_url: Optional[str] = None,
    resume_text: Optional[str] = None,
    evaluation_settings: Optional[EvaluationSettings] = None,
    *,
    generate: GenerateFn = generate_content,
) -> EvaluationOutput:
    """Score one submission; always returns a complete EvaluationOutput."""
    if not settings.AI_EVALUATION_ENABLED:
        logger.info("AI evaluation disabled; scoring %s heuristically", applicant_name)
        return _fallback(applicant_name, answers, form_title, resume_url, resume_text)

    outcome = await evaluate_with_ai(
        form_title, evaluation_settings, answers,
        resume_url=resume_url, resume_text=resume_text, generate=generate,
    )
    if isinstance(outcome, AiFailure):
        logger.error("AI evaluation unavailable, using fallback heuristics: %s", outcome.message)
        return _fallback(applicant_name, answers, form_title, resume_url, resume_text, outcome)

    return EvaluationOutput(
        score=outcome.score,
        decision=decision_for_score(outcome.score),
        summary=outcome.summary,
        strengths=outcome.strengths,
        risks=outcome.risks,
        metadata=outcome.metadata,
    )

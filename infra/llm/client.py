import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, List, Optional

import httpx

from app.settings import settings
from domain.errors import ModelsExhaustedError
from infra.llm.parsing import EvaluationPayload, parse_evaluation_payload

logger = logging.getLogger(__name__)

RAW_PREVIEW_CHARS = 500

GenerateFn = Callable[[str, str], Awaitable[str]]


@dataclass
class ModelInvocation:
    payload: EvaluationPayload
    model_used: str
    attempts: List[str]
    failure_notes: List[str] = field(default_factory=list)


async def _post_with_retries(
    url: str,
    headers: Dict[str, str],
    payload: Dict,
    *,
    timeout: float = 30,
    max_attempts: int = 2,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict:
    backoff = 1.0
    for attempt in range(1, max_attempts + 1):
        try:
            async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
                response = await client.post(url, headers=headers, json=payload)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            retriable = status >= 500 or status in {408, 429}
            if not retriable or attempt == max_attempts:
                raise
        except httpx.RequestError:
            if attempt == max_attempts:
                raise
        logger.warning("Retrying %s (attempt %d/%d)", url, attempt + 1, max_attempts)
        await asyncio.sleep(backoff)
        backoff *= 2
    raise RuntimeError("Unexpected retry exhaustion")


def _response_text(data: Dict) -> str:
    candidates = data.get("candidates") or []
    if not candidates:
        feedback = data.get("promptFeedback") or {}
        raise ValueError(
            f"No candidates returned (blockReason={feedback.get('blockReason')})")
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(p.get("text", "") for p in parts if isinstance(p, dict))


async def generate_content(
    prompt: str,
    model: str,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    url = f"{settings.GEMINI_API_BASE.rstrip('/')}/models/{model}:generateContent"
    headers = {"x-goog-api-key": settings.GEMINI_API_KEY or ""}
    payload = {
        "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        "generationConfig": {"responseMimeType": "application/json"},
    }
    data = await _post_with_retries(
        url,
        headers,
        payload,
        timeout=settings.LLM_TIMEOUT_SECONDS,
        max_attempts=max(1, settings.LLM_MAX_ATTEMPTS),
        transport=transport,
    )
    return _response_text(data)


async def invoke_models(
    prompt: str,
    models: List[str],
    generate: GenerateFn = generate_content,
) -> ModelInvocation:
    """Try each model in order until one returns a valid evaluation.

    Raises ModelsExhaustedError carrying every ``model=<name> -> <message>``
    note when no model succeeds.
    """
    failure_notes: List[str] = []
    raw_preview: Optional[str] = None
    for model in models:
        raw: Optional[str] = None
        try:
            raw = await generate(prompt, model)
            payload = parse_evaluation_payload(raw)
        except Exception as exc:
            message = str(exc) or exc.__class__.__name__
            logger.error("Model attempt failed: model=%s error=%s", model, message)
            failure_notes.append(f"model={model} -> {message}")
            if raw:
                raw_preview = raw[:RAW_PREVIEW_CHARS]
            continue
        logger.info(
            "Model succeeded: model=%s score=%s strengths=%d risks=%d",
            model, payload.score, len(payload.strengths), len(payload.risks),
        )
        return ModelInvocation(
            payload=payload,
            model_used=model,
            attempts=list(models),
            failure_notes=failure_notes,
        )
    raise ModelsExhaustedError(failure_notes, list(models), raw_preview)

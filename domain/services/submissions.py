import logging
from typing import Dict, List, Optional

from domain.errors import NotFoundError
from domain.schemas import FormCreateRequest, ReevaluateResponse, SubmissionRequest, SubmissionResponse
from domain.services.evaluation_pipeline import evaluate_submission
from domain.slug import field_key, slugify
from infra.llm.client import GenerateFn, generate_content
from infra.pdf.parser import extract_pdf_text_from_base64
from infra.repositories.forms_repository import FormsRepository
from infra.repositories.submissions_repository import SubmissionsRepository

logger = logging.getLogger(__name__)

forms_repo = FormsRepository()
submissions_repo = SubmissionsRepository()

SUBMISSION_RECEIVED = "Your application was received successfully."


def create_form(body: FormCreateRequest) -> Dict:
    fields = [
        {
            "label": f.label,
            "key": f.key or field_key(f.label),
            "type": f.type,
            "required": f.required,
            "help_text": f.help_text,
            "placeholder": f.placeholder,
            "options": f.options,
            "order_index": index,
        }
        for index, f in enumerate(body.fields)
    ]
    form = forms_repo.create(
        title=body.title,
        base_slug=slugify(body.title),
        status="ACTIVE" if body.publish else "DRAFT",
        fields=fields,
        description=body.description,
        evaluation=body.evaluation,
    )
    logger.info("Form created: id=%s slug=%s", form["id"], form["slug"])
    return form


def _stored_resume_text(submission: Dict) -> Optional[str]:
    metadata = (submission.get("evaluation") or {}).get("metadata") or {}
    text = metadata.get("resumeText")
    return text if isinstance(text, str) else None


async def submit_application(
    form_slug: str,
    body: SubmissionRequest,
    *,
    generate: GenerateFn = generate_content,
) -> SubmissionResponse:
    form = forms_repo.get_active_by_slug(form_slug)
    if not form:
        raise NotFoundError("Form is unavailable.")

    resume_text: Optional[str] = None
    if body.resume_file:
        extraction = extract_pdf_text_from_base64(body.resume_file.base64)
        if extraction.success and extraction.text.strip():
            resume_text = extraction.text
        logger.info("Uploaded résumé %s parsed: success=%s",
                    body.resume_file.name, extraction.success)

    submission_id = submissions_repo.create(
        form_id=form["id"],
        applicant_name=body.applicant_name,
        answers=body.answers,
        applicant_email=body.applicant_email,
        resume_url=body.resume_url,
    )
    result = await evaluate_submission(
        applicant_name=body.applicant_name,
        answers=body.answers,
        form_title=form["title"],
        resume_url=body.resume_url,
        resume_text=resume_text,
        evaluation_settings=form["evaluation"],
        generate=generate,
    )
    submissions_repo.save_evaluation(submission_id, result)
    logger.info("Submission %s evaluated: score=%d decision=%s",
                submission_id, result.score, result.decision.value)
    return SubmissionResponse(submission_id=submission_id, message=SUBMISSION_RECEIVED)


async def reevaluate_form(
    form_id: str,
    *,
    generate: GenerateFn = generate_content,
) -> ReevaluateResponse:
    """Re-score every submission of a form, one after another.

    A submission that fails is logged and reported in ``failed``; the loop
    moves on to the next one.
    """
    form = forms_repo.get(form_id)
    if not form:
        raise NotFoundError("Form not found.")

    updated = 0
    failed: List[str] = []
    for submission in submissions_repo.list_by_form(form_id):
        try:
            result = await evaluate_submission(
                applicant_name=submission["applicant_name"],
                answers=submission["answers"],
                form_title=form["title"],
                resume_url=submission["resume_url"],
                resume_text=_stored_resume_text(submission),
                evaluation_settings=form["evaluation"],
                generate=generate,
            )
            submissions_repo.save_evaluation(submission["id"], result)
        except Exception:
            logger.exception("Re-evaluation failed for submission %s", submission["id"])
            failed.append(submission["id"])
            continue
        updated += 1

    logger.info("Re-evaluated form %s: updated=%d failed=%d", form_id, updated, len(failed))
    return ReevaluateResponse(updated_count=updated, failed=failed)

from typing import List
from fastapi import APIRouter
from domain.errors import NotFoundError
from domain.schemas import ReevaluateResponse, SubmissionRequest, SubmissionResponse, SubmissionView
from domain.services.submissions import forms_repo, reevaluate_form, submissions_repo, submit_application

router = APIRouter()


@router.post("/forms/{slug}/submissions", response_model=SubmissionResponse, status_code=201)
async def public_submit(slug: str, body: SubmissionRequest) -> SubmissionResponse:
    return await submit_application(slug, body)


@router.get("/forms/{form_id}/submissions", response_model=List[SubmissionView])
def by_form(form_id: str) -> List[SubmissionView]:
    if not forms_repo.get(form_id):
        raise NotFoundError("Form not found.")
    return [SubmissionView(**s) for s in submissions_repo.list_by_form(form_id)]


@router.post("/forms/{form_id}/reevaluate", response_model=ReevaluateResponse)
async def reevaluate_all(form_id: str) -> ReevaluateResponse:
    return await reevaluate_form(form_id)

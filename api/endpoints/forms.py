from fastapi import APIRouter
from domain.errors import NotFoundError
from domain.schemas import FormCreateRequest, FormResponse, FormStatusRequest
from domain.services.submissions import create_form, forms_repo

router = APIRouter()


@router.post("/forms", response_model=FormResponse, status_code=201)
def create(body: FormCreateRequest) -> FormResponse:
    return FormResponse(**create_form(body))


@router.get("/forms/{slug}", response_model=FormResponse)
def public_by_slug(slug: str) -> FormResponse:
    form = forms_repo.get_active_by_slug(slug)
    if not form:
        raise NotFoundError("Form is unavailable.")
    return FormResponse(**form)


@router.patch("/forms/{form_id}/status", response_model=FormResponse)
def update_status(form_id: str, body: FormStatusRequest) -> FormResponse:
    form = forms_repo.update_status(form_id, body.status)
    if not form:
        raise NotFoundError("Form not found.")
    return FormResponse(**form)

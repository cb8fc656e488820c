import uuid
from typing import Any, Dict, List, Optional
from sqlalchemy import select
from infra.db.session import SessionLocal
from infra.db.models import FormRecord
from domain.evaluation_models import EvaluationSettings


def _string_list(value: Any) -> Optional[List[str]]:
    if not isinstance(value, list):
        return None
    return [item for item in value if isinstance(item, str)]


def parse_evaluation_config(config: Any) -> Optional[EvaluationSettings]:
    if not isinstance(config, dict):
        return None
    evaluation = config.get("evaluation")
    if not isinstance(evaluation, dict):
        return None
    overview = evaluation.get("overview")
    custom_prompt = evaluation.get("customPrompt", evaluation.get("custom_prompt"))
    return EvaluationSettings.model_construct(
        overview=overview if isinstance(overview, str) else None,
        must_have_keywords=_string_list(
            evaluation.get("mustHaveKeywords", evaluation.get("must_have_keywords"))),
        nice_to_have_keywords=_string_list(
            evaluation.get("niceToHaveKeywords", evaluation.get("nice_to_have_keywords"))),
        custom_prompt=custom_prompt if isinstance(custom_prompt, str) else None,
    )


def _to_dict(rec: FormRecord) -> Dict:
    return {
        "id": rec.id,
        "slug": rec.slug,
        "title": rec.title,
        "description": rec.description,
        "status": rec.status,
        "fields": rec.fields or [],
        "evaluation": parse_evaluation_config(rec.config),
    }


class FormsRepository:
    def _unique_slug(self, s, base: str) -> str:
        slug, attempt = base, 1
        while s.scalar(select(FormRecord.id).where(FormRecord.slug == slug)):
            slug = f"{base}-{attempt}"
            attempt += 1
        return slug

    def create(self, title: str, base_slug: str, status: str, fields: List[Dict],
               description: Optional[str] = None,
               evaluation: Optional[EvaluationSettings] = None) -> Dict:
        fid = f"form_{uuid.uuid4().hex}"
        config = None
        if evaluation is not None:
            config = {"evaluation": {
                "overview": evaluation.overview,
                "mustHaveKeywords": evaluation.must_have_keywords,
                "niceToHaveKeywords": evaluation.nice_to_have_keywords,
                "customPrompt": evaluation.custom_prompt,
            }}
        with SessionLocal() as s:
            rec = FormRecord(id=fid, slug=self._unique_slug(s, base_slug), title=title,
                             description=description, status=status,
                             config=config, fields=fields)
            s.add(rec)
            s.commit()
            return _to_dict(rec)

    def get(self, form_id: str) -> Optional[Dict]:
        with SessionLocal() as s:
            rec = s.get(FormRecord, form_id)
            return _to_dict(rec) if rec else None

    def get_active_by_slug(self, slug: str) -> Optional[Dict]:
        with SessionLocal() as s:
            rec = s.scalar(select(FormRecord).where(
                FormRecord.slug == slug, FormRecord.status == "ACTIVE"))
            return _to_dict(rec) if rec else None

    def update_status(self, form_id: str, status: str) -> Optional[Dict]:
        with SessionLocal() as s:
            rec = s.get(FormRecord, form_id)
            if not rec:
                return None
            rec.status = status
            s.commit()
            return _to_dict(rec)

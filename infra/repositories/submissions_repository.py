import uuid
from typing import Any, Dict, List, Optional
from sqlalchemy import select
from sqlalchemy.orm import selectinload
from infra.db.session import SessionLocal
from infra.db.models import SubmissionRecord, EvaluationRecord
from domain.evaluation_models import EvaluationOutput


def _to_text(items: List[str], empty: str) -> str:
    return "; ".join(items) if items else empty


def _model_version(result: EvaluationOutput) -> str:
    if result.metadata.source == "ai" and result.metadata.model_used:
        return result.metadata.model_used
    if result.metadata.source == "default":
        return "default-no-key"
    return "heuristic-v1"


def _evaluation_dict(ev: Optional[EvaluationRecord]) -> Optional[Dict]:
    if ev is None:
        return None
    return {
        "overall_score": ev.overall_score,
        "decision": ev.decision,
        "summary": ev.summary,
        "strengths": ev.strengths,
        "risks": ev.risks,
        "ai_model_version": ev.ai_model_version,
        "metadata": ev.metadata_json or {},
    }


def _to_dict(rec: SubmissionRecord) -> Dict:
    return {
        "id": rec.id,
        "form_id": rec.form_id,
        "applicant_name": rec.applicant_name,
        "applicant_email": rec.applicant_email,
        "resume_url": rec.resume_url,
        "answers": rec.answers if isinstance(rec.answers, dict) else {},
        "evaluation": _evaluation_dict(rec.evaluation),
    }


class SubmissionsRepository:
    def create(self, form_id: str, applicant_name: str, answers: Dict[str, Any],
               applicant_email: Optional[str] = None,
               resume_url: Optional[str] = None) -> str:
        sid = f"sub_{uuid.uuid4().hex}"
        with SessionLocal() as s:
            s.add(SubmissionRecord(id=sid, form_id=form_id, applicant_name=applicant_name,
                                   applicant_email=applicant_email, resume_url=resume_url,
                                   answers=answers))
            s.commit()
        return sid

    def list_by_form(self, form_id: str) -> List[Dict]:
        with SessionLocal() as s:
            rows = s.scalars(
                select(SubmissionRecord)
                .where(SubmissionRecord.form_id == form_id)
                .options(selectinload(SubmissionRecord.evaluation))
                .order_by(SubmissionRecord.created_at, SubmissionRecord.id)
            ).all()
            return [_to_dict(r) for r in rows]

    def save_evaluation(self, submission_id: str, result: EvaluationOutput) -> None:
        model_version = _model_version(result)
        with SessionLocal() as s:
            s.merge(EvaluationRecord(
                submission_id=submission_id,
                overall_score=result.score,
                decision=result.decision.value,
                summary=result.summary,
                strengths=_to_text(result.strengths, "No clear standout strengths detected yet."),
                risks=_to_text(result.risks, "No immediate risks detected."),
                ai_model_version=model_version,
                metadata_json=result.metadata.to_record(),
            ))
            s.commit()

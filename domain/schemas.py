from pydantic import BaseModel, Field
from typing import Optional, Dict, List, Literal, Union, Any
from domain.evaluation_models import EvaluationSettings

FieldType = Literal["text", "textarea", "select", "multiselect", "url", "email", "number", "markdown"]
FormStatus = Literal["DRAFT", "ACTIVE", "ARCHIVED"]
AnswerValue = Union[bool, int, float, str, List[str], None]

class FormFieldInput(BaseModel):
    label: str = Field(..., min_length=2)
    key: Optional[str] = Field(default=None, pattern=r"^[a-zA-Z][a-zA-Z0-9_]*$")
    type: FieldType
    required: bool = False
    help_text: Optional[str] = None
    placeholder: Optional[str] = None
    options: Optional[List[str]] = None

class FormCreateRequest(BaseModel):
    title: str = Field(..., min_length=3)
    description: Optional[str] = None
    publish: bool = False
    fields: List[FormFieldInput] = Field(..., min_length=1)
    evaluation: Optional[EvaluationSettings] = None

class FormStatusRequest(BaseModel):
    status: FormStatus

class FormResponse(BaseModel):
    id: str
    slug: str
    title: str
    description: Optional[str] = None
    status: FormStatus
    fields: List[Dict[str, Any]] = []

class ResumeFile(BaseModel):
    name: str
    type: str
    base64: str

class SubmissionRequest(BaseModel):
    applicant_name: str = Field(..., min_length=2)
    applicant_email: Optional[str] = Field(default=None, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    resume_url: Optional[str] = Field(default=None, pattern=r"^https?://")
    resume_file: Optional[ResumeFile] = None
    answers: Dict[str, AnswerValue] = {}

class SubmissionResponse(BaseModel):
    submission_id: str
    message: str

class EvaluationView(BaseModel):
    overall_score: int
    decision: str
    summary: str
    strengths: str
    risks: str
    ai_model_version: str
    metadata: Dict[str, Any] = {}

class SubmissionView(BaseModel):
    id: str
    applicant_name: str
    applicant_email: Optional[str] = None
    resume_url: Optional[str] = None
    answers: Dict[str, Any] = {}
    evaluation: Optional[EvaluationView] = None

class ReevaluateResponse(BaseModel):
    updated_count: int
    failed: List[str] = []

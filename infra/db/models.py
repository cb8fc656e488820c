from sqlalchemy import Column, String, Integer, Text, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from datetime import datetime, timezone
from infra.db.session import Base

class FormRecord(Base):
    __tablename__ = "forms"
    id = Column(String, primary_key=True)
    slug = Column(String, nullable=False, unique=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String, nullable=False, default="DRAFT")   # DRAFT | ACTIVE | ARCHIVED
    config = Column(JSON, nullable=True)    # {"evaluation": {...}}
    fields = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, server_default=func.now())
    submissions = relationship(
        "SubmissionRecord", back_populates="form", cascade="all, delete-orphan",
        order_by="SubmissionRecord.created_at")

class SubmissionRecord(Base):
    __tablename__ = "submissions"
    id = Column(String, primary_key=True)
    form_id = Column(String, ForeignKey("forms.id"), nullable=False, index=True)
    applicant_name = Column(String, nullable=False)
    applicant_email = Column(String, nullable=True)
    resume_url = Column(String, nullable=True)
    answers = Column(JSON, nullable=False, default=dict)
    # set client-side so rows keep sub-second insertion order
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
    form = relationship("FormRecord", back_populates="submissions")
    evaluation = relationship(
        "EvaluationRecord", back_populates="submission", uselist=False,
        cascade="all, delete-orphan")

class EvaluationRecord(Base):
    __tablename__ = "evaluations"
    submission_id = Column(String, ForeignKey("submissions.id"), primary_key=True)
    overall_score = Column(Integer, nullable=False)
    decision = Column(String, nullable=False)   # YES | MAYBE | NO
    summary = Column(Text, nullable=False)
    strengths = Column(Text, nullable=False)
    risks = Column(Text, nullable=False)
    ai_model_version = Column(String, nullable=False)
    # "metadata" is reserved on declarative classes
    metadata_json = Column("metadata", JSON, nullable=True)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
    submission = relationship("SubmissionRecord", back_populates="evaluation")

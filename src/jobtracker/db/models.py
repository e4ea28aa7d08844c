from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from jobtracker.db.base import Base, DocumentMixin

ID_LENGTH = 36
TIMESTAMP_LENGTH = 32


class JobApplicationRecord(DocumentMixin, Base):
    __tablename__ = "job_applications"

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True)
    company: Mapped[str] = mapped_column(String(255), nullable=False)
    position_title: Mapped[str] = mapped_column(String(255), nullable=False)
    application_date: Mapped[str] = mapped_column(String(TIMESTAMP_LENGTH), nullable=False, index=True)
    interest_rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    next_event_date: Mapped[str | None] = mapped_column(String(TIMESTAMP_LENGTH), nullable=True)
    job_posting_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    job_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    source_type: Mapped[str] = mapped_column(String(40), default="other", nullable=False)
    job_board_id: Mapped[str | None] = mapped_column(String(ID_LENGTH), nullable=True)
    source_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_remote: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    status_log: Mapped[list[Any]] = mapped_column(JSON, default=list, nullable=False)
    notes: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list, nullable=False)
    created_at: Mapped[str] = mapped_column(String(TIMESTAMP_LENGTH), nullable=False, index=True)
    updated_at: Mapped[str] = mapped_column(String(TIMESTAMP_LENGTH), nullable=False)


class ContactRecord(DocumentMixin, Base):
    __tablename__ = "contacts"

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True)
    job_application_id: Mapped[str] = mapped_column(String(ID_LENGTH), nullable=False, index=True)
    contact_name: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    linkedin_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    role: Mapped[str | None] = mapped_column(String(40), nullable=True)
    channel: Mapped[str] = mapped_column(String(40), default="other", nullable=False)
    outreach_date: Mapped[str] = mapped_column(String(TIMESTAMP_LENGTH), nullable=False)
    response_received: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[str] = mapped_column(String(TIMESTAMP_LENGTH), nullable=False, index=True)
    updated_at: Mapped[str] = mapped_column(String(TIMESTAMP_LENGTH), nullable=False)


class InterviewStageRecord(DocumentMixin, Base):
    __tablename__ = "interview_stages"

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True)
    job_application_id: Mapped[str] = mapped_column(String(ID_LENGTH), nullable=False, index=True)
    round: Mapped[int] = mapped_column(Integer, nullable=False)
    interview_type: Mapped[str] = mapped_column(String(40), nullable=False)
    is_final_round: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    scheduled_date: Mapped[str | None] = mapped_column(String(TIMESTAMP_LENGTH), nullable=True)
    completed_date: Mapped[str | None] = mapped_column(String(TIMESTAMP_LENGTH), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    questions: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list, nullable=False)
    created_at: Mapped[str] = mapped_column(String(TIMESTAMP_LENGTH), nullable=False, index=True)
    updated_at: Mapped[str] = mapped_column(String(TIMESTAMP_LENGTH), nullable=False)


class JobBoardRecord(DocumentMixin, Base):
    __tablename__ = "job_boards"

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    root_domain: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    domains: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    created_at: Mapped[str] = mapped_column(String(TIMESTAMP_LENGTH), nullable=False, index=True)

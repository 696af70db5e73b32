from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from quill.db.base import Base, TimestampMixin, new_id, utcnow

FIELD_TRUNCATE_LENGTH = 500


class StoredFile(TimestampMixin, Base):
    __tablename__ = "files"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    file_size: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    file_type: Mapped[str] = mapped_column(String(120), default="", nullable=False)
    storage_path: Mapped[str] = mapped_column(String(600), nullable=False)
    text_content: Mapped[str] = mapped_column(Text, default="", nullable=False)


class StoredJob(TimestampMixin, Base):
    __tablename__ = "jobs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    company: Mapped[str | None] = mapped_column(String(255), nullable=True)
    url: Mapped[str | None] = mapped_column(String(800), nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)


class Version(TimestampMixin, Base):
    __tablename__ = "versions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    # Weak references: a version outlives the file and job it was generated from.
    file_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    job_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    resume_html: Mapped[str] = mapped_column(Text, nullable=False)
    resume_html_redacted: Mapped[str] = mapped_column(Text, default="", nullable=False)
    cover_html: Mapped[str] = mapped_column(Text, nullable=False)
    cover_html_redacted: Mapped[str] = mapped_column(Text, default="", nullable=False)
    public_token: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)
    views: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_public: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class View(Base):
    __tablename__ = "views"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    version_id: Mapped[str] = mapped_column(
        ForeignKey("versions.id", ondelete="CASCADE"), index=True, nullable=False
    )
    session_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    referrer: Mapped[str | None] = mapped_column(String(FIELD_TRUNCATE_LENGTH), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(FIELD_TRUNCATE_LENGTH), nullable=True)
    viewed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

from __future__ import annotations

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from quill.db.base import new_id
from quill.db.models import StoredFile, StoredJob, Version, View


class Repository:
    def __init__(self, session: Session):
        self.session = session

    def rollback(self) -> None:
        self.session.rollback()

    def create_file(
        self,
        *,
        filename: str,
        file_size: int,
        file_type: str,
        storage_path: str,
        text_content: str,
        file_id: str | None = None,
    ) -> StoredFile:
        row = StoredFile(
            id=file_id or new_id(),
            filename=filename,
            file_size=file_size,
            file_type=file_type,
            storage_path=storage_path,
            text_content=text_content,
        )
        self.session.add(row)
        self.session.commit()
        self.session.refresh(row)
        return row

    def get_file(self, file_id: str) -> StoredFile | None:
        return self.session.get(StoredFile, file_id)

    def create_job(
        self,
        *,
        content: str,
        title: str | None = None,
        company: str | None = None,
        url: str | None = None,
        job_id: str | None = None,
    ) -> StoredJob:
        job = StoredJob(id=job_id or new_id(), title=title, company=company, url=url, content=content)
        self.session.add(job)
        self.session.commit()
        self.session.refresh(job)
        return job

    def get_job(self, job_id: str) -> StoredJob | None:
        return self.session.get(StoredJob, job_id)

    def list_jobs(self, limit: int = 50) -> list[StoredJob]:
        statement = select(StoredJob).order_by(StoredJob.created_at.desc()).limit(limit)
        return list(self.session.scalars(statement).all())

    def create_version(
        self,
        *,
        title: str,
        resume_html: str,
        resume_html_redacted: str,
        cover_html: str,
        cover_html_redacted: str,
        public_token: str,
        is_public: bool,
        file_id: str | None = None,
        job_id: str | None = None,
        version_id: str | None = None,
    ) -> Version:
        version = Version(
            id=version_id or new_id(),
            file_id=file_id,
            job_id=job_id,
            title=title,
            resume_html=resume_html,
            resume_html_redacted=resume_html_redacted,
            cover_html=cover_html,
            cover_html_redacted=cover_html_redacted,
            public_token=public_token,
            views=0,
            is_public=is_public,
        )
        self.session.add(version)
        self.session.commit()
        self.session.refresh(version)
        return version

    def get_version(self, version_id: str) -> Version | None:
        return self.session.get(Version, version_id)

    def get_public_version_by_token(self, public_token: str) -> Version | None:
        statement = select(Version).where(
            Version.public_token == public_token,
            Version.is_public.is_(True),
        )
        return self.session.scalar(statement)

    def list_versions(self, limit: int = 50) -> list[Version]:
        statement = select(Version).order_by(Version.created_at.desc()).limit(limit)
        return list(self.session.scalars(statement).all())

    def delete_views_for_version(self, version_id: str) -> int:
        result = self.session.execute(delete(View).where(View.version_id == version_id))
        self.session.commit()
        return result.rowcount or 0

    def delete_version(self, version_id: str) -> None:
        self.session.execute(delete(Version).where(Version.id == version_id))
        self.session.commit()

    def create_view(
        self,
        *,
        version_id: str,
        session_id: str | None = None,
        referrer: str | None = None,
        user_agent: str | None = None,
    ) -> View:
        view = View(
            version_id=version_id,
            session_id=session_id,
            referrer=referrer,
            user_agent=user_agent,
        )
        self.session.add(view)
        self.session.commit()
        self.session.refresh(view)
        return view

    def count_views(self, version_id: str) -> int:
        statement = select(func.count()).select_from(View).where(View.version_id == version_id)
        return int(self.session.scalar(statement) or 0)

    def increment_version_views(self, version_id: str) -> None:
        self.session.execute(
            update(Version).where(Version.id == version_id).values(views=Version.views + 1)
        )
        self.session.commit()

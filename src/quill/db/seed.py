from __future__ import annotations

from datetime import timedelta

from sqlalchemy.orm import Session

from quill.core.redaction import regex_redact
from quill.db.base import utcnow
from quill.db.models import StoredFile, StoredJob, Version, View

SAMPLE_JOB_ID = "00000000-0000-4000-8000-000000000001"
SAMPLE_FILE_ID = "00000000-0000-4000-8000-000000000002"
SAMPLE_VERSION_ID = "00000000-0000-4000-8000-000000000003"
SAMPLE_PUBLIC_TOKEN = "sample-senior-software-engineer"

SAMPLE_JOB_CONTENT = """Senior Software Engineer - TechCorp Inc.

We are seeking a Senior Software Engineer to join our team. You will design, develop, and maintain scalable web applications using modern technologies.

Key Requirements:
- 5+ years of experience in software development
- Proficiency in Python, TypeScript and React
- Experience with cloud platforms (AWS, GCP, Azure)
- Strong understanding of database design and optimization
- Experience with containerization (Docker, Kubernetes)

Responsibilities:
- Design and implement new features for our web platform
- Mentor junior developers and conduct code reviews
- Optimize application performance and scalability
"""

SAMPLE_RESUME_TEXT = """John Doe
Software Engineer

Email: john.doe@email.com
Phone: (555) 123-4567
LinkedIn: linkedin.com/in/johndoe

Professional Summary:
Software engineer with 6 years of experience building scalable web applications.

Work Experience:
Software Engineer | ABC Technology (2020 - Present)
- Developed and maintained web applications serving 100k+ users
- Built REST APIs backed by PostgreSQL

Junior Software Engineer | XYZ Startup (2018 - 2020)
- Built responsive web interfaces using React

Education:
Bachelor of Science in Computer Science, State University (2014 - 2018)
"""

SAMPLE_RESUME_HTML = """<div class="resume">
  <h1>John Doe</h1>
  <h2>Senior Software Engineer</h2>
  <div class="section">
    <h3>Contact Information</h3>
    <p>Email: john.doe@email.com</p>
    <p>Phone: (555) 123-4567</p>
  </div>
  <div class="summary">
    <p>Software engineer with 6+ years building scalable web applications, aligned with TechCorp's stack.</p>
  </div>
  <div class="section">
    <h3>Work Experience</h3>
    <h4>Software Engineer | ABC Technology (2020 - Present)</h4>
    <ul>
      <li>Developed and maintained web applications serving 100k+ users</li>
      <li>Built REST APIs backed by PostgreSQL</li>
    </ul>
  </div>
</div>"""

SAMPLE_COVER_HTML = """<div class="cover-letter">
  <p>Dear TechCorp Inc. Hiring Manager,</p>
  <p>I am writing to express my interest in the Senior Software Engineer position at TechCorp Inc.</p>
  <p>At ABC Technology I built and maintained applications serving 100k+ users and the APIs behind them.</p>
  <p>I would welcome the opportunity to discuss how I can contribute to your team. Thank you for your consideration.</p>
  <p>Sincerely,<br>John Doe</p>
</div>"""

SAMPLE_VIEWS = [
    {"session_id": "demo_session_1", "referrer": "https://linkedin.com", "days_ago": 1},
    {"session_id": "demo_session_2", "referrer": "https://github.com", "days_ago": 2},
    {"session_id": "demo_session_3", "referrer": None, "days_ago": 3},
]


def seed_sample_data(session: Session) -> dict[str, int]:
    """Insert one sample job, resume file and public version; rerunning is a no-op."""
    inserted = {"jobs": 0, "files": 0, "versions": 0, "views": 0}

    if session.get(StoredJob, SAMPLE_JOB_ID) is None:
        session.add(
            StoredJob(
                id=SAMPLE_JOB_ID,
                title="Senior Software Engineer",
                company="TechCorp Inc.",
                url="https://example.com/jobs/senior-software-engineer",
                content=SAMPLE_JOB_CONTENT,
            )
        )
        inserted["jobs"] += 1

    if session.get(StoredFile, SAMPLE_FILE_ID) is None:
        session.add(
            StoredFile(
                id=SAMPLE_FILE_ID,
                filename="john_doe_resume.txt",
                file_size=len(SAMPLE_RESUME_TEXT.encode("utf-8")),
                file_type="text/plain",
                storage_path=f"{SAMPLE_FILE_ID}.txt",
                text_content=SAMPLE_RESUME_TEXT,
            )
        )
        inserted["files"] += 1

    if session.get(Version, SAMPLE_VERSION_ID) is None:
        session.add(
            Version(
                id=SAMPLE_VERSION_ID,
                file_id=SAMPLE_FILE_ID,
                job_id=SAMPLE_JOB_ID,
                title="Resume for Senior Software Engineer at TechCorp Inc.",
                resume_html=SAMPLE_RESUME_HTML,
                resume_html_redacted=regex_redact(SAMPLE_RESUME_HTML),
                cover_html=SAMPLE_COVER_HTML,
                cover_html_redacted=regex_redact(SAMPLE_COVER_HTML),
                public_token=SAMPLE_PUBLIC_TOKEN,
                views=len(SAMPLE_VIEWS),
                is_public=True,
            )
        )
        session.flush()
        now = utcnow()
        for view in SAMPLE_VIEWS:
            session.add(
                View(
                    version_id=SAMPLE_VERSION_ID,
                    session_id=view["session_id"],
                    referrer=view["referrer"],
                    user_agent="Mozilla/5.0 (Demo Browser)",
                    viewed_at=now - timedelta(days=int(view["days_ago"])),
                )
            )
        inserted["versions"] += 1
        inserted["views"] += len(SAMPLE_VIEWS)

    session.commit()
    return inserted

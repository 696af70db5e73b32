from __future__ import annotations

from fastapi.testclient import TestClient

RESUME_TEXT = """Jane Doe
jane.doe@example.com | (555) 123-4567
Backend engineer, six years building Python services on PostgreSQL.
"""


def test_upload_generate_share_view_export_delete(client: TestClient, monkeypatch) -> None:
    posting = "Senior Backend Engineer at Acme\n" + "Design APIs in Python and operate PostgreSQL. " * 4
    monkeypatch.setattr("quill.core.intake.fetch_job_text", lambda url, timeout_sec=30: posting)

    upload = client.post("/api/upload", files={"file": ("jane.txt", RESUME_TEXT.encode("utf-8"), "text/plain")})
    assert upload.status_code == 200, upload.text
    file_id = upload.json()["fileId"]

    job = client.post("/api/fetch-job", json={"jobUrl": "https://jobs.example.com/acme/42"})
    assert job.status_code == 200, job.text
    job_id = job.json()["jobId"]

    generated = client.post("/api/generate", json={"fileId": file_id, "jobId": job_id})
    assert generated.status_code == 200, generated.text
    documents = generated.json()
    assert documents["summary"] == "Generated tailored resume for Senior Backend Engineer at Acme"

    saved = client.post(
        "/api/save-version",
        json={
            "title": "Acme - Senior Backend",
            "resumeHtml": documents["tailoredResumeHtml"] + "<p>jane.doe@example.com</p>",
            "coverHtml": documents["coverLetterHtml"],
            "fileId": file_id,
            "jobId": job_id,
        },
    )
    assert saved.status_code == 200, saved.text
    version = saved.json()
    assert version["shareUrl"].startswith("http://testserver/s/")

    page = client.get(version["shareUrl"].replace("http://testserver", ""))
    assert page.status_code == 200
    assert "Acme - Senior Backend" in page.text
    assert "jane.doe@example.com" not in page.text

    for session in ("s1", "s2"):
        viewed = client.post("/api/metrics/view", json={"versionId": version["versionId"], "sessionId": session})
        assert viewed.status_code == 200

    fetched = client.get(f"/api/version/{version['versionId']}").json()
    assert fetched["views"] == 2
    assert fetched["fileId"] == file_id
    assert fetched["jobId"] == job_id

    exported = client.post("/api/export", json={"html": fetched["resumeHtml"], "title": fetched["title"]})
    assert exported.status_code == 200, exported.text
    assert exported.json()["filename"] == "Acme - Senior Backend.pdf"
    download = client.get(exported.json()["url"].replace("http://testserver", ""))
    assert download.status_code == 200
    assert download.content.startswith(b"%PDF")

    deleted = client.delete(f"/api/version/{version['versionId']}")
    assert deleted.json()["success"] is True

    assert client.get(f"/api/version/{version['versionId']}").status_code == 404
    gone = client.get(version["shareUrl"].replace("http://testserver", ""))
    assert gone.status_code == 404

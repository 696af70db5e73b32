from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from quill.cli.app import app
from quill.db.seed import SAMPLE_PUBLIC_TOKEN, SAMPLE_VERSION_ID

runner = CliRunner()


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch) -> None:
    monkeypatch.setattr("quill.logging_config._LOG_CONFIGURED", True)


def test_seed_is_idempotent() -> None:
    first = runner.invoke(app, ["seed"])
    assert first.exit_code == 0, first.output
    body = json.loads(first.stdout)
    assert body["inserted"] == {"jobs": 1, "files": 1, "versions": 1, "views": 3}
    assert body["share_url"] == f"http://testserver/s/{SAMPLE_PUBLIC_TOKEN}"

    second = runner.invoke(app, ["seed"])
    assert json.loads(second.stdout)["inserted"] == {"jobs": 0, "files": 0, "versions": 0, "views": 0}


def test_versions_list_and_delete() -> None:
    runner.invoke(app, ["seed"])

    listed = runner.invoke(app, ["versions", "list"])
    assert listed.exit_code == 0, listed.output
    rows = json.loads(listed.stdout)
    assert [row["id"] for row in rows] == [SAMPLE_VERSION_ID]
    assert rows[0]["views"] == 3
    assert rows[0]["is_public"] is True

    deleted = runner.invoke(app, ["versions", "delete", "--id", SAMPLE_VERSION_ID])
    assert deleted.exit_code == 0, deleted.output
    assert json.loads(deleted.stdout)["warnings"] == []

    assert json.loads(runner.invoke(app, ["versions", "list"]).stdout) == []


def test_versions_delete_unknown_id_fails() -> None:
    result = runner.invoke(app, ["versions", "delete", "--id", "missing"])

    assert result.exit_code == 1
    assert "Version not found" in result.output


def test_redact_file(tmp_path: Path) -> None:
    html_file = tmp_path / "resume.html"
    html_file.write_text("<p>jane@example.com, 555-123-4567</p>", encoding="utf-8")

    result = runner.invoke(app, ["redact", "--file", str(html_file)])

    assert result.exit_code == 0, result.output
    body = json.loads(result.stdout)
    assert body["redacted_html"] == "<p>[email redacted], [phone number]</p>"
    assert body["method"] == "ai"


def test_generate_writes_documents(tmp_path: Path) -> None:
    resume = tmp_path / "resume.txt"
    resume.write_text("Jane Doe\nPython engineer", encoding="utf-8")
    job = tmp_path / "job.txt"
    job.write_text("Backend Engineer at Acme\nPython, PostgreSQL", encoding="utf-8")
    out_dir = tmp_path / "out"

    result = runner.invoke(
        app,
        ["generate", "--resume", str(resume), "--job", str(job), "--out-dir", str(out_dir)],
    )

    assert result.exit_code == 0, result.output
    body = json.loads(result.stdout)
    assert body["summary"] == "Generated tailored resume"
    assert '<div class="resume">' in (out_dir / "resume.html").read_text(encoding="utf-8")
    assert '<div class="cover-letter">' in (out_dir / "cover_letter.html").read_text(encoding="utf-8")


def test_export_pdf_uses_renderer(tmp_path: Path, monkeypatch) -> None:
    html_file = tmp_path / "resume.html"
    html_file.write_text("<p>Resume</p>", encoding="utf-8")
    monkeypatch.setattr(
        "quill.cli.app.render_pdf",
        lambda html, title=None, timeout_sec=60: b"%PDF-1.4 " + html.encode("utf-8"),
    )

    result = runner.invoke(app, ["export-pdf", str(html_file), "--title", "Jane"])

    assert result.exit_code == 0, result.output
    output = tmp_path / "resume.pdf"
    assert json.loads(result.stdout)["output"] == str(output)
    assert output.read_bytes().startswith(b"%PDF")

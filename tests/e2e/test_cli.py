"""CLI smoke tests with the backend faked at the service factory."""

import json

from typer.testing import CliRunner

from ersync.cli import main as cli
from ersync.profile import service as profile_service
from tests.fakes import BASE_URL, FakeBackend

runner = CliRunner()


def _patch_backend(monkeypatch, tmp_path, backend: FakeBackend) -> None:
    monkeypatch.setenv("ERSYNC_CACHE__SNAPSHOT_DIR", str(tmp_path / "snapshots"))
    monkeypatch.setenv("ERSYNC_API__BASE_URL", BASE_URL)
    real_build = profile_service.build_service

    def build(config, cache=None, transport=None):
        return real_build(config, cache=cache, transport=backend.transport)

    monkeypatch.setattr(cli, "build_service", build)


def test_update_with_file_marker(monkeypatch, tmp_path):
    backend = FakeBackend()
    _patch_backend(monkeypatch, tmp_path, backend)
    (tmp_path / "cv.pdf").write_bytes(b"%PDF-1.4")
    payload = tmp_path / "edit.json"
    payload.write_text(
        json.dumps({"documents": [{"type": "CV", "file": {"$file": "cv.pdf"}}], "bank_name": "CBE"}),
        encoding="utf-8",
    )

    result = runner.invoke(cli.app, ["update", "42", "--payload", str(payload)])

    assert result.exit_code == 0, result.output
    assert "financial" in result.output
    assert backend.section_body("documents")["documents"][0]["file_name"] == "cv.pdf"


def test_update_reports_rejected_section(monkeypatch, tmp_path):
    backend = FakeBackend()
    backend.failing_sections["personal"] = 422
    _patch_backend(monkeypatch, tmp_path, backend)
    payload = tmp_path / "edit.json"
    payload.write_text(json.dumps({"full_name": "X", "bank_name": "CBE"}), encoding="utf-8")

    result = runner.invoke(cli.app, ["update", "42", "--payload", str(payload)])

    assert result.exit_code == 1
    assert "SECTION_PERSIST_FAILED" in result.output
    # Committed financial section triggers a refetch of canonical state
    assert backend.calls("GET")


def test_timeline_json_and_snapshot_written(monkeypatch, tmp_path):
    backend = FakeBackend()
    _patch_backend(monkeypatch, tmp_path, backend)

    result = runner.invoke(cli.app, ["timeline", "42", "--json"])

    assert result.exit_code == 0, result.output
    events = json.loads(result.stdout)
    assert events[0]["event_type"] == "JOINED"
    assert events[0]["origin"] == "synthesized"
    assert (tmp_path / "snapshots" / "42.json").exists()

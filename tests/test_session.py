from __future__ import annotations

import atexit

import pytest

from neptune_reporter.config.schema import ReporterConfig
from neptune_reporter.service import NeptuneApiError, NeptuneJob, ReporterSession


class RecordingService:
    def __init__(self, fail_on: str | None = None) -> None:
        self.calls = []
        self.closed = False
        self._fail_on = fail_on

    def _record(self, name, *args):
        self.calls.append((name,) + args)
        if name == self._fail_on:
            raise NeptuneApiError(name, 500, "boom")

    def create_experiment(self, name, description, project):
        self._record("create_experiment", name, description, project)
        return "job-42"

    def mark_job_executing(self, job_id):
        self._record("mark_job_executing", job_id)

    def mark_job_completed(self, job_id, state="succeeded", traceback=""):
        self._record("mark_job_completed", job_id, state)

    def send_ping(self, job_id):
        self._record("send_ping", job_id)

    def close(self):
        self.closed = True


@pytest.fixture()
def config() -> ReporterConfig:
    return ReporterConfig.from_mapping(
        {
            "neptune": {"host": "ml.example.org", "user": "u", "password": "p"},
            "experiment": {"name": "api"},
        }
    )


def test_start_creates_and_marks_executing(config):
    service = RecordingService()

    session = ReporterSession.start(config, service=service, register_atexit=False)

    assert isinstance(session.job, NeptuneJob)
    assert session.job_id == "job-42"
    assert service.calls == [
        ("create_experiment", "api", "api", "api"),
        ("mark_job_executing", "job-42"),
    ]


def test_close_marks_completed_once(config):
    service = RecordingService()
    session = ReporterSession.start(config, service=service, register_atexit=False)

    session.close()
    session.close()

    assert service.calls.count(("mark_job_completed", "job-42", "succeeded")) == 1
    assert service.closed is True
    assert session.closed is True


def test_close_unregisters_atexit_hook(config, monkeypatch):
    registered = []
    monkeypatch.setattr(atexit, "register", registered.append)
    monkeypatch.setattr(atexit, "unregister", registered.remove)
    service = RecordingService()

    session = ReporterSession.start(config, service=service)
    assert registered == [session.close]
    session.close()

    assert registered == []


def test_start_failure_closes_client_and_raises(config):
    service = RecordingService(fail_on="mark_job_executing")

    with pytest.raises(NeptuneApiError):
        ReporterSession.start(config, service=service, register_atexit=False)
    assert service.closed is True


def test_ping_failure_is_logged_not_raised(config, caplog):
    service = RecordingService(fail_on="send_ping")
    session = ReporterSession.start(config, service=service, register_atexit=False)

    with caplog.at_level("WARNING"):
        session.ping()

    assert any("Ping del job job-42" in record.message for record in caplog.records)


def test_completion_failure_still_closes_client(config):
    service = RecordingService(fail_on="mark_job_completed")
    session = ReporterSession.start(config, service=service, register_atexit=False)

    session.close()

    assert service.closed is True

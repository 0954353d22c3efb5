import asyncio

import pytest
from fastapi.testclient import TestClient

from conftest import make_record
from creatorscout import server
from creatorscout.pipeline.errors import EmptyInputError


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(server, "configured_oracles", lambda: (None, None))
    server.jobs.clear()
    return TestClient(server.app)


def _body():
    return {
        "feishuRecordId": "rec1",
        "commercialData": {"创作者名称": "Mali"},
        "creatorHandle": "mali.beauty",
        "env": {"FEISHU_APP_TOKEN": "app", "FEISHU_TABLE_ID": "tbl"},
        "accessToken": "tok",
    }


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_analyze_returns_bundle(client):
    videos = [make_record(i, play=100 * (i + 1), like=i, desc="serum").to_dict() for i in range(4)]
    resp = client.post("/api/analyze", json={"videos": videos})
    assert resp.status_code == 200
    data = resp.json()
    assert data["statistics"]["overview"]["total_videos"] == 4
    assert data["classification"]["source"] == "keyword"
    assert [v["id"] for v in data["selected"]] == ["3", "2", "1"]


def test_analyze_empty_is_unprocessable(client):
    assert client.post("/api/analyze", json={"videos": []}).status_code == 422
    assert client.post("/api/analyze", json=[1, 2]).status_code == 400


def test_queue_without_messages(client):
    resp = client.post("/api/queue", json={"messages": []})
    assert resp.json() == {"success": True, "message": "No messages to process."}


def test_queue_bad_message_is_acknowledged(client):
    body = _body()
    del body["accessToken"]
    resp = client.post("/api/queue", json={"messages": [{"id": "m1", "body": body}]})
    assert resp.status_code == 200
    data = resp.json()
    assert data["success"] is False
    assert "accessToken" in data["error"]
    assert server.jobs == {}


def test_queue_runs_job_in_background(client, monkeypatch):
    seen = []

    def fake_process(body, classifier, summarizer):
        seen.append(body)
        return {"creator": body["creatorHandle"], "review_opinion": "值得考虑"}

    monkeypatch.setattr(server, "process_message", fake_process)
    resp = client.post("/api/queue", json={"messages": [{"id": "m1", "body": _body()}]})
    job_id = resp.json()["job_id"]
    status = client.get(f"/api/status/{job_id}").json()
    assert status["status"] == "completed"
    assert status["result"]["review_opinion"] == "值得考虑"
    assert status["completed_at"]
    assert seen[0]["creatorHandle"] == "mali.beauty"


def test_queue_job_failure_is_recorded(client, monkeypatch):
    def failing(body, classifier, summarizer):
        raise EmptyInputError("no public videos found for mali.beauty")

    monkeypatch.setattr(server, "process_message", failing)
    job_id = client.post("/api/queue", json={"messages": [{"id": "m1", "body": _body()}]}).json()["job_id"]
    status = client.get(f"/api/status/{job_id}").json()
    assert status["status"] == "failed"
    assert status["error"].startswith("EmptyInputError")


def test_unknown_job(client):
    assert client.get("/api/status/nope").status_code == 404


def test_analyze_runs_pipeline_off_the_event_loop(client, monkeypatch):
    loops = []
    real_run = server.run_analysis

    def spy(*args, **kwargs):
        try:
            loops.append(asyncio.get_running_loop())
        except RuntimeError:
            loops.append(None)
        return real_run(*args, **kwargs)

    monkeypatch.setattr(server, "run_analysis", spy)
    videos = [make_record(i, play=10 * i, desc="serum").to_dict() for i in range(1, 4)]
    assert client.post("/api/analyze", json={"videos": videos}).status_code == 200
    assert loops == [None]

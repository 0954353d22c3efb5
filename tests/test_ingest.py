import pytest
import requests

from conftest import FakeResponse, make_record
from creatorscout.pipeline import ingest
from creatorscout.pipeline.errors import VideoSourceError


def _aweme(i):
    return {
        "aweme_id": str(i),
        "desc": f"video {i}",
        "create_time": 1_700_000_000 + i,
        "statistics": {"play_count": 100 * i, "digg_count": i},
        "video": {"play_addr": {"url_list": [f"https://cdn.example/playwm/{i}"]}},
    }


@pytest.fixture
def pages(monkeypatch):
    """Serve a queue of responses to ingest's requests.get and record the params."""
    state = {"responses": [], "params": []}

    def fake_get(url, params=None, headers=None, timeout=None):
        state["params"].append(dict(params))
        resp = state["responses"].pop(0)
        if isinstance(resp, Exception):
            raise resp
        return resp

    monkeypatch.setattr(ingest.requests, "get", fake_get)
    monkeypatch.setattr(ingest.time, "sleep", lambda s: None)
    return state


def test_pages_until_has_more_is_off(pages):
    pages["responses"] = [
        FakeResponse({"aweme_list": [_aweme(1), _aweme(2)], "has_more": 1, "max_cursor": "c1"}),
        FakeResponse({"data": {"aweme_list": [_aweme(3)], "has_more": 0}}),
    ]
    videos = ingest.fetch_user_videos("alice", max_videos=10)
    assert [v["aweme_id"] for v in videos] == ["1", "2", "3"]
    assert pages["params"][0]["count"] == "50"
    assert "max_cursor" not in pages["params"][0]
    assert pages["params"][1]["max_cursor"] == "c1"


def test_stops_at_max_videos(pages):
    pages["responses"] = [
        FakeResponse({"aweme_list": [_aweme(i) for i in range(5)], "has_more": 1, "max_cursor": "c"}),
    ]
    assert len(ingest.fetch_user_videos("alice", max_videos=3)) == 3
    assert len(pages["params"]) == 1


def test_request_cap(pages):
    pages["responses"] = [
        FakeResponse({"aweme_list": [_aweme(i)], "has_more": 1, "max_cursor": str(i)})
        for i in range(ingest.MAX_REQUESTS + 5)
    ]
    videos = ingest.fetch_user_videos("alice", max_videos=1000)
    assert len(videos) == ingest.MAX_REQUESTS
    assert len(pages["params"]) == ingest.MAX_REQUESTS


def test_404_ends_paging(pages):
    pages["responses"] = [
        FakeResponse({"aweme_list": [_aweme(1)], "has_more": 1, "max_cursor": "c"}),
        FakeResponse({}, status_code=404),
    ]
    assert len(ingest.fetch_user_videos("alice")) == 1


def test_first_page_failure_raises(pages):
    pages["responses"] = [requests.ConnectionError("down")]
    with pytest.raises(VideoSourceError):
        ingest.fetch_user_videos("alice")


def test_later_page_failure_keeps_partial_result(pages):
    pages["responses"] = [
        FakeResponse({"aweme_list": [_aweme(1)], "has_more": 1, "max_cursor": "c"}),
        FakeResponse({}, status_code=500),
    ]
    assert len(ingest.fetch_user_videos("alice")) == 1


def test_load_user_records_normalizes(pages):
    pages["responses"] = [
        FakeResponse({"aweme_list": [_aweme(1), _aweme(1), _aweme(2)], "has_more": 0}),
    ]
    records = ingest.load_user_records("alice")
    assert [r.id for r in records] == ["1", "2"]
    assert records[0].stats.like_count == 1
    assert records[0].playback_url == "https://cdn.example/play/1"


def test_non_object_page_keeps_partial_result(pages):
    pages["responses"] = [
        FakeResponse({"aweme_list": [_aweme(1), _aweme(2)], "has_more": 1, "max_cursor": "c"}),
        FakeResponse([_aweme(3)]),
    ]
    assert [v["aweme_id"] for v in ingest.fetch_user_videos("alice")] == ["1", "2"]


def test_non_object_first_page_raises(pages):
    pages["responses"] = [FakeResponse(["unexpected"])]
    with pytest.raises(VideoSourceError):
        ingest.fetch_user_videos("alice")


def test_top_videos_by_play_count():
    records = [make_record("a", play=5), make_record("b", play=50),
               make_record("c", play=50), make_record("d", play=1)]
    assert [r.id for r in ingest.top_videos(records)] == ["b", "c", "a"]
    assert [r.id for r in ingest.top_videos(records, n=1)] == ["b"]
    assert ingest.top_videos([]) == []

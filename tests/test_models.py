from creatorscout.pipeline.models import (
    CategoryClassificationResult,
    VideoRecord,
    VideoStats,
    load_records,
    normalize_id,
)


def test_normalize_id():
    assert normalize_id(7) == "7"
    assert normalize_id(7.0) == "7"
    assert normalize_id(" 7 ") == "7"
    assert normalize_id(7345678901234567890) == "7345678901234567890"
    assert normalize_id(None) == ""


def test_from_aweme_payload():
    raw = {
        "aweme_id": 7345678901234567890,
        "desc": "new serum #skincare",
        "create_time": "1700000000",
        "statistics": {"play_count": 1200, "digg_count": 80, "comment_count": None, "share_count": -3},
        "video": {"play_addr": {"url_list": ["https://cdn.example.com/playwm/abc.mp4"]}},
    }
    rec = VideoRecord.from_dict(raw)
    assert rec.id == "7345678901234567890"
    assert rec.created_at == 1700000000
    assert rec.stats == VideoStats(play_count=1200, like_count=80)
    assert rec.playback_url == "https://cdn.example.com/play/abc.mp4"


def test_relative_playback_url_dropped():
    rec = VideoRecord.from_dict({"aweme_id": "1", "video": {"play_addr": {"url_list": ["/local/x.mp4"]}}})
    assert rec.playback_url is None


def test_canonical_shape_round_trip():
    raw = {"id": 42, "description": "hi", "createdAt": 5,
           "statistics": {"playCount": 10, "likeCount": 2, "collectCount": "3"}}
    rec = VideoRecord.from_dict(raw)
    assert rec.stats.interactions == 5
    out = rec.to_dict()
    assert out["id"] == "42"
    assert out["statistics"]["shareCount"] == 0


def test_missing_stats_default_to_zero():
    rec = VideoRecord.from_dict({"id": "a"})
    assert rec.stats == VideoStats()
    assert rec.created_at == 0
    assert rec.description == ""


def test_load_records_dedupes_and_skips_idless():
    records = load_records([{"id": 1}, {"id": "1"}, {"description": "no id"}, "junk", {"aweme_id": 2}])
    assert [r.id for r in records] == ["1", "2"]


def test_classification_select_keeps_input_order():
    records = load_records([{"id": i} for i in range(5)])
    result = CategoryClassificationResult(matched_ids=frozenset({"3", "1"}))
    assert [r.id for r in result.select(records)] == ["1", "3"]
    assert result.to_dict()["matched_ids"] == ["1", "3"]


def test_direct_construction_normalizes_id():
    rec = VideoRecord(id=42, description="serum")
    assert rec.id == "42"
    assert VideoRecord(id=7.0).id == "7"
    result = CategoryClassificationResult(matched_ids=frozenset({"42"}))
    assert result.select([rec]) == [rec]

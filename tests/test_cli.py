import json

from conftest import make_record
from creatorscout import cli
from creatorscout.pipeline import analyze


def test_usage_without_args(capsys):
    assert cli.main([]) == 1
    assert "Usage" in capsys.readouterr().out


def test_missing_videos_file(tmp_path):
    assert cli.main([str(tmp_path)]) == 1


def test_runs_bundle(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(cli, "configured_oracles", lambda: (None, None))
    videos = [make_record(i, play=50 * i, desc="makeup look").to_dict() for i in range(1, 6)]
    (tmp_path / analyze.VIDEOS_FILE).write_text(json.dumps(videos), encoding="utf-8")
    assert cli.main([str(tmp_path)]) == 0
    assert (tmp_path / analyze.OUTPUT_FILE).exists()
    assert "Analyzed 5 videos" in capsys.readouterr().out


def test_empty_bundle(tmp_path, monkeypatch):
    monkeypatch.setattr(cli, "configured_oracles", lambda: (None, None))
    (tmp_path / analyze.VIDEOS_FILE).write_text("[]", encoding="utf-8")
    assert cli.main([str(tmp_path)]) == 1

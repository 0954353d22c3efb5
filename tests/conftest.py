import pytest

from creatorscout.pipeline.models import VideoRecord, VideoStats

DAY = 86400
NOW = 1_750_000_000  # fixed clock for window tests


def make_record(vid, play=0, like=0, comment=0, share=0, collect=0,
                desc="", days_ago=None, created_at=0):
    if days_ago is not None:
        created_at = int(NOW - days_ago * DAY)
    return VideoRecord(
        id=str(vid),
        description=desc,
        created_at=created_at,
        stats=VideoStats(play, like, comment, share, collect),
    )


class FakeResponse:
    def __init__(self, payload=None, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload

    def raise_for_status(self):
        import requests
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeOracle:
    """Classification oracle returning a canned response (or raising it)."""

    def __init__(self, response):
        self.response = response
        self.requests = []

    def classify(self, request):
        self.requests.append(request)
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


@pytest.fixture
def now():
    return NOW

"""
CreatorScout - Video Source
=============================
Pulls a creator's recent posts from the posts proxy and normalizes them.

Steps:
  1. Page through the proxy (count=50, max_cursor cursor, has_more flag)
  2. Stop at max_videos, MAX_REQUESTS pages, an empty page or a 404
  3. Normalize + de-duplicate into VideoRecords
"""

import logging
import time
from typing import Dict, List

import requests

from .. import config
from .errors import VideoSourceError
from .models import VideoRecord, load_records
from .selection import select_representative

logger = logging.getLogger(__name__)

BATCH_SIZE = 50
MAX_REQUESTS = 10
PAGE_DELAY = 0.1


def _fetch_page(unique_id: str, max_cursor=None, timeout: int = 30) -> Dict:
    params = {"unique_id": unique_id, "count": str(BATCH_SIZE)}
    if max_cursor:
        params["max_cursor"] = max_cursor
    resp = requests.get(
        config.TIKTOK_POSTS_URL,
        params=params,
        headers={"Accept": "application/json"},
        timeout=timeout,
    )
    if resp.status_code == 404:
        return {}
    resp.raise_for_status()
    data = resp.json()
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")
    # Some proxy deployments nest the payload under "data"
    if isinstance(data.get("data"), dict) and isinstance(data["data"].get("aweme_list"), list):
        data = data["data"]
    return data


def fetch_user_videos(unique_id: str, max_videos: int = None) -> List[Dict]:
    """Raw aweme dicts for a creator, newest first, at most ``max_videos``."""
    max_videos = config.MAX_VIDEOS if max_videos is None else max_videos
    videos: List[Dict] = []
    cursor = None
    requests_made = 0

    while len(videos) < max_videos and requests_made < MAX_REQUESTS:
        requests_made += 1
        try:
            data = _fetch_page(unique_id, cursor)
        except (requests.RequestException, ValueError) as e:
            if not videos:
                raise VideoSourceError(f"Failed to fetch videos for {unique_id}: {e}") from e
            logger.warning("Page %d failed for %s, keeping %d videos: %s",
                           requests_made, unique_id, len(videos), e)
            break

        page = data.get("aweme_list") or []
        if not page:
            break
        videos.extend(page)
        logger.info("Page %d: %d videos (total %d)", requests_made, len(page), len(videos))

        if data.get("has_more") != 1:
            break
        cursor = data.get("max_cursor") or None
        time.sleep(PAGE_DELAY)

    return videos[:max_videos]


def load_user_records(unique_id: str, max_videos: int = None) -> List[VideoRecord]:
    records = load_records(fetch_user_videos(unique_id, max_videos))
    logger.info("Loaded %d videos for %s", len(records), unique_id)
    return records


def top_videos(records: List[VideoRecord], n: int = 3) -> List[VideoRecord]:
    """The ``n`` most-played records, ties in input order."""
    return select_representative(records, [], n)

"""Representative-video selection: category matches first, topped up by popularity."""

from typing import Iterable, List

from .. import config
from .models import VideoRecord


def _by_popularity(records: Iterable[VideoRecord]) -> List[VideoRecord]:
    # sorted() is stable, so equal play counts keep their input order
    return sorted(records, key=lambda r: r.play_count, reverse=True)


def select_representative(records: List[VideoRecord],
                          category_matches: Iterable[VideoRecord],
                          target_count: int = None) -> List[VideoRecord]:
    """
    Pick ``target_count`` videos: the most-played category matches, then the
    most-played of everything else until the quota is met.

    Category matches whose id is not in ``records`` are ignored. The result
    never repeats an id and always lists category matches ahead of top-up
    videos.
    """
    target_count = config.SELECT_COUNT if target_count is None else target_count
    selected: List[VideoRecord] = []
    seen = set()
    known = {r.id for r in records}
    category_pool = [r for r in category_matches if r.id in known]

    for pool in (category_pool, records):
        for rec in _by_popularity(pool):
            if len(selected) >= target_count:
                return selected
            if rec.id in seen:
                continue
            seen.add(rec.id)
            selected.append(rec)
    return selected

"""
CreatorScout - Posting Cadence
================================
Trailing-window filters and weekly posting statistics.

Both a daily and a weekly cadence are reported: creators post in bursts,
and the missing-week rate exposes inactive stretches that an average hides.
"""

import time
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from .metrics import safe_div, std
from .models import VideoRecord

DAY_SECONDS = 86400


@dataclass(frozen=True)
class PostingStats:
    days: int
    count: int = 0
    posting_freq_per_day: float = 0.0
    posting_freq_per_week: float = 0.0
    weekly_std: float = 0.0
    missing_week_rate: float = 0.0
    observed_weeks: int = 0
    expected_weeks: int = 1


def filter_by_days(records: Iterable[VideoRecord], days: int,
                   now: Optional[float] = None) -> List[VideoRecord]:
    """Records with a known timestamp no older than ``days`` days."""
    now = time.time() if now is None else now
    horizon = days * DAY_SECONDS
    return [r for r in records if r.created_at > 0 and now - r.created_at <= horizon]


def week_key(ts: float) -> str:
    """ISO week label, e.g. "2025-W01" (Monday start, year of the week's Thursday)."""
    year, week, _ = datetime.fromtimestamp(ts, tz=timezone.utc).isocalendar()
    return f"{year}-W{week:02d}"


def expected_weeks(days: int) -> int:
    # round(days/7) is approximate when days is not a multiple of 7; kept as-is
    return max(1, round(days / 7))


def weekly_posting_stats(records: Iterable[VideoRecord], days: int,
                         now: Optional[float] = None) -> PostingStats:
    in_window = filter_by_days(records, days, now)
    per_week = Counter(week_key(r.created_at) for r in in_window)
    count = len(in_window)
    weeks = expected_weeks(days)
    observed = len(per_week)
    return PostingStats(
        days=days,
        count=count,
        posting_freq_per_day=safe_div(count, days),
        posting_freq_per_week=safe_div(count, weeks),
        weekly_std=std(list(per_week.values())),
        missing_week_rate=safe_div(max(0, weeks - observed), weeks),
        observed_weeks=observed,
        expected_weeks=weeks,
    )

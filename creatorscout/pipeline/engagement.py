"""
Engagement-rate calculations.

Two flavours are needed. The aggregate rate (total interactions / total
plays) answers "how engaged is the audience overall"; the per-record rate
feeds distributions and stability statistics.
"""

from typing import Dict, Iterable, List

from .metrics import mean, safe_div
from .models import VideoRecord


def engagement_rate(record: VideoRecord) -> float:
    """(like + comment + share + collect) / play; 0 for unplayed videos."""
    return safe_div(record.stats.interactions, record.stats.play_count)


def engagement_rates(records: Iterable[VideoRecord]) -> List[float]:
    return [engagement_rate(r) for r in records]


def aggregate_engagement_rate(records: Iterable[VideoRecord]) -> float:
    """Population-weighted rate, not the mean of per-record ratios."""
    interactions = 0
    plays = 0
    for r in records:
        interactions += r.stats.interactions
        plays += r.stats.play_count
    return safe_div(interactions, plays)


def interaction_rates(records: Iterable[VideoRecord]) -> Dict[str, float]:
    """Population-weighted like/comment/share/collect rates."""
    records = list(records)
    plays = sum(r.stats.play_count for r in records)
    return {
        "like_rate": safe_div(sum(r.stats.like_count for r in records), plays),
        "comment_rate": safe_div(sum(r.stats.comment_count for r in records), plays),
        "share_rate": safe_div(sum(r.stats.share_count for r in records), plays),
        "collect_rate": safe_div(sum(r.stats.collect_count for r in records), plays),
    }


def average_counts(records: Iterable[VideoRecord]) -> Dict[str, float]:
    records = list(records)
    return {
        "avg_play": mean([r.stats.play_count for r in records]),
        "avg_like": mean([r.stats.like_count for r in records]),
        "avg_comment": mean([r.stats.comment_count for r in records]),
        "avg_share": mean([r.stats.share_count for r in records]),
        "avg_collect": mean([r.stats.collect_count for r in records]),
    }

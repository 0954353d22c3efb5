"""
CreatorScout - Category Statistics
====================================
Compares the target-category videos against the creator's whole catalogue
and packs the result into one read-only StatisticsBundle.

Key policies:
  - Explosive video: play count above max(P90, mean + 2*std) of the
    POPULATION. Both bars must be cleared, because P90 alone is noisy
    when the catalogue is small.
  - CV and trend on fewer than MIN_SAMPLE_SIZE points are flagged as
    insufficient instead of being presented as reliable.
  - Every ratio with a zero denominator is 0.

Degraded inputs (no category videos, no timestamps) still produce a complete
bundle of zeros and empty lists. Only an empty population is an error.
"""

import logging
import time
from collections import Counter
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional

from .. import config
from .engagement import (
    aggregate_engagement_rate,
    average_counts,
    engagement_rates,
    interaction_rates,
)
from .errors import EmptyInputError
from .keywords import CTA_KEYWORDS, KEYWORD_TABLE_VERSION, SUBCATEGORY_GROUPS, matched_keyword
from .metrics import (
    Distribution,
    describe,
    linear_trend_slope,
    mean,
    quantile,
    safe_div,
    spearman_rho,
    std,
    tokenize,
)
from .models import VideoRecord
from .windows import PostingStats, filter_by_days, weekly_posting_stats

logger = logging.getLogger(__name__)

CADENCE_WINDOWS = (30, 90)
TREND_WINDOW_DAYS = 90
ENTITY_WINDOW_DAYS = 90
ENTITY_MIN_LENGTH = 3
ENTITY_MIN_COUNT = 3
ENTITY_TOP_N = 10
SUBCATEGORY_TOP_N = 3


@dataclass(frozen=True)
class Overview:
    total_videos: int
    category_videos: int
    category_ratio: float
    total_plays: int
    averages: Dict[str, float]
    rates: Dict[str, float]


@dataclass(frozen=True)
class Performance:
    overall_play: Distribution
    category_play: Distribution
    overall_er_distribution: Distribution
    category_er_distribution: Distribution
    overall_er: float
    category_er: float
    uplift: float
    explosive_threshold: float
    explosive_rate: float


@dataclass(frozen=True)
class Stability:
    sample_size: int
    play_cv: Optional[float]
    er_cv: Optional[float]
    insufficient_data: bool


@dataclass(frozen=True)
class Trend:
    window_days: int
    sample_size: int
    slope: float
    spearman_rho: float
    insufficient_data: bool


@dataclass(frozen=True)
class SubcategoryStats:
    name: str
    count: int
    share: float
    mean_play: float
    mean_er: float


@dataclass(frozen=True)
class StatisticsBundle:
    target_category: str
    overview: Overview
    posting: Dict[str, Dict[str, PostingStats]]
    performance: Performance
    stability: Stability
    trend: Trend
    subcategories: List[SubcategoryStats]
    cta_rate: float
    repeated_entities: List[Dict]
    flags: List[str] = field(default_factory=list)
    keyword_table_version: str = KEYWORD_TABLE_VERSION

    def to_dict(self) -> Dict:
        return asdict(self)


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

def _plays(records: List[VideoRecord]) -> List[int]:
    return [r.play_count for r in records]


def explosive_threshold(population: List[VideoRecord]) -> float:
    plays = _plays(population)
    p90 = quantile(sorted(plays)).p90
    return max(p90, mean(plays) + 2 * std(plays))


def explosive_rate(population: List[VideoRecord], category: List[VideoRecord]) -> float:
    bar = explosive_threshold(population)
    return safe_div(sum(1 for r in category if r.play_count > bar), len(category))


def uplift(category_er: float, overall_er: float) -> float:
    if overall_er == 0:
        return 0.0
    return category_er / overall_er - 1


def stability(category: List[VideoRecord], min_sample: int) -> Stability:
    n = len(category)
    if n < min_sample:
        return Stability(sample_size=n, play_cv=None, er_cv=None, insufficient_data=True)
    plays = _plays(category)
    ers = engagement_rates(category)
    return Stability(
        sample_size=n,
        play_cv=safe_div(std(plays), mean(plays)),
        er_cv=safe_div(std(ers), mean(ers)),
        insufficient_data=False,
    )


def play_trend(category: List[VideoRecord], min_sample: int, now: float,
               days: int = TREND_WINDOW_DAYS) -> Trend:
    """Slope and Spearman rho of play counts, oldest video first."""
    dated = sorted(filter_by_days(category, days, now), key=lambda r: r.created_at)
    plays = _plays(dated)
    return Trend(
        window_days=days,
        sample_size=len(plays),
        slope=linear_trend_slope(plays),
        spearman_rho=spearman_rho(plays),
        insufficient_data=len(plays) < min_sample,
    )


def subcategory_breakdown(category: List[VideoRecord],
                          groups: Dict[str, List[str]] = None,
                          top_n: int = SUBCATEGORY_TOP_N) -> List[SubcategoryStats]:
    groups = SUBCATEGORY_GROUPS if groups is None else groups
    rows = []
    for name, words in groups.items():
        members = [r for r in category if matched_keyword(r.description, words)]
        if not members:
            continue
        rows.append(SubcategoryStats(
            name=name,
            count=len(members),
            share=safe_div(len(members), len(category)),
            mean_play=mean(_plays(members)),
            mean_er=mean(engagement_rates(members)),
        ))
    rows.sort(key=lambda s: s.count, reverse=True)
    return rows[:top_n]


def cta_rate(category: List[VideoRecord], keywords: List[str] = None) -> float:
    keywords = CTA_KEYWORDS if keywords is None else keywords
    hits = sum(1 for r in category if matched_keyword(r.description, keywords))
    return safe_div(hits, len(category))


def repeated_entities(category: List[VideoRecord], now: float,
                      days: int = ENTITY_WINDOW_DAYS) -> List[Dict]:
    """Tokens mentioned again and again in recent category videos (repeat promotions)."""
    counts = Counter()
    for r in filter_by_days(category, days, now):
        counts.update(t for t in tokenize(r.description) if len(t) >= ENTITY_MIN_LENGTH)
    frequent = [(tok, n) for tok, n in counts.most_common() if n >= ENTITY_MIN_COUNT]
    return [{"token": tok, "count": n} for tok, n in frequent[:ENTITY_TOP_N]]


# ---------------------------------------------------------------------------
# Bundle
# ---------------------------------------------------------------------------

def build_statistics_bundle(all_records: List[VideoRecord],
                            category_records: List[VideoRecord],
                            target_category: str = None,
                            now: Optional[float] = None,
                            min_sample: int = None) -> StatisticsBundle:
    """
    Aggregate the population and its category subset into a StatisticsBundle.

    Raises:
        EmptyInputError: when all_records is empty
    """
    if not all_records:
        raise EmptyInputError("no video records to analyze")
    now = time.time() if now is None else now
    min_sample = config.MIN_SAMPLE_SIZE if min_sample is None else min_sample
    target_category = target_category or config.TARGET_CATEGORY

    total = len(all_records)
    n_cat = len(category_records)

    overview = Overview(
        total_videos=total,
        category_videos=n_cat,
        category_ratio=safe_div(n_cat, total),
        total_plays=sum(_plays(all_records)),
        averages=average_counts(all_records),
        rates=interaction_rates(all_records),
    )

    posting = {
        f"{days}d": {
            "overall": weekly_posting_stats(all_records, days, now),
            "category": weekly_posting_stats(category_records, days, now),
        }
        for days in CADENCE_WINDOWS
    }

    overall_er = aggregate_engagement_rate(all_records)
    category_er = aggregate_engagement_rate(category_records)
    performance = Performance(
        overall_play=describe(_plays(all_records)),
        category_play=describe(_plays(category_records)),
        overall_er_distribution=describe(engagement_rates(all_records)),
        category_er_distribution=describe(engagement_rates(category_records)),
        overall_er=overall_er,
        category_er=category_er,
        uplift=uplift(category_er, overall_er),
        explosive_threshold=explosive_threshold(all_records),
        explosive_rate=explosive_rate(all_records, category_records),
    )

    stab = stability(category_records, min_sample)
    trend = play_trend(category_records, min_sample, now)

    flags = []
    if stab.insufficient_data:
        flags.append("insufficient_sample:stability")
    if trend.insufficient_data:
        flags.append("insufficient_sample:trend")
    if flags:
        logger.info("Category sample is thin (%d videos): %s", n_cat, ", ".join(flags))

    return StatisticsBundle(
        target_category=target_category,
        overview=overview,
        posting=posting,
        performance=performance,
        stability=stab,
        trend=trend,
        subcategories=subcategory_breakdown(category_records),
        cta_rate=cta_rate(category_records),
        repeated_entities=repeated_entities(category_records, now),
        flags=flags,
    )

import math

import pytest

from conftest import make_record
from creatorscout.pipeline.engagement import (
    aggregate_engagement_rate,
    average_counts,
    engagement_rate,
    interaction_rates,
)


def test_unplayed_video_has_zero_rate():
    rec = make_record("a", play=0, like=50, comment=3)
    assert engagement_rate(rec) == 0
    assert not math.isnan(engagement_rate(rec))


def test_per_record_rate_sums_all_interactions():
    rec = make_record("a", play=1000, like=50, comment=20, share=20, collect=10)
    assert engagement_rate(rec) == pytest.approx(0.1)


def test_aggregate_is_population_weighted():
    records = [make_record("a", play=100, like=50), make_record("b", play=900, like=0)]
    # mean of ratios would be 0.25; weighted is 50/1000
    assert aggregate_engagement_rate(records) == pytest.approx(0.05)
    assert aggregate_engagement_rate([]) == 0
    assert aggregate_engagement_rate([make_record("z", like=4)]) == 0


def test_interaction_rates_and_averages():
    records = [make_record("a", play=200, like=20, comment=4, share=2, collect=6),
               make_record("b", play=0)]
    rates = interaction_rates(records)
    assert rates["like_rate"] == pytest.approx(0.1)
    assert rates["collect_rate"] == pytest.approx(0.03)
    avgs = average_counts(records)
    assert avgs["avg_play"] == pytest.approx(100)
    assert average_counts([])["avg_like"] == 0

"""
CreatorScout - Metric Primitives
==================================
Pure functions over numeric sequences. Every function returns a plain
float (never NaN or Infinity) and degrades to 0 on empty input, so callers
can feed them whatever survived filtering without guarding first.

Conventions:
  - std is the POPULATION standard deviation (divide by N)
  - p90 is nearest-rank on the ascending sample, not interpolated
  - spearman_rho ranks ties by their average position (midrank)
"""

import math
import re
from dataclasses import dataclass
from typing import List, Sequence

import numpy as np


@dataclass(frozen=True)
class Quantiles:
    median: float = 0.0
    p90: float = 0.0


@dataclass(frozen=True)
class Distribution:
    """Summary of one numeric sample."""
    count: int = 0
    mean: float = 0.0
    median: float = 0.0
    p90: float = 0.0
    std: float = 0.0
    min: float = 0.0
    max: float = 0.0


def _finite(value) -> float:
    value = float(value)
    return value if math.isfinite(value) else 0.0


def safe_div(num, den) -> float:
    """num / den, or 0 when the denominator is zero."""
    if not den:
        return 0.0
    return _finite(num / den)


def mean(xs: Sequence[float]) -> float:
    if len(xs) == 0:
        return 0.0
    return _finite(np.mean(np.asarray(xs, dtype=float)))


def std(xs: Sequence[float]) -> float:
    if len(xs) == 0:
        return 0.0
    return _finite(np.std(np.asarray(xs, dtype=float)))


def quantile(sorted_xs: Sequence[float]) -> Quantiles:
    """Median and p90 of an ascending-sorted sample."""
    n = len(sorted_xs)
    if n == 0:
        return Quantiles()
    arr = np.asarray(sorted_xs, dtype=float)
    mid = n // 2
    if n % 2:
        median = arr[mid]
    else:
        median = (arr[mid - 1] + arr[mid]) / 2
    p90 = arr[int(math.floor(0.9 * (n - 1)))]
    return Quantiles(median=_finite(median), p90=_finite(p90))


def describe(xs: Sequence[float]) -> Distribution:
    if len(xs) == 0:
        return Distribution()
    ordered = sorted(float(x) for x in xs)
    q = quantile(ordered)
    return Distribution(
        count=len(ordered),
        mean=mean(ordered),
        median=q.median,
        p90=q.p90,
        std=std(ordered),
        min=ordered[0],
        max=ordered[-1],
    )


def linear_trend_slope(ys: Sequence[float]) -> float:
    """OLS slope of ys against their index 0..N-1."""
    n = len(ys)
    if n <= 1:
        return 0.0
    y = np.asarray(ys, dtype=float)
    x = np.arange(n, dtype=float)
    dx = x - x.mean()
    var_x = float(np.sum(dx * dx))
    if var_x == 0:
        return 0.0
    return _finite(np.sum(dx * (y - y.mean())) / var_x)


def midranks(values: Sequence[float]) -> List[float]:
    """1-based ranks, ties sharing the average of the positions they span."""
    order = sorted(range(len(values)), key=lambda i: values[i])
    ranks = [0.0] * len(values)
    i = 0
    while i < len(order):
        j = i
        while j + 1 < len(order) and values[order[j + 1]] == values[order[i]]:
            j += 1
        avg = (i + j) / 2 + 1
        for k in range(i, j + 1):
            ranks[order[k]] = avg
        i = j + 1
    return ranks


def spearman_rho(ys: Sequence[float]) -> float:
    """Rank correlation between time order (1..N) and the values' ranks."""
    n = len(ys)
    if n <= 1:
        return 0.0
    value_ranks = np.asarray(midranks(list(ys)), dtype=float)
    index_ranks = np.arange(1, n + 1, dtype=float)
    d2 = float(np.sum((index_ranks - value_ranks) ** 2))
    return _finite(1 - 6 * d2 / (n * (n * n - 1)))


def coefficient_of_variation(xs: Sequence[float]) -> float:
    return safe_div(std(xs), mean(xs))


# CJK symbols/punctuation and the full-width forms block
_CJK_PUNCT = re.compile(r"[\u3000-\u303f\uff00-\uffef]")
_NON_TOKEN = re.compile(r"[^a-z0-9#\s\u4e00-\u9fff]")


def tokenize(text: str) -> List[str]:
    if not text:
        return []
    text = _CJK_PUNCT.sub(" ", text.lower())
    text = _NON_TOKEN.sub("", text)
    return [t for t in text.split() if t]

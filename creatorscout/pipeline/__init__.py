"""
CreatorScout - Analysis Pipeline
==================================
Statistics, category classification and video selection over a creator's
recent short videos, plus the collaborators that feed and consume them.
"""

from .analyze import AnalysisResult, analyze_bundle, process_message, run_analysis
from .category_stats import StatisticsBundle, build_statistics_bundle
from .classifier import classify_category
from .errors import EmptyInputError, OracleMalformedResponse, OracleUnavailable
from .models import CategoryClassificationResult, VideoRecord, VideoStats, load_records
from .selection import select_representative

__all__ = [
    "AnalysisResult",
    "CategoryClassificationResult",
    "EmptyInputError",
    "OracleMalformedResponse",
    "OracleUnavailable",
    "StatisticsBundle",
    "VideoRecord",
    "VideoStats",
    "analyze_bundle",
    "build_statistics_bundle",
    "classify_category",
    "load_records",
    "process_message",
    "run_analysis",
    "select_representative",
]

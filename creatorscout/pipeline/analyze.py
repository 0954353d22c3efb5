"""
CreatorScout - Analysis Orchestration
=======================================
Ties the pipeline together:

  run_analysis     records -> classify -> select -> StatisticsBundle
  analyze_bundle   bundle_dir/videos.json -> bundle_dir/stats_bundle.json
  process_message  queue message -> fetch -> analyze -> summarize -> write back

The statistics core never waits on I/O: videos are fully fetched before
run_analysis starts, and the one oracle call it makes is allowed to fail.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional

from .. import config
from .category_stats import StatisticsBundle, build_statistics_bundle
from .classifier import classify_category
from .errors import (
    CollaboratorUnavailableError,
    EmptyInputError,
    InvalidMessageError,
    OracleError,
    RecordStoreError,
)
from .ingest import load_user_records
from .models import CategoryClassificationResult, VideoRecord, load_records
from .oracle import (
    ClassificationOracle,
    OpenRouterClassificationOracle,
    OpenRouterSummarizationOracle,
    Review,
    SummarizationOracle,
    fallback_review,
)
from .records import FeishuRecordStore
from .selection import select_representative

logger = logging.getLogger(__name__)

REQUIRED_MESSAGE_KEYS = ("feishuRecordId", "commercialData", "creatorHandle", "env", "accessToken")
VIDEOS_FILE = "videos.json"
OUTPUT_FILE = "stats_bundle.json"


@dataclass(frozen=True)
class AnalysisResult:
    bundle: StatisticsBundle
    selected: List[VideoRecord]
    classification: CategoryClassificationResult

    def to_dict(self) -> Dict:
        return {
            "statistics": self.bundle.to_dict(),
            "selected": [r.to_dict() for r in self.selected],
            "classification": self.classification.to_dict(),
        }


def configured_oracles():
    """OpenRouter oracles when an API key is configured, else (None, None)."""
    if not config.OPENROUTER_API_KEY:
        logger.warning("OPENROUTER_API_KEY not set - running keyword-only, no summaries")
        return None, None
    return OpenRouterClassificationOracle(), OpenRouterSummarizationOracle()


def run_analysis(records: List[VideoRecord],
                 classification_oracle: Optional[ClassificationOracle] = None,
                 target_category: str = None,
                 now: Optional[float] = None,
                 select_count: int = None) -> AnalysisResult:
    """
    Full statistics pass over an already-fetched record list.

    Raises:
        EmptyInputError: when ``records`` is empty
    """
    if not records:
        raise EmptyInputError("no video records supplied")
    target_category = target_category or config.TARGET_CATEGORY

    classification = classify_category(records, classification_oracle, target_category)
    category_records = classification.select(records)
    logger.info("Category %s: %d of %d videos (source=%s%s)",
                target_category, len(category_records), len(records),
                classification.source, ", degraded" if classification.degraded else "")

    selected = select_representative(records, category_records, select_count)
    bundle = build_statistics_bundle(records, category_records, target_category, now)
    return AnalysisResult(bundle=bundle, selected=selected, classification=classification)


def analyze_bundle(bundle_dir, classification_oracle: Optional[ClassificationOracle] = None,
                   target_category: str = None) -> AnalysisResult:
    """Analyze ``videos.json`` in a bundle directory and save ``stats_bundle.json``."""
    bundle_dir = Path(bundle_dir)
    raw = json.loads((bundle_dir / VIDEOS_FILE).read_text(encoding="utf-8"))
    if isinstance(raw, dict):
        raw = raw.get("videos") or raw.get("aweme_list") or []
    records = load_records(raw)

    result = run_analysis(records, classification_oracle, target_category)
    output = result.to_dict()
    output["generated_at"] = datetime.utcnow().isoformat()
    (bundle_dir / OUTPUT_FILE).write_text(
        json.dumps(output, indent=2, ensure_ascii=False), encoding="utf-8"
    )
    return result


def summarize(result: AnalysisResult, commercial_data: Dict,
              oracle: Optional[SummarizationOracle]) -> Review:
    """Report + rating from the summarization oracle, or the fallback review."""
    statistics = result.bundle.to_dict()
    if oracle is None:
        return fallback_review(statistics, "no summarizer configured")
    context = {
        "targetCategory": result.bundle.target_category,
        "commercialData": commercial_data,
        "statistics": statistics,
        "selectedVideos": [r.to_dict() for r in result.selected],
    }
    try:
        return oracle.summarize(context)
    except OracleError as e:
        logger.warning("Summarization oracle degraded: %s", e)
        return fallback_review(statistics, type(e).__name__)


def process_message(body: Dict,
                    classification_oracle: Optional[ClassificationOracle] = None,
                    summarization_oracle: Optional[SummarizationOracle] = None,
                    video_loader: Callable[[str], List[VideoRecord]] = load_user_records,
                    store_factory: Callable[..., FeishuRecordStore] = FeishuRecordStore) -> Dict:
    """
    Handle one analysis request from the queue.

    Raises:
        InvalidMessageError: required keys missing
        EmptyInputError: the creator has no public videos
        CollaboratorUnavailableError: the review could not be written anywhere
    """
    missing = [k for k in REQUIRED_MESSAGE_KEYS if not (body or {}).get(k)]
    if missing:
        raise InvalidMessageError(f"message body missing: {', '.join(missing)}")

    handle = body["creatorHandle"]
    commercial = body["commercialData"]
    env = body["env"]
    if not isinstance(commercial, dict) or not isinstance(env, dict):
        raise InvalidMessageError("commercialData and env must be objects")

    records = video_loader(handle)
    if not records:
        raise EmptyInputError(f"no public videos found for {handle}")

    result = run_analysis(records, classification_oracle, env.get("TARGET_CATEGORY"))
    review = summarize(result, commercial, summarization_oracle)
    logger.info("Review for %s: %s (%d chars of report)",
                handle, review.review_opinion, len(review.report_markdown))

    store = store_factory(env.get("FEISHU_APP_TOKEN"), env.get("FEISHU_TABLE_ID"), body["accessToken"])
    try:
        touched = store.write_review(
            body["feishuRecordId"],
            commercial.get("创作者名称"),
            review.report_markdown,
            review.review_opinion,
        )
    except RecordStoreError as e:
        raise CollaboratorUnavailableError(f"could not store review for {handle}: {e}") from e

    return {
        "creator": handle,
        "review_opinion": review.review_opinion,
        "record_ids": touched,
        "total_videos": result.bundle.overview.total_videos,
        "category_videos": result.bundle.overview.category_videos,
    }

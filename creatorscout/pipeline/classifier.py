"""
CreatorScout - Category Classifier
====================================
Two-stage category labelling:

  1. One call to the classification oracle with every candidate video.
     Whatever it returns is clipped to the candidate id allow-list.
  2. If the oracle found fewer than ``min_matches`` videos, a keyword scan
     over descriptions runs; its result replaces the oracle's when it is
     strictly larger.

Keyword evidence beats a too-small model answer, never a sufficient one.
An oracle failure of any kind drops straight into stage 2.
"""

import logging
from typing import Dict, List, Optional

from .. import config
from .errors import OracleError
from .keywords import keywords_for, matched_keyword
from .models import CategoryClassificationResult, VideoRecord, normalize_id
from .oracle import ClassificationOracle, parse_classification_response

logger = logging.getLogger(__name__)


def build_candidates(records: List[VideoRecord]) -> List[Dict]:
    """Only the fields the oracle needs, ids in canonical string form."""
    return [
        {
            "id": normalize_id(r.id),
            "description": r.description,
            "popularity": r.play_count,
        }
        for r in records
    ]


def _ask_oracle(oracle: Optional[ClassificationOracle], request: Dict):
    """Oracle matches as (id, justification) pairs, or None when it failed."""
    if oracle is None:
        logger.warning("No classification oracle configured; keyword path only")
        return None
    try:
        return parse_classification_response(oracle.classify(request))
    except OracleError as e:
        logger.warning("Classification oracle degraded: %s", e)
    except Exception as e:
        logger.warning("Classification oracle raised %s: %s", type(e).__name__, e)
    return None


def keyword_matches(records: List[VideoRecord], keywords: List[str]) -> Dict[str, str]:
    """id -> matched keyword for every record whose description hits the list."""
    hits = {}
    for r in records:
        kw = matched_keyword(r.description, keywords)
        if kw:
            hits[r.id] = kw
    return hits


def classify_category(records: List[VideoRecord],
                      oracle: Optional[ClassificationOracle] = None,
                      target_category: str = None,
                      min_matches: int = None,
                      keywords: Optional[List[str]] = None) -> CategoryClassificationResult:
    """
    Decide which records belong to ``target_category``.

    Args:
        records: the full, already de-duplicated population
        oracle: classification strategy; None counts as unavailable
        target_category: defaults to config.TARGET_CATEGORY
        min_matches: oracle result size below which keywords are consulted
        keywords: override for the fallback keyword list

    Returns:
        CategoryClassificationResult whose ids are a subset of the input ids
    """
    target_category = target_category or config.TARGET_CATEGORY
    min_matches = config.MIN_CATEGORY_MATCHES if min_matches is None else min_matches
    keywords = keywords_for(target_category) if keywords is None else keywords

    candidates = build_candidates(records)
    allow_list = {c["id"] for c in candidates}

    pairs = _ask_oracle(oracle, {"targetCategory": target_category, "candidates": candidates})
    degraded = pairs is None

    reasons: Dict[str, str] = {}
    foreign = 0
    for vid, justification in pairs or []:
        if vid not in allow_list:
            foreign += 1
            continue
        reasons.setdefault(vid, justification)
    if foreign:
        logger.warning("Dropped %d oracle ids not in the candidate list", foreign)

    matched = set(reasons)
    source = "oracle" if matched else "none"

    if len(matched) < min_matches:
        hits = keyword_matches(records, keywords)
        if len(hits) > len(matched):
            logger.info("Keyword fallback: %d keyword matches vs %d from oracle", len(hits), len(matched))
            matched = set(hits)
            reasons = {
                vid: reasons.get(vid) or f"keyword match: {kw}"
                for vid, kw in hits.items()
            }
            source = "keyword"

    return CategoryClassificationResult(
        matched_ids=frozenset(matched),
        reasons_by_id={vid: reasons[vid] for vid in matched},
        source=source,
        degraded=degraded,
    )

"""
CreatorScout - Data Model
===========================
Video records and classification results.

Raw payloads from the hosting platform are messy: ids arrive as ints or
strings, counters go missing, watermark URLs need rewriting. All of that is
settled here so the statistics code never has to null-check anything.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional

logger = logging.getLogger(__name__)


def normalize_id(raw) -> str:
    """Canonical string form of a record id (7, 7.0 and " 7 " are all "7")."""
    if raw is None:
        return ""
    if isinstance(raw, bool):
        return str(int(raw))
    if isinstance(raw, float) and raw.is_integer():
        return str(int(raw))
    return str(raw).strip()


def _count(raw) -> int:
    """Non-negative int from whatever the source emitted; 0 when unusable."""
    if raw is None:
        return 0
    try:
        value = int(float(raw))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(0, value)


def _first_url(video: Dict) -> Optional[str]:
    url_list = ((video or {}).get("play_addr") or {}).get("url_list") or []
    if not url_list:
        return None
    url = str(url_list[0]).replace("playwm", "play")
    if not url.startswith("http"):
        logger.warning("Dropping non-absolute playback url: %s", url[:80])
        return None
    return url


@dataclass(frozen=True)
class VideoStats:
    """Raw interaction counters for one video."""
    play_count: int = 0
    like_count: int = 0
    comment_count: int = 0
    share_count: int = 0
    collect_count: int = 0

    @property
    def interactions(self) -> int:
        return self.like_count + self.comment_count + self.share_count + self.collect_count

    @classmethod
    def from_dict(cls, raw: Optional[Dict]) -> "VideoStats":
        raw = raw or {}
        return cls(
            play_count=_count(raw.get("playCount", raw.get("play_count"))),
            like_count=_count(raw.get("likeCount", raw.get("like_count", raw.get("digg_count")))),
            comment_count=_count(raw.get("commentCount", raw.get("comment_count"))),
            share_count=_count(raw.get("shareCount", raw.get("share_count"))),
            collect_count=_count(raw.get("collectCount", raw.get("collect_count"))),
        )


@dataclass(frozen=True)
class VideoRecord:
    """One published video. ``created_at`` of 0 means the timestamp is unknown."""
    id: str
    description: str = ""
    created_at: int = 0
    stats: VideoStats = field(default_factory=VideoStats)
    playback_url: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "id", normalize_id(self.id))

    @property
    def play_count(self) -> int:
        return self.stats.play_count

    @classmethod
    def from_dict(cls, raw: Dict) -> "VideoRecord":
        """Build a record from either the platform's aweme shape or our own."""
        if "aweme_id" in raw:
            return cls(
                id=normalize_id(raw.get("aweme_id")),
                description=raw.get("desc") or "",
                created_at=_count(raw.get("create_time")),
                stats=VideoStats.from_dict(raw.get("statistics")),
                playback_url=_first_url(raw.get("video")),
            )
        return cls(
            id=normalize_id(raw.get("id")),
            description=raw.get("description") or "",
            created_at=_count(raw.get("createdAt", raw.get("created_at"))),
            stats=VideoStats.from_dict(raw.get("statistics")),
            playback_url=raw.get("playbackUrl") or raw.get("playback_url") or None,
        )

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "description": self.description,
            "createdAt": self.created_at,
            "statistics": {
                "playCount": self.stats.play_count,
                "likeCount": self.stats.like_count,
                "commentCount": self.stats.comment_count,
                "shareCount": self.stats.share_count,
                "collectCount": self.stats.collect_count,
            },
            "playbackUrl": self.playback_url,
        }


def load_records(raw_list) -> List[VideoRecord]:
    """Normalize raw dicts into records, dropping id-less and duplicate entries."""
    raw_list = list(raw_list or [])
    records = []
    seen = set()
    for raw in raw_list:
        if isinstance(raw, VideoRecord):
            rec = raw
        elif isinstance(raw, dict):
            rec = VideoRecord.from_dict(raw)
        else:
            continue
        if not rec.id or rec.id in seen:
            continue
        seen.add(rec.id)
        records.append(rec)
    skipped = len(raw_list) - len(records)
    if skipped:
        logger.info("Skipped %d duplicate or id-less video entries", skipped)
    return records


@dataclass(frozen=True)
class CategoryClassificationResult:
    """
    Which records belong to the target category.

    Attributes:
        matched_ids: ids drawn from the candidate allow-list, never outside it
        reasons_by_id: justification per matched id (model text or keyword note)
        source: "oracle", "keyword" or "none" - whichever evidence won
        degraded: True when the oracle failed and only keywords were available
    """
    matched_ids: FrozenSet[str] = frozenset()
    reasons_by_id: Dict[str, str] = field(default_factory=dict)
    source: str = "none"
    degraded: bool = False

    def select(self, records: List[VideoRecord]) -> List[VideoRecord]:
        return [r for r in records if r.id in self.matched_ids]

    def to_dict(self) -> Dict:
        return {
            "matched_ids": sorted(self.matched_ids),
            "reasons_by_id": dict(self.reasons_by_id),
            "source": self.source,
            "degraded": self.degraded,
        }

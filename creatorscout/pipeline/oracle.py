"""
CreatorScout - LLM Oracles
============================
Classification and summarization capabilities behind small strategy
interfaces. The pipeline only ever sees the request/response contracts:

  classify({"targetCategory": str,
            "candidates": [{"id", "description", "popularity"}]})
      -> {"matches": [{"id", "justification"}]}

  summarize({"commercialData", "statistics", "selectedVideos", ...})
      -> Review(report_markdown, review_opinion)

The OpenRouter implementations post to the chat-completions endpoint with
requests. Failures surface as OracleUnavailable / OracleMalformedResponse;
deciding what to do about them is the caller's job.
"""

import json
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import requests

from .. import config
from .errors import OracleMalformedResponse, OracleUnavailable
from .models import normalize_id

logger = logging.getLogger(__name__)

SEPARATOR = "---SEPARATOR---"
ALTERNATIVE_SEPARATORS = [
    "--- SEPARATOR ---",
    "SEPARATOR",
    "### 任务二：生成简洁审核意见",
    "任务二：生成简洁审核意见",
]
TASK_HEADINGS = ["### 任务二：生成简洁审核意见", "任务二：生成简洁审核意见"]

# Strongly recommend / worth considering / wait and see / not recommended
REVIEW_OPINIONS = ["强烈推荐", "值得考虑", "建议观望", "不推荐"]
DEFAULT_OPINION = "建议观望"


@dataclass(frozen=True)
class Review:
    report_markdown: str
    review_opinion: str


# ---------------------------------------------------------------------------
# Interfaces
# ---------------------------------------------------------------------------

class ClassificationOracle:
    """Labels candidate videos as belonging to a target category."""

    def classify(self, request: Dict) -> Dict:
        raise NotImplementedError


class SummarizationOracle:
    """Turns statistics plus commercial data into a report and a rating."""

    def summarize(self, context: Dict) -> Review:
        raise NotImplementedError


# ---------------------------------------------------------------------------
# Response parsing
# ---------------------------------------------------------------------------

def strip_code_fence(text: str) -> str:
    text = (text or "").strip()
    if text.startswith("```"):
        if "```json" in text:
            text = text.split("```json")[-1].split("```")[0]
        else:
            parts = text.split("```")
            text = parts[1] if len(parts) > 1 else ""
    return text.strip()


def parse_classification_response(payload) -> List[Tuple[str, str]]:
    """
    Validate a classification response and return (id, justification) pairs.

    Any schema violation rejects the whole response; ids are normalized but
    NOT filtered against the allow-list here.
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("matches"), list):
        raise OracleMalformedResponse("response has no 'matches' list")
    pairs = []
    for entry in payload["matches"]:
        if not isinstance(entry, dict) or entry.get("id") is None:
            raise OracleMalformedResponse(f"match entry without id: {str(entry)[:80]}")
        vid = normalize_id(entry["id"])
        if not vid:
            raise OracleMalformedResponse("match entry with empty id")
        justification = entry.get("justification") or ""
        pairs.append((vid, str(justification)))
    return pairs


def _normalize_opinion(text: str) -> str:
    text = (text or "").strip()
    for heading in TASK_HEADINGS:
        if text.startswith(heading):
            text = text[len(heading):].strip()
    found = [(text.find(op), op) for op in REVIEW_OPINIONS if op in text]
    if found:
        return min(found)[1]
    return text or DEFAULT_OPINION


def parse_review(text: str) -> Review:
    """
    Split a summarization answer into (report, rating).

    Order of attempts: the agreed separator, known alternative separators,
    the earliest rating keyword, and finally the whole text as the report
    with the default rating.
    """
    text = text or ""
    for sep in [SEPARATOR] + ALTERNATIVE_SEPARATORS:
        if sep in text:
            parts = text.split(sep)
            if len(parts) >= 2:
                return Review(parts[0].strip(), _normalize_opinion(parts[1]))

    found = [(text.find(op), op) for op in REVIEW_OPINIONS if op in text]
    if found:
        idx, opinion = min(found)
        logger.info("No separator in review; split at rating keyword %s", opinion)
        return Review(text[:idx].strip(), opinion)

    logger.warning("Review has no separator or rating; using default rating")
    return Review(text.strip(), DEFAULT_OPINION)


def fallback_review(statistics: Optional[Dict] = None, reason: str = "") -> Review:
    """Degraded review used when the summarization oracle is unavailable."""
    overview = (statistics or {}).get("overview", {})
    note = (
        "Automated summary unavailable"
        + (f" ({reason})" if reason else "")
        + f". Statistics cover {overview.get('total_videos', 0)} videos, "
        + f"{overview.get('category_videos', 0)} in the target category. "
        + "Re-run the analysis once the summarizer is reachable."
    )
    return Review(note, DEFAULT_OPINION)


# ---------------------------------------------------------------------------
# OpenRouter
# ---------------------------------------------------------------------------

def chat_completion(prompt: str, api_key: str, model: str, url: str,
                    timeout: int, temperature: float = 0.2, max_tokens: int = 2000) -> str:
    """Single-turn chat completion; returns the message text."""
    if not api_key:
        raise OracleUnavailable("OPENROUTER_API_KEY is not configured")
    try:
        resp = requests.post(
            url,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            json={
                "model": model,
                "messages": [{"role": "user", "content": prompt}],
                "temperature": temperature,
                "max_tokens": max_tokens,
            },
            timeout=timeout,
        )
        resp.raise_for_status()
    except requests.RequestException as e:
        raise OracleUnavailable(f"OpenRouter request failed: {e}") from e
    try:
        text = resp.json()["choices"][0]["message"]["content"]
    except (ValueError, KeyError, IndexError, TypeError) as e:
        raise OracleMalformedResponse(f"unexpected completion payload: {e}") from e
    if not isinstance(text, str) or not text.strip():
        raise OracleMalformedResponse("empty completion text")
    return text


class _OpenRouterMixin:
    def __init__(self, api_key=None, model=None, url=None, timeout=None):
        self.api_key = config.OPENROUTER_API_KEY if api_key is None else api_key
        self.model = model or config.OPENROUTER_MODEL_ID
        self.url = url or config.OPENROUTER_URL
        self.timeout = timeout or config.ORACLE_TIMEOUT

    def _complete(self, prompt, **kwargs):
        return chat_completion(prompt, self.api_key, self.model, self.url, self.timeout, **kwargs)


class OpenRouterClassificationOracle(_OpenRouterMixin, ClassificationOracle):

    def classify(self, request: Dict) -> Dict:
        candidates = request.get("candidates", [])
        prompt = f"""You label short videos by topic.
Target category: "{request.get('targetCategory', '')}"

Candidates (id, description, popularity):
{json.dumps(candidates, ensure_ascii=False)}

RULES:
- Only use ids from the candidate list
- Include a video only if its description clearly belongs to the target category
- Descriptions may be in any language

Respond in this exact JSON format:
{{"matches": [{{"id": "<candidate id>", "justification": "<one short sentence>"}}]}}

Return ONLY valid JSON."""
        text = self._complete(prompt, temperature=0.1, max_tokens=3000)
        try:
            payload = json.loads(strip_code_fence(text))
        except json.JSONDecodeError as e:
            raise OracleMalformedResponse(f"classification JSON parse failed: {e} (response: {text[:100]})") from e
        parse_classification_response(payload)
        return payload


class OpenRouterSummarizationOracle(_OpenRouterMixin, SummarizationOracle):

    def summarize(self, context: Dict) -> Review:
        prompt = f"""You are a short-video content and brand-partnership analyst.
Assess this creator for a {context.get('targetCategory', config.TARGET_CATEGORY)} brand.

Commercial data from the brand's sheet (platform-wide figures, not past
collaborations with us):
{json.dumps(context.get('commercialData', {}), ensure_ascii=False, indent=2)}

Computed statistics for the creator's recent videos:
{json.dumps(context.get('statistics', {}), ensure_ascii=False, indent=2)}

Representative videos:
{json.dumps(context.get('selectedVideos', []), ensure_ascii=False, indent=2)}

Produce two outputs separated by the line {SEPARATOR}
1. A Markdown analysis report (style, performance, stability, commercial fit, risks).
2. Exactly one rating from: {", ".join(REVIEW_OPINIONS)}. Output only the rating."""
        text = self._complete(prompt, temperature=0.4, max_tokens=6000)
        return parse_review(text)

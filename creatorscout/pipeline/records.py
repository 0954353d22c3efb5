"""
CreatorScout - Record Store (Feishu Bitable)
==============================================
Writes the review back into the brand's multi-dimensional table.

A creator can appear on several rows (one per product pitch), so the
review goes to every row carrying the creator's name; when none are found,
only the row that triggered the analysis is updated.
"""

import logging
from typing import Dict, List

import requests

from .. import config
from .errors import RecordStoreError

logger = logging.getLogger(__name__)

CREATOR_NAME_FIELD = "创作者名称"
REVIEW_FIELD = "审核意见"
REPORT_FIELD = "Gemini分析内容"
REQUESTED_FIELD = "是否已经发起分析请求"


class FeishuRecordStore:
    """Thin client over the bitable records API for one table."""

    def __init__(self, app_token: str, table_id: str, access_token: str,
                 base_url: str = None, timeout: int = 30):
        self.app_token = app_token
        self.table_id = table_id
        self.access_token = access_token
        self.base_url = (base_url or config.FEISHU_API_BASE).rstrip("/")
        self.timeout = timeout

    @property
    def _records_url(self) -> str:
        return f"{self.base_url}/bitable/v1/apps/{self.app_token}/tables/{self.table_id}/records"

    def _call(self, method: str, url: str, payload: Dict) -> Dict:
        try:
            resp = requests.request(
                method,
                url,
                headers={
                    "Authorization": f"Bearer {self.access_token}",
                    "Content-Type": "application/json; charset=utf-8",
                },
                json=payload,
                timeout=self.timeout,
            )
            resp.raise_for_status()
            result = resp.json()
        except (requests.RequestException, ValueError) as e:
            raise RecordStoreError(f"Feishu {method} {url} failed: {e}") from e
        if result.get("code") != 0:
            raise RecordStoreError(f"Feishu API error: {result.get('msg')}")
        return result.get("data") or {}

    def search_by_creator_name(self, creator_name: str) -> List[str]:
        """Record ids whose creator-name field equals ``creator_name``."""
        data = self._call("POST", f"{self._records_url}/search", {
            "filter": {
                "conjunction": "and",
                "conditions": [{
                    "field_name": CREATOR_NAME_FIELD,
                    "operator": "is",
                    "value": [str(creator_name)],
                }],
            },
            "page_size": 100,
        })
        ids = [item["record_id"] for item in data.get("items") or [] if item.get("record_id")]
        logger.info("Found %d records for creator %s", len(ids), creator_name)
        return ids

    def update_record(self, record_id: str, fields: Dict) -> Dict:
        return self._call("PUT", f"{self._records_url}/{record_id}", {"fields": fields})

    def batch_update(self, record_ids: List[str], fields: Dict) -> Dict:
        if not record_ids:
            return {}
        return self._call("POST", f"{self._records_url}/batch_update", {
            "records": [{"record_id": rid, "fields": dict(fields)} for rid in record_ids],
        })

    def write_review(self, record_id: str, creator_name: str,
                     report_markdown: str, review_opinion: str) -> List[str]:
        """Store the review on every row of the creator; returns the ids touched."""
        fields = {REVIEW_FIELD: review_opinion, REPORT_FIELD: report_markdown}
        related = self.search_by_creator_name(creator_name) if creator_name else []
        if related:
            self.batch_update(related, {REQUESTED_FIELD: "是", **fields})
            return related
        logger.info("No rows found for %s; updating record %s only", creator_name, record_id)
        self.update_record(record_id, fields)
        return [record_id]

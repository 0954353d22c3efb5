"""
CreatorScout - Configuration
==============================
Environment-driven settings. Values come from the process environment,
with a .env file in the project root (or the current dir) filling the gaps.
"""

import os
import logging
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent / ".env")
load_dotenv()


def _int_env(name, default):
    raw = os.getenv(name, "")
    try:
        return int(raw) if raw.strip() else default
    except ValueError:
        return default


# ---------------------------------------------------------------------------
# LLM (OpenRouter)
# ---------------------------------------------------------------------------
OPENROUTER_API_KEY = os.getenv("OPENROUTER_API_KEY", "")
OPENROUTER_MODEL_ID = os.getenv("OPENROUTER_MODEL_ID", "google/gemini-2.5-flash")
OPENROUTER_URL = os.getenv("OPENROUTER_URL", "https://openrouter.ai/api/v1/chat/completions")
ORACLE_TIMEOUT = _int_env("ORACLE_TIMEOUT", 60)

# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------
TIKTOK_POSTS_URL = os.getenv("TIKTOK_POSTS_URL", "https://tiktok-user-posts.1170731839.workers.dev/")
FEISHU_API_BASE = os.getenv("FEISHU_API_BASE", "https://open.feishu.cn/open-apis")

# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------
TARGET_CATEGORY = os.getenv("TARGET_CATEGORY", "beauty/skincare")
MIN_CATEGORY_MATCHES = _int_env("MIN_CATEGORY_MATCHES", 3)
MIN_SAMPLE_SIZE = _int_env("MIN_SAMPLE_SIZE", 5)
SELECT_COUNT = _int_env("SELECT_COUNT", 3)
MAX_VIDEOS = _int_env("MAX_VIDEOS", 100)

# ---------------------------------------------------------------------------
# Runtime
# ---------------------------------------------------------------------------
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
PORT = _int_env("PORT", 8080)


def setup_logging(level=None):
    """Configure root logging once for the server and the CLI."""
    logging.basicConfig(
        level=getattr(logging, level or LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

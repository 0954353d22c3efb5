"""
CreatorScout - Analysis Server
================================
FastAPI app fronting the analysis pipeline.

Routes:
  GET  /health               -> liveness
  POST /api/analyze          -> synchronous statistics for a posted video list
  POST /api/queue            -> queue consumer: analyze a creator + write review back
  GET  /api/status/{job_id}  -> progress of a queued analysis
"""

import asyncio
import logging
import uuid
from datetime import datetime

from fastapi import BackgroundTasks, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from . import __version__, config
from .pipeline.analyze import REQUIRED_MESSAGE_KEYS, configured_oracles, process_message, run_analysis
from .pipeline.errors import EmptyInputError, ScoutError
from .pipeline.models import load_records

config.setup_logging()
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------
app = FastAPI(title="CreatorScout", version=__version__)

# In-memory job tracker: job_id -> job dict
jobs = {}


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return {
        "status": "ok",
        "oracle": bool(config.OPENROUTER_API_KEY),
        "jobs": len(jobs),
        "ts": datetime.utcnow().isoformat(),
    }


# ---------------------------------------------------------------------------
# API: Synchronous analysis
# ---------------------------------------------------------------------------
@app.post("/api/analyze")
async def analyze(request: Request):
    body = await request.json()
    if not isinstance(body, dict):
        raise HTTPException(400, "body must be a JSON object")
    records = load_records(body.get("videos") or [])
    classifier, _ = configured_oracles()
    try:
        result = await asyncio.to_thread(run_analysis, records, classifier, body.get("target_category"))
    except EmptyInputError as e:
        raise HTTPException(422, str(e))
    return JSONResponse(result.to_dict())


# ---------------------------------------------------------------------------
# API: Queue consumer
# ---------------------------------------------------------------------------
def run_job(job_id: str, body: dict):
    """Background worker for one queue message."""
    job = jobs[job_id]
    job["status"] = "processing"
    try:
        classifier, summarizer = configured_oracles()
        job["result"] = process_message(body, classifier, summarizer)
        job["status"] = "completed"
    except ScoutError as e:
        logger.error("Job %s failed: %s", job_id, e)
        job["status"] = "failed"
        job["error"] = f"{type(e).__name__}: {e}"
    except Exception as e:
        logger.exception("Job %s crashed", job_id)
        job["status"] = "failed"
        job["error"] = str(e)
    job["completed_at"] = datetime.utcnow().isoformat()


@app.post("/api/queue")
async def consume_queue(request: Request, background_tasks: BackgroundTasks):
    payload = await request.json()
    messages = payload.get("messages") if isinstance(payload, dict) else None
    if not messages or not isinstance(messages, list):
        logger.info("Queue request with no messages")
        return JSONResponse({"success": True, "message": "No messages to process."})

    # One message per request keeps the downstream APIs within rate limits
    message = messages[0] if isinstance(messages[0], dict) else {}
    body = message.get("body") or {}
    logger.info("Processing message %s", message.get("id"))

    # Malformed messages are acknowledged (200) so the queue does not redeliver them
    missing = [k for k in REQUIRED_MESSAGE_KEYS if not body.get(k)] if isinstance(body, dict) else ["body"]
    if missing:
        logger.error("Bad queue message %s: missing %s", message.get("id"), ", ".join(missing))
        return JSONResponse({"success": False, "error": f"Bad Request. Message body missing: {', '.join(missing)}"})

    job_id = uuid.uuid4().hex[:12]
    jobs[job_id] = {
        "id": job_id,
        "message_id": message.get("id"),
        "creator": body.get("creatorHandle"),
        "status": "queued",
        "started_at": datetime.utcnow().isoformat(),
        "completed_at": None,
        "result": None,
        "error": None,
    }
    background_tasks.add_task(run_job, job_id, body)
    return JSONResponse({"success": True, "job_id": job_id})


# ---------------------------------------------------------------------------
# API: Check Status
# ---------------------------------------------------------------------------
@app.get("/api/status/{job_id}")
async def check_status(job_id: str):
    job = jobs.get(job_id)
    if not job:
        raise HTTPException(404, "Job not found")
    return JSONResponse(job)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)

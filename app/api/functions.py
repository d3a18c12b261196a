"""
Serverless-style endpoints consumed by the front end:
email notification dispatch and AI article summaries.
Errors are returned as ``{"error": ...}`` with status 400 or 500.
"""
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from app.services.notifications import (
    send_notification,
    InvalidNotification,
    NotificationDeliveryError,
)
from app.services.summarizer import (
    summarize_article,
    SummaryConfigError,
    SummaryGenerationError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/functions", tags=["functions"])


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


async def read_json(request: Request):
    try:
        return await request.json()
    except ValueError:
        return None


@router.post("/send-notifications")
async def send_notifications(request: Request):
    data = await read_json(request)

    try:
        result = await run_in_threadpool(send_notification, data)
    except InvalidNotification as e:
        return error_response(str(e), 400)
    except NotificationDeliveryError as e:
        logger.error("Error in send-notifications: %s", e)
        return error_response(str(e), 500)
    except Exception:
        logger.exception("Unexpected error in send-notifications")
        return error_response("Internal server error", 500)

    return result


@router.post("/summarize-article")
async def summarize(request: Request):
    data = await read_json(request)
    content = data.get("content") if isinstance(data, dict) else None

    if not content or not isinstance(content, str) or not content.strip():
        return error_response("Content is required", 400)

    try:
        summary = await run_in_threadpool(summarize_article, content)
    except SummaryConfigError as e:
        return error_response(str(e), 500)
    except SummaryGenerationError as e:
        return error_response(str(e), 500)
    except Exception:
        logger.exception("Unexpected error in summarize-article")
        return error_response("Internal server error", 500)

    logger.info("Summary generated successfully")
    return {"summary": summary}

"""Access log for API calls"""
import logging
import time

from fastapi import Request

from smsdesk.core.config import settings

logger = logging.getLogger("api")

_MAX_LINE = 80


async def log_api_requests(request: Request, call_next):
    """Log ``METHOD path status in Nms`` for every request under the API prefix"""
    start = time.perf_counter()
    response = await call_next(request)

    path = request.url.path
    if path.startswith(settings.API_PREFIX):
        duration_ms = int((time.perf_counter() - start) * 1000)
        line = f"{request.method} {path} {response.status_code} in {duration_ms}ms"
        if len(line) > _MAX_LINE:
            line = line[:_MAX_LINE - 1] + "…"
        logger.info(line)

    return response

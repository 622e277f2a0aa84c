"""httpx 요청/응답 구조화 로깅 훅"""
import json
import logging
import time

import httpx

logger = logging.getLogger("appscan_sdk.transport")

# 로그에 원문을 남기면 안 되는 헤더 (소문자)
_SENSITIVE_HEADERS = {"authorization", "asc_xsrf_token", "cookie"}


def mask_headers(headers: httpx.Headers | dict[str, str]) -> dict[str, str]:
    """민감 헤더 값을 *** 로 치환한 사본을 반환한다."""
    masked: dict[str, str] = {}
    for name, value in dict(headers).items():
        masked[name] = "***" if name.lower() in _SENSITIVE_HEADERS else value
    return masked


def log_request(request: httpx.Request) -> None:
    """요청 시작 시각을 기록하고 DEBUG 레벨로 남긴다."""
    request.extensions["appscan_start_time"] = time.monotonic()
    logger.debug(json.dumps({
        "event": "request",
        "method": request.method,
        "url": str(request.url),
        "headers": mask_headers(request.headers),
    }))


def log_response(response: httpx.Response) -> None:
    """모든 응답을 구조화된 JSON으로 로깅한다.

    - 4xx/5xx 응답은 WARNING 레벨로 기록
    - 그 외 응답은 DEBUG 레벨로 기록
    """
    request = response.request
    start_time = request.extensions.get("appscan_start_time")
    duration_ms = (
        round((time.monotonic() - start_time) * 1000, 2) if start_time is not None else None
    )

    log_data = {
        "event": "response",
        "method": request.method,
        "url": str(request.url),
        "status_code": response.status_code,
        "duration_ms": duration_ms,
    }

    if response.status_code >= 400:
        logger.warning(json.dumps(log_data))
    else:
        logger.debug(json.dumps(log_data))


EVENT_HOOKS = {"request": [log_request], "response": [log_response]}

"""로깅 기본 설정"""

import logging

from appscan_sdk.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str | None = None) -> None:
    """SDK를 사용하는 스크립트에서 한 번 호출한다.

    라이브러리 import만으로는 핸들러를 추가하지 않는다.

    Args:
        level: 로그 레벨 (기본: 설정의 LOG_LEVEL)
    """
    logging.basicConfig(
        level=level or get_settings().LOG_LEVEL,
        format=LOG_FORMAT,
    )
    # httpx 자체 요청 로그는 logging_hooks와 중복되므로 낮춘다
    logging.getLogger("httpx").setLevel(logging.WARNING)

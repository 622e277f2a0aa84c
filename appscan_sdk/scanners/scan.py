"""스캔 공통 기반

스캔 상태:
    CREATED → TARGET_RESOLVED → SUBMITTED
                             ↘ COMPLETED (IRX만 생성)
    어느 단계든 실패하면 FAILED
"""

import logging
import os
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Any

from appscan_sdk.config import get_settings
from appscan_sdk.errors import InvalidTargetException, ScannerException
from appscan_sdk.models.scan_properties import ScanProperties
from appscan_sdk.models.scan_type import ScanType
from appscan_sdk.progress import Progress
from appscan_sdk.results.factory import get_results_provider
from appscan_sdk.results.results_provider import ResultsProvider
from appscan_sdk.services.scan_service_provider import ScanServiceProvider

logger = logging.getLogger(__name__)


class ScanState(Enum):
    CREATED = "created"
    TARGET_RESOLVED = "target_resolved"
    SUBMITTED = "submitted"
    COMPLETED = "completed"
    FAILED = "failed"


class Scan(ABC):
    """스캔 작업 하나. 엔진별 하위 클래스가 run()을 구현한다."""

    #: 백엔드에 제출할 때 쓰는 엔진
    engine_type: ScanType

    def __init__(
        self,
        properties: ScanProperties | dict[str, Any],
        progress: Progress,
        provider: ScanServiceProvider | None,
    ) -> None:
        """초기화.

        Args:
            properties: 스캔 설정 (dict면 ScanProperties로 변환)
            progress: 진행 메시지 싱크
            provider: 서비스 제공자 (IRX만 생성할 때는 None)
        """
        if not isinstance(properties, ScanProperties):
            properties = ScanProperties.from_params(properties)
        self._properties = properties
        self._progress = progress
        self._provider = provider
        self._scan_id: str | None = None
        self._results_provider: ResultsProvider | None = None
        self.state = ScanState.CREATED

    # ---- 속성 ----

    @property
    def properties(self) -> ScanProperties:
        return self._properties

    @property
    def progress(self) -> Progress:
        return self._progress

    @property
    def service_provider(self) -> ScanServiceProvider | None:
        return self._provider

    @property
    def target(self) -> str | None:
        return self._properties.target

    @target.setter
    def target(self, target: str | None) -> None:
        self._properties.target = target

    @property
    def scan_id(self) -> str | None:
        return self._scan_id

    @scan_id.setter
    def scan_id(self, scan_id: str) -> None:
        if self._scan_id is not None:
            raise RuntimeError(f"스캔 ID가 이미 할당되었습니다: {self._scan_id}")
        self._scan_id = scan_id

    @property
    def scan_type(self) -> ScanType:
        """결과 제공자에 보고되는 유형"""
        return self.engine_type

    def get_type(self) -> str:
        return self.scan_type.value

    @property
    def report_format(self) -> str:
        return self._properties.report_format or get_settings().DEFAULT_REPORT_FORMAT

    # ---- 실행 ----

    @abstractmethod
    def run(self) -> None:
        """스캔을 실행한다.

        Raises:
            InvalidTargetException: 대상이 없거나 유효하지 않은 경우 (네트워크 호출 없음)
            ScannerException: 업로드/생성/실행 실패
        """

    def _resolve_target(self) -> Path:
        target = self._properties.target
        if not target or not Path(target).exists() or not os.access(target, os.R_OK):
            self.state = ScanState.FAILED
            raise InvalidTargetException(target)
        self.state = ScanState.TARGET_RESOLVED
        return Path(target).resolve()

    def _require_provider(self) -> ScanServiceProvider:
        if self._provider is None:
            self.state = ScanState.FAILED
            raise ScannerException("서비스 제공자 없이 스캔을 제출할 수 없습니다")
        return self._provider

    def _fail(self, message: str) -> None:
        """FAILED로 전이하고 서비스 제공자의 마지막 에러를 담아 예외를 던진다."""
        self.state = ScanState.FAILED
        detail = self._provider.last_error_message if self._provider is not None else None
        logger.warning(f"[{type(self).__name__}] {message} (detail={detail})")
        raise ScannerException(message, detail)

    def _submit(self) -> None:
        """현재 설정으로 스캔을 생성/실행하고 ID를 기록한다."""
        provider = self._require_provider()
        scan_id = provider.create_and_execute_scan(
            self.engine_type.short_form, self._properties.to_params()
        )
        if scan_id is None:
            self._fail(f"{self.engine_type.short_form} 스캔 제출에 실패했습니다")
        self.scan_id = scan_id
        self.state = ScanState.SUBMITTED
        logger.info(f"[{type(self).__name__}] 스캔 제출 완료: scan_id={scan_id}")

    # ---- 결과 ----

    def get_results_provider(self) -> ResultsProvider | None:
        """제출된 스캔의 결과 제공자. 제출 전이면 None."""
        if self._results_provider is None and self._scan_id is not None and self._provider is not None:
            self._results_provider = get_results_provider(
                self._scan_id,
                self.engine_type,
                self._provider,
                self._progress,
                self.report_format,
            )
        return self._results_provider

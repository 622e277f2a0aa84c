"""결과 제공자 인터페이스 및 단일 엔진 공통 상태 머신

단일 엔진 결과 제공자의 상태 전이:

    UNPOLLED ──poll──▶ NON_TERMINAL ──poll──▶ TERMINAL_{READY,FAILED,UNSTABLE}

- 종료 상태는 되돌아가지 않는다.
- TERMINAL_FAILED 이후에는 백엔드를 더 이상 조회하지 않는다.
- 건수는 처음 Ready를 관측했을 때 한 번만 적재한다.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Any

from appscan_sdk.config import get_settings
from appscan_sdk.models.finding_counts import FindingCounts
from appscan_sdk.models.scan_type import ScanType
from appscan_sdk.models.status import Status
from appscan_sdk.progress import ERROR, INFO, Message, Progress
from appscan_sdk.services.scan_service_provider import ScanServiceProvider

logger = logging.getLogger(__name__)


class ResultsState(Enum):
    UNPOLLED = "unpolled"
    NON_TERMINAL = "non_terminal"
    TERMINAL_FAILED = "terminal_failed"
    TERMINAL_READY = "terminal_ready"
    TERMINAL_UNSTABLE = "terminal_unstable"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STATUS


_TERMINAL_STATUS = {
    ResultsState.TERMINAL_FAILED: Status.FAILED,
    ResultsState.TERMINAL_READY: Status.READY,
    ResultsState.TERMINAL_UNSTABLE: Status.UNSTABLE,
}

_STATUS_TO_TERMINAL = {status: state for state, status in _TERMINAL_STATUS.items()}


def next_state(current: ResultsState, observed: Status) -> ResultsState:
    """관측한 상태로 다음 상태를 계산한다 (순수 함수).

    이미 종료 상태면 관측값과 무관하게 그대로 유지한다.
    """
    if current.is_terminal:
        return current
    return _STATUS_TO_TERMINAL.get(observed, ResultsState.NON_TERMINAL)


class ResultsProvider(ABC):
    """스캔 결과 조회 인터페이스."""

    @abstractmethod
    def has_results(self) -> bool:
        """건수가 적재되었는지 여부"""

    @abstractmethod
    def get_status(self) -> Status:
        """현재 상태. 호출할 때마다 필요하면 백엔드를 조회한다."""

    @abstractmethod
    def get_findings(self) -> list[dict[str, Any]] | None:
        """원본 취약점 목록 (상세 내용은 보고서 파일로 받는다)"""

    @abstractmethod
    def get_findings_count(self) -> int: ...

    @abstractmethod
    def get_critical_count(self) -> int: ...

    @abstractmethod
    def get_high_count(self) -> int: ...

    @abstractmethod
    def get_medium_count(self) -> int: ...

    @abstractmethod
    def get_low_count(self) -> int: ...

    @abstractmethod
    def get_info_count(self) -> int: ...

    @abstractmethod
    def get_type(self) -> str:
        """엔진 표시 이름 (결합 결과는 "_"로 연결)"""

    @abstractmethod
    def get_results_file(self, destination: Path, fmt: str | None = None) -> bool:
        """보고서를 destination에 저장한다. 실패는 진행 메시지로 남기고 False."""

    @abstractmethod
    def get_message(self) -> str | None:
        """사용자에게 보여줄 마지막 상태 메시지"""

    @property
    @abstractmethod
    def report_format(self) -> str: ...

    @report_format.setter
    @abstractmethod
    def report_format(self, fmt: str) -> None: ...

    @abstractmethod
    def set_progress(self, progress: Progress) -> None: ...


class BaseResultsProvider(ResultsProvider):
    """단일 엔진 결과 제공자 공통 구현.

    하위 클래스는 _poll()만 구현한다.
    """

    def __init__(
        self,
        scan_id: str,
        scan_type: ScanType | str,
        provider: ScanServiceProvider,
        progress: Progress,
    ) -> None:
        self._scan_id = scan_id
        self._scan_type = scan_type
        self._provider = provider
        self._progress = progress
        self._state = ResultsState.UNPOLLED
        self._status: Status | None = None
        self._counts: FindingCounts | None = None
        self._message: str | None = None
        self._report_format = get_settings().DEFAULT_REPORT_FORMAT

    @property
    def scan_id(self) -> str:
        return self._scan_id

    @property
    def state(self) -> ResultsState:
        return self._state

    # ---- 상태 ----

    def get_status(self) -> Status:
        if self._state is not ResultsState.TERMINAL_FAILED:
            observed = self._poll()
            self._state = next_state(self._state, observed)
            self._status = _TERMINAL_STATUS.get(self._state, observed)
        return self._status

    @abstractmethod
    def _poll(self) -> Status:
        """백엔드를 한 번 조회해 관측 상태를 반환한다.

        Ready를 처음 관측하면 건수를 적재해야 한다.
        """

    def _set_counts(self, counts: FindingCounts) -> None:
        if self._counts is None:
            self._counts = counts

    def _report_info(self, text: str) -> None:
        self._progress.set_status(Message(INFO, text))

    def _report_error(self, text: str, error: BaseException | None = None) -> None:
        logger.warning(f"[{type(self).__name__}] {text}")
        self._progress.set_status(Message(ERROR, text), error)

    # ---- 결과 ----

    def has_results(self) -> bool:
        return self._counts is not None

    def get_findings(self) -> list[dict[str, Any]] | None:
        return None

    def _count(self, name: str) -> int:
        return getattr(self._counts, name) if self._counts is not None else 0

    def get_findings_count(self) -> int:
        return self._count("total")

    def get_critical_count(self) -> int:
        return self._count("critical")

    def get_high_count(self) -> int:
        return self._count("high")

    def get_medium_count(self) -> int:
        return self._count("medium")

    def get_low_count(self) -> int:
        return self._count("low")

    def get_info_count(self) -> int:
        return self._count("info")

    def get_type(self) -> str:
        return self._scan_type.value if isinstance(self._scan_type, ScanType) else str(self._scan_type)

    def get_message(self) -> str | None:
        return self._message

    @property
    def report_format(self) -> str:
        return self._report_format

    @report_format.setter
    def report_format(self, fmt: str) -> None:
        self._report_format = fmt

    def set_progress(self, progress: Progress) -> None:
        self._progress = progress
        self._provider.progress = progress

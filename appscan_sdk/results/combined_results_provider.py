"""두 엔진 결과를 하나로 합치는 결합 결과 제공자

상태 결합 규칙 (s1, s2 = 각 자식 상태):

    둘 다 Failed                          → Failed
    하나라도 Ready 이고 하나라도 Failed    → Unstable
    둘 다 Ready                           → Ready
    그 외                                 → Running

Failed로 확정된 자식은 다시 조회하지 않는다.
"""

from pathlib import Path
from typing import Any

from appscan_sdk.config import get_settings
from appscan_sdk.models.status import Status
from appscan_sdk.progress import Progress
from appscan_sdk.results.results_provider import ResultsProvider
from appscan_sdk.services.service_util import scan_type_short_form


def combine_status(status1: Status, status2: Status) -> Status:
    """두 자식 상태를 결합한다."""
    if status1 is Status.FAILED and status2 is Status.FAILED:
        return Status.FAILED
    if Status.READY in (status1, status2) and Status.FAILED in (status1, status2):
        return Status.UNSTABLE
    if status1 is Status.READY and status2 is Status.READY:
        return Status.READY
    return Status.RUNNING


class CombinedResultsProvider(ResultsProvider):
    """두 자식 결과 제공자를 합성한다. 원본 취약점 목록은 다루지 않는다."""

    def __init__(self, provider1: ResultsProvider, provider2: ResultsProvider) -> None:
        self._provider1 = provider1
        self._provider2 = provider2
        self._status1: Status | None = None
        self._status2: Status | None = None
        self._report_format = get_settings().DEFAULT_REPORT_FORMAT

    @property
    def providers(self) -> tuple[ResultsProvider, ResultsProvider]:
        return self._provider1, self._provider2

    def has_results(self) -> bool:
        return self._provider1.has_results() or self._provider2.has_results()

    def get_status(self) -> Status:
        if self._status1 is not Status.FAILED:
            self._status1 = self._provider1.get_status()
        if self._status2 is not Status.FAILED:
            self._status2 = self._provider2.get_status()
        return combine_status(self._status1, self._status2)

    def get_findings(self) -> list[dict[str, Any]] | None:
        return None

    def get_findings_count(self) -> int:
        return self._provider1.get_findings_count() + self._provider2.get_findings_count()

    def get_critical_count(self) -> int:
        return self._provider1.get_critical_count() + self._provider2.get_critical_count()

    def get_high_count(self) -> int:
        return self._provider1.get_high_count() + self._provider2.get_high_count()

    def get_medium_count(self) -> int:
        return self._provider1.get_medium_count() + self._provider2.get_medium_count()

    def get_low_count(self) -> int:
        return self._provider1.get_low_count() + self._provider2.get_low_count()

    def get_info_count(self) -> int:
        return self._provider1.get_info_count() + self._provider2.get_info_count()

    def get_type(self) -> str:
        return f"{self._provider1.get_type()}_{self._provider2.get_type()}"

    def get_results_file(self, destination: Path, fmt: str | None = None) -> bool:
        """자식별로 <엔진 약칭>_<파일명> 보고서를 destination 옆에 저장한다.

        Returns:
            두 보고서 모두 저장했으면 True
        """
        saved = []
        for provider in (self._provider1, self._provider2):
            prefix = scan_type_short_form(provider.get_type()).upper()
            saved.append(
                provider.get_results_file(destination.with_name(f"{prefix}_{destination.name}"), fmt)
            )
        return all(saved)

    def get_message(self) -> str | None:
        message1 = self._provider1.get_message()
        message2 = self._provider2.get_message()
        if message1 and message2:
            return (
                f"{self._provider1.get_type()}: {message1}\n"
                f"{self._provider2.get_type()}: {message2}"
            )
        if message1:
            return f"{self._provider1.get_type()}: {message1}"
        if message2:
            return f"{self._provider2.get_type()}: {message2}"
        return None

    @property
    def report_format(self) -> str:
        return self._report_format

    @report_format.setter
    def report_format(self, fmt: str) -> None:
        self._report_format = fmt
        self._provider1.report_format = fmt
        self._provider2.report_format = fmt

    def set_progress(self, progress: Progress) -> None:
        self._provider1.set_progress(progress)
        self._provider2.set_progress(progress)

"""리소스형(클라우드) 단일 엔진 결과 제공자

상태는 스캔 상세의 LatestExecution.Status에서,
건수는 비준수 이슈 집계 API에서 가져온다.
"""

import logging
import time
from pathlib import Path

from appscan_sdk.config import get_settings
from appscan_sdk.constants import KEY, LATEST_EXECUTION, STATUS, UNAUTHORIZED_ACTION, USER_MESSAGE
from appscan_sdk.models.finding_counts import FindingCounts
from appscan_sdk.models.status import Status
from appscan_sdk.results.results_provider import BaseResultsProvider

logger = logging.getLogger(__name__)

# 아직 진행 중인 실행 상태 (메시지를 비운다)
_IN_PROGRESS = (Status.IN_QUEUE, Status.RUNNING, Status.PAUSING)


class CloudResultsProvider(BaseResultsProvider):
    """비준수 이슈 건수 기반 클라우드 결과 제공자."""

    def _poll(self) -> Status:
        details = self._provider.get_scan_details(self._scan_id)
        if details is None or details.get(KEY) == UNAUTHORIZED_ACTION:
            return Status.FAILED
        if LATEST_EXECUTION not in details:
            # 통신 오류 센티널 {"Status": "Unknown"} 또는 아직 실행 정보가 없는 문서
            return Status.parse(details.get(STATUS))

        execution = details.get(LATEST_EXECUTION) or {}
        status = Status.parse(execution.get(STATUS))

        if status is Status.FAILED:
            user_message = execution.get(USER_MESSAGE)
            if user_message:
                self._report_error(user_message)
                self._message = user_message
        elif status is Status.PAUSED:
            self._message = f"사용자에 의해 스캔이 일시 중지되었습니다 (Scan Id: {self._scan_id})"
            self._report_info(self._message)
        elif status in _IN_PROGRESS:
            self._message = ""
        elif status is Status.READY:
            self._message = ""
            if not self.has_results() and not self._load_counts():
                return Status.FAILED
        return status

    def _load_counts(self) -> bool:
        items = self._provider.get_non_compliant_issues(self._scan_id)
        if items is None:
            logger.warning(f"[CloudResultsProvider] 이슈 건수 조회 실패: scan={self._scan_id}")
            return False
        try:
            counts = FindingCounts.from_severity_items(items)
        except (KeyError, TypeError, ValueError) as e:
            self._report_error(f"스캔 결과를 해석하지 못했습니다: {e}", e)
            return False
        self._set_counts(counts)
        logger.info(
            f"[CloudResultsProvider] 결과 적재: scan={self._scan_id}, total={counts.total}"
        )
        return True

    def get_results_file(self, destination: Path, fmt: str | None = None) -> bool:
        """보고서 생성 요청 → Ready 대기 → 다운로드.

        대기 간격과 최대 대기 시간은 REPORT_POLL_INTERVAL_SECONDS / REPORT_MAX_WAIT_SECONDS.
        """
        fmt = fmt or self._report_format
        if self._status is None:
            self.get_status()
        if self._status is not Status.READY:
            self._report_error(f"스캔이 완료되지 않아 보고서를 받을 수 없습니다 (Scan Id: {self._scan_id})")
            return False

        report_id = self._provider.create_report(self._scan_id, fmt, name=destination.stem)
        if report_id is None:
            return False

        settings = get_settings()
        deadline = time.monotonic() + settings.REPORT_MAX_WAIT_SECONDS
        while True:
            raw_status = self._provider.get_report_status(report_id)
            if raw_status is None:
                self._report_error(f"보고서 상태를 확인하지 못했습니다 (Report Id: {report_id})")
                return False
            report_status = Status.parse(raw_status)
            if report_status is Status.READY:
                break
            if report_status is Status.FAILED:
                self._report_error(f"보고서 생성에 실패했습니다 (Report Id: {report_id})")
                return False
            if time.monotonic() >= deadline:
                self._report_error(f"보고서 생성 대기 시간을 초과했습니다 (Report Id: {report_id})")
                return False
            time.sleep(settings.REPORT_POLL_INTERVAL_SECONDS)

        return self._provider.download_report(report_id, destination)

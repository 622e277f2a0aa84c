"""작업형(ASE) 결과 제공자

작업 상태 대신 보고서 팩의 Security Issues 건수로 완료 여부를 판단한다.
보고서 팩이 아직 없으면 실행 중, 조회 자체가 불가능하면(로그인 만료, 잘못된 작업 ID) 실패로 본다.
"""

from pathlib import Path

from appscan_sdk.constants import STATUS
from appscan_sdk.models.finding_counts import FindingCounts
from appscan_sdk.models.status import Status
from appscan_sdk.results.results_provider import BaseResultsProvider

# N*Issues 키 → FindingCounts 필드
_COUNT_KEYS = {
    "NCriticalIssues": "critical",
    "NHighIssues": "high",
    "NMediumIssues": "medium",
    "NLowIssues": "low",
    "NInfoIssues": "info",
    "NIssuesFound": "total",
}


class ASEResultsProvider(BaseResultsProvider):
    """보고서 팩 건수 기반 결과 제공자."""

    def _poll(self) -> Status:
        details = self._provider.get_scan_details(self._scan_id)
        if details is None:
            return Status.FAILED
        if "NIssuesFound" not in details:
            return Status.parse(details.get(STATUS))

        if not self.has_results():
            try:
                counts = FindingCounts(**{
                    field: int(details.get(key, 0)) for key, field in _COUNT_KEYS.items()
                })
            except (TypeError, ValueError) as e:
                self._report_error(f"스캔 결과를 해석하지 못했습니다: {e}", e)
                return Status.FAILED
            self._set_counts(counts)
        self._message = ""
        return Status.READY

    def get_results_file(self, destination: Path, fmt: str | None = None) -> bool:
        self._report_error("작업형 서버에서는 보고서 파일 다운로드를 지원하지 않습니다. 서버 UI에서 보고서를 받으세요.")
        return False

"""동적 분석(DAST) 스캔

대상은 http(s) URL이다. 업로드 없이 설정을 그대로 제출하며
리소스형/작업형 어느 서비스 제공자로도 동작한다.
"""

from urllib.parse import urlparse

from appscan_sdk.errors import InvalidTargetException
from appscan_sdk.models.scan_type import ScanType
from appscan_sdk.scanners.scan import Scan, ScanState


class DASTScan(Scan):
    engine_type = ScanType.DYNAMIC_ANALYZER

    def run(self) -> None:
        target = self._properties.target or self._properties.starting_url
        parsed = urlparse(target or "")
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            self.state = ScanState.FAILED
            raise InvalidTargetException(target)
        self.state = ScanState.TARGET_RESOLVED

        if not self._properties.starting_url:
            self._properties.starting_url = target
        self._submit()

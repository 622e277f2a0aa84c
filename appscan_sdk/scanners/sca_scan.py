"""소프트웨어 구성 분석(SCA) 스캔 — 제출 흐름은 SAST와 같고 엔진만 다르다."""

from appscan_sdk.models.scan_type import ScanType
from appscan_sdk.scanners.sast_scan import SASTScan


class SCAScan(SASTScan):
    engine_type = ScanType.SOFTWARE_COMPOSITION_ANALYZER

"""도메인 모델 패키지 — 자주 쓰는 모델 일괄 import"""

from appscan_sdk.models.ase_scan_type import ASEScanType
from appscan_sdk.models.finding_counts import FindingCounts
from appscan_sdk.models.scan_properties import ScanProperties
from appscan_sdk.models.scan_type import ScanType
from appscan_sdk.models.status import Status

__all__ = [
    "ASEScanType",
    "FindingCounts",
    "ScanProperties",
    "ScanType",
    "Status",
]

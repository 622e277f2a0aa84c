"""스캔 팩토리

스캔 엔진 유형에 따라 서비스 제공자와 스캔 변형을 함께 만든다.
"""

from typing import Any

from appscan_sdk.auth.auth_provider import AuthenticationProvider
from appscan_sdk.models.scan_properties import ScanProperties
from appscan_sdk.models.scan_type import ScanType
from appscan_sdk.progress import Progress
from appscan_sdk.scanners.scan import Scan
from appscan_sdk.services.provider_factory import get_scan_service_provider
from appscan_sdk.transport.client import HttpClient


def get_scan(
    scan_type: ScanType | str,
    properties: ScanProperties | dict[str, Any],
    progress: Progress,
    auth_provider: AuthenticationProvider,
    http_client: HttpClient | None = None,
) -> Scan:
    """엔진 유형에 맞는 스캔 인스턴스를 반환한다.

    Args:
        scan_type: ScanType 또는 표시 이름 / 약칭 ("Sast", "Sca", "Dast")
        properties: 스캔 설정
        progress: 진행 메시지 싱크
        auth_provider: 인증 제공자 (방언은 인증 제공자 유형으로 판단)
        http_client: 공유할 HTTP 클라이언트 (선택)

    Returns:
        제출 전 상태의 Scan

    Raises:
        ValueError: 지원하지 않는 스캔 유형인 경우
    """
    resolved = scan_type if isinstance(scan_type, ScanType) else ScanType.from_value(scan_type)

    match resolved:
        case ScanType.STATIC_ANALYZER:
            from appscan_sdk.scanners.sast_scan import SASTScan as scan_class
        case ScanType.SOFTWARE_COMPOSITION_ANALYZER:
            from appscan_sdk.scanners.sca_scan import SCAScan as scan_class
        case ScanType.COMBINED_STATIC_COMPOSITION:
            from appscan_sdk.scanners.sast_sca_scan import SASTSCAScan as scan_class
        case ScanType.DYNAMIC_ANALYZER:
            from appscan_sdk.scanners.dast_scan import DASTScan as scan_class
        case _:
            raise ValueError(f"지원하지 않는 스캔 유형: {scan_type}")

    provider = get_scan_service_provider(auth_provider, progress, http_client=http_client)
    return scan_class(properties, progress, provider)

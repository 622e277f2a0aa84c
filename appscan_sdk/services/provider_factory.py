"""스캔 서비스 제공자 팩토리

백엔드 방언(cloud / ase)에 따라 적절한 ScanServiceProvider 구현체를 반환한다.
"""

from appscan_sdk.auth.auth_provider import ASEAuthenticationProvider, AuthenticationProvider
from appscan_sdk.progress import Progress
from appscan_sdk.services.scan_service_provider import ScanServiceProvider
from appscan_sdk.transport.client import HttpClient


def get_scan_service_provider(
    auth_provider: AuthenticationProvider,
    progress: Progress,
    dialect: str | None = None,
    http_client: HttpClient | None = None,
) -> ScanServiceProvider:
    """방언에 맞는 서비스 제공자 인스턴스를 반환한다.

    Args:
        auth_provider: 인증 제공자
        progress: 진행 메시지 싱크
        dialect: "cloud" 또는 "ase" (생략 시 인증 제공자 유형으로 판단)
        http_client: 공유할 HTTP 클라이언트 (선택)

    Returns:
        방언에 맞는 ScanServiceProvider 구현체

    Raises:
        ValueError: 지원하지 않는 방언인 경우
    """
    if dialect is None:
        dialect = "ase" if isinstance(auth_provider, ASEAuthenticationProvider) else "cloud"

    match dialect.lower():
        case "cloud":
            from appscan_sdk.services.cloud_scan_service import CloudScanServiceProvider
            return CloudScanServiceProvider(progress, auth_provider, http_client)
        case "ase":
            from appscan_sdk.services.ase_scan_service import ASEScanServiceProvider
            return ASEScanServiceProvider(progress, auth_provider, http_client)
        case _:
            raise ValueError(f"지원하지 않는 백엔드 방언: {dialect}")

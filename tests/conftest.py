"""pytest 공통 픽스처 — 서비스 제공자/결과 제공자/스캔 테스트

실제 네트워크 호출 없이 HttpClient를 Mock으로 대체한다.
"""

from unittest.mock import MagicMock, patch

import pytest

# 테스트용 환경변수를 미리 패치하여 로컬 .env / 실제 서버 설정 영향 차단
TEST_ENV = {
    "APPSCAN_SERVER_URL": "https://scan.example.com",
    "APPSCAN_ACCEPT_INVALID_CERTS": "false",
    "REPORT_POLL_INTERVAL_SECONDS": "0",
    "REPORT_MAX_WAIT_SECONDS": "5",
    "DEFAULT_REPORT_FORMAT": "html",
    "LOG_LEVEL": "DEBUG",
}

CLOUD_SERVER = "https://scan.example.com"
ASE_SERVER = "https://ase.example.com/ase"


@pytest.fixture(autouse=True, scope="session")
def patch_settings_env():
    """테스트 세션 전체에 환경변수를 패치한다."""
    with patch.dict("os.environ", TEST_ENV):
        from appscan_sdk.config import get_settings
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()


@pytest.fixture
def make_response():
    """HttpResponse Mock 생성 헬퍼를 반환한다.

    사용: make_response(200, {"Id": "42"}, headers={"ETag": "abc"})
    """
    from appscan_sdk.transport.client import HttpResponse

    def _make(status_code: int, json_body=None, headers: dict | None = None) -> MagicMock:
        response = MagicMock(spec=HttpResponse)
        response.status_code = status_code
        response.is_success = 200 <= status_code < 300
        response.headers = headers or {}
        response.json.return_value = json_body
        response.text = "" if json_body is None else str(json_body)
        return response

    return _make


@pytest.fixture
def http_client():
    """HttpClient Mock. 호출 횟수/인자 검증에 사용한다."""
    from appscan_sdk.transport.client import HttpClient

    return MagicMock(spec=HttpClient)


@pytest.fixture
def progress():
    """받은 진행 메시지를 보관하는 싱크."""
    from appscan_sdk.progress import RecordingProgress

    return RecordingProgress()


@pytest.fixture
def cloud_auth():
    """만료되지 않은 Bearer 토큰 인증 제공자."""
    from appscan_sdk.auth.auth_provider import TokenAuthenticationProvider

    return TokenAuthenticationProvider("test-token", server=CLOUD_SERVER)


@pytest.fixture
def ase_auth():
    """만료되지 않은 ASE 세션 인증 제공자."""
    from appscan_sdk.auth.auth_provider import ASEAuthenticationProvider

    return ASEAuthenticationProvider("test-session", "test-xsrf", server=ASE_SERVER)


@pytest.fixture
def cloud_provider(progress, cloud_auth, http_client):
    from appscan_sdk.services.cloud_scan_service import CloudScanServiceProvider

    return CloudScanServiceProvider(progress, cloud_auth, http_client)


@pytest.fixture
def ase_provider(progress, ase_auth, http_client):
    from appscan_sdk.services.ase_scan_service import ASEScanServiceProvider

    return ASEScanServiceProvider(progress, ase_auth, http_client)

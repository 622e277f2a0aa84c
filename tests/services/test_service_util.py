"""서비스 유틸리티 / 서비스 제공자 팩토리 단위 테스트"""

from datetime import datetime, timedelta, timezone

import httpx
import pytest

from appscan_sdk.auth.auth_provider import TokenAuthenticationProvider
from appscan_sdk.models import ScanType
from appscan_sdk.services.ase_scan_service import ASEScanServiceProvider
from appscan_sdk.services.cloud_scan_service import CloudScanServiceProvider
from appscan_sdk.services.provider_factory import get_scan_service_provider
from appscan_sdk.services.service_util import (
    compare_versions,
    get_service_version,
    has_dast_entitlement,
    has_entitlement,
    has_sast_entitlement,
    has_sca_entitlement,
    is_valid_domain,
    is_valid_scan_id,
    is_valid_url,
    scan_type_short_form,
    updated_scan_type,
)

CLOUD_SERVER = "https://scan.example.com"


@pytest.fixture
def expired_auth():
    return TokenAuthenticationProvider(
        "old-token",
        server=CLOUD_SERVER,
        expires_at=datetime.now(timezone.utc) - timedelta(minutes=5),
    )


# ──────────────────────────────────────────────────────────────
# 권한(entitlement)
# ──────────────────────────────────────────────────────────────

def test_entitlement_from_active_technologies(cloud_auth, http_client, make_response):
    """ActiveTechnologies 문자열에 기술 이름이 있으면 True.

    Given: 테넌트 정보 ActiveTechnologies = "StaticAnalyzer,DynamicAnalyzer"
    When: 엔진별 권한 확인
    Then: SAST/DAST는 True, SCA는 False
    """
    # Arrange
    http_client.get.return_value = make_response(
        200, {"ActiveTechnologies": "StaticAnalyzer,DynamicAnalyzer"}
    )

    # Act / Assert
    assert has_sast_entitlement(cloud_auth, http_client) is True
    assert has_dast_entitlement(cloud_auth, http_client) is True
    assert has_sca_entitlement(cloud_auth, http_client) is False
    assert http_client.get.call_args.args[0] == f"{CLOUD_SERVER}/api/v4/Account/TenantInfo"


def test_entitlement_true_when_token_expired(expired_auth, http_client):
    """만료된 자격증명이면 확인하지 않고 True."""
    assert has_entitlement(ScanType.STATIC_ANALYZER, expired_auth, http_client) is True
    http_client.get.assert_not_called()


def test_entitlement_false_on_error_response(cloud_auth, http_client, make_response):
    http_client.get.return_value = make_response(500, {"Message": "boom"})

    assert has_sca_entitlement(cloud_auth, http_client) is False


def test_entitlement_false_on_transport_error(cloud_auth, http_client):
    http_client.get.side_effect = httpx.ConnectError("refused")

    assert has_sca_entitlement(cloud_auth, http_client) is False


# ──────────────────────────────────────────────────────────────
# 스캔 유형 이름
# ──────────────────────────────────────────────────────────────

@pytest.mark.parametrize("name, short", [
    ("Static Analyzer", "Sast"),
    ("Software Composition Analyzer", "Sca"),
    ("DynamicAnalyzer", "Dast"),
    ("Mobile Analyzer", "Mobile Analyzer"),
])
def test_scan_type_short_form(name, short):
    assert scan_type_short_form(name) == short


def test_updated_scan_type():
    assert updated_scan_type("Sca") == "SoftwareCompositionAnalyzer"
    assert updated_scan_type("Something") == "Something"


# ──────────────────────────────────────────────────────────────
# 입력 검증
# ──────────────────────────────────────────────────────────────

def test_is_valid_url(cloud_auth, http_client, make_response):
    http_client.post.return_value = make_response(200, {"IsValid": True})

    assert is_valid_url("https://app.example.com", cloud_auth, http_client) is True
    assert http_client.post.call_args.kwargs["body"] == {"Url": "https://app.example.com"}


def test_is_valid_url_false_when_expired(expired_auth, http_client):
    assert is_valid_url("https://app.example.com", expired_auth, http_client) is False
    http_client.post.assert_not_called()


def test_is_valid_scan_id(cloud_auth, http_client, make_response):
    http_client.get.return_value = make_response(
        200, {"Items": [{"AppId": "APP-1", "Technology": "StaticAnalyzer"}]}
    )

    assert is_valid_scan_id("42", "app-1", "Static Analyzer", cloud_auth, http_client) is True
    assert is_valid_scan_id("42", "app-1", "Sca", cloud_auth, http_client) is False


def test_is_valid_scan_id_empty_items(cloud_auth, http_client, make_response):
    http_client.get.return_value = make_response(200, {"Items": []})

    assert is_valid_scan_id("42", "app-1", "Sast", cloud_auth, http_client) is False


def test_is_valid_scan_id_true_when_expired(expired_auth, http_client):
    """만료된 자격증명이면 확인하지 않고 True."""
    assert is_valid_scan_id("42", "app-1", "Sast", expired_auth, http_client) is True
    http_client.get.assert_not_called()


def test_is_valid_domain(cloud_auth, http_client, make_response):
    """응답 본문의 true / false 문자열로 판단한다.

    Given: IsValidDomain 200 "true"
    When: is_valid_domain(url, app_id) 호출
    Then: True, 본문에 AppId와 시작 URL, JSON Content-Type
    """
    # Arrange
    response = make_response(200)
    response.text = "true\n"
    http_client.post.return_value = response

    # Act
    valid = is_valid_domain("https://app.example.com", "app-1", cloud_auth, http_client)

    # Assert
    assert valid is True
    call = http_client.post.call_args
    assert call.args[0] == f"{CLOUD_SERVER}/api/v4/Scans/IsValidDomain"
    assert call.kwargs["body"] == {"AppId": "app-1", "StartingUrl": "https://app.example.com"}
    assert call.kwargs["headers"]["Content-Type"] == "application/json"


@pytest.mark.parametrize("status_code, text", [(200, "false"), (200, ""), (500, "true")])
def test_is_valid_domain_false(status_code, text, cloud_auth, http_client, make_response):
    response = make_response(status_code)
    response.text = text
    http_client.post.return_value = response

    assert is_valid_domain("https://app.example.com", "app-1", cloud_auth, http_client) is False


def test_is_valid_domain_transport_error(cloud_auth, http_client):
    http_client.post.side_effect = httpx.ConnectError("refused")

    assert is_valid_domain("https://app.example.com", "app-1", cloud_auth, http_client) is False


# ──────────────────────────────────────────────────────────────
# 서비스 버전
# ──────────────────────────────────────────────────────────────

def test_service_version(cloud_auth, http_client, make_response):
    http_client.get.return_value = make_response(200, {"MainVersion": "8.12.1"})

    assert get_service_version(cloud_auth, http_client) == "8.12.1"


def test_service_version_zero_on_failure(cloud_auth, http_client):
    http_client.get.side_effect = httpx.ReadTimeout("slow")

    assert get_service_version(cloud_auth, http_client) == "0"


@pytest.mark.parametrize("base, other, expected", [
    ("8.0", "8.0", False),
    ("8.0", "8.1", True),
    ("8.1", "8.0.9", False),
    ("8", "8.0.0", False),
    ("8", "8.0.1", True),
    ("1.9", "1.10", True),
    ("1.10", "1.9", False),
    ("1.2", "1.x", False),
    ("1.x", "2.0", False),
    (None, "1.0", True),
    ("", "1.0", True),
    ("1.0", None, False),
])
def test_compare_versions(base, other, expected):
    assert compare_versions(base, other) is expected


# ──────────────────────────────────────────────────────────────
# 서비스 제공자 팩토리
# ──────────────────────────────────────────────────────────────

def test_factory_infers_dialect_from_auth(cloud_auth, ase_auth, progress, http_client):
    assert isinstance(get_scan_service_provider(cloud_auth, progress, http_client=http_client),
                      CloudScanServiceProvider)
    assert isinstance(get_scan_service_provider(ase_auth, progress, http_client=http_client),
                      ASEScanServiceProvider)


def test_factory_explicit_dialect(cloud_auth, progress, http_client):
    provider = get_scan_service_provider(cloud_auth, progress, dialect="ASE", http_client=http_client)

    assert provider.dialect == "ase"


def test_factory_rejects_unknown_dialect(cloud_auth, progress):
    with pytest.raises(ValueError):
        get_scan_service_provider(cloud_auth, progress, dialect="mainframe")


def test_factory_builds_http_client_when_missing(cloud_auth, progress):
    provider = get_scan_service_provider(cloud_auth, progress)

    assert provider.server == CLOUD_SERVER
    assert provider.authentication_provider is cloud_auth

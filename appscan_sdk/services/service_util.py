"""서비스 공용 유틸리티 — 권한(entitlement), 스캔 유형 이름, 입력 검증

리소스형(클라우드) API 전용이다.
"""

import logging
from typing import Any

import httpx

from appscan_sdk.auth.auth_provider import AuthenticationProvider
from appscan_sdk.constants import (
    ACTIVE_TECHNOLOGIES,
    APP_ID,
    API_BASIC_DETAILS,
    API_IS_VALID_DOMAIN,
    API_IS_VALID_URL,
    API_SERVICE_VERSION,
    API_TENANT_INFO,
    ITEMS,
)
from appscan_sdk.models.scan_type import ScanType
from appscan_sdk.transport.client import HttpClient

logger = logging.getLogger(__name__)


def _http_for(auth_provider: AuthenticationProvider, http_client: HttpClient | None) -> HttpClient:
    return http_client or HttpClient(
        proxy=auth_provider.proxy,
        accept_invalid_certs=auth_provider.accept_invalid_certs,
    )


# ──────────────────────────────────────────────────────────────
# 권한(entitlement)
# ──────────────────────────────────────────────────────────────

def has_entitlement(
    scan_type: ScanType,
    auth_provider: AuthenticationProvider,
    http_client: HttpClient | None = None,
) -> bool:
    """테넌트의 ActiveTechnologies에 해당 엔진이 있는지 확인한다.

    자격증명이 만료된 경우 True를 반환한다.
    확인할 수 없으므로 막지 않고 이후 실제 호출에서 만료 에러를 보고하게 한다.
    """
    if auth_provider.is_token_expired():
        return True

    http = _http_for(auth_provider, http_client)
    try:
        response = http.get(
            f"{auth_provider.server}{API_TENANT_INFO}",
            headers=auth_provider.get_authorization_header(True),
        )
    except httpx.HTTPError as e:
        logger.warning(f"[ServiceUtil] 테넌트 정보 조회 실패: {e}")
        return False

    body = response.json()
    if response.is_success and isinstance(body, dict):
        technologies = str(body.get(ACTIVE_TECHNOLOGIES, ""))
        return scan_type.technology in technologies
    return False


def has_sast_entitlement(
    auth_provider: AuthenticationProvider, http_client: HttpClient | None = None
) -> bool:
    return has_entitlement(ScanType.STATIC_ANALYZER, auth_provider, http_client)


def has_sca_entitlement(
    auth_provider: AuthenticationProvider, http_client: HttpClient | None = None
) -> bool:
    return has_entitlement(ScanType.SOFTWARE_COMPOSITION_ANALYZER, auth_provider, http_client)


def has_dast_entitlement(
    auth_provider: AuthenticationProvider, http_client: HttpClient | None = None
) -> bool:
    return has_entitlement(ScanType.DYNAMIC_ANALYZER, auth_provider, http_client)


# ──────────────────────────────────────────────────────────────
# 스캔 유형 이름
# ──────────────────────────────────────────────────────────────

def scan_type_short_form(scan_type: str) -> str:
    """표시 이름/기술 이름 → 약칭 (Sast/Sca/Dast). 모르는 이름은 그대로 반환."""
    resolved = ScanType.from_value(scan_type)
    return resolved.short_form if resolved is not None else scan_type


def updated_scan_type(scan_type: str) -> str:
    """표시 이름/약칭 → 기술 이름 (StaticAnalyzer 등). 모르는 이름은 그대로 반환."""
    resolved = ScanType.from_value(scan_type)
    return resolved.technology if resolved is not None else scan_type


# ──────────────────────────────────────────────────────────────
# 입력 검증
# ──────────────────────────────────────────────────────────────

def is_valid_url(
    url: str,
    auth_provider: AuthenticationProvider,
    http_client: HttpClient | None = None,
) -> bool:
    """DAST 대상 URL이 서비스에서 접근 가능한지 확인한다."""
    if auth_provider.is_token_expired():
        return False

    http = _http_for(auth_provider, http_client)
    headers = auth_provider.get_authorization_header(True)
    headers["Content-Type"] = "application/json"
    try:
        response = http.post(
            f"{auth_provider.server}{API_IS_VALID_URL}",
            headers=headers,
            body={"Url": url},
        )
    except httpx.HTTPError as e:
        logger.warning(f"[ServiceUtil] URL 검증 실패: {e}")
        return False

    body = response.json()
    return response.is_success and isinstance(body, dict) and bool(body.get("IsValid"))


def is_valid_scan_id(
    scan_id: str,
    app_id: str,
    scan_type: str,
    auth_provider: AuthenticationProvider,
    http_client: HttpClient | None = None,
) -> bool:
    """스캔 ID가 해당 애플리케이션/엔진의 스캔인지 확인한다 (재스캔 사전 검증).

    자격증명이 만료된 경우 확인하지 않고 True를 반환한다.
    """
    if auth_provider.is_token_expired():
        return True

    http = _http_for(auth_provider, http_client)
    try:
        response = http.get(
            f"{auth_provider.server}{API_BASIC_DETAILS}",
            headers=auth_provider.get_authorization_header(True),
            params={"$filter": f"Id eq {scan_id}", "$select": "AppId,Technology"},
        )
    except httpx.HTTPError as e:
        logger.warning(f"[ServiceUtil] 스캔 ID 검증 실패: {e}")
        return False

    body = response.json()
    items: Any = body.get(ITEMS) if isinstance(body, dict) else None
    if not response.is_success or not isinstance(items, list) or not items:
        return False
    scan = items[0]
    return (
        str(scan.get("AppId", "")).lower() == app_id.lower()
        and str(scan.get("Technology", "")) == updated_scan_type(scan_type)
    )


def is_valid_domain(
    url: str,
    app_id: str,
    auth_provider: AuthenticationProvider,
    http_client: HttpClient | None = None,
) -> bool:
    """DAST 시작 URL의 도메인이 애플리케이션에 등록된 도메인인지 확인한다.

    응답 본문은 JSON 객체가 아닌 true / false 문자열이다.
    """
    http = _http_for(auth_provider, http_client)
    headers = auth_provider.get_authorization_header(False)
    headers["Content-Type"] = "application/json"
    try:
        response = http.post(
            f"{auth_provider.server}{API_IS_VALID_DOMAIN}",
            headers=headers,
            body={APP_ID: app_id, "StartingUrl": url},
        )
    except httpx.HTTPError as e:
        logger.warning(f"[ServiceUtil] 도메인 검증 실패: {e}")
        return False

    return response.is_success and response.text.strip().lower() == "true"


# ──────────────────────────────────────────────────────────────
# 서비스 버전
# ──────────────────────────────────────────────────────────────

def get_service_version(
    auth_provider: AuthenticationProvider, http_client: HttpClient | None = None
) -> str:
    """서비스 MainVersion. 조회 실패 시 "0"."""
    http = _http_for(auth_provider, http_client)
    try:
        response = http.get(f"{auth_provider.server}{API_SERVICE_VERSION}")
    except httpx.HTTPError as e:
        logger.warning(f"[ServiceUtil] 서비스 버전 조회 실패: {e}")
        return "0"

    body = response.json()
    if response.is_success and isinstance(body, dict) and body.get("MainVersion"):
        return str(body["MainVersion"])
    return "0"


def compare_versions(base: str | None, other: str | None) -> bool:
    """other 버전이 base보다 높으면 True.

    base가 없으면 True, other가 없거나 숫자가 아닌 구성요소가 있으면 False.
    자릿수가 다르면 0으로 채워 비교한다 ("8" == "8.0.0").
    """
    if not base:
        return True
    if not other:
        return False
    try:
        base_parts = [int(p) for p in base.split(".")]
        other_parts = [int(p) for p in other.split(".")]
    except ValueError:
        return False

    width = max(len(base_parts), len(other_parts))
    base_parts += [0] * (width - len(base_parts))
    other_parts += [0] * (width - len(other_parts))
    return other_parts > base_parts

"""인증 제공자 — 서비스 제공자가 요구하는 자격증명 계약

토큰 발급/갱신은 이 SDK의 범위가 아니다. 호출자가 발급받은 토큰을 넘긴다.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone

from appscan_sdk.config import get_settings
from appscan_sdk.constants import ASE_XSRF_TOKEN


class AuthenticationProvider(ABC):
    """인증 제공자 공통 인터페이스."""

    @property
    @abstractmethod
    def server(self) -> str:
        """서비스 기본 URL (트레일링 슬래시 없음)"""

    @abstractmethod
    def is_token_expired(self) -> bool:
        """보유한 자격증명이 만료되었는지 확인한다."""

    @abstractmethod
    def get_authorization_header(self, include_content_negotiation: bool) -> dict[str, str]:
        """인증 헤더를 새 딕셔너리로 반환한다.

        Args:
            include_content_negotiation: True면 Accept 헤더 포함

        Returns:
            호출자가 수정해도 되는 헤더 딕셔너리
        """

    @property
    def proxy(self) -> str | None:
        return get_settings().APPSCAN_PROXY

    @property
    def accept_invalid_certs(self) -> bool:
        return get_settings().APPSCAN_ACCEPT_INVALID_CERTS


class TokenAuthenticationProvider(AuthenticationProvider):
    """Bearer 토큰 기반 인증 (리소스형 API)."""

    def __init__(
        self,
        token: str,
        server: str | None = None,
        expires_at: datetime | None = None,
    ) -> None:
        """초기화.

        Args:
            token: 발급받은 액세스 토큰
            server: 서비스 URL (기본: APPSCAN_SERVER_URL)
            expires_at: 토큰 만료 시각 (timezone-aware 권장, 없으면 만료 없음)
        """
        self._token = token
        self._server = (server or get_settings().APPSCAN_SERVER_URL).rstrip("/")
        self._expires_at = expires_at

    @property
    def server(self) -> str:
        return self._server

    def is_token_expired(self) -> bool:
        if not self._token:
            return True
        if self._expires_at is None:
            return False
        expires_at = self._expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return datetime.now(timezone.utc) >= expires_at

    def get_authorization_header(self, include_content_negotiation: bool) -> dict[str, str]:
        headers = {"Authorization": f"Bearer {self._token}"}
        if include_content_negotiation:
            headers["Accept"] = "application/json"
        return headers


class ASEAuthenticationProvider(AuthenticationProvider):
    """세션 쿠키 + XSRF 토큰 기반 인증 (작업형 ASE API)."""

    def __init__(
        self,
        session_id: str,
        xsrf_token: str,
        server: str | None = None,
        expired: bool = False,
    ) -> None:
        self._session_id = session_id
        self._xsrf_token = xsrf_token
        self._server = (server or get_settings().APPSCAN_SERVER_URL).rstrip("/")
        self._expired = expired

    @property
    def server(self) -> str:
        return self._server

    def is_token_expired(self) -> bool:
        return self._expired or not self._session_id

    def mark_expired(self) -> None:
        """서버가 세션 만료를 알린 경우 호출자가 표시한다."""
        self._expired = True

    def get_authorization_header(self, include_content_negotiation: bool) -> dict[str, str]:
        headers = {
            "Cookie": f"asc_session_id={self._session_id}",
            ASE_XSRF_TOKEN: self._xsrf_token,
        }
        if include_content_negotiation:
            headers["Accept"] = "application/json"
        return headers

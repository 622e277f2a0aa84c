"""스캔 서비스 제공자 공통 추상 인터페이스 (Strategy Pattern)

리소스형(클라우드) / 작업형(ASE) 구현체가 이 계약을 따른다.

공통 규칙:
- 모든 네트워크 호출 전에 자격증명 만료를 확인한다. 만료면 에러 메시지 1건만 남기고 호출하지 않는다.
- 전송 실패는 이 경계에서 잡아 진행 메시지로 바꾸고 None/False를 반환한다.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from appscan_sdk.auth.auth_provider import AuthenticationProvider
from appscan_sdk.progress import ERROR, INFO, Message, Progress
from appscan_sdk.transport.client import HttpClient

logger = logging.getLogger(__name__)


class ScanServiceProvider(ABC):
    """스캔 서비스 제공자 인터페이스."""

    #: 결과 제공자 선택에 쓰이는 백엔드 방언 이름
    dialect: str = ""

    def __init__(
        self,
        progress: Progress,
        auth_provider: AuthenticationProvider,
        http_client: HttpClient | None = None,
    ) -> None:
        """초기화.

        Args:
            progress: 진행 메시지 싱크
            auth_provider: 인증 제공자
            http_client: HTTP 클라이언트 (기본: 인증 제공자의 프록시/인증서 설정으로 생성)
        """
        self._progress = progress
        self._auth = auth_provider
        self._http = http_client or HttpClient(
            proxy=auth_provider.proxy,
            accept_invalid_certs=auth_provider.accept_invalid_certs,
        )
        self.last_error_message: str | None = None

    # ------------------------------------------------------------------
    # 공통 속성 / 헬퍼
    # ------------------------------------------------------------------

    @property
    def authentication_provider(self) -> AuthenticationProvider:
        return self._auth

    @property
    def progress(self) -> Progress:
        return self._progress

    @progress.setter
    def progress(self, progress: Progress) -> None:
        self._progress = progress

    @property
    def server(self) -> str:
        return self._auth.server

    def _report_info(self, text: str) -> None:
        self._progress.set_status(Message(INFO, text))

    def _report_error(self, text: str, error: BaseException | None = None) -> None:
        """에러 메시지를 진행 싱크에 남기고 마지막 에러로 기억한다."""
        self.last_error_message = text
        logger.warning(f"[{type(self).__name__}] {text}")
        self._progress.set_status(Message(ERROR, text), error)

    def _login_expired(self) -> bool:
        if self._auth.is_token_expired():
            self._report_error("로그인 세션이 만료되었습니다. 다시 인증한 뒤 시도하세요.")
            return True
        return False

    # ------------------------------------------------------------------
    # 계약
    # ------------------------------------------------------------------

    @abstractmethod
    def create_and_execute_scan(self, scan_type: str, params: dict[str, str]) -> str | None:
        """스캔을 생성하고 설정을 모두 적용한 뒤 실행한다.

        Args:
            scan_type: 엔진 약칭 (Sast / Sca / Dast)
            params: 요청 파라미터 맵

        Returns:
            생성된 스캔(작업) ID. 실패 시 None (진행 싱크에 에러 1건)
        """

    @abstractmethod
    def submit_file(self, file: Path) -> str | None:
        """스캔 아티팩트(IRX 등)를 업로드한다.

        Returns:
            업로드된 파일 ID. 실패 시 None
        """

    @abstractmethod
    def get_scan_details(self, scan_id: str) -> dict[str, Any] | None:
        """최신 상태/메타데이터 문서를 조회한다.

        복구 가능한 I/O 오류(아직 조회되지 않는 스캔 등)는
        {"Status": "Unknown"} 센티널 문서로 돌려준다.
        """

    @abstractmethod
    def get_non_compliant_issues(self, scan_id: str) -> list[dict[str, Any]] | None:
        """스캔 ID 기준 비준수 이슈 건수 [{Severity, Count}]"""

    @abstractmethod
    def get_non_compliant_issues_using_execution_id(
        self, execution_id: str
    ) -> list[dict[str, Any]] | None:
        """실행 ID 기준 비준수 이슈 건수 [{Severity, Count}]"""

    @abstractmethod
    def rescan(self, scan_id: str, params: dict[str, str]) -> str | None:
        """기존 스캔을 갱신된 설정으로 다시 실행한다 (update + execute)."""

    @abstractmethod
    def get_base_scan_details(self, scan_id: str) -> list[dict[str, Any]] | None:
        """증분 스캔의 기준이 될 수 있는 실행 목록"""

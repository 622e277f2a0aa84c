"""HTTP 전송 계층 — httpx.Client 얇은 래퍼

서비스 제공자가 요구하는 계약만 노출한다.
- 상태 코드, 헤더, 2xx 성공 여부
- JSON이 아닌 본문에도 예외를 던지지 않는 best-effort JSON 디코딩
- 파일로 본문 저장

전송 실패(연결, TLS, 타임아웃)는 httpx.HTTPError로 그대로 전파한다.
"""

from contextlib import ExitStack
from pathlib import Path
from typing import Any

import httpx

from appscan_sdk.config import get_settings
from appscan_sdk.transport.logging_hooks import EVENT_HOOKS


class HttpResponse:
    """httpx.Response를 감싼 응답 객체."""

    def __init__(self, response: httpx.Response) -> None:
        self._response = response

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def headers(self) -> httpx.Headers:
        return self._response.headers

    @property
    def is_success(self) -> bool:
        return 200 <= self._response.status_code < 300

    @property
    def text(self) -> str:
        return self._response.text

    def json(self) -> Any:
        """본문을 JSON으로 디코딩한다. JSON이 아니면 None."""
        try:
            return self._response.json()
        except ValueError:
            return None

    def save_to(self, destination: Path) -> Path:
        """본문을 파일로 저장한다. 상위 디렉토리가 없으면 생성한다."""
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(self._response.content)
        return destination


class HttpClient:
    """동기 HTTP 클라이언트.

    요청마다 httpx.Client를 열고 닫는다 (호출 빈도가 낮은 폴링 SDK).
    """

    def __init__(
        self,
        proxy: str | None = None,
        accept_invalid_certs: bool = False,
        timeout: float | None = None,
    ) -> None:
        """초기화.

        Args:
            proxy: 프록시 URL (선택)
            accept_invalid_certs: True면 TLS 인증서 검증 생략
            timeout: 요청 타임아웃 초 (기본: 설정의 HTTP_TIMEOUT_SECONDS)
        """
        self.proxy = proxy
        self.accept_invalid_certs = accept_invalid_certs
        self.timeout = timeout if timeout is not None else get_settings().HTTP_TIMEOUT_SECONDS

    def _client(self) -> httpx.Client:
        return httpx.Client(
            proxy=self.proxy,
            verify=not self.accept_invalid_certs,
            timeout=self.timeout,
            event_hooks=EVENT_HOOKS,
        )

    def get(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
    ) -> HttpResponse:
        with self._client() as client:
            return HttpResponse(client.get(url, headers=headers, params=params))

    def post(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        body: Any = None,
    ) -> HttpResponse:
        """JSON 본문 POST. 문자열 본문은 그대로 전송한다."""
        with self._client() as client:
            if isinstance(body, str):
                return HttpResponse(client.post(url, headers=headers, content=body))
            return HttpResponse(client.post(url, headers=headers, json=body))

    def put(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        body: Any = None,
    ) -> HttpResponse:
        with self._client() as client:
            if body is None:
                return HttpResponse(client.put(url, headers=headers))
            return HttpResponse(client.put(url, headers=headers, json=body))

    def post_form(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        form: dict[str, str] | None = None,
    ) -> HttpResponse:
        """application/x-www-form-urlencoded POST. None 값 필드는 제외한다."""
        data = {k: v for k, v in (form or {}).items() if v is not None}
        headers = {k: v for k, v in (headers or {}).items() if k.lower() != "content-type"}
        with self._client() as client:
            return HttpResponse(client.post(url, headers=headers, data=data))

    def post_multipart(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        files: list[tuple[str, Path]] | None = None,
        fields: dict[str, str] | None = None,
    ) -> HttpResponse:
        """multipart/form-data POST.

        Args:
            url: 요청 URL
            headers: 요청 헤더 (Content-Type은 httpx가 boundary와 함께 설정)
            files: (필드 이름, 파일 경로) 목록
            fields: 일반 문자열 필드

        Raises:
            OSError: 파일을 열 수 없을 때
        """
        headers = {k: v for k, v in (headers or {}).items() if k.lower() != "content-type"}
        data = {k: v for k, v in (fields or {}).items() if v is not None}
        with ExitStack() as stack:
            parts = [
                (name, (path.name, stack.enter_context(path.open("rb")), "application/octet-stream"))
                for name, path in (files or [])
            ]
            with self._client() as client:
                return HttpResponse(
                    client.post(url, headers=headers, data=data, files=parts)
                )

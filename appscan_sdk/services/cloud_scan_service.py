"""리소스형(클라우드) 스캔 서비스 제공자

/api/v4 REST API를 사용한다.
인증: Bearer 토큰 (TokenAuthenticationProvider)

스캔 생성은 POST /api/v4/Scans/{Sast|Sca|Dast} 한 번으로 끝나고,
상태/이슈 건수/보고서는 별도 리소스로 조회한다.
"""

import logging
import re
from pathlib import Path
from typing import Any

import httpx

from appscan_sdk.constants import (
    API_APPS,
    API_BASIC_DETAILS,
    API_EXECUTION_DETAILS,
    API_FILE_UPLOAD,
    API_ISSUES_COUNT,
    API_REPORT_DOWNLOAD,
    API_REPORT_SECURITY_SCAN,
    API_REPORT_STATUS,
    API_RESCAN,
    API_SCANNER,
    API_SCANNER_DETAILS,
    APP_ID,
    DAST_FILE_EXTENSIONS,
    EMAIL_NOTIFICATION,
    FILE_ID,
    FORMAT_PARAMS,
    FULLY_AUTOMATIC,
    ID,
    IRX_EXTENSION,
    ISSUES_COUNT_QUERY,
    ITEMS,
    KEY,
    MESSAGE,
    SCAN_ID,
    SCAN_NAME,
    STATUS,
    UNAUTHORIZED_ACTION,
    UPLOADED_FILE,
)
from appscan_sdk.models.scan_type import ScanType
from appscan_sdk.models.status import Status
from appscan_sdk.services.scan_service_provider import ScanServiceProvider

logger = logging.getLogger(__name__)

# 서버 메시지 템플릿의 {0}, {1} ... 자리표시자
_FORMAT_PLACEHOLDER = re.compile(r"\{(\d+)\}")


def format_server_message(body: dict[str, Any]) -> str:
    """서버 에러 문서의 Message를 FormatParams로 채운다.

    Args:
        body: {"Message": "...{0}...", "FormatParams": [...]} 형태의 문서

    Returns:
        자리표시자를 치환한 메시지. 범위를 벗어난 자리표시자는 그대로 둔다.
    """
    message = str(body.get(MESSAGE, ""))
    params = body.get(FORMAT_PARAMS)
    if not isinstance(params, list) or not params:
        return message

    def _replace(match: re.Match) -> str:
        index = int(match.group(1))
        if index < len(params):
            return str(params[index])
        return match.group(0)

    return _FORMAT_PLACEHOLDER.sub(_replace, message)


class CloudScanServiceProvider(ScanServiceProvider):
    """리소스형 REST API 기반 스캔 서비스 제공자."""

    dialect = "cloud"

    def _json_headers(self) -> dict[str, str]:
        headers = self._auth.get_authorization_header(True)
        headers["Content-Type"] = "application/json"
        return headers

    def _report_server_error(self, response, fallback: str) -> None:
        """응답 본문에 Message가 있으면 그것을, 없으면 fallback을 에러로 남긴다."""
        body = response.json()
        if isinstance(body, dict) and body.get(MESSAGE):
            self._report_error(format_server_message(body))
        else:
            self._report_error(f"{fallback} (HTTP {response.status_code})")

    # ------------------------------------------------------------------
    # 스캔 생성 / 재실행
    # ------------------------------------------------------------------

    def create_and_execute_scan(self, scan_type: str, params: dict[str, str]) -> str | None:
        """POST /api/v4/Scans/{type} 로 스캔을 생성하고 실행한다."""
        url = f"{self.server}{API_SCANNER.format(scan_type)}"
        return self._execute_scan(url, params, scan_type)

    def rescan(self, scan_id: str, params: dict[str, str]) -> str | None:
        """스캔 메타데이터를 갱신한 뒤 POST /api/v4/Scans/{id}/Execute 로 재실행한다."""
        params = dict(params)
        update = {
            "Name": params.pop(SCAN_NAME, None),
            "EnableMailNotifications": params.pop(EMAIL_NOTIFICATION, None),
            "FullyAutomatic": params.pop(FULLY_AUTOMATIC, None),
        }
        update = {k: v for k, v in update.items() if v is not None}
        if update and not self.update_scan_data(update, scan_id):
            return None

        params.setdefault(SCAN_ID, scan_id)
        url = f"{self.server}{API_RESCAN.format(scan_id)}"
        return self._execute_scan(url, params, "Rescan")

    def _execute_scan(self, url: str, params: dict[str, str], label: str) -> str | None:
        if self._login_expired():
            return None

        app_id = params.get(APP_ID)
        if app_id is not None and not self._verify_application(app_id):
            return None

        self._report_info(f"{label} 스캔을 제출합니다.")
        try:
            response = self._http.post(url, headers=self._json_headers(), body=params)
        except httpx.HTTPError as e:
            self._report_error(f"스캔 제출 중 통신 오류가 발생했습니다: {e}", e)
            return None

        body = response.json()
        if response.status_code in (200, 201) and isinstance(body, dict) and ID in body:
            scan_id = str(body[ID])
            overview_id = params.get(SCAN_ID, scan_id)
            self._report_info(f"스캔이 제출되었습니다. 스캔 ID: {scan_id}")
            self._report_info(
                f"스캔 개요: {self.server}/main/myapps/{app_id}/scans/{overview_id}"
            )
            logger.info(f"[CloudScanService] 스캔 제출 완료: type={label}, id={scan_id}")
            return scan_id

        self._report_server_error(response, "스캔 제출에 실패했습니다")
        return None

    def _verify_application(self, app_id: str) -> bool:
        """AppId가 현재 사용자에게 보이는 애플리케이션인지 확인한다."""
        if not app_id.strip():
            self._report_error("애플리케이션 ID가 비어 있습니다.")
            return False

        try:
            response = self._http.get(
                f"{self.server}{API_APPS}",
                headers=self._auth.get_authorization_header(True),
                params={"$filter": f"Id eq '{app_id}'", "$select": "Id,Name"},
            )
        except httpx.HTTPError as e:
            self._report_error(f"애플리케이션 확인 중 통신 오류가 발생했습니다: {e}", e)
            return False

        body = response.json()
        items = body.get(ITEMS) if isinstance(body, dict) else body
        if response.is_success and isinstance(items, list):
            if any(str(item.get(ID, "")).lower() == app_id.lower() for item in items):
                return True
        self._report_error(f"유효하지 않은 애플리케이션 ID입니다: {app_id}")
        return False

    def update_scan_data(self, params: dict[str, Any], scan_id: str) -> bool:
        """PUT /api/v4/Scans/{id} 로 스캔 메타데이터를 갱신한다. 204면 성공."""
        if self._login_expired():
            return False

        try:
            response = self._http.put(
                f"{self.server}{API_SCANNER.format(scan_id)}",
                headers=self._json_headers(),
                body=params,
            )
        except httpx.HTTPError as e:
            self._report_error(f"스캔 정보 갱신 중 통신 오류가 발생했습니다: {e}", e)
            return False

        if response.status_code == 204:
            self._report_info(f"스캔 정보를 갱신했습니다. 스캔 ID: {scan_id}")
            return True
        self._report_server_error(response, "스캔 정보 갱신에 실패했습니다")
        return False

    # ------------------------------------------------------------------
    # 파일 업로드
    # ------------------------------------------------------------------

    def submit_file(self, file: Path) -> str | None:
        """POST /api/v4/FileUpload 로 아티팩트를 업로드한다.

        .irx / DAST 설정 파일 이외는 소스 아카이브로 표시한다.
        """
        if self._login_expired():
            return None

        self._report_info(f"파일을 업로드합니다: {file}")
        url = f"{self.server}{API_FILE_UPLOAD}"
        suffix = file.suffix.lower()
        if suffix != IRX_EXTENSION and suffix not in DAST_FILE_EXTENSIONS:
            url += "?fileType=SourceCodeArchive"

        try:
            response = self._http.post_multipart(
                url,
                headers=self._auth.get_authorization_header(True),
                files=[(UPLOADED_FILE, file)],
            )
        except (httpx.HTTPError, OSError) as e:
            self._report_error(f"파일 업로드에 실패했습니다: {file}: {e}", e)
            return None

        body = response.json()
        if response.status_code in (200, 201) and isinstance(body, dict) and body.get(FILE_ID):
            logger.info(f"[CloudScanService] 파일 업로드 완료: file_id={body[FILE_ID]}")
            return str(body[FILE_ID])

        self._report_server_error(response, f"파일 업로드에 실패했습니다: {file}")
        return None

    # ------------------------------------------------------------------
    # 상태 / 상세
    # ------------------------------------------------------------------

    def get_scan_details(self, scan_id: str) -> dict[str, Any] | None:
        """GET /api/v4/Scans?$filter=Id eq {id} 의 첫 항목을 반환한다.

        - 400: 유효하지 않은 스캔 ID 에러, None
        - 403 + Key=UNAUTHORIZED_ACTION: 본문 그대로 반환 (호출자가 권한 문제를 구분)
        - 통신 오류: {"Status": "Unknown"} 센티널
        """
        if self._login_expired():
            return None

        try:
            response = self._http.get(
                f"{self.server}{API_BASIC_DETAILS}",
                headers=self._auth.get_authorization_header(True),
                params={"$filter": f"Id eq {scan_id}"},
            )
        except (httpx.HTTPError, OSError) as e:
            logger.info(f"[CloudScanService] 스캔 상세 조회 실패, 상태 미확정 처리: {e}")
            return {STATUS: Status.UNKNOWN.value}

        body = response.json()
        if response.status_code in (200, 201):
            items = body.get(ITEMS) if isinstance(body, dict) else None
            if isinstance(items, list) and items:
                return items[0]
            self._report_error(f"스캔 정보를 찾을 수 없습니다. 스캔 ID: {scan_id}")
            return None

        if response.status_code == 400:
            self._report_error(f"유효하지 않은 스캔 ID입니다: {scan_id}")
            return None

        self._report_server_error(response, f"스캔 정보를 가져오지 못했습니다. 스캔 ID: {scan_id}")
        if (
            response.status_code == 403
            and isinstance(body, dict)
            and body.get(KEY) == UNAUTHORIZED_ACTION
        ):
            return body
        return None

    def get_scan_details_by_type(
        self, scan_type: ScanType | str, scan_id: str
    ) -> dict[str, Any] | None:
        """GET /api/v4/Scans/{type}/{id} 엔진별 상세 문서. 실패 시 None."""
        if self._login_expired():
            return None

        technology = scan_type.short_form if isinstance(scan_type, ScanType) else scan_type
        try:
            response = self._http.get(
                f"{self.server}{API_SCANNER_DETAILS.format(technology, scan_id)}",
                headers=self._auth.get_authorization_header(True),
            )
        except httpx.HTTPError as e:
            logger.warning(f"[CloudScanService] 엔진별 상세 조회 실패: {e}")
            return None

        body = response.json()
        if response.is_success and isinstance(body, dict):
            return body
        return None

    def get_base_scan_details(self, scan_id: str) -> list[dict[str, Any]] | None:
        """GET /api/v4/Scans/{id}/Executions 실행 목록."""
        if self._login_expired():
            return None

        try:
            response = self._http.get(
                f"{self.server}{API_EXECUTION_DETAILS.format(scan_id)}",
                headers=self._auth.get_authorization_header(True),
            )
        except httpx.HTTPError as e:
            self._report_error(f"실행 목록 조회 중 통신 오류가 발생했습니다: {e}", e)
            return None

        body = response.json()
        if response.is_success and isinstance(body, list):
            return body
        self._report_server_error(response, f"실행 목록을 가져오지 못했습니다. 스캔 ID: {scan_id}")
        return None

    # ------------------------------------------------------------------
    # 이슈 건수
    # ------------------------------------------------------------------

    def get_non_compliant_issues(self, scan_id: str) -> list[dict[str, Any]] | None:
        return self._get_non_compliant_issues("Scan", scan_id)

    def get_non_compliant_issues_using_execution_id(
        self, execution_id: str
    ) -> list[dict[str, Any]] | None:
        return self._get_non_compliant_issues("ScanExecution", execution_id)

    def _get_non_compliant_issues(self, scope: str, scope_id: str) -> list[dict[str, Any]] | None:
        """GET /api/v4/Issues/{scope}/{id} 를 (Status, Severity)로 집계해 조회한다.

        Returns:
            [{"Status": ..., "Severity": ..., "Count": n}] 목록. 실패 시 None
        """
        if self._login_expired():
            return None

        headers = self._auth.get_authorization_header(True)
        headers["Content-Type"] = "application/json; charset=UTF-8"
        try:
            response = self._http.get(
                f"{self.server}{API_ISSUES_COUNT.format(scope, scope_id)}",
                headers=headers,
                params=dict(ISSUES_COUNT_QUERY),
            )
        except httpx.HTTPError as e:
            self._report_error(f"이슈 건수 조회 중 통신 오류가 발생했습니다: {e}", e)
            return None

        body = response.json()
        if response.is_success:
            items = body.get(ITEMS) if isinstance(body, dict) else body
            if isinstance(items, list):
                return [
                    {**item, "Count": item.get("Count", item.get("N", 0))}
                    for item in items
                ]
            self._report_error(f"이슈 건수 응답 형식이 올바르지 않습니다. {scope} ID: {scope_id}")
            return None

        if response.status_code == 400:
            self._report_error(f"이슈 건수를 가져오지 못했습니다. {scope} ID: {scope_id}")
            return None

        self._report_server_error(response, f"이슈 건수를 가져오지 못했습니다. {scope} ID: {scope_id}")
        return None

    # ------------------------------------------------------------------
    # 보고서
    # ------------------------------------------------------------------

    def create_report(self, scan_id: str, report_format: str, name: str | None = None) -> str | None:
        """POST /api/v4/Reports/Security/Scan/{id} 로 보고서 생성을 요청한다.

        Returns:
            보고서 ID. 실패 시 None
        """
        if self._login_expired():
            return None

        body = {
            "Configuration": {
                "Summary": True,
                "Details": True,
                "Discussion": False,
                "Overview": True,
                "TableOfContent": True,
                "Advisories": True,
                "FixRecommendation": True,
                "History": True,
                "IsTrialReport": False,
                "ReportFileType": report_format,
                "Title": name or scan_id,
                "Notes": "",
                "Locale": "en-US",
            },
            "ApplyPolicies": "All",
        }
        try:
            response = self._http.post(
                f"{self.server}{API_REPORT_SECURITY_SCAN.format(scan_id)}",
                headers=self._json_headers(),
                body=body,
            )
        except httpx.HTTPError as e:
            self._report_error(f"보고서 생성 요청 중 통신 오류가 발생했습니다: {e}", e)
            return None

        payload = response.json()
        if response.is_success and isinstance(payload, dict) and payload.get(ID):
            return str(payload[ID])
        self._report_server_error(response, "보고서 생성 요청에 실패했습니다")
        return None

    def get_report_status(self, report_id: str) -> str | None:
        """GET /api/v4/Reports/{id} 의 Status 값. 조회 실패 시 None."""
        if self._login_expired():
            return None

        try:
            response = self._http.get(
                f"{self.server}{API_REPORT_STATUS.format(report_id)}",
                headers=self._auth.get_authorization_header(True),
            )
        except httpx.HTTPError as e:
            logger.warning(f"[CloudScanService] 보고서 상태 조회 실패: {e}")
            return None

        body = response.json()
        if response.is_success and isinstance(body, dict):
            return body.get(STATUS)
        return None

    def download_report(self, report_id: str, destination: Path) -> bool:
        """GET /api/v4/Reports/Download/{id} 본문을 destination에 저장한다."""
        if self._login_expired():
            return False

        try:
            response = self._http.get(
                f"{self.server}{API_REPORT_DOWNLOAD.format(report_id)}",
                headers=self._auth.get_authorization_header(False),
            )
            if response.is_success:
                response.save_to(destination)
                self._report_info(f"보고서를 저장했습니다: {destination}")
                return True
        except (httpx.HTTPError, OSError) as e:
            self._report_error(f"보고서 다운로드에 실패했습니다: {e}", e)
            return False

        self._report_error(f"보고서 다운로드에 실패했습니다 (HTTP {response.status_code})")
        return False

"""작업형(ASE) 스캔 서비스 제공자

레거시 /api/jobs API를 사용한다.
인증: 세션 쿠키 + asc_xsrf_token 헤더 (ASEAuthenticationProvider)

스캔 생성 흐름:
    작업 골격 생성 → 설정 필드 순차 갱신 → ETag 조회 → If-Match 실행

설정 갱신은 한 단계씩 요청하며 첫 실패에서 멈춘다.
이미 만들어진 작업 골격은 롤백하지 않는다 (실행만 되지 않음).
"""

import logging
from pathlib import Path
from typing import Any, Callable
from urllib.parse import urlencode

import httpx

from appscan_sdk.constants import (
    ASE_CREATEJOB_TEMPLATE_ID,
    ASE_GET_JOB,
    ASE_ID_ATTRIBUTE,
    ASE_POSTMAN_COLLECTION,
    ASE_REPORTS,
    ASE_RUN_JOB_ACTION,
    ASE_SCAN_TYPE,
    ASE_UPDSCANT,
    ASE_UPDTAGENT,
    ASE_UPDTRAFFIC,
    ASE_UPLOADED_FILE,
    ASE_XSRF_TOKEN,
    STATUS,
)
from appscan_sdk.errors import ProviderOperationNotSupported
from appscan_sdk.models.ase_scan_type import POSTMAN_COLLECTION, ASEScanType
from appscan_sdk.models.finding_counts import FindingCounts
from appscan_sdk.models.status import Status
from appscan_sdk.services.scan_service_provider import ScanServiceProvider

logger = logging.getLogger(__name__)

# 보고서 팩에서 건수를 읽어올 보고서 이름
SECURITY_ISSUES_REPORT = "Security Issues"

# 설정 파라미터 키 (작업형 DAST)
STARTING_URL = "startingURL"
AGENT_SERVER = "agentServer"
LOGIN_TYPE = "loginType"
USER_NAME = "userName"
PASSWORD = "password"
TRAFFIC_FILE = "trafficFile"
EXPLORE_DATA = "exploreData"
SCAN_TYPE = "scanType"
TEST_OPTIMIZATION = "testOptimization"
TEMPLATE_ID = "templateId"

AUTOMATIC_LOGIN = "Automatic"
MANUAL_LOGIN = "Manual"


class ASEScanServiceProvider(ScanServiceProvider):
    """작업형 레거시 API 기반 스캔 서비스 제공자."""

    dialect = "ase"

    def _headers(self) -> dict[str, str]:
        return self._auth.get_authorization_header(True)

    def _report_response_error(self, response, fallback: str) -> None:
        body = response.json()
        if isinstance(body, dict) and body.get("errorMessage"):
            self._report_error(f"{fallback}: {body['errorMessage']}")
        else:
            self._report_error(f"{fallback} (HTTP {response.status_code})")

    # ------------------------------------------------------------------
    # 스캔 생성
    # ------------------------------------------------------------------

    def create_and_execute_scan(self, scan_type: str, params: dict[str, str]) -> str | None:
        """작업 골격을 만들고 설정을 적용한 뒤 실행한다.

        Returns:
            작업 ID. 어느 단계든 실패하면 None
        """
        job_id = self._create_job(params)
        if job_id is None:
            return None
        if not self._update_job(params, job_id):
            return None
        if not self._run_scan_job(job_id):
            return None
        return job_id

    def _create_job(self, params: dict[str, str]) -> str | None:
        """POST /api/jobs/{templateId}/dastconfig/createjob"""
        if self._login_expired():
            return None

        self._report_info("작업을 생성합니다.")
        form = {
            "testPolicyId": params.get("testPolicyId"),
            "folderId": params.get("folder"),
            "applicationId": params.get("application"),
            "name": params.get("ScanName"),
            "description": params.get("description"),
            "contact": params.get("contact"),
        }
        url = f"{self.server}{ASE_CREATEJOB_TEMPLATE_ID.format(params.get(TEMPLATE_ID, ''))}"
        try:
            response = self._http.post_form(url, headers=self._headers(), form=form)
        except httpx.HTTPError as e:
            self._report_error(f"작업 생성 중 통신 오류가 발생했습니다: {e}", e)
            return None

        if response.status_code in (400, 404):
            self._report_error("작업 생성 정보가 올바르지 않습니다. 템플릿/폴더/애플리케이션을 확인하세요.")
            return None

        body = response.json()
        if response.status_code == 201 and isinstance(body, dict) and body.get(ASE_ID_ATTRIBUTE):
            job_id = str(body[ASE_ID_ATTRIBUTE])
            self._report_info(f"작업이 생성되었습니다. 작업 ID: {job_id}")
            return job_id

        self._report_response_error(response, "작업 생성에 실패했습니다")
        return None

    def _update_steps(self) -> list[tuple[str, Callable[[dict[str, str], str], bool]]]:
        return [
            ("starting_url", self._handle_starting_url),
            ("agent_server", self._handle_agent_server),
            ("login_management", self._handle_login_management),
            ("explore_data", self._handle_explore_data),
            ("scan_type", self._handle_scan_type),
            ("test_optimization", self._handle_test_optimization),
            ("postman_collection", self._handle_postman_collection),
        ]

    def _update_job(self, params: dict[str, str], job_id: str) -> bool:
        """설정 갱신 단계를 순서대로 실행하고 첫 실패에서 멈춘다."""
        for name, step in self._update_steps():
            if not step(params, job_id):
                logger.warning(f"[ASEScanService] 작업 설정 갱신 중단: job={job_id}, step={name}")
                return False
        return True

    # ---- 설정 단계 ----

    def _handle_starting_url(self, params: dict[str, str], job_id: str) -> bool:
        url = params.get(STARTING_URL)
        if params.get(SCAN_TYPE) == POSTMAN_COLLECTION or not url:
            return True
        return self._update_scant("StartingUrl", url, False, job_id)

    def _handle_agent_server(self, params: dict[str, str], job_id: str) -> bool:
        agent = params.get(AGENT_SERVER)
        if not agent:
            return True
        return self._update_agent_server(agent, job_id)

    def _handle_login_management(self, params: dict[str, str], job_id: str) -> bool:
        login_type = params.get(LOGIN_TYPE)
        if not login_type:
            return True
        if not self._update_scant("LoginMethod", login_type, False, job_id):
            return False

        if login_type == AUTOMATIC_LOGIN:
            return self._update_scant(
                "LoginUsername", params.get(USER_NAME, ""), False, job_id
            ) and self._update_scant("LoginPassword", params.get(PASSWORD, ""), True, job_id)

        if login_type == MANUAL_LOGIN:
            # 녹화 파일이 없으면 오류만 알리고 로그인 트래픽 없이 다음 단계로 진행
            traffic = self._get_file(params.get(TRAFFIC_FILE))
            if traffic is None:
                logger.warning(f"[ASEScanService] 로그인 트래픽 업로드 생략: job={job_id}")
                return True
            return self._update_traffic(traffic, job_id, "login")
        return True

    def _handle_explore_data(self, params: dict[str, str], job_id: str) -> bool:
        location = params.get(EXPLORE_DATA)
        if not location:
            return True
        explore = self._get_file(location)
        if explore is None:
            return False
        return self._update_traffic(explore, job_id, "add")

    def _handle_scan_type(self, params: dict[str, str], job_id: str) -> bool:
        scan_type = params.get(SCAN_TYPE)
        if not scan_type or scan_type == POSTMAN_COLLECTION:
            return True
        return self._update_scan_type(scan_type, job_id)

    def _handle_test_optimization(self, params: dict[str, str], job_id: str) -> bool:
        level = params.get(TEST_OPTIMIZATION)
        if not level:
            return True
        return self._update_scant("TestOptimization", level, False, job_id)

    def _handle_postman_collection(self, params: dict[str, str], job_id: str) -> bool:
        if params.get(SCAN_TYPE) != POSTMAN_COLLECTION:
            return True
        return self._create_postman_collection_job(params, job_id)

    # ---- 단일 요청 ----

    def _update_scant(self, xpath: str, value: str, encrypt: bool, job_id: str) -> bool:
        """scant 노드 하나를 갱신한다. HTTP 200이면 성공."""
        if self._login_expired():
            return False

        form = {
            "scantNodeXpath": xpath,
            "scantNodeNewValue": value,
            "encryptNodeValue": "true" if encrypt else "false",
        }
        try:
            response = self._http.post_form(
                f"{self.server}{ASE_UPDSCANT.format(job_id)}",
                headers=self._headers(),
                form=form,
            )
        except httpx.HTTPError as e:
            self._report_error(f"작업 설정 갱신 중 통신 오류가 발생했습니다 ({xpath}): {e}", e)
            return False

        if response.status_code == 200:
            return True
        self._report_response_error(response, f"작업 설정 갱신에 실패했습니다 ({xpath})")
        return False

    def _update_agent_server(self, agent: str, job_id: str) -> bool:
        if self._login_expired():
            return False

        try:
            response = self._http.post_form(
                f"{self.server}{ASE_UPDTAGENT.format(job_id, agent)}",
                headers=self._headers(),
            )
        except httpx.HTTPError as e:
            self._report_error(f"에이전트 서버 설정 중 통신 오류가 발생했습니다: {e}", e)
            return False

        if response.status_code == 200:
            return True
        self._report_response_error(response, f"에이전트 서버 설정에 실패했습니다 ({agent})")
        return False

    def _update_traffic(self, file: Path, job_id: str, action: str) -> bool:
        """트래픽 파일을 업로드한다. action: login / add"""
        if self._login_expired():
            return False

        try:
            response = self._http.post_multipart(
                f"{self.server}{ASE_UPDTRAFFIC.format(job_id, action)}",
                headers=self._headers(),
                files=[(ASE_UPLOADED_FILE, file)],
            )
        except (httpx.HTTPError, OSError) as e:
            self._report_error(f"트래픽 파일 업로드에 실패했습니다 ({file}): {e}", e)
            return False

        if response.status_code == 200:
            return True
        self._report_response_error(response, f"트래픽 파일 업로드에 실패했습니다 ({file})")
        return False

    def _update_scan_type(self, scan_type: str, job_id: str) -> bool:
        """PUT /api/jobs/scantype?scanTypeId=<code>&jobId=<id>"""
        if self._login_expired():
            return False

        query = urlencode({"scanTypeId": ASEScanType.scan_type_code(scan_type), "jobId": job_id})
        try:
            response = self._http.put(
                f"{self.server}{ASE_SCAN_TYPE}?{query}",
                headers=self._headers(),
            )
        except httpx.HTTPError as e:
            self._report_error(f"스캔 유형 설정 중 통신 오류가 발생했습니다: {e}", e)
            return False

        if response.status_code == 200:
            return True
        self._report_response_error(response, f"스캔 유형 설정에 실패했습니다 ({scan_type})")
        return False

    def _create_postman_collection_job(self, params: dict[str, str], job_id: str) -> bool:
        """Postman 컬렉션 및 부가 파일을 multipart로 업로드한다."""
        if self._login_expired():
            return False

        collection = self._get_file(params.get("postmanCollectionFile"))
        if collection is None:
            return False
        files = [("postmanCollectionFile", collection)]
        for key in ("environmentalVariablesFile", "globalVariablesFile", "additionalFiles"):
            if params.get(key):
                extra = self._get_file(params[key])
                if extra is None:
                    return False
                files.append((key, extra))

        headers = self._headers()
        fields = {
            "additionalDomains": params.get("additionalDomains"),
            ASE_XSRF_TOKEN: headers.get(ASE_XSRF_TOKEN),
        }
        try:
            response = self._http.post_multipart(
                f"{self.server}{ASE_POSTMAN_COLLECTION.format(job_id)}",
                headers=headers,
                files=files,
                fields=fields,
            )
        except (httpx.HTTPError, OSError) as e:
            self._report_error(f"Postman 컬렉션 업로드에 실패했습니다: {e}", e)
            return False

        if response.status_code == 200:
            self._report_info("Postman 컬렉션을 업로드했습니다.")
            return True
        self._report_response_error(response, "Postman 컬렉션 업로드에 실패했습니다")
        return False

    def _get_file(self, location: str | None) -> Path | None:
        if location and Path(location).is_file():
            return Path(location)
        self._report_error(f"파일을 찾을 수 없습니다: {location}")
        return None

    # ---- 실행 ----

    def _get_etag(self, job_id: str) -> str | None:
        """GET /api/jobs/{id} 응답의 ETag 헤더"""
        try:
            response = self._http.get(
                f"{self.server}{ASE_GET_JOB.format(job_id)}",
                headers=self._headers(),
            )
        except httpx.HTTPError as e:
            logger.warning(f"[ASEScanService] ETag 조회 실패: job={job_id}, {e}")
            return None

        if response.status_code == 200:
            return response.headers.get("ETag")
        return None

    def _run_scan_job(self, job_id: str) -> bool:
        """POST /api/jobs/{id}/actions type=run (If-Match: ETag)"""
        if self._login_expired():
            return False

        self._report_info(f"작업을 실행합니다. 작업 ID: {job_id}")
        headers = self._headers()
        headers["If-Match"] = self._get_etag(job_id) or ""
        try:
            response = self._http.post_form(
                f"{self.server}{ASE_RUN_JOB_ACTION.format(job_id)}",
                headers=headers,
                form={"type": "run"},
            )
        except httpx.HTTPError as e:
            self._report_error(f"작업 실행 중 통신 오류가 발생했습니다: {e}", e)
            return False

        if response.status_code == 200:
            self._report_info(f"작업이 실행되었습니다. 작업 ID: {job_id}")
            logger.info(f"[ASEScanService] 작업 실행 완료: job={job_id}")
            return True
        self._report_response_error(response, f"작업 실행에 실패했습니다. 작업 ID: {job_id}")
        return False

    # ------------------------------------------------------------------
    # 상태 / 건수
    # ------------------------------------------------------------------

    def get_scan_details(self, scan_id: str) -> dict[str, Any] | None:
        """GET /api/reportpacks/{jobId+1}/reports 의 Security Issues 건수.

        Returns:
            {"NCriticalIssues", "NHighIssues", "NMediumIssues", "NLowIssues",
             "NInfoIssues", "NIssuesFound"} 문서.
            보고서 팩이 아직 없으면 {"Status": "Running"},
            통신 오류면 {"Status": "Unknown"},
            로그인 만료 / 잘못된 작업 ID / 형식 오류면 None
        """
        if self._login_expired():
            return None

        try:
            report_pack_id = str(int(scan_id) + 1)
        except ValueError:
            self._report_error(f"유효하지 않은 작업 ID입니다: {scan_id}")
            return None

        try:
            response = self._http.get(
                f"{self.server}{ASE_REPORTS.format(report_pack_id)}",
                headers=self._headers(),
            )
        except (httpx.HTTPError, OSError) as e:
            logger.info(f"[ASEScanService] 보고서 팩 조회 실패, 상태 미확정 처리: {e}")
            return {STATUS: Status.UNKNOWN.value}

        if response.status_code in (200, 201):
            return self._parse_issue_counts(response.json())
        if response.status_code == 404:
            logger.debug(f"[ASEScanService] 보고서 팩 미생성: job={scan_id}")
            return {STATUS: Status.RUNNING.value}
        if response.status_code == 400:
            self._report_error(f"유효하지 않은 작업 ID입니다: {scan_id}")
        else:
            self._report_response_error(response, f"보고서 팩 조회에 실패했습니다 (작업 ID: {scan_id})")
        return None

    def _parse_issue_counts(self, body: Any) -> dict[str, Any] | None:
        """보고서 팩 문서에서 심각도별 건수를 N*Issues 키로 펼친다.

        Security Issues 보고서가 아직 없으면 실행 중 문서를 돌려준다.
        """
        try:
            reports = body["reports"]["report"]
            if isinstance(reports, dict):
                reports = [reports]
            for report in reports:
                if str(report.get("name", "")).lower() != SECURITY_ISSUES_REPORT.lower():
                    continue
                entries = report["issue-counts-severity"]["issue-count"]
                if isinstance(entries, dict):
                    entries = [entries]
                counts = FindingCounts.from_severity_items(
                    (
                        {"Severity": entry["severity"]["name"], "Count": entry["count"]}
                        for entry in entries
                    )
                )
                return {
                    "NCriticalIssues": counts.critical,
                    "NHighIssues": counts.high,
                    "NMediumIssues": counts.medium,
                    "NLowIssues": counts.low,
                    "NInfoIssues": counts.info,
                    "NIssuesFound": counts.total,
                }
        except (KeyError, TypeError, ValueError) as e:
            self._report_error(f"보고서 팩 형식을 해석하지 못했습니다: {e}", e)
            return None
        return {STATUS: Status.RUNNING.value}

    # ------------------------------------------------------------------
    # 지원하지 않는 연산
    # ------------------------------------------------------------------

    def submit_file(self, file: Path) -> str | None:
        raise ProviderOperationNotSupported(type(self).__name__, "submit_file")

    def get_non_compliant_issues(self, scan_id: str) -> list[dict[str, Any]] | None:
        raise ProviderOperationNotSupported(type(self).__name__, "get_non_compliant_issues")

    def get_non_compliant_issues_using_execution_id(
        self, execution_id: str
    ) -> list[dict[str, Any]] | None:
        raise ProviderOperationNotSupported(
            type(self).__name__, "get_non_compliant_issues_using_execution_id"
        )

    def rescan(self, scan_id: str, params: dict[str, str]) -> str | None:
        raise ProviderOperationNotSupported(type(self).__name__, "rescan")

    def get_base_scan_details(self, scan_id: str) -> list[dict[str, Any]] | None:
        return None

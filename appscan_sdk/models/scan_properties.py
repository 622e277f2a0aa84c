"""스캔 설정 레코드

호출자가 넘기는 문자열 키 설정을 엔진별 이름 있는 필드로 받는다.
필드 alias가 곧 백엔드 요청 파라미터 키다.
정의되지 않은 키는 그대로 보존했다가 요청에 실어 보낸다.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# 요청 파라미터로 보내지 않는 클라이언트 전용 필드
_CLIENT_ONLY_FIELDS = {"target", "prepare_only", "report_format"}


class ScanProperties(BaseModel):
    """스캔 생성/실행 설정."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    # ---- 공통 ----
    scan_name: str | None = Field(default=None, alias="ScanName")
    app_id: str | None = Field(default=None, alias="AppId")
    target: str | None = Field(default=None, description="로컬 경로 또는 URL")
    prepare_only: bool = Field(
        default=False,
        alias="PREPARE_ONLY",
        description="IRX만 생성하고 제출하지 않음",
    )
    report_format: str | None = Field(default=None, alias="reportFormat")
    email_notification: bool | None = Field(default=None, alias="EnableMailNotification")
    personal: bool | None = Field(default=None, alias="Personal")
    comment: str | None = Field(default=None, alias="Comment")
    scan_id: str | None = Field(default=None, alias="ScanId", description="재스캔 대상 ID")
    file_id: str | None = Field(default=None, alias="FileId")
    fully_automatic: bool | None = Field(default=None, alias="FullyAutomatic")

    # ---- 작업형(ASE) DAST ----
    template_id: str | None = Field(default=None, alias="templateId")
    test_policy_id: str | None = Field(default=None, alias="testPolicyId")
    folder: str | None = None
    application: str | None = None
    description: str | None = None
    contact: str | None = None
    starting_url: str | None = Field(default=None, alias="startingURL")
    agent_server: str | None = Field(default=None, alias="agentServer")
    login_type: str | None = Field(default=None, alias="loginType", description="Automatic / Manual")
    user_name: str | None = Field(default=None, alias="userName")
    password: str | None = None
    traffic_file: str | None = Field(default=None, alias="trafficFile")
    explore_data: str | None = Field(default=None, alias="exploreData")
    scan_type: str | None = Field(default=None, alias="scanType", description="Full Scan / Test Only / Postman Collection")
    test_optimization: str | None = Field(default=None, alias="testOptimization")
    postman_collection_file: str | None = Field(default=None, alias="postmanCollectionFile")
    environmental_variables_file: str | None = Field(default=None, alias="environmentalVariablesFile")
    global_variables_file: str | None = Field(default=None, alias="globalVariablesFile")
    additional_files: str | None = Field(default=None, alias="additionalFiles")
    additional_domains: str | None = Field(default=None, alias="additionalDomains")

    @classmethod
    def from_params(cls, params: dict[str, Any]) -> "ScanProperties":
        """문자열 키 설정 맵에서 생성한다."""
        return cls.model_validate(params)

    def to_params(self) -> dict[str, str]:
        """백엔드 요청 파라미터 맵으로 변환한다.

        클라이언트 전용 필드와 None 값은 제외하고 bool은 "true"/"false"로 바꾼다.
        """
        raw = self.model_dump(by_alias=True, exclude_none=True, exclude=_CLIENT_ONLY_FIELDS)
        params: dict[str, str] = {}
        for key, value in raw.items():
            if isinstance(value, bool):
                params[key] = "true" if value else "false"
            else:
                params[key] = str(value)
        return params

    def copy_for_engine(self) -> "ScanProperties":
        """다른 엔진 제출에 쓸 독립 사본 (FileId 등 제출 중 주입 값이 섞이지 않도록)."""
        return self.model_copy(deep=True)

"""SDK 설정 — pydantic-settings 기반 환경변수 관리"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """SDK 전역 설정. 환경변수 또는 .env 파일에서 로드."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ---- 서버 연결 ----
    APPSCAN_SERVER_URL: str = Field(
        default="https://cloud.appscan.com",
        description="스캔 서비스 기본 URL",
        examples=["https://cloud.appscan.com", "https://ase.example.com:9443/ase"],
    )
    APPSCAN_ACCEPT_INVALID_CERTS: bool = Field(
        default=False,
        description="자체 서명 인증서 허용 여부 (사내 ASE 서버용)",
    )
    APPSCAN_PROXY: str | None = Field(default=None, description="HTTP 프록시 URL")

    # ---- 정적 분석 클라이언트 ----
    APPSCAN_CLIENT_HOME: str | None = Field(
        default=None,
        description="IRX 생성용 정적 분석 클라이언트 설치 경로 (bin/appscan.sh 포함)",
    )

    # ---- HTTP ----
    HTTP_TIMEOUT_SECONDS: float = Field(default=60.0, gt=0)

    # ---- 리포트 ----
    DEFAULT_REPORT_FORMAT: str = Field(default="html", pattern="^(html|pdf|xml|csv)$")
    REPORT_POLL_INTERVAL_SECONDS: float = Field(default=5.0, ge=0)
    REPORT_MAX_WAIT_SECONDS: float = Field(default=600.0, gt=0)

    # ---- 로깅 ----
    LOG_LEVEL: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")

    @field_validator("APPSCAN_SERVER_URL", mode="before")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        """트레일링 슬래시 정규화 (API 경로 결합 시 // 방지)"""
        if isinstance(value, str):
            return value.rstrip("/")
        return value


@lru_cache
def get_settings() -> Settings:
    """설정 싱글톤 반환 (최초 호출 시 한 번만 로드)"""
    return Settings()

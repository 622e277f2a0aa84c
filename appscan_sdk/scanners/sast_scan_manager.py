"""SAST 스캔 매니저 — 작업 디렉토리 기준으로 스캔 변형을 고르고 실행한다.

변형 선택 우선순위 (prepare/analyze 호출마다 판단):
    1. open_source_only                       → SCA
    2. static_analysis_only 또는 SCA 권한 없음 → SAST
    3. 그 외                                  → SAST + SCA
"""

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any

from appscan_sdk.errors import AppScanException, InvalidTargetException
from appscan_sdk.models.scan_properties import ScanProperties
from appscan_sdk.progress import Progress
from appscan_sdk.scanners.sa_client import IrxGenerator, IrxOptions
from appscan_sdk.scanners.sast_sca_scan import SASTSCAScan
from appscan_sdk.scanners.sast_scan import SASTScan
from appscan_sdk.scanners.targets import SASTTarget
from appscan_sdk.scanners.sca_scan import SCAScan
from appscan_sdk.services.scan_service_provider import ScanServiceProvider
from appscan_sdk.services.service_util import has_sca_entitlement

logger = logging.getLogger(__name__)


class SASTScanManager:
    """작업 디렉토리 하나에 대한 IRX 준비 및 분석 실행기."""

    def __init__(
        self,
        working_directory: str | Path,
        irx_generator: IrxGenerator | None = None,
    ) -> None:
        """초기화.

        Args:
            working_directory: 스캔 대상 작업 디렉토리
            irx_generator: IRX 생성기 (기본: 스캔마다 SAClient)
        """
        self._working_directory = Path(working_directory)
        self._irx_generator = irx_generator
        self._scan: SASTScan | None = None
        self._targets: list[SASTTarget] = []
        self.open_source_only = False
        self.static_analysis_only = False
        self.source_code_only = False
        self.third_party_scanning = False
        self.secrets_scanning_only = False
        self._secrets_disabled = False
        self._secrets_enabled = False

    @property
    def scan(self) -> SASTScan | None:
        return self._scan

    @property
    def scan_id(self) -> str | None:
        """마지막 스캔의 ID. 제출 전이면 None."""
        return self._scan.scan_id if self._scan is not None else None

    @property
    def targets(self) -> list[SASTTarget]:
        return list(self._targets)

    # 켜기/끄기는 서로 배타적이며, 둘 다 설정하지 않으면 클라이언트 기본값을 따른다
    @property
    def secrets_scanning_enabled(self) -> bool:
        return self._secrets_enabled

    @secrets_scanning_enabled.setter
    def secrets_scanning_enabled(self, value: bool) -> None:
        self._secrets_enabled = value
        self._secrets_disabled = not value

    @property
    def secrets_scanning_disabled(self) -> bool:
        return self._secrets_disabled

    @secrets_scanning_disabled.setter
    def secrets_scanning_disabled(self, value: bool) -> None:
        self._secrets_disabled = value
        self._secrets_enabled = not value

    def add_scan_target(self, target: SASTTarget) -> None:
        """정적 분석 대상을 추가한다. SASTTarget이 아니면 무시한다."""
        if isinstance(target, SASTTarget):
            self._targets.append(target)
        else:
            logger.warning(f"[SASTScanManager] 지원하지 않는 대상 무시: {target!r}")

    def prepare(self, progress: Progress, properties: ScanProperties | dict[str, Any]) -> None:
        """작업 디렉토리에서 IRX만 생성한다 (제출하지 않음)."""
        props = self._to_properties(properties)
        props.target = str(self._working_directory)
        props.prepare_only = True
        if not props.scan_name:
            props.scan_name = self._default_scan_name()
        self._run(progress, props, None)

    def analyze(
        self,
        progress: Progress,
        properties: ScanProperties | dict[str, Any],
        provider: ScanServiceProvider,
    ) -> None:
        """스캔을 제출한다. 직전 prepare로 만든 IRX가 있으면 재사용한다.

        Raises:
            InvalidTargetException: 대상이 없을 때
            ScannerException: 제출 실패 시
        """
        props = self._to_properties(properties)
        if self._scan is not None and self._scan.irx is not None:
            props.target = str(self._scan.irx)
        else:
            props.target = str(self._working_directory)
        props.prepare_only = False
        if not props.scan_name:
            props.scan_name = self._default_scan_name()
        self._run(progress, props, provider)

    def get_scan_results(self, destination: Path, fmt: str | None = None) -> bool:
        """활성 스캔의 보고서를 destination에 저장한다.

        Raises:
            AppScanException: 제출된 스캔이 없을 때
        """
        results = self._scan.get_results_provider() if self._scan is not None else None
        if results is None:
            raise AppScanException("조회할 스캔 결과가 없습니다. 먼저 analyze()로 스캔을 제출하세요.")
        return results.get_results_file(destination, fmt)

    # ------------------------------------------------------------------
    # 내부
    # ------------------------------------------------------------------

    @staticmethod
    def _to_properties(properties: ScanProperties | dict[str, Any]) -> ScanProperties:
        if isinstance(properties, ScanProperties):
            return properties.model_copy(deep=True)
        return ScanProperties.from_params(properties)

    def _default_scan_name(self) -> str:
        timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        return f"{self._working_directory.name}_{timestamp}"

    def _irx_options(self) -> IrxOptions:
        return IrxOptions(
            open_source_only=self.open_source_only,
            source_code_only=self.source_code_only,
            static_analysis_only=self.static_analysis_only,
            third_party_scanning=self.third_party_scanning,
            secrets_scanning_disabled=self._secrets_disabled,
            secrets_scanning_enabled=self._secrets_enabled,
            secrets_scanning_only=self.secrets_scanning_only,
            targets=tuple(t.target for t in self._targets),
        )

    def _run(
        self,
        progress: Progress,
        props: ScanProperties,
        provider: ScanServiceProvider | None,
    ) -> None:
        target = Path(props.target)
        if not target.exists() or not os.access(target, os.R_OK):
            raise InvalidTargetException(props.target)
        for extra in self._targets:
            if extra.target_file is not None and not extra.target_file.exists():
                raise InvalidTargetException(extra.target)
        self._scan = self._create_scan(props, progress, provider)
        logger.info(
            f"[SASTScanManager] {type(self._scan).__name__} 실행: target={props.target}"
        )
        self._scan.run()

    def _create_scan(
        self,
        props: ScanProperties,
        progress: Progress,
        provider: ScanServiceProvider | None,
    ) -> SASTScan:
        options = self._irx_options()
        if self.open_source_only:
            return SCAScan(props, progress, provider, self._irx_generator, options)
        if self.static_analysis_only or (
            provider is not None and not has_sca_entitlement(provider.authentication_provider)
        ):
            return SASTScan(props, progress, provider, self._irx_generator, options)
        return SASTSCAScan(props, progress, provider, self._irx_generator, options)

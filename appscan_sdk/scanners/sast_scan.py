"""정적 분석(SAST) 스캔

대상이 .irx 파일이면 그대로 쓰고, 아니면 IRX 생성기로 만든 뒤
업로드 → 스캔 생성/실행 순서로 제출한다.
"""

import logging
from pathlib import Path
from typing import Any

from appscan_sdk.constants import IRX_EXTENSION
from appscan_sdk.errors import ScannerException
from appscan_sdk.models.scan_properties import ScanProperties
from appscan_sdk.models.scan_type import ScanType
from appscan_sdk.progress import Progress
from appscan_sdk.scanners.sa_client import IrxGenerator, IrxOptions, SAClient
from appscan_sdk.scanners.scan import Scan, ScanState
from appscan_sdk.services.scan_service_provider import ScanServiceProvider

logger = logging.getLogger(__name__)


class SASTScan(Scan):
    """IRX 업로드 기반 스캔."""

    engine_type = ScanType.STATIC_ANALYZER

    def __init__(
        self,
        properties: ScanProperties | dict[str, Any],
        progress: Progress,
        provider: ScanServiceProvider | None,
        irx_generator: IrxGenerator | None = None,
        irx_options: IrxOptions | None = None,
    ) -> None:
        super().__init__(properties, progress, provider)
        self._irx_generator = irx_generator or SAClient(progress)
        self._irx_options = irx_options or IrxOptions()
        self._irx: Path | None = None

    @property
    def irx(self) -> Path | None:
        """생성(또는 지정)된 IRX 파일 경로"""
        return self._irx

    def run(self) -> None:
        target = self._resolve_target()
        self._irx = self._prepare_irx(target)

        if self._properties.prepare_only:
            self.state = ScanState.COMPLETED
            logger.info(f"[{type(self).__name__}] IRX만 생성하고 종료: {self._irx}")
            return

        self._upload_and_submit()

    def _prepare_irx(self, target: Path) -> Path:
        if target.is_file() and target.suffix.lower() == IRX_EXTENSION:
            return target
        scan_name = self._properties.scan_name or target.stem
        try:
            return self._irx_generator.generate(target, scan_name, self._irx_options)
        except ScannerException:
            self.state = ScanState.FAILED
            raise

    def _upload_and_submit(self) -> None:
        provider = self._require_provider()
        file_id = provider.submit_file(self._irx)
        if file_id is None:
            self._fail(f"IRX 파일 업로드에 실패했습니다: {self._irx.name}")
        self._properties.file_id = file_id
        self._submit()

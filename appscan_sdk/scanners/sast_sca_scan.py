"""SAST + SCA 결합 스캔

SAST를 끝까지 제출한 뒤 같은 대상으로 SCA를 제출한다.
SCA 자식은 설정 사본을 쓰므로 SAST 제출 중 주입된 FileId가 섞이지 않는다.
IRX만 생성하는 경우 SAST IRX 하나만 만든다.
"""

from typing import Any

from appscan_sdk.models.scan_properties import ScanProperties
from appscan_sdk.models.scan_type import ScanType
from appscan_sdk.progress import Progress
from appscan_sdk.results.factory import get_combined_results_provider, get_results_provider
from appscan_sdk.results.results_provider import ResultsProvider
from appscan_sdk.scanners.sa_client import IrxGenerator, IrxOptions
from appscan_sdk.scanners.sast_scan import SASTScan
from appscan_sdk.scanners.sca_scan import SCAScan
from appscan_sdk.services.scan_service_provider import ScanServiceProvider


class SASTSCAScan(SASTScan):
    """SAST 스캔 + SCA 자식 스캔."""

    def __init__(
        self,
        properties: ScanProperties | dict[str, Any],
        progress: Progress,
        provider: ScanServiceProvider | None,
        irx_generator: IrxGenerator | None = None,
        irx_options: IrxOptions | None = None,
    ) -> None:
        super().__init__(properties, progress, provider, irx_generator, irx_options)
        self._sca_scan = SCAScan(
            self._properties.copy_for_engine(),
            progress,
            provider,
            self._irx_generator,
            self._irx_options,
        )
        self.sast_scan_id: str | None = None
        self.sca_scan_id: str | None = None

    @property
    def scan_type(self) -> ScanType:
        return ScanType.COMBINED_STATIC_COMPOSITION

    @property
    def sca_scan(self) -> SCAScan:
        return self._sca_scan

    def run(self) -> None:
        super().run()
        if self._properties.prepare_only:
            return

        self.sast_scan_id = self.scan_id
        self._sca_scan.run()
        self.sca_scan_id = self._sca_scan.scan_id

    def get_results_provider(self) -> ResultsProvider | None:
        """SAST/SCA 결과를 합친 결과 제공자. 둘 다 제출되기 전이면 None."""
        if self._results_provider is not None:
            return self._results_provider
        if self.sast_scan_id is None or self.sca_scan_id is None or self._provider is None:
            return None

        sast_results = get_results_provider(
            self.sast_scan_id, ScanType.STATIC_ANALYZER, self._provider, self._progress
        )
        sca_results = self._sca_scan.get_results_provider()
        self._results_provider = get_combined_results_provider(
            sast_results, sca_results, self.report_format
        )
        return self._results_provider

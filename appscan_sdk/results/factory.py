"""결과 제공자 팩토리

서비스 제공자의 방언에 맞는 단일 엔진 결과 제공자를 만든다.
"""

from appscan_sdk.models.scan_type import ScanType
from appscan_sdk.progress import Progress
from appscan_sdk.results.combined_results_provider import CombinedResultsProvider
from appscan_sdk.results.results_provider import ResultsProvider
from appscan_sdk.services.scan_service_provider import ScanServiceProvider


def get_results_provider(
    scan_id: str,
    scan_type: ScanType | str,
    provider: ScanServiceProvider,
    progress: Progress,
    report_format: str | None = None,
) -> ResultsProvider:
    """방언에 맞는 결과 제공자를 반환한다.

    Raises:
        ValueError: 지원하지 않는 방언인 경우
    """
    match provider.dialect:
        case "cloud":
            from appscan_sdk.results.cloud_results_provider import CloudResultsProvider
            results: ResultsProvider = CloudResultsProvider(scan_id, scan_type, provider, progress)
        case "ase":
            from appscan_sdk.results.ase_results_provider import ASEResultsProvider
            results = ASEResultsProvider(scan_id, scan_type, provider, progress)
        case _:
            raise ValueError(f"지원하지 않는 백엔드 방언: {provider.dialect}")

    if report_format:
        results.report_format = report_format
    return results


def get_combined_results_provider(
    first: ResultsProvider,
    second: ResultsProvider,
    report_format: str | None = None,
) -> CombinedResultsProvider:
    """두 결과 제공자를 결합한다. report_format은 양쪽 자식에 전파된다."""
    combined = CombinedResultsProvider(first, second)
    if report_format:
        combined.report_format = report_format
    return combined

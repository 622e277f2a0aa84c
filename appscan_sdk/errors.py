"""SDK 예외 계층

- AppScanException: 도메인 예외 최상위
- InvalidTargetException: 로컬 대상이 없거나 읽을 수 없음 (재시도 불가)
- ScannerException: 업로드/생성/실행 실패 (백엔드 사유 포함)
- ProviderOperationNotSupported: 작업형(ASE) 백엔드에 없는 연산 호출
"""


class AppScanException(Exception):
    """스캔 SDK 도메인 예외."""


class InvalidTargetException(AppScanException):
    """스캔 대상이 존재하지 않거나 유효하지 않을 때 발생한다."""

    def __init__(self, target: str | None) -> None:
        self.target = target
        super().__init__(f"유효하지 않은 스캔 대상: {target}")


class ScannerException(AppScanException):
    """스캔 제출 과정에서 백엔드가 요청을 거부했을 때 발생한다."""

    def __init__(self, message: str, detail: str | None = None) -> None:
        self.detail = detail
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class ProviderOperationNotSupported(AppScanException, NotImplementedError):
    """서비스 제공자가 지원하지 않는 연산."""

    def __init__(self, provider: str, operation: str) -> None:
        self.provider = provider
        self.operation = operation
        super().__init__(f"{provider}은(는) {operation} 연산을 지원하지 않습니다")

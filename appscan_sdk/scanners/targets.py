"""정적 분석 추가 대상

SASTScanManager.add_scan_target()으로 등록하며,
prepare 명령의 위치 인자로 전달된다.
"""

from abc import ABC, abstractmethod
from pathlib import Path


class SASTTarget(ABC):
    """정적 분석 대상 인터페이스."""

    @property
    @abstractmethod
    def target(self) -> str:
        """prepare 명령에 넘길 대상 문자열"""

    @property
    def target_file(self) -> Path | None:
        """로컬 파일 대상이면 그 경로, 아니면 None"""
        return None


class JEETarget(SASTTarget):
    """Java EE 아카이브(.war/.ear/.jar) 또는 디렉토리 대상."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def target(self) -> str:
        return str(self._path)

    @property
    def target_file(self) -> Path | None:
        return self._path


class UrlTarget(SASTTarget):
    """URL 대상. 로컬 파일이 없다."""

    def __init__(self, url: str) -> None:
        self._url = url

    @property
    def target(self) -> str:
        return self._url

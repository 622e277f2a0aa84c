"""스캔 엔진 유형"""

from enum import Enum


class ScanType(str, Enum):
    """백엔드 스캔 엔진 유형.

    값은 결과 제공자의 get_type()이 돌려주는 표시 이름이다.
    """

    STATIC_ANALYZER = "Static Analyzer"
    DYNAMIC_ANALYZER = "Dynamic Analyzer"
    SOFTWARE_COMPOSITION_ANALYZER = "Software Composition Analyzer"
    COMBINED_STATIC_COMPOSITION = "Static Analyzer_Software Composition Analyzer"
    POSTMAN_COLLECTION = "Postman Collection"

    @property
    def short_form(self) -> str:
        """API 경로에 쓰이는 약칭 (Sast / Dast / Sca)"""
        return _SHORT_FORMS.get(self, self.value)

    @property
    def technology(self) -> str:
        """테넌트 ActiveTechnologies 에 나타나는 기술 이름"""
        return _TECHNOLOGIES.get(self, self.value)

    @classmethod
    def from_value(cls, value: str) -> "ScanType | None":
        """표시 이름, 약칭, 기술 이름 어느 쪽이든 받아 유형을 찾는다 (대소문자 무시)."""
        needle = (value or "").strip().lower()
        for scan_type in cls:
            candidates = {
                scan_type.value.lower(),
                scan_type.short_form.lower(),
                scan_type.technology.lower(),
            }
            if needle in candidates:
                return scan_type
        return None


_SHORT_FORMS = {
    ScanType.STATIC_ANALYZER: "Sast",
    ScanType.DYNAMIC_ANALYZER: "Dast",
    ScanType.SOFTWARE_COMPOSITION_ANALYZER: "Sca",
}

_TECHNOLOGIES = {
    ScanType.STATIC_ANALYZER: "StaticAnalyzer",
    ScanType.DYNAMIC_ANALYZER: "DynamicAnalyzer",
    ScanType.SOFTWARE_COMPOSITION_ANALYZER: "SoftwareCompositionAnalyzer",
}

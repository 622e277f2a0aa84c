"""심각도별 취약점 건수"""

from dataclasses import dataclass, fields
from typing import Any, Iterable

# 소문자 심각도 이름 → FindingCounts 필드
_SEVERITY_BUCKETS = {
    "critical": "critical",
    "high": "high",
    "medium": "medium",
    "low": "low",
    "informational": "info",
    "information": "info",
    "info": "info",
}


@dataclass(frozen=True)
class FindingCounts:
    """심각도 버킷별 건수. total은 인식하지 못한 심각도까지 포함한다."""

    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0
    info: int = 0
    total: int = 0

    def __post_init__(self) -> None:
        for f in fields(self):
            if getattr(self, f.name) < 0:
                raise ValueError(f"건수는 음수일 수 없습니다: {f.name}={getattr(self, f.name)}")

    def __add__(self, other: "FindingCounts") -> "FindingCounts":
        if not isinstance(other, FindingCounts):
            return NotImplemented
        return FindingCounts(**{
            f.name: getattr(self, f.name) + getattr(other, f.name) for f in fields(self)
        })

    @classmethod
    def from_severity_items(
        cls,
        items: Iterable[dict[str, Any]],
        severity_key: str = "Severity",
        count_key: str = "Count",
    ) -> "FindingCounts":
        """[{Severity, Count}] 문서를 버킷별로 집계한다.

        같은 심각도가 여러 번 나오면 (예: Status별 그룹) 합산한다.
        알 수 없는 심각도는 total에만 더한다.

        Raises:
            KeyError, ValueError, TypeError: 문서 형식이 잘못된 경우
        """
        buckets = {"critical": 0, "high": 0, "medium": 0, "low": 0, "info": 0}
        total = 0
        for item in items:
            count = int(item[count_key])
            bucket = _SEVERITY_BUCKETS.get(str(item[severity_key]).lower())
            if bucket is not None:
                buckets[bucket] += count
            total += count
        return cls(total=total, **buckets)

"""정규화된 스캔 상태"""

from enum import Enum


class Status(str, Enum):
    """백엔드 상태 문자열을 정규화한 상태 값.

    종료 상태: Ready / Failed / Unstable
    Unstable은 결합 결과 제공자에서만 나온다.
    """

    IN_QUEUE = "InQueue"
    RUNNING = "Running"
    PAUSING = "Pausing"
    PAUSED = "Paused"
    READY = "Ready"
    FAILED = "Failed"
    UNSTABLE = "Unstable"
    UNKNOWN = "Unknown"

    @property
    def is_terminal(self) -> bool:
        return self in (Status.READY, Status.FAILED, Status.UNSTABLE)

    @classmethod
    def parse(cls, value: str | None) -> "Status":
        """백엔드 상태 문자열을 대소문자 구분 없이 변환한다.

        인식할 수 없거나 빈 값은 Unknown.
        """
        if not value:
            return cls.UNKNOWN
        needle = value.strip().lower()
        for status in cls:
            if status.value.lower() == needle:
                return status
        return cls.UNKNOWN

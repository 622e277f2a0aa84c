"""진행 상황 싱크 — 사용자에게 보여줄 상태 메시지 전달 계약

모든 컴포넌트는 생성 시 Progress를 명시적으로 주입받는다.
전달할 곳이 없으면 DefaultProgress()를 기본값으로 넘긴다.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Literal

Severity = Literal["INFO", "ERROR"]

INFO: Severity = "INFO"
ERROR: Severity = "ERROR"


@dataclass(frozen=True)
class Message:
    """진행 메시지 (심각도 + 사람이 읽을 수 있는 텍스트)"""

    severity: Severity
    text: str

    @property
    def is_error(self) -> bool:
        return self.severity == ERROR


class Progress(ABC):
    """진행 상황 싱크 인터페이스. 반환값은 사용하지 않는다."""

    @abstractmethod
    def set_status(self, message: Message, error: BaseException | None = None) -> None:
        """상태 메시지를 전달한다.

        Args:
            message: 전달할 메시지
            error: 메시지의 원인이 된 예외 (선택)
        """


class DefaultProgress(Progress):
    """아무 것도 하지 않는 기본 진행 싱크."""

    def set_status(self, message: Message, error: BaseException | None = None) -> None:
        return None


class LoggingProgress(Progress):
    """진행 메시지를 표준 logging으로 전달하는 싱크."""

    def __init__(self, logger_name: str = "appscan_sdk.progress") -> None:
        self._logger = logging.getLogger(logger_name)

    def set_status(self, message: Message, error: BaseException | None = None) -> None:
        if message.is_error:
            self._logger.error(message.text, exc_info=error)
        else:
            self._logger.info(message.text)


class RecordingProgress(Progress):
    """받은 메시지를 순서대로 보관하는 싱크 (CLI 요약 출력, 테스트 검증용)."""

    def __init__(self) -> None:
        self.messages: list[Message] = []

    def set_status(self, message: Message, error: BaseException | None = None) -> None:
        self.messages.append(message)

    @property
    def errors(self) -> list[str]:
        return [m.text for m in self.messages if m.is_error]

    @property
    def last(self) -> Message | None:
        return self.messages[-1] if self.messages else None

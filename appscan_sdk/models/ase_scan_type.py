"""작업형(ASE) DAST 스캔 하위 유형 ↔ 코드 매핑

ASE scantype API는 이름 대신 숫자 코드를 받는다.
Postman Collection 코드는 과거 버전마다 달랐으므로("", "4") 최신 값 "4"를 사용한다.
"""

from enum import Enum

FULL_SCAN = "Full Scan"
TEST_ONLY = "Test Only"
POSTMAN_COLLECTION = "Postman Collection"


class ASEScanType(Enum):
    """(표시 이름, 코드) 쌍"""

    FULL_SCAN = (FULL_SCAN, "1")
    TEST_ONLY = (TEST_ONLY, "3")
    POSTMAN_COLLECTION = (POSTMAN_COLLECTION, "4")

    @property
    def type_name(self) -> str:
        return self.value[0]

    @property
    def code(self) -> str:
        return self.value[1]

    @classmethod
    def scan_type_code(cls, type_name: str | None) -> str | None:
        """유형 이름 → 코드 (대소문자 무시). 알 수 없는 이름은 그대로 돌려준다."""
        for scan_type in cls:
            if type_name is not None and scan_type.type_name.lower() == type_name.lower():
                return scan_type.code
        return type_name

    @classmethod
    def scan_type_name(cls, code: str | None) -> str:
        """코드 → 유형 이름. 알 수 없는 코드는 빈 문자열."""
        for scan_type in cls:
            if scan_type.code == code:
                return scan_type.type_name
        return ""

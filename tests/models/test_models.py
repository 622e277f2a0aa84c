"""도메인 모델 단위 테스트

테스트 범위:
- FindingCounts: 심각도 집계, 합산, 음수 거부
- Status: 문자열 파싱, 종료 상태 판정
- ScanType: 약칭/기술 이름 변환
- ASEScanType: 이름 ↔ 코드 매핑
- ScanProperties: 요청 파라미터 변환, 엔진별 사본
"""

import pytest

from appscan_sdk.models import ASEScanType, FindingCounts, ScanProperties, ScanType, Status


# ──────────────────────────────────────────────────────────────
# FindingCounts
# ──────────────────────────────────────────────────────────────

def test_finding_counts_aggregates_known_severities():
    """인식하는 심각도는 버킷에, 모든 항목은 total에 더해진다.

    Given: Critical 1, High 3, Medium 2, Low 1, Informational 4
    When: from_severity_items() 호출
    Then: 각 버킷 값과 total = 합계
    """
    # Arrange
    items = [
        {"Severity": "Critical", "Count": 1},
        {"Severity": "High", "Count": 3},
        {"Severity": "Medium", "Count": 2},
        {"Severity": "Low", "Count": 1},
        {"Severity": "Informational", "Count": 4},
    ]

    # Act
    counts = FindingCounts.from_severity_items(items)

    # Assert
    assert (counts.critical, counts.high, counts.medium, counts.low, counts.info) == (1, 3, 2, 1, 4)
    assert counts.total == 11, "total은 모든 버킷의 합이어야 한다"


def test_finding_counts_unknown_severity_only_in_total():
    """알 수 없는 심각도는 total에만 더해진다."""
    counts = FindingCounts.from_severity_items([
        {"Severity": "High", "Count": 2},
        {"Severity": "Undetermined", "Count": 5},
    ])

    assert counts.high == 2
    assert counts.total == 7
    assert counts.critical + counts.medium + counts.low + counts.info == 0


def test_finding_counts_sums_repeated_severity_groups():
    """(Status, Severity) 그룹 응답처럼 같은 심각도가 반복되면 합산한다."""
    counts = FindingCounts.from_severity_items([
        {"Status": "Open", "Severity": "high", "Count": 2},
        {"Status": "Reopened", "Severity": "HIGH", "Count": 1},
    ])

    assert counts.high == 3
    assert counts.total == 3


def test_finding_counts_empty_items_are_zero():
    """빈 목록이면 모든 값이 0이다."""
    assert FindingCounts.from_severity_items([]) == FindingCounts()


def test_finding_counts_add_is_fieldwise():
    """두 FindingCounts의 합은 필드별 합이다."""
    left = FindingCounts(critical=1, high=2, total=3)
    right = FindingCounts(high=1, low=4, total=5)

    assert left + right == FindingCounts(critical=1, high=3, low=4, total=8)


def test_finding_counts_rejects_negative():
    """음수 건수는 ValueError."""
    with pytest.raises(ValueError):
        FindingCounts(high=-1)


def test_finding_counts_malformed_item_raises():
    """Count가 없는 항목은 KeyError."""
    with pytest.raises(KeyError):
        FindingCounts.from_severity_items([{"Severity": "High"}])


# ──────────────────────────────────────────────────────────────
# Status
# ──────────────────────────────────────────────────────────────

@pytest.mark.parametrize("raw, expected", [
    ("Ready", Status.READY),
    ("ready", Status.READY),
    ("InQueue", Status.IN_QUEUE),
    ("FAILED", Status.FAILED),
    ("Paused", Status.PAUSED),
    ("", Status.UNKNOWN),
    (None, Status.UNKNOWN),
    ("Exploding", Status.UNKNOWN),
])
def test_status_parse(raw, expected):
    """대소문자 무시 파싱, 인식 불가/빈 값은 Unknown."""
    assert Status.parse(raw) is expected


def test_status_terminal_values():
    """종료 상태는 Ready / Failed / Unstable 뿐이다."""
    terminal = {status for status in Status if status.is_terminal}
    assert terminal == {Status.READY, Status.FAILED, Status.UNSTABLE}


# ──────────────────────────────────────────────────────────────
# ScanType
# ──────────────────────────────────────────────────────────────

def test_scan_type_short_form_and_technology():
    """엔진별 약칭과 기술 이름."""
    assert ScanType.STATIC_ANALYZER.short_form == "Sast"
    assert ScanType.SOFTWARE_COMPOSITION_ANALYZER.short_form == "Sca"
    assert ScanType.DYNAMIC_ANALYZER.technology == "DynamicAnalyzer"


@pytest.mark.parametrize("value", ["Static Analyzer", "sast", "StaticAnalyzer"])
def test_scan_type_from_value_accepts_any_name(value):
    """표시 이름, 약칭, 기술 이름 어느 쪽이든 찾는다."""
    assert ScanType.from_value(value) is ScanType.STATIC_ANALYZER


def test_scan_type_from_value_unknown_is_none():
    assert ScanType.from_value("Mobile Analyzer") is None


# ──────────────────────────────────────────────────────────────
# ASEScanType
# ──────────────────────────────────────────────────────────────

@pytest.mark.parametrize("name", ["Full Scan", "Test Only", "Postman Collection"])
def test_ase_scan_type_round_trip(name):
    """이름 → 코드 → 이름이 원래 이름으로 돌아온다."""
    code = ASEScanType.scan_type_code(name)

    assert ASEScanType.scan_type_name(code) == name


def test_ase_scan_type_codes():
    assert ASEScanType.scan_type_code("Full Scan") == "1"
    assert ASEScanType.scan_type_code("full scan") == "1", "이름 비교는 대소문자를 무시해야 한다"
    assert ASEScanType.scan_type_code("Test Only") == "3"
    assert ASEScanType.scan_type_code("Postman Collection") == "4"


def test_ase_scan_type_unknown_values():
    """알 수 없는 코드는 빈 문자열, 알 수 없는 이름은 그대로."""
    assert ASEScanType.scan_type_name("99") == ""
    assert ASEScanType.scan_type_code("Quick Scan") == "Quick Scan"


# ──────────────────────────────────────────────────────────────
# ScanProperties
# ──────────────────────────────────────────────────────────────

def test_scan_properties_to_params_uses_wire_keys():
    """alias(와이어 키)로 변환하고 클라이언트 전용 필드와 None은 제외한다.

    Given: target / PREPARE_ONLY / reportFormat 포함 설정
    When: to_params() 호출
    Then: 요청 파라미터에는 와이어 키만 남고 bool은 "true"/"false"
    """
    # Arrange
    props = ScanProperties.from_params({
        "ScanName": "demo",
        "AppId": "app-1",
        "target": "/tmp/src",
        "PREPARE_ONLY": True,
        "reportFormat": "pdf",
        "EnableMailNotification": False,
    })

    # Act
    params = props.to_params()

    # Assert
    assert params == {
        "ScanName": "demo",
        "AppId": "app-1",
        "EnableMailNotification": "false",
    }


def test_scan_properties_passes_unknown_keys_through():
    """정의되지 않은 키도 요청 파라미터에 그대로 실린다."""
    props = ScanProperties.from_params({"ScanName": "demo", "ClientType": "cli-1.0"})

    assert props.to_params()["ClientType"] == "cli-1.0"


def test_scan_properties_accepts_field_names():
    """필드 이름으로도 생성할 수 있다."""
    props = ScanProperties(scan_name="demo", starting_url="https://app.example.com")

    assert props.to_params() == {"ScanName": "demo", "startingURL": "https://app.example.com"}


def test_scan_properties_copy_for_engine_is_independent():
    """엔진별 사본을 수정해도 원본은 바뀌지 않는다."""
    original = ScanProperties(scan_name="demo", target="/tmp/src")

    copy = original.copy_for_engine()
    copy.file_id = "file-sca"

    assert original.file_id is None
    assert copy.target == "/tmp/src"

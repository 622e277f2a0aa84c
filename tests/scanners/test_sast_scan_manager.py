"""SASTScanManager 단위 테스트

테스트 범위:
- 변형 선택 우선순위 (open_source_only > static_analysis_only / SCA 권한 없음 > 결합)
- prepare(): IRX만 생성, 기본 스캔 이름
- analyze(): 직전 IRX 재사용, 대상 부재 시 네트워크 호출 없음
- get_scan_results(): 제출 전 호출은 예외
- 서드파티/시크릿 스위치, add_scan_target()
"""

import os
import re
from unittest.mock import MagicMock, patch

import pytest

from appscan_sdk.errors import AppScanException, InvalidTargetException
from appscan_sdk.scanners.sa_client import IrxGenerator, IrxOptions
from appscan_sdk.scanners.sast_sca_scan import SASTSCAScan
from appscan_sdk.scanners.sast_scan import SASTScan
from appscan_sdk.scanners.sast_scan_manager import SASTScanManager
from appscan_sdk.scanners.sca_scan import SCAScan
from appscan_sdk.scanners.scan import ScanState
from appscan_sdk.scanners.targets import JEETarget, UrlTarget

ENTITLEMENT = "appscan_sdk.scanners.sast_scan_manager.has_sca_entitlement"


@pytest.fixture
def workdir(tmp_path):
    directory = tmp_path / "my-service"
    directory.mkdir()
    return directory


@pytest.fixture
def generator(workdir):
    mock = MagicMock(spec=IrxGenerator)
    irx = workdir / "generated.irx"
    irx.write_bytes(b"IRX")
    mock.generate.return_value = irx
    return mock


@pytest.fixture
def manager(workdir, generator):
    return SASTScanManager(workdir, generator)


@pytest.fixture
def submitting(http_client, make_response):
    """업로드/생성이 모두 성공하는 HttpClient 설정."""
    http_client.post_multipart.return_value = make_response(201, {"FileId": "file-1"})
    http_client.post.side_effect = [
        make_response(201, {"Id": "100"}),
        make_response(201, {"Id": "200"}),
    ]
    return http_client


# ──────────────────────────────────────────────────────────────
# 변형 선택
# ──────────────────────────────────────────────────────────────

def test_open_source_only_selects_sca(manager, progress, cloud_provider, submitting):
    """open_source_only가 켜지면 권한과 무관하게 SCA.

    Given: open_source_only=True, static_analysis_only=True
    When: analyze() 호출
    Then: SCAScan이 선택되고 권한 조회는 하지 않는다
    """
    # Arrange
    manager.open_source_only = True
    manager.static_analysis_only = True

    # Act
    with patch(ENTITLEMENT) as mock_entitlement:
        manager.analyze(progress, {"ScanName": "demo"}, cloud_provider)

    # Assert
    assert type(manager.scan) is SCAScan
    mock_entitlement.assert_not_called()
    assert manager.scan_id == "100"


def test_static_analysis_only_selects_sast(manager, progress, cloud_provider, submitting):
    manager.static_analysis_only = True

    with patch(ENTITLEMENT, return_value=True):
        manager.analyze(progress, {"ScanName": "demo"}, cloud_provider)

    assert type(manager.scan) is SASTScan


def test_no_sca_entitlement_selects_sast(manager, progress, cloud_provider, submitting):
    with patch(ENTITLEMENT, return_value=False) as mock_entitlement:
        manager.analyze(progress, {"ScanName": "demo"}, cloud_provider)

    assert type(manager.scan) is SASTScan
    mock_entitlement.assert_called_once_with(cloud_provider.authentication_provider)


def test_default_selects_combined(manager, progress, cloud_provider, submitting):
    with patch(ENTITLEMENT, return_value=True):
        manager.analyze(progress, {"ScanName": "demo"}, cloud_provider)

    assert type(manager.scan) is SASTSCAScan
    assert manager.scan.sca_scan_id == "200"


def test_flags_become_irx_options(manager, progress, generator):
    manager.source_code_only = True
    manager.static_analysis_only = True

    manager.prepare(progress, {"ScanName": "demo"})

    options = generator.generate.call_args.args[2]
    assert options == IrxOptions(source_code_only=True, static_analysis_only=True)


# ──────────────────────────────────────────────────────────────
# prepare()
# ──────────────────────────────────────────────────────────────

def test_prepare_generates_irx_only(manager, progress, workdir, generator, http_client):
    """prepare()는 작업 디렉토리에서 IRX만 만들고 제출하지 않는다."""
    manager.prepare(progress, {})

    assert manager.scan.state is ScanState.COMPLETED
    assert manager.scan.irx == workdir / "generated.irx"
    assert manager.scan_id is None
    assert generator.generate.call_args.args[0] == workdir.resolve()
    assert http_client.method_calls == []


def test_prepare_default_scan_name(manager, progress, generator):
    """이름이 없으면 <작업 디렉토리 이름>_<타임스탬프>."""
    manager.prepare(progress, {})

    scan_name = generator.generate.call_args.args[1]
    assert re.fullmatch(r"my-service_\d{4}-\d{2}-\d{2}_\d{2}-\d{2}-\d{2}", scan_name)


def test_prepare_keeps_given_name(manager, progress, generator):
    manager.prepare(progress, {"ScanName": "nightly"})

    assert generator.generate.call_args.args[1] == "nightly"


def test_prepare_does_not_mutate_caller_properties(manager, progress):
    from appscan_sdk.models import ScanProperties

    props = ScanProperties(scan_name="demo")

    manager.prepare(progress, props)

    assert props.target is None
    assert props.prepare_only is False


# ──────────────────────────────────────────────────────────────
# analyze()
# ──────────────────────────────────────────────────────────────

def test_analyze_reuses_prepared_irx(manager, progress, cloud_provider, submitting, generator, workdir):
    """직전 prepare()의 IRX를 대상으로 다시 생성하지 않고 업로드한다."""
    manager.static_analysis_only = True
    manager.prepare(progress, {"ScanName": "demo"})

    manager.analyze(progress, {"ScanName": "demo"}, cloud_provider)

    generator.generate.assert_called_once()
    assert manager.scan.target == str(workdir / "generated.irx")
    assert submitting.post_multipart.call_args.kwargs["files"] == [("uploadedFile", workdir / "generated.irx")]


def test_analyze_missing_workdir_makes_no_calls(tmp_path, progress, cloud_provider, http_client, generator):
    """작업 디렉토리가 없으면 권한 조회를 포함해 어떤 HTTP 호출도 하지 않는다."""
    manager = SASTScanManager(tmp_path / "gone", generator)

    with pytest.raises(InvalidTargetException):
        manager.analyze(progress, {"ScanName": "demo"}, cloud_provider)

    assert http_client.method_calls == []
    assert manager.scan is None


# ──────────────────────────────────────────────────────────────
# get_scan_results()
# ──────────────────────────────────────────────────────────────

def test_scan_results_without_scan_raises(manager, tmp_path):
    with pytest.raises(AppScanException):
        manager.get_scan_results(tmp_path / "report.html")


def test_scan_results_after_prepare_only_raises(manager, progress, tmp_path):
    manager.prepare(progress, {})

    with pytest.raises(AppScanException):
        manager.get_scan_results(tmp_path / "report.html")


def test_scan_results_delegates_to_results_provider(manager, progress, cloud_provider, submitting, tmp_path):
    manager.static_analysis_only = True
    manager.analyze(progress, {"ScanName": "demo"}, cloud_provider)
    results = MagicMock()
    results.get_results_file.return_value = True
    destination = tmp_path / "report.pdf"

    with patch.object(manager.scan, "get_results_provider", return_value=results):
        assert manager.get_scan_results(destination, "pdf") is True

    results.get_results_file.assert_called_once_with(destination, "pdf")


# ──────────────────────────────────────────────────────────────
# 추가 IRX 스위치 / 대상
# ──────────────────────────────────────────────────────────────

def test_extra_switches_become_irx_options(manager, progress, generator, tmp_path):
    """서드파티/시크릿 스위치와 추가 대상이 IRX 옵션으로 전달된다.

    Given: third_party_scanning, secrets_scanning_only, secrets_scanning_disabled,
           JEETarget(app.war) + UrlTarget
    When: prepare() 호출
    Then: 해당 필드가 켜진 IrxOptions, 대상은 추가 순서대로
    """
    # Arrange
    archive = tmp_path / "app.war"
    archive.write_bytes(b"WAR")
    manager.third_party_scanning = True
    manager.secrets_scanning_only = True
    manager.secrets_scanning_disabled = True
    manager.add_scan_target(JEETarget(archive))
    manager.add_scan_target(UrlTarget("https://app.example.com"))

    # Act
    manager.prepare(progress, {"ScanName": "demo"})

    # Assert
    options = generator.generate.call_args.args[2]
    assert options == IrxOptions(
        third_party_scanning=True,
        secrets_scanning_disabled=True,
        secrets_scanning_only=True,
        targets=(str(archive), "https://app.example.com"),
    )


def test_secrets_switches_are_exclusive(manager):
    manager.secrets_scanning_disabled = True
    assert manager.secrets_scanning_enabled is False

    manager.secrets_scanning_enabled = True

    assert manager.secrets_scanning_enabled is True
    assert manager.secrets_scanning_disabled is False
    assert manager._irx_options().to_args() == ["--enableSecrets"]


def test_non_sast_target_is_ignored(manager):
    manager.add_scan_target("/some/path")

    assert manager.targets == []


def test_missing_jee_target_makes_no_calls(manager, progress, cloud_provider, http_client, generator, tmp_path):
    manager.add_scan_target(JEETarget(tmp_path / "gone.war"))

    with pytest.raises(InvalidTargetException):
        manager.analyze(progress, {"ScanName": "demo"}, cloud_provider)

    assert http_client.method_calls == []
    generator.generate.assert_not_called()


def test_unreadable_workdir_makes_no_calls(manager, progress, cloud_provider, http_client, generator, workdir):
    """작업 디렉토리를 읽을 수 없으면 네트워크 호출 없이 InvalidTargetException."""
    with patch("appscan_sdk.scanners.sast_scan_manager.os.access", return_value=False) as mock_access:
        with pytest.raises(InvalidTargetException):
            manager.analyze(progress, {"ScanName": "demo"}, cloud_provider)

    mock_access.assert_called_once_with(workdir, os.R_OK)
    assert http_client.method_calls == []
    assert manager.scan is None

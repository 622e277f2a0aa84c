"""IRX 생성기 — 정적 분석 클라이언트(appscan.sh / appscan.bat) 실행

`appscan prepare -n <scan_name>` 을 대상 디렉토리에서 실행해
<scan_name>.irx 파일을 만든다.
"""

import logging
import os
import shutil
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from appscan_sdk.config import get_settings
from appscan_sdk.constants import IRX_EXTENSION
from appscan_sdk.errors import ScannerException
from appscan_sdk.progress import INFO, Message, Progress

logger = logging.getLogger(__name__)

# prepare 전체 실행 타임아웃 (초)
_PREPARE_TIMEOUT = 3600


@dataclass(frozen=True)
class IrxOptions:
    """IRX 생성 옵션 (prepare 명령 플래그)"""

    open_source_only: bool = False            # -oso
    source_code_only: bool = False            # -sco
    static_analysis_only: bool = False        # -sao
    third_party_scanning: bool = False        # --thirdParty
    secrets_scanning_disabled: bool = False   # --noSecrets
    secrets_scanning_enabled: bool = False    # --enableSecrets
    secrets_scanning_only: bool = False       # --secretsOnly
    targets: tuple[str, ...] = ()             # 추가 대상 (플래그 뒤 위치 인자)

    def to_args(self) -> list[str]:
        args = []
        if self.open_source_only:
            args.append("-oso")
        if self.source_code_only:
            args.append("-sco")
        if self.static_analysis_only:
            args.append("-sao")
        if self.third_party_scanning:
            args.append("--thirdParty")
        if self.secrets_scanning_disabled:
            args.append("--noSecrets")
        if self.secrets_scanning_enabled:
            args.append("--enableSecrets")
        if self.secrets_scanning_only:
            args.append("--secretsOnly")
        args.extend(self.targets)
        return args


class IrxGenerator(ABC):
    """IRX 생성 협력자 인터페이스."""

    @abstractmethod
    def generate(self, target: Path, scan_name: str, options: IrxOptions) -> Path:
        """대상에서 IRX를 만들고 그 경로를 반환한다.

        Raises:
            ScannerException: 생성 실패 시
        """


class SAClient(IrxGenerator):
    """정적 분석 클라이언트 CLI를 subprocess로 실행하는 IRX 생성기."""

    def __init__(self, progress: Progress, client_home: str | None = None) -> None:
        """초기화.

        Args:
            progress: 진행 메시지 싱크
            client_home: 클라이언트 설치 경로 (기본: APPSCAN_CLIENT_HOME, 없으면 PATH 검색)
        """
        self._progress = progress
        self._client_home = client_home or get_settings().APPSCAN_CLIENT_HOME

    @staticmethod
    def _script_name() -> str:
        return "appscan.bat" if os.name == "nt" else "appscan.sh"

    def _executable(self) -> str:
        script = self._script_name()
        if self._client_home:
            candidate = Path(self._client_home) / "bin" / script
            if candidate.is_file():
                return str(candidate)
        found = shutil.which(script)
        if found:
            return found
        raise ScannerException(
            "정적 분석 클라이언트를 찾을 수 없습니다",
            f"APPSCAN_CLIENT_HOME 또는 PATH에 {script} 이(가) 필요합니다",
        )

    def generate(self, target: Path, scan_name: str, options: IrxOptions) -> Path:
        work_dir = target if target.is_dir() else target.parent
        cmd = [self._executable(), "prepare", "-n", scan_name, *options.to_args()]
        if not target.is_dir():
            cmd.append(str(target))

        self._progress.set_status(Message(INFO, f"IRX 파일을 생성합니다: {scan_name}{IRX_EXTENSION}"))
        logger.info(f"[SAClient] prepare 실행: cwd={work_dir}, cmd={' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd,
                cwd=work_dir,
                capture_output=True,
                text=True,
                timeout=_PREPARE_TIMEOUT,
            )
        except subprocess.TimeoutExpired as e:
            raise ScannerException("IRX 생성 시간이 초과되었습니다", str(e)) from e
        except OSError as e:
            raise ScannerException("정적 분석 클라이언트를 실행하지 못했습니다", str(e)) from e

        logger.debug(
            f"[SAClient] returncode={result.returncode} "
            f"stdout_len={len(result.stdout)} stderr_len={len(result.stderr)}"
        )
        if result.returncode != 0:
            output = (result.stderr.strip() or result.stdout.strip())[-300:]
            raise ScannerException(
                f"IRX 생성에 실패했습니다 (returncode={result.returncode})", output or None
            )

        irx = work_dir / f"{scan_name}{IRX_EXTENSION}"
        if not irx.is_file():
            raise ScannerException("IRX 파일이 생성되지 않았습니다", str(irx))
        self._progress.set_status(Message(INFO, f"IRX 파일을 생성했습니다: {irx}"))
        return irx

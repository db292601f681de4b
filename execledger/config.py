# execledger/config.py
"""
Runtime settings.

Resolution order for every value: explicit argument (CLI flag) →
EXECLEDGER_* environment variable → built-in default.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_ISSUER = "Execution Ledger"
DEFAULT_ARTIFACTS_DIR = "provenance"
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class LedgerSettings:
    issuer: str = DEFAULT_ISSUER
    artifacts_dir: Path = Path(DEFAULT_ARTIFACTS_DIR)
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "LedgerSettings":
        env = os.environ if environ is None else environ
        return cls(
            issuer=env.get("EXECLEDGER_ISSUER") or DEFAULT_ISSUER,
            artifacts_dir=Path(env.get("EXECLEDGER_ARTIFACTS_DIR") or DEFAULT_ARTIFACTS_DIR),
            log_level=(env.get("EXECLEDGER_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
        )


def get_artifacts_dir(dir_flag: Optional[Path] = None) -> Path:
    """Resolve the artifacts directory in this order:
    1. --out / --dir flag
    2. EXECLEDGER_ARTIFACTS_DIR environment variable
    3. Default: ./provenance
    """
    if dir_flag:
        return dir_flag.resolve()
    return LedgerSettings.from_env().artifacts_dir.resolve()

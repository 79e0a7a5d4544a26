from os import getenv
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel

__version__ = "0.1.0"


class Settings(BaseModel):
    TDS_VERSION: str

    # Ledger
    TDS_LEDGER_PATH: Path | None
    TDS_FINAL_SLOT: int | None

    # Exercise
    TDS_STARTING_BALANCE_SOL: float
    TDS_LAMPORTS_PER_SOL: int
    TDS_BASELINE_VALIDATOR: str
    TDS_BOOTSTRAP_LEADER: str

    # Report
    TDS_REPORT_TOP_N: int

    # Metrics
    TDS_METRICS_PORT: int
    TDS_METRICS_ADDR: str


def _env_optional_int(name: str) -> int | None:
    v = getenv(name, "").strip()
    return int(v) if v else None


def _env_optional_path(name: str) -> Path | None:
    v = getenv(name, "").strip()
    return Path(v).expanduser() if v else None


@lru_cache
def get_settings() -> Settings:
    load_dotenv()
    return Settings(
        TDS_VERSION=getenv("TDS_VERSION", __version__),
        # Ledger
        TDS_LEDGER_PATH=_env_optional_path("TDS_LEDGER_PATH"),
        TDS_FINAL_SLOT=_env_optional_int("TDS_FINAL_SLOT"),
        # Exercise
        TDS_STARTING_BALANCE_SOL=float(getenv("TDS_STARTING_BALANCE_SOL", 1000.0)),
        TDS_LAMPORTS_PER_SOL=int(getenv("TDS_LAMPORTS_PER_SOL", 1_000_000_000)),
        TDS_BASELINE_VALIDATOR=getenv("TDS_BASELINE_VALIDATOR", ""),
        TDS_BOOTSTRAP_LEADER=getenv("TDS_BOOTSTRAP_LEADER", ""),
        # Report
        TDS_REPORT_TOP_N=int(getenv("TDS_REPORT_TOP_N", 0)),
        # Metrics
        TDS_METRICS_PORT=int(getenv("TDS_METRICS_PORT", 0)),
        TDS_METRICS_ADDR=getenv("TDS_METRICS_ADDR", "0.0.0.0"),
    )

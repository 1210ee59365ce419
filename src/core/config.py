import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: int, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        value = default
    else:
        try:
            value = int(raw)
        except ValueError:
            value = default
    if min_value is not None:
        return max(min_value, value)
    return value


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    environment: str
    log_level: str
    max_workers: int
    warning_pct: float
    critical_pct: float
    data_dir: str


settings = Settings(
    environment=os.getenv("STOCKRECON_ENV", "development").strip().lower(),
    log_level=os.getenv("STOCKRECON_LOG_LEVEL", "INFO").strip().upper(),
    max_workers=_env_int("STOCKRECON_MAX_WORKERS", 4, min_value=1),
    # Severity bands from the dashboard legend: <=5% ok, 5-10% warning, >10% critical
    warning_pct=_env_float("STOCKRECON_WARNING_PCT", 5.0),
    critical_pct=_env_float("STOCKRECON_CRITICAL_PCT", 10.0),
    data_dir=os.getenv("STOCKRECON_DATA_DIR", "data"),
)

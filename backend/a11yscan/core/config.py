import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional
from dotenv import load_dotenv

DEFAULT_UA = (
    "A11yScan/0.1 (+https://example.local) "
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


@dataclass(frozen=True)
class Settings:
    findings_url: Optional[str] = None     # rule-checker collaborator endpoint
    metrics_url: Optional[str] = None      # DOM-metrics collaborator endpoint
    http_timeout: float = 30.0
    connect_timeout: float = 5.0
    user_agent: str = DEFAULT_UA
    log_level: str = "INFO"


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


def load_settings() -> Settings:
    load_dotenv()
    return Settings(
        findings_url=os.getenv("A11YSCAN_FINDINGS_URL") or None,
        metrics_url=os.getenv("A11YSCAN_METRICS_URL") or None,
        http_timeout=_float_env("A11YSCAN_HTTP_TIMEOUT", 30.0),
        connect_timeout=_float_env("A11YSCAN_CONNECT_TIMEOUT", 5.0),
        user_agent=os.getenv("A11YSCAN_USER_AGENT", DEFAULT_UA),
        log_level=os.getenv("A11YSCAN_LOG_LEVEL", "INFO").upper(),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()

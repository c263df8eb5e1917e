"""Triage server settings, taken from ``SERVER_*`` environment variables.

Every field has a local-development default, so ``create_app()`` works in
a bare checkout.  The SDK's own ``TRIAGE_*`` variables (catalog path,
default strategy, CTA links) still apply where a server setting is unset.
"""

import os
from dataclasses import dataclass, field

from triage_rulesets.models.strategy import StrategyName


@dataclass(frozen=True)
class ServerSettings:
    """Startup configuration of the triage API; fixed for the process lifetime."""

    host: str = "0.0.0.0"
    port: int = 8080

    # "*" allows any origin (no credentials); otherwise an explicit list
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    # None falls back to TRIAGE_CATALOG_PATH, then the packaged catalog
    catalog_path: str | None = None

    # None falls back to TRIAGE_STRATEGY
    default_strategy: str | None = None

    # 409 for answers posted to a finished session instead of a no-op
    strict: bool = False

    log_level: str = "INFO"


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_strategy(name: str) -> str | None:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    # Fail at startup rather than on the first session
    return StrategyName(raw).value


def load_settings() -> ServerSettings:
    """Read ``ServerSettings`` from the environment.

    Raises:
        ValueError: if ``SERVER_DEFAULT_STRATEGY`` names no known strategy
            or ``SERVER_PORT`` is not an integer.
    """
    origins = [
        origin.strip()
        for origin in os.getenv("SERVER_CORS_ORIGINS", "*").split(",")
        if origin.strip()
    ]
    return ServerSettings(
        host=os.getenv("SERVER_HOST", "0.0.0.0"),
        port=int(os.getenv("SERVER_PORT", "8080")),
        cors_origins=origins or ["*"],
        catalog_path=os.getenv("SERVER_CATALOG_PATH") or None,
        default_strategy=_env_strategy("SERVER_DEFAULT_STRATEGY"),
        strict=_env_flag("SERVER_STRICT"),
        log_level=os.getenv("SERVER_LOG_LEVEL", "INFO").strip().upper(),
    )

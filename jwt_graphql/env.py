from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class ClientConfig:
    domain: str
    access_token: str
    timeout_seconds: float = 15.0
    verify_ssl: bool = True

    def __post_init__(self) -> None:
        if not self.domain or not self.domain.strip():
            raise ValueError("domain is required")
        if not self.access_token or not self.access_token.strip():
            raise ValueError("access_token is required")
        if self.timeout_seconds is None or self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0")


def _parse_bool(name: str, raw: Optional[str], default: bool) -> bool:
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean (got {raw!r})")


def _parse_timeout(raw: Optional[str]) -> float:
    if raw is None or not raw.strip():
        return 15.0
    try:
        return float(raw.strip())
    except ValueError as exc:
        raise ValueError(f"JWT_GRAPHQL_TIMEOUT_SECONDS must be a number (got {raw!r})") from exc


def config_from_env() -> Optional[ClientConfig]:
    domain = os.getenv("JWT_GRAPHQL_DOMAIN")
    access_token = os.getenv("JWT_GRAPHQL_ACCESS_TOKEN")
    if not domain or not domain.strip() or not access_token or not access_token.strip():
        return None
    return ClientConfig(
        domain=domain.strip(),
        access_token=access_token.strip(),
        timeout_seconds=_parse_timeout(os.getenv("JWT_GRAPHQL_TIMEOUT_SECONDS")),
        verify_ssl=_parse_bool(
            "JWT_GRAPHQL_VERIFY_SSL", os.getenv("JWT_GRAPHQL_VERIFY_SSL"), True
        ),
    )

from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional

_REDACTED = "<redacted>"
_SENSITIVE_HEADERS = frozenset({"authorization", "x-jwt-token", "cookie", "set-cookie"})


def get_logger(logger: Optional[logging.Logger] = None) -> logging.Logger:
    if logger is not None:
        return logger
    return logging.getLogger("jwt_graphql")


def sanitize_headers(headers: Optional[Mapping[str, str]]) -> Dict[str, str]:
    if not headers:
        return {}
    out: Dict[str, str] = {}
    for key, value in headers.items():
        if key.lower() in _SENSITIVE_HEADERS:
            out[key] = _REDACTED
        else:
            out[key] = value
    return out

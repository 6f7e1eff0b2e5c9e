from __future__ import annotations

import math
import numbers
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .errors import DecodeError


@dataclass(frozen=True)
class GraphQLErrorItem:
    message: str
    path: Optional[List[Any]] = None
    locations: Optional[List[Dict[str, Any]]] = None
    extensions: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class GraphQLResult:
    data: Optional[Any]
    errors: Optional[List[GraphQLErrorItem]] = None
    extensions: Optional[Dict[str, Any]] = None


def parse_error_items(raw: Any) -> Optional[List[GraphQLErrorItem]]:
    if not isinstance(raw, list):
        return None
    items: List[GraphQLErrorItem] = []
    for entry in raw:
        if not isinstance(entry, dict):
            items.append(GraphQLErrorItem(message=str(entry)))
            continue
        message = entry.get("message")
        path = entry.get("path")
        locations = entry.get("locations")
        extensions = entry.get("extensions")
        items.append(
            GraphQLErrorItem(
                message=message if isinstance(message, str) else "Unknown GraphQL error",
                path=path if isinstance(path, list) else None,
                locations=locations if isinstance(locations, list) else None,
                extensions=extensions if isinstance(extensions, dict) else None,
            )
        )
    return items


@dataclass(frozen=True)
class Claims:
    """Decoded token payload.

    ``exp`` is the only claim the client interprets; every other claim is kept
    in ``extra`` exactly as received.
    """

    exp: float
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Any) -> "Claims":
        if not isinstance(payload, Mapping):
            raise DecodeError("token payload must be a JSON object")
        if "exp" not in payload:
            raise DecodeError("token payload missing exp claim")
        exp = payload["exp"]
        if isinstance(exp, bool) or not isinstance(exp, numbers.Real):
            raise DecodeError("token exp claim must be a number")
        try:
            finite = math.isfinite(exp)
        except OverflowError:
            finite = False
        if not finite:
            raise DecodeError("token exp claim must be finite")
        extra = {k: v for k, v in payload.items() if k != "exp"}
        return cls(exp=exp, extra=extra)

    def as_dict(self) -> Dict[str, Any]:
        out = dict(self.extra)
        out["exp"] = self.exp
        return out


@dataclass(frozen=True)
class TokenState:
    token: str
    claims: Claims

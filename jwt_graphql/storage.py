from __future__ import annotations

from typing import Dict, Optional

TOKEN_KEY = "hasura-jwt-token"


class TokenStore:
    """Per-client token cache. Holds no expiry logic of its own."""

    def __init__(self) -> None:
        self._items: Dict[str, str] = {}

    def get(self, key: str = TOKEN_KEY) -> Optional[str]:
        return self._items.get(key)

    def set(self, token: str, key: str = TOKEN_KEY) -> None:
        if not token:
            raise ValueError("token must be non-empty")
        self._items[key] = token

    def clear(self) -> None:
        self._items.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)

from __future__ import annotations

import asyncio
import math
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, Optional
from urllib.parse import urlencode

from .codec import decode_claims
from .errors import AuthError, DecodeError, SerializationError, TransportError
from .logging import get_logger
from .models import Claims, TokenState
from .storage import TokenStore
from .transport import HttpTransport

TOKEN_PATH = "/api/auth/token"
REFRESH_PATH = "/api/auth/refresh"


@asynccontextmanager
async def _transport_scope(
    transport: Optional[HttpTransport], logger
) -> AsyncIterator[HttpTransport]:
    if transport is not None:
        yield transport
        return
    owned = HttpTransport(logger=logger)
    try:
        yield owned
    finally:
        await owned.aclose()


async def _fetch_token_state(
    transport: HttpTransport,
    domain: str,
    path: str,
    headers=None,
    body: Optional[str] = None,
) -> TokenState:
    try:
        token = await transport.request(domain, path, headers, body)
    except TransportError as exc:
        raise AuthError(str(exc), status_code=exc.status_code) from exc
    except SerializationError as exc:
        raise AuthError(f"Auth endpoint returned invalid JSON: {exc}") from exc

    try:
        if not isinstance(token, str) or not token.strip():
            raise DecodeError("auth endpoint did not return a token string")
        token = token.strip()
        claims = decode_claims(token)
    except DecodeError as exc:
        raise AuthError(f"Failed to decode token: {exc}") from exc
    return TokenState(token=token, claims=claims)


async def request_token(
    domain: str,
    access_token: str,
    *,
    transport: HttpTransport | None = None,
    store: TokenStore | None = None,
    logger=None,
) -> TokenState:
    if not domain or not domain.strip():
        raise ValueError("domain is required")
    if not access_token or not access_token.strip():
        raise ValueError("access_token is required")

    log = get_logger(logger)
    path = f"{TOKEN_PATH}?{urlencode({'token': access_token.strip()})}"
    async with _transport_scope(transport, logger) as active:
        state = await _fetch_token_state(active, domain.strip(), path)
    if store is not None:
        store.set(state.token)
    log.debug("Acquired token", extra={"domain": domain, "exp": state.claims.exp})
    return state


async def refresh_token(
    domain: str,
    current_token: str,
    *,
    transport: HttpTransport | None = None,
    logger=None,
) -> TokenState:
    if not domain or not domain.strip():
        raise ValueError("domain is required")
    if not current_token:
        raise ValueError("current_token is required")

    log = get_logger(logger)
    async with _transport_scope(transport, logger) as active:
        state = await _fetch_token_state(
            active,
            domain.strip(),
            REFRESH_PATH,
            headers={"x-jwt-token": current_token},
            body="",
        )
    log.debug("Refreshed token", extra={"domain": domain, "exp": state.claims.exp})
    return state


def _failed(task: "asyncio.Future[TokenState]") -> bool:
    if not task.done():
        return False
    return task.cancelled() or task.exception() is not None


class TokenLifecycleManager:
    """Single-flight owner of one client's token.

    At most one acquisition or refresh task sits in the pending slot. Every
    caller of :meth:`get_valid_token` awaits whatever task occupies the slot,
    so concurrent callers share one network round trip. A refresh is only
    started by the first caller that finds the task it awaited still in the
    slot and its token expired; later observers join that refresh.
    """

    def __init__(
        self,
        domain: str,
        access_token: str,
        *,
        transport: HttpTransport,
        store: TokenStore | None = None,
        logger=None,
        time_provider: Callable[[], float] | None = None,
    ):
        if not domain or not domain.strip():
            raise ValueError("domain is required")
        if not access_token or not access_token.strip():
            raise ValueError("access_token is required")
        if transport is None:
            raise ValueError("transport is required")
        self._domain = domain.strip()
        self._access_token = access_token.strip()
        self._transport = transport
        self._store = store if store is not None else TokenStore()
        self._logger = get_logger(logger)
        self._now = time_provider if time_provider is not None else time.time
        self._pending: Optional["asyncio.Future[TokenState]"] = None
        self._state: Optional[TokenState] = None

    @property
    def store(self) -> TokenStore:
        return self._store

    @property
    def state(self) -> Optional[TokenState]:
        return self._state

    @property
    def pending(self) -> Optional["asyncio.Future[TokenState]"]:
        return self._pending

    def is_expired(self, claims: Claims) -> bool:
        if self._store.get() is None:
            return False
        return math.floor(claims.exp - self._now()) <= 0

    async def _remember(self, operation: Awaitable[TokenState]) -> TokenState:
        state = await operation
        self._store.set(state.token)
        self._state = state
        return state

    def _start_request(self) -> "asyncio.Future[TokenState]":
        self._pending = asyncio.ensure_future(
            self._remember(
                request_token(
                    self._domain,
                    self._access_token,
                    transport=self._transport,
                    logger=self._logger,
                )
            )
        )
        return self._pending

    def _start_refresh(self, token: str) -> "asyncio.Future[TokenState]":
        self._logger.debug("Token expired; refreshing", extra={"domain": self._domain})
        self._pending = asyncio.ensure_future(
            self._remember(
                refresh_token(
                    self._domain,
                    token,
                    transport=self._transport,
                    logger=self._logger,
                )
            )
        )
        return self._pending

    def _pending_operation(self) -> "asyncio.Future[TokenState]":
        pending = self._pending
        if pending is not None and not _failed(pending):
            return pending
        # The store keeps the last good token after a failure; refresh from it.
        if self._state is not None:
            return self._start_refresh(self._state.token)
        return self._start_request()

    async def acquire(self) -> TokenState:
        return await asyncio.shield(self._pending_operation())

    async def get_valid_token(self) -> str:
        pending = self._pending_operation()
        state = await asyncio.shield(pending)
        if not self.is_expired(state.claims):
            return state.token
        if self._pending is pending:
            self._start_refresh(state.token)
        refreshed = await asyncio.shield(self._pending)
        return refreshed.token

    async def aclose(self) -> None:
        pending = self._pending
        self._pending = None
        if pending is not None and not pending.done():
            pending.cancel()
            try:
                await pending
            except asyncio.CancelledError:
                pass
            except Exception:
                self._logger.debug("Pending token operation failed during close", exc_info=True)

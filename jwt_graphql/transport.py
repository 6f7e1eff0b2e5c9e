from __future__ import annotations

import time
from typing import Any, Mapping, Optional, Union

import httpx

from .errors import SerializationError, TransportError
from .logging import get_logger, sanitize_headers


def base_url_for(host: str) -> str:
    candidate = (host or "").strip().rstrip("/")
    if not candidate:
        raise ValueError("host is required")
    if candidate.startswith(("http://", "https://")):
        return candidate
    return f"https://{candidate}"


class HttpTransport:
    """JSON-over-HTTP collaborator used for the auth and GraphQL endpoints.

    ``request`` issues a ``POST`` when ``body`` is given and a ``GET``
    otherwise. Any status other than 200 raises :class:`TransportError`
    whose message is the response reason phrase.
    """

    def __init__(
        self,
        *,
        timeout_seconds: float = 15.0,
        verify_ssl: bool = True,
        logger=None,
        http_client: httpx.AsyncClient | None = None,
    ):
        if timeout_seconds is None or timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0")
        self._logger = get_logger(logger)
        if not verify_ssl:
            self._logger.warning("TLS certificate verification is disabled")
        self._owns_client = http_client is None
        self._client = (
            http_client
            if http_client is not None
            else httpx.AsyncClient(timeout=timeout_seconds, verify=verify_ssl)
        )

    async def request(
        self,
        host: str,
        path: str,
        headers: Optional[Mapping[str, str]] = None,
        body: Optional[Union[str, bytes]] = None,
    ) -> Any:
        url = f"{base_url_for(host)}{path}"
        method = "POST" if body is not None else "GET"
        content = body.encode("utf-8") if isinstance(body, str) else body
        request_headers = dict(headers) if headers else {}
        start = time.perf_counter()
        try:
            response = await self._client.request(
                method,
                url,
                headers=request_headers,
                content=content,
            )
        except httpx.RequestError as exc:
            self._logger.error("HTTP request failed", exc_info=exc)
            raise TransportError(
                status_code=0,
                body_snippet=str(exc),
                reason=str(exc) or type(exc).__name__,
            ) from exc

        try:
            self._logger.debug(
                "HTTP request completed",
                extra={
                    "method": method,
                    "path": httpx.URL(url).path,
                    "status_code": response.status_code,
                    "duration_sec": round(time.perf_counter() - start, 4),
                    "headers": sanitize_headers(request_headers),
                },
            )
            if response.status_code != 200:
                raise TransportError(
                    status_code=response.status_code,
                    body_snippet=response.text[:200],
                    reason=response.reason_phrase,
                )
            try:
                return response.json()
            except ValueError as exc:
                raise SerializationError(f"Failed to parse JSON: {exc}") from exc
        finally:
            await response.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpTransport":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

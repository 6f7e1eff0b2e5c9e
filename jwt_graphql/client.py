from __future__ import annotations

import json
from typing import Any, Callable, Dict, Optional

import httpx

from .env import ClientConfig
from .errors import GraphQLOperationError, SerializationError
from .logging import get_logger
from .models import GraphQLResult, TokenState, parse_error_items
from .storage import TokenStore
from .tokens import TokenLifecycleManager
from .transport import HttpTransport

GRAPHQL_PATH = "/api/graphql-engine/v1/graphql"


class GraphQLClient:
    def __init__(
        self,
        domain: str,
        access_token: str,
        *,
        timeout_seconds: float = 15.0,
        verify_ssl: bool = True,
        logger=None,
        store: TokenStore | None = None,
        time_provider: Callable[[], float] | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        if not domain or not domain.strip():
            raise ValueError("domain is required")
        if not access_token or not access_token.strip():
            raise ValueError("access_token is required")
        self.domain = domain.strip()
        self._logger = get_logger(logger)
        self._transport = HttpTransport(
            timeout_seconds=timeout_seconds,
            verify_ssl=verify_ssl,
            logger=self._logger,
            http_client=http_client,
        )
        self._tokens = TokenLifecycleManager(
            self.domain,
            access_token,
            transport=self._transport,
            store=store,
            logger=self._logger,
            time_provider=time_provider,
        )

    @classmethod
    def from_config(cls, config: ClientConfig, **kwargs: Any) -> "GraphQLClient":
        return cls(
            config.domain,
            config.access_token,
            timeout_seconds=config.timeout_seconds,
            verify_ssl=config.verify_ssl,
            **kwargs,
        )

    @property
    def storage(self) -> TokenStore:
        return self._tokens.store

    @property
    def tokens(self) -> TokenLifecycleManager:
        return self._tokens

    async def start(self) -> TokenState:
        return await self._tokens.acquire()

    async def execute(
        self,
        query: str,
        variables: Optional[Dict[str, Any]] = None,
        operation_name: Optional[str] = None,
    ) -> GraphQLResult:
        if not query or not query.strip():
            raise ValueError("query must be a non-empty string")

        payload: Dict[str, object] = {"query": query}
        if variables is not None:
            payload["variables"] = variables
        if operation_name:
            payload["operationName"] = operation_name
        form = json.dumps(payload)

        token = await self._tokens.get_valid_token()
        body = await self._transport.request(
            self.domain,
            GRAPHQL_PATH,
            {
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
                "Content-Length": str(len(form.encode("utf-8"))),
            },
            form,
        )
        if not isinstance(body, dict):
            raise SerializationError("GraphQL response must be a JSON object")

        errors = parse_error_items(body.get("errors"))
        extensions = body.get("extensions")
        if errors:
            self._logger.debug(
                "GraphQL response contained errors",
                extra={"operationName": operation_name, "error_count": len(errors)},
            )
        return GraphQLResult(
            data=body.get("data"),
            errors=errors,
            extensions=extensions if isinstance(extensions, dict) else None,
        )

    async def run(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Any:
        result = await self.execute(query, variables)
        if result.errors:
            raise GraphQLOperationError(errors=result.errors, partial_data=result.data)
        return result.data

    async def aclose(self) -> None:
        try:
            await self._tokens.aclose()
        finally:
            await self._transport.aclose()

    async def __aenter__(self) -> "GraphQLClient":
        try:
            await self.start()
        except BaseException:
            await self.aclose()
            raise
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


async def create_client(domain: str, access_token: str, **kwargs: Any) -> GraphQLClient:
    """Build a client and wait for its first token.

    Raises :class:`~jwt_graphql.errors.AuthError` when the initial acquisition
    fails; the client is closed before the error propagates.
    """
    client = GraphQLClient(domain, access_token, **kwargs)
    try:
        await client.start()
    except BaseException:
        await client.aclose()
        raise
    return client

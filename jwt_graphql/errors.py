from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Optional

if TYPE_CHECKING:
    from .models import GraphQLErrorItem


class TransportError(Exception):
    def __init__(
        self,
        status_code: int,
        body_snippet: str,
        reason: Optional[str] = None,
    ):
        super().__init__(reason or f"Unexpected HTTP status {status_code}")
        self.status_code = status_code
        self.body_snippet = body_snippet
        self.reason = reason


class SerializationError(Exception):
    pass


class DecodeError(SerializationError):
    pass


class AuthError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class GraphQLOperationError(Exception):
    def __init__(
        self,
        errors: List[GraphQLErrorItem],
        partial_data: Optional[Any] = None,
    ):
        message = "GraphQL operation failed"
        if errors:
            message = errors[0].message
        super().__init__(message)
        self.errors = errors
        self.partial_data = partial_data


GraphQLError = GraphQLOperationError

from .client import GraphQLClient, create_client
from .codec import decode, decode_claims
from .env import ClientConfig, config_from_env
from .errors import (
    AuthError,
    DecodeError,
    GraphQLError,
    GraphQLOperationError,
    SerializationError,
    TransportError,
)
from .models import Claims, GraphQLErrorItem, GraphQLResult, TokenState
from .storage import TokenStore
from .tokens import TokenLifecycleManager, refresh_token, request_token
from .transport import HttpTransport

__all__ = [
    "GraphQLClient",
    "create_client",
    "request_token",
    "refresh_token",
    "decode",
    "decode_claims",
    "TokenLifecycleManager",
    "TokenStore",
    "HttpTransport",
    "ClientConfig",
    "config_from_env",
    "Claims",
    "TokenState",
    "GraphQLResult",
    "GraphQLErrorItem",
    "TransportError",
    "SerializationError",
    "DecodeError",
    "AuthError",
    "GraphQLError",
    "GraphQLOperationError",
]

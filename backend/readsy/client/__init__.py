"""
Async API client for Readsy.
"""

from readsy.client.api import ReadsyClient
from readsy.client.errors import ApiError, ReadsyClientError, SessionExpiredError
from readsy.client.session import (
    AuthSession,
    FileTokenStore,
    MemoryTokenStore,
    TokenPair,
    TokenStore,
)

__all__ = [
    "ReadsyClient",
    "ApiError",
    "ReadsyClientError",
    "SessionExpiredError",
    "AuthSession",
    "FileTokenStore",
    "MemoryTokenStore",
    "TokenPair",
    "TokenStore",
]

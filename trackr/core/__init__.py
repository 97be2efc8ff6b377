"""Модуль core: исключения, хранилище, сессия, подписчики и авторизация."""

from trackr.core.exceptions import (
    ApiError,
    AuthenticationError,
    MissingTokenError,
    NetworkError,
    NotFoundError,
    RequestTimeoutError,
    StorageError,
    TrackrError,
    ValidationError,
)
from trackr.core.listeners import AuthListenerRegistry, Subscription
from trackr.core.session import SessionManager
from trackr.core.storage import (
    CredentialStore,
    JsonFileCredentialStore,
    MemoryCredentialStore,
    SessionStateCredentialStore,
)

# core.auth и core.hook импортируются напрямую: они зависят от api_client,
# который сам импортирует core.exceptions и core.session

__all__ = [
    # exceptions
    "ApiError",
    "AuthenticationError",
    "MissingTokenError",
    "NetworkError",
    "NotFoundError",
    "RequestTimeoutError",
    "StorageError",
    "TrackrError",
    "ValidationError",
    # listeners
    "AuthListenerRegistry",
    "Subscription",
    # session
    "SessionManager",
    # storage
    "CredentialStore",
    "JsonFileCredentialStore",
    "MemoryCredentialStore",
    "SessionStateCredentialStore",
]

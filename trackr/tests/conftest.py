"""Общие фикстуры тестов."""

from typing import List, Optional, Tuple
from unittest.mock import MagicMock

import pytest
import requests

from trackr.api_client import APIClient
from trackr.config import Settings
from trackr.constants import PLATFORM_WEB
from trackr.core.auth import AuthService
from trackr.core.session import SessionManager
from trackr.core.storage import MemoryCredentialStore
from trackr.schemas import User
from trackr.tests.fakes import BASE_URL, FakeBackend


# ==================== Fixtures ====================

@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        api_base_url=f"{BASE_URL}/",
        api_timeout=5,
        platform=PLATFORM_WEB,
        storage_path=tmp_path / "credentials.json",
        progress_storage_path=tmp_path / "progress.json",
    )


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def http(backend) -> MagicMock:
    http = MagicMock(spec=requests.Session)
    http.request.side_effect = backend
    return http


@pytest.fixture
def store() -> MemoryCredentialStore:
    return MemoryCredentialStore()


@pytest.fixture
def session(store) -> SessionManager:
    return SessionManager(store)


@pytest.fixture
def api(session, settings, http) -> APIClient:
    return APIClient(session, settings=settings, http=http)


@pytest.fixture
def auth(api, session) -> AuthService:
    return AuthService(api, session, platform=PLATFORM_WEB)


@pytest.fixture
def user() -> User:
    return User(id=7, username="moviefan", email="fan@example.com")


@pytest.fixture
def events(auth) -> List[Tuple[bool, Optional[User]]]:
    """Все оповещения AuthService в порядке доставки"""
    received: List[Tuple[bool, Optional[User]]] = []
    auth.add_auth_listener(lambda is_auth, u: received.append((is_auth, u)))
    return received

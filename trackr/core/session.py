"""Хранилище сессии: токен и текущий пользователь в памяти с зеркалом на диск."""

import logging
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from trackr.constants import STORAGE_AUTH_TOKEN_KEY, STORAGE_USER_KEY
from trackr.core.storage import CredentialStore
from trackr.schemas import User

logger = logging.getLogger(__name__)


class SessionManager:
    """
    Единственный источник истины для пары (токен, пользователь).

    Геттеры читают только память. Сеттеры обновляют память и сразу
    зеркалируют значение в CredentialStore. Писать в сессию должны только
    AuthService и APIClient (при 401).
    """

    def __init__(self, store: CredentialStore, restore: bool = False) -> None:
        """
        Args:
            store: Постоянное хранилище учетных данных
            restore: Сразу загрузить сохранённые значения (web-платформа)
        """
        self.store = store
        self._auth_token: Optional[str] = None
        self._current_user: Optional[User] = None
        if restore:
            self.restore()

    def get_auth_token(self) -> Optional[str]:
        return self._auth_token

    def get_current_user(self) -> Optional[User]:
        return self._current_user

    def set_auth_token(self, token: Optional[str]) -> None:
        """
        Установить токен. Пустой токен очищает и пользователя, причём
        пользователь очищается раньше, чем метод вернёт управление.
        """
        self._auth_token = token or None
        if not token:
            self._current_user = None
            self.store.remove(STORAGE_USER_KEY)
            self.store.remove(STORAGE_AUTH_TOKEN_KEY)
            return
        self.store.write(STORAGE_AUTH_TOKEN_KEY, token)

    def set_current_user(self, user: Optional[User]) -> None:
        """Установить пользователя. Токен не трогается."""
        self._current_user = user
        if user is None:
            self.store.remove(STORAGE_USER_KEY)
        else:
            self.store.write(STORAGE_USER_KEY, user.model_dump_json())

    def set_session(self, token: str, user: User) -> None:
        """Заполнить сессию целиком (успешный вход или регистрация)."""
        self.set_auth_token(token)
        self.set_current_user(user)

    def clear(self) -> None:
        """Очистить сессию и сохранённую запись."""
        logger.info("Clearing session")
        self.set_auth_token(None)

    def restore(self) -> bool:
        """
        Загрузить сохранённые токен и пользователя в память.

        Ошибки разбора логируются и игнорируются.

        Returns:
            True если после загрузки есть и токен, и пользователь
        """
        token = self.store.read(STORAGE_AUTH_TOKEN_KEY)
        raw_user = self.store.read(STORAGE_USER_KEY)

        user: Optional[User] = None
        if raw_user:
            try:
                user = User.model_validate_json(raw_user)
            except PydanticValidationError as e:
                logger.warning(f"[RESTORE] Ignoring malformed stored user: {e}")

        if token:
            self._auth_token = token
        if user is not None:
            self._current_user = user

        logger.info(
            f"[RESTORE] token={'EXISTS' if token else 'NOT FOUND'}, "
            f"user={user.username if user else 'NOT FOUND'}"
        )
        return bool(self._auth_token and self._current_user)

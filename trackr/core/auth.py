"""
Сервис авторизации: вход, регистрация, выход, проверка токена,
смена и сброс пароля, оповещение подписчиков.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from trackr.api_client import APIClient
from trackr.config import Settings, get_settings
from trackr.constants import (
    DEFAULT_PLAYLISTS,
    ENDPOINT_AUTH_LOGIN,
    ENDPOINT_AUTH_REGISTER,
    ENDPOINT_CHANGE_PASSWORD,
    ENDPOINT_CHANGE_PASSWORD_REQUEST,
    ENDPOINT_PASSWORD_RESET_CONFIRM,
    ENDPOINT_PASSWORD_RESET_REQUEST,
    ENDPOINT_PASSWORD_RESET_VERIFY,
    ENDPOINT_PLAYLISTS,
    HTTP_NOT_FOUND,
    HTTP_UNAUTHORIZED,
    MSG_INVALID_CREDENTIALS,
    MSG_NO_TOKEN,
    MSG_SIGN_IN_FAILED,
    MSG_USER_NOT_FOUND,
    PLATFORM_NATIVE,
    PLATFORM_WEB,
)
from trackr.core.exceptions import (
    AuthenticationError,
    MissingTokenError,
    NotFoundError,
    TrackrError,
    ValidationError,
)
from trackr.core.listeners import AuthListener, AuthListenerRegistry, Subscription
from trackr.core.session import SessionManager
from trackr.core.storage import CredentialStore, JsonFileCredentialStore, MemoryCredentialStore
from trackr.schemas import AuthResponse, User
from trackr.services import (
    EpisodeProgressService,
    FavoriteService,
    MovieService,
    PlaylistService,
    ReviewService,
    SeriesProgressService,
    UserService,
)

logger = logging.getLogger(__name__)


def _require(**fields: Any) -> None:
    """ValidationError, если какое-либо из полей пустое"""
    missing = [name for name, value in fields.items() if value in (None, "")]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


class AuthService:
    """
    Машина состояний сессии.

    Состояние выводится из пары (токен, пользователь) в SessionManager:
    Unknown до завершения initialize(), затем Authenticated или
    Unauthenticated. Переходы доставляются подписчикам через
    notify_auth_change().
    """

    def __init__(
        self,
        api: APIClient,
        session: SessionManager,
        platform: str = PLATFORM_WEB,
        playlists: Optional[PlaylistService] = None,
        listeners: Optional[AuthListenerRegistry] = None,
    ) -> None:
        self.api = api
        self.session = session
        self.platform = platform
        self.playlists = playlists or PlaylistService(api)
        self.listeners = listeners or AuthListenerRegistry()
        # APIClient уже очистил сессию, остаётся оповестить подписчиков
        self.api.on_unauthorized = self._on_unauthorized

    # ===== Состояние сессии =====

    def get_current_user(self) -> Optional[User]:
        return self.session.get_current_user()

    def get_token(self) -> Optional[str]:
        return self.session.get_auth_token()

    def is_authenticated(self) -> bool:
        return bool(self.session.get_auth_token() and self.session.get_current_user())

    # ===== Подписчики =====

    def add_auth_listener(self, callback: AuthListener) -> Subscription:
        return self.listeners.add(callback)

    def remove_auth_listener(self, callback: AuthListener) -> None:
        self.listeners.remove(callback)

    def notify_auth_change(self, is_authenticated: bool, user: Optional[User]) -> None:
        delivered = self.listeners.notify(is_authenticated, user)
        logger.debug(
            f"Auth change delivered: authenticated={is_authenticated}, "
            f"listeners={delivered}/{len(self.listeners)}"
        )

    def _on_unauthorized(self) -> None:
        self.notify_auth_change(False, None)

    # ===== Жизненный цикл =====

    def clear_stale_user(self, notify: bool = True) -> bool:
        """
        Пользователь без токена считается устаревшими данными и удаляется.

        Returns:
            True если пользователь был удалён
        """
        if self.session.get_current_user() is not None and not self.session.get_auth_token():
            logger.info("Clearing stale user data without token")
            self.session.set_current_user(None)
            if notify:
                self.notify_auth_change(False, None)
            return True
        return False

    def initialize(self) -> bool:
        """
        Точка входа при старте процесса.

        Returns:
            True если сохранённая сессия подтверждена backend'ом
        """
        logger.info(f"[INIT] Initializing auth (platform={self.platform})")
        self.clear_stale_user(notify=False)

        if self.platform == PLATFORM_NATIVE:
            try:
                self.session.restore()
            except Exception as e:
                logger.error(f"[INIT] Failed to restore persisted session: {e}", exc_info=True)
            self.clear_stale_user(notify=False)

        if self.is_authenticated():
            return self.validate_token()

        logger.info("[INIT] No stored session")
        self.notify_auth_change(False, None)
        return False

    def validate_token(self) -> bool:
        """
        Проверяет, что сохранённый токен ещё действителен.

        401/403 означает недействительные учетные данные: выполняется
        полный sign_out(). Прочие ошибки (сеть, таймаут, 5xx) считаются
        временными: токен сохраняется, а подписчики получают
        Unauthenticated.
        """
        user = self.session.get_current_user()
        if not self.session.get_auth_token() or user is None:
            self.notify_auth_change(False, None)
            return False

        try:
            self.api.get(ENDPOINT_PLAYLISTS, clear_on_unauthorized=False)
        except AuthenticationError as e:
            logger.warning(f"[VALIDATE] Token rejected ({e.status_code}), signing out")
            self.sign_out()
            return False
        except TrackrError as e:
            logger.warning(f"[VALIDATE] Could not validate token, keeping credentials: {e}")
            self.notify_auth_change(False, None)
            return False

        logger.info(f"[VALIDATE] Token valid for user: {user.username}")
        self.notify_auth_change(True, user)
        return True

    # ===== Вход, регистрация, выход =====

    def sign_up(self, username: str, email: str, password: str) -> Dict[str, Any]:
        """
        Регистрация. При наличии токена в ответе пользователь сразу входит.
        Плейлисты по умолчанию для новой учетной записи не создаются.

        Returns:
            Исходный payload ответа
        """
        _require(username=username, email=email, password=password)
        logger.info(f"Attempting sign up for: {username} <{email}>")

        try:
            response = self.api.post(
                ENDPOINT_AUTH_REGISTER,
                json={"username": username, "email": email, "password": password},
                clear_on_unauthorized=False,
            )
        except TrackrError as e:
            logger.error(f"Sign up failed: {e.formatted_message}")
            raise

        data = response.data if isinstance(response.data, dict) else {}
        payload = AuthResponse.model_validate(data)
        if payload.access:
            user = payload.to_user(fallback_username=username, fallback_email=email)
            self.session.set_session(payload.access, user)
            logger.info(f"Sign up successful for user: {user.username}")
            self.notify_auth_change(True, user)
        else:
            logger.info(f"Sign up for {username} returned no token, user must sign in")
        return data

    def sign_in(self, username: str, password: str) -> Dict[str, Any]:
        """
        Вход по логину и паролю.

        Порядок: сессия заполняется, затем проверяются плейлисты по
        умолчанию, затем подписчики получают Authenticated.

        Returns:
            Исходный payload ответа

        Raises:
            AuthenticationError: Неверные учетные данные (401) или токен
                отклонён при проверке плейлистов по умолчанию
            NotFoundError: Пользователь не существует (404)
            MissingTokenError: Ответ без токена, сессия не изменяется
        """
        _require(username=username, password=password)
        logger.info(f"Attempting sign in for: {username}")

        try:
            response = self.api.post(
                ENDPOINT_AUTH_LOGIN,
                json={"username": username, "password": password},
                clear_on_unauthorized=False,
            )
        except TrackrError as e:
            error = self._classify_sign_in_error(e)
            logger.error(f"Sign in failed for {username}: {error.formatted_message}")
            raise error from e

        data = response.data if isinstance(response.data, dict) else {}
        payload = AuthResponse.model_validate(data)
        if not payload.access:
            logger.error(f"Sign in response for {username} has no token")
            raise MissingTokenError(MSG_NO_TOKEN, status_code=response.status_code, details=response.data)

        user = payload.to_user(fallback_username=username)
        self.session.set_session(payload.access, user)
        self._bootstrap_default_playlists()

        logger.info(f"Sign in successful for user: {user.username}")
        self.notify_auth_change(True, user)
        return data

    @staticmethod
    def _classify_sign_in_error(error: TrackrError) -> TrackrError:
        if error.status_code == HTTP_UNAUTHORIZED:
            return AuthenticationError(MSG_INVALID_CREDENTIALS, status_code=error.status_code, details=error.details)
        if error.status_code == HTTP_NOT_FOUND:
            return NotFoundError(MSG_USER_NOT_FOUND, status_code=error.status_code, details=error.details)

        backend_error = error.details.get("error") if isinstance(error.details, dict) else None
        message = str(backend_error) if backend_error else (error.formatted_message or MSG_SIGN_IN_FAILED)
        return type(error)(message, status_code=error.status_code, details=error.details)

    def _bootstrap_default_playlists(self) -> int:
        """
        Создаёт плейлисты по умолчанию, если у пользователя их ноль.

        Срабатывает по количеству плейлистов, а не по признаку новой
        учетной записи, поэтому пользователь, удаливший все плейлисты,
        получит их снова при следующем входе. Ошибки логируются и не
        прерывают вход, кроме 401: APIClient уже очистил сессию, и
        ошибка пробрасывается из sign_in().

        Returns:
            Количество созданных плейлистов
        """
        try:
            count = self.playlists.count_playlists()
        except TrackrError as e:
            self._raise_if_session_revoked(e)
            logger.warning(f"[BOOTSTRAP] Could not check playlists: {e}")
            return 0

        if count:
            return 0

        created = 0
        for title, description in DEFAULT_PLAYLISTS:
            try:
                self.playlists.create_playlist(title, description)
                created += 1
            except TrackrError as e:
                self._raise_if_session_revoked(e)
                logger.warning(f"[BOOTSTRAP] Failed to create playlist '{title}': {e}")
        logger.info(f"[BOOTSTRAP] Created {created}/{len(DEFAULT_PLAYLISTS)} default playlists")
        return created

    def _raise_if_session_revoked(self, error: TrackrError) -> None:
        if not self.is_authenticated():
            logger.error(f"[BOOTSTRAP] Session revoked during sign in: {error.formatted_message}")
            raise error

    def sign_out(self) -> None:
        """
        Очищает сессию и сохранённую запись, затем оповещает подписчиков.
        Сбой хранилища логируется и не прерывает выход.
        """
        try:
            self.session.clear()
        except Exception as e:
            logger.error(f"Failed to clear persisted session: {e}", exc_info=True)
        logger.info("Signed out")
        self.notify_auth_change(False, None)

    # ===== Пароли =====

    def _post(self, endpoint: str, payload: Dict[str, Any], authenticated: bool) -> Any:
        try:
            return self.api.post(endpoint, json=payload, clear_on_unauthorized=authenticated).data
        except TrackrError as e:
            logger.error(f"POST {endpoint} failed: {e.formatted_message}")
            raise

    def request_password_reset_code(self, identifier: str) -> Any:
        _require(identifier=identifier)
        return self._post(ENDPOINT_PASSWORD_RESET_REQUEST, {"email": identifier}, authenticated=False)

    def verify_password_reset_code(self, user_id: int, code: str) -> Any:
        _require(user_id=user_id, code=code)
        return self._post(ENDPOINT_PASSWORD_RESET_VERIFY, {"user_id": user_id, "code": code}, authenticated=False)

    def confirm_password_reset(self, user_id: int, new_password: str) -> Any:
        """Сброс пароля не выполняет вход: сессия не меняется."""
        _require(user_id=user_id, new_password=new_password)
        return self._post(
            ENDPOINT_PASSWORD_RESET_CONFIRM,
            {"user_id": user_id, "new_password": new_password},
            authenticated=False,
        )

    def request_password_change_code(self, email: str) -> Any:
        _require(email=email)
        return self._post(ENDPOINT_CHANGE_PASSWORD_REQUEST, {"email": email}, authenticated=True)

    def change_password_with_code(self, email: str, code: str, old_password: str, new_password: str) -> Any:
        """
        Смена пароля вошедшего пользователя. Токен не обновляется:
        после смены вызывающий код сам выполняет sign_out().
        """
        _require(email=email, code=code, old_password=old_password, new_password=new_password)
        logger.info(f"Changing password for {email}")
        return self._post(
            ENDPOINT_CHANGE_PASSWORD,
            {"code": code, "current_password": old_password, "new_password": new_password},
            authenticated=True,
        )


def create_auth_service(
    settings: Optional[Settings] = None,
    store: Optional[CredentialStore] = None,
    http: Optional[requests.Session] = None,
) -> AuthService:
    """
    Собрать AuthService со всеми зависимостями.

    Args:
        settings: Настройки (по умолчанию глобальные)
        store: Хранилище учетных данных. По умолчанию на native это JSON
            файл из настроек, на web хранилище в памяти: файл на сервере
            общий для всех посетителей, поэтому web host передаёт
            SessionStateCredentialStore своей сессии браузера
        http: requests.Session (подменяется в тестах)

    Returns:
        Настроенный сервис авторизации
    """
    settings = settings or get_settings()
    if store is None:
        if settings.platform == PLATFORM_NATIVE:
            store = JsonFileCredentialStore(settings.storage_path)
        else:
            store = MemoryCredentialStore()
    session = SessionManager(store, restore=settings.platform == PLATFORM_WEB)
    api = APIClient(session, settings=settings, http=http)
    return AuthService(api, session, platform=settings.platform)


@dataclass
class DomainServices:
    """Доменные сервисы, разделяющие APIClient (и сессию) одного AuthService."""

    playlists: PlaylistService
    reviews: ReviewService
    favorites: FavoriteService
    movies: MovieService
    episode_progress: EpisodeProgressService
    series_progress: SeriesProgressService
    users: UserService


def create_services(
    auth: AuthService,
    settings: Optional[Settings] = None,
    progress_store: Optional[CredentialStore] = None,
) -> DomainServices:
    """
    Собрать доменные сервисы поверх клиента AuthService.

    Локальный прогресс сериалов по умолчанию хранится в JSON файле
    settings.progress_storage_path.
    """
    settings = settings or get_settings()
    api = auth.api
    return DomainServices(
        playlists=auth.playlists,
        reviews=ReviewService(api),
        favorites=FavoriteService(api),
        movies=MovieService(api),
        episode_progress=EpisodeProgressService(api),
        series_progress=SeriesProgressService(
            api, progress_store or JsonFileCredentialStore(settings.progress_storage_path)
        ),
        users=UserService(api),
    )

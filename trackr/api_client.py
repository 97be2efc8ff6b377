"""Централизованный HTTP клиент для взаимодействия с backend."""

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import requests

from trackr.config import Settings, get_settings
from trackr.constants import (
    AUTH_HEADER_SCHEME,
    HTTP_NO_CONTENT,
    HTTP_UNAUTHORIZED,
    MSG_NO_CONNECTION,
    MSG_TIMEOUT,
    MSG_UNEXPECTED_ERROR,
)
from trackr.core.exceptions import NetworkError, RequestTimeoutError, TrackrError
from trackr.core.session import SessionManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiResponse:
    """Успешный ответ: HTTP статус и декодированное тело (None для пустого)."""

    status_code: int
    data: Any = None


def _first_item(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return str(value[0]) if value else ""
    return str(value)


def format_error_message(
    body: Any = None,
    *,
    timed_out: bool = False,
    no_response: bool = False,
    raw_message: Optional[str] = None,
) -> str:
    """
    Нормализует ошибку в одну строку для пользователя.

    Приоритет: поле error, поле detail, первый элемент non_field_errors,
    первая пара ключ/значение тела, затем фиксированные сообщения для
    таймаута и отсутствия соединения, затем исходное сообщение.

    Args:
        body: Тело ответа с ошибкой (обычно dict)
        timed_out: Запрос прерван по таймауту
        no_response: Ответ от сервера не получен
        raw_message: Исходное сообщение исключения

    Returns:
        Непустая строка
    """
    if isinstance(body, dict) and body:
        if body.get("error"):
            return _first_item(body["error"])
        if body.get("detail"):
            return _first_item(body["detail"])
        if body.get("non_field_errors"):
            return _first_item(body["non_field_errors"])
        key, value = next(iter(body.items()))
        return f"{key}: {_first_item(value)}"

    if isinstance(body, str) and body.strip():
        return body.strip()

    if body not in (None, {}, [], ""):
        return json.dumps(body, ensure_ascii=False, default=str)

    if timed_out:
        return MSG_TIMEOUT
    if no_response:
        return MSG_NO_CONNECTION
    return raw_message or MSG_UNEXPECTED_ERROR


class APIClient:
    """Клиент для взаимодействия с REST backend'ом."""

    def __init__(
        self,
        session: SessionManager,
        settings: Optional[Settings] = None,
        http: Optional[requests.Session] = None,
        on_unauthorized: Optional[Callable[[], None]] = None,
    ) -> None:
        """
        Инициализация API клиента.

        Args:
            session: Хранилище сессии, из которого берётся токен
            settings: Настройки (по умолчанию глобальные)
            http: requests.Session (подменяется в тестах)
            on_unauthorized: Вызывается после очистки сессии при ответе 401
        """
        settings = settings or get_settings()
        self.session = session
        self.base_url = settings.api_base_url.rstrip("/")
        self.timeout = settings.api_timeout
        self.http = http or requests.Session()
        self.on_unauthorized = on_unauthorized

    def _get_headers(self) -> Dict[str, str]:
        """Заголовки запроса: токен добавляется, только если он есть"""
        headers = {"Content-Type": "application/json"}
        token = self.session.get_auth_token()
        if token:
            headers["Authorization"] = f"{AUTH_HEADER_SCHEME} {token}"
        return headers

    @staticmethod
    def _decode_body(response: requests.Response) -> Any:
        if response.status_code == HTTP_NO_CONTENT or not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    def _handle_unauthorized(self) -> None:
        logger.warning("Received 401 Unauthorized, clearing session")
        self.session.clear()
        if self.on_unauthorized is not None:
            self.on_unauthorized()

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        clear_on_unauthorized: bool = True,
    ) -> ApiResponse:
        """
        Выполнить запрос к API.

        Args:
            method: HTTP метод
            path: Путь относительно base_url
            params: Query параметры
            json: Тело запроса
            clear_on_unauthorized: Очищать сессию при 401

        Returns:
            ApiResponse для ответов 2xx/3xx

        Raises:
            TrackrError: Любая ошибка, с заполненным formatted_message
        """
        url = f"{self.base_url}{path}"
        try:
            response = self.http.request(
                method,
                url,
                params=params,
                json=json,
                headers=self._get_headers(),
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            logger.error(f"{method} {path} timed out: {e}")
            raise RequestTimeoutError(format_error_message(timed_out=True)) from e
        except requests.exceptions.ConnectionError as e:
            logger.error(f"{method} {path} connection failed: {e}")
            raise NetworkError(format_error_message(no_response=True)) from e
        except requests.exceptions.RequestException as e:
            logger.error(f"{method} {path} failed: {e}")
            raise NetworkError(format_error_message(raw_message=str(e))) from e

        if response.ok:
            return ApiResponse(status_code=response.status_code, data=self._decode_body(response))

        body = self._decode_body(response)
        logger.error(
            f"API request {method} {path} failed with status {response.status_code}: "
            f"{str(body)[:200]}"
        )

        if response.status_code == HTTP_UNAUTHORIZED and clear_on_unauthorized:
            self._handle_unauthorized()

        message = format_error_message(
            body,
            raw_message=f"Request failed with status code {response.status_code}",
        )
        raise TrackrError.from_http(response.status_code, message, details=body)

    def get(self, path: str, **kwargs: Any) -> ApiResponse:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> ApiResponse:
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs: Any) -> ApiResponse:
        return self.request("PUT", path, **kwargs)

    def patch(self, path: str, **kwargs: Any) -> ApiResponse:
        return self.request("PATCH", path, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> ApiResponse:
        return self.request("DELETE", path, **kwargs)

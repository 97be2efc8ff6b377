"""
Исключения клиента

Все ошибки, которые видит вызывающий код, являются наследниками TrackrError
и несут нормализованное сообщение в formatted_message.
"""

from typing import Any, Dict, Optional

from trackr.constants import HTTP_FORBIDDEN, HTTP_NOT_FOUND, HTTP_UNAUTHORIZED


class TrackrError(Exception):
    """Базовое исключение клиента с видом ошибки и HTTP статусом"""

    kind: str = "error"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Any = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

    @property
    def formatted_message(self) -> str:
        """Строка, которую UI показывает пользователю"""
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Сериализация исключения в словарь"""
        return {
            "error": self.kind,
            "message": self.message,
            "status": self.status_code,
            "details": self.details,
        }

    @classmethod
    def from_http(cls, status_code: int, message: str, details: Any = None) -> "TrackrError":
        """Выбирает подкласс по HTTP статусу ответа"""
        if status_code in (HTTP_UNAUTHORIZED, HTTP_FORBIDDEN):
            error_cls = AuthenticationError
        elif status_code == HTTP_NOT_FOUND:
            error_cls = NotFoundError
        else:
            error_cls = ApiError
        return error_cls(message, status_code=status_code, details=details)


class ValidationError(TrackrError):
    """Ошибка валидации аргументов до отправки запроса"""

    kind = "validation"


class AuthenticationError(TrackrError):
    """Сервер отклонил учетные данные (401/403)"""

    kind = "authentication"


class NotFoundError(TrackrError):
    """Ресурс не найден (404)"""

    kind = "not_found"


class ApiError(TrackrError):
    """Прочие ошибки backend'а и некорректные ответы"""

    kind = "api"


class NetworkError(TrackrError):
    """Ответ от сервера не получен"""

    kind = "network"


class RequestTimeoutError(NetworkError):
    """Истёк таймаут запроса"""

    kind = "timeout"


class MissingTokenError(TrackrError):
    """Успешный ответ авторизации без токена"""

    kind = "protocol"


class StorageError(TrackrError):
    """Не удалось сохранить данные в локальное хранилище"""

    kind = "storage"

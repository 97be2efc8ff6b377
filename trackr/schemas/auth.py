"""
Схемы для авторизации и текущего пользователя
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """
    Снимок текущего пользователя, который хранится в сессии и на диске.

    Attributes:
        id: ID пользователя на backend'е
        username: Имя пользователя
        email: Email (может отсутствовать в старых сохранённых записях)
    """

    model_config = ConfigDict(frozen=True)

    id: Optional[int] = None
    username: str = Field(..., description="Имя пользователя", examples=["moviefan"])
    email: Optional[str] = None


class AuthResponse(BaseModel):
    """
    Ответ /auth/login/ и /auth/register/.

    Лишние поля ответа сохраняются, поскольку вызывающий код получает
    исходный payload целиком.
    """

    model_config = ConfigDict(extra="allow")

    access: Optional[str] = None
    user_id: Optional[int] = None
    username: Optional[str] = None
    email: Optional[str] = None

    def to_user(self, fallback_username: str = "", fallback_email: Optional[str] = None) -> User:
        """Собирает User из полей ответа, без повторного запроса"""
        return User(
            id=self.user_id,
            username=self.username or fallback_username,
            email=self.email or fallback_email,
        )

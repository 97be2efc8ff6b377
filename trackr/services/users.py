"""Сервис профиля пользователя."""

from typing import Any

from trackr.api_client import APIClient
from trackr.constants import ENDPOINT_AUTH_PROFILE


class UserService:
    def __init__(self, api: APIClient) -> None:
        self.api = api

    def get_profile(self) -> Any:
        return self.api.get(ENDPOINT_AUTH_PROFILE).data

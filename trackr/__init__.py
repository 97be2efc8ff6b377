"""Клиент Trackr: сессия, авторизация и обёртки REST API."""

__version__ = "0.1.0"

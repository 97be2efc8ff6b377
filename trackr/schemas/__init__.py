"""
Schemas модуль с Pydantic моделями
"""

from .auth import AuthResponse, User

__all__ = ["AuthResponse", "User"]

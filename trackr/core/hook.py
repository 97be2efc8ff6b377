"""Адаптер AuthService для экранов: реактивные флаги в словаре состояния."""

import logging
from typing import Any, MutableMapping, Optional

from trackr.constants import (
    SESSION_AUTH_CHECKED,
    SESSION_CURRENT_USER,
    SESSION_IS_INITIALIZING,
    SESSION_IS_LOGGED_IN,
)
from trackr.core.auth import AuthService
from trackr.schemas import User

logger = logging.getLogger(__name__)


class AuthHook:
    """
    Подписка одного потребителя на AuthService.

    Флаги живут в переданном словаре состояния (например, st.session_state),
    поэтому экран перерисовывается по их изменению. Экран должен ждать
    auth_checked, а не полагаться на начальное значение is_logged_in.
    """

    def __init__(self, service: AuthService, state: Optional[MutableMapping[str, Any]] = None) -> None:
        self.service = service
        self.state: MutableMapping[str, Any] = state if state is not None else {}
        # Один и тот же bound method при mount и unmount
        self._listener = self._handle_auth_change
        self.mounted = False

        self.state.setdefault(SESSION_IS_LOGGED_IN, False)
        self.state.setdefault(SESSION_CURRENT_USER, None)
        self.state.setdefault(SESSION_AUTH_CHECKED, False)
        self.state.setdefault(SESSION_IS_INITIALIZING, False)

    @property
    def is_logged_in(self) -> bool:
        return bool(self.state[SESSION_IS_LOGGED_IN])

    @property
    def current_user(self) -> Optional[User]:
        return self.state[SESSION_CURRENT_USER]

    @property
    def auth_checked(self) -> bool:
        return bool(self.state[SESSION_AUTH_CHECKED])

    @property
    def is_initializing(self) -> bool:
        return bool(self.state[SESSION_IS_INITIALIZING])

    def _handle_auth_change(self, is_authenticated: bool, user: Optional[User]) -> None:
        logger.debug(f"Auth state changed: authenticated={is_authenticated}")
        self.state[SESSION_IS_LOGGED_IN] = is_authenticated
        self.state[SESSION_CURRENT_USER] = user
        self.state[SESSION_AUTH_CHECKED] = True

    def mount(self) -> None:
        """
        Подписаться и выполнить initialize().

        Подписка оформляется до initialize(), иначе синхронное оповещение
        о результате будет пропущено. Флаг инициализации снимается при
        любом исходе.
        """
        if self.mounted:
            return
        self.service.add_auth_listener(self._listener)
        self.mounted = True

        self.state[SESSION_IS_INITIALIZING] = True
        try:
            self.service.initialize()
        except Exception as e:
            logger.error(f"Auth initialization failed: {e}", exc_info=True)
        finally:
            self.state[SESSION_IS_INITIALIZING] = False
            self.state[SESSION_AUTH_CHECKED] = True

    def unmount(self) -> None:
        self.service.remove_auth_listener(self._listener)
        self.mounted = False

    def sign_out(self) -> None:
        """
        Выход. Оповещение синхронное, поэтому к возврату все подписчики,
        включая этот hook, уже получили Unauthenticated.
        """
        self.service.sign_out()

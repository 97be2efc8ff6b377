"""Реестр подписчиков на изменения состояния авторизации."""

import logging
from typing import Callable, Dict, Optional

from trackr.schemas import User

logger = logging.getLogger(__name__)

AuthListener = Callable[[bool, Optional[User]], None]


class Subscription:
    """Хэндл подписки: отписывает ровно тот callback, который был добавлен."""

    def __init__(self, registry: "AuthListenerRegistry", callback: AuthListener) -> None:
        self._registry = registry
        self.callback = callback

    @property
    def active(self) -> bool:
        return self._registry.is_registered(self.callback)

    def unsubscribe(self) -> None:
        self._registry.remove(self.callback)


class AuthListenerRegistry:
    """
    Подписчики хранятся по идентичности callback'а в порядке регистрации.

    Повторная регистрация того же callback'а ничего не меняет, удаление
    незарегистрированного callback'а игнорируется. Исключение в одном
    подписчике не мешает доставке остальным.
    """

    def __init__(self) -> None:
        self._subscriptions: Dict[AuthListener, Subscription] = {}

    def __len__(self) -> int:
        return len(self._subscriptions)

    def is_registered(self, callback: AuthListener) -> bool:
        return callback in self._subscriptions

    def add(self, callback: AuthListener) -> Subscription:
        subscription = self._subscriptions.get(callback)
        if subscription is None:
            subscription = Subscription(self, callback)
            self._subscriptions[callback] = subscription
        return subscription

    def remove(self, callback: AuthListener) -> None:
        self._subscriptions.pop(callback, None)

    def notify(self, is_authenticated: bool, user: Optional[User]) -> int:
        """
        Синхронно вызывает всех подписчиков.

        Returns:
            Количество подписчиков, отработавших без исключения
        """
        delivered = 0
        # Снимок: подписчик может отписаться прямо из callback'а
        for callback in list(self._subscriptions):
            try:
                callback(is_authenticated, user)
                delivered += 1
            except Exception:
                logger.exception(f"Auth listener {callback!r} failed")
        return delivered

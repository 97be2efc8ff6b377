"""Постоянное key/value хранилище для токена и снимка пользователя."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, MutableMapping, Optional, Union

from trackr.constants import SESSION_CREDENTIALS

logger = logging.getLogger(__name__)


class CredentialStore:
    """
    Базовый интерфейс хранилища.

    read() никогда не бросает исключений, write() и remove() работают
    по принципу best-effort: сбой логируется и не прерывает вызывающий код.
    write() возвращает False, если значение не сохранено.
    """

    def read(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def write(self, key: str, value: str) -> bool:
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError


class MemoryCredentialStore(CredentialStore):
    """Хранилище в памяти процесса (тесты и эфемерные сессии)."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def read(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def write(self, key: str, value: str) -> bool:
        self._data[key] = value
        return True

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class SessionStateCredentialStore(CredentialStore):
    """
    Хранилище одной сессии браузера поверх st.session_state.

    Записи лежат в словаре под ключом SESSION_CREDENTIALS, поэтому
    посетители Streamlit сервера не видят учетных данных друг друга.
    """

    def __init__(self, state: MutableMapping, key: str = SESSION_CREDENTIALS) -> None:
        self.state = state
        self.key = key

    def _data(self) -> Dict[str, str]:
        return self.state.setdefault(self.key, {})

    def read(self, key: str) -> Optional[str]:
        return self._data().get(key)

    def write(self, key: str, value: str) -> bool:
        self._data()[key] = value
        return True

    def remove(self, key: str) -> None:
        self._data().pop(key, None)


class JsonFileCredentialStore(CredentialStore):
    """
    Долговременное хранилище в JSON файле.

    Все ключи лежат в одном объекте. Запись идёт через временный файл
    и os.replace, поэтому файл не остаётся наполовину записанным.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path).expanduser()

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Unexpected storage format in {self.path}")
        return data

    def _dump(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".trackr-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise
        try:
            self.path.chmod(0o600)
        except OSError:
            pass

    def read(self, key: str) -> Optional[str]:
        try:
            value = self._load().get(key)
        except (OSError, ValueError) as e:
            logger.warning(f"[STORAGE] Failed to read '{key}' from {self.path}: {e}")
            return None
        return value if isinstance(value, str) else None

    def write(self, key: str, value: str) -> bool:
        try:
            data = self._load()
        except (OSError, ValueError) as e:
            logger.warning(f"[STORAGE] Discarding unreadable storage {self.path}: {e}")
            data = {}
        data[key] = value
        try:
            self._dump(data)
            logger.debug(f"[STORAGE] Saved '{key}' to {self.path}")
            return True
        except OSError as e:
            logger.error(f"[STORAGE] Failed to save '{key}': {e}", exc_info=True)
            return False

    def remove(self, key: str) -> None:
        try:
            data = self._load()
            if key not in data:
                return
            del data[key]
            self._dump(data)
            logger.debug(f"[STORAGE] Removed '{key}' from {self.path}")
        except (OSError, ValueError) as e:
            logger.error(f"[STORAGE] Failed to remove '{key}': {e}", exc_info=True)

"""Прогресс просмотра сериала: сервер, с локальным хранилищем на случай 404."""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from trackr.api_client import APIClient
from trackr.constants import ENDPOINT_SERIES, SERIES_PROGRESS_HISTORY_LIMIT, STORAGE_SERIES_PROGRESS_KEY
from trackr.core.exceptions import NotFoundError, StorageError
from trackr.core.storage import CredentialStore

logger = logging.getLogger(__name__)


class SeriesProgressService:
    """
    Прогресс по сериалу целиком.

    Если backend не поддерживает /series/{id}/progress/ (404), данные
    читаются и пишутся в локальное хранилище под ключом
    series_progress_<tmdb_id>. Локальная запись хранит историю из
    последних SERIES_PROGRESS_HISTORY_LIMIT изменений и последние
    значения season/episode/rating/notes на верхнем уровне.
    """

    def __init__(self, api: APIClient, store: CredentialStore) -> None:
        self.api = api
        self.store = store

    @staticmethod
    def _storage_key(tmdb_id: int) -> str:
        return STORAGE_SERIES_PROGRESS_KEY.format(tmdb_id=tmdb_id)

    @staticmethod
    def _path(tmdb_id: int) -> str:
        return f"{ENDPOINT_SERIES}{tmdb_id}/progress/"

    def _load_local(self, tmdb_id: int) -> Optional[Dict[str, Any]]:
        raw = self.store.read(self._storage_key(tmdb_id))
        if not raw:
            return None
        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.error(f"[PROGRESS] Corrupted local progress for {tmdb_id}: {e}")
            return None
        return data if isinstance(data, dict) else None

    def get_series_progress(self, tmdb_id: int) -> Optional[Dict[str, Any]]:
        try:
            return self.api.get(self._path(tmdb_id)).data
        except NotFoundError:
            logger.warning("[PROGRESS] Endpoint not available, loading from local storage")
            return self._load_local(tmdb_id)

    def upsert_series_progress(self, tmdb_id: int, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            return self.api.post(self._path(tmdb_id), json=payload).data
        except NotFoundError:
            logger.warning("[PROGRESS] Endpoint not available, saving to local storage")

        existing = self._load_local(tmdb_id) or {"history": []}
        entry = dict(payload)
        entry["updated_at"] = datetime.now(timezone.utc).isoformat()

        history = existing.get("history") or []
        existing["history"] = [entry] + history[: SERIES_PROGRESS_HISTORY_LIMIT - 1]
        for field in ("season", "episode", "rating", "notes"):
            existing[field] = payload.get(field)
        existing["updated_at"] = entry["updated_at"]

        if not self.store.write(self._storage_key(tmdb_id), json.dumps(existing, ensure_ascii=False)):
            raise StorageError("Failed to save to local storage")
        return existing

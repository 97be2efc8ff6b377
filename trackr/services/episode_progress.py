"""Сервис прогресса просмотра эпизодов (серверные записи)."""

import logging
from typing import Any, Dict, Optional

from trackr.api_client import APIClient
from trackr.constants import (
    ENDPOINT_EPISODE_PROGRESS,
    HTTP_NO_CONTENT,
    MAX_RATING,
    MIN_RATING,
    PROGRESS_STATUS_COMPLETED,
    PROGRESS_STATUS_WATCHING,
)
from trackr.core.exceptions import ValidationError

logger = logging.getLogger(__name__)


def _coerce_status(status: Optional[str]) -> str:
    # Backend знает только два статуса
    return PROGRESS_STATUS_COMPLETED if status == PROGRESS_STATUS_COMPLETED else PROGRESS_STATUS_WATCHING


def _valid_rating(rating: Any) -> bool:
    return isinstance(rating, int) and not isinstance(rating, bool) and MIN_RATING <= rating <= MAX_RATING


class EpisodeProgressService:
    """Обёртка над /episode-progress/."""

    def __init__(self, api: APIClient) -> None:
        self.api = api

    def get_progress(
        self,
        series_id: Optional[int] = None,
        season: Optional[int] = None,
        episode: Optional[int] = None,
    ) -> Any:
        """Записи прогресса пользователя, опционально с фильтрами"""
        params: Dict[str, Any] = {}
        if series_id:
            params["series"] = series_id
        if season is not None:
            params["season"] = season
        if episode is not None:
            params["episode"] = episode
        logger.debug(f"Fetching episode progress: {params}")
        return self.api.get(ENDPOINT_EPISODE_PROGRESS, params=params or None).data

    def get_progress_by_id(self, progress_id: int) -> Any:
        return self.api.get(f"{ENDPOINT_EPISODE_PROGRESS}{progress_id}/").data

    def create_progress(
        self,
        series_id: int,
        season: int,
        episode: int,
        status: Optional[str] = None,
        notes: Optional[str] = None,
        rating: Any = None,
    ) -> Any:
        """
        Создать запись прогресса.

        Любой статус, кроме 'completed', сохраняется как 'watching'.
        Рейтинг отправляется, только если это целое число от 1 до 5,
        иначе он молча отбрасывается.
        """
        if not series_id:
            raise ValidationError("Series ID is required")
        payload: Dict[str, Any] = {
            "series_id": series_id,
            "season": season,
            "episode": episode,
            "status": _coerce_status(status),
        }
        if notes is not None:
            payload["notes"] = notes
        if _valid_rating(rating):
            payload["rating"] = rating

        logger.info(f"Saving episode progress: series={series_id} S{season}E{episode}")
        return self.api.post(ENDPOINT_EPISODE_PROGRESS, json=payload).data

    def update_progress(
        self,
        progress_id: int,
        season: Optional[int] = None,
        episode: Optional[int] = None,
        status: Optional[str] = None,
        notes: Optional[str] = None,
        rating: Any = None,
    ) -> Any:
        """Частичное обновление: отправляются только переданные поля"""
        payload: Dict[str, Any] = {}
        if season is not None:
            payload["season"] = season
        if episode is not None:
            payload["episode"] = episode
        if status is not None:
            payload["status"] = _coerce_status(status)
        if notes is not None:
            payload["notes"] = notes
        if _valid_rating(rating):
            payload["rating"] = rating

        logger.info(f"Updating episode progress {progress_id}: {sorted(payload)}")
        return self.api.patch(f"{ENDPOINT_EPISODE_PROGRESS}{progress_id}/", json=payload).data

    def delete_progress(self, progress_id: int) -> Any:
        response = self.api.delete(f"{ENDPOINT_EPISODE_PROGRESS}{progress_id}/")
        if response.status_code == HTTP_NO_CONTENT or not response.data:
            return {"success": True}
        return response.data

    def get_or_create_progress(
        self,
        series_id: int,
        season: int,
        episode: int,
        defaults: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Существующая запись для эпизода или новая с параметрами defaults"""
        existing = self.get_progress(series_id=series_id, season=season, episode=episode)
        if isinstance(existing, dict):
            existing = existing.get("results")
        if isinstance(existing, list) and existing:
            return existing[0]

        defaults = defaults or {}
        return self.create_progress(
            series_id=series_id,
            season=season,
            episode=episode,
            status=defaults.get("status"),
            notes=defaults.get("notes", ""),
            rating=defaults.get("rating"),
        )

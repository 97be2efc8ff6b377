"""Сервис избранных фильмов и сериалов."""

import logging
from typing import Any, Dict

from trackr.api_client import APIClient
from trackr.constants import (
    ENDPOINT_FAVORITES,
    ENDPOINT_FAVORITES_CHECK,
    ENDPOINT_FAVORITES_REMOVE_BY_TMDB,
    MEDIA_TYPE_MOVIE,
)
from trackr.core.exceptions import TrackrError, ValidationError

logger = logging.getLogger(__name__)


class FavoriteService:
    """Обёртка над /favorites/."""

    def __init__(self, api: APIClient) -> None:
        self.api = api

    def get_favorites(self) -> Any:
        return self.api.get(ENDPOINT_FAVORITES).data

    def add_favorite(self, tmdb_id: int, media_type: str = MEDIA_TYPE_MOVIE) -> Any:
        if not tmdb_id:
            raise ValidationError("TMDB ID is required")
        logger.info(f"Adding favorite: tmdb_id={tmdb_id}, media_type={media_type}")
        return self.api.post(ENDPOINT_FAVORITES, json={"tmdb_id": tmdb_id, "media_type": media_type}).data

    def remove_favorite(self, movie_id: int) -> Any:
        if not movie_id:
            raise ValidationError("Movie ID is required")
        return self.api.delete(f"{ENDPOINT_FAVORITES}{movie_id}/").data

    def remove_favorite_by_tmdb(self, tmdb_id: int) -> Any:
        if not tmdb_id:
            raise ValidationError("TMDB ID is required")
        logger.info(f"Removing favorite by tmdb_id={tmdb_id}")
        return self.api.delete(ENDPOINT_FAVORITES_REMOVE_BY_TMDB, json={"tmdb_id": tmdb_id}).data

    def check_favorite(self, tmdb_id: int) -> Dict[str, Any]:
        """Статус избранного; при любой ошибке - {"is_favorite": False}"""
        try:
            return self.api.get(ENDPOINT_FAVORITES_CHECK, params={"tmdb_id": tmdb_id}).data
        except TrackrError as e:
            logger.warning(f"Error checking favorite for tmdb_id={tmdb_id}: {e}")
            return {"is_favorite": False}

"""Сервис фильмов: прокси к метаданным TMDB и локальный каталог backend'а."""

import logging
from typing import Any, Dict

from trackr.api_client import APIClient
from trackr.constants import (
    ENDPOINT_MOVIES,
    ENDPOINT_MOVIES_GET_OR_CREATE,
    ENDPOINT_TMDB_MOVIES,
    ENDPOINT_TMDB_POPULAR,
    ENDPOINT_TMDB_SEARCH,
    ENDPOINT_TMDB_TV,
    MEDIA_TYPE_MOVIE,
    MSG_INVALID_RESPONSE,
)
from trackr.core.exceptions import ApiError, ValidationError

logger = logging.getLogger(__name__)


def _require_results(data: Any) -> Dict[str, Any]:
    """Ответ списка должен содержать results: [...]"""
    if not isinstance(data, dict) or not isinstance(data.get("results"), list):
        raise ApiError(MSG_INVALID_RESPONSE, details=data)
    return data


def _require_id(value: Any, name: str) -> None:
    if not value:
        raise ValidationError(f"{name} is required")


class MovieService:
    """Обёртка над /tmdb/ и /movies/."""

    def __init__(self, api: APIClient) -> None:
        self.api = api

    # ===== TMDB =====

    def search_movies(self, query: str, page: int = 1, type: str = "multi") -> Dict[str, Any]:
        if not query or not query.strip():
            raise ValidationError("Search query is required")
        data = self.api.get(
            ENDPOINT_TMDB_SEARCH,
            params={"query": query.strip(), "page": page, "type": type},
        ).data
        return _require_results(data)

    def get_popular_movies(self, type: str = MEDIA_TYPE_MOVIE, page: int = 1) -> Dict[str, Any]:
        data = self.api.get(ENDPOINT_TMDB_POPULAR, params={"type": type, "page": page}).data
        return _require_results(data)

    # У backend'а нет отдельных подборок, все они отдают популярное
    def get_now_playing_movies(self, page: int = 1) -> Dict[str, Any]:
        return self.get_popular_movies(MEDIA_TYPE_MOVIE, page)

    def get_trending_movies(self) -> Dict[str, Any]:
        return self.get_popular_movies(MEDIA_TYPE_MOVIE, 1)

    def get_upcoming_movies(self, page: int = 1) -> Dict[str, Any]:
        return self.get_popular_movies(MEDIA_TYPE_MOVIE, page)

    def get_top_rated_movies(self, page: int = 1) -> Dict[str, Any]:
        return self.get_popular_movies(MEDIA_TYPE_MOVIE, page)

    def get_movie_details(self, tmdb_id: int) -> Any:
        _require_id(tmdb_id, "TMDB ID")
        data = self.api.get(f"{ENDPOINT_TMDB_MOVIES}{tmdb_id}/").data
        if not data:
            raise ApiError("Invalid movie details response")
        return data

    def get_tv_details(self, tmdb_id: int) -> Any:
        _require_id(tmdb_id, "TMDB ID")
        data = self.api.get(f"{ENDPOINT_TMDB_TV}{tmdb_id}/").data
        if not data:
            raise ApiError("Invalid TV details response")
        return data

    # ===== Локальный каталог =====

    def get_or_create_movie(self, tmdb_id: Any, media_type: str = MEDIA_TYPE_MOVIE) -> Any:
        _require_id(tmdb_id, "TMDB ID")
        try:
            tmdb_id = int(tmdb_id)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid TMDB ID: {tmdb_id!r}")
        return self.api.post(
            ENDPOINT_MOVIES_GET_OR_CREATE,
            json={"tmdb_id": tmdb_id, "media_type": media_type},
        ).data

    def get_local_movies(self) -> Dict[str, Any]:
        return _require_results(self.api.get(ENDPOINT_MOVIES).data)

    def create_movie(self, movie_data: Dict[str, Any]) -> Any:
        missing = [field for field in ("title",) if not movie_data.get(field)]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")
        return self.api.post(ENDPOINT_MOVIES, json=movie_data).data

    def get_movie_by_id(self, movie_id: int) -> Any:
        _require_id(movie_id, "Movie ID")
        return self.api.get(f"{ENDPOINT_MOVIES}{movie_id}/").data

    def update_movie(self, movie_id: int, movie_data: Dict[str, Any]) -> Any:
        _require_id(movie_id, "Movie ID")
        return self.api.put(f"{ENDPOINT_MOVIES}{movie_id}/", json=movie_data).data

    def delete_movie(self, movie_id: int) -> Any:
        _require_id(movie_id, "Movie ID")
        logger.info(f"Deleting movie {movie_id}")
        return self.api.delete(f"{ENDPOINT_MOVIES}{movie_id}/").data

"""Сервис плейлистов."""

import logging
from typing import Any, Dict, List, Optional

from trackr.api_client import APIClient
from trackr.constants import (
    DEFAULT_PLAYLIST_ITEM_STATUS,
    ENDPOINT_PLAYLISTS,
    HTTP_NO_CONTENT,
    MSG_MOVIE_NOT_IN_PLAYLIST,
    MSG_PLAYLIST_NOT_FOUND,
    PLAYLIST_ITEM_STATUSES,
)
from trackr.core.exceptions import NotFoundError, TrackrError, ValidationError
from trackr.services.reviews import parse_rating

logger = logging.getLogger(__name__)


def _require_title(title: Optional[str]) -> str:
    if not title or not title.strip():
        raise ValidationError("Playlist title is required")
    return title.strip()


def _require_movie_id(movie_id: Any) -> None:
    if not movie_id:
        raise ValidationError("Movie ID is required")


def _results(data: Any) -> List[Dict[str, Any]]:
    """Список из ответа: массив или {"results": [...]}"""
    if isinstance(data, dict):
        return data.get("results") or []
    return data or []


class PlaylistService:
    """Обёртка над /playlists/."""

    def __init__(self, api: APIClient) -> None:
        self.api = api

    def get_playlists(self) -> Any:
        return self.api.get(ENDPOINT_PLAYLISTS).data

    def count_playlists(self) -> int:
        """Количество плейлистов пользователя"""
        return len(_results(self.get_playlists()))

    def get_playlist(self, playlist_id: int) -> Dict[str, Any]:
        """
        Плейлист с элементами.

        Если detail-ответ не содержит items, они запрашиваются отдельно;
        ошибка этого запроса даёт пустой список.
        """
        playlist = self.api.get(f"{ENDPOINT_PLAYLISTS}{playlist_id}/").data or {}
        if "items" not in playlist:
            try:
                playlist["items"] = self.get_playlist_items(playlist_id) or []
            except TrackrError as e:
                logger.warning(f"Could not fetch items for playlist {playlist_id}: {e}")
                playlist["items"] = []
        return playlist

    def get_playlist_items(self, playlist_id: int) -> Any:
        return self.api.get(f"{ENDPOINT_PLAYLISTS}{playlist_id}/items/").data

    def create_playlist(self, title: str, description: str = "") -> Any:
        payload = {"title": _require_title(title), "description": description or ""}
        return self.api.post(ENDPOINT_PLAYLISTS, json=payload).data

    def update_playlist(self, playlist_id: int, title: str, description: str = "") -> Any:
        payload = {"title": _require_title(title), "description": description or ""}
        return self.api.put(f"{ENDPOINT_PLAYLISTS}{playlist_id}/", json=payload).data

    def delete_playlist(self, playlist_id: int) -> Any:
        logger.info(f"Deleting playlist {playlist_id}")
        try:
            response = self.api.delete(f"{ENDPOINT_PLAYLISTS}{playlist_id}/")
        except NotFoundError as e:
            raise NotFoundError(MSG_PLAYLIST_NOT_FOUND, status_code=e.status_code, details=e.details) from e

        if response.status_code == HTTP_NO_CONTENT:
            return {"success": True, "message": "Playlist deleted successfully"}
        return response.data or {"success": True}

    def add_movie_to_playlist(
        self,
        playlist_id: int,
        movie_id: int,
        status: str = DEFAULT_PLAYLIST_ITEM_STATUS,
    ) -> Any:
        _require_movie_id(movie_id)
        return self.api.post(
            f"{ENDPOINT_PLAYLISTS}{playlist_id}/add_movie/",
            json={"movie_id": movie_id, "status": status},
        ).data

    def remove_movie_from_playlist(self, playlist_id: int, movie_id: int) -> Dict[str, Any]:
        _require_movie_id(movie_id)
        logger.info(f"Removing movie {movie_id} from playlist {playlist_id}")
        try:
            response = self.api.delete(f"{ENDPOINT_PLAYLISTS}{playlist_id}/remove_movie/{movie_id}/")
        except NotFoundError as e:
            raise NotFoundError(MSG_MOVIE_NOT_IN_PLAYLIST, status_code=e.status_code, details=e.details) from e

        return {
            "success": True,
            "message": "Movie removed from playlist",
            "data": response.data,
        }

    def update_movie_status(self, playlist_id: int, movie_id: int, status: str) -> Any:
        _require_movie_id(movie_id)
        if status not in PLAYLIST_ITEM_STATUSES:
            raise ValidationError(f"Invalid status. Must be one of: {', '.join(PLAYLIST_ITEM_STATUSES)}")
        return self.api.patch(
            f"{ENDPOINT_PLAYLISTS}{playlist_id}/update_item_status/{movie_id}/",
            json={"status": status},
        ).data

    def update_movie_rating(self, playlist_id: int, movie_id: int, rating: Any) -> Any:
        _require_movie_id(movie_id)
        return self.api.patch(
            f"{ENDPOINT_PLAYLISTS}{playlist_id}/update_item_rating/{movie_id}/",
            json={"rating": parse_rating(rating)},
        ).data

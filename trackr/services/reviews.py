"""Сервис отзывов пользователя."""

import logging
from typing import Any, Dict, Optional

from trackr.api_client import APIClient
from trackr.constants import (
    ENDPOINT_MOVIES_GET_OR_CREATE,
    ENDPOINT_REVIEWS,
    ENDPOINT_REVIEWS_BY_MOVIE,
    ENDPOINT_REVIEWS_DELETE_BY_MOVIE,
    ENDPOINT_REVIEWS_MINE,
    HTTP_BAD_REQUEST,
    HTTP_NOT_FOUND,
    MAX_RATING,
    MEDIA_TYPE_MOVIE,
    MEDIA_TYPE_TV,
    MIN_RATING,
    TV_MEDIA_TYPE_ALIASES,
)
from trackr.core.exceptions import ApiError, NotFoundError, TrackrError, ValidationError

logger = logging.getLogger(__name__)


def normalize_media_type(media_type: Optional[str]) -> str:
    """'tv', 'series' и 'tv show' означают сериал, всё остальное - фильм"""
    if media_type and media_type.strip().lower() in TV_MEDIA_TYPE_ALIASES:
        return MEDIA_TYPE_TV
    return MEDIA_TYPE_MOVIE


def parse_rating(rating: Any) -> int:
    """Оценка 1..5 из числа или строки, иначе ValidationError"""
    try:
        value = int(rating)
    except (TypeError, ValueError):
        value = 0
    if value < MIN_RATING or value > MAX_RATING:
        raise ValidationError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")
    return value


class ReviewService:
    """Обёртка над /reviews/."""

    def __init__(self, api: APIClient) -> None:
        self.api = api

    def _resolve_movie_id(self, tmdb_id: int, media_type: str) -> int:
        data = self.api.post(
            ENDPOINT_MOVIES_GET_OR_CREATE,
            json={"tmdb_id": tmdb_id, "media_type": media_type},
        ).data
        if not isinstance(data, dict) or not data.get("id"):
            raise ApiError("Failed to resolve movie id", details=data)
        return data["id"]

    def submit_review(
        self,
        tmdb_id: int,
        rating: Any,
        review_text: str = "",
        media_type: str = MEDIA_TYPE_MOVIE,
    ) -> Any:
        """
        Создать или обновить отзыв пользователя.

        Сначала фильм регистрируется на backend'е (get_or_create). Если
        поиск как 'movie' не удался, повторяется как 'tv'; обратного
        перехода нет. Затем существующий отзыв обновляется, либо
        создаётся новый.
        """
        if not tmdb_id:
            raise ValidationError("Movie ID is required")
        numeric_rating = parse_rating(rating)
        normalized = normalize_media_type(media_type)

        try:
            movie_id = self._resolve_movie_id(tmdb_id, normalized)
        except TrackrError as e:
            if normalized != MEDIA_TYPE_MOVIE:
                raise
            logger.warning(f"Movie lookup for tmdb_id={tmdb_id} failed ({e}), retrying as tv")
            movie_id = self._resolve_movie_id(tmdb_id, MEDIA_TYPE_TV)

        review_data = {
            "movie": movie_id,
            "tmdb_id": tmdb_id,
            "rating": numeric_rating,
            "review_text": str(review_text or ""),
            "media_type": normalized,
        }

        try:
            existing = self.get_user_review(tmdb_id=tmdb_id)
        except TrackrError as e:
            logger.info(f"No existing review lookup for tmdb_id={tmdb_id}: {e}")
            existing = None

        if existing and existing.get("id"):
            logger.info(f"Updating review {existing['id']} for tmdb_id={tmdb_id}")
            return self.api.patch(f"{ENDPOINT_REVIEWS}{existing['id']}/", json=review_data).data

        logger.info(f"Creating review for tmdb_id={tmdb_id}")
        return self.api.post(ENDPOINT_REVIEWS, json=review_data).data

    def get_user_review(
        self,
        tmdb_id: Optional[int] = None,
        movie_id: Optional[int] = None,
        media_type: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        """Отзыв пользователя на фильм или None, если его нет"""
        params: Dict[str, Any] = {}
        if tmdb_id:
            params["tmdb_id"] = tmdb_id
        if movie_id:
            params["movie_id"] = movie_id
        if media_type:
            params["media_type"] = media_type
        try:
            return self.api.get(ENDPOINT_REVIEWS_BY_MOVIE, params=params).data
        except NotFoundError:
            return None

    def get_user_reviews(self) -> Any:
        return self.api.get(ENDPOINT_REVIEWS_MINE).data

    def _delete_by_movie(self, tmdb_id: Optional[int], movie_id: Optional[int]) -> Any:
        if not tmdb_id and not movie_id:
            raise ValidationError("Review ID not found to delete")
        payload: Dict[str, int] = {}
        if tmdb_id:
            payload["tmdb_id"] = int(tmdb_id)
        if movie_id:
            payload["movie_id"] = int(movie_id)
        logger.info(f"Deleting review by movie reference: {payload}")
        return self.api.delete(ENDPOINT_REVIEWS_DELETE_BY_MOVIE, json=payload).data

    def delete_review(
        self,
        review_id: Optional[int] = None,
        tmdb_id: Optional[int] = None,
        movie_id: Optional[int] = None,
    ) -> Any:
        """
        Удалить отзыв по ID; при 404/400 или без ID - по ссылке на фильм.
        """
        if not review_id:
            return self._delete_by_movie(tmdb_id, movie_id)

        try:
            return self.api.delete(f"{ENDPOINT_REVIEWS}{review_id}/").data
        except TrackrError as e:
            if e.status_code not in (HTTP_NOT_FOUND, HTTP_BAD_REQUEST):
                raise
            logger.warning(f"Delete review {review_id} failed ({e.status_code}), retrying by movie")
            return self._delete_by_movie(tmdb_id, movie_id)

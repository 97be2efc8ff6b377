"""Доменные сервисы поверх APIClient."""

from trackr.services.episode_progress import EpisodeProgressService
from trackr.services.favorites import FavoriteService
from trackr.services.movies import MovieService
from trackr.services.playlists import PlaylistService
from trackr.services.reviews import ReviewService, normalize_media_type
from trackr.services.series_progress import SeriesProgressService
from trackr.services.users import UserService

__all__ = [
    "EpisodeProgressService",
    "FavoriteService",
    "MovieService",
    "PlaylistService",
    "ReviewService",
    "SeriesProgressService",
    "UserService",
    "normalize_media_type",
]

"""Константы приложения."""

from typing import Final, Tuple

# ===== HTTP STATUS CODES =====
HTTP_NO_CONTENT: Final[int] = 204
HTTP_BAD_REQUEST: Final[int] = 400
HTTP_UNAUTHORIZED: Final[int] = 401
HTTP_FORBIDDEN: Final[int] = 403
HTTP_NOT_FOUND: Final[int] = 404

# ===== SESSION STATE KEYS (состояние hook'а) =====
SESSION_IS_LOGGED_IN: Final[str] = "is_logged_in"
SESSION_CURRENT_USER: Final[str] = "current_user"
SESSION_AUTH_CHECKED: Final[str] = "auth_checked"
SESSION_IS_INITIALIZING: Final[str] = "is_initializing"
SESSION_AUTH_HOOK: Final[str] = "auth_hook"
SESSION_CREDENTIALS: Final[str] = "credentials"

# ===== PERSISTENCE KEYS =====
STORAGE_AUTH_TOKEN_KEY: Final[str] = "trackr_auth_token"
STORAGE_USER_KEY: Final[str] = "trackr_user"
STORAGE_SERIES_PROGRESS_KEY: Final[str] = "series_progress_{tmdb_id}"

# ===== PLATFORMS =====
PLATFORM_WEB: Final[str] = "web"
PLATFORM_NATIVE: Final[str] = "native"

# ===== TIMEOUTS =====
DEFAULT_API_TIMEOUT: Final[int] = 10

# ===== AUTH HEADER =====
AUTH_HEADER_SCHEME: Final[str] = "Token"

# ===== ERROR MESSAGES =====
MSG_TIMEOUT: Final[str] = "Request timeout - server may be offline"
MSG_NO_CONNECTION: Final[str] = "Cannot connect to server. Please check if the backend is running."
MSG_UNEXPECTED_ERROR: Final[str] = "An unexpected error occurred"
MSG_INVALID_CREDENTIALS: Final[str] = "Invalid username or password"
MSG_USER_NOT_FOUND: Final[str] = "User does not exist"
MSG_SIGN_IN_FAILED: Final[str] = "Sign in failed. Please try again."
MSG_NO_TOKEN: Final[str] = "No token received from server"
MSG_INVALID_RESPONSE: Final[str] = "Invalid response format from server"
MSG_PLAYLIST_NOT_FOUND: Final[str] = "Playlist not found. It may have already been deleted."
MSG_MOVIE_NOT_IN_PLAYLIST: Final[str] = "Movie not found in this playlist."

# ===== DEFAULT PLAYLISTS =====
DEFAULT_PLAYLISTS: Final[Tuple[Tuple[str, str], ...]] = (
    ("Watchlist", "Movies and shows I want to watch"),
    ("Favorites", "My all-time favorite movies and shows"),
    ("Watched", "Everything I have finished watching"),
)

# ===== PLAYLIST ITEMS =====
PLAYLIST_ITEM_STATUSES: Final[Tuple[str, ...]] = ("to_watch", "watching", "watched", "did_not_finish")
DEFAULT_PLAYLIST_ITEM_STATUS: Final[str] = "to_watch"

# ===== RATINGS =====
MIN_RATING: Final[int] = 1
MAX_RATING: Final[int] = 5

# ===== MEDIA TYPES =====
MEDIA_TYPE_MOVIE: Final[str] = "movie"
MEDIA_TYPE_TV: Final[str] = "tv"
TV_MEDIA_TYPE_ALIASES: Final[Tuple[str, ...]] = ("tv", "series", "tv show")

# ===== EPISODE PROGRESS =====
PROGRESS_STATUS_COMPLETED: Final[str] = "completed"
PROGRESS_STATUS_WATCHING: Final[str] = "watching"
SERIES_PROGRESS_HISTORY_LIMIT: Final[int] = 10

# ===== API ENDPOINTS =====
ENDPOINT_AUTH_REGISTER: Final[str] = "/auth/register/"
ENDPOINT_AUTH_LOGIN: Final[str] = "/auth/login/"
ENDPOINT_AUTH_PROFILE: Final[str] = "/auth/profile/"
ENDPOINT_PASSWORD_RESET_REQUEST: Final[str] = "/auth/password-reset/request/"
ENDPOINT_PASSWORD_RESET_VERIFY: Final[str] = "/auth/password-reset/verify/"
ENDPOINT_PASSWORD_RESET_CONFIRM: Final[str] = "/auth/password-reset/confirm/"
ENDPOINT_CHANGE_PASSWORD_REQUEST: Final[str] = "/auth/change-password/request/"
ENDPOINT_CHANGE_PASSWORD: Final[str] = "/auth/change-password/"
ENDPOINT_PLAYLISTS: Final[str] = "/playlists/"
ENDPOINT_REVIEWS: Final[str] = "/reviews/"
ENDPOINT_REVIEWS_BY_MOVIE: Final[str] = "/reviews/by_movie/"
ENDPOINT_REVIEWS_MINE: Final[str] = "/reviews/my_reviews/"
ENDPOINT_REVIEWS_DELETE_BY_MOVIE: Final[str] = "/reviews/delete_by_movie/"
ENDPOINT_FAVORITES: Final[str] = "/favorites/"
ENDPOINT_FAVORITES_CHECK: Final[str] = "/favorites/check/"
ENDPOINT_FAVORITES_REMOVE_BY_TMDB: Final[str] = "/favorites/remove_by_tmdb/"
ENDPOINT_MOVIES: Final[str] = "/movies/"
ENDPOINT_MOVIES_GET_OR_CREATE: Final[str] = "/movies/get_or_create/"
ENDPOINT_TMDB_SEARCH: Final[str] = "/tmdb/search/"
ENDPOINT_TMDB_POPULAR: Final[str] = "/tmdb/popular/"
ENDPOINT_TMDB_MOVIES: Final[str] = "/tmdb/movies/"
ENDPOINT_TMDB_TV: Final[str] = "/tmdb/tv/"
ENDPOINT_EPISODE_PROGRESS: Final[str] = "/episode-progress/"
ENDPOINT_SERIES: Final[str] = "/series/"

# ===== UI MESSAGES =====
MSG_EMPTY_FIELDS: Final[str] = "Fill in all fields"
MSG_WELCOME: Final[str] = "Welcome, {username}!"
ICON_ERROR: Final[str] = "❌"
ICON_SUCCESS: Final[str] = "✅"
MSG_CHECKING_SESSION: Final[str] = "Checking your session..."

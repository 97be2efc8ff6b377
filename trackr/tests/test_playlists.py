"""Тесты сервиса плейлистов."""

import pytest

from trackr.constants import MSG_MOVIE_NOT_IN_PLAYLIST, MSG_PLAYLIST_NOT_FOUND
from trackr.core.exceptions import ApiError, NotFoundError, ValidationError
from trackr.services import PlaylistService
from trackr.tests.fakes import make_response


@pytest.fixture
def playlists(api) -> PlaylistService:
    return PlaylistService(api)


@pytest.mark.parametrize("data, count", [([{"id": 1}, {"id": 2}], 2), ({"results": [{"id": 1}]}, 1), ({"results": []}, 0)])
def test_count_accepts_list_or_results(playlists, backend, data, count):
    backend.on_json("GET", "/playlists/", data)
    assert playlists.count_playlists() == count


def test_get_playlist_fetches_missing_items(playlists, backend):
    backend.on_json("GET", "/playlists/4/", {"id": 4, "title": "Mine"})
    backend.on_json("GET", "/playlists/4/items/", [{"movie": 1}])

    assert playlists.get_playlist(4) == {"id": 4, "title": "Mine", "items": [{"movie": 1}]}


def test_get_playlist_items_failure_yields_empty_list(playlists, backend):
    backend.on_json("GET", "/playlists/4/", {"id": 4})
    backend.on_json("GET", "/playlists/4/items/", {"detail": "boom"}, status_code=500)

    assert playlists.get_playlist(4)["items"] == []


def test_get_playlist_keeps_embedded_items(playlists, backend):
    backend.on_json("GET", "/playlists/4/", {"id": 4, "items": [{"movie": 2}]})

    playlists.get_playlist(4)

    assert backend.paths() == ["/playlists/4/"]


def test_create_playlist_strips_title(playlists, backend):
    backend.on_json("POST", "/playlists/", {"id": 1}, status_code=201)

    playlists.create_playlist("  Horror  ")

    assert backend.calls[0]["json"] == {"title": "Horror", "description": ""}


@pytest.mark.parametrize("title", ["", "   ", None])
def test_create_playlist_requires_title(playlists, backend, title):
    with pytest.raises(ValidationError):
        playlists.create_playlist(title)
    assert backend.calls == []


def test_update_playlist_puts_payload(playlists, backend):
    backend.on_json("PUT", "/playlists/4/", {"id": 4})
    playlists.update_playlist(4, "New", "desc")
    assert backend.calls[0]["json"] == {"title": "New", "description": "desc"}


def test_delete_playlist_no_content(playlists, backend):
    backend.on("DELETE", "/playlists/4/", make_response(204))

    assert playlists.delete_playlist(4) == {"success": True, "message": "Playlist deleted successfully"}


def test_delete_missing_playlist(playlists):
    with pytest.raises(NotFoundError) as exc_info:
        playlists.delete_playlist(99)
    assert exc_info.value.formatted_message == MSG_PLAYLIST_NOT_FOUND


def test_add_movie_default_status(playlists, backend):
    backend.on_json("POST", "/playlists/4/add_movie/", {"ok": True})

    playlists.add_movie_to_playlist(4, 12)

    assert backend.calls[0]["json"] == {"movie_id": 12, "status": "to_watch"}


def test_remove_movie_wraps_response(playlists, backend):
    backend.on("DELETE", "/playlists/4/remove_movie/12/", make_response(204))

    result = playlists.remove_movie_from_playlist(4, 12)

    assert result["success"] is True
    assert result["data"] is None


def test_remove_movie_not_in_playlist(playlists):
    with pytest.raises(NotFoundError, match=MSG_MOVIE_NOT_IN_PLAYLIST):
        playlists.remove_movie_from_playlist(4, 12)


def test_update_movie_status_validates(playlists, backend):
    with pytest.raises(ValidationError):
        playlists.update_movie_status(4, 12, "binged")

    backend.on_json("PATCH", "/playlists/4/update_item_status/12/", {"status": "watched"})
    assert playlists.update_movie_status(4, 12, "watched") == {"status": "watched"}


@pytest.mark.parametrize("rating", [0, 6, "abc", None, "9", []])
def test_update_movie_rating_bounds(playlists, backend, rating):
    with pytest.raises(ValidationError):
        playlists.update_movie_rating(4, 12, rating)
    assert backend.calls == []


def test_update_movie_rating_accepts_numeric_string(playlists, backend):
    backend.on_json("PATCH", "/playlists/4/update_item_rating/12/", {"rating": 5})

    playlists.update_movie_rating(4, 12, "5")

    assert backend.calls[0]["json"] == {"rating": 5}


def test_server_error_propagates(playlists, backend):
    backend.on_json("GET", "/playlists/", {"error": "Database down"}, status_code=500)

    with pytest.raises(ApiError, match="Database down"):
        playlists.get_playlists()

"""Тесты AuthHook: флаги состояния, подписка и отписка."""

from unittest.mock import MagicMock

from trackr.constants import SESSION_AUTH_CHECKED, SESSION_IS_LOGGED_IN
from trackr.core.hook import AuthHook


def test_initial_flags_until_mount(auth):
    state = {}
    hook = AuthHook(auth, state)

    assert state[SESSION_IS_LOGGED_IN] is False
    assert hook.auth_checked is False
    assert hook.is_initializing is False
    assert hook.current_user is None


def test_existing_state_is_preserved(auth):
    state = {SESSION_IS_LOGGED_IN: True, SESSION_AUTH_CHECKED: True}
    hook = AuthHook(auth, state)
    assert hook.is_logged_in is True
    assert hook.auth_checked is True


def test_mount_resolves_unauthenticated(auth):
    hook = AuthHook(auth)

    hook.mount()

    assert hook.auth_checked is True
    assert hook.is_logged_in is False
    assert hook.is_initializing is False


def test_mount_picks_up_validated_session(auth, session, backend, user):
    session.set_session("abc", user)
    backend.on_json("GET", "/playlists/", [])
    hook = AuthHook(auth)

    hook.mount()

    assert hook.is_logged_in is True
    assert hook.current_user == user


def test_initializing_flag_is_set_during_initialize(auth):
    hook = AuthHook(auth)
    seen = []
    auth.initialize = MagicMock(side_effect=lambda: seen.append(hook.is_initializing))

    hook.mount()

    assert seen == [True]
    assert hook.is_initializing is False


def test_mount_clears_flag_when_initialize_raises(auth):
    hook = AuthHook(auth)
    auth.initialize = MagicMock(side_effect=RuntimeError("boom"))

    hook.mount()

    assert hook.is_initializing is False
    assert hook.auth_checked is True
    assert hook.is_logged_in is False


def test_mount_is_idempotent(auth):
    hook = AuthHook(auth)
    auth.initialize = MagicMock(return_value=False)

    hook.mount()
    hook.mount()

    auth.initialize.assert_called_once_with()
    assert len(auth.listeners) == 1


def test_unmount_removes_the_same_listener(auth, backend, session, user):
    hook = AuthHook(auth)
    hook.mount()
    assert len(auth.listeners) == 1

    hook.unmount()
    session.set_session("abc", user)
    backend.on_json("GET", "/playlists/", [])
    auth.validate_token()

    assert len(auth.listeners) == 0
    assert hook.is_logged_in is False


def test_listener_follows_sign_in_and_sign_out(auth, backend):
    backend.on_json("POST", "/auth/login/", {"access": "tok", "user_id": 1, "username": "x"})
    backend.on_json("GET", "/playlists/", [{"id": 1}])
    hook = AuthHook(auth)
    hook.mount()

    auth.sign_in("x", "secret")
    assert hook.is_logged_in is True
    assert hook.current_user.username == "x"

    hook.sign_out()
    assert hook.is_logged_in is False
    assert hook.current_user is None
    assert auth.get_token() is None


def test_two_hooks_share_one_service(auth):
    first, second = AuthHook(auth), AuthHook(auth)
    first.mount()
    second.mount()

    first.unmount()

    assert len(auth.listeners) == 1
    assert auth.listeners.is_registered(second._listener)

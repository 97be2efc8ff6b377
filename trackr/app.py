"""Главная страница: восстановление сессии, вход, регистрация и выход."""

import logging

import streamlit as st

from trackr.config import PAGE_CONFIG, get_settings
from trackr.constants import (
    ICON_ERROR,
    ICON_SUCCESS,
    MSG_CHECKING_SESSION,
    MSG_EMPTY_FIELDS,
    MSG_WELCOME,
    SESSION_AUTH_HOOK,
)
from trackr.core.auth import create_auth_service
from trackr.core.exceptions import TrackrError
from trackr.core.hook import AuthHook
from trackr.core.logging_config import setup_logging
from trackr.core.storage import SessionStateCredentialStore

logger = logging.getLogger(__name__)

# Настройка страницы
st.set_page_config(
    page_title=PAGE_CONFIG.title,
    page_icon=PAGE_CONFIG.icon,
    layout=PAGE_CONFIG.layout,
    initial_sidebar_state=PAGE_CONFIG.initial_sidebar_state,
)

settings = get_settings()

# Сервис и hook создаются один раз на сессию браузера, учетные данные
# хранятся в её st.session_state
if SESSION_AUTH_HOOK not in st.session_state:
    setup_logging(level=settings.log_level, json_logs=settings.json_logs, log_file=settings.log_file)
    service = create_auth_service(settings, store=SessionStateCredentialStore(st.session_state))
    hook = AuthHook(service, st.session_state)
    st.session_state[SESSION_AUTH_HOOK] = hook
    with st.spinner(MSG_CHECKING_SESSION):
        hook.mount()

hook: AuthHook = st.session_state[SESSION_AUTH_HOOK]
service = hook.service

st.title(f"{PAGE_CONFIG.icon} {PAGE_CONFIG.title}")

if not hook.auth_checked:
    st.info(MSG_CHECKING_SESSION)
    st.stop()

if hook.is_logged_in and hook.current_user is not None:
    st.success(MSG_WELCOME.format(username=hook.current_user.username), icon=ICON_SUCCESS)
    if hook.current_user.email:
        st.caption(hook.current_user.email)

    if st.button("Sign out", key="sign_out"):
        hook.sign_out()
        st.rerun()
    st.stop()

tab_sign_in, tab_sign_up = st.tabs(["Sign in", "Sign up"])

with tab_sign_in:
    with st.form(key="sign_in_form"):
        username = st.text_input("Username", key="sign_in_username")
        password = st.text_input("Password", type="password", key="sign_in_password")
        submitted = st.form_submit_button("Sign in")

    if submitted:
        if not username or not password:
            st.error(MSG_EMPTY_FIELDS, icon=ICON_ERROR)
        else:
            try:
                with st.spinner("Signing in..."):
                    service.sign_in(username, password)
                st.rerun()
            except TrackrError as e:
                logger.warning(f"Sign in rejected: {e.kind}")
                st.error(e.formatted_message, icon=ICON_ERROR)

with tab_sign_up:
    with st.form(key="sign_up_form"):
        new_username = st.text_input("Username", key="sign_up_username")
        new_email = st.text_input("Email", key="sign_up_email")
        new_password = st.text_input("Password", type="password", key="sign_up_password")
        registered = st.form_submit_button("Create account")

    if registered:
        if not new_username or not new_email or not new_password:
            st.error(MSG_EMPTY_FIELDS, icon=ICON_ERROR)
        else:
            try:
                with st.spinner("Creating account..."):
                    service.sign_up(new_username, new_email, new_password)
                if hook.is_logged_in:
                    st.rerun()
                st.info("Account created. You can sign in now.")
            except TrackrError as e:
                logger.warning(f"Sign up rejected: {e.kind}")
                st.error(e.formatted_message, icon=ICON_ERROR)

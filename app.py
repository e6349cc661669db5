import logging

import streamlit as st

from auth import AuthContext
from config import MissingConfigError, configure_logging, load_settings
from database import get_supabase_client
from styles import get_css
from views.billing_view import render_billing
from views.dashboard_view import render_dashboard
from views.login_view import render_login
from views.settings_view import render_settings
from views.shared_ui import APP_NAME, render_brand

logger = logging.getLogger(__name__)

PAGES = [
    ("DASHBOARD", "Dashboard"),
    ("BILLING", "Billing"),
    ("SETTINGS", "Settings"),
]

# per-user data that must not survive a sign out
SESSION_DATA_PREFIXES = ("dashboard_", "billing_", "call_table_", "recording_download_", "settings_")

# --- 1. CONFIG & STYLE ---
if "ui_theme" not in st.session_state:
    st.session_state["ui_theme"] = "dark"

st.set_page_config(page_title=f"{APP_NAME} Call Insights", layout="wide")
st.markdown(get_css(st.session_state["ui_theme"]), unsafe_allow_html=True)

# --- 2. STATE & NAVIGATION ---
if "page" not in st.session_state:
    st.session_state.page = "DASHBOARD"


def set_page(page_name):
    st.session_state.page = page_name


def go_to_dashboard():
    set_page("DASHBOARD")


def clear_session_data():
    for key in list(st.session_state.keys()):
        if key.startswith(SESSION_DATA_PREFIXES):
            st.session_state.pop(key, None)


def get_auth_context(settings) -> AuthContext:
    # the client carries the signed-in session, so it lives per browser session
    if "auth_context" not in st.session_state:
        st.session_state["supabase_client"] = get_supabase_client(settings)
        st.session_state["auth_context"] = AuthContext(st.session_state["supabase_client"])
    auth = st.session_state["auth_context"]
    if auth.is_loading:
        auth.resolve()
    return auth


def render_sidebar(auth: AuthContext):
    render_brand(st.sidebar)
    label = auth.company_name or auth.email
    if label:
        st.sidebar.caption(f"Signed in as {label}")

    for page, title in PAGES:
        if st.sidebar.button(
            title,
            key=f"nav_btn_{page.lower()}",
            type="primary" if st.session_state.page == page else "secondary",
            use_container_width=True,
        ):
            if st.session_state.page != page:
                set_page(page)
                st.rerun()

    st.sidebar.markdown("---")
    if st.sidebar.button("Sign out", key="nav_btn_sign_out", use_container_width=True):
        auth.sign_out()
        clear_session_data()
        set_page("DASHBOARD")
        st.rerun()


# --- 3. MAIN ROUTER ---
def main():
    try:
        settings = load_settings()
    except MissingConfigError as e:
        logger.error("Startup aborted: %s", e)
        st.error(str(e))
        st.stop()
    configure_logging(settings.log_level)

    auth = get_auth_context(settings)
    if auth.is_loading:
        st.info("Loading application...")
        return
    if not auth.is_authenticated:
        clear_session_data()
        render_login(auth)
        return

    render_sidebar(auth)
    client = st.session_state["supabase_client"]

    page = st.session_state.page
    if page == "DASHBOARD":
        render_dashboard(auth, client, settings)
    elif page == "BILLING":
        render_billing(auth, client, settings, go_back=go_to_dashboard)
    elif page == "SETTINGS":
        render_settings(auth, go_back=go_to_dashboard)


if __name__ == "__main__":
    main()

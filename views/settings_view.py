import streamlit as st

from auth import AuthContext
from views.shared_ui import render_footer, render_page_header

COMPANY_KEY = "settings_company_name"


def _initials(text: str | None) -> str:
    if not text:
        return ""
    parts = text.replace("@", " ").split()
    initials = parts[0][:1].upper()
    if len(parts) > 1:
        initials += parts[-1][:1].upper()
    return initials


def render_settings(auth: AuthContext, go_back=None):
    render_page_header("Settings", go_back)

    st.markdown("#### Account Information")
    st.caption("Manage your account settings and preferences.")

    display_name = auth.company_name or auth.email or "Account"
    st.markdown(f"**{_initials(display_name)}** · {display_name}")

    st.text_input("Email Address", value=auth.email or "", disabled=True)

    if COMPANY_KEY not in st.session_state:
        st.session_state[COMPANY_KEY] = auth.company_name or ""
    with st.form("company_form"):
        company_name = st.text_input("Company Name", key=COMPANY_KEY)
        saved = st.form_submit_button("Save", type="primary")

    if saved:
        result = auth.update_user_company_name(company_name.strip())
        if result.ok:
            st.toast("Company name updated.")
        else:
            st.session_state.pop(COMPANY_KEY, None)
            st.toast(f"Could not update company name: {result.error}")

    st.markdown("#### Appearance")
    theme = st.radio(
        "Theme",
        options=["dark", "light"],
        index=0 if st.session_state.get("ui_theme", "dark") == "dark" else 1,
        horizontal=True,
        format_func=str.title,
    )
    if theme != st.session_state.get("ui_theme", "dark"):
        st.session_state["ui_theme"] = theme
        st.rerun()

    render_footer()

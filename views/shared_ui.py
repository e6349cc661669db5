from datetime import date

import streamlit as st

APP_NAME = "CHANLYTICS"


def plotly_template():
    return "plotly_dark" if st.session_state.get("ui_theme", "dark") == "dark" else "plotly_white"


def render_hint(text: str):
    st.caption(f"❓ {text}")


def render_brand(container=st):
    container.markdown(
        f'<div class="brand"><div class="brand-mark"></div><div class="brand-name">{APP_NAME}</div></div>',
        unsafe_allow_html=True,
    )


def render_page_header(title: str, go_back=None):
    cols = st.columns([0.12, 0.88])
    with cols[0]:
        if go_back is not None:
            st.button("← Back", key=f"back_{title}", on_click=go_back, use_container_width=True)
    with cols[1]:
        st.markdown(f"### {title}")


def render_footer():
    st.markdown(
        f'<div class="app-footer">© {date.today().year} {APP_NAME}. All rights reserved.</div>',
        unsafe_allow_html=True,
    )

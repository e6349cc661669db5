import plotly.express as px
import streamlit as st

from auth import AuthContext
from config import Settings
from database import fetch_all_calls
from loader import DashboardData, RequestGeneration, load_dashboard_data
from metrics import format_duration
from views.call_table_view import render_call_table
from views.shared_ui import plotly_template, render_footer, render_hint

DATA_KEY = "dashboard_data"
OWNER_KEY = "dashboard_owner"
GENERATION_KEY = "dashboard_generation"


def _generation() -> RequestGeneration:
    if GENERATION_KEY not in st.session_state:
        st.session_state[GENERATION_KEY] = RequestGeneration()
    return st.session_state[GENERATION_KEY]


def _ensure_data(auth: AuthContext, client, settings: Settings, force: bool = False) -> DashboardData | None:
    data = st.session_state.get(DATA_KEY)
    if not force and data is not None and st.session_state.get(OWNER_KEY) == auth.user_id:
        return data

    with st.spinner("Loading call data..."):
        loaded = load_dashboard_data(
            lambda days: fetch_all_calls(client, days),
            _generation(),
            window_days=settings.fetch_window_days,
            tz=settings.display_tz,
        )
    if loaded is not None:
        st.session_state[DATA_KEY] = loaded
        st.session_state[OWNER_KEY] = auth.user_id
        return loaded
    return data


def _render_kpis(data: DashboardData):
    kpis = data.kpis
    cols = st.columns(4)
    with cols[0]:
        st.metric("Total Calls", kpis.total_calls, help="Last 7 days")
    with cols[1]:
        st.metric("Appointments Booked", kpis.appointments_booked, help="Last 7 days")
    with cols[2]:
        st.metric("Avg. Call Duration", format_duration(kpis.average_duration), help="Last 7 days, missed calls excluded")
    with cols[3]:
        st.metric("Avg. Rating", f"{kpis.average_rating} / 5", help="Last 7 days, unrated calls excluded")


def _render_volume_chart(data: DashboardData):
    st.subheader("Call Volume (Last 7 Days)")
    fig = px.bar(
        data.volume,
        x="date",
        y="calls",
        template=plotly_template(),
        labels={"date": "", "calls": "Calls"},
    )
    fig.update_traces(marker_color="#4A6CF7")
    fig.update_layout(margin=dict(l=10, r=10, t=10, b=10), yaxis=dict(rangemode="tozero", tickformat="d"))
    st.plotly_chart(fig, use_container_width=True)


def render_dashboard(auth: AuthContext, client, settings: Settings):
    if auth.is_loading:
        st.info("Loading application...")
        return

    header = st.columns([0.8, 0.2])
    with header[0]:
        company = auth.company_name
        st.title(f"{company} Call Insights" if company else "Call Insights")
    with header[1]:
        refresh = st.button("Refresh data", use_container_width=True)

    data = _ensure_data(auth, client, settings, force=refresh)
    if data is None:
        st.warning("No data available.")
        return

    _render_kpis(data)
    render_hint("KPIs cover today and the previous 6 days; the call log shows the last "
                f"{settings.fetch_window_days} days.")
    _render_volume_chart(data)
    render_call_table(data.calls, data.version, tz=settings.display_tz)
    render_footer()

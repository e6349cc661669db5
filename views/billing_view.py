import streamlit as st

from auth import AuthContext
from config import Settings
from database import fetch_all_calls
from loader import RequestGeneration, load_billing_data
from metrics import format_currency
from views.shared_ui import render_footer, render_page_header

DATA_KEY = "billing_data"
OWNER_KEY = "billing_owner"
GENERATION_KEY = "billing_generation"


def _generation() -> RequestGeneration:
    if GENERATION_KEY not in st.session_state:
        st.session_state[GENERATION_KEY] = RequestGeneration()
    return st.session_state[GENERATION_KEY]


def render_billing(auth: AuthContext, client, settings: Settings, go_back=None):
    render_page_header("Billing", go_back)

    data = st.session_state.get(DATA_KEY)
    if data is None or st.session_state.get(OWNER_KEY) != auth.user_id:
        with st.spinner("Loading usage..."):
            loaded = load_billing_data(
                lambda days: fetch_all_calls(client, days),
                _generation(),
                period_days=settings.billing_period_days,
                rate_per_minute=settings.rate_per_minute,
            )
        if loaded is not None:
            st.session_state[DATA_KEY] = loaded
            st.session_state[OWNER_KEY] = auth.user_id
            data = loaded

    st.markdown("#### Usage & Cost Summary")
    st.caption(
        f"Estimated usage and costs for the current billing period (last {settings.billing_period_days} days)."
    )
    if data is None:
        st.warning("No usage data available.")
        return

    summary = data.summary
    cols = st.columns(3)
    with cols[0]:
        st.metric("Total Call Minutes", f"{summary.total_minutes} min")
    with cols[1]:
        st.metric("Rate per Minute", format_currency(summary.rate_per_minute))
    with cols[2]:
        st.metric("Estimated Total Cost", format_currency(summary.estimated_cost))

    st.caption(
        "This is an estimate. Actual charges may vary. "
        "Billing cycle renews based on your subscription start date."
    )
    render_footer()

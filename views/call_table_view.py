import pandas as pd
import streamlit as st

from call_table import (
    APPOINTMENT_VALUES,
    ASC,
    COLUMNS,
    MOBILE_BREAKPOINT,
    SHORT_TIME_FORMAT,
    TableState,
    can_hide_column,
    derive_rows,
    format_call_time,
    format_rows_for_display,
    new_table_state,
    on_viewport_change,
    select_record,
    set_appointment_filter,
    set_search_term,
    sync_records,
    toggle_column,
    toggle_sort,
    visible_columns,
)
from models import CallRecord
from views.detail_view import render_call_details

STATE_KEY = "call_table_state"
SEARCH_KEY = "call_table_search"
FILTER_KEY = "call_table_appointment"
COMPACT_KEY = "call_table_compact"
SELECT_KEY = "call_table_selected"

# Streamlit cannot read the browser width, so the compact switch reports one of these
COMPACT_WIDTH = 480
DESKTOP_WIDTH = 1280


def _state() -> TableState:
    return st.session_state[STATE_KEY]


def _apply(transition, *args):
    st.session_state[STATE_KEY] = transition(_state(), *args)


def _on_search():
    _apply(set_search_term, st.session_state.get(SEARCH_KEY, ""))


def _on_filter():
    _apply(set_appointment_filter, st.session_state.get(FILTER_KEY, []))


def _on_sort(key: str):
    _apply(toggle_sort, key)


def _on_column(key: str):
    _apply(toggle_column, key)


def _on_layout():
    width = COMPACT_WIDTH if st.session_state.get(COMPACT_KEY) else DESKTOP_WIDTH
    _apply(on_viewport_change, width)


def _on_select():
    choice = st.session_state.get(SELECT_KEY)
    _apply(select_record, choice or None)


def _sync_state(version) -> TableState:
    previous = st.session_state.get(STATE_KEY)
    if previous is None:
        state = new_table_state(version, DESKTOP_WIDTH)
    else:
        state = sync_records(previous, version)
    if state is not previous:
        for key in (SEARCH_KEY, FILTER_KEY, SELECT_KEY):
            st.session_state.pop(key, None)
    st.session_state[STATE_KEY] = state
    return state


def _sort_marker(state: TableState, key: str) -> str:
    if state.sort_key != key:
        return "↕"
    return "↑" if state.sort_direction == ASC else "↓"


def _row_label(calls: pd.DataFrame, tz):
    labels = {}
    if calls.empty:
        return labels
    times = format_call_time(calls["call_time"], SHORT_TIME_FORMAT, tz=tz).fillna("")
    for record_id, phone, when in zip(calls["id"], calls["phone_number"], times):
        labels[str(record_id)] = f"{phone} · {when}"
    return labels


def render_call_table(calls: pd.DataFrame, version, tz=None):
    state = _sync_state(version)

    st.subheader("Call Log")

    controls = st.columns([0.5, 0.3, 0.2])
    with controls[0]:
        st.text_input("Search", placeholder="Filter calls...", key=SEARCH_KEY, on_change=_on_search)
    with controls[1]:
        st.multiselect(
            "Appointment booked",
            options=list(APPOINTMENT_VALUES),
            key=FILTER_KEY,
            on_change=_on_filter,
        )
    with controls[2]:
        st.session_state[COMPACT_KEY] = (
            state.viewport_width is not None and state.viewport_width < MOBILE_BREAKPOINT
        )
        st.toggle("Compact layout", key=COMPACT_KEY, on_change=_on_layout)

    with st.expander("Columns", expanded=False):
        col_boxes = st.columns(len(COLUMNS))
        for box, column in zip(col_boxes, COLUMNS):
            widget_key = f"call_table_col_{column.key}"
            visible = state.column_visibility.get(column.key, False)
            st.session_state[widget_key] = visible
            with box:
                st.checkbox(
                    column.label,
                    key=widget_key,
                    on_change=_on_column,
                    args=(column.key,),
                    disabled=visible and not can_hide_column(state, column.key),
                )

    columns = visible_columns(state)
    sort_cols = st.columns(len(columns)) if columns else []
    for box, column in zip(sort_cols, columns):
        with box:
            st.button(
                f"{column.label} {_sort_marker(state, column.key)}",
                key=f"call_table_sort_{column.key}",
                on_click=_on_sort,
                args=(column.key,),
                use_container_width=True,
            )

    rows = derive_rows(calls, state, tz=tz)
    if rows.empty:
        st.info("No results.")
    else:
        st.dataframe(format_rows_for_display(rows, columns, tz=tz), hide_index=True, use_container_width=True)
    st.caption(f"Total {len(rows)} calls")

    labels = _row_label(rows, tz)
    if not labels:
        return

    options = [""] + list(labels.keys())
    st.session_state[SELECT_KEY] = state.selected_id if state.selected_id in labels else ""
    st.selectbox(
        "View call details",
        options,
        key=SELECT_KEY,
        format_func=lambda record_id: labels.get(record_id, "(none)"),
        on_change=_on_select,
    )

    selected_id = _state().selected_id
    if selected_id and selected_id in labels:
        row = calls[calls["id"].astype(str) == selected_id].iloc[0].to_dict()
        render_call_details(CallRecord.from_row(row), tz=tz)

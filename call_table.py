"""Filter / sort / column-visibility engine behind the call log table.

Everything here is pure: view state lives in an immutable ``TableState`` and
every user event maps to a function returning the next state. ``derive_rows``
turns (calls, state) into the rows the table shows.
"""
from dataclasses import dataclass, field, replace
from typing import Mapping, Optional

import pandas as pd

from metrics import format_duration

ACTIONS = "actions"
ASC = "asc"
DESC = "desc"

MOBILE_BREAKPOINT = 768
MIN_VISIBLE_COLUMNS = 3

APPOINTMENT_VALUES = ("Yes", "No")

SHORT_TIME_FORMAT = "%b %d, %Y %H:%M"


@dataclass(frozen=True)
class Column:
    key: str
    label: str
    high_priority: bool = False
    sortable: bool = True


COLUMNS = (
    Column("phone_number", "Phone Number", high_priority=True),
    Column("duration", "Duration"),
    Column("call_type", "Call Type", high_priority=True),
    Column("appointment_booked", "Appointment"),
    Column("rating", "Rating"),
    Column("call_time", "Call Time", high_priority=True),
)
COLUMNS_BY_KEY = {c.key: c for c in COLUMNS}
TEXT_COLUMNS = {"phone_number", "call_type"}


def visibility_for_width(width: int) -> dict[str, bool]:
    if width < MOBILE_BREAKPOINT:
        return {c.key: c.high_priority for c in COLUMNS}
    return {c.key: True for c in COLUMNS}


def _all_visible() -> dict[str, bool]:
    return {c.key: True for c in COLUMNS}


@dataclass(frozen=True)
class TableState:
    search_term: str = ""
    sort_key: Optional[str] = None
    sort_direction: str = ASC
    appointment_filter: frozenset = frozenset()
    column_visibility: Mapping[str, bool] = field(default_factory=_all_visible)
    viewport_width: Optional[int] = None
    selected_id: Optional[str] = None
    records_version: Optional[int] = None


def new_table_state(records_version=None, viewport_width=None) -> TableState:
    visibility = _all_visible() if viewport_width is None else visibility_for_width(viewport_width)
    return TableState(
        column_visibility=visibility,
        viewport_width=viewport_width,
        records_version=records_version,
    )


# --- state transitions ---

def sync_records(state: TableState, records_version) -> TableState:
    """Start over when the table is handed a different record list."""
    if state.records_version == records_version:
        return state
    return new_table_state(records_version, state.viewport_width)


def set_search_term(state: TableState, term: str) -> TableState:
    return replace(state, search_term=term or "")


def toggle_sort(state: TableState, key: str) -> TableState:
    if key == ACTIONS or key not in COLUMNS_BY_KEY or not COLUMNS_BY_KEY[key].sortable:
        return state
    if state.sort_key == key:
        return replace(state, sort_direction=DESC if state.sort_direction == ASC else ASC)
    return replace(state, sort_key=key, sort_direction=ASC)


def toggle_appointment_filter(state: TableState, value: str) -> TableState:
    if value not in APPOINTMENT_VALUES:
        return state
    current = set(state.appointment_filter)
    if value in current:
        current.remove(value)
    else:
        current.add(value)
    return replace(state, appointment_filter=frozenset(current))


def set_appointment_filter(state: TableState, values) -> TableState:
    return replace(
        state,
        appointment_filter=frozenset(v for v in values if v in APPOINTMENT_VALUES),
    )


def on_viewport_change(state: TableState, width: int) -> TableState:
    """Reseed column visibility when the width crosses the mobile breakpoint.

    Widths on the same side of the breakpoint keep whatever the user toggled.
    """
    was_mobile = state.viewport_width is not None and state.viewport_width < MOBILE_BREAKPOINT
    is_mobile = width < MOBILE_BREAKPOINT
    if state.viewport_width is not None and was_mobile == is_mobile:
        return replace(state, viewport_width=width)
    return replace(state, viewport_width=width, column_visibility=visibility_for_width(width))


def visible_columns(state: TableState) -> list[Column]:
    return [c for c in COLUMNS if state.column_visibility.get(c.key, False)]


def can_hide_column(state: TableState, key: str) -> bool:
    """A column can be hidden while more than the floor stays visible.

    The last visible high-priority column is never hidden.
    """
    column = COLUMNS_BY_KEY.get(key)
    if column is None or not state.column_visibility.get(key, False):
        return False
    shown = visible_columns(state)
    if len(shown) <= MIN_VISIBLE_COLUMNS:
        return False
    if column.high_priority and sum(c.high_priority for c in shown) <= 1:
        return False
    return True


def toggle_column(state: TableState, key: str) -> TableState:
    if key not in COLUMNS_BY_KEY:
        return state
    visible = state.column_visibility.get(key, False)
    if visible and not can_hide_column(state, key):
        return state
    visibility = dict(state.column_visibility)
    visibility[key] = not visible
    return replace(state, column_visibility=visibility)


def select_record(state: TableState, record_id: Optional[str]) -> TableState:
    return replace(state, selected_id=record_id)


# --- row derivation ---

def long_time_label(ts) -> str:
    """Render like `May 5, 2024, 2:03:00 PM`, with no zero padding on day or hour."""
    hour = ts.hour % 12 or 12
    return f"{ts:%b} {ts.day}, {ts:%Y}, {hour}:{ts:%M:%S} {ts:%p}"


def format_call_time(call_times: pd.Series, fmt: Optional[str] = None, tz=None) -> pd.Series:
    """Format call times with `fmt`, or as `long_time_label` when no format is given."""
    times = pd.to_datetime(call_times, errors="coerce", utc=True)
    if tz is not None:
        times = times.dt.tz_convert(tz)
    if fmt is None:
        return times.map(lambda t: None if pd.isna(t) else long_time_label(t)).astype(object)
    return times.dt.strftime(fmt)


def _lowered(series: pd.Series) -> pd.Series:
    return series.fillna("").astype(str).str.lower()


def filter_by_search(calls: pd.DataFrame, term: str, tz=None) -> pd.DataFrame:
    """Case-insensitive substring match on phone number, call type or call time."""
    q = (term or "").lower()
    if not q or calls.empty:
        return calls

    mask = (
        _lowered(calls["phone_number"]).str.contains(q, regex=False)
        | _lowered(calls["call_type"]).str.contains(q, regex=False)
        | _lowered(format_call_time(calls["call_time"], tz=tz)).str.contains(q, regex=False)
    )
    return calls[mask]


def filter_by_appointment(calls: pd.DataFrame, selected) -> pd.DataFrame:
    if not selected or calls.empty:
        return calls
    booked = calls["appointment_booked"].eq(True)
    mask = pd.Series(False, index=calls.index)
    if "Yes" in selected:
        mask = mask | booked
    if "No" in selected:
        mask = mask | ~booked
    return calls[mask]


def _text_sort_key(values: pd.Series) -> pd.Series:
    return values.map(lambda v: v if pd.isna(v) else str(v).casefold())


def sort_calls(calls: pd.DataFrame, column: Optional[str], direction: str = ASC) -> pd.DataFrame:
    # mergesort keeps ties in their incoming order; na_position applies to both directions
    if not column or column == ACTIONS or column not in calls.columns or calls.empty:
        return calls
    return calls.sort_values(
        column,
        ascending=direction != DESC,
        kind="mergesort",
        na_position="last",
        key=_text_sort_key if column in TEXT_COLUMNS else None,
    )


def derive_rows(calls: pd.DataFrame, state: TableState, tz=None) -> pd.DataFrame:
    rows = filter_by_search(calls, state.search_term, tz=tz)
    rows = filter_by_appointment(rows, state.appointment_filter)
    rows = sort_calls(rows, state.sort_key, state.sort_direction)
    return rows


def _yes_no(value) -> str:
    return "Yes" if not pd.isna(value) and bool(value) else "No"


def _rating_label(value) -> str:
    if pd.isna(value) or int(value) <= 0:
        return "N/A"
    stars = min(int(value), 5)
    return "★" * stars + "☆" * (5 - stars)


def format_rows_for_display(rows: pd.DataFrame, columns: list[Column], tz=None) -> pd.DataFrame:
    """Render derived rows as the strings the table shows, headed by column labels."""
    out = pd.DataFrame(index=rows.index)
    for column in columns:
        values = rows[column.key]
        if column.key == "duration":
            values = values.map(format_duration)
        elif column.key == "appointment_booked":
            values = values.map(_yes_no)
        elif column.key == "rating":
            values = values.map(_rating_label)
        elif column.key == "call_time":
            values = format_call_time(values, SHORT_TIME_FORMAT, tz=tz).fillna("")
        else:
            values = values.fillna("").astype(str)
        out[column.label] = values
    return out.reset_index(drop=True)

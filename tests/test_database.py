from datetime import timedelta
from types import SimpleNamespace

import httpx
import pytest
from supabase import PostgrestAPIError

from database import CALLS_TABLE, fetch_all_calls, map_db_call
from models import CallType


def _row(id, call_type="Incoming", **overrides):
    row = {
        "id": id,
        "call_type": call_type,
        "start_time": "2024-05-15T10:00:00+00:00",
        "duration": 42,
        "from_number": "+15550001",
        "to_number": "+15550002",
        "appointment_booked": False,
        "rating": 3,
        "transcript": None,
        "recording_url": None,
    }
    row.update(overrides)
    return row


class FakeQuery:
    def __init__(self, client):
        self.client = client

    def select(self, columns):
        return self

    def gte(self, column, value):
        self.client.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.client.orders.append((column, desc))
        return self

    def range(self, start, end):
        self.client.ranges.append((start, end))
        self._slice = (start, end)
        return self

    def execute(self):
        if self.client.error is not None:
            raise self.client.error
        start, end = self._slice
        return SimpleNamespace(data=self.client.rows[start:end + 1])


class FakeClient:
    def __init__(self, rows=(), error=None):
        self.rows = list(rows)
        self.error = error
        self.tables = []
        self.filters = []
        self.orders = []
        self.ranges = []

    def table(self, name):
        self.tables.append(name)
        return FakeQuery(self)


def test_outgoing_call_uses_dialled_number():
    record = map_db_call(_row(1, "Outgoing"))
    assert record.phone_number == "+15550002"
    assert record.call_type is CallType.OUTGOING


def test_incoming_and_missed_calls_use_caller_number():
    assert map_db_call(_row(1, "Incoming")).phone_number == "+15550001"
    assert map_db_call(_row(2, "Missed")).phone_number == "+15550001"


def test_missing_number_becomes_unknown():
    assert map_db_call(_row(1, "Incoming", from_number=None)).phone_number == "Unknown"


def test_row_fields_are_normalised():
    record = map_db_call(_row(7, rating=9, duration=None, appointment_booked=None))
    assert record.id == "7"
    assert record.rating == 5
    assert record.duration is None
    assert record.appointment_booked is False
    assert record.call_time.isoformat() == "2024-05-15T10:00:00+00:00"


def test_unknown_call_type_is_skipped(caplog):
    assert map_db_call(_row(1, "Voicemail")) is None
    assert "unknown call_type" in caplog.text


def test_unparseable_start_time_is_skipped():
    assert map_db_call(_row(1, start_time="not a date")) is None


def test_fetch_all_calls_queries_the_window_newest_first(now):
    client = FakeClient([_row(1), _row(2)])
    records = fetch_all_calls(client, period_in_days=30, now=now)

    assert [r.id for r in records] == ["1", "2"]
    assert client.tables == [CALLS_TABLE]
    assert client.filters == [("start_time", (now - timedelta(days=30)).isoformat())]
    assert client.orders == [("start_time", True)]


def test_fetch_all_calls_pages_until_short_page(now):
    client = FakeClient([_row(i) for i in range(5)])
    records = fetch_all_calls(client, page_size=2, now=now)

    assert len(records) == 5
    assert client.ranges == [(0, 1), (2, 3), (4, 5)]


def test_fetch_all_calls_stops_on_empty_page(now):
    client = FakeClient([_row(i) for i in range(4)])
    records = fetch_all_calls(client, page_size=2, now=now)

    assert len(records) == 4
    assert client.ranges == [(0, 1), (2, 3), (4, 5)]


def test_fetch_all_calls_drops_unmappable_rows(now):
    client = FakeClient([_row(1), _row(2, "Voicemail")])
    assert [r.id for r in fetch_all_calls(client, now=now)] == ["1"]


@pytest.mark.parametrize(
    "error",
    [
        PostgrestAPIError({"message": "permission denied", "code": "42501"}),
        httpx.ConnectError("connection refused"),
    ],
)
def test_fetch_all_calls_returns_empty_list_on_failure(error, now, caplog):
    client = FakeClient([_row(1)], error=error)
    assert fetch_all_calls(client, now=now) == []
    assert "Error fetching calls" in caplog.text

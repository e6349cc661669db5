import logging
from datetime import datetime, timedelta, timezone

import httpx
import pandas as pd
from supabase import Client, PostgrestAPIError, create_client

from config import Settings
from models import CallRecord, CallType

logger = logging.getLogger(__name__)

CALLS_TABLE = "calls"
CALLS_SELECT = (
    "id, summary, transcript, recording_url, start_time, end_time, duration, "
    "from_number, to_number, agent_id, appointment_booked, rating, call_type, "
    "call_reason, created_at, user_sentiment"
)


def get_supabase_client(settings: Settings) -> Client:
    return create_client(settings.supabase_url, settings.supabase_key)


def _to_int(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _parse_start_time(value) -> datetime | None:
    ts = pd.to_datetime(value, errors="coerce", utc=True)
    if ts is None or pd.isna(ts):
        return None
    return ts.to_pydatetime()


def map_db_call(row: dict) -> CallRecord | None:
    call_type = CallType.from_label(row.get("call_type"))
    if call_type is None:
        logger.warning("Skipping call %s: unknown call_type %r", row.get("id"), row.get("call_type"))
        return None

    call_time = _parse_start_time(row.get("start_time"))
    if call_time is None:
        logger.warning("Skipping call %s: unparseable start_time %r", row.get("id"), row.get("start_time"))
        return None

    # the counterparty is whoever we called, or whoever called us
    if call_type == CallType.OUTGOING:
        phone_number = row.get("to_number") or "Unknown"
    else:
        phone_number = row.get("from_number") or "Unknown"

    rating = _to_int(row.get("rating")) or 0
    return CallRecord(
        id=str(row.get("id")),
        phone_number=str(phone_number),
        duration=_to_int(row.get("duration")),
        call_type=call_type,
        appointment_booked=bool(row.get("appointment_booked")),
        rating=min(max(rating, 0), 5),
        call_time=call_time,
        transcript=row.get("transcript"),
        recording_url=row.get("recording_url"),
    )


def fetch_all_calls(
    client: Client,
    period_in_days: int = 30,
    page_size: int = 1000,
    now: datetime | None = None,
) -> list[CallRecord]:
    """Fetch calls started in the last `period_in_days`, newest first.

    Any API or transport failure is logged and yields an empty list, so callers
    cannot tell an outage apart from a quiet month.
    """
    date_limit = (now or datetime.now(timezone.utc)) - timedelta(days=period_in_days)
    rows: list[dict] = []
    offset = 0

    try:
        while True:
            res = (
                client.table(CALLS_TABLE)
                .select(CALLS_SELECT)
                .gte("start_time", date_limit.isoformat())
                .order("start_time", desc=True)
                .range(offset, offset + page_size - 1)
                .execute()
            )
            batch = res.data or []
            rows.extend(batch)

            if len(batch) < page_size:
                break

            offset += page_size
    except (PostgrestAPIError, httpx.HTTPError) as e:
        logger.error("Error fetching calls from Supabase: %s", e)
        return []

    logger.debug("Fetched %d call rows for the last %d days", len(rows), period_in_days)
    records = [map_db_call(row) for row in rows]
    return [r for r in records if r is not None]

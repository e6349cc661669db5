from dataclasses import asdict, dataclass
from datetime import datetime
from enum import Enum
from typing import Iterable, Optional

import pandas as pd


class CallType(str, Enum):
    INCOMING = "Incoming"
    OUTGOING = "Outgoing"
    MISSED = "Missed"

    @classmethod
    def from_label(cls, value) -> Optional["CallType"]:
        for member in cls:
            if member.value == value:
                return member
        return None


@dataclass(frozen=True)
class CallRecord:
    id: str
    phone_number: str
    duration: Optional[int]
    call_type: CallType
    appointment_booked: bool
    rating: int
    call_time: datetime
    transcript: Optional[str] = None
    recording_url: Optional[str] = None

    @classmethod
    def from_row(cls, row: dict) -> "CallRecord":
        """Rebuild a record from one row of the calls frame."""
        duration = row.get("duration")
        call_time = row.get("call_time")
        if isinstance(call_time, pd.Timestamp):
            call_time = call_time.to_pydatetime()
        return cls(
            id=str(row.get("id")),
            phone_number=str(row.get("phone_number") or "Unknown"),
            duration=None if pd.isna(duration) else int(duration),
            call_type=CallType.from_label(row.get("call_type")) or CallType.INCOMING,
            appointment_booked=bool(_none_if_na(row.get("appointment_booked")) or False),
            rating=0 if pd.isna(row.get("rating")) else int(row.get("rating")),
            call_time=call_time,
            transcript=_none_if_na(row.get("transcript")),
            recording_url=_none_if_na(row.get("recording_url")),
        )


CALL_COLUMNS = [
    "id",
    "phone_number",
    "duration",
    "call_type",
    "appointment_booked",
    "rating",
    "call_time",
    "transcript",
    "recording_url",
]


def _none_if_na(value):
    if value is None:
        return None
    try:
        return None if pd.isna(value) else value
    except (TypeError, ValueError):
        return value


def calls_to_frame(records: Iterable[CallRecord]) -> pd.DataFrame:
    rows = []
    for record in records:
        row = asdict(record)
        row["call_type"] = record.call_type.value
        rows.append(row)

    df = pd.DataFrame(rows, columns=CALL_COLUMNS)
    df["call_time"] = pd.to_datetime(df["call_time"], errors="coerce", utc=True)
    df["duration"] = pd.to_numeric(df["duration"], errors="coerce")
    df["rating"] = pd.to_numeric(df["rating"], errors="coerce").fillna(0).astype(int)
    return df

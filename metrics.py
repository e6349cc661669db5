import math
import numbers
from dataclasses import dataclass
from datetime import date, timedelta

import pandas as pd
from dateutil import tz as dateutil_tz

from models import CallType


@dataclass(frozen=True)
class Kpis:
    total_calls: int
    appointments_booked: int
    average_duration: int
    average_rating: float


@dataclass(frozen=True)
class BillingSummary:
    total_minutes: int
    rate_per_minute: float
    estimated_cost: float


def _round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def _local_tz():
    # follows the host zone rules, so each past day gets its own DST offset
    return dateutil_tz.tzlocal()


def _now(now=None, tz=None) -> pd.Timestamp:
    tz = tz or _local_tz()
    if now is None:
        return pd.Timestamp.now(tz=tz)
    ts = pd.Timestamp(now)
    if ts.tzinfo is None:
        return ts.tz_localize(tz)
    return ts.tz_convert(tz)


def total_calls(calls: pd.DataFrame) -> int:
    return int(len(calls))


def appointments_booked(calls: pd.DataFrame) -> int:
    if calls.empty:
        return 0
    return int(calls["appointment_booked"].eq(True).sum())


def average_duration(calls: pd.DataFrame) -> int:
    """Mean duration in seconds of connected calls (not missed, duration > 0)."""
    if calls.empty:
        return 0
    durations = pd.to_numeric(calls["duration"], errors="coerce")
    connected = durations[(calls["call_type"] != CallType.MISSED.value) & (durations > 0)]
    if connected.empty:
        return 0
    return int(_round_half_up(float(connected.mean())))


def average_rating(calls: pd.DataFrame) -> float:
    """Mean of the non-zero ratings, to one decimal place."""
    if calls.empty:
        return 0
    ratings = pd.to_numeric(calls["rating"], errors="coerce")
    rated = ratings[ratings > 0]
    if rated.empty:
        return 0
    return _round_half_up(float(rated.mean()), 1)


def compute_kpis(calls: pd.DataFrame) -> Kpis:
    return Kpis(
        total_calls=total_calls(calls),
        appointments_booked=appointments_booked(calls),
        average_duration=average_duration(calls),
        average_rating=average_rating(calls),
    )


def _day_label(day: date) -> str:
    return f"{day:%b} {day.day}"


def daily_volume(calls: pd.DataFrame, days: int = 7, now=None, tz=None) -> pd.DataFrame:
    """Count calls per calendar day for today and the previous `days - 1` days.

    Every day in the window gets a row, oldest first, even when no calls fall
    on it.
    """
    current = _now(now, tz)
    today = current.date()
    window = [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]

    if calls.empty:
        observed = pd.Series(dtype="int64")
    else:
        local_days = calls["call_time"].dropna().dt.tz_convert(current.tz).dt.date
        observed = local_days[local_days.isin(window)].value_counts()

    counts = observed.reindex(window, fill_value=0).astype(int)
    return pd.DataFrame(
        {
            "date": [_day_label(d) for d in window],
            "day": window,
            "calls": counts.tolist(),
        }
    )


def records_in_last_n_days(calls: pd.DataFrame, n: int, now=None, tz=None) -> pd.DataFrame:
    """Keep calls from the start of the day `n - 1` days ago up to now."""
    current = _now(now, tz)
    cutoff = (current - pd.Timedelta(days=n - 1)).normalize()
    return calls[calls["call_time"] >= cutoff]


def format_duration(seconds) -> str:
    if isinstance(seconds, bool) or not isinstance(seconds, numbers.Real) or math.isnan(seconds):
        return "00:00"
    seconds = int(seconds)
    mins, secs = divmod(seconds, 60)
    return f"{mins:02d}:{secs:02d}"


def billing_summary(calls: pd.DataFrame, rate_per_minute: float) -> BillingSummary:
    if calls.empty:
        total_seconds = 0.0
    else:
        total_seconds = float(pd.to_numeric(calls["duration"], errors="coerce").fillna(0).sum())
    minutes = int(_round_half_up(total_seconds / 60))
    return BillingSummary(
        total_minutes=minutes,
        rate_per_minute=rate_per_minute,
        estimated_cost=minutes * rate_per_minute,
    )


def format_currency(amount: float) -> str:
    return f"${amount:,.2f}"

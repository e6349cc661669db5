import logging
from dataclasses import dataclass
from typing import Callable, Optional

import pandas as pd

from metrics import (
    BillingSummary,
    Kpis,
    billing_summary,
    compute_kpis,
    daily_volume,
    records_in_last_n_days,
)
from models import CallRecord, calls_to_frame

logger = logging.getLogger(__name__)

KPI_WINDOW_DAYS = 7

Fetch = Callable[[int], list[CallRecord]]


class RequestGeneration:
    """Monotonic request counter; only the newest request may publish results."""

    def __init__(self):
        self._latest = 0

    def begin(self) -> int:
        self._latest += 1
        return self._latest

    def is_current(self, token: int) -> bool:
        return token == self._latest

    @property
    def latest(self) -> int:
        return self._latest


@dataclass(frozen=True)
class DashboardData:
    calls: pd.DataFrame
    kpis: Kpis
    volume: pd.DataFrame
    version: int


@dataclass(frozen=True)
class BillingData:
    summary: BillingSummary
    period_days: int
    version: int


def build_dashboard_data(records: list[CallRecord], version: int = 0, now=None, tz=None) -> DashboardData:
    calls = calls_to_frame(records)
    last_week = records_in_last_n_days(calls, KPI_WINDOW_DAYS, now=now, tz=tz)
    return DashboardData(
        calls=calls,
        kpis=compute_kpis(last_week),
        volume=daily_volume(last_week, days=KPI_WINDOW_DAYS, now=now, tz=tz),
        version=version,
    )


def load_dashboard_data(
    fetch: Fetch,
    generation: RequestGeneration,
    window_days: int = 30,
    now=None,
    tz=None,
) -> Optional[DashboardData]:
    token = generation.begin()
    records = fetch(window_days)
    if not generation.is_current(token):
        logger.info("Discarding stale dashboard response %d (latest is %d)", token, generation.latest)
        return None
    return build_dashboard_data(records, version=token, now=now, tz=tz)


def load_billing_data(
    fetch: Fetch,
    generation: RequestGeneration,
    period_days: int,
    rate_per_minute: float,
) -> Optional[BillingData]:
    token = generation.begin()
    records = fetch(period_days)
    if not generation.is_current(token):
        logger.info("Discarding stale billing response %d (latest is %d)", token, generation.latest)
        return None
    return BillingData(
        summary=billing_summary(calls_to_frame(records), rate_per_minute),
        period_days=period_days,
        version=token,
    )

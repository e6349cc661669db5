from datetime import datetime, timezone

import pytest

from models import CallRecord, CallType, calls_to_frame

NOW = datetime(2024, 5, 15, 12, 0, tzinfo=timezone.utc)


def build_call(
    id,
    phone_number="1234567890",
    duration=60,
    call_type=CallType.INCOMING,
    appointment_booked=False,
    rating=0,
    call_time=NOW,
    transcript=None,
    recording_url=None,
):
    return CallRecord(
        id=str(id),
        phone_number=phone_number,
        duration=duration,
        call_type=call_type,
        appointment_booked=appointment_booked,
        rating=rating,
        call_time=call_time,
        transcript=transcript,
        recording_url=recording_url,
    )


@pytest.fixture()
def now():
    return NOW


@pytest.fixture()
def make_call():
    return build_call


@pytest.fixture()
def to_frame():
    return calls_to_frame


@pytest.fixture()
def sample_calls():
    return calls_to_frame(
        [
            build_call("a", phone_number="1234567890", duration=60, appointment_booked=True, rating=4),
            build_call("b", phone_number="5551234567", duration=None, call_type=CallType.MISSED),
            build_call("c", phone_number="9876543210", duration=90, call_type=CallType.OUTGOING, rating=5),
        ]
    )

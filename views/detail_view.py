import pandas as pd
import streamlit as st

from call_table import long_time_label
from models import CallRecord
from recording import download_recording


def _download_key(record: CallRecord) -> str:
    return f"recording_download_{record.id}"


def render_call_details(record: CallRecord, tz=None):
    call_time = pd.Timestamp(record.call_time)
    if tz is not None:
        call_time = call_time.tz_convert(tz)

    with st.container(border=True):
        st.markdown(f"#### Call Details: {record.phone_number}")
        st.caption(f"Transcript and recording for the call on {long_time_label(call_time)}.")

        st.markdown("**Transcript:**")
        if record.transcript:
            with st.container(height=220):
                st.text(record.transcript)
        else:
            st.caption("No transcript available for this call.")

        st.markdown("**Recording:**")
        if not record.recording_url:
            st.caption("No recording available for this call.")
            return

        st.audio(record.recording_url)

        key = _download_key(record)
        if st.button("Prepare download", key=f"{key}_prepare"):
            with st.spinner("Fetching recording..."):
                st.session_state[key] = download_recording(record)
            if st.session_state[key] is None:
                st.caption("The recording could not be downloaded.")

        download = st.session_state.get(key)
        if download is not None:
            st.download_button(
                "Download recording",
                data=download.data,
                file_name=download.file_name,
                mime=download.mime_type,
                key=f"{key}_save",
                on_click=lambda: st.session_state.pop(key, None),
            )

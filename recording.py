import logging
import mimetypes
import posixpath
import re
from dataclasses import dataclass
from urllib.parse import urlparse

import httpx

from models import CallRecord

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = "mp3"


@dataclass(frozen=True)
class RecordingDownload:
    file_name: str
    data: bytes
    mime_type: str


def _extension(url: str) -> str:
    ext = posixpath.splitext(urlparse(url).path)[1].lstrip(".").lower()
    if not ext or not ext.isalnum():
        return DEFAULT_EXTENSION
    return ext


def recording_file_name(record: CallRecord) -> str:
    phone = re.sub(r"[^A-Za-z0-9]", "_", record.phone_number or "unknown")
    ext = _extension(record.recording_url or "")
    return f"call_{phone}_{record.call_time:%Y-%m-%d}.{ext}"


def download_recording(record: CallRecord, transport=None, timeout: float = 30.0) -> RecordingDownload | None:
    """Fetch the call recording so it can be offered as a file download.

    Returns None (after logging) when the call has no recording, the server
    answers with a non-success status, or the request fails.
    """
    if not record.recording_url:
        logger.warning("Call %s has no recording to download", record.id)
        return None

    try:
        with httpx.Client(transport=transport, timeout=timeout, follow_redirects=True) as client:
            response = client.get(record.recording_url)
    except httpx.HTTPError as e:
        logger.error("Error downloading recording for call %s: %s", record.id, e)
        return None

    if not response.is_success:
        logger.error(
            "Failed to fetch recording for call %s: HTTP %s",
            record.id,
            response.status_code,
        )
        return None

    file_name = recording_file_name(record)
    mime_type = (
        response.headers.get("content-type")
        or mimetypes.guess_type(file_name)[0]
        or "application/octet-stream"
    )
    return RecordingDownload(file_name=file_name, data=response.content, mime_type=mime_type)

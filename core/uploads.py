# =============================================================================
# core/uploads.py  —  File Upload Lifecycle (the only multi-step protocol)
# =============================================================================
#
# THE STATE MACHINE:
#
#   UPLOADING ──upload ok──▶ PROCESSING ──poll──▶ ACTIVE     (success)
#                               │    ▲            FAILED     (upstream gave up)
#                               └────┘            TIMED_OUT  (we gave up)
#                         every POLL_INTERVAL_SECONDS,
#                         at most MAX_WAIT_SECONDS in total
#
# SIMULATED TIME:
#   The poller never reads a clock.  Elapsed time is the sum of the
#   intervals it has slept, and the sleep function is injected.  Tests pass
#   a fake sleep and step through every transition instantly and exactly.
#
# SERIAL BY CONSTRUCTION:
#   One status request at a time; the next one is only issued after the
#   previous one returned and the interval elapsed.
# =============================================================================

import asyncio
import enum
import logging
import os
from typing import Awaitable, Callable

from core.errors import DeadlineExceeded

logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 2
MAX_WAIT_SECONDS = 60


class UploadState(enum.Enum):
    UPLOADING = "UPLOADING"
    PROCESSING = "PROCESSING"
    ACTIVE = "ACTIVE"
    FAILED = "FAILED"
    TIMED_OUT = "TIMED_OUT"


class UploadFailed(Exception):
    """Upstream moved the file into its FAILED state."""


def upload_state(file) -> UploadState:
    """Map an SDK File's ``state`` to an UploadState.

    The SDK reports ``FileState.PROCESSING`` / ``ACTIVE`` / ``FAILED``;
    anything unrecognised (including STATE_UNSPECIFIED) is treated as
    still processing.
    """
    state = getattr(file, "state", None)
    name = getattr(state, "name", None) or str(state or "")
    name = name.rsplit(".", 1)[-1].upper()
    if name == "ACTIVE":
        return UploadState.ACTIVE
    if name == "FAILED":
        return UploadState.FAILED
    return UploadState.PROCESSING


class FileUploadPoller:
    """Waits for an uploaded file to leave PROCESSING.

    Args:
        fetch_status: coroutine function ``name -> File`` issuing one status
            request.
        sleep: coroutine function used between polls (``asyncio.sleep``).
        poll_interval: seconds between status requests.
        max_wait: total seconds of polling before giving up.
    """

    def __init__(
        self,
        fetch_status: Callable[[str], Awaitable[object]],
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        poll_interval: float = POLL_INTERVAL_SECONDS,
        max_wait: float = MAX_WAIT_SECONDS,
    ):
        self._fetch_status = fetch_status
        self._sleep = sleep
        self.poll_interval = poll_interval
        self.max_wait = max_wait
        self.state = UploadState.UPLOADING
        self.elapsed = 0.0

    async def wait_until_active(self, file):
        """Poll until ``file`` is ACTIVE and return its latest record.

        Raises:
            UploadFailed: upstream reported FAILED.
            DeadlineExceeded: still PROCESSING after ``max_wait`` seconds.
        """
        self.state = upload_state(file)
        while self.state is UploadState.PROCESSING:
            if self.elapsed >= self.max_wait:
                self.state = UploadState.TIMED_OUT
                raise DeadlineExceeded(
                    f"File {file.name} still processing after {self.max_wait:g}s"
                )
            await self._sleep(self.poll_interval)
            self.elapsed += self.poll_interval
            file = await self._fetch_status(file.name)
            self.state = upload_state(file)
            logger.debug("File %s is %s after %gs", file.name, self.state.value, self.elapsed)

        if self.state is UploadState.FAILED:
            raise UploadFailed(f"File processing failed for {file.name}")
        return file


# -----------------------------------------------------------------------------
# Upload media types
# -----------------------------------------------------------------------------
# Keyed by lowercase extension.  Several structured-data and typed-source
# extensions are deliberately sent as text/plain: Gemini rejects their
# "proper" media types on upload but reads them fine as text.
# -----------------------------------------------------------------------------
UPLOAD_MIME_TYPES: dict[str, str] = {
    ".pdf": "application/pdf",
    ".txt": "text/plain",
    ".md": "text/markdown",
    ".html": "text/html",
    ".htm": "text/html",
    ".css": "text/css",
    ".csv": "text/csv",
    ".xml": "text/xml",
    ".rtf": "text/rtf",
    ".js": "text/javascript",
    ".mjs": "text/javascript",
    ".py": "text/x-python",
    ".json": "text/plain",
    ".yaml": "text/plain",
    ".yml": "text/plain",
    ".toml": "text/plain",
    ".ts": "text/plain",
    ".tsx": "text/plain",
    ".jsx": "text/plain",
    ".java": "text/plain",
    ".go": "text/plain",
    ".rs": "text/plain",
    ".c": "text/plain",
    ".cpp": "text/plain",
    ".h": "text/plain",
    ".sh": "text/plain",
    ".sql": "text/plain",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".mp4": "video/mp4",
}
DEFAULT_UPLOAD_MIME_TYPE = "text/plain"


def upload_mime_type(file_path: str) -> str:
    """Media type to declare when uploading ``file_path``."""
    extension = os.path.splitext(file_path)[1].lower()
    return UPLOAD_MIME_TYPES.get(extension, DEFAULT_UPLOAD_MIME_TYPE)

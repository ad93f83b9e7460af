# =============================================================================
# tools/media.py  —  Image Files on Disk
# =============================================================================
#
# The Gemini client only ever sees bytes (core/requests.MediaInput) and only
# ever returns bytes (core/models.GeneratedImage).  Reading source images
# and saving generated ones is the tool layer's job, and it lives here.
# =============================================================================

import os
from datetime import datetime

from core.requests import MediaInput, validate

_IMAGE_MIME_TYPES: dict[str, str] = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".bmp": "image/bmp",
}


def image_mime_type(path: str) -> str:
    """Media type for an image file, by extension (PNG when unknown)."""
    extension = os.path.splitext(path)[1].lower()
    return _IMAGE_MIME_TYPES.get(extension, "image/png")


def read_image(path: str) -> MediaInput:
    with open(path, "rb") as f:
        data = f.read()
    return validate(MediaInput, data=data, mime_type=image_mime_type(path))


def save_image(data: bytes, save_path: str) -> str:
    """Write image bytes to ``save_path``, creating parent directories."""
    directory = os.path.dirname(save_path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(save_path, "wb") as f:
        f.write(data)
    return save_path


def auto_save_path(output_dir: str, prefix: str) -> str:
    """A timestamped .png path inside ``output_dir``."""
    timestamp = datetime.now().strftime("%Y-%m-%dT%H-%M-%S-%f")
    return os.path.abspath(os.path.join(output_dir, f"{prefix}-{timestamp}.png"))

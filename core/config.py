# =============================================================================
# core/config.py  —  Runtime Configuration & Model Catalogue
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Reads the server's settings from environment variables and holds the
#   static model lists the client uses to pick call shapes.
#
# ENVIRONMENT VARIABLES:
#   GEMINI_API_KEY        (required)  bearer credential passed to the SDK
#   GEMINI_DEFAULT_MODEL  (optional)  defaults to gemini-2.5-flash
#   GEMINI_TIMEOUT        (optional)  base timeout in milliseconds (60000)
#   GEMINI_OUTPUT_DIR     (optional)  where generated images are saved
#
#   A .env file is honoured: entry points call load_dotenv() BEFORE
#   load_config(), exactly like main.py does for the agent.
#
# DEADLINES:
#   Every upstream call gets base_timeout × multiplier.  Plain text is the
#   baseline; image synthesis, reasoning and file handling are known to be
#   slower, so they get proportionally more time.
# =============================================================================

import os
from dataclasses import dataclass


DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_TIMEOUT_MS = 60000
DEFAULT_OUTPUT_DIR = "./generated-images"

SUPPORTED_MODELS = (
    # Text models
    "gemini-2.5-flash",
    "gemini-2.5-pro",
    "gemini-3-flash-preview",
    "gemini-3-pro-preview",
    # Image-capable text+image models
    "gemini-2.5-flash-preview-native-audio-dialog",
    # Imagen models
    "imagen-4.0-generate-001",
    "imagen-4.0-fast-generate-001",
)

DEFAULT_IMAGE_MODEL = "gemini-2.5-flash-image"

# The only image model allowed to ground generation in Google Search.
SEARCH_IMAGE_MODEL = "gemini-3-pro-image-preview"

# Model ids with this prefix go to the dedicated image-synthesis endpoint.
IMAGEN_PREFIX = "imagen-"

# Model ids with this prefix take thinking_level instead of thinking_budget.
THINKING_LEVEL_PREFIX = "gemini-3"

# -----------------------------------------------------------------------------
# Per-capability deadline multipliers (applied to the base timeout)
# -----------------------------------------------------------------------------
TIMEOUT_MULTIPLIERS: dict[str, int] = {
    "generate": 1,
    "analyze_image": 2,
    "search_web": 2,
    "fetch_url": 2,
    "search_maps": 2,
    "execute_code": 3,
    "thinking": 3,
    "file_status": 1,
    "file_upload": 5,
    "file_query": 3,
    "generate_image": 4,
    "edit_image": 4,
}


class ConfigError(RuntimeError):
    """Raised when the environment does not describe a usable server."""


@dataclass
class Config:
    """Settings for one server process."""

    api_key: str
    default_model: str = DEFAULT_MODEL
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    output_dir: str = DEFAULT_OUTPUT_DIR

    def deadline(self, capability: str) -> float:
        """Seconds allowed for one upstream call of ``capability``."""
        return self.timeout_ms * TIMEOUT_MULTIPLIERS.get(capability, 1) / 1000


def load_config() -> Config:
    """Build a Config from environment variables.

    Raises:
        ConfigError: if the API key is missing or GEMINI_TIMEOUT is not a
            positive integer.
    """
    api_key = os.environ.get("GEMINI_API_KEY")
    if not api_key:
        raise ConfigError(
            "Gemini API key not configured. "
            "Please set the GEMINI_API_KEY environment variable."
        )

    timeout_str = os.environ.get("GEMINI_TIMEOUT")
    try:
        timeout_ms = int(timeout_str) if timeout_str else DEFAULT_TIMEOUT_MS
    except ValueError:
        raise ConfigError("GEMINI_TIMEOUT must be a positive number") from None
    if timeout_ms <= 0:
        raise ConfigError("GEMINI_TIMEOUT must be a positive number")

    return Config(
        api_key=api_key,
        default_model=os.environ.get("GEMINI_DEFAULT_MODEL") or DEFAULT_MODEL,
        timeout_ms=timeout_ms,
        output_dir=os.environ.get("GEMINI_OUTPUT_DIR") or DEFAULT_OUTPUT_DIR,
    )

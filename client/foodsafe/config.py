"""
Backend location, deadlines and endpoint paths.
Values are read lazily from the environment; entry-point scripts load .env first.
"""
import os
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

# client/foodsafe/config.py -> parent=foodsafe, parent.parent=client
_CLIENT_DIR = Path(__file__).resolve().parent.parent

DEFAULT_API_BASE = "http://127.0.0.1:8000"

# Deadlines (seconds). Image uploads are larger and slower to classify.
DEFAULT_TIMEOUT = 60.0
DEFAULT_IMAGE_TIMEOUT = 120.0

# --- Endpoints ---
CLASSIFY_IMAGE_PATH = "/classify/resolve"
RESOLVE_TEXT_PATH = "/ingredients/resolve"
RESOLVE_BARCODE_PATH = "/barcode/resolve"
RESOLVE_TOKENS_PATH = "/ingredients/resolve-tokens"

# Multipart upload field for classify-image
IMAGE_FIELD = "file"
IMAGE_FILENAME = "photo.jpg"
IMAGE_CONTENT_TYPE = "image/jpeg"


def get_env_path() -> Path:
    return _CLIENT_DIR / ".env"


def get_api_base() -> str:
    base = os.environ.get("FOODSAFE_API_BASE", "").strip() or DEFAULT_API_BASE
    return base.rstrip("/")


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("CONFIG ignoring non-numeric %s=%r; using %s", name, raw, default)
        return default
    if value <= 0:
        logger.warning("CONFIG ignoring non-positive %s=%r; using %s", name, raw, default)
        return default
    return value


def get_default_timeout() -> float:
    return _float_env("FOODSAFE_TIMEOUT", DEFAULT_TIMEOUT)


def get_image_timeout() -> float:
    return _float_env("FOODSAFE_IMAGE_TIMEOUT", DEFAULT_IMAGE_TIMEOUT)


# --- Startup logging ---
def log_config() -> None:
    logger.info(
        "CONFIG: api_base=%s timeout=%.0fs image_timeout=%.0fs env_file=%s",
        get_api_base(), get_default_timeout(), get_image_timeout(), get_env_path().exists(),
    )

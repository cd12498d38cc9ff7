"""
Request validation.

Rejects bad uploads before any provider is called and turns the optional
latitude/longitude form fields into ``GeoCoordinates``.
"""
import logging
from typing import Optional

from ..config import MAX_UPLOAD_BYTES
from ..schemas import GeoCoordinates, ImageInput

logger = logging.getLogger(__name__)


class ImageValidationError(ValueError):
    """Upload rejected; the message is safe to show to the caller."""


def check_content_type(content_type: Optional[str]) -> None:
    if not (content_type or "").startswith("image/"):
        raise ImageValidationError("Invalid file type. Please upload an image.")


def check_size(size: int, max_bytes: int = MAX_UPLOAD_BYTES) -> None:
    if size > max_bytes:
        limit_mb = max(max_bytes // (1024 * 1024), 1)
        raise ImageValidationError(f"File size too large. Please upload an image smaller than {limit_mb}MB.")


def build_image_input(
    data: Optional[bytes],
    content_type: Optional[str],
    filename: Optional[str],
    max_bytes: int = MAX_UPLOAD_BYTES,
) -> ImageInput:
    if data is None:
        raise ImageValidationError("No image provided")
    check_content_type(content_type)
    check_size(len(data), max_bytes)
    return ImageInput(data=data, content_type=content_type, size=len(data), filename=filename or "upload")


def parse_coordinates(latitude: Optional[str], longitude: Optional[str]) -> Optional[GeoCoordinates]:
    """Coordinates are optional; anything unusable means no weather lookup."""
    if not latitude or not longitude:
        return None
    try:
        lat = float(latitude)
        lng = float(longitude)
    except (TypeError, ValueError):
        logger.warning("Ignoring unparseable coordinates lat=%r lng=%r", latitude, longitude)
        return None
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0):
        logger.warning("Ignoring out-of-range coordinates lat=%s lng=%s", lat, lng)
        return None
    return GeoCoordinates(latitude=lat, longitude=lng)

"""Checks and helpers for base64-encoded card images."""

import re

SUPPORTED_FORMATS = ("jpeg", "jpg", "png", "webp")

DATA_URL_RE = re.compile(r"^data:image/(" + "|".join(SUPPORTED_FORMATS) + r");base64,")
ANY_DATA_URL_RE = re.compile(r"^data:image/[A-Za-z0-9.+-]+;base64,")
BARE_BASE64_RE = re.compile(r"^[A-Za-z0-9+/=]+$")

DEFAULT_MIME = "image/jpeg"


def is_valid_base64_image(image: str) -> bool:
    """Accept a supported data URL or a bare base64 string."""
    if not image:
        return False
    return bool(DATA_URL_RE.match(image) or BARE_BASE64_RE.match(image))


def to_data_url(image: str) -> str:
    """Add a JPEG data-URL prefix unless one is already present."""
    if image.startswith("data:image/"):
        return image
    return f"data:{DEFAULT_MIME};base64,{image}"


def split_data_url(image: str) -> tuple[str, str]:
    """Return (mime type, base64 payload) for a data URL or bare base64."""
    match = ANY_DATA_URL_RE.match(image)
    if not match:
        return DEFAULT_MIME, image
    mime = image[len("data:"):image.index(";")]
    return mime, image[match.end():]


def base64_size_bytes(image: str) -> int:
    """Approximate decoded size of a base64 image."""
    _, payload = split_data_url(image)
    padding = payload[-2:].count("=")
    return max(len(payload) * 3 // 4 - padding, 0)


def is_within_size_limit(image: str, max_size_mb: int) -> bool:
    return base64_size_bytes(image) <= max_size_mb * 1024 * 1024

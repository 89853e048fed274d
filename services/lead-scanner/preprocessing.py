"""Card image preprocessing before the vision call.

Phone cameras produce images far larger than the vision model needs.
Oversized images are downscaled (aspect ratio kept) and re-encoded as JPEG;
anything that cannot be decoded, or is already small enough, is passed
through untouched.
"""

import base64
import binascii
import logging

import cv2
import numpy as np

from image_validation import split_data_url

logger = logging.getLogger(__name__)

JPEG_QUALITY = 90


def preprocess_data_url(data_url: str, max_dimension: int) -> str:
    """Downscale a data-URL image so its longest side is <= max_dimension.

    Returns the original data URL when preprocessing is disabled, the image
    cannot be decoded, or no resize is needed.
    """
    if max_dimension <= 0:
        return data_url

    _, payload = split_data_url(data_url)
    try:
        image_bytes = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        logger.warning("preprocessing: payload is not valid base64, sending original")
        return data_url

    resized = preprocess(image_bytes, max_dimension)
    if resized is None:
        return data_url

    return "data:image/jpeg;base64," + base64.b64encode(resized).decode()


def preprocess(image_bytes: bytes, max_dimension: int) -> bytes | None:
    """Return downscaled JPEG bytes, or None if the image should be sent as-is."""
    img = _decode(image_bytes)
    if img is None:
        logger.warning("preprocessing: could not decode image, sending original")
        return None

    h, w = img.shape[:2]
    if max(h, w) <= max_dimension:
        return None

    img = _resize(img, max_dimension)
    encoded = _encode(img)
    if encoded is not None:
        logger.info(
            "preprocessing: resized %dx%d -> %dx%d (%d bytes -> %d bytes)",
            w, h, img.shape[1], img.shape[0], len(image_bytes), len(encoded),
        )
    return encoded


def _decode(image_bytes: bytes) -> np.ndarray | None:
    """Decode raw bytes into an OpenCV BGR array."""
    arr = np.frombuffer(image_bytes, dtype=np.uint8)
    if arr.size == 0:
        return None
    return cv2.imdecode(arr, cv2.IMREAD_COLOR)


def _resize(img: np.ndarray, max_dimension: int) -> np.ndarray:
    """Scale so the longest side equals max_dimension."""
    h, w = img.shape[:2]
    scale = max_dimension / float(max(h, w))
    size = (max(int(round(w * scale)), 1), max(int(round(h * scale)), 1))
    return cv2.resize(img, size, interpolation=cv2.INTER_AREA)


def _encode(img: np.ndarray) -> bytes | None:
    """Encode image as JPEG bytes."""
    try:
        success, buf = cv2.imencode(".jpg", img, [cv2.IMWRITE_JPEG_QUALITY, JPEG_QUALITY])
        if success:
            return buf.tobytes()
    except cv2.error as e:
        logger.warning("preprocessing: JPEG encode failed: %s", e)
    return None

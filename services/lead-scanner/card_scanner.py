"""Business card scanning: image -> vision model -> cleaned contact.

No retries anywhere in this path; a failed vision call is reported back.
Only the image size is logged, never its content.
"""

import json
import logging
import re
from typing import Any

from openai import APIError

from config import settings
from image_validation import is_valid_base64_image, is_within_size_limit, to_data_url
from models import BusinessCardResult
from normalization import card_confidence, normalize
from preprocessing import preprocess_data_url
from prompts import CARD_EXTRACTION_PROMPT
from vision_client import VisionClient, VisionNotConfigured

logger = logging.getLogger(__name__)

CARD_FIELDS = (
    "firstName", "lastName", "company", "position", "email",
    "phoneNumber", "website", "address", "city", "country",
)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")

NOT_CONFIGURED_ERROR = "OpenAI API key not configured. Please set OPENAI_API_KEY in environment variables."
INVALID_IMAGE_ERROR = "Invalid image format. Please provide a valid base64 encoded image."
NO_RESPONSE_ERROR = "No response from vision model"
PARSE_ERROR = "Failed to parse extracted data from business card"
GENERIC_ERROR = "Failed to scan business card"

UPSTREAM_ERRORS = {
    "invalid_api_key": "Invalid OpenAI API key",
    "rate_limit_exceeded": "OpenAI API rate limit exceeded. Please try again later.",
    "insufficient_quota": "OpenAI API quota exceeded. Please check your billing.",
}


def scan_image(
    image: str,
    vision: VisionClient,
    max_size_mb: int | None = None,
    max_dimension: int | None = None,
) -> BusinessCardResult:
    """Extract contact details from a base64 business card image."""
    if not vision.is_configured:
        logger.error("Card scan rejected: vision API key not configured")
        return BusinessCardResult.fail(NOT_CONFIGURED_ERROR)

    if not is_valid_base64_image(image):
        return BusinessCardResult.fail(INVALID_IMAGE_ERROR)

    size_limit = max_size_mb if max_size_mb is not None else settings.MAX_IMAGE_SIZE_MB
    if not is_within_size_limit(image, size_limit):
        return BusinessCardResult.fail(
            f"Image exceeds maximum allowed size of {size_limit}MB"
        )

    dimension = max_dimension if max_dimension is not None else settings.CARD_IMAGE_MAX_DIMENSION
    logger.info("Scanning business card: %d base64 chars", len(image))

    try:
        data_url = preprocess_data_url(to_data_url(image), dimension)
        raw = vision.complete(CARD_EXTRACTION_PROMPT, data_url)
    except VisionNotConfigured:
        return BusinessCardResult.fail(NOT_CONFIGURED_ERROR)
    except APIError as e:
        code = getattr(e, "code", None)
        logger.error("Vision API error: code=%s %s", code, e)
        return BusinessCardResult.fail(UPSTREAM_ERRORS.get(code, GENERIC_ERROR))
    except Exception:
        logger.exception("Card scan failed")
        return BusinessCardResult.fail(GENERIC_ERROR)

    if not raw:
        return BusinessCardResult.fail(NO_RESPONSE_ERROR)

    extracted = parse_card_response(raw)
    if extracted is None:
        logger.warning("Could not parse vision response (%d chars)", len(raw))
        return BusinessCardResult.fail(PARSE_ERROR)

    cleaned = clean_card_fields(extracted)
    logger.info("Business card scanned: %d fields extracted", len(cleaned))
    return BusinessCardResult.ok(
        ocr_text=raw,
        details=normalize(cleaned),
        confidence=card_confidence(len(cleaned)),
    )


def batch_scan_images(images: list[str], vision: VisionClient) -> list[BusinessCardResult]:
    """Scan images one after another; each result succeeds or fails alone."""
    return [scan_image(image, vision) for image in images]


def parse_card_response(raw: str) -> dict | None:
    """Parse the JSON object in the model reply, tolerating leading prose."""
    match = JSON_OBJECT_RE.search(raw)
    candidate = match.group(0) if match else raw
    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError:
        return None
    return parsed if isinstance(parsed, dict) else None


def clean_card_fields(extracted: dict[str, Any]) -> dict[str, str]:
    """Trim, validate and format the extracted card fields.

    Returns only non-empty fields, keyed by their camelCase names.
    """
    cleaned: dict[str, str] = {}
    for field in CARD_FIELDS:
        value = extracted.get(field)
        if value is None or isinstance(value, (dict, list, bool)):
            continue
        value = str(value).strip()
        if not value:
            continue

        if field == "email":
            if not EMAIL_RE.match(value):
                continue
            value = value.lower()
        elif field == "phoneNumber":
            value = format_phone_number(value)
        elif field == "website":
            value = format_website(value)

        if value:
            cleaned[field] = value
    return cleaned


def format_phone_number(phone: str) -> str:
    """Keep digits only, with a single leading + if the number had one."""
    digits = re.sub(r"[^\d+]", "", phone)
    if "+" in digits:
        digits = "+" + digits.replace("+", "")
    return digits if digits != "+" else ""


def format_website(website: str) -> str:
    website = website.lower()
    if not website.startswith(("http://", "https://")):
        website = "https://" + website
    return website

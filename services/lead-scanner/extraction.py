"""Contact extraction orchestrator for decoded QR payloads.

classify -> parse (or crawl) -> lift unique code -> normalize -> score.
"""

import logging

from classifier import classify
from crawler_client import CrawlerClient
from models import ExtractionResult, PayloadType
from normalization import (
    normalize,
    plaintext_confidence,
    single_field_confidence,
    url_confidence,
    vcard_confidence,
)
from parsers import (
    UNIQUE_CODE_KEY,
    parse_mailto,
    parse_plain_text,
    parse_tel,
    parse_vcard,
)

logger = logging.getLogger(__name__)

EMPTY_PAYLOAD_ERROR = "QR code text is empty"
PROCESSING_ERROR = "Failed to process QR code"


def classify_and_extract(raw_text: str, crawler: CrawlerClient) -> ExtractionResult:
    """Classify a QR payload and extract whatever contact details it holds."""
    text = (raw_text or "").strip()
    if not text:
        return ExtractionResult.fail(PayloadType.PLAINTEXT, EMPTY_PAYLOAD_ERROR)

    payload_type = classify(text)
    logger.info("Processing QR payload: type=%s length=%d", payload_type.value, len(text))

    try:
        return _extract(payload_type, text, crawler)
    except Exception:
        logger.exception("QR extraction failed: type=%s", payload_type.value)
        return ExtractionResult.fail(payload_type, PROCESSING_ERROR)


def _extract(payload_type: PayloadType, text: str, crawler: CrawlerClient) -> ExtractionResult:
    if payload_type is PayloadType.ENTRY_CODE:
        return ExtractionResult.ok(payload_type, text, 1.0, entry_code=text)

    if payload_type is PayloadType.MAILTO:
        details = normalize(parse_mailto(text))
        confidence = single_field_confidence(details.email)
        return ExtractionResult.ok(payload_type, text, confidence, details=details)

    if payload_type is PayloadType.TEL:
        details = normalize(parse_tel(text))
        confidence = single_field_confidence(details.phone_number)
        return ExtractionResult.ok(payload_type, text, confidence, details=details)

    if payload_type is PayloadType.URL:
        details = normalize(resolve_url(text, crawler))
        return ExtractionResult.ok(payload_type, text, url_confidence(details), details=details)

    if payload_type is PayloadType.VCARD:
        partial = parse_vcard(text)
        scorer = vcard_confidence
    else:
        partial = parse_plain_text(text)
        scorer = plaintext_confidence

    entry_code = partial.pop(UNIQUE_CODE_KEY, None)
    details = normalize(partial)
    return ExtractionResult.ok(
        payload_type, text, scorer(details), details=details, entry_code=entry_code,
    )


def resolve_url(url: str, crawler: CrawlerClient) -> dict:
    """Scrape contact fields behind a URL, degrading to the URL alone."""
    result = crawler.resolve(url)
    if not result.ok:
        logger.info("Crawl degraded to URL only: %s", result.error)
    contact = dict(result.unwrap_or({"website": url}))
    if not contact.get("website"):
        contact["website"] = url
    return contact

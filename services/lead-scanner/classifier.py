"""Classify decoded QR text into a payload type.

Categories overlap (a bare entry code is also valid plain text), so the
predicates are evaluated in a fixed order and the first match wins.
"""

import re
from collections.abc import Callable
from urllib.parse import urlsplit

from models import PayloadType

ENTRY_CODE_RE = re.compile(r"^[A-Za-z0-9_-]+$")
ENTRY_CODE_MIN_LEN = 3
ENTRY_CODE_MAX_LEN = 30


def is_entry_code(text: str) -> bool:
    if not ENTRY_CODE_MIN_LEN <= len(text) <= ENTRY_CODE_MAX_LEN:
        return False
    if not ENTRY_CODE_RE.match(text):
        return False
    return not any(ch in text for ch in ".@/")


def is_mailto(text: str) -> bool:
    return text[:7].lower() == "mailto:"


def is_tel(text: str) -> bool:
    return text[:4].lower() == "tel:"


def is_url(text: str) -> bool:
    try:
        parts = urlsplit(text)
        parts.port  # raises ValueError when out of range
    except ValueError:
        return False
    if parts.scheme.lower() not in ("http", "https") or not parts.netloc:
        return False
    return not any(ch.isspace() for ch in parts.netloc)


def is_vcard(text: str) -> bool:
    return text.strip().startswith("BEGIN:VCARD") and "END:VCARD" in text


CLASSIFIERS: tuple[tuple[PayloadType, Callable[[str], bool]], ...] = (
    (PayloadType.ENTRY_CODE, is_entry_code),
    (PayloadType.MAILTO, is_mailto),
    (PayloadType.TEL, is_tel),
    (PayloadType.URL, is_url),
    (PayloadType.VCARD, is_vcard),
)


def classify(text: str) -> PayloadType:
    """Return the payload type of trimmed, non-empty QR text."""
    for payload_type, matches in CLASSIFIERS:
        if matches(text):
            return payload_type
    return PayloadType.PLAINTEXT

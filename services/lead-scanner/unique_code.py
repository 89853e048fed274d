"""Find an operator-embedded identifier inside free text.

Booth and campaign QR codes often carry a short alphanumeric code next to
the contact details. The thresholds below are empirically tuned; changing
them changes which scans correlate back to a campaign.
"""

import re

KEY_VALUE_RE = re.compile(
    r"(?:NOTE:\s*)?"
    r"(?:code|uniquecode|unique_code|entrycode|entry_code|uniqueid|unique_id)"
    r"\s*[:=]\s*([A-Za-z0-9]{9,15})",
    re.IGNORECASE,
)
TOKEN_RE = re.compile(r"\b[A-Za-z0-9]{9,15}\b")

MAX_DIGITS = 10
CONTEXT_CHARS = 10
CONTEXT_MARKERS = ("@", "http", "www")


def extract_unique_code(text: str) -> str | None:
    """Return the first plausible unique code in ``text``, or None."""
    if not text:
        return None

    match = KEY_VALUE_RE.search(text)
    if match:
        return match.group(1)

    for token in TOKEN_RE.finditer(text):
        if _looks_like_code(text, token):
            return token.group(0)
    return None


def _looks_like_code(text: str, token: re.Match) -> bool:
    value = token.group(0)
    digits = sum(ch.isdigit() for ch in value)
    if digits > MAX_DIGITS or value.isdigit():
        return False

    start = max(token.start() - CONTEXT_CHARS, 0)
    context = text[start:token.end() + CONTEXT_CHARS].lower()
    return not any(marker in context for marker in CONTEXT_MARKERS)

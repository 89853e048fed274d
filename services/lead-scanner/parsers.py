"""Format-specific parsers for classified QR payloads.

Each parser returns a partial contact as a plain dict keyed by
``ContactRecord`` field names. vCard and plain-text parsers may also set
``unique_code``, which the extractor lifts out before normalization.
"""

import re
from collections.abc import Callable
from urllib.parse import unquote

from unique_code import extract_unique_code

UNIQUE_CODE_KEY = "unique_code"

EMAIL_RE = re.compile(r"[\w.+-]+@[\w-]+\.[A-Za-z]{2,}")
TEL_STRIP_RE = re.compile(r"[^\d+\- ()]")
THREE_DIGITS_RE = re.compile(r"\d{3}")
NAME_MAX_LEN = 50

PHONE_MIN_DIGITS = 7
PHONE_MAX_DIGITS = 15

# Ordered from most to least specific
PHONE_PATTERNS = (
    # US with extension: (555) 123-4567 ext. 89
    r"(?:\+?1[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}\s*(?:ext\.?|x|extension)\s*\d{1,6}",
    # International, grouped: +44 20 7946 0958
    r"\+\d{1,3}[-.\s]?\(?\d{1,4}\)?(?:[-.\s]?\d{2,4}){2,4}",
    # Bare digit run
    r"(?<!\d)\d{10,15}(?!\d)",
    # Parenthesized US: (555) 123-4567
    r"\(\d{3}\)\s*\d{3}[-.\s]?\d{4}",
    # Hyphenated US: 555-123-4567
    r"\d{3}[-.]\d{3}[-.]\d{4}",
)


# ---------- mailto / tel ----------

def parse_mailto(text: str) -> dict[str, str]:
    address = text[len("mailto:"):].split("?", 1)[0]
    return {"email": unquote(address).strip()}


def parse_tel(text: str) -> dict[str, str]:
    number = TEL_STRIP_RE.sub("", text[len("tel:"):]).strip()
    return {"phone_number": number, "mobile": number}


# ---------- vCard ----------

def parse_vcard(text: str) -> dict[str, str]:
    """Parse the first occurrence of each supported vCard property."""
    props = _read_vcard_properties(text)
    contact: dict[str, str] = {}

    full_name = _unescape(props.get("FN", "")).strip()
    if full_name:
        parts = full_name.split(" ", 1)
        contact["first_name"] = parts[0]
        if len(parts) == 2 and parts[1].strip():
            contact["last_name"] = parts[1].strip()

    # Structured name wins over the FN split
    if "N" in props:
        name = _components(props["N"])
        if len(name) >= 2:
            if name[0]:
                contact["last_name"] = name[0]
            if name[1]:
                contact["first_name"] = name[1]

    if "ORG" in props:
        org = _components(props["ORG"])
        if org[0]:
            contact["company"] = org[0]
        if len(org) > 1 and org[1]:
            contact["department"] = org[1]

    simple = {
        "TITLE": "position",
        "EMAIL": "email",
        "TEL": "phone_number",
        "URL": "website",
    }
    for prop, field in simple.items():
        value = _unescape(props.get(prop, "")).strip()
        if value:
            contact[field] = value

    if contact.get("phone_number", "").lower().startswith("tel:"):
        contact["phone_number"] = contact["phone_number"][4:]

    if "ADR" in props:
        # [po-box, extended, street, city, region, postal code, country]
        adr = _components(props["ADR"])
        for index, field in ((2, "address"), (3, "city"), (6, "country")):
            if len(adr) > index and adr[index]:
                contact[field] = adr[index]

    code = extract_unique_code(_unescape(props.get("NOTE", "")))
    if code is None:
        code = extract_unique_code(text)
    if code:
        contact[UNIQUE_CODE_KEY] = code

    return contact


def _read_vcard_properties(text: str) -> dict[str, str]:
    """Map upper-case property name -> raw value, first occurrence wins."""
    lines: list[str] = []
    for line in text.replace("\r\n", "\n").replace("\r", "\n").split("\n"):
        if line[:1] in (" ", "\t") and lines:
            lines[-1] += line[1:]
        else:
            lines.append(line)

    props: dict[str, str] = {}
    for line in lines:
        if ":" not in line:
            continue
        name, value = line.split(":", 1)
        # Drop parameters (TEL;TYPE=CELL) and group prefixes (item1.EMAIL)
        name = name.split(";", 1)[0].rsplit(".", 1)[-1].strip().upper()
        if name in ("BEGIN", "END", "VERSION"):
            continue
        props.setdefault(name, value)
    return props


def _components(value: str) -> list[str]:
    return [_unescape(part).strip() for part in re.split(r"(?<!\\);", value)]


def _unescape(value: str) -> str:
    return re.sub(
        r"\\([\\,;nN])",
        lambda m: "\n" if m.group(1) in "nN" else m.group(1),
        value,
    )


# ---------- plain text ----------

def extract_email(text: str) -> str | None:
    match = EMAIL_RE.search(text)
    return match.group(0) if match else None


def is_valid_phone(candidate: str) -> bool:
    digits = sum(ch.isdigit() for ch in candidate)
    return PHONE_MIN_DIGITS <= digits <= PHONE_MAX_DIGITS


def _regex_matcher(pattern: str) -> Callable[[str], str | None]:
    compiled = re.compile(pattern, re.IGNORECASE)

    def match(text: str) -> str | None:
        found = compiled.search(text)
        return found.group(0).strip() if found else None

    return match


PHONE_MATCHERS: tuple[Callable[[str], str | None], ...] = tuple(
    _regex_matcher(p) for p in PHONE_PATTERNS
)


def extract_phone(text: str) -> str | None:
    """Return the first matcher hit with a plausible digit count."""
    for matcher in PHONE_MATCHERS:
        candidate = matcher(text)
        if candidate and is_valid_phone(candidate):
            return candidate
    return None


def guess_name(text: str) -> dict[str, str]:
    """Treat the first non-blank line as a name if it looks like one."""
    first_line = next((line.strip() for line in text.splitlines() if line.strip()), "")
    if not first_line or len(first_line) >= NAME_MAX_LEN:
        return {}
    if "@" in first_line or THREE_DIGITS_RE.search(first_line):
        return {}

    parts = first_line.split(" ", 1)
    name = {"first_name": parts[0]}
    if len(parts) == 2 and parts[1].strip():
        name["last_name"] = parts[1].strip()
    return name


def parse_plain_text(text: str) -> dict[str, str]:
    contact: dict[str, str] = {}

    code = extract_unique_code(text)
    if code:
        contact[UNIQUE_CODE_KEY] = code

    email = extract_email(text)
    if email:
        contact["email"] = email

    phone = extract_phone(text)
    if phone:
        contact["phone_number"] = phone

    contact.update(guess_name(text))
    return contact

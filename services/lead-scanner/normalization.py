"""Normalize partial contacts into ContactRecord and score them."""

from collections.abc import Mapping
from typing import Any

from models import ContactRecord

# Accept both python field names and their camelCase aliases
_FIELD_NAMES: dict[str, str] = {}
for _name, _info in ContactRecord.model_fields.items():
    _FIELD_NAMES[_name] = _name
    _FIELD_NAMES[_info.alias or _name] = _name

VCARD_DENOMINATOR = 5
URL_DENOMINATOR = 10
PLAINTEXT_DENOMINATOR = 3
CARD_DENOMINATOR = 6
PLAINTEXT_FLOOR = 0.3


def normalize(partial: Mapping[str, Any]) -> ContactRecord:
    """Build a fixed-shape record, defaulting every absent field to "".

    Keys that are not ContactRecord fields (``unique_code`` included) are
    dropped.
    """
    values: dict[str, str] = {}
    for key, value in partial.items():
        field = _FIELD_NAMES.get(key)
        if field is None or value is None or isinstance(value, (dict, list)):
            continue
        values[field] = str(value).strip()
    return ContactRecord(**values)


def count_populated(record: ContactRecord) -> int:
    return sum(1 for value in record.model_dump().values() if value)


def ratio_confidence(count: int, denominator: int) -> float:
    return round(min(max(count / denominator, 0.0), 1.0), 2)


def vcard_confidence(record: ContactRecord) -> float:
    return ratio_confidence(count_populated(record), VCARD_DENOMINATOR)


def url_confidence(record: ContactRecord) -> float:
    return ratio_confidence(count_populated(record), URL_DENOMINATOR)


def plaintext_confidence(record: ContactRecord) -> float:
    count = count_populated(record)
    if count == 0:
        return PLAINTEXT_FLOOR
    return ratio_confidence(count, PLAINTEXT_DENOMINATOR)


def single_field_confidence(value: str) -> float:
    """mailto/tel payloads carry one field: full confidence or half."""
    return 1.0 if value else 0.5


def card_confidence(field_count: int) -> float:
    return ratio_confidence(field_count, CARD_DENOMINATOR)

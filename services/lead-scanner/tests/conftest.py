"""Shared test fixtures for lead scanner tests."""

import base64
import json
import sys
from pathlib import Path

import numpy as np
import pytest

# Add parent directory to path so we can import the modules
sys.path.insert(0, str(Path(__file__).parent.parent))


def _jpeg_bytes(width: int, height: int) -> bytes:
    import cv2

    img = np.zeros((height, width, 3), dtype=np.uint8)
    img[:] = (240, 240, 240)  # Light gray card

    # Dark rectangles simulate printed text lines
    cv2.rectangle(img, (width // 10, height // 6), (width // 2, height // 6 + 20), (30, 30, 30), -1)
    cv2.rectangle(img, (width // 10, height // 3), (width // 3, height // 3 + 15), (30, 30, 30), -1)

    _, buf = cv2.imencode(".jpg", img, [cv2.IMWRITE_JPEG_QUALITY, 90])
    return buf.tobytes()


@pytest.fixture
def small_card_b64() -> str:
    """A 350x200 card image, below any resize threshold."""
    return base64.b64encode(_jpeg_bytes(350, 200)).decode()


@pytest.fixture
def large_card_b64() -> str:
    """A 3000x1800 card image that will be downscaled."""
    return base64.b64encode(_jpeg_bytes(3000, 1800)).decode()


@pytest.fixture
def full_vcard() -> str:
    return "\r\n".join([
        "BEGIN:VCARD",
        "VERSION:3.0",
        "FN:Jane Q Smith",
        "N:Smith;Jane;Q;;",
        "ORG:Acme Corp;Sales",
        "TITLE:Head of Sales",
        "EMAIL;TYPE=work:jane@acme.com",
        "TEL;TYPE=cell:+1 555 010 2030",
        "URL:https://acme.com",
        "ADR;TYPE=work:;;1 Main St;Boston;IL;62701;USA",
        "END:VCARD",
    ])


@pytest.fixture
def mock_card_response() -> str:
    """Mock vision reply for a fully populated card."""
    return json.dumps({
        "firstName": " John ",
        "lastName": "Doe",
        "company": "Tech Corp",
        "position": "CEO",
        "email": "John@TechCorp.com",
        "phoneNumber": "+1 (234) 567-890",
        "website": "WWW.TechCorp.com",
        "address": "123 Tech Street",
        "city": "San Francisco",
        "country": "USA",
    })


@pytest.fixture
def mock_preamble_response() -> str:
    """Mock vision reply with prose before the JSON."""
    return 'Here is the extracted data:\n\n{"firstName": "Max", "lastName": "Mustermann", "email": null}'

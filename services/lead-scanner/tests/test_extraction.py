"""Tests for the QR extraction orchestrator."""

import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from crawler_client import CrawlerClient, CrawlResult
from extraction import EMPTY_PAYLOAD_ERROR, classify_and_extract
from models import PayloadType


@pytest.fixture
def crawler() -> MagicMock:
    mock = MagicMock()
    mock.resolve.return_value = CrawlResult(error="not configured")
    return mock


class TestInputErrors:
    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_empty_payload(self, text: str, crawler: MagicMock):
        result = classify_and_extract(text, crawler)
        assert result.success is False
        assert result.type is PayloadType.PLAINTEXT
        assert result.error == EMPTY_PAYLOAD_ERROR
        assert result.data is None
        crawler.resolve.assert_not_called()


class TestEntryCode:
    def test_scenario(self, crawler: MagicMock):
        result = classify_and_extract("  ABC123XYZ ", crawler)
        assert result.success
        assert result.type is PayloadType.ENTRY_CODE
        assert result.data.entry_code == "ABC123XYZ"
        assert result.data.raw_data == "ABC123XYZ"
        assert result.data.confidence == 1.0
        assert result.data.details is None


class TestMailtoTel:
    def test_mailto(self, crawler: MagicMock):
        result = classify_and_extract("mailto:a@b.com?subject=Hi", crawler)
        assert result.type is PayloadType.MAILTO
        assert result.data.details.email == "a@b.com"
        assert result.data.confidence == 1.0

    def test_empty_mailto_half_confidence(self, crawler: MagicMock):
        result = classify_and_extract("mailto:?subject=Hi", crawler)
        assert result.data.details.email == ""
        assert result.data.confidence == 0.5

    def test_tel(self, crawler: MagicMock):
        result = classify_and_extract("tel:+1 (555) 010-2030", crawler)
        details = result.data.details
        assert result.type is PayloadType.TEL
        assert details.phone_number == details.mobile == "+1 (555) 010-2030"
        assert result.data.confidence == 1.0


class TestURL:
    def test_crawl_success(self, crawler: MagicMock):
        crawler.resolve.return_value = CrawlResult(data={
            "firstName": "Jane", "lastName": "Smith", "company": "Acme",
            "email": "jane@acme.com", "uniqueCode": "SHOULDVANISH",
        })
        result = classify_and_extract("https://acme.com/jane", crawler)
        details = result.data.details
        assert result.type is PayloadType.URL
        assert details.first_name == "Jane"
        assert details.website == "https://acme.com/jane"
        assert result.data.confidence == 0.5
        assert "uniqueCode" not in details.model_dump(by_alias=True)

    def test_crawl_failure_degrades(self, crawler: MagicMock):
        crawler.resolve.return_value = CrawlResult(error="Crawler timed out")
        result = classify_and_extract("https://acme.com/jane", crawler)
        assert result.success
        assert result.type is PayloadType.URL
        assert result.data.details.website == "https://acme.com/jane"
        assert result.data.confidence == 0.1

    def test_misconfigured_crawler_degrades(self):
        crawler = CrawlerClient(base_url="http://[::1/scrape")
        result = classify_and_extract("https://acme.com/jane", crawler)
        crawler.close()
        assert result.success
        assert result.type is PayloadType.URL
        assert result.data.details.website == "https://acme.com/jane"

    def test_crawled_website_kept(self, crawler: MagicMock):
        crawler.resolve.return_value = CrawlResult(data={"website": "https://acme.com"})
        result = classify_and_extract("https://acme.com/jane?ref=qr", crawler)
        assert result.data.details.website == "https://acme.com"


class TestVCard:
    def test_scenario(self, crawler: MagicMock):
        result = classify_and_extract("BEGIN:VCARD\nFN:John Doe\nEMAIL:j@d.com\nEND:VCARD", crawler)
        details = result.data.details
        assert result.type is PayloadType.VCARD
        assert details.first_name == "John"
        assert details.last_name == "Doe"
        assert details.email == "j@d.com"
        assert details.company == ""
        assert result.data.confidence == 0.6

    def test_populated_card_confidence(self, crawler: MagicMock, full_vcard: str):
        result = classify_and_extract(full_vcard, crawler)
        assert result.data.confidence >= 0.8
        assert result.data.entry_code is None

    def test_unique_code_surfaces_as_entry_code(self, crawler: MagicMock):
        text = "BEGIN:VCARD\nFN:A B\nNOTE:code=BOOTH12345\nEND:VCARD"
        result = classify_and_extract(text, crawler)
        assert result.data.entry_code == "BOOTH12345"
        assert "uniqueCode" not in result.data.details.model_dump(by_alias=True)


class TestPlainText:
    def test_contact_block(self, crawler: MagicMock):
        result = classify_and_extract("John Doe\njohn@example.com\n+1 555 010 2030", crawler)
        assert result.type is PayloadType.PLAINTEXT
        assert result.data.details.email == "john@example.com"
        assert result.data.confidence == 1.0

    def test_nothing_found_keeps_floor(self, crawler: MagicMock):
        result = classify_and_extract("Room 101 @ hall", crawler)
        assert result.success
        assert result.data.confidence == 0.3
        assert result.data.raw_data == "Room 101 @ hall"


class TestParserFailure:
    def test_unexpected_exception_becomes_failure(self, crawler: MagicMock):
        with patch("extraction.parse_vcard", side_effect=RuntimeError("boom")):
            result = classify_and_extract("BEGIN:VCARD\nFN:A B\nEND:VCARD", crawler)
        assert result.success is False
        assert result.type is PayloadType.VCARD
        assert result.error == "Failed to process QR code"


class TestSerialization:
    def test_camel_case_wire_format(self, crawler: MagicMock):
        result = classify_and_extract("mailto:a@b.com", crawler)
        payload = result.model_dump(mode="json", by_alias=True, exclude_none=True)
        assert payload["type"] == "mailto"
        assert payload["data"]["rawData"] == "mailto:a@b.com"
        assert payload["data"]["details"]["phoneNumber"] == ""
        assert "error" not in payload

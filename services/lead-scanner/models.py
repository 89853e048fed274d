"""Pydantic models for scan requests and extraction results.

Field names are snake_case in Python and camelCase on the wire.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PayloadType(str, Enum):
    ENTRY_CODE = "entry_code"
    MAILTO = "mailto"
    TEL = "tel"
    URL = "url"
    VCARD = "vcard"
    PLAINTEXT = "plaintext"


class ContactRecord(CamelModel):
    """Fixed-shape contact details. Absent values are empty strings."""

    title: str = ""
    first_name: str = ""
    last_name: str = ""
    company: str = ""
    position: str = ""
    department: str = ""
    email: str = ""
    phone_number: str = ""
    mobile: str = ""
    website: str = ""
    address: str = ""
    street_name: str = ""
    city: str = ""
    country: str = ""


class _Outcome(CamelModel):
    """Exactly one of ``data`` / ``error`` is set."""

    success: bool
    error: str | None = None

    @model_validator(mode="after")
    def _check_outcome(self):
        has_data = getattr(self, "data", None) is not None
        has_error = self.error is not None
        if has_data == has_error:
            raise ValueError("exactly one of data or error must be set")
        if self.success != has_data:
            raise ValueError("success must be true exactly when data is set")
        return self


class ExtractionData(CamelModel):
    details: ContactRecord | None = None
    entry_code: str | None = None
    raw_data: str
    confidence: float


class ExtractionResult(_Outcome):
    type: PayloadType
    data: ExtractionData | None = None

    @classmethod
    def ok(
        cls,
        payload_type: PayloadType,
        raw_data: str,
        confidence: float,
        details: ContactRecord | None = None,
        entry_code: str | None = None,
    ) -> "ExtractionResult":
        return cls(
            success=True,
            type=payload_type,
            data=ExtractionData(
                details=details,
                entry_code=entry_code,
                raw_data=raw_data,
                confidence=confidence,
            ),
        )

    @classmethod
    def fail(cls, payload_type: PayloadType, error: str) -> "ExtractionResult":
        return cls(success=False, type=payload_type, error=error)


class BusinessCardData(CamelModel):
    ocr_text: str
    details: ContactRecord
    confidence: float


class BusinessCardResult(_Outcome):
    data: BusinessCardData | None = None

    @classmethod
    def ok(cls, ocr_text: str, details: ContactRecord, confidence: float) -> "BusinessCardResult":
        return cls(
            success=True,
            data=BusinessCardData(ocr_text=ocr_text, details=details, confidence=confidence),
        )

    @classmethod
    def fail(cls, error: str) -> "BusinessCardResult":
        return cls(success=False, error=error)


class QRScanRequest(CamelModel):
    qr_text: str = ""


class CardScanRequest(CamelModel):
    image: str = ""


class BatchCardScanRequest(CamelModel):
    images: list[str] = []

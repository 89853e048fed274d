"""FastAPI lead scanner service: QR payload and business card extraction.

Handles classification, parsing, crawler delegation and vision calls.
Images are handled in memory; logs carry payload sizes only, never content.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse

from card_scanner import batch_scan_images, scan_image
from config import settings
from crawler_client import CrawlerClient
from extraction import classify_and_extract
from models import (
    BatchCardScanRequest,
    BusinessCardResult,
    CardScanRequest,
    PayloadType,
    QRScanRequest,
)
from vision_client import VisionClient

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

_crawler: CrawlerClient | None = None
_vision: VisionClient | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the crawler and vision clients on startup."""
    global _crawler, _vision

    _crawler = CrawlerClient()
    _vision = VisionClient()

    if not _crawler.is_configured:
        logger.info("Crawler not configured (CRAWLER_SERVICE_URL is empty), URL scans return the URL only")
    if not _vision.is_configured:
        logger.info("Vision model not configured (OPENAI_API_KEY is empty), card scanning disabled")

    yield

    _crawler.close()
    _vision.close()


app = FastAPI(title="Lead Scanner", version="1.0.0", lifespan=lifespan)


def get_crawler() -> CrawlerClient:
    if _crawler is None:
        raise RuntimeError("Crawler client not initialized")
    return _crawler


def get_vision() -> VisionClient:
    if _vision is None:
        raise RuntimeError("Vision client not initialized")
    return _vision


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"success": False, "message": message})


@app.post("/api/v1/scan/qr")
def scan_qr(body: QRScanRequest, crawler: CrawlerClient = Depends(get_crawler)):
    """Extract contact details from decoded QR code text."""
    if not body.qr_text.strip():
        return _bad_request("QR code text is required. Please provide the decoded QR text.")

    result = classify_and_extract(body.qr_text, crawler)
    if not result.success:
        return _bad_request(result.error or "Failed to process QR code")

    content = result.model_dump(mode="json", by_alias=True, exclude_none=True)
    content["leadType"] = "entry_code" if result.type is PayloadType.ENTRY_CODE else "full_scan"
    return content


@app.post("/api/v1/scan/card")
def scan_card(body: CardScanRequest, vision: VisionClient = Depends(get_vision)):
    """Extract contact details from a base64 business card image."""
    if not body.image:
        return _bad_request("Image is required. Please provide a base64 encoded business card image.")

    result = scan_image(body.image, vision)
    if not result.success:
        return _bad_request(result.error or "Failed to scan business card")
    return result.model_dump(mode="json", by_alias=True, exclude_none=True)


@app.post("/api/v1/scan/cards", response_model=list[BusinessCardResult], response_model_exclude_none=True)
def scan_cards(body: BatchCardScanRequest, vision: VisionClient = Depends(get_vision)):
    """Scan several card images in order; failures are reported per item."""
    logger.info("Batch card scan: %d images", len(body.images))
    return batch_scan_images(body.images, vision)


@app.get("/health")
def health(
    crawler: CrawlerClient = Depends(get_crawler),
    vision: VisionClient = Depends(get_vision),
):
    """Return service status and collaborator configuration."""
    return {
        "status": "healthy",
        "crawler_configured": crawler.is_configured,
        "vision_configured": vision.is_configured,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)

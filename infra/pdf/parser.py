import base64
import io
import logging
from typing import NamedTuple, Optional

import httpx
import pdfplumber

from app.settings import settings

logger = logging.getLogger(__name__)


class PdfExtraction(NamedTuple):
    text: str
    success: bool


FAILED = PdfExtraction(text="", success=False)


def parse_pdf_bytes(data: bytes) -> str:
    text_parts = []
    with pdfplumber.open(io.BytesIO(data)) as pdf:
        for page in pdf.pages:
            t = page.extract_text() or ""
            text_parts.append(t)
    text = "\n".join(text_parts)
    logger.info("Parsed PDF: bytes=%d text_length=%d", len(data), len(text))
    return text


async def extract_pdf_text_from_url(
    url: str,
    *,
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> PdfExtraction:
    """Download a résumé and pull its text.

    Success means the PDF parsed; the text may still be blank, so callers
    check ``text.strip()`` before using it. Never raises.
    """
    try:
        async with httpx.AsyncClient(
            timeout=timeout or settings.PDF_FETCH_TIMEOUT_SECONDS,
            transport=transport,
            follow_redirects=True,
        ) as client:
            response = await client.get(url)
        if not response.is_success:
            logger.warning("Résumé fetch returned %s for %s",
                           response.status_code, url)
            return FAILED
        text = parse_pdf_bytes(response.content)
    except Exception as exc:
        logger.error("Extracting PDF text from %s failed: %s", url, exc)
        return FAILED
    return PdfExtraction(text=text, success=True)


def extract_pdf_text_from_base64(blob: str) -> PdfExtraction:
    try:
        data = base64.b64decode(blob, validate=False)
        text = parse_pdf_bytes(data)
    except Exception as exc:
        logger.error("Extracting PDF text from upload failed: %s", exc)
        return FAILED
    return PdfExtraction(text=text, success=True)

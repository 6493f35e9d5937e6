"""PDF text reading for downloaded documents"""

import io
import logging

import pdfplumber

logger = logging.getLogger(__name__)


def read_pdf_text(data: bytes) -> str:
    """
    Return the text of every page, joined with newlines.

    An unreadable PDF yields an empty string, which the extractor treats as
    a document that is not a transfer invoice.
    """
    try:
        with pdfplumber.open(io.BytesIO(data)) as pdf:
            return "\n".join((page.extract_text() or "") for page in pdf.pages)
    except Exception as e:
        logger.warning(f"Could not read PDF text: {e}")
        return ""

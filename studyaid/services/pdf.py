import asyncio
import fitz  # PyMuPDF
from loguru import logger

from ..errors import ExtractionError


def _page_text(page) -> str:
    # words come back in reading order: (x0, y0, x1, y1, word, block, line, word_no)
    return " ".join(w[4] for w in page.get_text("words"))


def extract_pages_text(data: bytes) -> list[str]:
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except Exception as e:
        logger.warning(f"[extract] could not open PDF: {e}")
        raise ExtractionError() from e

    with doc:
        if doc.needs_pass:
            raise ExtractionError("This PDF is password protected.")
        try:
            return [_page_text(p) for p in doc]
        except Exception as e:
            logger.warning(f"[extract] failed while reading pages: {e}")
            raise ExtractionError() from e


def extract_text(data: bytes) -> str:
    """Concatenate page text in page order, one newline between pages."""
    pages = extract_pages_text(data)
    text = "\n".join(pages)
    logger.info(f"[extract] pages={len(pages)} chars={len(text)}")
    return text


async def extract_text_async(data: bytes) -> str:
    return await asyncio.to_thread(extract_text, data)

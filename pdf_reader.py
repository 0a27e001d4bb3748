import io
import logging
import re

# TODO: Migrate from PyPDF2 to pypdf to resolve deprecation warnings when convenient.
import PyPDF2  # type: ignore[import-not-found]

logger = logging.getLogger(__name__)

MIN_MEANINGFUL_LENGTH = 100
MIN_MEANINGFUL_RATIO = 0.5


def meaningful_text_ratio(text: str) -> float:
    """Share of non-whitespace characters that are alphanumeric."""
    total = len(re.sub(r"\s", "", text))
    if total == 0:
        return 0.0
    alphanumeric = len(re.sub(r"[^a-zA-Z0-9]", "", text))
    return alphanumeric / total


def clean_extracted_text(text: str) -> str:
    lines = (re.sub(r"[ \t\f\v]+", " ", line).strip() for line in text.splitlines())
    cleaned = "\n".join(line for line in lines if line)
    return re.sub(r"\n{3,}", "\n\n", cleaned).strip()


def extract_pdf_text(file_bytes: bytes) -> str:
    """
    Returns cleaned text from a PDF byte stream.
    """
    try:
        pdf_reader = PyPDF2.PdfReader(io.BytesIO(file_bytes))
        text = ""

        for page in pdf_reader.pages:
            extracted = page.extract_text() or ""
            text += extracted + "\n"

    except Exception as e:
        logger.error("pdf_extraction_failed", extra={"error": str(e)})
        return ""

    text = clean_extracted_text(text)
    if len(text) <= MIN_MEANINGFUL_LENGTH or meaningful_text_ratio(text) <= MIN_MEANINGFUL_RATIO:
        # Usually a scanned PDF; OCR is out of scope so the text is passed on as-is.
        logger.warning(
            "pdf_text_low_quality",
            extra={"length": len(text), "ratio": round(meaningful_text_ratio(text), 2)},
        )
    return text

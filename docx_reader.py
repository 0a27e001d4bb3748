import io
import logging

from docx import Document

logger = logging.getLogger(__name__)


def extract_docx_text(file_bytes: bytes) -> str:
    """
    Extracts plain text from a DOCX file byte buffer, including table cells.
    """
    try:
        doc = Document(io.BytesIO(file_bytes))
    except Exception as e:
        logger.error("docx_extraction_failed", extra={"error": str(e)})
        return ""

    parts = [p.text for p in doc.paragraphs if p.text.strip()]
    for table in doc.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if cells:
                parts.append(" | ".join(cells))
    return "\n".join(parts).strip()

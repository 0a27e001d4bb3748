import base64
import io
import json

from docx import Document

from docx_reader import extract_docx_text
from google_auth_utils import decode_base64_service_account, load_service_account_credentials
from pdf_reader import clean_extracted_text, extract_pdf_text, meaningful_text_ratio


def _docx_bytes():
    document = Document()
    document.add_paragraph("Asha Rao")
    document.add_paragraph("   ")
    table = document.add_table(rows=1, cols=2)
    table.rows[0].cells[0].text = "Python"
    table.rows[0].cells[1].text = "5 years"
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def test_extract_docx_text_includes_tables():
    assert extract_docx_text(_docx_bytes()) == "Asha Rao\nPython | 5 years"


def test_unreadable_documents_yield_empty_text():
    assert extract_docx_text(b"not a zip") == ""
    assert extract_pdf_text(b"not a pdf") == ""


def test_clean_extracted_text():
    assert clean_extracted_text("  Data\t\tEngineer \n\n\n\n  Python  ") == "Data Engineer\nPython"


def test_meaningful_text_ratio():
    assert meaningful_text_ratio("") == 0.0
    assert meaningful_text_ratio("ab!!") == 0.5


def test_decode_base64_service_account():
    info = {"type": "service_account", "project_id": "hiring"}
    encoded = base64.b64encode(json.dumps(info).encode("utf-8")).decode("ascii")

    assert decode_base64_service_account(encoded) == info
    assert decode_base64_service_account("%%%") is None


def test_no_credentials_configured(monkeypatch):
    for name in (
        "GOOGLE_APPLICATION_CREDENTIALS",
        "HIRING_SA_JSON_CONTENT",
        "HIRING_SA_JSON_BASE64",
        "HIRING_SA_JSON",
    ):
        monkeypatch.delenv(name, raising=False)

    assert load_service_account_credentials(["scope"]) is None

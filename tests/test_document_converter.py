import io

import docx
import pytest
from pypdf import PdfWriter

from interview_assistant.core.errors import DocumentParseError, UnsupportedDocumentError
from interview_assistant.services.document_converter import (
    DOC_MIME,
    DOCX_MIME,
    PDF_MIME,
    convert_document,
)


def test_docx_paragraphs_are_joined_by_newlines():
    document = docx.Document()
    document.add_paragraph("Jane Doe")
    document.add_paragraph("jane@example.com")
    buffer = io.BytesIO()
    document.save(buffer)

    assert convert_document(buffer.getvalue(), DOCX_MIME) == "Jane Doe\njane@example.com"


def test_blank_pdf_gives_empty_text():
    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)
    buffer = io.BytesIO()
    writer.write(buffer)

    assert convert_document(buffer.getvalue(), PDF_MIME).strip() == ""


def test_corrupt_pdf_raises_parse_error():
    with pytest.raises(DocumentParseError):
        convert_document(b"this is not a pdf", PDF_MIME)


def test_corrupt_docx_raises_parse_error():
    with pytest.raises(DocumentParseError):
        convert_document(b"this is not a docx", DOCX_MIME)


def test_legacy_doc_falls_back_to_empty_text():
    assert convert_document(b"\xd0\xcf\x11\xe0 legacy", DOC_MIME) == ""


def test_unsupported_type():
    with pytest.raises(UnsupportedDocumentError):
        convert_document(b"plain", "text/plain")

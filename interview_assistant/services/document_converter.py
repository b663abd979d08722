import io
import logging

import docx
from pypdf import PdfReader
from pypdf.errors import PdfReadError

from interview_assistant.core.errors import DocumentParseError, UnsupportedDocumentError

logger = logging.getLogger(__name__)

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
DOC_MIME = "application/msword"

SUPPORTED_MIME_TYPES = (PDF_MIME, DOCX_MIME, DOC_MIME)


def convert_document(content: bytes, mime_type: str) -> str:
    """Return the plain text of a résumé upload.

    Legacy .doc files are best effort and come back as empty text when
    they cannot be read.
    """
    if mime_type == PDF_MIME:
        return _extract_pdf_text(content)
    if mime_type == DOCX_MIME:
        return _extract_docx_text(content)
    if mime_type == DOC_MIME:
        try:
            return _extract_docx_text(content)
        except DocumentParseError as exc:
            logger.warning("Could not parse .doc file, continuing with empty text: %s", exc)
            return ""
    raise UnsupportedDocumentError(f"Unsupported file format: {mime_type}")


def _extract_pdf_text(content: bytes) -> str:
    try:
        pdf = PdfReader(io.BytesIO(content))
        pages = [page.extract_text() or "" for page in pdf.pages]
    except (PdfReadError, ValueError, OSError) as exc:
        raise DocumentParseError(f"Failed to parse resume: {exc}") from exc
    text = "\n".join(pages)
    logger.info("Extracted %d characters from %d PDF pages", len(text), len(pages))
    return text


def _extract_docx_text(content: bytes) -> str:
    try:
        document = docx.Document(io.BytesIO(content))
    except Exception as exc:
        # python-docx surfaces zip, xml and package errors without a common base
        raise DocumentParseError(f"Failed to parse resume: {exc}") from exc
    text = "\n".join(paragraph.text for paragraph in document.paragraphs)
    logger.info("Extracted %d characters from Word document", len(text))
    return text

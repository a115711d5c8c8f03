"""PDF helpers using pypdf.

Filters picked files down to PDFs and reads page counts for the document
list. Text extraction happens on the answering service, not here.
"""

import io
import logging
from collections.abc import Iterable

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from src.models.schemas import FileBlob

logger = logging.getLogger(__name__)

# Constants
PDF_CONTENT_TYPE = "application/pdf"
PDF_EXTENSION = ".pdf"
PDF_MAGIC_BYTES = b"%PDF"


def is_pdf_file(file: FileBlob) -> bool:
    """Check whether a picked file is an accepted PDF.

    The MIME type is trusted when present; otherwise the extension decides,
    matching the file picker's ``.pdf`` filter.

    Args:
        file: The picked file.

    Returns:
        True if the file should be uploaded.
    """
    if file.content_type:
        if file.content_type.lower() == PDF_CONTENT_TYPE:
            return True
        if file.content_type.lower() != "application/octet-stream":
            return False
    return file.name.lower().endswith(PDF_EXTENSION)


def filter_pdf_files(files: Iterable[FileBlob]) -> list[FileBlob]:
    """Keep only PDFs, preserving order.

    Args:
        files: Files from the picker or drop zone.

    Returns:
        The accepted files.
    """
    accepted: list[FileBlob] = []
    for file in files:
        if is_pdf_file(file):
            accepted.append(file)
        else:
            logger.info(f"Skipping non-PDF file: {file.name} ({file.content_type})")
    return accepted


def count_pages(file_content: bytes) -> int | None:
    """Read the page count of a PDF.

    Args:
        file_content: Raw bytes of the PDF file.

    Returns:
        Number of pages, or None if the bytes cannot be read as a PDF.
    """
    if not file_content.lstrip()[:10].startswith(PDF_MAGIC_BYTES):
        return None

    try:
        reader = PdfReader(io.BytesIO(file_content))
        return len(reader.pages)
    except PdfReadError as e:
        logger.warning(f"Could not read page count: {e}")
        return None
    except Exception as e:
        logger.warning(f"Failed to read PDF: {e}")
        return None

"""PDF utilities for the document working set.

Responsibilities:
    - Filtering picked files down to accepted PDFs
    - Observing page counts with pypdf for the document list

Uploading and text extraction are handled by the upload service.
"""

from src.parsing.pdf_parser import count_pages, filter_pdf_files, is_pdf_file

__all__ = ["count_pages", "filter_pdf_files", "is_pdf_file"]

"""
Input normalization for content analysis.

This module turns whatever the user supplied into one of the two canonical
forms the generation client accepts:
- Pasted text and TXT/MD files become TextInput
- Word documents (.docx) are flattened to plain text with python-docx
- PDF files are passed through as base64-encoded BinaryInput
"""

import base64
import io
import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from docx import Document
from docx.oxml.ns import qn
from docx.table import Table
from docx.text.paragraph import Paragraph

from .errors import IngestionError
from .models import BinaryInput, NormalizedInput, TextInput

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"
DOCX_SUFFIX = ".docx"


@dataclass(frozen=True)
class UploadedFile:
    """A user-supplied file: its name, raw bytes and declared media type."""
    filename: str
    content: bytes
    content_type: Optional[str] = None

    @property
    def suffix(self) -> str:
        """Lower-cased file extension including the dot."""
        return Path(self.filename).suffix.lower()

    @property
    def is_pdf(self) -> bool:
        return self.content_type == PDF_MIME_TYPE or self.suffix == ".pdf"

    @property
    def is_docx(self) -> bool:
        return self.suffix == DOCX_SUFFIX

    @classmethod
    def from_path(cls, file_path: Union[str, Path]) -> "UploadedFile":
        """
        Read a local file into an UploadedFile.

        Args:
            file_path: Path to the file.

        Returns:
            UploadedFile with the media type guessed from the suffix.

        Raises:
            IngestionError: If the file does not exist or cannot be read.
        """
        path = Path(file_path)

        if not path.exists():
            raise IngestionError(path.name, "file not found")

        try:
            data = path.read_bytes()
        except OSError as e:
            raise IngestionError(path.name, str(e))

        content_type, _ = mimetypes.guess_type(path.name)
        return cls(filename=path.name, content=data, content_type=content_type)


def normalize(source: Union[str, UploadedFile]) -> NormalizedInput:
    """
    Normalize pasted text or an uploaded file.

    Args:
        source: Raw text (text mode) or an UploadedFile (file mode).

    Returns:
        TextInput or BinaryInput.

    Raises:
        IngestionError: If the file cannot be read or decoded.
    """
    if isinstance(source, UploadedFile):
        return normalize_file(source)
    return normalize_text(source)


def normalize_text(text: str) -> TextInput:
    """Wrap pasted text unchanged. Empty text is rejected later, not here."""
    return TextInput(content=text)


def normalize_file(upload: UploadedFile) -> NormalizedInput:
    """
    Normalize an uploaded file by its declared media type and suffix.

    Args:
        upload: The uploaded file.

    Returns:
        BinaryInput for PDFs, TextInput for everything else.

    Raises:
        IngestionError: If the file cannot be read or decoded.
    """
    if upload.is_pdf:
        logger.info(f"Passing PDF through as binary: {upload.filename} ({len(upload.content)} bytes)")
        encoded = base64.b64encode(upload.content).decode("ascii")
        return BinaryInput(data=encoded, mime_type=PDF_MIME_TYPE)

    if upload.is_docx:
        text = extract_docx_text(upload)
        logger.info(f"Extracted {len(text)} characters from Word document: {upload.filename}")
        return TextInput(content=text)

    return TextInput(content=_decode_text(upload))


def extract_docx_text(upload: UploadedFile) -> str:
    """
    Extract plain text from a Word document.

    Paragraphs and table cells are read in body order; styling and images
    are ignored. Non-empty paragraphs are separated by a blank line.

    Args:
        upload: The uploaded .docx file.

    Returns:
        Extracted plain text.

    Raises:
        IngestionError: If the document cannot be opened.
    """
    try:
        doc = Document(io.BytesIO(upload.content))
    except Exception as e:
        raise IngestionError(upload.filename, f"failed to open Word document: {e}")

    paragraphs: list[str] = []

    for child in doc.element.body.iterchildren():
        if child.tag == qn("w:p"):
            _append_paragraph(paragraphs, Paragraph(child, doc))
        elif child.tag == qn("w:tbl"):
            for cell_paragraph in _iter_table_paragraphs(Table(child, doc)):
                _append_paragraph(paragraphs, cell_paragraph)

    return "\n\n".join(paragraphs)


def _append_paragraph(paragraphs: list[str], paragraph: Paragraph) -> None:
    """Append a paragraph's run text if it has any."""
    text = paragraph.text.strip()
    if text:
        paragraphs.append(text)


def _iter_table_paragraphs(table: Table):
    """Yield cell paragraphs row by row, visiting merged cells once."""
    seen = set()
    for row in table.rows:
        for cell in row.cells:
            # Merged cells are returned once per grid position
            if cell._tc in seen:
                continue
            seen.add(cell._tc)
            yield from cell.paragraphs


def _decode_text(upload: UploadedFile) -> str:
    """
    Decode a text upload as UTF-8.

    A leading byte-order mark is dropped. Undecodable bytes are an error,
    never silently replaced.
    """
    try:
        return upload.content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise IngestionError(upload.filename, f"not valid UTF-8 text ({e.reason} at byte {e.start})")

"""Document loading for uploaded PDF and TXT files."""

import os
import re
import tempfile
from enum import Enum
from pathlib import Path

import pypdf

from .config import config
from .exceptions import DocumentLoadError, MissingInputError, UnsupportedFormatError
from .models import Document, UploadedFile

logger = config.get_logger(__name__)

TEMP_FILE_PREFIX = "ragdesk-upload-"
DEFAULT_UPLOAD_NAME = "upload"


class FileKind(Enum):
    """File formats the loader can parse."""

    PDF = "pdf"
    TEXT = "text"


MIME_TYPES = {
    "application/pdf": FileKind.PDF,
    "text/plain": FileKind.TEXT,
}
EXTENSIONS = {
    ".pdf": FileKind.PDF,
    ".txt": FileKind.TEXT,
}


def detect_kind(mime_type: str | None, filename: str | None) -> FileKind:
    """Determine the file kind from the declared MIME type or the extension.

    Either signal is enough. When both are recognised but disagree, PDF wins
    since a text read of a PDF would silently produce garbage.

    Returns:
        The detected FileKind.

    Raises:
        UnsupportedFormatError: If neither signal names a supported format.
    """
    by_mime = MIME_TYPES.get((mime_type or "").split(";")[0].strip().lower())
    by_extension = EXTENSIONS.get(Path(filename or "").suffix.lower())

    if FileKind.PDF in {by_mime, by_extension}:
        return FileKind.PDF
    if FileKind.TEXT in {by_mime, by_extension}:
        return FileKind.TEXT

    msg = "Only PDF and TXT are allowed (mimetype or extension .pdf / .txt)"
    raise UnsupportedFormatError(msg, mime_type=mime_type, filename=filename)


def _safe_name(filename: str | None) -> str:
    return re.sub(r"[^a-zA-Z0-9._-]", "_", filename or DEFAULT_UPLOAD_NAME)


class DocumentLoader:
    """Handles loading of PDF and TXT documents."""

    @staticmethod
    def load_pdf(file_path: Path, source: str) -> list[Document]:
        """Extract one Document per PDF page.

        Returns:
            Documents in page order, with ``page`` (1-based) and ``total_pages``
            metadata.
        """
        with file_path.open("rb") as file:
            reader = pypdf.PdfReader(file)
            total_pages = len(reader.pages)
            return [
                Document(
                    content=page.extract_text() or "",
                    metadata={
                        "source": source,
                        "page": page_number,
                        "total_pages": total_pages,
                    },
                )
                for page_number, page in enumerate(reader.pages, start=1)
            ]

    @staticmethod
    def load_txt(file_path: Path, source: str) -> list[Document]:
        """Read a text file as a single Document.

        Bytes that are not valid UTF-8 are replaced rather than rejected.

        Returns:
            A one-element list.
        """
        with file_path.open(encoding="utf-8", errors="replace") as file:
            text = file.read()
        return [Document(content=text, metadata={"source": source})]

    @classmethod
    def parse(cls, file_path: Path, kind: FileKind, source: str) -> list[Document]:
        """Run the parser for ``kind`` and wrap its failures.

        Returns:
            The extracted documents.

        Raises:
            DocumentLoadError: If the parser fails.
        """
        try:
            if kind is FileKind.PDF:
                return cls.load_pdf(file_path, source)
            return cls.load_txt(file_path, source)
        except Exception as e:
            logger.warning("Document load failed for %s: %s", source, e)
            msg = f"Failed to load document: {e}"
            raise DocumentLoadError(msg, {"source": source}) from e

    @classmethod
    def load(cls, upload: UploadedFile) -> list[Document]:
        """Load documents from an uploaded file.

        The bytes are written to a uniquely named temporary file because the
        PDF parser reads from a path; the file is removed on every exit path.

        Args:
            upload: File content with its declared MIME type and filename.

        Returns:
            Documents extracted from the file.

        Raises:
            MissingInputError: If no content was supplied.
            UnsupportedFormatError: If the file is not PDF or TXT.
            DocumentLoadError: If the parser fails.
        """
        if upload is None or upload.content is None:
            msg = "File buffer is required"
            raise MissingInputError(msg)

        kind = detect_kind(upload.mime_type, upload.filename)
        source = upload.filename or DEFAULT_UPLOAD_NAME

        fd, tmp_name = tempfile.mkstemp(
            prefix=TEMP_FILE_PREFIX, suffix=f"-{_safe_name(upload.filename)}"
        )
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as tmp_file:
                tmp_file.write(upload.content)
            documents = cls.parse(tmp_path, kind, source)
        finally:
            tmp_path.unlink(missing_ok=True)

        logger.info("Loaded %d document(s) from %s", len(documents), source)
        return documents

    @classmethod
    def load_path(cls, file_path: Path) -> list[Document]:
        """Load a local file, detecting its kind from the extension.

        Returns:
            Documents extracted from the file.

        Raises:
            MissingInputError: If the file does not exist.
        """
        if not file_path.is_file():
            msg = f"File not found: {file_path}"
            raise MissingInputError(msg, {"path": str(file_path)})

        kind = detect_kind(None, file_path.name)
        documents = cls.parse(file_path, kind, file_path.name)
        logger.info("Loaded %d document(s) from %s", len(documents), file_path)
        return documents

"""Data models for the RAG application."""

from dataclasses import dataclass, field
from typing import Any, Literal

AnswerMode = Literal["augmented", "unaugmented"]


@dataclass(frozen=True)
class Document:
    """Raw text extracted from an uploaded file (one per PDF page)."""

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class DocumentChunk:
    """Represents a chunk of text from a document.

    ``score`` is the similarity reported by the vector store and is only set
    on chunks returned by retrieval.
    """

    content: str
    metadata: dict[str, Any]
    score: float | None = None


@dataclass
class UploadedFile:
    """A file received from a caller, before format detection."""

    content: bytes | None
    mime_type: str | None = None
    filename: str | None = None


@dataclass(frozen=True)
class StoreStatus:
    """Point-in-time count of chunks held by the vector store."""

    document_count: int


@dataclass
class Answer:
    """Language model answer and the chunks it was grounded on."""

    text: str
    context: list[DocumentChunk] = field(default_factory=list)
    mode: AnswerMode = "unaugmented"


@dataclass
class IngestionResult:
    """Outcome of ingesting one file."""

    uploaded: int
    chunks: int
    ids: list[str]

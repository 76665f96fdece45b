"""RAGDesk - question answering over uploaded documents."""

from .answering import AnswerOrchestrator
from .chunker import TextChunker
from .document_loader import DocumentLoader
from .embeddings import EmbeddingService
from .exceptions import (
    ConfigurationError,
    DocumentLoadError,
    InputValidationError,
    LanguageModelError,
    MissingInputError,
    RAGDeskError,
    StoreUnavailableError,
    UnsupportedFormatError,
)
from .llm import ChatModel
from .models import (
    Answer,
    Document,
    DocumentChunk,
    IngestionResult,
    StoreStatus,
    UploadedFile,
)
from .pipeline import IngestionPipeline
from .services import Services, build_services
from .store_errors import is_store_unavailable
from .vector_store import VectorStoreGateway

__all__ = [
    "Answer",
    "AnswerOrchestrator",
    "ChatModel",
    "ConfigurationError",
    "Document",
    "DocumentChunk",
    "DocumentLoadError",
    "DocumentLoader",
    "EmbeddingService",
    "IngestionPipeline",
    "IngestionResult",
    "InputValidationError",
    "LanguageModelError",
    "MissingInputError",
    "RAGDeskError",
    "Services",
    "StoreStatus",
    "StoreUnavailableError",
    "TextChunker",
    "UnsupportedFormatError",
    "UploadedFile",
    "VectorStoreGateway",
    "build_services",
    "is_store_unavailable",
]

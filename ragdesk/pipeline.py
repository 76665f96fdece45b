"""Ingestion pipeline: Load -> Split -> Embed -> Store."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .config import config
from .document_loader import DocumentLoader
from .models import Document, IngestionResult, UploadedFile

if TYPE_CHECKING:
    from pathlib import Path

    from .chunker import TextChunker
    from .vector_store import VectorStoreGateway

logger = config.get_logger(__name__)


class IngestionPipeline:
    """Turns files into stored, searchable chunks."""

    def __init__(
        self,
        chunker: TextChunker,
        vector_store: VectorStoreGateway,
        loader: type[DocumentLoader] = DocumentLoader,
    ) -> None:
        """Initialize the pipeline with its collaborators."""
        self.chunker = chunker
        self.vector_store = vector_store
        self.loader = loader

    def ingest(self, upload: UploadedFile) -> IngestionResult:
        """Process an uploaded file through the complete pipeline.

        Returns:
            Counts of parsed documents and stored chunks, with the chunk ids.
        """
        logger.info("Starting ingestion for upload: %s", upload.filename)
        return self._store(self.loader.load(upload))

    def ingest_path(self, file_path: Path) -> IngestionResult:
        """Process a local file through the complete pipeline.

        Returns:
            Counts of parsed documents and stored chunks, with the chunk ids.
        """
        logger.info("Starting ingestion for file: %s", file_path)
        return self._store(self.loader.load_path(file_path))

    def _store(self, documents: list[Document]) -> IngestionResult:
        chunks = self.chunker.split(documents)
        ids = self.vector_store.add(chunks)

        logger.info(
            "Ingestion completed: %d document(s), %d chunk(s)",
            len(documents),
            len(chunks),
        )
        return IngestionResult(uploaded=len(documents), chunks=len(chunks), ids=ids)

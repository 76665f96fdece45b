"""Overlapping text chunking that prefers natural boundaries."""

from collections.abc import Sequence
from typing import Any

from .config import config
from .models import Document, DocumentChunk

logger = config.get_logger(__name__)

# Coarsest first; below the last one the text is cut at the character limit.
DEFAULT_SEPARATORS: tuple[str, ...] = ("\n\n", "\n", " ")


class TextChunker:
    """Splits documents into windows of at most ``chunk_size`` characters.

    Each window ends after the coarsest separator (paragraph, line, word) that
    keeps the chunk at least half full, or exactly at the size limit when no
    such separator exists. The next window starts ``overlap`` characters before
    the previous cut, so adjacent chunks always share exactly ``overlap``
    characters.
    """

    def __init__(
        self,
        chunk_size: int | None = None,
        overlap: int | None = None,
        separators: Sequence[str] = DEFAULT_SEPARATORS,
    ) -> None:
        """Initialize the TextChunker with chunk size and overlap.

        Args:
            chunk_size: Maximum chunk length in characters. If None, uses
                config.CHUNK_SIZE.
            overlap: Characters shared by consecutive chunks. If None, uses
                config.CHUNK_OVERLAP.
            separators: Break points to try, coarsest first.

        Raises:
            ValueError: If chunk_size is not positive or overlap is not in
                ``[0, chunk_size)``.
        """
        self.chunk_size = config.CHUNK_SIZE if chunk_size is None else chunk_size
        self.overlap = config.CHUNK_OVERLAP if overlap is None else overlap

        if self.chunk_size <= 0:
            msg = f"Chunk size must be positive, got {self.chunk_size}"
            raise ValueError(msg)
        if not 0 <= self.overlap < self.chunk_size:
            msg = (
                f"Overlap ({self.overlap}) must be non-negative and less than "
                f"chunk size ({self.chunk_size})"
            )
            raise ValueError(msg)

        self.separators = tuple(separators)
        # A non-final chunk must outgrow the overlap or the window never advances.
        self.min_chunk_length = max(self.overlap + 1, self.chunk_size // 2)

    def split(self, documents: Sequence[Document]) -> list[DocumentChunk]:
        """Split documents into chunks, keeping document order.

        Returns:
            Chunks of every document; empty when no documents are given.
        """
        if not documents:
            logger.warning("split called with no documents")
            return []

        chunks: list[DocumentChunk] = []
        for document in documents:
            chunks.extend(self.chunk_text(document.content, document.metadata))

        logger.info(
            "Split %d document(s) into %d chunk(s)", len(documents), len(chunks)
        )
        return chunks

    def chunk_text(
        self, text: str, metadata: dict[str, Any] | None = None
    ) -> list[DocumentChunk]:
        """Split one text into overlapping chunks.

        Args:
            text: Text to split.
            metadata: Metadata copied onto every chunk before the chunk's own
                position fields are added.

        Returns:
            A list of DocumentChunk objects; empty for blank text.
        """
        if not text.strip():
            return []

        metadata = metadata or {}
        chunks: list[DocumentChunk] = []
        start = 0

        while True:
            end = self._find_cut(text, start)
            chunks.append(
                DocumentChunk(
                    content=text[start:end],
                    metadata={
                        **metadata,
                        "chunk_id": len(chunks),
                        "start_char": start,
                        "end_char": end,
                        "length": end - start,
                    },
                )
            )
            if end >= len(text):
                break
            start = end - self.overlap

        return chunks

    def _find_cut(self, text: str, start: int) -> int:
        limit = start + self.chunk_size
        if limit >= len(text):
            return len(text)
        return self._cut_at_separator(text, start, limit, self.separators)

    def _cut_at_separator(
        self,
        text: str,
        start: int,
        limit: int,
        separators: tuple[str, ...],
    ) -> int:
        """Return the end offset for a chunk starting at ``start``.

        Tries ``separators[0]`` and recurses into the finer separators when it
        does not occur late enough in the window.
        """
        if not separators:
            return limit

        separator, finer = separators[0], separators[1:]
        earliest = max(start, start + self.min_chunk_length - len(separator))
        position = text.rfind(separator, earliest, limit)
        if position == -1:
            return self._cut_at_separator(text, start, limit, finer)
        return position + len(separator)

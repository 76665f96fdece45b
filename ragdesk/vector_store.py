"""Qdrant-backed vector store gateway."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Any

from qdrant_client import QdrantClient, models
from qdrant_client.http.exceptions import UnexpectedResponse

from .config import config
from .exceptions import ConfigurationError
from .models import DocumentChunk, StoreStatus
from .store_errors import raise_for_store_error

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .embeddings import EmbeddingService

logger = config.get_logger(__name__)

CONTENT_KEY = "content"
METADATA_KEY = "metadata"


class VectorStoreGateway:
    """Owns the Qdrant connection and exposes add, retrieve and status.

    Connectivity failures from ``add`` and ``retrieve`` are re-raised as
    ``StoreUnavailableError``; ``status`` never raises.
    """

    def __init__(
        self,
        embedding_service: EmbeddingService,
        url: str | None = None,
        collection_name: str | None = None,
        *,
        api_key: str | None = None,
        timeout: float | None = None,
        client: QdrantClient | None = None,
    ) -> None:
        """Connect to the collection.

        Args:
            embedding_service: Provider used for chunk and query vectors. It must
                exist before the store, so it is required here.
            url: Qdrant endpoint. If None, uses config.QDRANT_URL.
            collection_name: Collection holding the chunks. If None, uses
                config.QDRANT_COLLECTION_NAME.
            api_key: Qdrant API key. If None, uses config.QDRANT_API_KEY.
            timeout: Seconds allowed per request. If None, uses
                config.BACKEND_TIMEOUT.
            client: Pre-built client, used instead of connecting to ``url``.

        Raises:
            ConfigurationError: If the URL or collection name is missing.
        """
        self.embedding_service = embedding_service
        self.url = url or config.QDRANT_URL
        self.collection_name = collection_name or config.QDRANT_COLLECTION_NAME

        if not self.collection_name or (client is None and not self.url):
            msg = "QDRANT_URL and QDRANT_COLLECTION_NAME must be set in environment"
            raise ConfigurationError(msg)

        if client is None:
            timeout = config.BACKEND_TIMEOUT if timeout is None else timeout
            client = QdrantClient(
                url=self.url,
                api_key=api_key or config.QDRANT_API_KEY,
                timeout=max(1, round(timeout)),
            )
            logger.info(
                "Connected Qdrant client to %s (collection=%s)",
                self.url,
                self.collection_name,
            )
        self.client = client

    def add(self, chunks: Sequence[DocumentChunk]) -> list[str]:
        """Embed and persist chunks.

        Args:
            chunks: Chunks to store.

        Returns:
            Generated point ids, in chunk order.
        """
        if not chunks:
            return []

        try:
            embeddings = self.embedding_service.embed_documents(
                [chunk.content for chunk in chunks]
            )
            self._ensure_collection(len(embeddings[0]))

            ids = [str(uuid.uuid4()) for _ in chunks]
            points = [
                models.PointStruct(
                    id=point_id,
                    vector=embedding.tolist(),
                    payload={
                        CONTENT_KEY: chunk.content,
                        METADATA_KEY: dict(chunk.metadata),
                    },
                )
                for point_id, chunk, embedding in zip(
                    ids, chunks, embeddings, strict=True
                )
            ]
            self.client.upsert(
                collection_name=self.collection_name, points=points, wait=True
            )
        except Exception as e:
            raise_for_store_error(e, "add")

        logger.info(
            "Added %d chunks to collection %s", len(ids), self.collection_name
        )
        return ids

    def retrieve(self, query: str, k: int | None = None) -> list[DocumentChunk]:
        """Find the chunks most similar to ``query``.

        Args:
            query: Search text.
            k: Number of chunks to return. If None, uses config.RETRIEVER_K.

        Returns:
            Up to ``k`` chunks, most similar first, each with its ``score``.
        """
        limit = config.RETRIEVER_K if k is None else k

        try:
            query_vector = self.embedding_service.embed_query(query)
            response = self.client.query_points(
                collection_name=self.collection_name,
                query=query_vector.tolist(),
                limit=limit,
                with_payload=True,
            )
        except Exception as e:
            raise_for_store_error(e, "retrieve")

        results = [self._to_chunk(point) for point in response.points]
        for chunk in results:
            logger.debug(
                "Retrieved chunk %s from %s (score %.4f)",
                chunk.metadata.get("chunk_id"),
                chunk.metadata.get("source"),
                chunk.score,
            )
        return results

    def status(self) -> StoreStatus:
        """Count the stored chunks.

        Returns:
            The live count; 0 when the collection is missing or the read fails.
        """
        try:
            if not self.client.collection_exists(self.collection_name):
                return StoreStatus(document_count=0)
            result = self.client.count(
                collection_name=self.collection_name, exact=True
            )
        except Exception as e:  # noqa: BLE001
            logger.error("Vector store status failed: %s", e)  # noqa: TRY400
            return StoreStatus(document_count=0)
        return StoreStatus(document_count=result.count)

    def _ensure_collection(self, vector_size: int) -> None:
        """Create the collection on first use.

        A concurrent upload may create it between the check and the create, so
        a failed create is accepted when the collection exists afterwards.
        """
        if self.client.collection_exists(self.collection_name):
            return

        logger.info(
            "Creating collection %s (size=%d, cosine)",
            self.collection_name,
            vector_size,
        )
        try:
            self.client.create_collection(
                collection_name=self.collection_name,
                vectors_config=models.VectorParams(
                    size=vector_size, distance=models.Distance.COSINE
                ),
            )
        except (UnexpectedResponse, ValueError):
            if not self.client.collection_exists(self.collection_name):
                raise

    @staticmethod
    def _to_chunk(point: Any) -> DocumentChunk:
        payload = point.payload or {}
        return DocumentChunk(
            content=payload.get(CONTENT_KEY, ""),
            metadata=dict(payload.get(METADATA_KEY) or {}),
            score=float(point.score),
        )

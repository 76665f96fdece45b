"""Construction of the long-lived service objects."""

from __future__ import annotations

from dataclasses import dataclass

from .answering import AnswerOrchestrator
from .chunker import TextChunker
from .config import config
from .embeddings import EmbeddingService
from .llm import ChatModel
from .pipeline import IngestionPipeline
from .vector_store import VectorStoreGateway

logger = config.get_logger(__name__)


@dataclass
class Services:
    """Everything a request handler needs, built once per process."""

    vector_store: VectorStoreGateway
    ingestion: IngestionPipeline
    answers: AnswerOrchestrator


def build_services(openai_api_key: str | None = None) -> Services:
    """Validate configuration and wire the services together.

    Embeddings are created before the vector store, which needs them; the
    store is shared by ingestion and answering.

    Returns:
        The service container.

    Raises:
        ConfigurationError: If required settings are missing.
    """
    if openai_api_key is None:
        config.validate()
    else:
        config.validate_vector_store()

    embedding_service = EmbeddingService(api_key=openai_api_key)
    vector_store = VectorStoreGateway(
        embedding_service,
        url=config.QDRANT_URL,
        collection_name=config.QDRANT_COLLECTION_NAME,
    )
    chat_model = ChatModel(api_key=openai_api_key)

    services = Services(
        vector_store=vector_store,
        ingestion=IngestionPipeline(
            TextChunker(config.CHUNK_SIZE, config.CHUNK_OVERLAP), vector_store
        ),
        answers=AnswerOrchestrator(vector_store, chat_model, config.RETRIEVER_K),
    )
    logger.info(
        "Services ready (collection=%s, chunk_size=%d, overlap=%d, k=%d)",
        config.QDRANT_COLLECTION_NAME,
        config.CHUNK_SIZE,
        config.CHUNK_OVERLAP,
        config.RETRIEVER_K,
    )
    return services

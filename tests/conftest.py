"""Test configuration and fixtures for RAGDesk tests.

This module provides reusable test fixtures organized by functionality:
- Constants and test data
- Mock services and API responses
- EmbeddingService and ChatModel fixtures
- Text processing fixtures
- Vector store fixtures
- Service container fixtures
"""

import hashlib
from unittest.mock import Mock, create_autospec, patch

import numpy as np
import pytest
from qdrant_client import QdrantClient

from ragdesk import (
    AnswerOrchestrator,
    ChatModel,
    DocumentChunk,
    EmbeddingService,
    IngestionPipeline,
    Services,
    TextChunker,
    VectorStoreGateway,
)


class TestConstants:
    """Centralized test constants to avoid repetition across test files."""

    # API Configuration
    TEST_API_KEY = "test-key"
    TEST_OPENAI_MODEL = "text-embedding-3-small"
    TEST_CHAT_MODEL = "gpt-test"
    DEFAULT_EMBEDDING_DIMENSION = 64

    # Vector Store Configuration
    TEST_COLLECTION = "test_chunks"

    # Text Chunking Configuration
    SMALL_CHUNK_SIZE = 100
    SMALL_CHUNK_OVERLAP = 20
    DEFAULT_CHUNK_SIZE = 1000
    DEFAULT_CHUNK_OVERLAP = 200
    LARGE_CHUNK_SIZE = 10000
    LARGE_CHUNK_OVERLAP = 1000


class MockEmbeddingService:
    """Mock embedding service for testing without API calls.

    Generates deterministic embeddings based on text content hash,
    ensuring consistent test results across runs.
    """

    def __init__(
        self, dimension: int = TestConstants.DEFAULT_EMBEDDING_DIMENSION
    ) -> None:
        self.dimension = dimension

    def embed_query(self, text: str) -> np.ndarray:
        """Generate deterministic mock embedding based on text hash."""
        seed = int.from_bytes(
            hashlib.sha256(text.lower().encode("utf-8")).digest()[:8],
            byteorder="big",
            signed=False,
        )
        rng = np.random.default_rng(seed)
        embedding = rng.normal(0, 1, self.dimension)
        return (embedding / np.linalg.norm(embedding)).astype(np.float32)

    def embed_documents(self, texts: list[str]) -> list[np.ndarray]:
        """Generate batch of mock embeddings."""
        return [self.embed_query(text) for text in texts]


def create_mock_openai_response(embeddings: list[list[float]]) -> Mock:
    """Create a mock OpenAI embeddings API response.

    Args:
        embeddings: List of embedding vectors to return.

    Returns:
        Mock object representing OpenAI embeddings API response.
    """
    mock_response = Mock()
    mock_response.data = [Mock(embedding=emb) for emb in embeddings]
    return mock_response


def create_mock_chat_response(content: str | None) -> Mock:
    """Create a mock OpenAI chat completion response.

    Args:
        content: The content for the chat completion response.

    Returns:
        Mock object representing OpenAI chat completion response.
    """
    mock_response = Mock()
    mock_response.choices = [Mock(message=Mock(content=content))]
    return mock_response


@pytest.fixture
def openai_embeddings_api_mock():
    """Patch the OpenAI embeddings.create method without pre-configuration."""
    with patch("openai.resources.embeddings.Embeddings.create") as mock_create:
        yield mock_create


@pytest.fixture
def openai_embeddings_factory(openai_embeddings_api_mock):
    """Factory for creating OpenAI embeddings API mocks with different scenarios."""

    def _create_mock(  # noqa: ANN202
        scenario="single_success",
        embeddings=None,
        error_message="API Error",
    ):
        """Create a mock based on scenario type.

        Args:
            scenario: Type of mock ('single_success', 'batch_success', 'error',
                'multiple_batches', 'partial_failure', 'short_response')
            embeddings: Custom embeddings to return, or None for defaults
            error_message: Custom error message for error scenarios
        """
        openai_embeddings_api_mock.reset_mock()
        openai_embeddings_api_mock.side_effect = None
        openai_embeddings_api_mock.return_value = None

        if scenario == "single_success":
            mock_embedding = embeddings or [0.1, 0.2, 0.3, 0.4, 0.5]
            openai_embeddings_api_mock.return_value = create_mock_openai_response(
                [mock_embedding]
            )
        elif scenario == "batch_success":
            mock_embeddings = embeddings or [
                [0.1, 0.2, 0.3],
                [0.4, 0.5, 0.6],
                [0.7, 0.8, 0.9],
            ]
            openai_embeddings_api_mock.return_value = create_mock_openai_response(
                mock_embeddings
            )
        elif scenario == "error":
            openai_embeddings_api_mock.side_effect = Exception(error_message)
        elif scenario == "multiple_batches":
            openai_embeddings_api_mock.side_effect = [
                create_mock_openai_response([[0.1, 0.2], [0.3, 0.4]]),
                create_mock_openai_response([[0.5, 0.6], [0.7, 0.8]]),
            ]
        elif scenario == "partial_failure":
            openai_embeddings_api_mock.side_effect = [
                create_mock_openai_response([[0.1, 0.2]]),
                Exception("Second batch failed"),
            ]
        elif scenario == "short_response":
            openai_embeddings_api_mock.return_value = create_mock_openai_response(
                [[0.1, 0.2]]
            )

        return openai_embeddings_api_mock

    return _create_mock


@pytest.fixture
def embedding_service_factory():
    """Factory for creating EmbeddingService instances."""

    def _create_service(api_key=None, model=None):  # noqa: ANN202
        api_key = api_key or TestConstants.TEST_API_KEY
        if model is not None:
            return EmbeddingService(api_key=api_key, model=model)
        return EmbeddingService(api_key=api_key)

    return _create_service


@pytest.fixture
def embedding_service(embedding_service_factory):
    """Default EmbeddingService with test API key for most tests."""
    return embedding_service_factory(model=TestConstants.TEST_OPENAI_MODEL)


@pytest.fixture
def openai_chat_api_mock():
    """Patch the OpenAI chat.completions.create method."""
    with patch("openai.resources.chat.completions.Completions.create") as mock_create:
        mock_create.return_value = create_mock_chat_response("Test response")
        yield mock_create


@pytest.fixture
def chat_model():
    """ChatModel with a test key and a fixed model name."""
    return ChatModel(
        api_key=TestConstants.TEST_API_KEY, model=TestConstants.TEST_CHAT_MODEL
    )


@pytest.fixture
def chat_model_mock():
    """Autospec ChatModel whose completions return a fixed answer."""
    mock_model = create_autospec(ChatModel, instance=True)
    mock_model.complete.return_value = "Test response"
    return mock_model


@pytest.fixture
def text_chunker_factory():
    """Factory fixture that creates ``TextChunker`` instances on demand."""
    presets: dict[str, tuple[int, int]] = {
        "small": (
            TestConstants.SMALL_CHUNK_SIZE,
            TestConstants.SMALL_CHUNK_OVERLAP,
        ),
        "default": (
            TestConstants.DEFAULT_CHUNK_SIZE,
            TestConstants.DEFAULT_CHUNK_OVERLAP,
        ),
        "large": (
            TestConstants.LARGE_CHUNK_SIZE,
            TestConstants.LARGE_CHUNK_OVERLAP,
        ),
    }

    def _create_chunker(name: str = "default") -> TextChunker:
        try:
            chunk_size, overlap = presets[name]
        except KeyError as exc:
            msg = f"Unknown text chunker preset: {name}"
            raise ValueError(msg) from exc
        return TextChunker(chunk_size=chunk_size, overlap=overlap)

    return _create_chunker


@pytest.fixture
def text_chunker_small(text_chunker_factory):
    """Text chunker configured for small chunks (100/20)."""
    return text_chunker_factory("small")


@pytest.fixture
def text_chunker_default(text_chunker_factory):
    """Text chunker configured with default settings (1000/200)."""
    return text_chunker_factory("default")


@pytest.fixture
def text_chunker_large(text_chunker_factory):
    """Text chunker configured for large chunks (10000/1000)."""
    return text_chunker_factory("large")


@pytest.fixture(scope="session")
def mock_embedding_service():
    """Pre-configured MockEmbeddingService for consistent test embeddings."""
    return MockEmbeddingService()


@pytest.fixture
def qdrant_client():
    """In-process Qdrant client, empty for every test."""
    client = QdrantClient(location=":memory:")
    yield client
    client.close()


@pytest.fixture
def vector_store(mock_embedding_service, qdrant_client) -> VectorStoreGateway:
    """Gateway over the in-process client with deterministic embeddings."""
    return VectorStoreGateway(
        mock_embedding_service,
        collection_name=TestConstants.TEST_COLLECTION,
        client=qdrant_client,
    )


@pytest.fixture
def unreachable_store_client():
    """Mock Qdrant client whose every call fails to connect."""
    client = Mock(spec=QdrantClient)
    error = ConnectionRefusedError("[Errno 111] Connection refused")
    client.collection_exists.side_effect = error
    client.count.side_effect = error
    client.query_points.side_effect = error
    client.upsert.side_effect = error
    return client


@pytest.fixture
def sample_text_chunks():
    """Document chunks with text and metadata only."""
    texts = [
        "Machine learning is a subset of artificial intelligence.",
        "Neural networks are computational models inspired by the brain.",
        "Deep learning uses multiple layers to learn complex patterns.",
        "Supervised learning uses labeled training data.",
        "Unsupervised learning finds patterns in unlabeled data.",
    ]
    return [
        DocumentChunk(
            content=text,
            metadata={
                "source": f"test_doc_{i // 3}.txt",
                "chunk_id": i,
                "start_char": i * 100,
                "end_char": (i + 1) * 100,
                "length": len(text),
            },
        )
        for i, text in enumerate(texts)
    ]


@pytest.fixture
def services_factory(mock_embedding_service, qdrant_client, chat_model_mock):
    """Factory for service containers over the in-process store.

    Pass ``vector_store`` or ``chat_model`` to replace the defaults.
    """

    def _create_services(  # noqa: ANN202
        vector_store=None,
        chat_model=None,
        chunk_size=TestConstants.DEFAULT_CHUNK_SIZE,
        overlap=TestConstants.DEFAULT_CHUNK_OVERLAP,
    ):
        vector_store = vector_store or VectorStoreGateway(
            mock_embedding_service,
            collection_name=TestConstants.TEST_COLLECTION,
            client=qdrant_client,
        )
        chat_model = chat_model or chat_model_mock
        return Services(
            vector_store=vector_store,
            ingestion=IngestionPipeline(
                TextChunker(chunk_size=chunk_size, overlap=overlap), vector_store
            ),
            answers=AnswerOrchestrator(vector_store, chat_model, top_k=4),
        )

    return _create_services


@pytest.fixture
def chat_response_factory():
    """Factory for mock chat completion responses."""
    return create_mock_chat_response

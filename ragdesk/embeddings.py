"""OpenAI embedding provider used for both chunks and queries."""

import numpy as np
from openai import OpenAI

from .config import config

logger = config.get_logger(__name__)


class EmbeddingService:
    """Turns text into fixed-dimension vectors through the OpenAI API."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
    ) -> None:
        """Create the OpenAI client.

        Args:
            api_key: OpenAI API key. If None,
                reads from OPENAI_API_KEY environment variable.
            model: Embedding model name. If None, uses config.EMBEDDING_MODEL.
            timeout: Seconds allowed per request. If None, uses
                config.BACKEND_TIMEOUT.
        """
        default_headers = config.get_api_headers()
        self.client = OpenAI(
            api_key=api_key or config.get_openai_api_key(),
            base_url=config.OPENAI_BASE_URL,
            default_headers=default_headers or None,
            timeout=config.BACKEND_TIMEOUT if timeout is None else timeout,
        )
        self.model = model or config.EMBEDDING_MODEL

    def embed_query(self, text: str) -> np.ndarray:
        """Embed a single search query.

        Args:
            text: Query text.

        Returns:
            np.ndarray: The query vector.
        """
        return self.embed_documents([text])[0]

    def embed_documents(
        self,
        texts: list[str],
        batch_size: int = 100,
    ) -> list[np.ndarray]:
        """Embed texts in batches, preserving input order.

        Args:
            texts: Texts to embed.
            batch_size: Number of texts sent per API request.

        Returns:
            list[np.ndarray]: One vector per input text.

        Raises:
            ValueError: If the API returns a different number of vectors than
                texts sent.
        """
        embeddings: list[np.ndarray] = []

        for start in range(0, len(texts), batch_size):
            batch = texts[start : start + batch_size]
            batch_number = start // batch_size + 1
            try:
                response = self.client.embeddings.create(
                    model=self.model,
                    input=batch,
                )
            except Exception:
                logger.exception("Embedding request failed for batch %d", batch_number)
                raise

            if len(response.data) != len(batch):
                msg = (
                    f"Embedding API returned {len(response.data)} vectors "
                    f"for {len(batch)} texts"
                )
                raise ValueError(msg)

            embeddings.extend(
                np.asarray(item.embedding, dtype=np.float32) for item in response.data
            )
            logger.info("Generated embeddings for batch %d", batch_number)

        return embeddings

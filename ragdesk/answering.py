"""Question answering with retrieval and a plain-model fallback."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .config import config
from .models import Answer, DocumentChunk
from .store_errors import is_store_unavailable

if TYPE_CHECKING:
    from .llm import ChatModel
    from .vector_store import VectorStoreGateway

logger = config.get_logger(__name__)

RAG_SYSTEM_PROMPT = (
    "You are an assistant that answers questions about the uploaded documents.\n"
    "Answer strictly from the given context. If the context does not contain "
    "the answer, say so."
)

GENERAL_ASSISTANT_SYSTEM_PROMPT = (
    "You are a helpful assistant. Answer the user's questions from your own "
    "knowledge. Be concise and informative."
)

RAG_USER_TEMPLATE = "Context from documents:\n\n{context}\n\nQuestion: {question}"


class AnswerOrchestrator:
    """Chooses between retrieval-augmented and plain answering.

    An empty store and an unreachable store lead to the same plain answer, so
    callers get a response whenever the language model itself works.
    """

    def __init__(
        self,
        vector_store: VectorStoreGateway,
        chat_model: ChatModel,
        top_k: int | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            vector_store: Gateway used for status and retrieval.
            chat_model: Language model wrapper.
            top_k: Chunks retrieved per question. If None, uses
                config.RETRIEVER_K.
        """
        self.vector_store = vector_store
        self.chat_model = chat_model
        self.top_k = config.RETRIEVER_K if top_k is None else top_k

    @staticmethod
    def build_context_prompt(question: str, chunks: list[DocumentChunk]) -> str:
        """Join retrieved chunk texts and the question into the user message.

        Returns:
            The user content for the augmented call.
        """
        context = "\n\n".join(chunk.content for chunk in chunks)
        return RAG_USER_TEMPLATE.format(context=context, question=question)

    def ask(self, question: str) -> Answer:
        """Answer a question, using stored documents when there are any.

        Args:
            question: The user's question.

        Returns:
            The answer; ``context`` is empty unless retrieval was used.

        Raises:
            Exception: Any failure other than an unreachable vector store,
                unchanged.
        """
        status = self.vector_store.status()
        if status.document_count == 0:
            logger.info("No documents in store, using general assistant mode")
            return self.ask_general_assistant(question)

        try:
            chunks = self.vector_store.retrieve(question, self.top_k)
            text = self.chat_model.complete(
                RAG_SYSTEM_PROMPT, self.build_context_prompt(question, chunks)
            )
        except Exception as e:
            if is_store_unavailable(e):
                logger.warning(
                    "Vector store unavailable, falling back to general assistant"
                )
                return self.ask_general_assistant(question)
            logger.exception("RAG ask failed")
            raise

        logger.info("Answered from %d retrieved chunk(s)", len(chunks))
        return Answer(text=text, context=chunks, mode="augmented")

    def ask_general_assistant(self, question: str) -> Answer:
        """Answer without retrieval.

        Returns:
            An unaugmented answer with empty context.
        """
        text = self.chat_model.complete(GENERAL_ASSISTANT_SYSTEM_PROMPT, question)
        return Answer(text=text, context=[], mode="unaugmented")

"""HTTP API for uploading documents and asking questions.

Routes:
- POST /agent/rag/upload - Parse, chunk and store a PDF or TXT file
- POST /agent/rag/ask - Answer a question, with document context when available
- GET /agent/rag/status - Number of stored chunks
- GET /health - Liveness probe
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Depends, FastAPI, File, Request, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from .config import config
from .exceptions import InputValidationError, MissingInputError, StoreUnavailableError
from .models import UploadedFile
from .services import Services, build_services

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = config.get_logger(__name__)


class AskRequest(BaseModel):
    """Request body for /ask."""

    question: str = Field(min_length=1, max_length=config.MAX_QUESTION_LENGTH)


class ContextChunk(BaseModel):
    """A retrieved chunk returned alongside an answer."""

    content: str
    metadata: dict[str, Any]
    score: float | None = None


class AskResponse(BaseModel):
    """Response body for /ask."""

    answer: str
    context: list[ContextChunk] = Field(default_factory=list)


class UploadResponse(BaseModel):
    """Response body for /upload."""

    uploaded: int
    chunks: int
    ids: list[str]


class StatusResponse(BaseModel):
    """Response body for /status."""

    model_config = ConfigDict(populate_by_name=True)

    document_count: int = Field(alias="documentCount")


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str


def get_services(request: Request) -> Services:
    """Return the services built at startup."""  # noqa: DOC201
    return request.app.state.services


router = APIRouter(prefix="/agent/rag", tags=["rag"])


@router.post("/upload", response_model=UploadResponse)
def upload(
    file: UploadFile | None = File(default=None),  # noqa: B008
    services: Services = Depends(get_services),  # noqa: B008
) -> UploadResponse:
    """Store a PDF or TXT document for later questions.

    Raises:
        MissingInputError: If the request has no file part.
    """
    if file is None:
        msg = "File is required"
        raise MissingInputError(msg)

    result = services.ingestion.ingest(
        UploadedFile(
            content=file.file.read(),
            mime_type=file.content_type,
            filename=file.filename,
        )
    )
    return UploadResponse(uploaded=result.uploaded, chunks=result.chunks, ids=result.ids)


@router.post("/ask", response_model=AskResponse)
def ask(
    request: AskRequest,
    services: Services = Depends(get_services),  # noqa: B008
) -> AskResponse:
    """Answer a question about the uploaded documents."""  # noqa: DOC201
    answer = services.answers.ask(request.question)
    return AskResponse(
        answer=answer.text,
        context=[
            ContextChunk(content=chunk.content, metadata=chunk.metadata, score=chunk.score)
            for chunk in answer.context
        ],
    )


@router.get("/status", response_model=StatusResponse)
def status(services: Services = Depends(get_services)) -> StatusResponse:  # noqa: B008
    """Report how many chunks the vector store holds."""  # noqa: DOC201
    return StatusResponse(document_count=services.vector_store.status().document_count)


health_router = APIRouter(tags=["health"])


@health_router.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    """Basic health check."""  # noqa: DOC201
    return HealthResponse(status="healthy")


def handle_input_error(_request: Request, exc: InputValidationError) -> JSONResponse:
    """Map rejected input to 400."""  # noqa: DOC201
    logger.warning("Rejected input: %s", exc)
    return JSONResponse(
        status_code=400,
        content={"statusCode": 400, "error": "Bad Request", "message": exc.message},
    )


def handle_store_unavailable(
    _request: Request, exc: StoreUnavailableError
) -> JSONResponse:
    """Map an unreachable vector store to 503, keeping internal detail apart."""  # noqa: DOC201
    logger.error("Vector store unavailable: %s", exc)
    return JSONResponse(
        status_code=503,
        content={
            "statusCode": 503,
            "error": "Service Unavailable",
            "message": exc.user_message,
            "details": exc.message,
        },
    )


def create_app(services: Services | None = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        services: Pre-built services. If None, they are built from the
            environment at startup, and missing configuration stops the server.

    Returns:
        FastAPI: Configured application instance.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if services is None:
            app.state.services = build_services()
        yield

    app = FastAPI(
        title="RAGDesk API",
        description="Question answering over uploaded documents",
        version="0.1.0",
        lifespan=lifespan,
    )
    if services is not None:
        app.state.services = services

    app.add_exception_handler(InputValidationError, handle_input_error)
    app.add_exception_handler(StoreUnavailableError, handle_store_unavailable)
    app.include_router(router)
    app.include_router(health_router)
    return app

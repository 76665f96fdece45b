"""Tests for IngestionPipeline."""

from unittest.mock import create_autospec

import pytest

from ragdesk import (
    IngestionPipeline,
    MissingInputError,
    StoreUnavailableError,
    TextChunker,
    UnsupportedFormatError,
    UploadedFile,
    VectorStoreGateway,
)


@pytest.fixture
def pipeline(text_chunker_default, vector_store):
    return IngestionPipeline(text_chunker_default, vector_store)


def test_ingest_large_text_end_to_end(pipeline, vector_store):
    upload = UploadedFile(
        content=b"x" * 10_000, mime_type="text/plain", filename="big.txt"
    )

    result = pipeline.ingest(upload)

    assert result.uploaded == 1
    assert result.chunks == 13
    assert len(result.ids) == 13
    assert vector_store.status().document_count == 13


def test_ingested_chunks_are_retrievable(pipeline, vector_store):
    text = "Qdrant stores vectors.\n\nOpenAI produces embeddings."
    pipeline.ingest(UploadedFile(content=text.encode(), filename="notes.txt"))

    (chunk,) = vector_store.retrieve(text, k=1)

    assert chunk.content == text
    assert chunk.metadata["source"] == "notes.txt"
    assert chunk.metadata["chunk_id"] == 0


def test_ingest_path(pipeline, vector_store, tmp_path):
    path = tmp_path / "local.txt"
    path.write_text("word " * 500, encoding="utf-8")

    result = pipeline.ingest_path(path)

    assert result.uploaded == 1
    assert result.chunks == len(result.ids) > 1
    assert vector_store.status().document_count == result.chunks


def test_blank_document_stores_nothing(pipeline, vector_store):
    result = pipeline.ingest(UploadedFile(content=b"   \n", filename="blank.txt"))

    assert (result.uploaded, result.chunks, result.ids) == (1, 0, [])
    assert vector_store.status().document_count == 0


def test_rejected_upload_touches_nothing(text_chunker_default):
    store = create_autospec(VectorStoreGateway, instance=True)
    pipeline = IngestionPipeline(text_chunker_default, store)

    with pytest.raises(UnsupportedFormatError):
        pipeline.ingest(UploadedFile(content=b"MZ", filename="setup.exe"))
    with pytest.raises(MissingInputError):
        pipeline.ingest(UploadedFile(content=None, filename="a.txt"))

    store.add.assert_not_called()


def test_store_failure_propagates():
    store = create_autospec(VectorStoreGateway, instance=True)
    store.add.side_effect = StoreUnavailableError("down", operation="add")
    pipeline = IngestionPipeline(TextChunker(chunk_size=100, overlap=10), store)

    with pytest.raises(StoreUnavailableError):
        pipeline.ingest(UploadedFile(content=b"some text", filename="a.txt"))

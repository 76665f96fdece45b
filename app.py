"""RAGDesk web console using Streamlit."""

import streamlit as st

from ragdesk import Answer, Services, UploadedFile, build_services
from ragdesk.config import config
from ragdesk.exceptions import InputValidationError, RAGDeskError, StoreUnavailableError

PREVIEW_CHARS = 200
SESSION_DEFAULTS = {"services": None, "last_question": None, "last_answer": None}

config.setup_logging()
logger = config.get_logger(__name__)


def init_session() -> None:
    """Seed missing session keys."""
    for key, value in SESSION_DEFAULTS.items():
        st.session_state.setdefault(key, value)


def current_services() -> Services | None:
    """Services built for this browser session, if any."""  # noqa: DOC201
    return st.session_state.get("services")


def connect() -> bool:
    """Build the services from the environment.

    Returns:
        bool: True when the services are ready.
    """
    try:
        with st.spinner("Connecting to the document store..."):
            st.session_state.services = build_services()
    except RAGDeskError as e:
        logger.exception("Console could not build services")
        st.error(f"Could not start RAGDesk: {e}")
        return False

    st.success("Connected.")
    return True


def store_upload(services: Services, uploaded_file) -> bool:  # noqa: ANN001
    """Send one uploaded file through the ingestion pipeline.

    Returns:
        bool: True if the file was stored.
    """
    upload = UploadedFile(
        content=uploaded_file.getvalue(),
        mime_type=uploaded_file.type,
        filename=uploaded_file.name,
    )
    try:
        with st.spinner(f"Indexing {uploaded_file.name}..."):
            result = services.ingestion.ingest(upload)
    except InputValidationError as e:
        st.error(f"{uploaded_file.name} was rejected: {e.message}")
        return False
    except StoreUnavailableError as e:
        st.error(e.user_message)
        return False

    st.success(
        f"Indexed {uploaded_file.name}: {result.uploaded} document(s), "
        f"{result.chunks} chunk(s)."
    )
    return True


def sidebar() -> None:
    """Connection control and live store status."""
    with st.sidebar:
        st.header("RAGDesk")
        if st.button("Connect", use_container_width=True) and connect():
            st.rerun()

        services = current_services()
        if services is None:
            st.caption("Not connected")
            return

        st.metric("Stored chunks", services.vector_store.status().document_count)
        st.caption(f"Collection: {config.QDRANT_COLLECTION_NAME}")
        st.caption(f"Chunking: {config.CHUNK_SIZE} / {config.CHUNK_OVERLAP} chars")
        st.caption(f"Chunks per answer: {config.RETRIEVER_K}")


def upload_panel(services: Services) -> None:
    """File picker feeding the ingestion pipeline."""
    st.subheader("Add a document")
    uploaded_file = st.file_uploader("PDF or TXT", type=["pdf", "txt"])
    if (
        uploaded_file is not None
        and st.button("Index document")
        and store_upload(services, uploaded_file)
    ):
        st.rerun()


def show_answer(answer: Answer) -> None:
    """Render an answer with its mode and the chunks it used."""
    st.markdown(answer.text)

    if answer.mode == "unaugmented":
        st.caption("Answered without document context.")
        return

    st.caption(f"Answered from {len(answer.context)} retrieved chunk(s).")
    for rank, chunk in enumerate(answer.context, start=1):
        source = chunk.metadata.get("source", "unknown")
        page = chunk.metadata.get("page")
        where = f"{source} p.{page}" if page else source
        with st.expander(f"#{rank} {where} (score {chunk.score:.3f})"):
            preview = chunk.content[:PREVIEW_CHARS]
            st.text(preview + ("..." if len(chunk.content) > PREVIEW_CHARS else ""))


def question_panel(services: Services) -> None:
    """Question box and the most recent answer."""
    st.subheader("Ask")
    with st.form("question", clear_on_submit=False):
        question = st.text_area(
            "Question", max_chars=config.MAX_QUESTION_LENGTH, height=100
        )
        submitted = st.form_submit_button("Ask")

    if submitted and question.strip():
        try:
            with st.spinner("Thinking..."):
                st.session_state.last_answer = services.answers.ask(question)
            st.session_state.last_question = question
        except Exception as e:  # noqa: BLE001
            logger.exception("Console question failed")
            st.error(f"Could not answer: {e}")
            return

    if st.session_state.last_answer is not None:
        st.markdown(f"**Q:** {st.session_state.last_question}")
        show_answer(st.session_state.last_answer)


def main() -> None:
    """Entry point for ``streamlit run app.py``."""
    st.set_page_config(page_title="RAGDesk", layout="wide")
    init_session()
    sidebar()

    services = current_services()
    if services is None:
        st.info("Connect from the sidebar to start.")
        return

    upload_col, ask_col = st.columns([1, 2])
    with upload_col:
        upload_panel(services)
    with ask_col:
        question_panel(services)


if __name__ == "__main__":
    main()

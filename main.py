"""Command-line entry point for RAGDesk."""

from __future__ import annotations

import argparse
import subprocess
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import uvicorn

from ragdesk.api import create_app
from ragdesk.config import config
from ragdesk.exceptions import ConfigurationError, RAGDeskError
from ragdesk.services import build_services

if TYPE_CHECKING:
    from collections.abc import Sequence
    from logging import Logger

PROJECT_ROOT = Path(__file__).resolve().parent
CONSOLE_SCRIPT = PROJECT_ROOT / "app.py"


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Build the CLI parser and read command-line arguments."""  # noqa: DOC201
    parser = argparse.ArgumentParser(
        description="Question answering over uploaded documents.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP API.")
    serve.add_argument("--host", default=config.API_HOST, help="Bind address.")
    serve.add_argument("--port", type=int, default=config.API_PORT, help="Port.")

    ui = subparsers.add_parser("ui", help="Launch the Streamlit console.")
    ui.add_argument(
        "--script", type=Path, default=CONSOLE_SCRIPT, help="Console script to run."
    )
    ui.add_argument("--host", default="localhost", help="Console bind address.")
    ui.add_argument("--port", type=int, default=8501, help="Console port.")
    ui.add_argument(
        "--open-browser",
        action="store_true",
        help="Open a browser tab once the console is up.",
    )

    ingest = subparsers.add_parser("ingest", help="Store local PDF or TXT files.")
    ingest.add_argument("paths", nargs="+", type=Path, help="Files to ingest.")

    ask = subparsers.add_parser("ask", help="Ask a single question.")
    ask.add_argument("question", help="Question text.")
    ask.add_argument(
        "--show-context",
        action="store_true",
        help="Print the retrieved chunks after the answer.",
    )

    subparsers.add_parser("status", help="Print the number of stored chunks.")
    return parser.parse_args(argv)


def streamlit_command(
    script: Path, *, host: str, port: int, open_browser: bool
) -> list[str]:
    """Return the argv that runs ``script`` under ``streamlit run``."""  # noqa: DOC201
    return [
        sys.executable,
        "-m",
        "streamlit",
        "run",
        str(script),
        f"--server.address={host}",
        f"--server.port={port}",
        f"--server.headless={str(not open_browser).lower()}",
    ]


def launch_ui(args: argparse.Namespace, logger: Logger) -> int:
    """Run the Streamlit console until it exits or is interrupted."""  # noqa: DOC201
    script = args.script if args.script.is_absolute() else PROJECT_ROOT / args.script
    script = script.resolve()
    if not script.is_file():
        logger.error("Console script not found: %s", script)
        return 1

    command = streamlit_command(
        script, host=args.host, port=args.port, open_browser=args.open_browser
    )
    logger.info("Starting RAGDesk console at http://%s:%s", args.host, args.port)
    try:
        completed = subprocess.run(command, check=False, cwd=PROJECT_ROOT)  # noqa: S603
    except KeyboardInterrupt:
        logger.info("RAGDesk console stopped by user")
        return 0
    except OSError:
        logger.exception("Unable to launch Streamlit")
        return 1

    if completed.returncode:
        logger.error("Streamlit exited with status %s", completed.returncode)
    return completed.returncode


def serve_api(args: argparse.Namespace, logger: Logger) -> int:
    """Run the HTTP API until interrupted."""  # noqa: DOC201
    app = create_app(build_services())
    logger.info("Starting RAGDesk API at http://%s:%s", args.host, args.port)
    uvicorn.run(app, host=args.host, port=args.port)
    return 0


def ingest_files(paths: Sequence[Path], logger: Logger) -> int:
    """Ingest local files, continuing past files that are rejected."""  # noqa: DOC201
    services = build_services()
    failures = 0
    for path in paths:
        try:
            result = services.ingestion.ingest_path(path)
        except RAGDeskError as e:
            logger.error("Skipping %s: %s", path, e)  # noqa: TRY400
            failures += 1
            continue
        print(f"{path}: {result.uploaded} document(s), {result.chunks} chunk(s)")  # noqa: T201
    return 1 if failures else 0


def ask_question(question: str, *, show_context: bool) -> int:
    """Print the answer to one question."""  # noqa: DOC201
    answer = build_services().answers.ask(question)
    print(answer.text)  # noqa: T201
    if show_context:
        for i, chunk in enumerate(answer.context, start=1):
            print(  # noqa: T201
                f"\n[Context {i}] {chunk.metadata.get('source', 'unknown')} "
                f"(score {chunk.score:.4f})\n{chunk.content}"
            )
    return 0


def print_status() -> int:
    """Print the stored chunk count."""  # noqa: DOC201
    status = build_services().vector_store.status()
    print(f"documentCount: {status.document_count}")  # noqa: T201
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Validate configuration and run the selected command."""  # noqa: DOC201
    args = parse_args(argv)

    config.setup_logging()
    logger = config.get_logger(__name__)

    try:
        config.validate()
    except ConfigurationError:
        logger.exception("Configuration invalid")
        return 1

    if args.command == "serve":
        return serve_api(args, logger)
    if args.command == "ui":
        return launch_ui(args, logger)
    if args.command == "ingest":
        return ingest_files(args.paths, logger)
    if args.command == "ask":
        return ask_question(args.question, show_context=args.show_context)
    return print_status()


if __name__ == "__main__":
    sys.exit(main())

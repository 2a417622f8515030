from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, Optional, Tuple

import click

from .config import RagSettings, get_settings
from .errors import RagError
from .session import RagSession

_log = logging.getLogger(__name__)


def _setup_logging(settings: RagSettings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _ingest_files(session: RagSession, files: Iterable[Path], chunk_size: int, overlap: int) -> None:
    for path in files:
        # Undecodable bytes become U+FFFD rather than aborting the upload.
        text = path.read_bytes().decode("utf-8", errors="replace")
        doc = session.add_document(
            path.name,
            text,
            chunk_size=chunk_size,
            overlap=overlap,
            size=path.stat().st_size,
        )
        _log.info("Ingested %s: %d chunks", path.name, doc.chunks)


def _load(
    files: Tuple[Path, ...],
    chunk_size: Optional[int],
    overlap: Optional[int],
) -> Tuple[RagSession, RagSettings]:
    settings = get_settings()
    _setup_logging(settings)
    session = RagSession()
    try:
        _ingest_files(
            session,
            files,
            chunk_size=settings.chunk_size if chunk_size is None else chunk_size,
            overlap=settings.chunk_overlap if overlap is None else overlap,
        )
    except RagError as exc:
        raise click.ClickException(str(exc)) from exc
    return session, settings


_files_argument = click.argument(
    "files",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
_chunk_size_option = click.option("--chunk-size", type=int, default=None, help="Characters per chunk.")
_overlap_option = click.option("--overlap", type=int, default=None, help="Characters shared by neighbouring chunks.")
_top_k_option = click.option("--top-k", "-k", type=int, default=None, help="Number of chunks to retrieve.")


@click.group()
def main() -> None:
    """Command line entrypoint for the in-memory RAG pipeline."""


@main.command("search")
@_files_argument
@click.option("--query", "-q", required=True, help="Question to rank chunks against.")
@_top_k_option
@_chunk_size_option
@_overlap_option
def search(
    files: Tuple[Path, ...],
    query: str,
    top_k: Optional[int],
    chunk_size: Optional[int],
    overlap: Optional[int],
) -> None:
    """Ingest FILES and print the chunks most similar to the query."""
    session, settings = _load(files, chunk_size, overlap)
    try:
        hits = session.query(query, settings.top_k if top_k is None else top_k)
    except RagError as exc:
        raise click.ClickException(str(exc)) from exc

    for rank, hit in enumerate(hits, start=1):
        click.echo(f"{rank}. [{hit.document_name}, chunk {hit.chunk_index + 1}] score={hit.score:.3f}")
        click.echo(hit.chunk_text)
        click.echo("")


@main.command("ask")
@_files_argument
@click.option("--question", "-q", required=True, help="Question for the language model.")
@_top_k_option
@_chunk_size_option
@_overlap_option
def ask(
    files: Tuple[Path, ...],
    question: str,
    top_k: Optional[int],
    chunk_size: Optional[int],
    overlap: Optional[int],
) -> None:
    """Ingest FILES and answer the question with the configured LLM."""
    from agents.answer_agent import RagAnswerAgent

    session, settings = _load(files, chunk_size, overlap)
    agent = RagAnswerAgent(session=session, settings=settings)
    try:
        result = agent.answer(question, top_k=top_k)
    except RagError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(result.answer)
    if result.sources:
        click.echo("\nSources:")
        for src in result.sources:
            click.echo(f"- {src.doc}, chunk {src.chunk} (score {src.score:.3f})")


@main.command("stats")
@_files_argument
@_chunk_size_option
@_overlap_option
def stats(files: Tuple[Path, ...], chunk_size: Optional[int], overlap: Optional[int]) -> None:
    """Ingest FILES and print corpus statistics as JSON."""
    session, _ = _load(files, chunk_size, overlap)
    click.echo(json.dumps(session.stats().model_dump()))


@main.command("serve")
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8000, show_default=True, type=int)
def serve(host: str, port: int) -> None:
    """Run the HTTP backend with uvicorn."""
    import uvicorn

    _setup_logging(get_settings())
    uvicorn.run("apps.backend.main:app", host=host, port=port)


if __name__ == "__main__":
    main()

from __future__ import annotations

# ruff: noqa: E402, B008

"""Thin CLI that delegates to the RAG service.

Commands:
- relevance: rank the documents of a corpus against a query
- ask: answer a query from the relevant documents of a corpus
- append: merge new content into a document, or create one
"""

import asyncio
import json
import logging
import sys

import typer

from src.application.rag_service import RAGService
from src.config.configure_app import get_rag_service
from src.core.logging_setup import setup_logging
from src.domain.rag import AppendRequest
from src.domain.relevance import AnalysisOptions, RelevanceResult

app = typer.Typer(add_completion=False, no_args_is_help=True, help="Keyword-relevance RAG tools")


def _build_service() -> RAGService:
    return get_rag_service()


def _result_payload(i: int, r: RelevanceResult) -> dict[str, object]:
    return {
        "index": i,
        "id": r.document.id,
        "title": r.document.title,
        "score": r.score,
        "matched_keywords": list(r.matched_keywords),
        "reasoning": r.reasoning,
    }


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable DEBUG logging"),
) -> None:
    setup_logging(logging.DEBUG if verbose else logging.WARNING)


@app.command("relevance")
def relevance_cmd(
    query: str = typer.Argument(..., help="Query text"),
    corpus: str = typer.Option(..., "--corpus", help="Corpus id"),
    threshold: float | None = typer.Option(None, help="Minimum score (0..1)"),
    max_results: int | None = typer.Option(None, help="Maximum number of results"),
    reasoning: bool = typer.Option(False, "--reasoning", help="Keep the model's reasoning"),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON"),
) -> None:
    """Rank corpus documents by title/keyword relevance to QUERY."""
    svc = _build_service()

    async def _run() -> list[RelevanceResult]:
        c = await svc.fetch_corpus(corpus)
        return await svc.analyze_relevance(
            query,
            c,
            AnalysisOptions(
                threshold=threshold, max_results=max_results, include_reasoning=reasoning
            ),
        )

    results = asyncio.run(_run())

    if as_json:
        payload = [_result_payload(i, r) for i, r in enumerate(results, 1)]
        typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))
        raise typer.Exit()

    if not results:
        typer.echo("No relevant documents.")
        raise typer.Exit()

    for i, r in enumerate(results, 1):
        kws = ", ".join(r.matched_keywords)
        typer.echo(f"[{i}] score={r.score:.3f} {r.document.title} ({r.document.id})")
        if kws:
            typer.echo(f"     matched: {kws}")
        if r.reasoning:
            typer.echo(f"     {r.reasoning}")


@app.command("ask")
def ask_cmd(
    query: str = typer.Argument(..., help="Question"),
    corpus: str = typer.Option(..., "--corpus", help="Corpus id"),
    max_results: int = typer.Option(5, help="Maximum number of documents used as context"),
    sources: bool = typer.Option(True, "--sources/--no-sources", help="List the sources used"),
) -> None:
    """Answer QUERY from the relevant documents of a corpus."""
    svc = _build_service()
    resp = asyncio.run(
        svc.ask(query, corpus, max_results=max_results, include_sources=sources)
    )
    typer.echo(resp.answer)
    if sources and resp.sources:
        typer.echo("")
        typer.echo("Sources:")
        for i, r in enumerate(resp.sources, 1):
            mark = " (truncated)" if r.truncated else ""
            typer.echo(f"[{i}] {r.document.title} score={r.score:.3f}{mark}")


@app.command("append")
def append_cmd(
    content: str = typer.Argument(..., help="Content to append"),
    corpus: str = typer.Option(..., "--corpus", help="Corpus id"),
    target: str | None = typer.Option(None, "--target", help="Document id to merge into"),
) -> None:
    """Merge CONTENT into the best-matching document, or create a new one."""
    svc = _build_service()
    result = asyncio.run(
        svc.append_content(
            AppendRequest(corpus_id=corpus, content=content, target_document_id=target)
        )
    )
    typer.echo(
        json.dumps(
            {
                "document_id": result.document_id,
                "title": result.title,
                "action": result.action,
                "message": result.message,
            },
            ensure_ascii=False,
            indent=2,
        )
    )


def main() -> int:
    try:
        app(standalone_mode=False)
        return 0
    except Exception as e:  # noqa: BLE001
        typer.secho(f"Error: {e}", fg=typer.colors.RED)
        return 1


if __name__ == "__main__":
    sys.exit(main())

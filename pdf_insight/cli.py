"""
PDF Insight - Command Line Interface
Extract, analyze and chunk PDFs, and ask questions about them.
"""
import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import settings
from .data_models import ExtractionProgress
from .document_processing import PageTextExtractor, ServerExtractor
from .errors import PDFInsightError
from .ingestion import StructuralAnalyzer, WordWindowChunker
from .services import DocumentService

cli = typer.Typer(help="PDF Insight CLI", add_completion=False)
console = Console()


def _read_pdf(path: Path) -> bytes:
    if not path.exists():
        console.print(f"[red]File not found: {path}[/red]")
        raise typer.Exit(code=1)
    return path.read_bytes()


def _run(coro):
    """Run a coroutine, turning processing errors into a red message and exit code 1."""
    try:
        return asyncio.run(coro)
    except PDFInsightError as e:
        console.print(f"[red]{type(e).__name__}: {e.message}[/red]")
        raise typer.Exit(code=1)


def _print_progress(progress: ExtractionProgress) -> None:
    console.print(f"[dim]{progress.mode}: page {progress.page}/{progress.total_pages}[/dim]")


@cli.command()
def extract(
    pdf: Path = typer.Argument(..., help="Path to a PDF file"),
    ocr: bool = typer.Option(False, "--ocr", help="Use the text layer with OCR fallback"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
):
    """Extract cleaned text from a PDF."""
    data = _read_pdf(pdf)

    if ocr:
        result = _run(PageTextExtractor.from_settings(settings).extract_bytes(data, on_progress=_print_progress))
        payload = {"text": result.text, "used_ocr": result.used_ocr, "pages": result.total_pages}
    else:
        result = _run(ServerExtractor.from_settings(settings).extract(data))
        payload = {
            "text": result.text,
            "method": result.method.value,
            "metadata": result.metadata.model_dump(exclude_none=True),
        }

    if as_json:
        console.print_json(json.dumps(payload))
    else:
        console.print(payload["text"])


@cli.command()
def analyze(pdf: Path = typer.Argument(..., help="Path to a PDF file")):
    """Show metadata, structure and content analysis for a PDF."""
    result = _run(ServerExtractor.from_settings(settings).extract(_read_pdf(pdf)))
    analysis = StructuralAnalyzer().analyze_content(result.raw_text or result.text, result.structure)

    table = Table(title=f"Analysis: {pdf.name}")
    table.add_column("Property", style="cyan")
    table.add_column("Value")
    table.add_row("Extraction method", result.method.value)
    table.add_row("Pages", str(result.metadata.pages or "?"))
    table.add_row("Title", result.metadata.title or "-")
    table.add_row("Author", result.metadata.author or "-")
    table.add_row("Document type", analysis.document_type.value)
    table.add_row("Readability", f"{analysis.readability_score:.0f}/100")
    table.add_row("Headings", str(len(result.structure.headings)))
    table.add_row("Paragraphs", str(len(result.structure.paragraphs)))
    table.add_row("List items", str(len(result.structure.lists)))
    table.add_row("Table rows", str(len(result.structure.tables)))
    console.print(table)

    if analysis.key_topics:
        console.print(Panel("\n".join(analysis.key_topics), title="Key topics"))


@cli.command()
def chunk(
    pdf: Path = typer.Argument(..., help="Path to a PDF file"),
    size: int = typer.Option(settings.chunk_size, help="Words per chunk"),
    overlap: int = typer.Option(settings.chunk_overlap, help="Words shared by consecutive chunks"),
):
    """Split a PDF's text into overlapping word windows."""
    result = _run(ServerExtractor.from_settings(settings).extract(_read_pdf(pdf)))
    try:
        chunker = WordWindowChunker(size, overlap, settings.min_chunk_chars)
    except PDFInsightError as e:
        console.print(f"[red]{type(e).__name__}: {e.message}[/red]")
        raise typer.Exit(code=1)

    chunks = chunker.chunk(result.text)
    stats = chunker.get_stats(chunks)

    table = Table(title=f"{stats.total_chunks} chunks (avg {stats.avg_chunk_size:.0f} chars)")
    table.add_column("#", justify="right")
    table.add_column("Words")
    table.add_column("Preview")
    for c in chunks:
        table.add_row(str(c.index), f"{c.start_word}-{c.end_word}", c.content[:80])
    console.print(table)


@cli.command()
def ask(
    pdf: Path = typer.Argument(..., help="Path to a PDF file"),
    question: str = typer.Argument(..., help="Question to ask about the document"),
    summarize: bool = typer.Option(False, "--summarize", help="Summarize the document before asking"),
):
    """Process a PDF and answer a question about it."""
    service = DocumentService.from_settings(settings)

    async def do_ask():
        document = await service.process_bytes(_read_pdf(pdf))
        return await service.ask(question, document.text, summarize_first=summarize)

    with console.status("[bold green]Thinking..."):
        result = _run(do_ask())

    console.print(Panel(result.answer, title=f"Answer ({result.provider}/{result.model})"))
    if result.citations:
        console.print(f"[dim]Cited pages: {', '.join(result.citations)}[/dim]")


@cli.command()
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address"),
    port: Optional[int] = typer.Option(None, help="Port"),
):
    """Run the HTTP API."""
    import uvicorn
    uvicorn.run(
        "pdf_insight.api.app:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
    )


if __name__ == "__main__":
    cli()

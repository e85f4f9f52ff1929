"""CLI commands using Typer."""

import json
import re
from pathlib import Path
from typing import List, Optional
import typer
from loguru import logger
from pydantic import ValidationError
from decision2json.compare import compare_documents, resolve_party_values
from decision2json.config import load_settings
from decision2json.extractor import extract_sections
from decision2json.formatting import format_optional_value
from decision2json.logging_utils import setup_logging
from decision2json.models import DocumentInput
from decision2json.output import OutputGenerator
from decision2json.qa import ExtractionQA

app = typer.Typer(help="Appraisal decision text to JSON extractor")


def extract_document_id(text_path: str) -> str:
    """Derive a document ID from a file name.

    Args:
        text_path: Path to the text file

    Returns:
        Document ID (file stem with spaces and dashes replaced)
    """
    stem = Path(text_path).stem
    return re.sub(r'[\s\-]+', '_', stem.strip()) or "document"


def read_text_file(text_path: Path) -> str:
    """Read a UTF-8 text file, replacing undecodable bytes."""
    return text_path.read_text(encoding="utf-8", errors="replace")


def _require_text_file(text_path: str) -> Path:
    text_file = Path(text_path)
    if not text_file.exists():
        typer.echo(f"Error: Text file not found: {text_path}", err=True)
        raise typer.Exit(code=1)
    if not text_file.is_file():
        typer.echo(f"Error: Not a file: {text_path}", err=True)
        raise typer.Exit(code=1)
    return text_file


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Write logs to this file"),
):
    """Extract claims, rulings and values from appraisal decisions."""
    settings = load_settings()
    level = "DEBUG" if verbose else settings.log_level
    setup_logging(Path(log_file) if log_file else settings.log_file, level=level)


@app.command()
def extract(
    text_path: str = typer.Argument(..., help="Path to the decision text file"),
    out: Optional[str] = typer.Option(None, "--out", "-o", help="Output directory"),
    term: Optional[str] = typer.Option(None, "--term", "-t", help="Search term whose nearby values are collected"),
    threshold: Optional[float] = typer.Option(None, "--threshold", help="QA threshold (0.0-1.0)"),
):
    """Extract sections and values from one decision.

    This command:
    1. Reads and normalizes the document text
    2. Locates party claims, ruling, comparisons and calculation sections
    3. Runs QA validation
    4. Writes JSON, QA JSON and an HTML report
    5. Exits with code 0 if QA passes, 1 otherwise
    """
    settings = load_settings()
    text_file = _require_text_file(text_path)
    document_id = extract_document_id(text_path)
    typer.echo(f"Processing {document_id} from {text_path}")

    validator = ExtractionQA(threshold=threshold if threshold is not None else settings.qa_threshold)

    try:
        output_gen = OutputGenerator(out or str(settings.output_dir))
        text = read_text_file(text_file)
        typer.echo(f"[OK] Read {len(text)} characters")

        extraction = extract_sections(document_id, text, term)
        found = [name for name, section in extraction.sections().items() if section is not None]
        typer.echo(f"[OK] Sections found: {', '.join(found) if found else 'none'}")
        typer.echo(f"[OK] Values found: {len(extraction.all_values)}")

        qa_result = validator.validate(extraction, text)

        json_path = output_gen.generate_main_json(extraction)
        qa_path = output_gen.generate_qa_json(qa_result)
        html_path = output_gen.generate_html_report(extraction, qa_result, text)
    except OSError as e:
        logger.exception(f"{document_id}: processing failed")
        typer.echo(f"Error during processing: {e}", err=True)
        raise typer.Exit(code=2)

    typer.echo(f"[OK] Main JSON: {json_path}")
    typer.echo(f"[OK] QA JSON: {qa_path}")
    typer.echo(f"[OK] HTML Report: {html_path}")

    if qa_result.passed:
        typer.echo(f"[PASS] QA passed! Score: {qa_result.score:.2%}")
        raise typer.Exit(code=0)

    typer.echo(f"[FAIL] QA failed. Score: {qa_result.score:.2%} (threshold: {qa_result.threshold:.2%})")
    for issue in qa_result.issues:
        typer.echo(f"  - {issue}")
    raise typer.Exit(code=1)


@app.command()
def resolve(
    text_path: str = typer.Argument(..., help="Path to the decision text file"),
    term: str = typer.Option(..., "--term", "-t", help="Search term, e.g. 'מקדם דחייה'"),
):
    """Print party A, party B and ruling values for a search term."""
    text_file = _require_text_file(text_path)
    document_id = extract_document_id(text_path)
    text = read_text_file(text_file)

    extraction = extract_sections(document_id, text, term)
    party_a, party_b, ruling = resolve_party_values(extraction, text, term)

    typer.echo(f"{document_id}: {term}")
    typer.echo(f"  party A: {format_optional_value(party_a) or '-'}")
    typer.echo(f"  party B: {format_optional_value(party_b) or '-'}")
    typer.echo(f"  ruling:  {format_optional_value(ruling) or '-'}")


@app.command()
def compare(
    source: str = typer.Argument(..., help="Directory of .txt files or a JSON list of documents"),
    term: str = typer.Option(..., "--term", "-t", help="Search term whose values are compared"),
    out: Optional[str] = typer.Option(None, "--out", "-o", help="Output directory"),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Maximum rows (at most 50)"),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", help="Worker processes"),
    committee: Optional[str] = typer.Option(None, "--committee", "-c", help="Only decisions of this committee"),
):
    """Compare a term's values across many decisions."""
    settings = load_settings()
    source_path = Path(source)
    if not source_path.exists():
        typer.echo(f"Error: Source not found: {source}", err=True)
        raise typer.Exit(code=1)

    try:
        documents = _load_documents(source_path)
    except (OSError, json.JSONDecodeError, ValidationError, TypeError) as e:
        typer.echo(f"Error: Cannot read documents from {source}: {e}", err=True)
        raise typer.Exit(code=1)

    if not documents:
        typer.echo(f"Error: No documents found in {source}", err=True)
        raise typer.Exit(code=2)

    typer.echo(f"Comparing '{term}' across {len(documents)} documents")
    result = compare_documents(
        documents,
        term,
        limit=limit or settings.compare_limit,
        text_cap=settings.text_cap,
        workers=workers or settings.workers,
        committee=committee,
    )

    try:
        output_gen = OutputGenerator(out or str(settings.output_dir))
        json_path = output_gen.generate_compare_json(result)
        html_path = output_gen.generate_compare_html(result)
    except OSError as e:
        logger.exception("Writing comparison output failed")
        typer.echo(f"Error writing output: {e}", err=True)
        raise typer.Exit(code=2)

    if not result.rows:
        typer.echo("[WARNING] No document yielded a value for this term")
    else:
        typer.echo(f"[OK] {result.total} rows")
    typer.echo(f"[OK] Compare JSON: {json_path}")
    typer.echo(f"[OK] Compare HTML: {html_path}")


def _load_documents(source_path: Path) -> List[DocumentInput]:
    """Load documents from a directory of .txt files or a JSON list."""
    if source_path.is_dir():
        documents = []
        for text_file in sorted(source_path.glob("*.txt")):
            documents.append(DocumentInput(
                id=extract_document_id(str(text_file)),
                title=text_file.stem,
                text=read_text_file(text_file),
            ))
        return documents

    with open(source_path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise TypeError("expected a JSON list of documents")
    logger.debug(f"Loaded {len(data)} documents from {source_path}")
    return [DocumentInput.model_validate(item) for item in data]


@app.command()
def version():
    """Show version information."""
    from decision2json import __version__
    typer.echo(f"decision2json version {__version__}")


if __name__ == "__main__":
    app()

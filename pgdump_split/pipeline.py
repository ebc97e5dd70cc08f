"""
Pipeline: dump text -> body extraction -> tokenizing -> residual check -> export.
"""

from dataclasses import dataclass
from pathlib import Path

from pgdump_split.body_extractor import extract_bodies
from pgdump_split.dump_reader import read_dump
from pgdump_split.exporter import ExportResult, export_objects
from pgdump_split.progress import Progress
from pgdump_split.residual import validate_residual
from pgdump_split.tokenizer import ObjectRecord, tokenize_statements


@dataclass(frozen=True)
class ParsedDump:
    """Fully parsed dump."""
    records: tuple[ObjectRecord, ...]
    placeholders: dict[str, str]  # md5 -> function body


def parse_dump(text: str, progress: Progress | None = None) -> ParsedDump:
    """
    Parse dump text into ObjectRecords.

    Raises:
        ParseResidualError: if some content matched no statement
    """
    if progress is not None:
        progress.stage("Extracting body parts of functions")
    extracted = extract_bodies(text, progress=progress)
    if progress is not None:
        progress.done()
        progress.stage("Parsing")
    tokenized = tokenize_statements(extracted, progress=progress)
    if progress is not None:
        progress.done()

    validate_residual(tokenized.residual)
    return ParsedDump(records=tokenized.records, placeholders=extracted.placeholders)


def split_dump(
    dump_path: Path,
    out_root: Path,
    progress: Progress | None = None,
) -> ExportResult:
    """Read, parse and export a dump file. Nothing is written if parsing fails."""
    parsed = parse_dump(read_dump(dump_path), progress=progress)
    return export_objects(out_root, parsed.records, progress=progress)

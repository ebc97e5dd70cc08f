"""
Object exporter: write parsed records to the per-object directory layout.

Layout below the output root:

    changes/000001-users.sql               statement text, one per object
    name/users/000001-users.sql            -> ../../changes/000001-users.sql
    type/CREATE_TABLE/users/000001-users.sql
                                           -> ../../../changes/000001-users.sql
    name/users.sql                         every statement for "users"
    type/CREATE_TABLE.sql                  every CREATE TABLE statement
    checksums.txt                          md5 of each name/<name>.sql

The name/ and type/ trees are derived from the record sequence only.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path

from pgdump_split.checksums import format_checksums, md5_hex
from pgdump_split.config import (
    CHANGES_DIR,
    CHECKSUMS_FILE,
    ENCODING,
    ENCODING_ERRORS,
    ID_WIDTH,
    NAME_DIR,
    TYPE_DIR,
)
from pgdump_split.errors import FilesystemError
from pgdump_split.progress import Progress
from pgdump_split.tokenizer import ObjectRecord


# Ownership differences between dumps are not tracked
OWNERSHIP_RE = re.compile(r"OWNER TO [a-z0-9_]+;\Z")


@dataclass
class ExportResult:
    """Summary of one export run."""
    root: Path
    exported: list[tuple[int, ObjectRecord]] = field(default_factory=list)
    skipped: int = 0  # ownership statements
    checksums: dict[str, str] = field(default_factory=dict)  # name -> md5


def is_ownership_change(record: ObjectRecord) -> bool:
    """Return True if the statement only reassigns ownership."""
    return OWNERSHIP_RE.search(record.body) is not None


def object_filename(object_id: int, name: str) -> str:
    """Return the per-object file name, example: 000001-users.sql."""
    return f"{object_id:0{ID_WIDTH}d}-{name}.sql"


def number_records(
    records: tuple[ObjectRecord, ...] | list[ObjectRecord],
) -> tuple[list[tuple[int, ObjectRecord]], int]:
    """
    Assign sequential IDs to the records that will be exported.

    Returns:
        Tuple of ((id, record) pairs in dump order, number of skipped records)
    """
    numbered: list[tuple[int, ObjectRecord]] = []
    skipped = 0
    for record in records:
        if is_ownership_change(record):
            skipped += 1
            continue
        numbered.append((len(numbered) + 1, record))
    return numbered, skipped


def build_aggregates(
    numbered: list[tuple[int, ObjectRecord]],
) -> tuple[dict[str, str], dict[str, str]]:
    """
    Concatenate bodies per object name and per type.

    Each body is followed by a newline, in dump order.

    Returns:
        Tuple of (name -> text, type -> text)
    """
    per_name: dict[str, str] = {}
    per_type: dict[str, str] = {}
    for _, record in numbered:
        per_name[record.name] = per_name.get(record.name, "") + record.body + "\n"
        per_type[record.type] = per_type.get(record.type, "") + record.body + "\n"
    return per_name, per_type


def _make_dir(path: Path, parents: bool = True, exist_ok: bool = True) -> None:
    try:
        path.mkdir(parents=parents, exist_ok=exist_ok)
    except OSError as e:
        raise FilesystemError(f"Unable to create dir {path}: {e}") from e


def _write_file(path: Path, data: bytes) -> None:
    try:
        path.write_bytes(data)
    except OSError as e:
        raise FilesystemError(f"Unable to write file {path}: {e}") from e


def _symlink(source: Path, link: Path) -> None:
    try:
        link.symlink_to(source)
    except OSError as e:
        raise FilesystemError(f"Unable to create symlink {source} -> {link}: {e}") from e


def write_object(out_root: Path, object_id: int, record: ObjectRecord) -> Path:
    """
    Write one object to changes/ and link it from name/ and type/.

    Returns:
        Path to the written changes/ file
    """
    filename = object_filename(object_id, record.name)

    changes_dir = out_root / CHANGES_DIR
    _make_dir(changes_dir)
    change_path = changes_dir / filename
    _write_file(change_path, record.body.encode(ENCODING, ENCODING_ERRORS))

    name_dir = out_root / NAME_DIR / record.name
    _make_dir(name_dir)
    _symlink(Path("..", "..", CHANGES_DIR, filename), name_dir / filename)

    type_dir = out_root / TYPE_DIR / record.type / record.name
    _make_dir(type_dir)
    _symlink(Path("..", "..", "..", CHANGES_DIR, filename), type_dir / filename)

    return change_path


def export_objects(
    out_root: Path,
    records: tuple[ObjectRecord, ...] | list[ObjectRecord],
    progress: Progress | None = None,
) -> ExportResult:
    """
    Export records below a new output root.

    Args:
        out_root: Output directory, must not exist yet
        records: Parsed records in dump order
        progress: Optional progress reporter

    Returns:
        ExportResult

    Raises:
        FilesystemError: on any directory, file or symlink failure; files
            written before the failure are left in place
    """
    _make_dir(out_root, parents=False, exist_ok=False)

    numbered, skipped = number_records(records)
    result = ExportResult(root=out_root, exported=numbered, skipped=skipped)

    if progress is not None:
        progress.stage("Exporting")
    for object_id, record in numbered:
        write_object(out_root, object_id, record)
        if progress is not None:
            progress.tick()

    per_name, per_type = build_aggregates(numbered)
    for name in sorted(per_name):
        data = per_name[name].encode(ENCODING, ENCODING_ERRORS)
        _write_file(out_root / NAME_DIR / f"{name}.sql", data)
        result.checksums[name] = md5_hex(data)
    for type_name in sorted(per_type):
        data = per_type[type_name].encode(ENCODING, ENCODING_ERRORS)
        _write_file(out_root / TYPE_DIR / f"{type_name}.sql", data)
    if progress is not None:
        progress.done()
        progress.stage("Writing checksums")
    manifest = format_checksums(result.checksums).encode(ENCODING, ENCODING_ERRORS)
    _write_file(out_root / CHECKSUMS_FILE, manifest)
    if progress is not None:
        progress.done()

    return result

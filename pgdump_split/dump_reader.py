"""
Dump reader: load a ``pg_dump -s`` file into memory.

Line endings are kept as they are and bytes that are not valid UTF-8 are
carried through as surrogates, so function bodies are exported unchanged.
"""

from pathlib import Path

from pgdump_split.config import ENCODING_ERRORS
from pgdump_split.errors import UsageError


def read_dump(dump_path: Path) -> str:
    """
    Read dump content from a file, handling BOM.

    Args:
        dump_path: Path to the schema dump

    Returns:
        Dump text with BOM removed

    Raises:
        UsageError: if the path is not a readable file
    """
    if not dump_path.is_file():
        raise UsageError(f"Dump file not found: {dump_path}")
    try:
        data = dump_path.read_bytes()
    except OSError as e:
        raise UsageError(f"Unable to read dump file {dump_path}: {e}") from e
    return data.decode("utf-8-sig", ENCODING_ERRORS)  # utf-8-sig handles BOM

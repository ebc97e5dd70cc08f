"""
CLI entry point for splitting a schema dump.

Usage: pgdump-split DUMP_FILE [SAVE_PATH]
"""

import argparse
import sys
from pathlib import Path
from typing import NoReturn

from pgdump_split.config import DEFAULT_SAVE_PATH, SAVE_PATH_PATTERN
from pgdump_split.errors import SchemaSplitError, UsageError
from pgdump_split.pipeline import split_dump
from pgdump_split.progress import Progress


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError instead of exiting."""

    def error(self, message: str) -> NoReturn:
        raise UsageError(f"{message}\n{self.format_usage().strip()}")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = _ArgumentParser(
        prog="pgdump-split",
        description="Split a pg_dump -s schema dump into one file per object",
    )

    parser.add_argument(
        "dump_file",
        type=Path,
        help="Output of pg_dump -s",
    )
    parser.add_argument(
        "save_path",
        nargs="?",
        default=DEFAULT_SAVE_PATH,
        help=f"Output directory to create, must match ^[A-Za-z0-9_]+$ (default: {DEFAULT_SAVE_PATH})",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Do not print progress",
    )

    return parser.parse_args(argv)


def validate_save_path(save_path: str) -> Path:
    """
    Check the output directory name.

    Raises:
        UsageError: if the name is invalid or the directory already exists
    """
    if not SAVE_PATH_PATTERN.match(save_path):
        raise UsageError(f"Directory '{save_path}' is invalid, must be ^[a-zA-Z0-9_]+$")
    path = Path(save_path)
    if path.exists():
        raise UsageError(f"Directory '{save_path}' already exists")
    return path


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    progress = None
    try:
        args = parse_args(argv)
        out_root = validate_save_path(args.save_path)
        progress = Progress(enabled=not args.quiet)
        result = split_dump(args.dump_file, out_root, progress=progress)
    except SchemaSplitError as e:
        if progress is not None:
            progress.interrupt()
        print(f"Error: {e}", file=sys.stderr)
        return 1

    progress.message(
        f"Exported {len(result.exported)} objects to {result.root}"
        f" ({result.skipped} ownership statements skipped)"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
Schema comparer: list objects that differ between two exported schemas.

Both directories are outputs of split_schema.py; only their checksums.txt
manifests are read.

Run directly: python compare_schemas.py OLD_ROOT NEW_ROOT
"""

import argparse
import sys
from pathlib import Path

from pgdump_split.checksums import ChecksumDiff, compare_checksums, load_checksums


def format_diff(diff: ChecksumDiff) -> list[str]:
    """Render a diff as '+ name', '- name' and '~ name' lines."""
    lines = [f"+ {name}" for name in diff.added]
    lines.extend(f"- {name}" for name in diff.removed)
    lines.extend(f"~ {name}" for name in diff.changed)
    return lines


def compare_schema_dirs(old_root: Path, new_root: Path) -> ChecksumDiff:
    """Compare the checksum manifests of two exported schemas."""
    return compare_checksums(load_checksums(old_root), load_checksums(new_root))


def main(argv: list[str] | None = None) -> int:
    """Main entry point. Returns 0 if both schemas are identical, 1 otherwise."""
    parser = argparse.ArgumentParser(
        description="Compare two schemas exported by split_schema.py",
    )
    parser.add_argument("old_root", type=Path, help="Earlier export")
    parser.add_argument("new_root", type=Path, help="Later export")
    args = parser.parse_args(argv)

    try:
        diff = compare_schema_dirs(args.old_root, args.new_root)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    for line in format_diff(diff):
        print(line)

    if diff.is_empty():
        print("No differences")
        return 0
    return 1


if __name__ == "__main__":
    sys.exit(main())

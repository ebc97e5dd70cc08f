"""
Checksum manifest: write, read, verify and compare ``checksums.txt``.

Format, one line per object name, sorted by name:

    MD5 (users.sql) = 5d41402abc4b2a76b9719d911017c592
"""

import hashlib
import re
from dataclasses import dataclass, field
from pathlib import Path

from pgdump_split.config import CHECKSUMS_FILE, ENCODING, NAME_DIR


CHECKSUM_LINE_RE = re.compile(r"^MD5 \((?P<name>.+)\.sql\) = (?P<digest>[0-9a-f]{32})$")


@dataclass
class ChecksumDiff:
    """Difference between two checksum manifests."""
    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    changed: list[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        """Return True if both manifests describe the same objects."""
        return not (self.added or self.removed or self.changed)


def md5_hex(data: bytes) -> str:
    """Return the hex md5 of raw file bytes."""
    return hashlib.md5(data).hexdigest()


def format_checksums(checksums: dict[str, str]) -> str:
    """Render a name -> digest mapping as manifest text, sorted by name."""
    return "".join(
        f"MD5 ({name}.sql) = {checksums[name]}\n" for name in sorted(checksums)
    )


def parse_checksums(content: str) -> dict[str, str]:
    """
    Parse manifest text into a name -> digest mapping.

    Raises:
        ValueError: on a line that is not a checksum entry
    """
    checksums: dict[str, str] = {}
    for lineno, line in enumerate(content.splitlines(), start=1):
        if not line.strip():
            continue
        match = CHECKSUM_LINE_RE.match(line)
        if match is None:
            raise ValueError(f"Invalid checksum line {lineno}: {line!r}")
        checksums[match.group("name")] = match.group("digest")
    return checksums


def load_checksums(schema_root: Path) -> dict[str, str]:
    """Load ``checksums.txt`` from an exported schema directory."""
    content = (schema_root / CHECKSUMS_FILE).read_text(encoding=ENCODING)
    return parse_checksums(content)


def verify_checksums(schema_root: Path) -> list[str]:
    """
    Recompute digests of ``name/<name>.sql`` against the manifest.

    Args:
        schema_root: Exported schema directory

    Returns:
        Sorted names whose aggregate file is missing or has a different digest
    """
    mismatched = []
    for name, digest in load_checksums(schema_root).items():
        path = schema_root / NAME_DIR / f"{name}.sql"
        if not path.is_file() or md5_hex(path.read_bytes()) != digest:
            mismatched.append(name)
    return sorted(mismatched)


def compare_checksums(old: dict[str, str], new: dict[str, str]) -> ChecksumDiff:
    """
    Compare two manifests by object name.

    Args:
        old: Checksums of the earlier dump
        new: Checksums of the later dump

    Returns:
        ChecksumDiff with sorted name lists
    """
    return ChecksumDiff(
        added=sorted(set(new) - set(old)),
        removed=sorted(set(old) - set(new)),
        changed=sorted(name for name in set(old) & set(new) if old[name] != new[name]),
    )

"""
Body extractor: hide function bodies behind content-hash placeholders.

Function and procedure bodies are dollar-quoted (``AS $_$ ... $_$``) and may
contain anything, including semicolons. Before statements are tokenized each
body is replaced by the md5 of its content:

    AS $_$ BEGIN RETURN 1; END; $_$   ->   AS $_$<32 hex chars of md5>$_$

and the hash -> body mapping is kept so the tokenizer can put the original
text back into the statement it belongs to.
"""

import hashlib
import re
from dataclasses import dataclass, field

from pgdump_split.config import ENCODING, ENCODING_ERRORS, HASH_LENGTH
from pgdump_split.progress import Progress


DEFINITION_RE = re.compile(
    r"""
    AS\ (\$[^$]*\$)                    # 1: opening token, example: $_$
    ((?![0-9a-f]{%d}).*?)              # 2: body, unless it is already a hash
    \1                                 # closing token, same as 1
    """ % HASH_LENGTH,
    re.VERBOSE | re.DOTALL,
)

PLACEHOLDER_RE = re.compile(
    r"""
    AS\ (\$[^$]*\$)                    # 1: token
    ([0-9a-f]{%d})                     # 2: md5 of the body
    \1
    """ % HASH_LENGTH,
    re.VERBOSE,
)


@dataclass(frozen=True)
class ExtractedDump:
    """Dump text with bodies replaced by placeholders."""
    text: str
    placeholders: dict[str, str] = field(default_factory=dict)  # md5 -> body

    def reinline(self, body: str) -> str:
        """Replace placeholders in ``body`` with the original function bodies."""
        return reinline_bodies(body, self.placeholders)


def body_checksum(body: str) -> str:
    """Return the hex md5 of a function body."""
    return hashlib.md5(body.encode(ENCODING, ENCODING_ERRORS)).hexdigest()


def extract_bodies(text: str, progress: Progress | None = None) -> ExtractedDump:
    """
    Replace every dollar-quoted definition body with its md5.

    Bodies that already look like an md5 are left alone, so running the
    extractor on its own output is a no-op.

    Args:
        text: Raw dump text
        progress: Optional progress reporter, ticked once per body

    Returns:
        ExtractedDump with the rewritten text and the md5 -> body map
    """
    placeholders: dict[str, str] = {}

    def _replace(match: re.Match) -> str:
        token, body = match.group(1), match.group(2)
        checksum = body_checksum(body)
        placeholders[checksum] = body
        if progress is not None:
            progress.tick()
        return f"AS {token}{checksum}{token}"

    extracted = DEFINITION_RE.sub(_replace, text)
    return ExtractedDump(text=extracted, placeholders=placeholders)


def reinline_bodies(body: str, placeholders: dict[str, str]) -> str:
    """
    Put original function bodies back in place of their md5 placeholders.

    A hash with no entry in ``placeholders`` was part of the input itself and
    is kept as is.
    """
    def _restore(match: re.Match) -> str:
        token, checksum = match.group(1), match.group(2)
        if checksum not in placeholders:
            return match.group(0)
        return f"AS {token}{placeholders[checksum]}{token}"

    return PLACEHOLDER_RE.sub(_restore, body)

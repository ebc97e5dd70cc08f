"""
Residual validator: make sure the tokenizer consumed the whole dump.
"""

import re

from pgdump_split.errors import ParseResidualError


COMMENT_LINE_RE = re.compile(r"^--.*", re.MULTILINE)
WHITESPACE_RE = re.compile(r"\s+")


def slim_residual(residual: str) -> str:
    """Drop comment lines and all whitespace from leftover text."""
    residual = COMMENT_LINE_RE.sub("", residual)
    return WHITESPACE_RE.sub("", residual)


def validate_residual(residual: str) -> None:
    """
    Fail if anything other than comments and whitespace was left unparsed.

    Raises:
        ParseResidualError: with the slimmed leftover text
    """
    leftover = slim_residual(residual)
    if leftover:
        raise ParseResidualError(leftover)

"""
Error types raised while splitting a schema dump.

All of them are fatal: the CLI reports the message and exits non-zero.
"""


class SchemaSplitError(Exception):
    """Base class for all schema splitting errors."""


class UsageError(SchemaSplitError):
    """Bad command line: argument count, output root name, missing dump."""


class ParseResidualError(SchemaSplitError):
    """Content left over after all statements were tokenized."""

    def __init__(self, residual: str):
        self.residual = residual
        super().__init__(f"Unable to parse this: {residual}")


class FilesystemError(SchemaSplitError):
    """Directory, file or symlink creation failed during export."""

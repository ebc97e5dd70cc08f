"""
Statement tokenizer: peel top-level statements off the extracted dump text.

A statement starts at the beginning of a line with one or more uppercase
command words, names an object, and runs to the first semicolon that is not
inside a single-quoted string:

    ALTER TABLE ONLY public.users ADD CONSTRAINT users_pkey PRIMARY KEY (id);
    ^^^^^^^^^^^^^^^^ ^^^^^^^^^^^^                                           ^
    type             [schema.]name                                    terminator

The scan keeps a cursor into the text. Whatever lies between two statements
(comments, blank lines, or anything the grammar does not recognize) is
collected as residual for the residual validator.
"""

import re
from dataclasses import dataclass

from pgdump_split.body_extractor import ExtractedDump
from pgdump_split.progress import Progress


_STATEMENT = r"""
    (?P<command>[A-Z]+)                 # command, example: CREATE
    (?P<qualifiers>(?:\ [A-Z,]+)*)      # extra command words, example: TABLE
    \s
    (?:[a-z0-9_]+\.)?                   # schema, example: pg_catalog.
    (?P<quote>"?)                       # quoted name?
    (?P<name>[a-z0-9_]+)                # object name, example: users
    (?P=quote)
    (?:[^;']|'[^']*')*                  # definition, quoted semicolons allowed
    ;
"""

# Matches a statement exactly at the cursor
STATEMENT_AT_RE = re.compile(_STATEMENT, re.VERBOSE)
# Finds the next statement starting at a line start
STATEMENT_RE = re.compile(r"^" + _STATEMENT, re.VERBOSE | re.MULTILINE)


@dataclass(frozen=True)
class ObjectRecord:
    """One top-level statement of the dump."""
    name: str
    type: str  # command words joined by "_", example: CREATE_TABLE
    body: str  # full statement text, function bodies reinlined


@dataclass(frozen=True)
class TokenizeResult:
    """Records found by the tokenizer plus the text it did not consume."""
    records: tuple[ObjectRecord, ...]
    residual: str


def normalize_type(command: str, qualifiers: str) -> str:
    """Fold the command words into a type name: 'ALTER TABLE ONLY' -> 'ALTER_TABLE_ONLY'."""
    return (command + qualifiers).replace(" ", "_")


def find_statement(text: str, pos: int) -> re.Match | None:
    """
    Find the next statement at or after ``pos``.

    ``pos`` is either the start of the text or the end of the previous
    statement, and a statement may begin right there even when it shares a
    line with the previous one. Otherwise the statement must start a line.
    """
    match = STATEMENT_AT_RE.match(text, pos)
    if match is None:
        match = STATEMENT_RE.search(text, pos)
    return match


def tokenize_statements(
    extracted: ExtractedDump,
    progress: Progress | None = None,
) -> TokenizeResult:
    """
    Split extracted dump text into ObjectRecords.

    Never raises: text that no statement matches ends up in
    ``TokenizeResult.residual``.

    Args:
        extracted: Output of the body extractor
        progress: Optional progress reporter, ticked once per statement

    Returns:
        TokenizeResult with records in dump order
    """
    text = extracted.text
    records: list[ObjectRecord] = []
    residual_parts: list[str] = []
    pos = 0

    while True:
        match = find_statement(text, pos)
        if match is None:
            break

        residual_parts.append(text[pos:match.start()])
        records.append(
            ObjectRecord(
                name=match.group("name"),
                type=normalize_type(match.group("command"), match.group("qualifiers")),
                body=extracted.reinline(match.group(0)),
            )
        )
        pos = match.end()
        if progress is not None:
            progress.tick()

    residual_parts.append(text[pos:])
    return TokenizeResult(records=tuple(records), residual="".join(residual_parts))

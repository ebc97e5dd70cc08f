"""
Configuration defaults for schema splitting.
"""

import re

# Output root used when no second argument is given
DEFAULT_SAVE_PATH = "schema"
SAVE_PATH_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")

# Layout below the output root
CHANGES_DIR = "changes"
NAME_DIR = "name"
TYPE_DIR = "type"
CHECKSUMS_FILE = "checksums.txt"

ID_WIDTH = 6  # 000001-users.sql
PROGRESS_EVERY = 10  # one dot per N processed items
HASH_LENGTH = 32  # md5 hex digest

ENCODING = "utf-8"
# Undecodable bytes (LATIN1, SQL_ASCII dumps) survive the round trip
ENCODING_ERRORS = "surrogateescape"

#!/usr/bin/env python3
"""
Split a pg_dump -s schema dump into one file per object.

Run directly: python split_schema.py dump.sql [save_path]
"""

import sys

from pgdump_split.cli import main


if __name__ == "__main__":
    sys.exit(main())

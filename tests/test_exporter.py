"""
Unit tests for exporter module.
"""

import hashlib
import os

import pytest

from pgdump_split.errors import FilesystemError
from pgdump_split.exporter import (
    build_aggregates,
    export_objects,
    is_ownership_change,
    number_records,
    object_filename,
)
from pgdump_split.tokenizer import ObjectRecord


USERS = ObjectRecord(name="users", type="CREATE_TABLE", body="CREATE TABLE public.users (id int);")
USERS_OWNER = ObjectRecord(
    name="users", type="ALTER_TABLE", body="ALTER TABLE public.users OWNER TO postgres;"
)
USERS_PKEY = ObjectRecord(
    name="users",
    type="ALTER_TABLE_ONLY",
    body="ALTER TABLE ONLY public.users ADD CONSTRAINT users_pkey PRIMARY KEY (id);",
)
ORDERS = ObjectRecord(name="orders", type="CREATE_TABLE", body="CREATE TABLE public.orders (id int);")


@pytest.fixture
def records() -> list[ObjectRecord]:
    return [USERS, USERS_OWNER, ORDERS, USERS_PKEY]


class TestOwnership:
    """Tests for ownership statement detection."""

    def test_owner_to(self):
        """Test an OWNER TO statement."""
        assert is_ownership_change(USERS_OWNER)

    def test_regular_statement(self):
        """Test a statement that is not about ownership."""
        assert not is_ownership_change(USERS)

    def test_owner_not_at_end(self):
        """Test that OWNER TO must end the statement."""
        record = ObjectRecord(
            name="t", type="COMMENT_ON_TABLE", body="COMMENT ON TABLE t IS 'OWNER TO x; later';"
        )
        assert not is_ownership_change(record)


class TestNumbering:
    """Tests for ID assignment."""

    def test_object_filename(self):
        """Test zero padded file names."""
        assert object_filename(1, "users") == "000001-users.sql"
        assert object_filename(123456, "t") == "123456-t.sql"

    def test_ownership_skipped_without_gap(self, records):
        """Test that skipped records do not consume IDs."""
        numbered, skipped = number_records(records)
        assert skipped == 1
        assert numbered == [(1, USERS), (2, ORDERS), (3, USERS_PKEY)]


class TestBuildAggregates:
    """Tests for per-name and per-type aggregation."""

    def test_aggregates(self, records):
        """Test concatenation in dump order with newline separators."""
        numbered, _ = number_records(records)
        per_name, per_type = build_aggregates(numbered)
        assert per_name == {
            "users": USERS.body + "\n" + USERS_PKEY.body + "\n",
            "orders": ORDERS.body + "\n",
        }
        assert per_type == {
            "CREATE_TABLE": USERS.body + "\n" + ORDERS.body + "\n",
            "ALTER_TABLE_ONLY": USERS_PKEY.body + "\n",
        }


class TestExportObjects:
    """Tests for writing the directory layout."""

    def test_changes_files(self, tmp_path, records):
        """Test one file per retained object with the statement text."""
        root = tmp_path / "schema"
        export_objects(root, records)
        changes = sorted(p.name for p in (root / "changes").iterdir())
        assert changes == ["000001-users.sql", "000002-orders.sql", "000003-users.sql"]
        assert (root / "changes" / "000001-users.sql").read_text() == USERS.body

    def test_name_links(self, tmp_path, records):
        """Test relative symlinks grouped by name."""
        root = tmp_path / "schema"
        export_objects(root, records)
        link = root / "name" / "users" / "000003-users.sql"
        assert link.is_symlink()
        assert os.readlink(link) == os.path.join("..", "..", "changes", "000003-users.sql")
        assert link.read_text() == USERS_PKEY.body

    def test_type_links(self, tmp_path, records):
        """Test relative symlinks grouped by type then name."""
        root = tmp_path / "schema"
        export_objects(root, records)
        link = root / "type" / "CREATE_TABLE" / "orders" / "000002-orders.sql"
        assert link.is_symlink()
        assert os.readlink(link) == os.path.join("..", "..", "..", "changes", "000002-orders.sql")
        assert link.read_text() == ORDERS.body

    def test_aggregate_files(self, tmp_path, records):
        """Test name/<name>.sql and type/<type>.sql contents."""
        root = tmp_path / "schema"
        export_objects(root, records)
        assert (root / "name" / "users.sql").read_text() == USERS.body + "\n" + USERS_PKEY.body + "\n"
        assert (root / "type" / "CREATE_TABLE.sql").read_text() == USERS.body + "\n" + ORDERS.body + "\n"

    def test_ownership_excluded(self, tmp_path, records):
        """Test that ownership statements leave no trace."""
        root = tmp_path / "schema"
        export_objects(root, records)
        assert not (root / "type" / "ALTER_TABLE").exists()
        assert not (root / "type" / "ALTER_TABLE.sql").exists()
        assert "OWNER TO" not in (root / "name" / "users.sql").read_text()
        assert len(list((root / "name" / "users").iterdir())) == 2

    def test_checksums(self, tmp_path, records):
        """Test that checksums.txt matches the bytes of name/<name>.sql."""
        root = tmp_path / "schema"
        result = export_objects(root, records)
        lines = (root / "checksums.txt").read_text().splitlines()
        assert [line.split(" ")[1] for line in lines] == ["(orders.sql)", "(users.sql)"]
        for name in ("orders", "users"):
            digest = hashlib.md5((root / "name" / f"{name}.sql").read_bytes()).hexdigest()
            assert f"MD5 ({name}.sql) = {digest}" in lines
            assert result.checksums[name] == digest

    def test_result(self, tmp_path, records):
        """Test the returned export summary."""
        root = tmp_path / "schema"
        result = export_objects(root, records)
        assert result.root == root
        assert result.skipped == 1
        assert [object_id for object_id, _ in result.exported] == [1, 2, 3]

    def test_no_records(self, tmp_path):
        """Test exporting nothing still creates an empty manifest."""
        root = tmp_path / "schema"
        export_objects(root, [])
        assert (root / "checksums.txt").read_text() == ""
        assert not (root / "changes").exists()

    def test_existing_root(self, tmp_path, records):
        """Test that an existing output root is not overwritten."""
        root = tmp_path / "schema"
        root.mkdir()
        with pytest.raises(FilesystemError):
            export_objects(root, records)

    def test_missing_parent(self, tmp_path, records):
        """Test that the output root parent must exist."""
        with pytest.raises(FilesystemError):
            export_objects(tmp_path / "missing" / "schema", records)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

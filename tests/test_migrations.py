"""Tests for migration discovery in run_migrations.py."""

from run_migrations import (
    MIGRATIONS_DIR,
    checksum_of,
    discover_migrations,
    pending_migrations,
)


class TestDiscoverMigrations:
    def test_sorted_by_file_name(self, tmp_path):
        (tmp_path / "002_second.sql").write_text("select 2;")
        (tmp_path / "001_first.sql").write_text("select 1;")
        (tmp_path / "notes.txt").write_text("ignored")

        migrations = discover_migrations(tmp_path)

        assert [m.name for m in migrations] == ["001_first.sql", "002_second.sql"]
        assert migrations[0].checksum == checksum_of("select 1;")

    def test_missing_directory(self, tmp_path):
        assert discover_migrations(tmp_path / "nope") == []

    def test_shipped_migrations_present(self):
        names = [m.name for m in discover_migrations(MIGRATIONS_DIR)]
        assert "001_documents.sql" in names


class TestPendingMigrations:
    def test_skips_applied(self, tmp_path):
        (tmp_path / "001_first.sql").write_text("select 1;")
        (tmp_path / "002_second.sql").write_text("select 2;")
        migrations = discover_migrations(tmp_path)
        applied = {"001_first.sql": {"checksum": checksum_of("select 1;")}}

        assert [m.name for m in pending_migrations(migrations, applied)] == ["002_second.sql"]

    def test_changed_migration_not_rerun(self, tmp_path):
        (tmp_path / "001_first.sql").write_text("select 1; -- edited")
        migrations = discover_migrations(tmp_path)
        applied = {"001_first.sql": {"checksum": checksum_of("select 1;")}}

        assert pending_migrations(migrations, applied) == []

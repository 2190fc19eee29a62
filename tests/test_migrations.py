"""
Tests for the versioned schema migrator.
"""

import pytest
from sqlalchemy import DDL, create_engine, inspect

from fupisha.errors import SchemaMigrationError
from fupisha.store.sql import LATEST_VERSION, MIGRATIONS, Migration, Migrator


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'migrations.db'}")
    yield engine
    engine.dispose()


def table_names(engine):
    return set(inspect(engine).get_table_names())


class TestMigrator:
    """Test applying and reverting MIGRATIONS"""

    def test_versions_are_ascending(self):
        versions = [m.version for m in MIGRATIONS]
        assert versions == sorted(set(versions))
        assert LATEST_VERSION == versions[-1]

    def test_empty_database_has_version_zero(self, engine):
        assert Migrator(engine).schema_version() == 0

    def test_migrate_creates_schema(self, engine):
        migrator = Migrator(engine)

        migrator.migrate()

        assert table_names(engine) == {"schema_migrations", "users", "urls"}
        assert migrator.applied_versions() == {m.version for m in MIGRATIONS}
        assert migrator.schema_version() == LATEST_VERSION
        index_names = {i["name"] for i in inspect(engine).get_indexes("urls")}
        assert "ix_urls_owner_id" in index_names

    def test_migrate_twice_is_noop(self, engine):
        migrator = Migrator(engine)

        migrator.migrate()
        migrator.migrate()

        assert migrator.schema_version() == LATEST_VERSION

    def test_drop_removes_everything(self, engine):
        migrator = Migrator(engine)
        migrator.migrate()

        migrator.drop()

        assert table_names(engine) == set()
        assert migrator.schema_version() == 0

    def test_drop_on_empty_database(self, engine):
        Migrator(engine).drop()

        assert table_names(engine) == set()

    def test_reset_then_migrate(self, engine):
        migrator = Migrator(engine)
        migrator.migrate()

        migrator.reset()
        migrator.migrate()

        assert table_names(engine) == {"schema_migrations", "users", "urls"}
        assert migrator.schema_version() == LATEST_VERSION

    def test_only_pending_migrations_run(self, engine):
        first = Migration(1, "create a", (DDL("CREATE TABLE a (id INTEGER)"),), (DDL("DROP TABLE IF EXISTS a"),))
        second = Migration(2, "create b", (DDL("CREATE TABLE b (id INTEGER)"),), (DDL("DROP TABLE IF EXISTS b"),))

        Migrator(engine, [first]).migrate()
        # Unguarded CREATE TABLE a would fail if version 1 were replayed
        Migrator(engine, [first, second]).migrate()

        assert {"a", "b"} <= table_names(engine)
        assert Migrator(engine, [first, second]).schema_version() == 2

    def test_failure_aborts_remaining_statements(self, engine):
        broken = Migration(
            1,
            "broken",
            (
                DDL("CREATE TABLE before_failure (id INTEGER)"),
                DDL("CREATE TABLE broken ("),
                DDL("CREATE TABLE after_failure (id INTEGER)"),
            ),
            (),
        )
        migrator = Migrator(engine, [broken])

        with pytest.raises(SchemaMigrationError) as exc_info:
            migrator.migrate()

        assert exc_info.value.phase == "migrate"
        assert str(exc_info.value).startswith("migrating schema: ")
        names = table_names(engine)
        assert "before_failure" in names
        assert "after_failure" not in names
        assert migrator.applied_versions() == set()

    def test_drop_failure_is_wrapped(self, engine):
        broken = Migration(1, "broken drop", (), (DDL("DROP TABLE missing_table"),))

        with pytest.raises(SchemaMigrationError) as exc_info:
            Migrator(engine, [broken]).drop()

        assert exc_info.value.phase == "drop"
        assert exc_info.value.message == "dropping schema"

    def test_rejects_unordered_versions(self, engine):
        a = Migration(2, "a", (), ())
        b = Migration(1, "b", (), ())

        with pytest.raises(ValueError):
            Migrator(engine, [a, b])

"""
Versioned schema migrations.

Each migration is an ordered list of guarded DDL statements
(``IF NOT EXISTS`` / ``IF EXISTS``). Applied versions are recorded in the
``schema_migrations`` table, so a new schema change is a new Migration
appended to MIGRATIONS; existing entries are never edited.

Statements run one at a time, each in its own transaction. The first
failure aborts the run; earlier statements stay applied.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Set, Tuple

from sqlalchemy import (
    Column,
    DateTime,
    Integer,
    MetaData,
    String,
    Table,
    inspect,
    insert,
    select,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.schema import CreateIndex, CreateTable, DropIndex, DropTable, ExecutableDDLElement
from sqlalchemy.sql import func

from fupisha.errors import BackendError, SchemaMigrationError
from fupisha.logging_config import get_logger
from fupisha.models import URL, User

schema_migrations = Table(
    "schema_migrations",
    MetaData(),
    Column("version", Integer, primary_key=True, autoincrement=False),
    Column("description", String(255), nullable=False),
    Column("applied_at", DateTime(timezone=True), server_default=func.now(), nullable=False),
)


@dataclass(frozen=True)
class Migration:
    version: int
    description: str
    upgrade: Tuple[ExecutableDDLElement, ...]
    downgrade: Tuple[ExecutableDDLElement, ...]


def _index(table: Table, name: str):
    return next(index for index in table.indexes if index.name == name)


_url_owner_index = _index(URL.__table__, "ix_urls_owner_id")

MIGRATIONS: Tuple[Migration, ...] = (
    Migration(
        version=1,
        description="create users table",
        upgrade=(CreateTable(User.__table__, if_not_exists=True),),
        downgrade=(DropTable(User.__table__, if_exists=True),),
    ),
    Migration(
        version=2,
        description="create urls table",
        upgrade=(
            CreateTable(URL.__table__, if_not_exists=True),
            CreateIndex(_url_owner_index, if_not_exists=True),
        ),
        downgrade=(
            DropIndex(_url_owner_index, if_exists=True),
            DropTable(URL.__table__, if_exists=True),
        ),
    ),
)

LATEST_VERSION = MIGRATIONS[-1].version


class Migrator:
    """Applies and reverts MIGRATIONS against one engine."""

    def __init__(
        self,
        engine: Engine,
        migrations: Sequence[Migration] = MIGRATIONS,
        logger: Optional[logging.Logger] = None
    ):
        versions = [m.version for m in migrations]
        if versions != sorted(set(versions)):
            raise ValueError(f"migration versions must be unique and ascending: {versions}")

        self.engine = engine
        self.migrations = tuple(migrations)
        self.logger = logger or get_logger()

    def migrate(self) -> None:
        """
        Apply every migration not yet recorded, in version order.

        Raises:
            SchemaMigrationError: phase "migrate", wrapping the failing statement's error
        """
        try:
            self._execute(CreateTable(schema_migrations, if_not_exists=True))
            applied = self.applied_versions()
            for migration in self.migrations:
                if migration.version in applied:
                    continue
                for statement in migration.upgrade:
                    self._execute(statement)
                self._record(migration)
                self.logger.info(
                    "applied migration %d: %s", migration.version, migration.description
                )
        except SQLAlchemyError as e:
            raise SchemaMigrationError("migrating schema", phase="migrate", cause=e) from e

    def drop(self) -> None:
        """
        Run every downgrade in reverse order, then forget all versions.

        Raises:
            SchemaMigrationError: phase "drop"
        """
        try:
            for migration in reversed(self.migrations):
                for statement in migration.downgrade:
                    self._execute(statement)
            self._execute(DropTable(schema_migrations, if_exists=True))
        except SQLAlchemyError as e:
            raise SchemaMigrationError("dropping schema", phase="drop", cause=e) from e
        self.logger.warning("dropped schema")

    def reset(self) -> None:
        self.drop()
        self.migrate()

    def applied_versions(self) -> Set[int]:
        with self.engine.connect() as conn:
            return set(conn.execute(select(schema_migrations.c.version)).scalars())

    def schema_version(self) -> int:
        """Highest applied migration version, 0 for an empty database."""
        try:
            if not inspect(self.engine).has_table(schema_migrations.name):
                return 0
            return max(self.applied_versions(), default=0)
        except SQLAlchemyError as e:
            raise BackendError("reading schema version", e) from e

    def _execute(self, statement: ExecutableDDLElement) -> None:
        self.logger.debug("executing %s", type(statement).__name__)
        with self.engine.begin() as conn:
            conn.execute(statement)

    def _record(self, migration: Migration) -> None:
        with self.engine.begin() as conn:
            conn.execute(
                insert(schema_migrations).values(
                    version=migration.version,
                    description=migration.description,
                )
            )

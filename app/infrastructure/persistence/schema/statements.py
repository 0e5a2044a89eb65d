"""Additive DDL statements.

Each statement knows how to apply itself to a synchronous connection
(run through AsyncConnection.run_sync) and is a no-op when the object
already exists. Statements are built from SQLAlchemy metadata, so the same
statement renders correctly for PostgreSQL and SQLite.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import Column, Index, Table, inspect
from sqlalchemy.engine import Connection
from sqlalchemy.types import TypeEngine


class SchemaStatement(ABC):
    """Base class: a named, idempotent, additive schema operation."""

    name: str

    @abstractmethod
    def apply(self, conn: Connection) -> None:
        """Apply to a synchronous connection; no-op when already present."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.name}>"


class CreateTable(SchemaStatement):
    """CREATE TABLE (with its indexes) unless the table exists."""

    def __init__(self, table: Table) -> None:
        self.table = table
        self.name = f"create-table:{table.name}"

    def apply(self, conn: Connection) -> None:
        self.table.create(conn, checkfirst=True)


class CreateIndex(SchemaStatement):
    """CREATE INDEX unless an index with that name exists."""

    def __init__(self, index: Index) -> None:
        self.index = index
        self.name = f"create-index:{index.name}"

    def apply(self, conn: Connection) -> None:
        self.index.create(conn, checkfirst=True)


@dataclass
class AddColumn(SchemaStatement):
    """ALTER TABLE ADD COLUMN unless the column exists.

    The column is rebuilt on every apply: a Column object can belong to a
    single table only.
    """

    table_name: str
    column_name: str
    type_: TypeEngine[Any]
    nullable: bool = True
    server_default: str | None = None
    name: str = field(init=False)

    def __post_init__(self) -> None:
        self.name = f"add-column:{self.table_name}.{self.column_name}"

    def apply(self, conn: Connection) -> None:
        existing = {c["name"] for c in inspect(conn).get_columns(self.table_name)}
        if self.column_name in existing:
            return
        column = Column(
            self.column_name,
            self.type_,
            nullable=self.nullable,
            server_default=self.server_default,
        )
        Operations(MigrationContext.configure(conn)).add_column(self.table_name, column)

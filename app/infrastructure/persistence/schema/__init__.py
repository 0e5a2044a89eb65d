"""Additive schema convergence: statements, named statement sets and the engine."""

from app.infrastructure.persistence.schema.catalog import (
    BRANCH_BASELINE,
    BRANCH_OPTIONAL_TABLES,
    BRANCH_REQUIRED_TABLES,
    CONTROL_PLANE,
    PRIMARY_FULL,
    SET_BRANCH_BASELINE,
    SET_PRIMARY_FULL,
    SET_SETTINGS_TABLE,
    SET_SHARED_FORUM,
    SET_TENANT_FORUM,
    SETTINGS_TABLE,
    SHARED_FORUM,
    TENANT_DIRECTORY_COLUMNS,
    TENANT_FORUM,
    StatementSet,
)
from app.infrastructure.persistence.schema.engine import SchemaEvolutionEngine
from app.infrastructure.persistence.schema.statements import (
    AddColumn,
    CreateIndex,
    CreateTable,
    SchemaStatement,
)

__all__ = [
    "AddColumn",
    "BRANCH_BASELINE",
    "BRANCH_OPTIONAL_TABLES",
    "BRANCH_REQUIRED_TABLES",
    "CONTROL_PLANE",
    "CreateIndex",
    "CreateTable",
    "PRIMARY_FULL",
    "SET_BRANCH_BASELINE",
    "SET_PRIMARY_FULL",
    "SET_SETTINGS_TABLE",
    "SET_SHARED_FORUM",
    "SET_TENANT_FORUM",
    "SETTINGS_TABLE",
    "SHARED_FORUM",
    "SchemaEvolutionEngine",
    "SchemaStatement",
    "StatementSet",
    "TENANT_DIRECTORY_COLUMNS",
    "TENANT_FORUM",
]

"""SchemaEvolutionEngine against fresh and partially migrated SQLite datasets."""

import pytest
from sqlalchemy import Column, Integer, MetaData, String, Table, inspect, text

from app.infrastructure.persistence.schema import (
    BRANCH_BASELINE,
    BRANCH_REQUIRED_TABLES,
    SET_BRANCH_BASELINE,
    AddColumn,
    CreateTable,
    SchemaEvolutionEngine,
    SchemaStatement,
)


async def _tables(handle) -> set[str]:
    async with handle.engine.connect() as conn:
        return set(await conn.run_sync(lambda c: inspect(c).get_table_names()))


async def _columns(handle, table: str) -> set[str]:
    async with handle.engine.connect() as conn:
        return {
            col["name"]
            for col in await conn.run_sync(lambda c: inspect(c).get_columns(table))
        }


async def test_baseline_on_empty_branch_creates_required_tables(services) -> None:
    engine = SchemaEvolutionEngine()
    handle = services.registry.open_direct(5, "db://branch-5")

    result = await engine.ensure(handle, BRANCH_BASELINE, set_name=SET_BRANCH_BASELINE)

    assert result.converged
    assert not result.cached
    assert BRANCH_REQUIRED_TABLES <= await _tables(handle)
    assert engine.is_converged("db://branch-5", SET_BRANCH_BASELINE)


async def test_converged_set_is_skipped(services) -> None:
    engine = SchemaEvolutionEngine()
    handle = services.registry.open_direct(5, "db://branch-5")
    await engine.ensure(handle, BRANCH_BASELINE, set_name=SET_BRANCH_BASELINE)

    again = await engine.ensure(handle, BRANCH_BASELINE, set_name=SET_BRANCH_BASELINE)

    assert again.cached
    assert again.applied == []


async def test_rerun_on_converged_dataset_is_a_no_op(services) -> None:
    """A new engine (no memory) re-applies every statement without error."""
    handle = services.registry.open_direct(5, "db://branch-5")
    await SchemaEvolutionEngine().ensure(handle, BRANCH_BASELINE)

    result = await SchemaEvolutionEngine().ensure(handle, BRANCH_BASELINE)

    assert result.converged
    assert len(result.applied) == len(BRANCH_BASELINE)


async def test_late_columns_added_to_old_tables(services) -> None:
    handle = services.registry.open_direct(5, "db://branch-5")
    async with handle.engine.begin() as conn:
        await conn.execute(
            text("CREATE TABLE profiles (id VARCHAR PRIMARY KEY, username VARCHAR, tenant_id INTEGER)")
        )

    result = await SchemaEvolutionEngine().ensure(handle, BRANCH_BASELINE)

    assert result.converged
    assert {"uid", "points"} <= await _columns(handle, "profiles")
    assert "add-column:profiles.uid" in result.applied


async def test_failing_statement_does_not_block_the_rest(services) -> None:
    metadata = MetaData()
    good = Table("good_table", metadata, Column("id", Integer, primary_key=True))
    statements = (
        AddColumn("missing_table", "note", String()),
        CreateTable(good),
    )
    engine = SchemaEvolutionEngine()
    handle = services.registry.open_direct(5, "db://branch-5")

    result = await engine.ensure(handle, statements, set_name="adhoc")

    assert not result.converged
    assert "add-column:missing_table.note" in result.failed
    assert result.applied == ["create-table:good_table"]
    assert "good_table" in await _tables(handle)
    assert not engine.is_converged("db://branch-5", "adhoc")


async def test_forget_drops_convergence_memory(services) -> None:
    engine = SchemaEvolutionEngine()
    handle = services.registry.open_direct(5, "db://branch-5")
    await engine.ensure(handle, BRANCH_BASELINE, set_name=SET_BRANCH_BASELINE)

    engine.forget("db://branch-5")

    assert not engine.is_converged("db://branch-5", SET_BRANCH_BASELINE)


def test_statement_without_apply_cannot_be_built() -> None:
    class Unfinished(SchemaStatement):
        name = "unfinished"

    with pytest.raises(TypeError):
        Unfinished()
    with pytest.raises(TypeError):
        SchemaStatement()

"""Single-statement insert-or-update keyed on a unique constraint."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, TypeVar

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from whattowatch.db.session import Base

ModelT = TypeVar("ModelT", bound=Base)

_DIALECT_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


def upsert(
    db: Session,
    model: type[ModelT],
    values: Mapping[str, Any],
    *,
    conflict_columns: Sequence[str],
    update_columns: Sequence[str],
) -> ModelT:
    """Insert ``values`` or overwrite ``update_columns`` on the row sharing the key.

    The conflict is resolved by the database in one ``INSERT ... ON CONFLICT``
    statement, so concurrent writers on the same key never race. The returned
    instance reflects the stored row. The caller owns the commit.
    """
    dialect = db.get_bind().dialect.name
    try:
        insert = _DIALECT_INSERTS[dialect]
    except KeyError:
        raise NotImplementedError(f"Upsert is not supported on {dialect}") from None

    stmt = insert(model).values(**values)
    stmt = stmt.on_conflict_do_update(
        index_elements=list(conflict_columns),
        set_={column: stmt.excluded[column] for column in update_columns},
    )
    return db.scalars(
        stmt.returning(model),
        execution_options={"populate_existing": True},
    ).one()

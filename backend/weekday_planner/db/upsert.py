"""Key-based upserts enforced by the database's uniqueness constraints."""
from __future__ import annotations

from typing import Any, Dict, Mapping, Sequence

from sqlalchemy.orm import Session


def _insert_for(db: Session):
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    elif dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    else:  # pragma: no cover - only the two supported backends
        raise NotImplementedError(f"Upsert is not supported on {dialect}")
    return insert


def upsert(
    db: Session,
    model,
    values: Mapping[str, Any],
    *,
    conflict_columns: Sequence[str],
    update_values: Dict[str, Any] | None = None,
) -> None:
    """
    INSERT ... ON CONFLICT (conflict_columns) DO UPDATE.

    Columns in ``values`` other than the conflict key are overwritten from the
    proposed row; ``update_values`` adds explicit assignments such as
    ``updated_at=func.now()``.
    """
    insert = _insert_for(db)
    stmt = insert(model).values(**values)
    assignments: Dict[str, Any] = {
        key: stmt.excluded[key] for key in values if key not in conflict_columns
    }
    assignments.update(update_values or {})
    stmt = stmt.on_conflict_do_update(index_elements=list(conflict_columns), set_=assignments)
    db.execute(stmt)


def insert_ignore(db: Session, model, values: Mapping[str, Any], *, conflict_columns: Sequence[str]) -> None:
    """INSERT ... ON CONFLICT DO NOTHING (first writer wins)."""
    insert = _insert_for(db)
    stmt = insert(model).values(**values).on_conflict_do_nothing(index_elements=list(conflict_columns))
    db.execute(stmt)

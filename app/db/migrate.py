"""Tiny home-grown migration helpers for SQLite databases created by older builds."""

from __future__ import annotations

from typing import Iterable

from sqlalchemy import text
from sqlalchemy.engine import Engine

# Simple, idempotent, additive migrations. Columns are only ever added, never dropped.


def _table_columns(engine: Engine, table: str) -> list[dict[str, object]]:
    """Fetch SQLite's description of a table so we know what columns exist."""

    with engine.connect() as conn:
        return conn.execute(text(f"PRAGMA table_info({table})")).mappings().all()


def _column_names(engine: Engine, table: str) -> set[str]:
    return {record["name"] for record in _table_columns(engine, table)}


def _add_column_sqlite(engine: Engine, table: str, col_def: str) -> None:
    """ALTER TABLE ADD COLUMN helper."""
    with engine.begin() as conn:
        conn.execute(text(f"ALTER TABLE {table} ADD COLUMN {col_def}"))


def _create_index_if_not_exists(engine: Engine, table: str, name: str, cols: Iterable[str], unique: bool = False) -> None:
    cols_sql = ", ".join(cols)
    unique_sql = "UNIQUE " if unique else ""
    with engine.begin() as conn:
        conn.execute(text(f"CREATE {unique_sql}INDEX IF NOT EXISTS {name} ON {table} ({cols_sql})"))


def _ensure_columns(engine: Engine, table: str, needed: dict[str, str]) -> bool:
    """Add any missing columns; returns False when the table does not exist yet."""

    existing = _column_names(engine, table)
    if not existing:
        return False
    for name, dtype in needed.items():
        if name not in existing:
            _add_column_sqlite(engine, table, f"{name} {dtype}")
    return True


def run_migrations(engine: Engine) -> None:
    """Bring an existing SQLite schema up to date with the models."""

    if engine.dialect.name != "sqlite":
        return

    if _ensure_columns(
        engine,
        "purchases",
        {
            "vendor_name": "TEXT DEFAULT '' NOT NULL",
            "created_by": "TEXT",
            "updated_by": "TEXT",
            "updated_at": "TEXT",
        },
    ):
        _create_index_if_not_exists(engine, "purchases", "ix_purchases_purchase_id_unique", ["purchase_id"], unique=True)

    if _ensure_columns(
        engine,
        "sales",
        {
            "list_unit_price": "REAL",
            "discount_percent": "REAL DEFAULT 0 NOT NULL",
            "created_by": "TEXT",
            "updated_by": "TEXT",
            "updated_at": "TEXT",
        },
    ):
        # Older rows only stored the realised price.
        with engine.begin() as conn:
            conn.execute(text("UPDATE sales SET list_unit_price = unit_price WHERE list_unit_price IS NULL"))
        _create_index_if_not_exists(engine, "sales", "ix_sales_sale_id_unique", ["sale_id"], unique=True)

    _ensure_columns(engine, "items", {"updated_at": "TEXT"})

"""
Database-side stock guard.

The services keep ``available_quantity`` inside ``[0, quantity]`` on their
own; this trigger is a second line against rows edited outside the API
(manual SQL, migrations).  Only dialects with a known trigger body get one.
"""
from sqlalchemy import text

from books_service.extensions import db

SQLITE_STOCK_GUARD = r"""
CREATE TRIGGER IF NOT EXISTS trg_books_stock_guard
AFTER UPDATE OF quantity, available_quantity ON books
FOR EACH ROW
WHEN NEW.available_quantity < 0 OR NEW.available_quantity > NEW.quantity
BEGIN
    UPDATE books
    SET available_quantity =
        CASE
            WHEN NEW.available_quantity < 0 THEN 0
            ELSE NEW.quantity
        END
    WHERE id = NEW.id;
END
"""

STOCK_GUARDS = {
    "sqlite": SQLITE_STOCK_GUARD,
}


def ensure_db_objects(app) -> bool:
    """Create the stock guard for the bound engine's dialect; returns whether one was installed."""
    dialect = db.engine.dialect.name
    ddl = STOCK_GUARDS.get(dialect)
    if ddl is None:
        app.logger.info(f"[db_objects] No stock guard for dialect {dialect!r}, skipped.")
        return False

    try:
        with db.engine.begin() as conn:
            conn.execute(text(ddl))
    except Exception as e:
        app.logger.error(f"[db_objects] Stock guard could not be created: {e}")
        raise
    app.logger.info(f"[db_objects] Stock guard ensured ({dialect}).")
    return True

from sqlalchemy import event
from sqlalchemy.dialects import postgresql, sqlite

from cafe_app.extensions import db

# Dialects whose INSERT supports ON CONFLICT upserts
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def upsert_insert(model):
    """
    Build a dialect INSERT for ``model`` that accepts ``on_conflict_do_update``
    and ``on_conflict_do_nothing``.

    The conflict target must be a unique constraint on the table.
    """
    dialect = db.session.get_bind().dialect.name
    try:
        insert = _UPSERT_INSERTS[dialect]
    except KeyError:
        raise RuntimeError(f"Upsert is not supported on the '{dialect}' dialect")
    return insert(model.__table__)


def enable_sqlite_foreign_keys(app):
    """SQLite checks foreign keys only when asked to, once per connection."""
    with app.app_context():
        engine = db.engine
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def _foreign_keys_on(dbapi_conn, _record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

from threading import Lock

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import declarative_base, sessionmaker

from wastecollect.core import config


def _connect_args(database_url: str) -> dict:
    if database_url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    config.DATABASE_URL,
    connect_args=_connect_args(config.DATABASE_URL),
    pool_pre_ping=True,
)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_pickup_schema_checked = False


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def ensure_pickup_schema(bind=None) -> None:
    """Bring a ``pickups`` table created by an older release up to date.

    Early deployments stored only the waste type, address and status. Columns
    added since then are created in place; existing rows keep NULLs.
    """
    global _pickup_schema_checked

    if _pickup_schema_checked:
        return

    bind = bind or engine

    with _schema_lock:
        if _pickup_schema_checked:
            return

        inspector = inspect(bind)

        if 'pickups' not in inspector.get_table_names():
            _pickup_schema_checked = True
            return

        existing_columns = {column['name'] for column in inspector.get_columns('pickups')}
        migration_steps = [
            ('requested_by_id', 'ALTER TABLE pickups ADD COLUMN requested_by_id INTEGER REFERENCES users(id)'),
            ('created_at', 'ALTER TABLE pickups ADD COLUMN created_at TIMESTAMP'),
            ('completed_at', 'ALTER TABLE pickups ADD COLUMN completed_at TIMESTAMP'),
        ]

        with bind.begin() as connection:
            for column_name, statement in migration_steps:
                if column_name not in existing_columns:
                    connection.execute(text(statement))
            connection.execute(
                text('CREATE INDEX IF NOT EXISTS ix_pickups_status ON pickups(status)')
            )

        _pickup_schema_checked = True

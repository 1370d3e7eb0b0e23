"""
Database configuration
"""
from pathlib import Path
from sqlalchemy import inspect
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel, create_engine
from core.config import get_settings
from core.exceptions import SchemaError
from core.logger import logger

# Registers the storage table on SQLModel.metadata
from api.files.models import FileRecord, STORAGE_COLUMNS

# Create engine lazily to allow test configuration to be applied
_engine = None


def _sqlite_connect_args(uri: str) -> dict:
    """
    Make sure the directory of a SQLite database file exists and
    allow pooled connections to be used from FastAPI's threadpool.
    """
    url = make_url(uri)
    if url.get_backend_name() != "sqlite":
        return {}
    if url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    return {"check_same_thread": False}


def get_engine() -> Engine:
    """
    Get or create the database engine.
    This lazy initialization allows test settings to be applied properly.
    """
    global _engine
    if _engine is None:
        uri = str(get_settings().SQLALCHEMY_DATABASE_URI)
        _engine = create_engine(
            uri, echo=False, connect_args=_sqlite_connect_args(uri)
        )
    return _engine


def reset_engine():
    """
    Reset the engine to None.
    This is useful for tests that need to switch between different settings.
    """
    global _engine
    if _engine is not None:
        _engine.dispose()
    _engine = None


def ensure_schema(engine: Engine) -> None:
    """
    Create the storage table if it does not exist, then check that
    an existing table has every expected column.

    Raises:
        SchemaError: if the database is unreachable, the statement is
            rejected or the existing table is missing columns
    """
    table_name = FileRecord.__tablename__
    try:
        SQLModel.metadata.create_all(engine, tables=[FileRecord.__table__])
        columns = {
            column["name"].lower()
            for column in inspect(engine).get_columns(table_name)
        }
    except SQLAlchemyError as e:
        raise SchemaError(f"Could not create table '{table_name}': {e}") from e

    missing = [name for name in STORAGE_COLUMNS if name not in columns]
    if missing:
        raise SchemaError(
            f"Table '{table_name}' is missing columns: {', '.join(missing)}",
            details={"missing": missing},
        )


def create_db_and_tables():
    """Create the storage table on the configured database"""
    logger.info("Ensuring table '%s' exists", FileRecord.__tablename__)
    ensure_schema(get_engine())

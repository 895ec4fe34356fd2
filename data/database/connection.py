"""Database connection and session management."""
import time
import uuid
from datetime import datetime, timezone
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import sessionmaker
from sqlalchemy.exc import OperationalError
from src.config import settings
from src.logging_config import get_logger

logger = get_logger("db")


def build_engine(database_url: str) -> Engine:
    """Create an engine for ``database_url``; SQLite gets thread-safe connect args."""
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            echo=False
        )
    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
        echo=False  # Set to True for SQL query logging
    )


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE and FK violations unless asked
    if dbapi_connection.__class__.__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# Create database engine
engine = build_engine(settings.database_url)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for models
Base = declarative_base()


def utcnow() -> datetime:
    """Timezone-aware UTC timestamp used for created_at/updated_at columns."""
    return datetime.now(timezone.utc)


def new_uuid() -> str:
    """Primary key generator for string UUID columns."""
    return str(uuid.uuid4())


# Retry configuration
MAX_RETRIES = 3
RETRY_DELAY_SECONDS = 1


def get_db_session():
    """
    Get a database session with retry logic.
    Retries up to 3 times on connection failure.
    """
    last_error = None

    for attempt in range(MAX_RETRIES):
        db = SessionLocal()
        try:
            # Test the connection with a simple query
            db.execute(text("SELECT 1"))
            return db
        except OperationalError as e:
            db.close()
            last_error = e
            if attempt < MAX_RETRIES - 1:
                logger.warning(
                    "Connection attempt %d failed, retrying in %ss...",
                    attempt + 1, RETRY_DELAY_SECONDS
                )
                time.sleep(RETRY_DELAY_SECONDS)
            else:
                logger.error("All %d connection attempts failed", MAX_RETRIES)

    raise last_error


def get_db():
    """Dependency for getting database session with retry logic."""
    db = get_db_session()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    """Create all tables known to the models package."""
    # Models register themselves on Base when imported
    from data.database import auth_models, contact_models, product_model, profile_model, review_model  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)

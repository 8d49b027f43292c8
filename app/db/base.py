import logging
from datetime import datetime, timezone

from sqlalchemy import create_engine, text
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base, sessionmaker

from app.core.config import settings

logger = logging.getLogger(__name__)


def get_utc_datetime():
    """Current time in UTC"""
    return datetime.now(timezone.utc)


def _engine_options(uri: str) -> dict:
    if uri.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_size": 10,
        "max_overflow": 20,
        "pool_recycle": 3600,
    }


# Database engine
engine = create_engine(
    settings.SQLALCHEMY_DATABASE_URI,
    pool_pre_ping=True,
    echo=False,
    **_engine_options(settings.SQLALCHEMY_DATABASE_URI)
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def _ensure_mysql_database(uri: str) -> None:
    """Create the MySQL database named in the URI if it does not exist yet"""
    url = make_url(uri)
    db_name = url.database
    if not db_name:
        return

    server_engine = create_engine(url.set(database=None))
    try:
        with server_engine.connect() as connection:
            result = connection.execute(text("SHOW DATABASES LIKE :name"), {"name": db_name})
            if not result.fetchone():
                connection.execute(text(
                    f"CREATE DATABASE `{db_name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
                ))
                logger.info(f"Database {db_name} created")
            else:
                logger.info(f"Database {db_name} already exists")
    finally:
        server_engine.dispose()


def init_db():
    """
    Initialize the database: create it (MySQL only) and all missing tables
    """
    if not settings.CREATE_TABLES:
        logger.info("Automatic table creation is disabled")
        return

    # Register models on Base.metadata
    from app.models import product  # noqa: F401

    db_uri = settings.SQLALCHEMY_DATABASE_URI
    try:
        if db_uri.startswith("mysql"):
            _ensure_mysql_database(db_uri)

        Base.metadata.create_all(bind=engine)
        logger.info("All tables created or already present")
    except Exception as e:
        logger.error(f"Database initialization failed: {str(e)}")
        raise

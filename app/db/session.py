from typing import Generator

from sqlalchemy.orm import Session

from app.db.base import SessionLocal


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency

    Yields one session per request and closes it afterwards
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

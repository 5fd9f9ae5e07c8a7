"""FastAPI dependencies for database access and linking capabilities."""

from typing import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from connected_accounts.core.feature_flags import SettingsFeatureFlags
from connected_accounts.db.enums import MessageQueue
from connected_accounts.db.session import SessionLocal
from connected_accounts.services.data_source_service import SqlAlchemyDataStore
from connected_accounts.services.job_queue import DatabaseJobQueue


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.

    Yields a database session and ensures it's closed after the request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_data_store(db: Session = Depends(get_db)) -> SqlAlchemyDataStore:
    return SqlAlchemyDataStore(db)


def get_feature_flags() -> SettingsFeatureFlags:
    return SettingsFeatureFlags()


def get_messaging_queue(db: Session = Depends(get_db)) -> DatabaseJobQueue:
    return DatabaseJobQueue(db, MessageQueue.MESSAGING)


def get_calendar_queue(db: Session = Depends(get_db)) -> DatabaseJobQueue:
    return DatabaseJobQueue(db, MessageQueue.CALENDAR)

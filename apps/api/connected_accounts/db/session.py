from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker

from connected_accounts.core.config import Settings, settings


def create_engine_for_url(url: str, app_settings: Settings = settings) -> Engine:
    """Build an engine for a database URL, applying pool settings where supported."""
    parsed = make_url(url)
    backend = parsed.get_backend_name()

    connect_args: dict = {}
    engine_kwargs: dict = {"pool_pre_ping": True}

    if backend.startswith("postgresql"):
        connect_args["options"] = "-c timezone=utc"
        engine_kwargs.update(
            pool_size=app_settings.DB_POOL_SIZE,
            max_overflow=app_settings.DB_MAX_OVERFLOW,
            pool_timeout=app_settings.DB_POOL_TIMEOUT,
            pool_recycle=app_settings.DB_POOL_RECYCLE,
        )
    elif backend == "sqlite":
        connect_args["check_same_thread"] = False

    engine = create_engine(url, connect_args=connect_args, **engine_kwargs)

    if backend == "sqlite":
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, _record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys = ON")
            cursor.close()

    return engine


def create_engine_with_settings(app_settings: Settings) -> Engine:
    return create_engine_for_url(app_settings.DATABASE_URL, app_settings)


engine = create_engine_with_settings(settings)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# user_service/database.py

import logging
from pathlib import Path
from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker, Session
from user_service.config import Settings
from user_service.models import Base


logger = logging.getLogger(__name__)


def build_engine(settings: Settings) -> Engine:
    """
    Creates the pooled engine for the configured database.
    Credentials from the settings override the ones embedded in the URL.
    """
    url = make_url(settings.database_url)
    if settings.database_user:
        url = url.set(username=settings.database_user)
    if settings.database_password:
        url = url.set(password=settings.database_password)

    if settings.is_sqlite:
        if url.database and url.database != ":memory:":
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)
        engine = create_engine(url, connect_args={"check_same_thread": False})
    else:
        engine = create_engine(
            url,
            pool_size=settings.database_pool_size,
            max_overflow=0,
            pool_pre_ping=True,
        )

    logger.info("Database engine created for %s", url.render_as_string(hide_password=True))
    return engine


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine
    )


def init_db(engine: Engine):
    Base.metadata.create_all(bind=engine)


def get_db(request: Request):
    db: Session = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()

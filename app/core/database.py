import logging
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker, declarative_base

logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    """Handle vers le Task Store: engine + fabrique de sessions.

    Ouvert au démarrage de l'app (lifespan) et fermé à l'arrêt.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self.engine: Optional[Engine] = None
        self.SessionLocal: Optional[sessionmaker] = None

    def connect(self) -> None:
        if self.engine is not None:
            return
        connect_args = {}
        if self.url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine = create_engine(self.url, echo=self.echo, connect_args=connect_args)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

        # Init DB
        from app.models import task, user  # noqa: F401
        Base.metadata.create_all(bind=self.engine)
        logger.info("Database connected (%s)", self.engine.url.render_as_string(hide_password=True))

    def dispose(self) -> None:
        if self.engine is None:
            return
        self.engine.dispose()
        self.engine = None
        self.SessionLocal = None
        logger.info("Database connection closed")

    def session(self) -> Session:
        if self.SessionLocal is None:
            raise RuntimeError("Database is not connected")
        return self.SessionLocal()


def get_db(request: Request) -> Iterator[Session]:
    """Dépendance sessionDB"""
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()

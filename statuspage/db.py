from __future__ import annotations

from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

# Base para los modelos ORM
Base = declarative_base()


def _on_sqlite_connect(dbapi_connection, _record) -> None:
    # SQLite ignora ON DELETE CASCADE si no se activa por conexión
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str, *, echo: bool = False) -> Engine:
    """
    Crea el engine. No se guarda en ningún global: quien lo crea (lifespan de la
    app, alembic, scripts) es responsable de hacer dispose().
    """
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url:
            kwargs["poolclass"] = StaticPool
        engine = create_engine(database_url, future=True, echo=echo, **kwargs)
        event.listen(engine, "connect", _on_sqlite_connect)
        return engine

    return create_engine(
        database_url,
        future=True,
        echo=echo,
        pool_pre_ping=True,
    )


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
        expire_on_commit=False,
    )


# Dependencia para usar en FastAPI
def get_db(request: Request) -> Iterator[Session]:
    db: Session = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()

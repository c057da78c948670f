# infra/db/base.py
from __future__ import annotations
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy import create_engine
import os

from infra.path import default_db_path

Base = declarative_base()


def resolve_db_url() -> str:
    """WA_DB_URL wins; otherwise the SQLite file in the per-user data dir."""
    override = (os.getenv("WA_DB_URL") or "").strip()
    if override:
        return override
    db_path = default_db_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{db_path.as_posix()}"


def make_engine(db_url: str):
    connect_args = {}
    if db_url.startswith("sqlite"):
        # read adapters are called from the fetch thread pool
        connect_args["check_same_thread"] = False
    return create_engine(db_url, echo=False, future=True, connect_args=connect_args)


def make_session_factory(db_url: str | None = None) -> sessionmaker:
    """Engine and session factory are built on demand; importing this module opens nothing."""
    engine = make_engine(db_url or resolve_db_url())
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)

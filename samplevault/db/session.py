from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from samplevault.db.config import DatabaseSettings

settings = DatabaseSettings()


class DatabaseManager:
    def __init__(self, url: str | None = None):
        url = url or settings.sync_url
        kwargs = {"pool_pre_ping": True, "echo": settings.echo}
        if url.startswith("mysql"):
            kwargs["pool_recycle"] = 28000  # RDS wait_timeout 대비
        elif url.startswith("sqlite"):
            # FastAPI threadpool에서 세션이 스레드를 넘나듦
            kwargs["connect_args"] = {"check_same_thread": False}
        self.engine = create_engine(url, **kwargs)
        self.session_factory = sessionmaker(
            bind=self.engine,
            autoflush=False,
            expire_on_commit=False,
        )


_manager = DatabaseManager()
engine = _manager.engine
SessionLocal = _manager.session_factory


def get_db() -> Iterator[Session]:
    """요청 스코프 세션 (FastAPI dependency)"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

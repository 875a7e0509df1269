import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from samplevault.db.base import Base
from samplevault.db.models.sample import Sample
from samplevault.db.session import get_db
from samplevault.main import app
from samplevault.services.storage import LocalStorage, get_storage


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    s = session_factory()
    yield s
    s.close()


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(str(tmp_path), "samples")


@pytest.fixture
def put_audio(tmp_path):
    def _put(path: str, data: bytes) -> str:
        target = tmp_path / "samples" / path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        return path
    return _put


@pytest.fixture
def add_sample(db):
    def _add(name="kick", file_path="pack/kick.wav", preview_path=None, **kw):
        s = Sample(pack_id="pack-1", name=name, file_path=file_path, preview_path=preview_path, **kw)
        db.add(s)
        db.commit()
        return s
    return _add


@pytest.fixture
def client(session_factory, storage):
    def _get_db():
        s = session_factory()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_storage] = lambda: storage
    yield TestClient(app)
    app.dependency_overrides.clear()

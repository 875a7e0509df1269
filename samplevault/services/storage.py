from pathlib import Path

from samplevault.core.config import settings


class StorageError(RuntimeError):
    pass


class LocalStorage:
    """Reads whole audio objects from ``<root>/<bucket>/<path>``."""

    def __init__(self, root: str, bucket: str = "samples"):
        self.base = (Path(root) / bucket).resolve()

    def resolve(self, path: str) -> Path:
        target = (self.base / path.lstrip("/")).resolve()
        if target != self.base and self.base not in target.parents:
            raise StorageError(f"Path escapes storage bucket: {path}")
        return target

    def read(self, path: str) -> bytes:
        target = self.resolve(path)
        if not target.is_file():
            raise StorageError(f"Object not found: {path}")
        return target.read_bytes()


def get_storage() -> LocalStorage:
    if settings.STORAGE_BACKEND != "local":
        raise ValueError(f"Unsupported storage backend: {settings.STORAGE_BACKEND}")
    return LocalStorage(settings.STORAGE_DIR, settings.SAMPLES_BUCKET)

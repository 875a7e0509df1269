from contextlib import asynccontextmanager

from fastapi import FastAPI
from samplevault.core.logging import logger
from samplevault.db.base import Base
from samplevault.db.session import engine
from samplevault.api.routes.samples import admin_router as admin_samples_router
from samplevault.api.routes.samples import router as samples_router

# register models on Base.metadata
import samplevault.db.models.sample  # noqa: F401


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    logger.info("DB tables ensured.")
    yield


app = FastAPI(title="Sample Vault waveform API", lifespan=lifespan)

app.include_router(admin_samples_router, prefix="/admin/samples", tags=["admin"])
app.include_router(samples_router, prefix="/samples", tags=["samples"])


@app.get("/health")
def health():
    return "SUCCESS"

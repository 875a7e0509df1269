from typing import List, Optional

from pydantic import BaseModel, Field


class GeneratePeaksIn(BaseModel):
    sampleId: Optional[str] = None


class GeneratePeaksOut(BaseModel):
    success: bool
    peakCount: int


class PendingSample(BaseModel):
    id: str
    name: str
    file_path: str
    file_size: int | None = None

    class Config:
        from_attributes = True


class BatchStatusOut(BaseModel):
    pending: int
    completed: int
    samples: List[PendingSample]


class BatchIn(BaseModel):
    limit: int | None = Field(default=None, ge=1)
    enqueue: bool = False


class BatchItem(BaseModel):
    id: str
    name: str
    success: bool
    peakCount: int | None = None
    error: str | None = None


class BatchOut(BaseModel):
    success: bool
    processed: int
    succeeded: int = 0
    failed: int = 0
    queued: int | None = None
    message: str | None = None
    results: List[BatchItem] = []
    jobIds: List[str] = []


class SamplePeaksOut(BaseModel):
    sampleId: str
    peaks: List[float] | None

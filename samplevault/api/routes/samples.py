from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from samplevault.core.config import settings
from samplevault.core.logging import logger
from samplevault.db.models.sample import Sample
from samplevault.db.session import get_db
from samplevault.schemas.sample import (
    BatchIn,
    BatchOut,
    BatchStatusOut,
    GeneratePeaksIn,
    GeneratePeaksOut,
    PendingSample,
    SamplePeaksOut,
)
from samplevault.services.audio.wav import WavFormatError
from samplevault.services.storage import LocalStorage, StorageError, get_storage
from samplevault.services.tasks import queue as peaks_queue
from samplevault.services.tasks.jobs import (
    SampleNotFoundError,
    generate_peaks_for_sample,
    pending_samples_query,
    run_peaks_batch,
)

admin_router = APIRouter()
router = APIRouter()


@admin_router.post("/generate-peaks", response_model=GeneratePeaksOut)
def generate_peaks(
    body: GeneratePeaksIn,
    db: Session = Depends(get_db),
    storage: LocalStorage = Depends(get_storage),
):
    if not body.sampleId:
        raise HTTPException(400, "Sample ID required")
    try:
        peaks = generate_peaks_for_sample(db, body.sampleId, storage)
    except SampleNotFoundError:
        raise HTTPException(404, "Sample not found")
    except StorageError as e:
        logger.error(f"[api] download failed sample={body.sampleId}: {e}")
        raise HTTPException(500, "Failed to download audio file")
    except WavFormatError as e:
        logger.error(f"[api] peak extraction failed sample={body.sampleId}: {e}")
        raise HTTPException(500, "Failed to extract peaks")
    return GeneratePeaksOut(success=True, peakCount=len(peaks))


@admin_router.get("/batch-generate-peaks", response_model=BatchStatusOut)
def batch_status(db: Session = Depends(get_db)):
    pending = pending_samples_query(db).all()
    completed = db.query(Sample).filter(Sample.waveform_peaks.is_not(None)).count()
    return BatchStatusOut(
        pending=len(pending),
        completed=completed,
        samples=[PendingSample.model_validate(s) for s in pending],
    )


@admin_router.post("/batch-generate-peaks", response_model=BatchOut, response_model_exclude_none=True)
def batch_generate(
    body: BatchIn | None = None,
    db: Session = Depends(get_db),
    storage: LocalStorage = Depends(get_storage),
):
    body = body or BatchIn()
    limit = min(body.limit or settings.BATCH_DEFAULT_LIMIT, settings.BATCH_MAX_LIMIT)

    if body.enqueue:
        ids = [s.id for s in pending_samples_query(db).limit(limit).all()]
        if not ids:
            return BatchOut(success=True, processed=0, message="No samples need processing")
        job_ids = [peaks_queue.enqueue_peaks(sid) for sid in ids]
        logger.info(f"[api] queued {len(job_ids)} peak jobs")
        return BatchOut(success=True, processed=0, queued=len(job_ids), jobIds=job_ids)

    results = run_peaks_batch(db, storage, limit)
    if not results:
        return BatchOut(success=True, processed=0, message="No samples need processing")
    ok = sum(1 for r in results if r.success)
    return BatchOut(
        success=True,
        processed=len(results),
        succeeded=ok,
        failed=len(results) - ok,
        results=results,
    )


@router.get("/{sample_id}/peaks", response_model=SamplePeaksOut)
def get_sample_peaks(sample_id: str, db: Session = Depends(get_db)):
    sample = db.get(Sample, sample_id)
    if not sample:
        raise HTTPException(404, "Sample not found")
    return SamplePeaksOut(sampleId=sample.id, peaks=sample.waveform_peaks)

from __future__ import annotations

import time
from typing import List, Tuple

from sqlalchemy.orm import Session

from samplevault.core.config import settings
from samplevault.core.logging import logger
from samplevault.db.models.sample import Sample
from samplevault.db.session import SessionLocal
from samplevault.schemas.sample import BatchItem
from samplevault.services.audio.peaks import extract_peaks
from samplevault.services.storage import LocalStorage, StorageError, get_storage


class SampleNotFoundError(LookupError):
    pass


def pending_samples_query(db: Session):
    """waveform_peaks가 아직 없는 샘플 (최신순)"""
    return (
        db.query(Sample)
        .filter(Sample.waveform_peaks.is_(None))
        .order_by(Sample.created_at.desc(), Sample.id)
    )


def _read_source_audio(sample: Sample, storage: LocalStorage) -> Tuple[str, bytes]:
    # 원본 wav 우선; preview는 mp3가 보통이라 .wav일 때만 대체 경로로 사용
    try:
        return sample.file_path, storage.read(sample.file_path)
    except StorageError:
        preview = sample.preview_path
        if not preview or not preview.lower().endswith(".wav"):
            raise
        logger.warning(f"[peaks] sample={sample.id} original missing, using preview '{preview}'")
        return preview, storage.read(preview)


def generate_peaks_for_sample(db: Session, sample_id: str, storage: LocalStorage) -> List[float]:
    """
    Download the sample's audio, extract waveform peaks and overwrite
    ``waveform_peaks``. Nothing is written if any step fails.
    """
    t0 = time.time()

    sample = db.get(Sample, sample_id)
    if sample is None:
        raise SampleNotFoundError(f"Sample {sample_id} not found")

    s = time.time()
    path, audio = _read_source_audio(sample, storage)
    logger.info(f"[peaks] sample={sample_id} read '{path}' bytes={len(audio)} dt={time.time()-s:.2f}s")

    s = time.time()
    peaks = extract_peaks(audio, target_peaks=settings.TARGET_PEAKS, strict=settings.STRICT_WAV)
    logger.info(f"[peaks] sample={sample_id} extracted count={len(peaks)} dt={time.time()-s:.2f}s")

    sample.waveform_peaks = peaks
    db.commit()
    logger.info(f"[peaks] sample={sample_id} saved total={time.time()-t0:.2f}s")
    return peaks


def run_peaks_batch(db: Session, storage: LocalStorage, limit: int) -> List[BatchItem]:
    samples = pending_samples_query(db).limit(limit).all()
    logger.info(f"[batch] START pending={len(samples)} limit={limit}")

    results: List[BatchItem] = []
    for sample_id, name in [(s.id, s.name) for s in samples]:
        try:
            peaks = generate_peaks_for_sample(db, sample_id, storage)
            results.append(BatchItem(id=sample_id, name=name, success=True, peakCount=len(peaks)))
        except Exception as e:
            # 개별 실패는 기록만 하고 다음 샘플 진행
            db.rollback()
            logger.warning(f"[batch] sample={sample_id} FAILED: {e}")
            results.append(BatchItem(id=sample_id, name=name, success=False, error=str(e)))

    ok = sum(1 for r in results if r.success)
    logger.info(f"[batch] DONE succeeded={ok} failed={len(results) - ok}")
    return results


def generate_sample_peaks_job(sample_id: str) -> int:
    """
    RQ 워커에서 실행되는 동기 잡 함수.
    실패 시 로그를 남기고 예외를 다시 던져 RQ failed registry에 남긴다.
    """
    db = SessionLocal()
    try:
        logger.info(f"[jobs] sample={sample_id} START")
        peaks = generate_peaks_for_sample(db, sample_id, get_storage())
        logger.info(f"[jobs] sample={sample_id} COMPLETE peaks={len(peaks)}")
        return len(peaks)
    except Exception as e:
        logger.exception(f"[jobs] generate_sample_peaks_job FAILED sample={sample_id}: {e}")
        db.rollback()
        raise
    finally:
        db.close()

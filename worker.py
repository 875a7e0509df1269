from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List

from redis import Redis
from rq import Worker, Queue
from rq.logutils import setup_loghandlers

from samplevault.core.config import settings
from samplevault.db.session import SessionLocal
from samplevault.services.tasks import queue as peaks_queue
from samplevault.services.tasks.jobs import pending_samples_query


def parse_queue_names(raw: str) -> List[str]:
    return [q.strip() for q in str(raw).split(",") if q.strip()]


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Waveform peaks RQ worker")
    p.add_argument(
        "--queues",
        default=settings.RQ_QUEUE,
        help="Comma-separated queue names (default: settings.RQ_QUEUE)",
    )
    p.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL.upper(),
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
    )
    p.add_argument(
        "--backfill",
        type=int,
        default=0,
        metavar="N",
        help="Enqueue up to N samples without waveform peaks before working",
    )
    p.add_argument(
        "--burst",
        action="store_true",
        help="Burst mode: exit when queues are empty",
    )
    return p.parse_args(argv)


def backfill_pending(limit: int) -> List[str]:
    """peaks가 없는 샘플을 최신순으로 큐에 넣고 job id 목록 반환"""
    if limit <= 0:
        return []
    db = SessionLocal()
    try:
        ids = [s.id for s in pending_samples_query(db).limit(limit).all()]
    finally:
        db.close()
    job_ids = [peaks_queue.enqueue_peaks(sid) for sid in ids]
    logging.info("Backfill queued %d sample(s)", len(job_ids))
    return job_ids


def main(argv: List[str] | None = None):
    args = parse_args(argv)

    setup_loghandlers(level=args.log_level)
    logging.getLogger().setLevel(args.log_level)

    if not settings.REDIS_URL:
        logging.error("REDIS_URL is empty. Check environment.")
        sys.exit(1)

    qnames = parse_queue_names(args.queues)
    if not qnames:
        logging.error("No queues specified")
        sys.exit(1)

    backfill_pending(args.backfill)

    redis_conn = Redis.from_url(settings.REDIS_URL)
    queues = [Queue(name, connection=redis_conn) for name in qnames]

    # SIGINT/SIGTERM은 rq Worker가 직접 처리 (현재 잡 완료 후 종료)
    worker = Worker(queues, connection=redis_conn, name=os.environ.get("WORKER_NAME"))
    logging.info("Peaks worker started. queues=%s burst=%s", qnames, args.burst)
    worker.work(with_scheduler=False, burst=args.burst)
    logging.info("Peaks worker exited.")


if __name__ == "__main__":
    main()

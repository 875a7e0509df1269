from rq import Queue
from redis import Redis
from samplevault.core.config import settings

_redis = Redis.from_url(settings.REDIS_URL)
queue = Queue(settings.RQ_QUEUE, connection=_redis)

# Import inside function to avoid worker import cycles

def enqueue_peaks(sample_id: str) -> str:
    from samplevault.services.tasks.jobs import generate_sample_peaks_job
    job = queue.enqueue(
        generate_sample_peaks_job,
        sample_id,
        job_timeout=60 * 5,
        result_ttl=60 * 60,
        failure_ttl=24 * 60 * 60,
        description=f"waveform peaks for sample {sample_id}",
    )
    return job.get_id()

"""Background ingestion queue."""
import logging
from typing import Optional

from redis import Redis
from rq import Queue

from config import settings
from crawler.scraper import Scraper
from ingestion import IngestionOrchestrator
from providers import ProviderRegistry
from schemas import IngestionOutcome, IngestionRequest
from store import SqlStore

logger = logging.getLogger(__name__)

# Redis connection
redis_conn = Redis.from_url(settings.redis_url)
# RQ Queue
job_queue = Queue('ingestion', connection=redis_conn)


def build_orchestrator():
    """Orchestrator wired to the configured database, crawler and providers."""
    return IngestionOrchestrator(
        store=SqlStore(),
        scraper=Scraper(),
        providers=ProviderRegistry.from_settings(),
    )


class IngestionQueue:
    """
    Redis-based ingestion queue manager using RQ.

    Enqueues scrape requests for background worker processing.
    """

    def __init__(self, queue: Optional[Queue] = None):
        """
        Initialize queue.

        Args:
            queue: RQ Queue instance (uses default if None)
        """
        self.queue = queue or job_queue

    def enqueue_request(self, request: IngestionRequest) -> str:
        """
        Enqueue a scrape request to Redis.

        Non-blocking - returns immediately after queueing.

        Args:
            request: The scrape request

        Returns:
            RQ job id
        """
        logger.info(f"Enqueueing {request.request_type.value} request for {request.provider}")

        job = self.queue.enqueue(
            'ingestion_queue.process_request',  # Function to call
            request.model_dump(mode="json"),  # Arguments
            job_timeout='1h',  # Max execution time
            result_ttl=86400,  # Keep result for 24 hours
            failure_ttl=604800,  # Keep failures for 7 days
        )

        logger.info(f"Request enqueued as job {job.id}")
        return job.id


# Worker function (called by RQ worker)
def process_request(payload: dict, orchestrator=None) -> dict:
    """
    Process a single scrape request.

    This function is called by RQ workers.

    Args:
        payload: Serialized IngestionRequest
        orchestrator: Orchestrator to use (built from settings if None)

    Returns:
        The serialized IngestionOutcome
    """
    request = IngestionRequest.model_validate(payload)
    logger.info(f"WORKER: Processing {request.request_type.value} request: {payload}")

    orchestrator = orchestrator or build_orchestrator()
    outcome: IngestionOutcome = orchestrator.dispatch(request)

    logger.info(f"WORKER: {request.request_type.value} finished with {outcome.status} {outcome.status_text}")
    return outcome.model_dump(mode="json")

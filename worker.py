"""
Ingestion worker.

Listens on the `ingestion` queue and runs each queued scrape request
(MangaList, Manga, ChapterList or Chapter) through
`ingestion_queue.process_request`, which replays it against the same
orchestrator the HTTP endpoints use.

Usage:
    python worker.py

    Or with RQ directly:
    rq worker ingestion --url redis://localhost:6379/0

Multiple workers can run side by side. Requests for the same entry are not
serialized; the store rejects the second stub and a sealed entry answers
with a conflict.
"""
import logging
from rq import Worker
from config import settings
from database import init_db
from ingestion_queue import job_queue, redis_conn

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def main():
    """Create tables and process queued scrape requests until interrupted."""
    logger.info("Starting ingestion worker")
    logger.info(f"Redis URL: {settings.redis_url}")

    init_db()

    worker = Worker(
        [job_queue.name],
        connection=redis_conn,
    )

    logger.info("Worker ready. Waiting for scrape requests...")

    # Jobs call ingestion_queue.process_request
    worker.work(with_scheduler=False)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        logger.info("Worker shutting down...")
    except Exception as e:
        logger.error(f"Worker error: {e}")
        raise

#!/usr/bin/env python3
"""
Celery worker entry point for StudyDocs.

This script starts a Celery worker that keeps the search index in step with
document changes.
"""

import os
import sys
import logging
from pathlib import Path

# Add the backend directory to Python path
sys.path.insert(0, str(Path(__file__).parent))

from studydocs.core.config import settings
from studydocs.tasks.celery_app import celery_app, INDEXING_QUEUE

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout),
        logging.FileHandler('/app/logs/celery_worker.log') if os.path.exists('/app/logs') else logging.NullHandler()
    ]
)

logger = logging.getLogger(__name__)

def main():
    """Start the Celery worker."""
    logger.info("Starting StudyDocs indexing worker...")

    worker_args = [
        'worker',
        '--loglevel=info',
        f'--concurrency={settings.CELERY_WORKER_CONCURRENCY}',
        f'--queues={INDEXING_QUEUE}',
        '--prefetch-multiplier=1',
        f'--time-limit={settings.TASK_TIME_LIMIT}',
        f'--soft-time-limit={settings.TASK_SOFT_TIME_LIMIT}',
    ]

    worker_args.extend([
        '--optimization=fair',
        '--without-gossip',
        '--without-mingle',
    ])

    logger.info(f"Starting worker with args: {' '.join(worker_args)}")

    celery_app.worker_main(worker_args)

if __name__ == '__main__':
    main()

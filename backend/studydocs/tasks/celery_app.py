from celery import Celery
from ..core.config import settings

INDEXING_QUEUE = "indexing"
INDEX_DOCUMENT_TASK = "studydocs.tasks.indexing_tasks.index_document"
DELETE_DOCUMENT_TASK = "studydocs.tasks.indexing_tasks.delete_document"

# Create Celery app instance
celery_app = Celery(
    "studydocs_tasks",
    include=['studydocs.tasks.indexing_tasks']
)

# Configure Celery
celery_app.conf.update(
    # Broker and Backend Configuration
    broker_url=settings.celery_broker_url,
    result_backend=settings.celery_result_backend,

    # Task Serialization
    task_serializer='json',
    accept_content=['json'],
    result_serializer='json',

    # Timezone Configuration
    timezone='UTC',
    enable_utc=True,

    # Task Timeout Configuration (extraction of large files runs inside the task)
    task_soft_time_limit=settings.TASK_SOFT_TIME_LIMIT,
    task_time_limit=settings.TASK_TIME_LIMIT,

    # Task Routing
    task_routes={
        INDEX_DOCUMENT_TASK: {'queue': INDEXING_QUEUE},
        DELETE_DOCUMENT_TASK: {'queue': INDEXING_QUEUE},
    },

    # Worker Configuration
    worker_prefetch_multiplier=1,
    task_acks_late=True,  # Redeliver if a worker dies mid-task; indexing is idempotent
    worker_concurrency=settings.CELERY_WORKER_CONCURRENCY,
    worker_max_tasks_per_child=200,

    # Results are informational only; callers never wait on them
    result_expires=3600,
    task_ignore_result=False,

    # Error Handling
    task_reject_on_worker_lost=True,
    task_default_retry_delay=30,
    task_max_retries=3,

    worker_hijack_root_logger=False,  # Preserve application logging
    task_always_eager=False,

    broker_connection_retry_on_startup=True,
)

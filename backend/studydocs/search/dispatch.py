"""
Fire-and-forget submission of indexing work to the Celery queue.
"""

import logging

from ..tasks.celery_app import (
    DELETE_DOCUMENT_TASK,
    INDEX_DOCUMENT_TASK,
    INDEXING_QUEUE,
    celery_app,
)

logger = logging.getLogger(__name__)

TASKS_BY_ACTION = {
    "index": INDEX_DOCUMENT_TASK,
    "delete": DELETE_DOCUMENT_TASK,
}


class CeleryTaskDispatcher:
    """Sends tasks by name so the search package never imports the task module."""

    def __init__(self, app=celery_app):
        self.app = app

    def dispatch(self, action: str, document_id: int) -> str:
        task_name = TASKS_BY_ACTION[action]
        result = self.app.send_task(task_name, args=[document_id], queue=INDEXING_QUEUE)
        logger.debug(f"Queued {task_name} for document {document_id} as task {result.id}")
        return result.id

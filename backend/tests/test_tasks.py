import pytest
from unittest.mock import MagicMock, patch
from celery.exceptions import Retry

from studydocs.search.dispatch import CeleryTaskDispatcher
from studydocs.search.indexing import IndexOutcome
from studydocs.tasks import indexing_tasks
from studydocs.tasks.celery_app import DELETE_DOCUMENT_TASK, INDEX_DOCUMENT_TASK, INDEXING_QUEUE, celery_app


@pytest.fixture
def mock_pipeline():
    pipeline = MagicMock()
    with patch('studydocs.tasks.indexing_tasks.build_indexing_pipeline', return_value=pipeline), \
         patch('studydocs.tasks.indexing_tasks.SessionLocal') as mock_session_factory:
        pipeline.session_factory = mock_session_factory
        yield pipeline


class TestIndexingTasks:
    def test_tasks_registered_on_indexing_queue(self):
        assert INDEX_DOCUMENT_TASK in celery_app.tasks
        assert DELETE_DOCUMENT_TASK in celery_app.tasks
        assert celery_app.conf.task_routes[INDEX_DOCUMENT_TASK]["queue"] == INDEXING_QUEUE

    def test_index_task_reloads_document(self, mock_pipeline):
        mock_pipeline.reindex_document.return_value = IndexOutcome.INDEXED

        result = indexing_tasks.index_document_task.apply(args=[12])

        assert result.get() == "INDEXED"
        mock_pipeline.reindex_document.assert_called_once_with(12)
        mock_pipeline.session_factory.return_value.close.assert_called_once()

    def test_delete_task(self, mock_pipeline):
        mock_pipeline.delete_from_index.return_value = IndexOutcome.DELETED

        result = indexing_tasks.delete_document_task.apply(args=[12])

        assert result.get() == "DELETED"
        mock_pipeline.delete_from_index.assert_called_once_with(12)

    def test_failed_outcome_retries_with_backoff(self):
        task = MagicMock()
        task.request.retries = 1
        task.retry.side_effect = Retry()

        with pytest.raises(Retry):
            indexing_tasks._retry_failed(task, 12, "indexing")

        task.retry.assert_called_once_with(countdown=60, max_retries=indexing_tasks.MAX_RETRIES)

    def test_gives_up_after_max_retries(self):
        task = MagicMock()
        task.request.retries = indexing_tasks.MAX_RETRIES

        assert indexing_tasks._retry_failed(task, 12, "indexing") == "FAILED"
        task.retry.assert_not_called()


class TestCeleryTaskDispatcher:
    def test_dispatch_sends_by_name(self):
        app = MagicMock()
        app.send_task.return_value.id = "abc-123"

        task_id = CeleryTaskDispatcher(app).dispatch("delete", 8)

        assert task_id == "abc-123"
        app.send_task.assert_called_once_with(DELETE_DOCUMENT_TASK, args=[8], queue=INDEXING_QUEUE)

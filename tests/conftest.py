import pytest

from searchengine.work_queue import WorkQueue


@pytest.fixture
def queue():
    q = WorkQueue(4)
    yield q
    q.shutdown_and_wait()

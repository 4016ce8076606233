import pytest

from todostore import RecordStore


@pytest.fixture
def store_path(tmp_path):
    return str(tmp_path / "todos.csv")


@pytest.fixture
def store(store_path):
    return RecordStore(store_path)

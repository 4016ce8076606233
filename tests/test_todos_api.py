from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from todostore import CorruptionError
from todostore.main import app


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setenv("TODO_STORE_PATH", str(tmp_path / "data" / "todos.csv"))
    with TestClient(app) as c:
        yield c


def create(client, title="Test Task"):
    res = client.post("/api/v1/todos/", json={"title": title})
    assert res.status_code == 201
    return res.json()


def assert_todo_shape(todo: dict):
    assert set(todo) == {"id", "title", "done", "created_at"}
    assert isinstance(todo["id"], int)
    assert isinstance(todo["title"], str)
    assert isinstance(todo["done"], bool)
    # Timestamps are ISO8601 strings; pydantic writes UTC as a trailing 'Z'
    datetime.fromisoformat(todo["created_at"].replace("Z", "+00:00"))


class TestHealth:
    def test_health_check(self, client):
        create(client, "one")
        res = client.get("/")
        assert res.status_code == 200
        assert res.json() == {"message": "Healthy", "records": 1}


class TestTodosCRUD:
    def test_create_todo(self, client):
        todo = create(client, "  Buy milk ")
        assert_todo_shape(todo)
        assert todo["id"] == 1
        assert todo["title"] == "Buy milk"
        assert todo["done"] is False

    def test_get_todo_and_not_found(self, client):
        tid = create(client, "Read book")["id"]

        res_get = client.get(f"/api/v1/todos/{tid}")
        assert res_get.status_code == 200
        assert res_get.json()["title"] == "Read book"

        res_404 = client.get("/api/v1/todos/999999")
        assert res_404.status_code == 404
        assert res_404.json()["detail"] == "Todo not found"

    def test_put_updates_title_and_done(self, client):
        created = create(client, "Initial")
        res_put = client.put(f"/api/v1/todos/{created['id']}", json={"title": "Replaced", "done": True})
        assert res_put.status_code == 200
        updated = res_put.json()
        assert updated["id"] == created["id"]
        assert updated["title"] == "Replaced"
        assert updated["done"] is True
        assert updated["created_at"] == created["created_at"]

        res_put_nf = client.put("/api/v1/todos/424242", json={"title": "Nope", "done": False})
        assert res_put_nf.status_code == 404
        assert res_put_nf.json()["detail"] == "Todo not found"

    def test_delete_todo(self, client):
        tid = create(client, "ToDelete")["id"]

        res_del = client.delete(f"/api/v1/todos/{tid}")
        assert res_del.status_code == 204
        assert res_del.text == ""

        assert client.get(f"/api/v1/todos/{tid}").status_code == 404
        res_del_again = client.delete(f"/api/v1/todos/{tid}")
        assert res_del_again.status_code == 404
        assert res_del_again.json()["detail"] == "Todo not found"

        # deleted ids are not handed out again
        assert create(client, "After delete")["id"] == tid + 1


class TestList:
    def test_list_in_id_order_with_done_filter(self, client):
        ids = [create(client, f"Task {i}")["id"] for i in range(4)]
        for tid in ids[::2]:
            client.put(f"/api/v1/todos/{tid}", json={"title": "Finished", "done": True})

        res = client.get("/api/v1/todos/")
        assert res.status_code == 200
        body = res.json()
        assert body["total"] == 4
        assert [t["id"] for t in body["items"]] == ids

        done = client.get("/api/v1/todos/?done=true").json()
        assert [t["id"] for t in done["items"]] == ids[::2]
        not_done = client.get("/api/v1/todos/?done=false").json()
        assert [t["id"] for t in not_done["items"]] == ids[1::2]

    def test_records_survive_restart(self, client):
        created = create(client, "Persistent")
        with TestClient(app) as second:
            res = second.get(f"/api/v1/todos/{created['id']}")
        assert res.status_code == 200
        assert res.json() == created


class TestErrors:
    @pytest.mark.parametrize("title", ["", "   ", "a" * 256])
    def test_invalid_title(self, client, title):
        res = client.post("/api/v1/todos/", json={"title": title})
        assert res.status_code == 422
        body = res.json()
        assert body.get("error") == "ValidationError"
        assert body.get("message") == "Request validation failed"
        assert body["detail"][0]["loc"] == ["body", "title"]

    def test_missing_field_uses_same_envelope(self, client):
        tid = create(client, "Needs done")["id"]
        res = client.put(f"/api/v1/todos/{tid}", json={"title": "No done flag"})
        assert res.status_code == 422
        body = res.json()
        assert body.get("error") == "ValidationError"
        assert isinstance(body.get("detail"), list)

    def test_persistence_failure_maps_to_503(self, client, monkeypatch):
        create(client, "Existing")

        def fail(*args, **kwargs):
            raise OSError(13, "Permission denied")

        with monkeypatch.context() as m:
            m.setattr("todostore.persistence.os.replace", fail)
            res = client.post("/api/v1/todos/", json={"title": "Will fail"})
        assert res.status_code == 503
        assert res.json()["error"] == "PersistenceError"

        assert client.get("/api/v1/todos/").json()["total"] == 1


class TestStartup:
    def test_corrupt_backing_file_aborts_startup(self, tmp_path, monkeypatch):
        path = tmp_path / "todos.csv"
        path.write_bytes(b"\xff\xfe\x00 not a todo file")
        monkeypatch.setenv("TODO_STORE_PATH", str(path))
        with pytest.raises(CorruptionError):
            with TestClient(app):
                pass

    def test_missing_data_directory_is_created(self, tmp_path, monkeypatch):
        path = tmp_path / "nested" / "dir" / "todos.csv"
        monkeypatch.setenv("TODO_STORE_PATH", str(path))
        with TestClient(app) as c:
            create(c, "first")
        assert path.exists()

import pytest

pytestmark = pytest.mark.anyio


async def _user(client, username="bob", email="bob@example.com"):
    res = await client.post("/users/", json={"username": username, "email": email, "password": "secret123"})
    return res.json()["id"]


async def test_create_and_get_todo(client):
    # need a user first
    uid = await _user(client)
    res = await client.post(f"/users/{uid}/todos", json={"title": "Buy milk"})
    assert res.status_code == 201
    assert res.json()["done"] is False
    assert res.json()["user_id"] == uid
    todo_id = res.json()["id"]

    res = await client.get(f"/todos/{todo_id}")
    assert res.status_code == 200
    assert res.json()["title"] == "Buy milk"


async def test_create_todo_errors(client):
    uid = await _user(client)
    res = await client.post(f"/users/{uid}/todos", json={"title": "t" * 101})
    assert res.status_code == 400

    res = await client.post("/users/999/todos", json={"title": "orphan"})
    assert res.status_code == 404


async def test_toggle_update_and_counts(client):
    uid = await _user(client)
    todo_id = (await client.post(f"/users/{uid}/todos", json={"title": "Buy milk"})).json()["id"]

    res = await client.post(f"/todos/{todo_id}/toggle")
    assert res.json()["done"] is True
    assert (await client.get(f"/users/{uid}/todos/count")).json() == {"total": 1, "done": 1}

    res = await client.patch(f"/todos/{todo_id}", json={"description": "two litres", "done": False})
    assert res.status_code == 200
    assert res.json()["description"] == "two litres"
    assert res.json()["done"] is False

    pending = (await client.get(f"/users/{uid}/todos", params={"done": "false"})).json()
    assert [t["id"] for t in pending] == [todo_id]
    assert (await client.get(f"/users/{uid}/todos", params={"done": "true"})).json() == []


async def test_stats_and_bulk_delete(client):
    alice = await _user(client, "alice", "alice@example.com")
    bob = await _user(client)
    await client.post(f"/users/{alice}/todos", json={"title": "a", "done": True})
    await client.post(f"/users/{alice}/todos", json={"title": "b"})
    await client.post(f"/users/{bob}/todos", json={"title": "c"})

    stats = (await client.get("/todos/stats")).json()
    assert stats["total_todos"] == 3
    assert stats["done_todos"] == 1
    assert stats["pending_todos"] == 2
    assert stats["completion_rate"] == pytest.approx(100 / 3)

    assert (await client.delete(f"/users/{alice}/todos")).json() == {"deleted": 2}
    remaining = (await client.get("/todos/")).json()
    assert [t["title"] for t in remaining] == ["c"]
    assert (await client.get("/todos/count")).json() == {"count": 1}


async def test_delete_todo(client):
    uid = await _user(client)
    todo_id = (await client.post(f"/users/{uid}/todos", json={"title": "gone"})).json()["id"]

    assert (await client.delete(f"/todos/{todo_id}")).status_code == 204
    assert (await client.get(f"/todos/{todo_id}")).status_code == 404

import pytest

from todoapp.models.todo import Todo
from todoapp.models.user import User
from todoapp.repositories.todo_repo import TodoRepository
from todoapp.repositories.user_repo import UserRepository
from todoapp.security import get_password_hash

pytestmark = pytest.mark.anyio

users = UserRepository()
todos = TodoRepository()


async def _user(db, username, email):
    return await users.create(
        db, User(username=username, email=email, hashed_password=get_password_hash("secret123"))
    )


async def test_create_assigns_id_and_timestamps(db):
    user = await _user(db, "carol", "carol@example.com")
    assert user.id is not None
    assert user.created_at is not None
    assert user.updated_at is not None


async def test_create_rejects_persistent_instance(db):
    user = await _user(db, "carol", "carol@example.com")
    with pytest.raises(ValueError):
        await users.create(db, user)


async def test_exists_by_username_can_exclude_a_record(db):
    user = await _user(db, "carol", "carol@example.com")
    assert await users.exists_by_username(db, "carol")
    assert not await users.exists_by_username(db, "carol", exclude_id=user.id)
    assert not await users.exists_by_username(db, "Carol")


async def test_search_is_case_insensitive_and_literal(db):
    await _user(db, "Carol_K", "carol@example.com")
    await _user(db, "dave", "dave@sample.org")
    await _user(db, "carolXk", "ck@example.com")

    found = await users.search(db, "CAROL")
    assert [u.username for u in found] == ["Carol_K", "carolXk"]

    # underscore must not act as a single-character wildcard
    found = await users.search(db, "l_k")
    assert [u.username for u in found] == ["Carol_K"]

    found = await users.search(db, "sample.org")
    assert [u.username for u in found] == ["dave"]


async def test_count_active(db):
    await _user(db, "carol", "carol@example.com")
    await _user(db, "dave", "dave@example.com")
    assert await users.count_active(db) == 2


async def test_user_delete_removes_owned_todos(db):
    carol = await _user(db, "carol", "carol@example.com")
    dave = await _user(db, "dave", "dave@example.com")
    await todos.create(db, Todo(title="a", user_id=carol.id))
    await todos.create(db, Todo(title="b", user_id=carol.id))
    await todos.create(db, Todo(title="c", user_id=dave.id))

    assert await users.delete(db, carol.id)
    assert await users.get(db, carol.id) is None
    assert await todos.count_by_user(db, carol.id) == 0
    assert await todos.count_by_user(db, dave.id) == 1
    assert not await users.delete(db, carol.id)


async def test_todo_queries_by_owner_and_status(db):
    carol = await _user(db, "carol", "carol@example.com")
    dave = await _user(db, "dave", "dave@example.com")
    first = await todos.create(db, Todo(title="first", user_id=carol.id))
    await todos.create(db, Todo(title="second", done=True, user_id=carol.id))
    await todos.create(db, Todo(title="other", done=True, user_id=dave.id))

    assert first.done is False
    assert [t.title for t in await todos.find_by_user(db, carol.id)] == ["first", "second"]
    assert [t.title for t in await todos.find_by_user_and_done(db, carol.id, True)] == ["second"]
    assert await todos.count_by_done(db, True) == 2
    assert await todos.count_by_user_and_done(db, carol.id, False) == 1
    assert await todos.count(db) == 3


async def test_delete_all_removes_given_todos_only(db):
    carol = await _user(db, "carol", "carol@example.com")
    dave = await _user(db, "dave", "dave@example.com")
    await todos.create(db, Todo(title="a", user_id=carol.id))
    await todos.create(db, Todo(title="b", user_id=carol.id))
    await todos.create(db, Todo(title="c", user_id=dave.id))

    removed = await todos.delete_all(db, await todos.find_by_user(db, carol.id))
    assert removed == 2
    assert [t.title for t in await todos.list(db)] == ["c"]


async def test_list_limit_and_offset(db):
    carol = await _user(db, "carol", "carol@example.com")
    for i in range(5):
        await todos.create(db, Todo(title=f"t{i}", user_id=carol.id))

    page = await todos.list(db, limit=2, offset=1)
    assert [t.title for t in page] == ["t1", "t2"]

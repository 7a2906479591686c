"""
DatabaseUserRepository against a real sqlite database.
"""
import asyncio
import uuid
import pytest
from userhub.modules.database import ConnectionManager
from userhub.modules.users.domain.user import UserEntity
from userhub.modules.users.repositories.user_repository import DatabaseUserRepository


@pytest.fixture
async def repository(tmp_path):
    connection = ConnectionManager(f"sqlite:///{tmp_path / 'users.db'}")
    await connection.connect()
    await connection.init_schema()
    yield DatabaseUserRepository(connection.database)
    await connection.disconnect()


def make_user(login: str, user_id: uuid.UUID = None) -> UserEntity:
    return UserEntity(id=user_id, first_name="Ivan", last_name="Petrov", login=login)


@pytest.mark.asyncio
async def test_insert_then_find(repository):
    stored = await repository.insert(make_user("ivan"))

    found = await repository.find_by_id(stored.id)

    assert found == stored
    assert await repository.find_by_id(uuid.uuid4()) is None


@pytest.mark.asyncio
async def test_update_or_insert_reports_insert_then_update(repository):
    user_id = uuid.uuid4()

    _, inserted = await repository.update_or_insert(make_user("ivan", user_id))
    assert inserted is True

    _, inserted = await repository.update_or_insert(
        UserEntity(id=user_id, first_name="Petr", last_name="Sidorov", login="petr")
    )
    assert inserted is False

    found = await repository.find_by_id(user_id)
    assert (found.first_name, found.last_name, found.login) == ("Petr", "Sidorov", "petr")


@pytest.mark.asyncio
async def test_concurrent_upserts_insert_exactly_once(repository):
    user_id = uuid.uuid4()

    results = await asyncio.gather(
        *(repository.update_or_insert(make_user(f"user{i}", user_id)) for i in range(5))
    )

    assert sorted(inserted for _, inserted in results) == [False, False, False, False, True]
    assert len(await repository.get_page(1, 20)) == 1


@pytest.mark.asyncio
async def test_update_overwrites_fields(repository):
    stored = await repository.insert(make_user("ivan"))

    await repository.update(UserEntity(id=stored.id, first_name="Anna", last_name="Petrova", login="anna"))

    assert (await repository.find_by_id(stored.id)).login == "anna"


@pytest.mark.asyncio
async def test_get_page_order_and_offset(repository):
    # ascending ids inserted in order keep the (created_at, id) ordering unambiguous
    ids = sorted((uuid.uuid4() for _ in range(7)), key=str)
    for i, user_id in enumerate(ids):
        await repository.insert(make_user(f"user{i}", user_id))

    first = await repository.get_page(1, 3)
    last = await repository.get_page(3, 3)

    assert [u.id for u in first] == ids[:3]
    assert [u.id for u in await repository.get_page(1, 3)] == ids[:3]
    assert [u.login for u in last] == ["user6"]
    assert await repository.get_page(4, 3) == []


@pytest.mark.asyncio
async def test_delete(repository):
    stored = await repository.insert(make_user("ivan"))

    await repository.delete(stored.id)

    assert await repository.find_by_id(stored.id) is None

import uuid

import pytest
from conftest import seed_actor, seed_movie
from sqlalchemy.exc import OperationalError

from cinema.core.exceptions import (
    NotFoundError,
    PersistenceError,
    ValidationFailedError,
)
from cinema.crud.movie import CRUDMovie
from cinema.crud.movie import movie as movie_crud
from cinema.services import relations


async def _cast(db, movie_id):
    return await movie_crud.get_actor_ids(db, movie_id)


@pytest.mark.asyncio
async def test_add_relations_to_movie_without_cast(db):
    movie_id = await seed_movie(db, "Heat")
    a1 = await seed_actor(db, "Al Pacino")
    a2 = await seed_actor(db, "Robert De Niro")

    linked = await relations.add_relations(db, movie_id, [a2, a1])

    assert linked == {a1, a2}
    assert await _cast(db, movie_id) == {a1, a2}


@pytest.mark.asyncio
async def test_add_relations_is_idempotent_per_pair(db):
    movie_id = await seed_movie(db, "Heat")
    a1 = await seed_actor(db, "Al Pacino")
    a2 = await seed_actor(db, "Robert De Niro")

    await relations.add_relations(db, movie_id, [a1, a2])
    await relations.add_relations(db, movie_id, [a1, a2, a2])

    assert await _cast(db, movie_id) == {a1, a2}


@pytest.mark.asyncio
async def test_add_relations_never_removes_existing_pairs(db):
    movie_id = await seed_movie(db, "Heat")
    a1 = await seed_actor(db, "Al Pacino")
    a2 = await seed_actor(db, "Robert De Niro")

    await relations.add_relations(db, movie_id, [a1])
    await relations.add_relations(db, movie_id, [a2])

    assert await _cast(db, movie_id) == {a1, a2}


@pytest.mark.asyncio
async def test_replace_relations_yields_exactly_the_new_set(db):
    movie_id = await seed_movie(db, "Heat")
    a1 = await seed_actor(db, "Al Pacino")
    a2 = await seed_actor(db, "Robert De Niro")
    a3 = await seed_actor(db, "Val Kilmer")
    await relations.add_relations(db, movie_id, [a1, a2])

    linked = await relations.replace_relations(db, movie_id, [a2, a3])

    assert linked == {a2, a3}
    assert await _cast(db, movie_id) == {a2, a3}


@pytest.mark.asyncio
async def test_replace_relations_does_not_touch_other_movies(db):
    heat = await seed_movie(db, "Heat")
    godfather = await seed_movie(db, "The Godfather")
    a1 = await seed_actor(db, "Al Pacino")
    a2 = await seed_actor(db, "Robert De Niro")
    await relations.add_relations(db, heat, [a1, a2])
    await relations.add_relations(db, godfather, [a1])

    await relations.replace_relations(db, heat, [a2])

    assert await _cast(db, godfather) == {a1}


@pytest.mark.asyncio
async def test_remove_selected_relations_removes_only_named_members(db):
    movie_id = await seed_movie(db, "Heat")
    a1 = await seed_actor(db, "Al Pacino")
    a2 = await seed_actor(db, "Robert De Niro")
    a3 = await seed_actor(db, "Val Kilmer")
    await relations.add_relations(db, movie_id, [a1, a2])

    # a3 exists but is not in the cast: removing it is a no-op
    linked = await relations.remove_selected_relations(db, movie_id, [a1, a3])

    assert linked == {a2}
    assert await _cast(db, movie_id) == {a2}


@pytest.mark.asyncio
async def test_remove_selected_relations_of_non_member_is_not_an_error(db):
    movie_id = await seed_movie(db, "Heat")
    a1 = await seed_actor(db, "Al Pacino")
    a2 = await seed_actor(db, "Robert De Niro")
    await relations.add_relations(db, movie_id, [a1])

    assert await relations.remove_selected_relations(db, movie_id, [a2]) == {a1}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "operation",
    [
        relations.add_relations,
        relations.replace_relations,
        relations.remove_selected_relations,
    ],
)
async def test_missing_movie_fails_without_side_effects(db, operation):
    movie_id = await seed_movie(db, "Heat")
    a1 = await seed_actor(db, "Al Pacino")
    await relations.add_relations(db, movie_id, [a1])

    with pytest.raises(NotFoundError):
        await operation(db, uuid.uuid4(), [a1])

    assert await _cast(db, movie_id) == {a1}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "operation",
    [
        relations.add_relations,
        relations.replace_relations,
        relations.remove_selected_relations,
    ],
)
async def test_any_missing_actor_fails_without_side_effects(db, operation):
    movie_id = await seed_movie(db, "Heat")
    a1 = await seed_actor(db, "Al Pacino")
    a2 = await seed_actor(db, "Robert De Niro")
    await relations.add_relations(db, movie_id, [a1])
    ghost = uuid.uuid4()

    with pytest.raises(NotFoundError) as exc_info:
        await operation(db, movie_id, [a2, ghost])

    assert await _cast(db, movie_id) == {a1}
    assert exc_info.value.details == [
        {"field": "actor_ids", "message": f"Actor {ghost} not found"}
    ]


@pytest.mark.asyncio
async def test_empty_actor_list_is_rejected(db):
    movie_id = await seed_movie(db, "Heat")

    with pytest.raises(ValidationFailedError):
        await relations.add_relations(db, movie_id, [])


@pytest.mark.asyncio
async def test_failure_mid_transaction_leaves_previous_cast(db, monkeypatch):
    movie_id = await seed_movie(db, "Heat")
    a1 = await seed_actor(db, "Al Pacino")
    a2 = await seed_actor(db, "Robert De Niro")
    a3 = await seed_actor(db, "Val Kilmer")
    await relations.add_relations(db, movie_id, [a1, a2])

    original_add = CRUDMovie.add_actor_relations

    async def insert_then_fail(self, session, movie_id, actor_ids):
        await original_add(self, session, movie_id, actor_ids)
        raise OperationalError("INSERT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(CRUDMovie, "add_actor_relations", insert_then_fail)

    # replace: delete-all ran and the insert ran, then the step failed
    with pytest.raises(PersistenceError):
        await relations.replace_relations(db, movie_id, [a3])

    assert await _cast(db, movie_id) == {a1, a2}

    with pytest.raises(PersistenceError):
        await relations.add_relations(db, movie_id, [a3])

    assert await _cast(db, movie_id) == {a1, a2}

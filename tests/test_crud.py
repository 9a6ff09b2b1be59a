"""Store-level tests for todo_table access."""

from datetime import datetime

import pytest

from todo_api import crud


@pytest.mark.asyncio
async def test_create_task_applies_defaults(session):
    task = await crud.create_task(session, "buy milk")

    assert task.id == 1
    assert task.task == "buy milk"
    assert task.is_done is False
    assert task.status == "pending"
    assert task.created_at <= datetime.now()


@pytest.mark.asyncio
async def test_create_task_keeps_given_values(session):
    created_at = datetime(2025, 1, 15, 10, 30)
    task = await crud.create_task(session, "old task", created_at=created_at, is_done=True)

    assert task.created_at == created_at
    assert task.is_done is True


@pytest.mark.asyncio
async def test_ids_are_assigned_in_order(session):
    first = await crud.create_task(session, "one")
    second = await crud.create_task(session, "two")
    assert second.id > first.id

    tasks = await crud.get_tasks(session)
    assert [t.id for t in tasks] == [first.id, second.id]


@pytest.mark.asyncio
async def test_get_tasks_empty(session):
    assert await crud.get_tasks(session) == []


@pytest.mark.asyncio
async def test_get_task_not_found(session):
    assert await crud.get_task(session, 999) is None
    assert await crud.task_exists(session, 999) is False


@pytest.mark.asyncio
async def test_task_exists(session):
    task = await crud.create_task(session, "here")
    assert await crud.task_exists(session, task.id) is True


@pytest.mark.asyncio
async def test_update_keeps_identity_and_created_at(session):
    task = await crud.create_task(session, "draft")
    task_id, created_at = task.id, task.created_at

    task.task = "final"
    task.mark_done()
    updated = await crud.update_task(session, task)

    assert updated.id == task_id
    assert updated.created_at == created_at
    assert updated.task == "final"
    assert updated.status == "done"

    stored = await crud.get_task(session, task_id)
    assert stored.task == "final"
    assert stored.is_done is True

"""
Demo data seeding tests.
"""

import pytest

from taskhub.db.repositories import ActivityRepository, NoteRepository, TaskRepository
from taskhub.engine import DemoDataSeeder, TaskService
from taskhub.engine.seeding import DEMO_NOTES, DEMO_TASKS


@pytest.mark.asyncio
async def test_seed_empty_database(session):
    seeder = DemoDataSeeder(session)

    assert await seeder.seed() is True

    assert await TaskRepository(session).count() == len(DEMO_TASKS)
    assert await TaskRepository(session).count(completed=True) == 1
    assert await NoteRepository(session).count() == len(DEMO_NOTES)
    assert await ActivityRepository(session).list_recent(10) == []


@pytest.mark.asyncio
async def test_seeded_tasks_are_ordered_and_consistent(session):
    await DemoDataSeeder(session).seed()

    tasks = await TaskRepository(session).list_all()

    assert tasks[0].title == "Create Your Own Task"
    assert tasks[-1].title == "Welcome to TaskHub"
    assert all(t.updated_at >= t.created_at for t in tasks)
    assert len(tasks[-1].notes) == 2


@pytest.mark.asyncio
async def test_seed_skips_when_tasks_exist(session, gateway):
    await TaskService(session, gateway).create(title="Mine")

    assert await DemoDataSeeder(session).seed() is False
    assert await TaskRepository(session).count() == 1


@pytest.mark.asyncio
async def test_reset_wipes_everything_and_reseeds(session, gateway):
    await TaskService(session, gateway).create(title="Mine")

    await DemoDataSeeder(session).reset()

    titles = {t.title for t in await TaskRepository(session).list_all()}
    assert "Mine" not in titles
    assert len(titles) == len(DEMO_TASKS)
    assert await ActivityRepository(session).list_recent(10) == []

"""REST API router."""

import logging
from time import perf_counter
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub import __version__
from taskhub.api.deps import (
    get_dashboard,
    get_db_session,
    get_note_service,
    get_seeder,
    get_task_service,
)
from taskhub.api.schemas import (
    ActivityResponse,
    CreateNoteRequest,
    CreateTaskRequest,
    DashboardResponse,
    HealthCheckEntry,
    HealthResponse,
    MessageResponse,
    NoteResponse,
    TaskResponse,
    UpdateNoteRequest,
    UpdateTaskRequest,
)
from taskhub.config import settings
from taskhub.engine import (
    DashboardAggregator,
    DemoDataSeeder,
    NoteService,
    NotFoundError,
    TaskService,
)
from taskhub.engine.seeding import DEMO_INFO
from taskhub.observability.metrics import metrics

logger = logging.getLogger("taskhub.api")

router = APIRouter()
api = APIRouter(prefix="/api")


# ============================================================================
# Health
# ============================================================================


@router.get("/health", response_model=HealthResponse, response_model_exclude_none=True)
async def health_check(session: AsyncSession = Depends(get_db_session)):
    """Database health check. 503 when the database cannot be reached."""
    start = perf_counter()
    try:
        await session.execute(text("SELECT 1"))
        check = HealthCheckEntry(
            name="database",
            status="Healthy",
            duration_ms=(perf_counter() - start) * 1000.0,
        )
    except (SQLAlchemyError, OSError) as e:
        # asyncpg raises plain OSError subclasses when the server is unreachable
        await session.rollback()
        logger.error(f"Database health check failed: {e}")
        check = HealthCheckEntry(
            name="database",
            status="Unhealthy",
            error=str(e),
            duration_ms=(perf_counter() - start) * 1000.0,
        )

    body = HealthResponse(status=check.status, version=__version__)
    if settings.health_detailed_errors:
        body.checks = [check]
        body.metrics = metrics.snapshot()

    return JSONResponse(
        status_code=200 if check.status == "Healthy" else 503,
        content=body.model_dump(mode="json", by_alias=True, exclude_none=True),
    )


# ============================================================================
# Tasks
# ============================================================================


@api.get("/task", response_model=list[TaskResponse])
async def list_tasks(service: TaskService = Depends(get_task_service)):
    """All tasks with their notes, newest first."""
    return await service.list_tasks()


@api.get("/task/{task_id}", response_model=TaskResponse)
async def get_task(task_id: UUID, service: TaskService = Depends(get_task_service)):
    task = await service.get_task(task_id)
    if task is None:
        raise NotFoundError("Task", task_id)
    return task


@api.post("/task", response_model=TaskResponse, status_code=201)
async def create_task(
    request: CreateTaskRequest,
    service: TaskService = Depends(get_task_service),
):
    """Create a task."""
    return await service.create(title=request.title, description=request.description)


@api.put("/task/{task_id}", response_model=TaskResponse, status_code=201)
async def update_task(
    task_id: UUID,
    request: UpdateTaskRequest,
    service: TaskService = Depends(get_task_service),
):
    """Replace a task's title, description and completion flag."""
    task = await service.update(
        task_id,
        title=request.title,
        description=request.description,
        is_completed=request.is_completed,
    )
    if task is None:
        raise NotFoundError("Task", task_id)
    return task


@api.delete("/task/{task_id}", response_model=MessageResponse)
async def delete_task(task_id: UUID, service: TaskService = Depends(get_task_service)):
    """Delete a task and its notes."""
    if not await service.delete(task_id):
        raise NotFoundError("Task", task_id)
    return MessageResponse(message="Task deleted")


@api.patch("/task/{task_id}/toggle-completion", response_model=bool)
async def toggle_task_completion(
    task_id: UUID,
    service: TaskService = Depends(get_task_service),
):
    """Flip a task between completed and pending."""
    if not await service.toggle_completion(task_id):
        raise NotFoundError("Task", task_id)
    return True


# ============================================================================
# Notes
# ============================================================================


@api.get("/note/task/{task_id}", response_model=list[NoteResponse])
async def list_notes_for_task(
    task_id: UUID,
    service: NoteService = Depends(get_note_service),
):
    """A task's notes, newest first (empty list for an unknown task)."""
    return await service.list_for_task(task_id)


@api.get("/note/{note_id}", response_model=NoteResponse)
async def get_note(note_id: UUID, service: NoteService = Depends(get_note_service)):
    note = await service.get_note(note_id)
    if note is None:
        raise NotFoundError("Note", note_id)
    return note


@api.post("/note", response_model=NoteResponse, status_code=201)
async def create_note(
    request: CreateNoteRequest,
    service: NoteService = Depends(get_note_service),
):
    """Attach a note to a task. 404 when the task does not exist."""
    return await service.create(task_id=request.task_id, content=request.content)


@api.put("/note/{note_id}", response_model=NoteResponse, status_code=201)
async def update_note(
    note_id: UUID,
    request: UpdateNoteRequest,
    service: NoteService = Depends(get_note_service),
):
    note = await service.update(note_id, content=request.content)
    if note is None:
        raise NotFoundError("Note", note_id)
    return note


@api.delete("/note/{note_id}", response_model=MessageResponse)
async def delete_note(note_id: UUID, service: NoteService = Depends(get_note_service)):
    if not await service.delete(note_id):
        raise NotFoundError("Note", note_id)
    return MessageResponse(message="Note deleted")


# ============================================================================
# Dashboard
# ============================================================================


@api.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard_summary(dashboard: DashboardAggregator = Depends(get_dashboard)):
    """Task and note statistics plus the latest activity."""
    summary = await dashboard.get_summary()
    return DashboardResponse.from_model(summary)


@api.get("/dashboard/{count}", response_model=list[ActivityResponse])
async def get_recent_activities(
    count: int,
    dashboard: DashboardAggregator = Depends(get_dashboard),
):
    """Most recent activities. Out-of-range counts fall back to the default page."""
    activities = await dashboard.get_recent_activities(count)
    return [ActivityResponse.from_model(a) for a in activities]


# ============================================================================
# Demo data
# ============================================================================


@api.post("/demo/seed", response_model=MessageResponse)
async def seed_demo_data(seeder: DemoDataSeeder = Depends(get_seeder)):
    """Seed demo data if the database has no tasks."""
    logger.info("Demo data seeding requested")
    if await seeder.seed():
        return MessageResponse(message="Demo data seeded successfully")
    return MessageResponse(message="Database already contains data, nothing seeded")


@api.post("/demo/reset", response_model=MessageResponse)
async def reset_demo_data(seeder: DemoDataSeeder = Depends(get_seeder)):
    """Wipe tasks, notes and activities, then seed fresh demo data."""
    logger.info("Demo data reset requested")
    await seeder.reset()
    return MessageResponse(message="Demo data reset successfully")


@api.get("/demo/info")
async def get_demo_info() -> dict[str, Any]:
    return DEMO_INFO


router.include_router(api)

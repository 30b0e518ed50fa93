"""API dependencies."""

import logging
from typing import AsyncGenerator

from fastapi import Depends
from fastapi.requests import HTTPConnection
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.db.base import async_session_factory
from taskhub.engine import DashboardAggregator, DemoDataSeeder, NoteService, TaskService
from taskhub.realtime.gateway import BroadcastGateway

logger = logging.getLogger("taskhub.api")


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_gateway(connection: HTTPConnection) -> BroadcastGateway:
    """The application's broadcast gateway (created in ``taskhub.main``)."""
    return connection.app.state.gateway


def get_task_service(
    session: AsyncSession = Depends(get_db_session),
    gateway: BroadcastGateway = Depends(get_gateway),
) -> TaskService:
    return TaskService(session, gateway)


def get_note_service(
    session: AsyncSession = Depends(get_db_session),
    gateway: BroadcastGateway = Depends(get_gateway),
) -> NoteService:
    return NoteService(session, gateway)


def get_dashboard(session: AsyncSession = Depends(get_db_session)) -> DashboardAggregator:
    return DashboardAggregator(session)


def get_seeder(session: AsyncSession = Depends(get_db_session)) -> DemoDataSeeder:
    return DemoDataSeeder(session)

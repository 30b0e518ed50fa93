"""Shared plumbing for the mutation services."""

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, AsyncIterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.engine.activity import ActivityRecorder
from taskhub.engine.errors import PersistenceError
from taskhub.observability.metrics import metrics

if TYPE_CHECKING:
    from taskhub.realtime.gateway import BroadcastGateway

logger = logging.getLogger(__name__)


class MutationService:
    """Base for services that write an entity, audit it, then broadcast.

    Subclasses wrap the entity write and the activity write in ``_unit_of_work``
    and only call the gateway after it has exited, i.e. after the commit.
    """

    def __init__(self, session: AsyncSession, gateway: "BroadcastGateway"):
        self.session = session
        self.gateway = gateway
        self.recorder = ActivityRecorder(session)

    @asynccontextmanager
    async def _unit_of_work(self, operation: str) -> AsyncIterator[None]:
        """Commit on success; roll back and raise ``PersistenceError`` on DB or driver failure."""
        try:
            yield
            await self.session.commit()
        except (SQLAlchemyError, OSError) as e:
            await self.session.rollback()
            metrics.inc_counter("db.rollback")
            logger.error(f"Database operation failed ({operation}): {e}")
            raise PersistenceError(operation) from e
        except Exception:
            await self.session.rollback()
            metrics.inc_counter("db.rollback")
            raise

from typing import Annotated
import logging

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from container_priority.config import settings
from container_priority.database import get_db
from container_priority.services.callback_client import RcsCallbackClient
from container_priority.services.container_task_service import ContainerTaskService
from container_priority.services.ranking_engine import RankingEngine
from container_priority.services.sql_stores import sql_stores


logger = logging.getLogger(__name__)


DB = Annotated[AsyncSession, Depends(get_db)]


def get_callback_client() -> RcsCallbackClient:
    """Dependency for the RCS callback channel."""
    return RcsCallbackClient()


async def get_container_task_service(
    db: DB,
    callback_client: Annotated[RcsCallbackClient, Depends(get_callback_client)],
) -> ContainerTaskService:
    """Service wired to the request session and the configured shelves."""
    return ContainerTaskService(
        stores=sql_stores(db),
        callback_channel=callback_client,
        static_container_codes=settings.STATIC_CONTAINER_CODES,
        default_warehouse_code=settings.WAREHOUSE_CODE,
        ranking_engine=RankingEngine(promote_tail=settings.PROMOTE_TAIL_CONTAINER),
    )


ContainerTaskServiceDep = Annotated[ContainerTaskService, Depends(get_container_task_service)]

from fastapi import APIRouter

from container_priority.api.v1.endpoints import container_tasks


# Create main API router
api_router = APIRouter(prefix="/api/v1")

# ==================== Container Task Events ====================
api_router.include_router(
    container_tasks.router,
    prefix="/container-tasks",
    tags=["Container Tasks"]
)

from fastapi import APIRouter
from src.api.clients.endpoints.client import router as client_router
from src.api.projects.endpoints.project import router as project_router
from src.api.tasks.endpoints.work_category import router as work_category_router
from src.api.tasks.endpoints.task import router as task_router
from src.api.tasks.endpoints.time_entry import router as time_entry_router
from src.api.retainers.endpoints.retainer import router as retainer_router

api_router = APIRouter()

# Include all domain routers
api_router.include_router(client_router)
api_router.include_router(project_router)
api_router.include_router(work_category_router)
api_router.include_router(task_router)
api_router.include_router(time_entry_router)

# retainer billing ledger
api_router.include_router(retainer_router)

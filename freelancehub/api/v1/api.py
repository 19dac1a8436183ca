from fastapi import APIRouter
from freelancehub.api.v1.endpoints import (
    health, guest, users, clients, projects, dashboard, demo_data, tasks
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(guest.router, prefix="/guest", tags=["guest"])
api_router.include_router(users.router, prefix="/users", tags=["users"])

# Resource endpoints
api_router.include_router(clients.router, prefix="/clients", tags=["clients"])
api_router.include_router(projects.router, prefix="/projects", tags=["projects"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(demo_data.router, prefix="/demo-data", tags=["demo-data"])
api_router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])

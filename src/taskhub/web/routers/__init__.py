from taskhub.web.routers.auth import router as auth_router
from taskhub.web.routers.comments import router as comments_router
from taskhub.web.routers.progress import router as progress_router
from taskhub.web.routers.projects import router as projects_router
from taskhub.web.routers.requirements import router as requirements_router
from taskhub.web.routers.tasks import router as tasks_router
from taskhub.web.routers.workspaces import router as workspaces_router

__all__ = [
    "auth_router",
    "comments_router",
    "progress_router",
    "projects_router",
    "requirements_router",
    "tasks_router",
    "workspaces_router",
]

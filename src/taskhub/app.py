from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import datetime
from uuid import UUID

import structlog

from taskhub.config import Config
from taskhub.core.core import Core
from taskhub.core.modules.comment.models import Comment
from taskhub.core.modules.progress.models import TaskProgress
from taskhub.core.modules.project.models import Project
from taskhub.core.modules.requirement.models import TaskRequirement, progress_percentage
from taskhub.core.modules.session.extractor import SessionExtractor
from taskhub.core.modules.session.models import AuthToken
from taskhub.core.modules.task.models import Task, TaskDetail, TaskPriority, TaskStatus
from taskhub.core.modules.token.models import VerifiedIdentity
from taskhub.core.modules.user.models import UserView
from taskhub.core.modules.workspace.models import Workspace, WorkspaceMemberView
from taskhub.core.pagination import PaginationResult
from taskhub.errors import AuthenticationError

logger = structlog.get_logger(__name__)


class App:
    """Facade for all application operations, validates access before delegating to Core."""

    def __init__(self, config: Config) -> None:
        self._core = Core(config)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    @property
    def session_extractor(self) -> SessionExtractor:
        return self._core.services.session.extractor

    # === Authentication ===
    async def register(self, full_name: str, email: str, password: str) -> UserView:
        """Create a new user account."""
        user = await self._core.services.user.create_user(full_name, email, password)
        return UserView.from_domain(user)

    async def login(self, email: str, password: str) -> tuple[UserView, AuthToken]:
        """Check credentials and issue a session token."""
        user = self._core.services.user.authenticate(email, password)
        if user is None:
            logger.info("login_failed")
            raise AuthenticationError("Invalid email or password")
        token = self._core.services.session.create_session(user)
        logger.info("user_logged_in", user_id=str(user.id))
        return UserView.from_domain(user), token

    async def get_current_user(self, identity: VerifiedIdentity) -> UserView:
        """Get current authenticated user profile."""
        user = self._core.services.access.ensure_authenticated(identity)
        return UserView.from_domain(user)

    # === Workspaces ===
    async def get_workspaces(self, identity: VerifiedIdentity) -> list[Workspace]:
        """Get workspaces where current user is a member."""
        user = self._core.services.access.ensure_authenticated(identity)
        return self._core.services.workspace.get_workspaces_by_member(user.id)

    async def create_workspace(self, identity: VerifiedIdentity, title: str, description: str | None) -> Workspace:
        """Create workspace with current user as owner."""
        user = self._core.services.access.ensure_authenticated(identity)
        return await self._core.services.workspace.create_workspace(title, description, user.id)

    async def get_workspace_members(self, identity: VerifiedIdentity, workspace_id: UUID) -> list[WorkspaceMemberView]:
        """List workspace members with user details (members only)."""
        _, workspace = self._core.services.access.ensure_workspace_member(identity, workspace_id)
        members = []
        for member in workspace.members:
            user = self._core.services.user.get_user(member.user_id)
            members.append(
                WorkspaceMemberView(
                    user_id=user.id,
                    email=user.email,
                    name=user.name,
                    is_owner=member.is_owner,
                    is_admin=member.is_admin,
                    joined_at=member.joined_at,
                )
            )
        return members

    async def add_workspace_member(self, identity: VerifiedIdentity, workspace_id: UUID, email: str) -> Workspace:
        """Add a registered user to a workspace (members only)."""
        self._core.services.access.ensure_workspace_member(identity, workspace_id)
        user = self._core.services.user.get_user_by_email(email)
        return await self._core.services.workspace.add_member(workspace_id, user.id)

    # === Projects ===
    async def get_workspace_projects(self, identity: VerifiedIdentity, workspace_id: UUID) -> list[Project]:
        """List projects of a workspace (workspace members only)."""
        self._core.services.access.ensure_workspace_member(identity, workspace_id)
        return await self._core.services.project.list_workspace_projects(workspace_id)

    async def create_project(
        self,
        identity: VerifiedIdentity,
        workspace_id: UUID,
        title: str,
        description: str | None,
        start_date: datetime | None,
        end_date: datetime | None,
    ) -> Project:
        """Create project in a workspace with current user as manager (workspace members only)."""
        user, _ = self._core.services.access.ensure_workspace_member(identity, workspace_id)
        return await self._core.services.project.create_project(
            workspace_id, title, description, start_date, end_date, user.id
        )

    async def add_project_member(self, identity: VerifiedIdentity, project_id: UUID, email: str) -> Project:
        """Add a workspace member to a project (project members only)."""
        await self._core.services.access.ensure_project_member(identity, project_id)
        user = self._core.services.user.get_user_by_email(email)
        return await self._core.services.project.add_member(project_id, user.id)

    # === Tasks ===
    async def get_project_tasks(self, identity: VerifiedIdentity, project_id: UUID) -> list[Task]:
        """List tasks of a project (project members only)."""
        await self._core.services.access.ensure_project_member(identity, project_id)
        return await self._core.services.task.list_project_tasks(project_id)

    async def create_task(
        self,
        identity: VerifiedIdentity,
        project_id: UUID,
        title: str,
        description: str | None,
        priority: TaskPriority,
        due_date: datetime | None,
        assignee_ids: list[UUID],
    ) -> Task:
        """Create task in a project (project members only)."""
        user, project = await self._core.services.access.ensure_project_member(identity, project_id)
        return await self._core.services.task.create_task(
            project, user.id, title, description, priority, due_date, assignee_ids
        )

    async def get_task(self, identity: VerifiedIdentity, task_id: UUID) -> TaskDetail:
        """Get task with requirement progress (project members only)."""
        task = await self._resolve_task(identity, task_id)
        requirements = await self._core.services.requirement.list_requirements(task_id)
        return TaskDetail(**task.model_dump(), progress=progress_percentage(requirements))

    async def update_task_status(self, identity: VerifiedIdentity, task_id: UUID, status: TaskStatus) -> Task:
        """Change task status (project members only)."""
        await self._resolve_task(identity, task_id)
        return await self._core.services.task.update_status(task_id, status)

    # === Requirements ===
    async def get_task_requirements(self, identity: VerifiedIdentity, task_id: UUID) -> list[TaskRequirement]:
        await self._resolve_task(identity, task_id)
        return await self._core.services.requirement.list_requirements(task_id)

    async def create_task_requirement(
        self, identity: VerifiedIdentity, task_id: UUID, body: str, order: int | None, is_done: bool
    ) -> TaskRequirement:
        await self._resolve_task(identity, task_id)
        user = self._core.services.access.ensure_authenticated(identity)
        return await self._core.services.requirement.create_requirement(task_id, user.id, body, order, is_done)

    async def set_task_requirement_done(
        self, identity: VerifiedIdentity, task_id: UUID, requirement_id: UUID, is_done: bool
    ) -> TaskRequirement:
        await self._resolve_task(identity, task_id)
        return await self._core.services.requirement.set_done(task_id, requirement_id, is_done)

    # === Progress ===
    async def get_task_progress(self, identity: VerifiedIdentity, task_id: UUID) -> list[TaskProgress]:
        await self._resolve_task(identity, task_id)
        return await self._core.services.progress.list_progress(task_id)

    async def add_task_progress(
        self, identity: VerifiedIdentity, task_id: UUID, progress: int, description: str | None, end_time: datetime
    ) -> TaskProgress:
        await self._resolve_task(identity, task_id)
        user = self._core.services.access.ensure_authenticated(identity)
        return await self._core.services.progress.add_progress(task_id, user.id, progress, description, end_time)

    # === Comments ===
    async def get_task_comments(
        self, identity: VerifiedIdentity, task_id: UUID, limit: int = 50, offset: int = 0
    ) -> PaginationResult[Comment]:
        """Get paginated comments for a task (project members only)."""
        await self._resolve_task(identity, task_id)
        return await self._core.services.comment.get_task_comments(task_id, limit, offset)

    async def create_comment(self, identity: VerifiedIdentity, task_id: UUID, body: str) -> Comment:
        """Add comment to a task (project members only)."""
        await self._resolve_task(identity, task_id)
        user = self._core.services.access.ensure_authenticated(identity)
        return await self._core.services.comment.create_comment(task_id, user.id, body)

    # === Private resolver methods ===
    async def _resolve_task(self, identity: VerifiedIdentity, task_id: UUID) -> Task:
        """Resolve task and ensure the caller is a member of its project."""
        self._core.services.access.ensure_authenticated(identity)
        task = await self._core.services.task.get_task(task_id)
        await self._core.services.access.ensure_project_member(identity, task.project_id)
        return task

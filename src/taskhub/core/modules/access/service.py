from uuid import UUID

from taskhub.core.core import Service
from taskhub.core.modules.project.models import Project
from taskhub.core.modules.token.models import VerifiedIdentity
from taskhub.core.modules.user.models import User
from taskhub.core.modules.workspace.models import Workspace
from taskhub.errors import AccessDeniedError


class AccessService(Service):
    def ensure_authenticated(self, identity: VerifiedIdentity) -> User:
        """Ensure the identity maps to an existing user."""
        return self.core.services.session.get_authenticated_user(identity)

    def ensure_workspace_member(self, identity: VerifiedIdentity, workspace_id: UUID) -> tuple[User, Workspace]:
        """Ensure the authenticated user is a member of the specified workspace."""
        user = self.ensure_authenticated(identity)
        workspace = self.core.services.workspace.get_workspace(workspace_id)
        if not workspace.has_member(user.id):
            raise AccessDeniedError("Access denied to this workspace")
        return user, workspace

    async def ensure_project_member(self, identity: VerifiedIdentity, project_id: UUID) -> tuple[User, Project]:
        """Ensure the authenticated user is a member of the specified project."""
        user = self.ensure_authenticated(identity)
        project = await self.core.services.project.get_project(project_id)
        if not project.has_member(user.id):
            raise AccessDeniedError("Access denied to this project")
        return user, project

"""Project creation."""

from __future__ import annotations

from gl_mirror_setup.errors import CreationError, MirrorSetupError
from gl_mirror_setup.models import Namespace, ProjectSpec, RemoteProject
from gl_mirror_setup.operations.base import Step


class ProjectProvisioner(Step):
    """Create an empty project under a resolved namespace."""

    step_name = "create-project"

    def provision(self, namespace: Namespace, spec: ProjectSpec) -> RemoteProject:
        """
        Create the project described by spec in namespace.

        The caller must have established that the path is free. The repository
        is left empty (no README, no initial commit) so the first mirror push
        defines its history. Any failure raises CreationError; there is no retry
        at this level.
        """
        payload = {
            "name": spec.name,
            "path": spec.name,
            "namespace_id": namespace.id,
            "description": spec.description,
            "visibility": spec.visibility.value,
            "default_branch": spec.default_branch,
            "initialize_with_readme": False,
        }
        self.logger.info(f"Creating GitLab project: {spec.path}")
        try:
            project = self.client.create_project(payload)
        except MirrorSetupError as e:
            raise CreationError(f"Failed to create project '{spec.path}': {e}") from e

        self._result(project.path_with_namespace, project.id, "created", f"visibility={spec.visibility.value}")
        return project

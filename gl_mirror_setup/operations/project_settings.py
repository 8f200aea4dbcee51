"""Project settings reconciliation."""

from __future__ import annotations

from gl_mirror_setup.errors import MirrorSetupError
from gl_mirror_setup.models import ProjectSpec, RemoteProject, StepResult
from gl_mirror_setup.operations.base import Step


class SettingsReconciler(Step):
    """Push description and default branch onto an existing project. Best-effort."""

    step_name = "project-settings"

    def reconcile(self, project: RemoteProject, spec: ProjectSpec) -> StepResult:
        desired = {
            "description": spec.description,
            "default_branch": spec.default_branch,
        }
        current = {
            "description": project.description,
            "default_branch": project.default_branch,
        }
        changes = [k for k, v in desired.items() if current[k] != v]

        if not changes:
            return self._result(project.path_with_namespace, project.id, "already_set", f"keys: {list(desired)}")

        try:
            self.client.update_project(project.id, desired)
        except MirrorSetupError as e:
            return self._result(
                project.path_with_namespace,
                project.id,
                "warning",
                f"Could not update project settings: {e}",
            )

        project.description = spec.description
        project.default_branch = spec.default_branch
        return self._result(project.path_with_namespace, project.id, "applied", f"changed: {changes}")

"""Branch protection for mirror targets."""

from __future__ import annotations

from gl_mirror_setup.errors import MirrorSetupError, NotFoundError
from gl_mirror_setup.models import ProtectionRule, RemoteProject, StepResult
from gl_mirror_setup.operations.base import Step


class BranchProtectionReconciler(Step):
    """Protect a branch so that only maintainers may push, with force push allowed."""

    step_name = "protect-branch"

    def reconcile(self, project: RemoteProject, branch: str) -> StepResult:
        """
        Replace whatever rule the branch has with the mirroring rule.

        GitLab cannot change every field of an existing rule in place, so the
        rule is always deleted and recreated. The delete must come first: if a
        run stops between the two calls the branch is merely unprotected, and
        the next run creates the rule again.
        """
        desired = ProtectionRule.for_mirroring(branch)
        operation = f"{self.step_name}:{branch}"
        previous = project.protected_branches.get(branch)
        if previous is not None:
            self.logger.debug(f"Replacing existing rule on '{branch}': {previous.describe()}")

        unprotect_note = ""
        try:
            self.client.unprotect_branch(project.id, branch)
            project.protected_branches.pop(branch, None)
        except NotFoundError:
            # Not protected yet
            project.protected_branches.pop(branch, None)
        except MirrorSetupError as e:
            unprotect_note = f"; unprotect failed: {e}"

        try:
            created = self.client.protect_branch(project.id, desired)
        except MirrorSetupError as e:
            return self._record(
                StepResult(
                    target_path=project.path_with_namespace,
                    target_id=project.id,
                    step=operation,
                    action="warning",
                    detail=f"Could not configure protected branch (branch may not exist yet): {e}{unprotect_note}",
                )
            )

        project.protected_branches[branch] = created
        return self._record(
            StepResult(
                target_path=project.path_with_namespace,
                target_id=project.id,
                step=operation,
                action="applied",
                detail=desired.describe(),
            )
        )

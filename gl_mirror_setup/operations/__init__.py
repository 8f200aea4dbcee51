"""Reconciliation steps for gl-mirror-setup."""

from gl_mirror_setup.operations.base import Step
from gl_mirror_setup.operations.project_settings import SettingsReconciler
from gl_mirror_setup.operations.protect_branch import BranchProtectionReconciler
from gl_mirror_setup.operations.provision_project import ProjectProvisioner

__all__ = [
    "Step",
    "ProjectProvisioner",
    "SettingsReconciler",
    "BranchProtectionReconciler",
]

"""
gl-mirror-setup: Create and configure a GitLab project as a mirror target.

Ensures the project exists, its description and default branch match the
desired values, and its default branch is protected with force push allowed
so a mirroring pipeline can overwrite it. Safe to re-run.

Environment:
    GITLAB_TOKEN     - GitLab Personal Access Token (required)
    GITLAB_HOST      - GitLab host (default: gitlab.com)
    GITLAB_NAMESPACE - Group or user namespace of the project
    PROJECT_NAME     - Project name
"""

from gl_mirror_setup.cli import main
from gl_mirror_setup.client import GitLabClient
from gl_mirror_setup.config import SetupConfig, load_config
from gl_mirror_setup.errors import (
    AmbiguousNamespaceError,
    ConfigurationError,
    CreationError,
    MirrorSetupError,
    NotFoundError,
    TransportError,
)
from gl_mirror_setup.models import (
    DEFAULT_MAX_RETRIES,
    HIGHEST_ACCESS_LEVEL,
    RETRY_BACKOFF_FACTOR,
    RETRYABLE_STATUS_CODES,
    Namespace,
    Outcome,
    ProjectSpec,
    ProtectionRule,
    ReconcileResult,
    RemoteProject,
    StepResult,
    Visibility,
)
from gl_mirror_setup.operations import BranchProtectionReconciler, ProjectProvisioner, SettingsReconciler
from gl_mirror_setup.orchestrator import Orchestrator
from gl_mirror_setup.resolvers import NamespaceResolver, ProjectResolver

__version__ = "0.1.0"
__all__ = [
    "main",
    "__version__",
    "GitLabClient",
    "SetupConfig",
    "load_config",
    "MirrorSetupError",
    "ConfigurationError",
    "TransportError",
    "NotFoundError",
    "AmbiguousNamespaceError",
    "CreationError",
    "DEFAULT_MAX_RETRIES",
    "HIGHEST_ACCESS_LEVEL",
    "RETRY_BACKOFF_FACTOR",
    "RETRYABLE_STATUS_CODES",
    "Namespace",
    "Outcome",
    "ProjectSpec",
    "ProtectionRule",
    "ReconcileResult",
    "RemoteProject",
    "StepResult",
    "Visibility",
    "NamespaceResolver",
    "ProjectResolver",
    "ProjectProvisioner",
    "SettingsReconciler",
    "BranchProtectionReconciler",
    "Orchestrator",
]

"""Data models and constants for gl-mirror-setup."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from gl_mirror_setup.errors import ConfigurationError, TransportError

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_GITLAB_HOST = "gitlab.com"
API_V4 = "/api/v4"
PER_PAGE = 100

DEFAULT_VISIBILITY = "private"
DEFAULT_BRANCH = "main"

# Retry configuration
DEFAULT_MAX_RETRIES = 3
RETRY_BACKOFF_FACTOR = 0.5  # seconds
RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}
DEFAULT_TIMEOUT = 30  # seconds

# Access levels GitLab accepts on a project-level protected branch rule
ACCESS_LEVELS = {
    "no_access": 0,
    "developer": 30,
    "maintainer": 40,
}
HIGHEST_ACCESS_LEVEL = max(ACCESS_LEVELS.values())


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class Visibility(Enum):
    PRIVATE = "private"
    INTERNAL = "internal"
    PUBLIC = "public"


class Outcome(Enum):
    RECONCILED = "reconciled"
    FATAL = "fatal"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _require(data: Any, keys: tuple[str, ...], kind: str) -> None:
    """Raise TransportError unless every key is present in an API payload."""
    if not isinstance(data, dict):
        raise TransportError(f"Malformed {kind} response: expected an object, got {type(data).__name__}")
    missing = [k for k in keys if data.get(k) is None]
    if missing:
        raise TransportError(f"Malformed {kind} response: missing {', '.join(missing)}")


def max_access_level(access_levels: list[dict]) -> int:
    """Extract the effective access level from GitLab's access_levels array."""
    if not access_levels:
        return 0
    return max(al.get("access_level", 0) for al in access_levels)


# ---------------------------------------------------------------------------
# Data Classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProjectSpec:
    """Desired state of the mirror target project."""

    namespace: str
    name: str
    description: str = ""
    visibility: Visibility = Visibility.PRIVATE
    default_branch: str = DEFAULT_BRANCH

    def __post_init__(self):
        if not self.namespace or not self.namespace.strip("/ "):
            raise ConfigurationError("Project namespace is required")
        if not self.name or not self.name.strip() or "/" in self.name:
            raise ConfigurationError(f"Invalid project name: {self.name!r}")
        if not self.default_branch:
            raise ConfigurationError("Default branch is required")
        if not isinstance(self.visibility, Visibility):
            try:
                visibility = Visibility(str(self.visibility).lower())
            except ValueError:
                choices = ", ".join(v.value for v in Visibility)
                raise ConfigurationError(
                    f"Invalid visibility: {self.visibility!r} (expected one of: {choices})"
                ) from None
            object.__setattr__(self, "visibility", visibility)
        object.__setattr__(self, "namespace", self.namespace.strip("/"))
        if self.description is None:
            object.__setattr__(self, "description", "")

    @property
    def path(self) -> str:
        return f"{self.namespace}/{self.name}"


@dataclass(frozen=True)
class Namespace:
    """Resolved GitLab namespace (group or user)."""

    id: int
    full_path: str
    kind: str = ""

    @classmethod
    def from_api(cls, data: Any) -> Namespace:
        _require(data, ("id", "full_path"), "namespace")
        return cls(id=int(data["id"]), full_path=data["full_path"], kind=data.get("kind") or "")


@dataclass
class ProtectionRule:
    """Protected branch rule as observed on, or sent to, GitLab."""

    branch: str
    push_access_level: int
    merge_access_level: int
    allow_force_push: bool = False

    @classmethod
    def from_api(cls, data: Any) -> ProtectionRule:
        _require(data, ("name",), "protected branch")
        return cls(
            branch=data["name"],
            push_access_level=max_access_level(data.get("push_access_levels", [])),
            merge_access_level=max_access_level(data.get("merge_access_levels", [])),
            allow_force_push=bool(data.get("allow_force_push", False)),
        )

    @classmethod
    def for_mirroring(cls, branch: str) -> ProtectionRule:
        """The rule a mirror target branch must carry: force push, highest tier."""
        return cls(
            branch=branch,
            push_access_level=HIGHEST_ACCESS_LEVEL,
            merge_access_level=HIGHEST_ACCESS_LEVEL,
            allow_force_push=True,
        )

    def to_payload(self) -> dict:
        return {
            "name": self.branch,
            "push_access_level": self.push_access_level,
            "merge_access_level": self.merge_access_level,
            "allow_force_push": self.allow_force_push,
        }

    def describe(self) -> str:
        return f"push={self.push_access_level}, merge={self.merge_access_level}, force_push={self.allow_force_push}"


@dataclass
class RemoteProject:
    """Project state as observed on GitLab."""

    id: int
    path_with_namespace: str
    name: str = ""
    description: str = ""
    visibility: str = ""
    default_branch: str | None = None
    web_url: str = ""
    protected_branches: dict[str, ProtectionRule] = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: Any) -> RemoteProject:
        _require(data, ("id", "path_with_namespace"), "project")
        try:
            project_id = int(data["id"])
        except (TypeError, ValueError):
            raise TransportError(f"Malformed project response: non-numeric id {data['id']!r}") from None
        return cls(
            id=project_id,
            path_with_namespace=data["path_with_namespace"],
            name=data.get("name") or "",
            description=data.get("description") or "",
            visibility=data.get("visibility") or "",
            default_branch=data.get("default_branch"),
            web_url=data.get("web_url") or "",
        )


@dataclass
class StepResult:
    """Result of a single reconciliation step."""

    target_path: str
    target_id: int | None
    step: str
    action: str  # "created", "applied", "already_set", "warning", "error"
    detail: str = ""

    def to_dict(self) -> dict:
        return {
            "target_path": self.target_path,
            "target_id": self.target_id,
            "step": self.step,
            "action": self.action,
            "detail": self.detail,
        }


@dataclass
class ReconcileResult:
    """Terminal outcome of one reconciliation run."""

    outcome: Outcome
    spec: ProjectSpec
    project: RemoteProject | None = None
    created: bool = False
    repo_locator: str = ""
    steps: list[StepResult] = field(default_factory=list)
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.outcome == Outcome.RECONCILED

    @property
    def warnings(self) -> list[str]:
        return [f"{s.step}: {s.detail}" for s in self.steps if s.action == "warning"]

    def output_lines(self) -> list[str]:
        """Key-value lines consumed by the calling pipeline stage."""
        if not self.ok or self.project is None:
            return []
        return [
            f"GITLAB_REPO={self.repo_locator}",
            f"GITLAB_PROJECT_ID={self.project.id}",
        ]

    def to_dict(self) -> dict:
        d = {
            "outcome": self.outcome.value,
            "path": self.spec.path,
            "created": self.created,
            "warnings": self.warnings,
        }
        if self.project is not None:
            d["project_id"] = self.project.id
            d["repo"] = self.repo_locator
        if self.error:
            d["error"] = self.error
        return d

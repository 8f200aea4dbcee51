"""Run configuration, resolved once at the process boundary."""

from __future__ import annotations

import argparse
import urllib.parse
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from gl_mirror_setup.errors import ConfigurationError
from gl_mirror_setup.models import (
    DEFAULT_BRANCH,
    DEFAULT_GITLAB_HOST,
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT,
    DEFAULT_VISIBILITY,
    ProjectSpec,
)

# Prompt callback: (label, secret) -> answer
Prompt = Callable[[str, bool], str]

TRUTHY = ("true", "yes", "1")


@dataclass(frozen=True)
class SetupConfig:
    """Everything a run needs. Built once and passed explicitly."""

    host: str
    token: str
    project: ProjectSpec
    max_retries: int = DEFAULT_MAX_RETRIES
    timeout: float = DEFAULT_TIMEOUT
    json_output: bool = False
    verbose: bool = False

    def __post_init__(self):
        if not self.host:
            raise ConfigurationError("GitLab host is required")
        if not self.token:
            raise ConfigurationError("GitLab token is required")
        if self.max_retries < 0:
            raise ConfigurationError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be > 0, got {self.timeout}")

    @property
    def base_url(self) -> str:
        """Instance URL; https is assumed when the host carries no scheme."""
        if "://" in self.host:
            return self.host.rstrip("/")
        return f"https://{self.host.strip('/')}"

    @property
    def locator_host(self) -> str:
        """Host part of the repository locator, without scheme."""
        parsed = urllib.parse.urlparse(self.base_url)
        return f"{parsed.netloc}{parsed.path}".rstrip("/")


def _pick(flag: str | None, environ: Mapping[str, str], var: str, default: str = "") -> str:
    if flag is not None:
        return flag
    return environ.get(var, default)


def load_config(
    args: argparse.Namespace,
    environ: Mapping[str, str],
    prompt: Prompt | None = None,
) -> SetupConfig:
    """
    Resolve configuration from flags, then environment, then prompts.

    Prompts are only used when auto mode is off and a prompt callback is
    given. In auto mode a missing token, namespace or project name is a
    ConfigurationError naming the environment variable to set.
    """
    auto = bool(args.auto) or environ.get("AUTO_MODE", "false").lower() in TRUTHY

    def required(flag: str | None, var: str, label: str, secret: bool = False) -> str:
        value = _pick(flag, environ, var).strip()
        if value:
            return value
        if auto:
            raise ConfigurationError(f"{var} is required in auto mode")
        value = prompt(label, secret).strip() if prompt else ""
        if not value:
            raise ConfigurationError(f"{var} is required")
        return value

    token = required(args.token, "GITLAB_TOKEN", "Enter GitLab personal access token: ", secret=True)
    namespace = required(args.namespace, "GITLAB_NAMESPACE", "Enter GitLab namespace (group or username): ")
    name = required(args.name, "PROJECT_NAME", "Enter project name: ")

    spec = ProjectSpec(
        namespace=namespace,
        name=name,
        description=_pick(args.description, environ, "PROJECT_DESCRIPTION"),
        visibility=_pick(args.visibility, environ, "PROJECT_VISIBILITY", DEFAULT_VISIBILITY),
        default_branch=_pick(args.default_branch, environ, "DEFAULT_BRANCH", DEFAULT_BRANCH),
    )

    return SetupConfig(
        host=_pick(args.host, environ, "GITLAB_HOST", DEFAULT_GITLAB_HOST),
        token=token,
        project=spec,
        max_retries=args.max_retries,
        timeout=args.timeout,
        json_output=args.json_output,
        verbose=args.verbose,
    )

"""Lookups of existing GitLab state: namespaces and projects."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gl_mirror_setup.errors import AmbiguousNamespaceError, MirrorSetupError, NotFoundError
from gl_mirror_setup.models import Namespace, RemoteProject

if TYPE_CHECKING:
    from gl_mirror_setup.client import GitLabClient


class NamespaceResolver:
    """Map a group or user path to its numeric namespace id."""

    def __init__(self, client: GitLabClient):
        self.client = client
        self.logger = logging.getLogger("gl-mirror-setup")

    def resolve(self, namespace: str) -> Namespace:
        """
        Search GitLab for the namespace and return the single exact match.

        GitLab's search is a substring match, so results are filtered on
        full_path (case-insensitive). Raises NotFoundError when the search
        returns nothing and AmbiguousNamespaceError when it returns
        candidates of which none, or more than one, match exactly.
        """
        wanted = namespace.strip("/")
        candidates = self.client.search_namespaces(wanted)
        if not candidates:
            raise NotFoundError(f"Namespace '{wanted}' not found", status_code=None)

        exact = [ns for ns in candidates if ns.full_path.lower() == wanted.lower()]
        if len(exact) != 1:
            raise AmbiguousNamespaceError(wanted, [ns.full_path for ns in candidates])

        found = exact[0]
        self.logger.debug(f"Namespace '{wanted}' resolved to id={found.id} ({found.kind or 'unknown kind'})")
        return found


class ProjectResolver:
    """Existence check for a project path."""

    def __init__(self, client: GitLabClient):
        self.client = client
        self.logger = logging.getLogger("gl-mirror-setup")

    def resolve(self, path: str) -> RemoteProject | None:
        """
        Return the project at path with its protected branches, or None if absent.

        Only a 404 on the project lookup means "absent". Every other failure
        propagates as TransportError so that the caller never mistakes a
        failed query for a missing project.
        """
        try:
            project = self.client.get_project_by_path(path)
        except NotFoundError:
            self.logger.debug(f"Project '{path}' does not exist")
            return None

        try:
            rules = self.client.list_protected_branches(project.id)
        except MirrorSetupError as e:
            # Prior rules are informational only; protection is replaced regardless
            self.logger.warning(f"Could not list protected branches of '{path}': {e}")
            return project

        for rule in rules:
            project.protected_branches[rule.branch] = rule
        return project

"""Reconcile-and-report workflow."""

from __future__ import annotations

import logging

from gl_mirror_setup.client import GitLabClient
from gl_mirror_setup.config import SetupConfig
from gl_mirror_setup.errors import MirrorSetupError
from gl_mirror_setup.models import Outcome, ReconcileResult, RemoteProject
from gl_mirror_setup.operations import BranchProtectionReconciler, ProjectProvisioner, SettingsReconciler
from gl_mirror_setup.resolvers import NamespaceResolver, ProjectResolver


class Orchestrator:
    """Ensure one project exists, carries the desired settings, and accepts mirror pushes."""

    def __init__(self, client: GitLabClient, config: SetupConfig):
        self.client = client
        self.config = config
        self.spec = config.project
        self.logger = logging.getLogger("gl-mirror-setup")

        self.namespaces = NamespaceResolver(client)
        self.projects = ProjectResolver(client)
        self.provisioner = ProjectProvisioner(client)
        self.settings = SettingsReconciler(client)
        self.protection = BranchProtectionReconciler(client)

    def run(self) -> ReconcileResult:
        """Run the full sequence. Fatal errors end up in the result, never raised."""
        result = ReconcileResult(outcome=Outcome.RECONCILED, spec=self.spec)
        try:
            self._reconcile(result)
        except MirrorSetupError as e:
            self.logger.error(str(e))
            result.outcome = Outcome.FATAL
            result.error = str(e)
        return result

    def _reconcile(self, result: ReconcileResult) -> None:
        spec = self.spec
        self.logger.info(f"Setting up GitLab project: {spec.path}")
        self.logger.info(f"Host: {self.config.host}")
        self.logger.info(f"Visibility: {spec.visibility.value}")
        self.logger.info(f"Default branch: {spec.default_branch}")

        project = self.projects.resolve(spec.path)
        if project is not None:
            self.logger.info("Project already exists")
        else:
            self.logger.info("Project does not exist, creating...")
            namespace = self.namespaces.resolve(spec.namespace)
            self.logger.info(f"Found namespace ID: {namespace.id}")
            project = self.provisioner.provision(namespace, spec)
            result.created = True
            result.steps.append(self.provisioner.results[-1])

        result.project = project
        result.repo_locator = self.repo_locator(project)
        self.logger.info(f"Project ID: {project.id}")

        result.steps.append(self.settings.reconcile(project, spec))
        result.steps.append(self.protection.reconcile(project, spec.default_branch))

        self.logger.info(f"GitLab repository: {result.repo_locator}")

    def repo_locator(self, project: RemoteProject) -> str:
        return f"{self.config.locator_host}/{project.path_with_namespace}.git"

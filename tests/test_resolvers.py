"""Tests for namespace and project resolution."""

import pytest
import responses

from conftest import MOCK_API_URL, project_payload, protected_branch_payload
from gl_mirror_setup import (
    AmbiguousNamespaceError,
    NamespaceResolver,
    NotFoundError,
    ProjectResolver,
    TransportError,
)


def add_namespace_search(results):
    responses.add(
        responses.GET,
        f"{MOCK_API_URL}/namespaces",
        json=results,
        headers={"x-total-pages": "1"},
    )


class TestNamespaceResolver:
    """Tests for namespace id lookup."""

    @responses.activate
    def test_exact_match_among_substring_results(self, mock_client):
        """Search returns every namespace containing the term; only the exact one is used."""
        add_namespace_search(
            [
                {"id": 7, "full_path": "acme-legacy", "kind": "group"},
                {"id": 8, "full_path": "acme", "kind": "group"},
            ]
        )

        namespace = NamespaceResolver(mock_client).resolve("acme")

        assert namespace.id == 8

    @responses.activate
    def test_match_is_case_insensitive(self, mock_client):
        add_namespace_search([{"id": 8, "full_path": "Acme", "kind": "group"}])

        assert NamespaceResolver(mock_client).resolve("acme").id == 8

    @responses.activate
    def test_nested_group(self, mock_client):
        add_namespace_search(
            [
                {"id": 9, "full_path": "acme/platform", "kind": "group"},
                {"id": 10, "full_path": "acme/platform-legacy", "kind": "group"},
            ]
        )

        assert NamespaceResolver(mock_client).resolve("acme/platform").id == 9

    @responses.activate
    def test_no_results_is_not_found(self, mock_client):
        add_namespace_search([])

        with pytest.raises(NotFoundError, match="Namespace 'acme' not found"):
            NamespaceResolver(mock_client).resolve("acme")

    @responses.activate
    def test_no_exact_match_is_ambiguous(self, mock_client):
        """A first-result pick would silently create the project in the wrong place."""
        add_namespace_search(
            [
                {"id": 7, "full_path": "acme-legacy", "kind": "group"},
                {"id": 11, "full_path": "acme-labs", "kind": "group"},
            ]
        )

        with pytest.raises(AmbiguousNamespaceError) as exc_info:
            NamespaceResolver(mock_client).resolve("acme")

        assert exc_info.value.candidates == ["acme-legacy", "acme-labs"]

    @responses.activate
    def test_query_failure_is_transport_error(self, mock_client):
        responses.add(responses.GET, f"{MOCK_API_URL}/namespaces", status=401)

        with pytest.raises(TransportError) as exc_info:
            NamespaceResolver(mock_client).resolve("acme")
        assert exc_info.value.status_code == 401


class TestProjectResolver:
    """Tests for the project existence check."""

    @responses.activate
    def test_existing_project_with_rules(self, mock_client):
        responses.add(responses.GET, f"{MOCK_API_URL}/projects/acme%2Fsvc", json=project_payload())
        responses.add(
            responses.GET,
            f"{MOCK_API_URL}/projects/123/protected_branches",
            json=[protected_branch_payload("main", push=30, merge=30, force_push=False)],
            headers={"x-total-pages": "1"},
        )

        project = ProjectResolver(mock_client).resolve("acme/svc")

        assert project is not None
        assert project.id == 123
        rule = project.protected_branches["main"]
        assert rule.push_access_level == 30
        assert rule.allow_force_push is False

    @responses.activate
    def test_rules_listing_failure_returns_project(self, mock_client):
        """Protected branches are informational; failing to list them keeps the project."""
        responses.add(responses.GET, f"{MOCK_API_URL}/projects/acme%2Fsvc", json=project_payload())
        responses.add(responses.GET, f"{MOCK_API_URL}/projects/123/protected_branches", status=404)

        project = ProjectResolver(mock_client).resolve("acme/svc")

        assert project is not None
        assert project.id == 123
        assert project.protected_branches == {}

    @responses.activate
    def test_404_means_absent(self, mock_client):
        responses.add(responses.GET, f"{MOCK_API_URL}/projects/acme%2Fsvc", status=404)

        assert ProjectResolver(mock_client).resolve("acme/svc") is None

    @pytest.mark.parametrize("status", [401, 403, 429, 500])
    @responses.activate
    def test_other_failures_are_not_absence(self, mock_client, status):
        """A failed lookup must never read as 'project does not exist'."""
        responses.add(responses.GET, f"{MOCK_API_URL}/projects/acme%2Fsvc", status=status)

        with pytest.raises(TransportError) as exc_info:
            ProjectResolver(mock_client).resolve("acme/svc")

        assert not isinstance(exc_info.value, NotFoundError)
        assert exc_info.value.status_code == status

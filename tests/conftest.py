"""Shared test fixtures for gl-mirror-setup tests."""

import argparse
import sys
from pathlib import Path
from typing import Any

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from gl_mirror_setup.client import GitLabClient
from gl_mirror_setup.config import SetupConfig
from gl_mirror_setup.models import ProjectSpec, RemoteProject

MOCK_GITLAB_HOST = "gitlab.example.com"
MOCK_GITLAB_URL = f"https://{MOCK_GITLAB_HOST}"
MOCK_API_URL = f"{MOCK_GITLAB_URL}/api/v4"


@pytest.fixture
def mock_client():
    """GitLabClient pointing at mock server, with retries disabled."""
    return GitLabClient(MOCK_GITLAB_URL, "test-token", max_retries=0)


@pytest.fixture
def spec() -> ProjectSpec:
    return ProjectSpec(namespace="acme", name="svc", description="Service mirror", visibility="private")


@pytest.fixture
def config(spec) -> SetupConfig:
    return SetupConfig(host=MOCK_GITLAB_HOST, token="test-token", project=spec, max_retries=0)


@pytest.fixture
def sample_project() -> dict[str, Any]:
    """Sample project API response."""
    return project_payload()


@pytest.fixture
def remote_project(sample_project) -> RemoteProject:
    return RemoteProject.from_api(sample_project)


def project_payload(**overrides) -> dict[str, Any]:
    """Project API response for acme/svc."""
    payload = {
        "id": 123,
        "name": "svc",
        "path": "svc",
        "path_with_namespace": "acme/svc",
        "description": "Service mirror",
        "visibility": "private",
        "default_branch": "main",
        "web_url": f"{MOCK_GITLAB_URL}/acme/svc",
    }
    payload.update(overrides)
    return payload


def protected_branch_payload(name: str = "main", push: int = 40, merge: int = 40, force_push: bool = True) -> dict:
    """Protected branch API response."""
    return {
        "id": 1,
        "name": name,
        "push_access_levels": [{"access_level": push}],
        "merge_access_levels": [{"access_level": merge}],
        "allow_force_push": force_push,
    }


def make_args(**kwargs) -> argparse.Namespace:
    """Helper to create argparse.Namespace with default values."""
    defaults = {
        "auto": False,
        "token": None,
        "host": None,
        "namespace": None,
        "name": None,
        "description": None,
        "visibility": None,
        "default_branch": None,
        "max_retries": 3,
        "timeout": 30,
        "json_output": False,
        "verbose": False,
    }
    defaults.update(kwargs)
    return argparse.Namespace(**defaults)

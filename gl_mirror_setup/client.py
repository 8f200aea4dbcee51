"""GitLab API client with pagination, retry support and typed responses."""

from __future__ import annotations

import logging
import time
import urllib.parse
from typing import Any

import requests

from gl_mirror_setup.errors import NotFoundError, TransportError
from gl_mirror_setup.models import (
    API_V4,
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT,
    PER_PAGE,
    RETRY_BACKOFF_FACTOR,
    RETRYABLE_STATUS_CODES,
    Namespace,
    ProtectionRule,
    RemoteProject,
)


def encode_segment(value: str) -> str:
    """Percent-encode a path or branch name for use as a single URL segment."""
    return urllib.parse.quote(value, safe="")


class GitLabClient:
    """Thin wrapper around GitLab REST API v4 with pagination support and retry logic."""

    def __init__(
        self,
        base_url: str,
        token: str,
        max_retries: int = DEFAULT_MAX_RETRIES,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_url = f"{self.base_url}{API_V4}"
        self.session = requests.Session()
        self.session.headers.update(
            {
                "PRIVATE-TOKEN": token,
                "Content-Type": "application/json",
            }
        )
        self.max_retries = max_retries
        self.timeout = timeout
        self.logger = logging.getLogger("gl-mirror-setup")

    def _request(self, method: str, endpoint: str, retry: bool = True, **kwargs) -> requests.Response:
        """Make an HTTP request with retry logic for transient failures.

        Raises NotFoundError on 404 and TransportError on any other failure.
        Pass retry=False for requests that must not be sent twice.
        """
        url = f"{self.api_url}{endpoint}"
        kwargs.setdefault("timeout", self.timeout)
        max_retries = self.max_retries if retry else 0

        for attempt in range(max_retries + 1):
            try:
                self.logger.debug(
                    f"{method.upper()} {url} {kwargs.get('params') or ''} {kwargs.get('json') or ''} "
                    f"(attempt {attempt + 1}/{max_retries + 1})"
                )
                resp = self.session.request(method, url, **kwargs)
            except requests.exceptions.ConnectionError as e:
                if attempt < max_retries:
                    wait_time = RETRY_BACKOFF_FACTOR * (2**attempt)
                    self.logger.warning(f"Connection error, retrying in {wait_time:.1f}s: {e}")
                    time.sleep(wait_time)
                    continue
                raise TransportError(f"{method.upper()} {endpoint} failed: {e}") from e
            except requests.exceptions.RequestException as e:
                raise TransportError(f"{method.upper()} {endpoint} failed: {e}") from e

            # Retry on rate limit or server errors
            if resp.status_code in RETRYABLE_STATUS_CODES and attempt < max_retries:
                wait_time = self._calculate_backoff(resp, attempt)
                self.logger.warning(f"Retryable error {resp.status_code}, waiting {wait_time:.1f}s before retry")
                time.sleep(wait_time)
                continue

            if resp.status_code == 404:
                self.logger.debug(f"Not found: {method.upper()} {endpoint}")
                raise NotFoundError(f"{method.upper()} {endpoint}: 404 Not Found")
            if resp.status_code >= 400:
                self.logger.debug(f"API error {resp.status_code}: {resp.text[:500]}")
                raise TransportError(
                    f"{method.upper()} {endpoint}: {resp.status_code} {self._error_message(resp)}",
                    status_code=resp.status_code,
                )
            return resp

        raise RuntimeError("Unexpected retry loop exit")

    def _calculate_backoff(self, resp: requests.Response, attempt: int) -> float:
        """Calculate backoff time, respecting Retry-After header for 429s."""
        if resp.status_code == 429:
            retry_after = resp.headers.get("Retry-After")
            if retry_after:
                try:
                    return float(retry_after)
                except ValueError:
                    pass  # Fall through to exponential backoff
        return RETRY_BACKOFF_FACTOR * (2**attempt)

    @staticmethod
    def _error_message(resp: requests.Response) -> str:
        """Pull GitLab's error text out of a failed response."""
        try:
            body = resp.json()
        except ValueError:
            return resp.text[:200] or resp.reason or ""
        if isinstance(body, dict):
            message = body.get("message") or body.get("error") or body
            return str(message)
        return str(body)

    @staticmethod
    def _json(resp: requests.Response) -> Any:
        try:
            return resp.json()
        except ValueError as e:
            raise TransportError(
                f"Unparseable response from {resp.request.method} {resp.url}: {e}", status_code=resp.status_code
            ) from e

    def get(self, endpoint: str, params: dict | None = None) -> Any:
        return self._json(self._request("GET", endpoint, params=params))

    def post(self, endpoint: str, data: dict | None = None, retry: bool = True) -> Any:
        return self._json(self._request("POST", endpoint, retry=retry, json=data))

    def put(self, endpoint: str, data: dict | None = None) -> Any:
        return self._json(self._request("PUT", endpoint, json=data))

    def delete(self, endpoint: str, params: dict | None = None) -> requests.Response:
        return self._request("DELETE", endpoint, params=params)

    def paginate(self, endpoint: str, params: dict | None = None) -> list[dict]:
        """Fetch all pages of a paginated endpoint."""
        params = dict(params or {})
        params.setdefault("per_page", PER_PAGE)
        page = 1
        results = []
        while True:
            params["page"] = page
            resp = self._request("GET", endpoint, params=params)
            data = self._json(resp)
            if not data:
                break
            if not isinstance(data, list):
                raise TransportError(f"Malformed response from {endpoint}: expected a list")
            results.extend(data)
            # Check if there are more pages
            total_pages = self._total_pages(resp, page)
            if page >= total_pages:
                break
            page += 1
        return results

    @staticmethod
    def _total_pages(resp: requests.Response, page: int) -> int:
        """Read x-total-pages; a missing or non-numeric value means this is the last page."""
        try:
            return int(resp.headers.get("x-total-pages", page))
        except ValueError:
            return page

    # -- Typed endpoints --

    def get_project_by_path(self, path: str) -> RemoteProject:
        """Get project details by namespace/name path."""
        return RemoteProject.from_api(self.get(f"/projects/{encode_segment(path)}"))

    def search_namespaces(self, search: str) -> list[Namespace]:
        return [Namespace.from_api(ns) for ns in self.paginate("/namespaces", params={"search": search})]

    def create_project(self, data: dict) -> RemoteProject:
        """Create a project. Not retried: a create that timed out may still have succeeded."""
        return RemoteProject.from_api(self.post("/projects", data=data, retry=False))

    def update_project(self, project_id: int, data: dict) -> RemoteProject:
        return RemoteProject.from_api(self.put(f"/projects/{project_id}", data=data))

    def list_protected_branches(self, project_id: int) -> list[ProtectionRule]:
        return [ProtectionRule.from_api(pb) for pb in self.paginate(f"/projects/{project_id}/protected_branches")]

    def unprotect_branch(self, project_id: int, branch: str) -> None:
        self.delete(f"/projects/{project_id}/protected_branches/{encode_segment(branch)}")

    def protect_branch(self, project_id: int, rule: ProtectionRule) -> ProtectionRule:
        return ProtectionRule.from_api(self.post(f"/projects/{project_id}/protected_branches", data=rule.to_payload()))

"""CLI entry point for gl-mirror-setup."""

from __future__ import annotations

import argparse
import getpass
import logging
import os
import sys

from gl_mirror_setup.client import GitLabClient
from gl_mirror_setup.config import SetupConfig, load_config
from gl_mirror_setup.errors import ConfigurationError
from gl_mirror_setup.logging_utils import setup_logging
from gl_mirror_setup.models import DEFAULT_MAX_RETRIES, DEFAULT_TIMEOUT, Visibility
from gl_mirror_setup.orchestrator import Orchestrator


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gl-mirror-setup",
        description="Create and configure a GitLab project as a mirror target.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Creates the project if it does not exist, updates its description and default
branch, and protects the default branch with force push allowed so that a
mirror can overwrite its history. Safe to re-run.

On success two lines are printed to stdout:
    GITLAB_REPO=<host>/<namespace>/<name>.git
    GITLAB_PROJECT_ID=<id>

Environment:
    GITLAB_TOKEN, GITLAB_HOST, GITLAB_NAMESPACE, PROJECT_NAME,
    PROJECT_DESCRIPTION, PROJECT_VISIBILITY, DEFAULT_BRANCH, AUTO_MODE

Examples:
    # Non-interactive, everything from flags
    gl-mirror-setup --auto --namespace acme --name svc --visibility private

    # Self-managed instance, JSON log lines on stderr
    GITLAB_TOKEN=... gl-mirror-setup --host gitlab.example.com \\
        --namespace acme/platform --name svc --default-branch main --json
""",
    )
    parser.add_argument("--auto", action="store_true", help="Non-interactive mode (never prompt)")
    parser.add_argument("--token", default=None, help="GitLab personal access token (or set GITLAB_TOKEN)")
    parser.add_argument("--host", default=None, help="GitLab host (default: from GITLAB_HOST env or gitlab.com)")
    parser.add_argument("--namespace", default=None, help="GitLab namespace (group or username)")
    parser.add_argument("--name", default=None, help="Project name")
    parser.add_argument("--description", default=None, help="Project description")
    parser.add_argument(
        "--visibility",
        default=None,
        choices=[v.value for v in Visibility],
        help="Project visibility (default: private)",
    )
    parser.add_argument("--default-branch", default=None, help="Default branch name (default: main)")
    parser.add_argument(
        "--max-retries",
        type=int,
        default=DEFAULT_MAX_RETRIES,
        help=f"Maximum retry attempts for transient errors (default: {DEFAULT_MAX_RETRIES})",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help=f"Per-request timeout in seconds (default: {DEFAULT_TIMEOUT})",
    )
    parser.add_argument(
        "--json", action="store_true", dest="json_output", help="Output log records as JSON lines (to stderr)"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def prompt_user(label: str, secret: bool) -> str:
    """Ask for a missing value on the terminal."""
    if secret:
        return getpass.getpass(label)
    return input(label)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Setup logging
    logger = setup_logging(json_mode=args.json_output, verbose=args.verbose)

    # Prompt only when a human is at the terminal
    prompt = None if args.auto else (prompt_user if sys.stdin.isatty() else None)
    try:
        config: SetupConfig = load_config(args, os.environ, prompt=prompt)
    except ConfigurationError as e:
        logger.error(str(e))
        return 1
    except (EOFError, KeyboardInterrupt):
        logger.error("Input aborted")
        return 130

    client = GitLabClient(
        base_url=config.base_url, token=config.token, max_retries=config.max_retries, timeout=config.timeout
    )
    orchestrator = Orchestrator(client, config)

    try:
        result = orchestrator.run()
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130

    if not result.ok:
        return 1

    if config.json_output:
        record = logger.makeRecord(logger.name, logging.INFO, "", 0, "", (), None)
        record.reconcile_result = result
        logger.handle(record)

    warnings = result.warnings
    logger.info(
        f"Done: project {'created' if result.created else 'already existed'}, "
        f"{len(warnings)} warning{'' if len(warnings) == 1 else 's'}"
    )

    # Export for other scripts
    for line in result.output_lines():
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())

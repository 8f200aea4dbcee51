"""Base class for reconciliation steps."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gl_mirror_setup.models import StepResult

if TYPE_CHECKING:
    from gl_mirror_setup.client import GitLabClient

ICONS = {
    "created": "+",
    "applied": "✓",
    "already_set": "·",
    "warning": "!",
    "error": "✗",
}


class Step:
    """Base class for steps that mutate a project and report a StepResult."""

    step_name: str = ""

    def __init__(self, client: GitLabClient):
        self.client = client
        self.logger = logging.getLogger("gl-mirror-setup")
        self.results: list[StepResult] = []

    def _result(self, target_path: str, target_id: int | None, action: str, detail: str = "") -> StepResult:
        return self._record(
            StepResult(
                target_path=target_path,
                target_id=target_id,
                step=self.step_name,
                action=action,
                detail=detail,
            )
        )

    def _record(self, result: StepResult) -> StepResult:
        self.results.append(result)
        level = logging.WARNING if result.action in ("warning", "error") else logging.INFO

        handler = self.logger.handlers[0] if self.logger.handlers else None
        if handler and getattr(handler.formatter, "json_mode", False):
            # Structured record, serialized by the JSON formatter
            record = self.logger.makeRecord(self.logger.name, level, "", 0, "", (), None)
            record.step_result = result
            self.logger.handle(record)
            return result

        icon = ICONS.get(result.action, "?")
        self.logger.log(
            level,
            f"{icon} {result.target_path}: {result.step} → {result.action}"
            f"{' (' + result.detail + ')' if result.detail else ''}",
        )
        return result

"""Logs collector: records emitted while the request was handled."""

from __future__ import annotations

from typing import Any

from debugbar.collectors.base import BaseCollector


class LogsCollector(BaseCollector):
    title = "Logs"
    has_tabs = True

    def display(self) -> Any:
        return [
            {"level": entry.level, "logger": entry.logger, "message": entry.message}
            for entry in self.scope.logs
        ]

    def get_badge_value(self) -> int | None:
        return len(self.scope.logs) or None

    def is_empty(self) -> bool:
        return not self.scope.logs

    def icon(self) -> str:
        return "list"

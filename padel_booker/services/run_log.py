"""
Per-run log trail.

Every booking run owns one RunLog and passes it explicitly to each component.
Lines are timestamped, kept in order, returned with the run result, and also
forwarded to the standard logging module under the caller's logger name.
"""

import logging
from datetime import UTC, datetime


class RunLog:
    def __init__(self, name: str = "padel_booker.run", label: str | None = None) -> None:
        self._logger = logging.getLogger(name)
        self._label = label
        self.lines: list[str] = []

    def _emit(self, level: int, message: str) -> None:
        if self._label:
            message = f"[{self._label}] {message}"
        timestamp = datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")
        self.lines.append(f"{timestamp}: {message}")
        self._logger.log(level, message)

    def debug(self, message: str) -> None:
        self._emit(logging.DEBUG, message)

    def info(self, message: str) -> None:
        self._emit(logging.INFO, message)

    def warning(self, message: str) -> None:
        self._emit(logging.WARNING, message)

    def error(self, message: str) -> None:
        self._emit(logging.ERROR, message)

    def snapshot(self) -> list[str]:
        return list(self.lines)

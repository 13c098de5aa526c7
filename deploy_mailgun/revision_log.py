"""Commit log between two deployed revisions.

The log is best effort: a missing ref, a missing ``git`` binary or a bad
range all produce the same single placeholder entry so that a notification
is still sent.

The first result is kept on the instance and returned by every later call,
whatever refs are passed.  Callers that need a different range must use a
new :class:`RevisionLog` or call :meth:`RevisionLog.reset`.
"""

from __future__ import annotations

import logging
import subprocess
from typing import Callable, List, NamedTuple, Optional, Sequence

LOGGER = logging.getLogger(__name__)


class LogEntry(NamedTuple):
    """A single ``git log --oneline`` line."""

    revision: str
    message: str


UNAVAILABLE: List[LogEntry] = [LogEntry("n/a", "Log output not available.")]

Runner = Callable[[Sequence[str], Optional[str]], str]


def run_git(args: Sequence[str], cwd: Optional[str] = None) -> str:
    """Run ``git`` with ``args`` and return its standard output."""
    completed = subprocess.run(
        ["git", *args],
        cwd=cwd,
        check=True,
        capture_output=True,
        text=True,
    )
    return completed.stdout


def parse_oneline(output: str) -> List[LogEntry]:
    entries: List[LogEntry] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        fields = line.split(None, 1)
        message = fields[1] if len(fields) > 1 else ""
        entries.append(LogEntry(fields[0], message))
    return entries


class RevisionLog:
    """Memoising wrapper around ``git log --oneline first..last``."""

    def __init__(self, runner: Optional[Runner] = None, cwd: Optional[str] = None) -> None:
        self._runner = runner or run_git
        self._cwd = cwd
        self._cached: Optional[List[LogEntry]] = None

    @property
    def computed(self) -> bool:
        return self._cached is not None

    def reset(self) -> None:
        self._cached = None

    def extract(self, first_ref: Optional[str], last_ref: Optional[str]) -> List[LogEntry]:
        """Return the commits in ``first_ref..last_ref``.

        Returns:
            A list of :class:`LogEntry` in ``git log`` order, or
            :data:`UNAVAILABLE` if either ref is missing or ``git`` fails.
        """
        if self._cached is not None:
            return list(self._cached)

        if not first_ref or not last_ref:
            LOGGER.info("Revision range incomplete; skipping git log")
            self._cached = list(UNAVAILABLE)
            return list(self._cached)

        try:
            output = self._runner(
                ["log", "--oneline", f"{first_ref}..{last_ref}"], self._cwd
            )
        except Exception as exc:
            LOGGER.warning(
                "git log %s..%s failed: %s", first_ref, last_ref, exc
            )
            self._cached = list(UNAVAILABLE)
        else:
            self._cached = parse_oneline(output)
        return list(self._cached)


__all__ = ["LogEntry", "RevisionLog", "UNAVAILABLE", "parse_oneline", "run_git"]

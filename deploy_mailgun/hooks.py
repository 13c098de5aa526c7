"""Ordered task and hook table.

Deploy tools run named tasks and let plugins hook callbacks before or after
them.  :class:`TaskRegistry` is a minimal explicit version of that: hooks run
in registration order around the task itself.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable, DefaultDict, Dict, List

from deploy_mailgun.notifier import MailgunNotifier

LOGGER = logging.getLogger(__name__)

Callback = Callable[[], Any]

NOTIFY_TASK = "mailgun_notify"


class TaskRegistry:
    def __init__(self) -> None:
        self._tasks: Dict[str, Callback] = {}
        self._before: DefaultDict[str, List[Callback]] = defaultdict(list)
        self._after: DefaultDict[str, List[Callback]] = defaultdict(list)

    def task(self, name: str, fn: Callback) -> None:
        self._tasks[name] = fn

    def before(self, name: str, fn: Callback) -> None:
        self._before[name].append(fn)

    def after(self, name: str, fn: Callback) -> None:
        self._after[name].append(fn)

    def has_task(self, name: str) -> bool:
        return name in self._tasks

    def invoke(self, name: str) -> Any:
        """Run the before hooks, the task, then the after hooks for ``name``.

        Events without a task (such as ``deploy`` when the deploy itself
        happens elsewhere) only run their hooks.

        Raises:
            KeyError: If nothing at all is registered under ``name``.
        """
        if name not in self._tasks and name not in self._before and name not in self._after:
            raise KeyError(f"Unknown task: {name}")

        for hook in list(self._before.get(name, [])):
            hook()
        result = None
        if name in self._tasks:
            LOGGER.debug("Running task %s", name)
            result = self._tasks[name]()
        for hook in list(self._after.get(name, [])):
            hook()
        return result


def load_into(
    registry: TaskRegistry,
    notifier: MailgunNotifier,
    notify_after_deploy: bool = True,
) -> TaskRegistry:
    """Register the notification task and its hooks on ``registry``.

    * ``mailgun_notify`` sends the deploy notification.
    * Before ``deploy:update_code`` the currently deployed revision is
      remembered as ``previous_revision`` so the log starts at the right
      commit whenever it is read.
    * After ``deploy`` (optional) ``mailgun_notify`` is invoked.
    """

    def remember_previous_revision() -> None:
        notifier.config.previous_revision = notifier.config.current_revision

    registry.task(NOTIFY_TASK, notifier.notify_of_deploy)
    registry.before("deploy:update_code", remember_previous_revision)
    if notify_after_deploy:
        registry.after("deploy", lambda: registry.invoke(NOTIFY_TASK))
    return registry


__all__ = ["NOTIFY_TASK", "TaskRegistry", "load_into"]

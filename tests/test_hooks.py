import sys
from pathlib import Path
from typing import Any, List

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from deploy_mailgun.config import NotifierConfig
from deploy_mailgun.hooks import NOTIFY_TASK, TaskRegistry, load_into


class FakeNotifier:
    def __init__(self) -> None:
        self.config = NotifierConfig(current_revision="abc1234")
        self.notified = 0

    def notify_of_deploy(self) -> str:
        self.notified += 1
        return "sent"


def test_hooks_run_in_registration_order() -> None:
    order: List[str] = []
    registry = TaskRegistry()
    registry.task("deploy", lambda: order.append("deploy"))
    registry.before("deploy", lambda: order.append("before-1"))
    registry.before("deploy", lambda: order.append("before-2"))
    registry.after("deploy", lambda: order.append("after"))
    registry.invoke("deploy")
    assert order == ["before-1", "before-2", "deploy", "after"]


def test_invoke_unknown_task() -> None:
    with pytest.raises(KeyError):
        TaskRegistry().invoke("deploy")


def test_hook_only_event_runs_hooks() -> None:
    ran: List[Any] = []
    registry = TaskRegistry()
    registry.after("deploy", lambda: ran.append(True))
    assert registry.invoke("deploy") is None
    assert ran == [True]


def test_load_into_registers_notify_task() -> None:
    notifier = FakeNotifier()
    registry = load_into(TaskRegistry(), notifier, notify_after_deploy=False)
    assert registry.has_task(NOTIFY_TASK)
    assert registry.invoke(NOTIFY_TASK) == "sent"
    with pytest.raises(KeyError):
        registry.invoke("deploy")


def test_deploy_triggers_notification() -> None:
    notifier = FakeNotifier()
    registry = load_into(TaskRegistry(), notifier)
    registry.invoke("deploy")
    assert notifier.notified == 1


def test_previous_revision_recorded_before_update_code() -> None:
    notifier = FakeNotifier()
    registry = load_into(TaskRegistry(), notifier)
    registry.task("deploy:update_code", lambda: setattr(notifier.config, "current_revision", "def5678"))
    registry.invoke("deploy:update_code")
    assert notifier.config.previous_revision == "abc1234"
    assert notifier.config.current_revision == "def5678"

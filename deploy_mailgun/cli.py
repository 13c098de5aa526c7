"""Command line entry point for sending a deploy notification.

Reads the configuration from the environment and runs the
``mailgun_notify`` task::

    MAILGUN_API_KEY=key-... MAILGUN_DOMAIN=example.com \
    MAILGUN_FROM=deploy@example.com MAILGUN_RECIPIENTS=ops,dev \
    MAILGUN_RECIPIENT_DOMAIN=example.com \
        python -m deploy_mailgun --first-ref v1.2.0 --last-ref HEAD
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from deploy_mailgun.config import NotifierConfig
from deploy_mailgun.errors import DeployMailgunError
from deploy_mailgun.hooks import NOTIFY_TASK, TaskRegistry, load_into
from deploy_mailgun.notifier import MailgunNotifier

LOGGER = logging.getLogger(__name__)


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="deploy-mailgun-notify",
        description="Send a Mailgun deployment notification.",
    )
    parser.add_argument(
        "--first-ref",
        help="revision deployed before this run (MAILGUN_PREVIOUS_REVISION)",
    )
    parser.add_argument(
        "--last-ref",
        help="revision deployed by this run (CURRENT_REVISION)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = NotifierConfig.from_env()
        if args.first_ref:
            config.previous_revision = args.first_ref
        if args.last_ref:
            config.current_revision = args.last_ref
        registry = load_into(TaskRegistry(), MailgunNotifier(config), notify_after_deploy=False)
        registry.invoke(NOTIFY_TASK)
    except DeployMailgunError as exc:
        LOGGER.debug("Notification failed", exc_info=True)
        print(f"deploy-mailgun-notify: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover - manual invocation
    raise SystemExit(main())

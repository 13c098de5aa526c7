"""Top-level package for deploy-mailgun.

This package sends deployment notifications through the Mailgun HTTP API.
Subpackages and modules handle specific concerns: normalising recipient
lists, collecting the commit log of a deploy, rendering the message bodies,
delivering the message and wiring the notification into deploy hooks.

The ``__all__`` variable enumerates the primary public names for
convenience when using ``from deploy_mailgun import ...``.
"""

from __future__ import annotations

from deploy_mailgun.config import NotifierConfig
from deploy_mailgun.errors import ConfigurationError, DeliveryError, DeployMailgunError
from deploy_mailgun.notifier import MailgunNotifier
from deploy_mailgun.recipients import build_recipients
from deploy_mailgun.revision_log import LogEntry, RevisionLog

__all__ = [
    "ConfigurationError",
    "DeliveryError",
    "DeployMailgunError",
    "LogEntry",
    "MailgunNotifier",
    "NotifierConfig",
    "RevisionLog",
    "build_recipients",
]

# SemVer version of the package
__version__: str = "0.1.0"

"""Deployment notification via Mailgun.

:class:`MailgunNotifier` glues the pieces together: it reads a
:class:`~deploy_mailgun.config.NotifierConfig`, qualifies the recipient
lists, renders the text and HTML bodies and hands the assembled form fields
to an :class:`~deploy_mailgun.mailer.EmailSender`.

Required settings are checked before any request is built.  When
``config.off`` is set nothing is validated and nothing is sent.
"""

from __future__ import annotations

import getpass
import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from deploy_mailgun.config import NotifierConfig
from deploy_mailgun.errors import ConfigurationError
from deploy_mailgun.mailer import EmailSender
from deploy_mailgun.mailer.mailgun_sender import MailgunSender
from deploy_mailgun.recipients import Recipients, build_recipients
from deploy_mailgun.revision_log import LogEntry, RevisionLog, run_git
from deploy_mailgun.templates import clean_text, render_template

LOGGER = logging.getLogger(__name__)

ServersResolver = Callable[[], Iterable[str]]


class MailgunNotifier:
    """Send deploy notifications for one deployment run."""

    def __init__(
        self,
        config: NotifierConfig,
        sender: Optional[EmailSender] = None,
        revision_log: Optional[RevisionLog] = None,
        servers_resolver: Optional[ServersResolver] = None,
    ) -> None:
        self.config = config
        self._sender = sender
        self._revision_log = revision_log or RevisionLog()
        self._servers_resolver = servers_resolver
        self._deployer_username: Optional[str] = config.deployer_username

    # ------------------------------------------------------------------
    # Values exposed to templates
    # ------------------------------------------------------------------
    @property
    def deploy_servers(self) -> List[str]:
        if self.config.deploy_servers is not None:
            return list(self.config.deploy_servers)
        if self._servers_resolver is not None:
            return list(self._servers_resolver())
        return []

    @property
    def deployer_username(self) -> str:
        """Git ``user.name`` when deploying from git, else the OS user."""
        if self._deployer_username is None:
            name = ""
            if self.config.scm.lower() == "git":
                try:
                    name = run_git(["config", "user.name"]).strip()
                except Exception as exc:
                    LOGGER.debug("git config user.name failed: %s", exc)
            if not name:
                try:
                    name = getpass.getuser()
                except (OSError, KeyError) as exc:
                    LOGGER.debug("Could not determine OS user: %s", exc)
                    name = "unknown"
            self._deployer_username = name
        return self._deployer_username

    def log_output(
        self, first_ref: Optional[str] = None, last_ref: Optional[str] = None
    ) -> List[LogEntry]:
        """Commits between the previous and current revision.

        Only the first call runs ``git``; later calls return the same list
        even if different refs are passed.
        """
        if first_ref is None:
            first_ref = self.config.previous_revision
        if last_ref is None:
            last_ref = self.config.current_revision
        return self._revision_log.extract(first_ref, last_ref)

    def template_context(self) -> Dict[str, Any]:
        context = self.config.model_dump()
        context.update(
            deploy_servers=self.deploy_servers,
            deployer_username=self.deployer_username,
            log_output=self.log_output(),
        )
        return context

    # ------------------------------------------------------------------
    # Sending
    # ------------------------------------------------------------------
    def build_recipients(
        self, recipients: Recipients, default_domain: Optional[str] = None
    ) -> str:
        return build_recipients(
            recipients,
            default_domain=default_domain,
            fallback_domain=self.config.recipient_domain,
        )

    def _get_sender(self) -> EmailSender:
        api_key = self.config.require("api_key")
        domain = self.config.require("domain")
        if self._sender is None:
            self._sender = MailgunSender(
                api_key,
                domain,
                api_host=self.config.api_host,
                timeout=self.config.timeout,
            )
        return self._sender

    def process_send_email_options(self, options: Mapping[str, Any]) -> Dict[str, Any]:
        """Qualify recipients and render templates into ``text``/``html``."""
        data = dict(options)
        text_template = data.pop("text_template", None)
        html_template = data.pop("html_template", None)

        for field in ("to", "cc", "bcc"):
            if data.get(field) is not None:
                data[field] = self.build_recipients(data[field])

        if text_template or html_template:
            context = self.template_context()
            if text_template:
                data["text"] = clean_text(render_template(text_template, context))
            if html_template:
                data["html"] = render_template(html_template, context)
        return data

    def send_email(self, options: Mapping[str, Any]) -> Any:
        """Send a message built from ``options``.

        ``options`` accepts every field the Mailgun API does, plus
        ``text_template`` and ``html_template`` which are rendered into the
        ``text`` and ``html`` fields.

        Returns:
            The sender's result, or ``None`` when notifications are off.
        """
        if self.config.off:
            LOGGER.info("mailgun_off is set; not sending %r", options.get("subject"))
            return None
        sender = self._get_sender()
        data = self.process_send_email_options(options)
        return sender.send(data)

    def notify_of_deploy(self) -> Any:
        """Send the deploy notification described by the configuration.

        Raises:
            ConfigurationError: If recipients, the From address or both
                templates are missing.
        """
        if self.config.off:
            LOGGER.info("mailgun_off is set; skipping deploy notification")
            return None

        options: Dict[str, Any] = {
            "to": self.config.require("recipients"),
            "from": self.config.require("from_address"),
            "subject": self.config.require("subject"),
        }
        if self.config.cc:
            options["cc"] = self.config.cc
        if self.config.bcc:
            options["bcc"] = self.config.bcc

        if self.config.text_template is None and self.config.html_template is None:
            raise ConfigurationError(
                "You must specify one (or both) of mailgun_text_template and "
                "mailgun_html_template to use notify_of_deploy"
            )
        options["text_template"] = self.config.text_template
        options["html_template"] = self.config.html_template

        LOGGER.info("Sending deploy notification: %s", options["subject"])
        return self.send_email(options)


__all__ = ["MailgunNotifier", "ServersResolver"]

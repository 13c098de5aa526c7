"""Notifier settings.

Settings are held in an explicit :class:`NotifierConfig` rather than a global
variable store.  They can be built from the deploy tool's variables
(``mailgun_api_key``, ``mailgun_from``, ``stage`` ...) or from the same names
upper-cased in the environment.

Environment variables used:

* ``MAILGUN_API_KEY`` – API key for Mailgun
* ``MAILGUN_DOMAIN`` – Domain configured in Mailgun
* ``MAILGUN_FROM`` – value of the From header
* ``MAILGUN_RECIPIENTS``/``MAILGUN_CC``/``MAILGUN_BCC`` – comma separated
* ``MAILGUN_RECIPIENT_DOMAIN`` – domain for unqualified recipients
* ``MAILGUN_SUBJECT`` – optional; defaults to a stage/application subject
* ``MAILGUN_TEXT_TEMPLATE``/``MAILGUN_HTML_TEMPLATE`` – template name or
  path; set to an empty string to skip that body
* ``MAILGUN_OFF`` – when "true"/"1"/"yes", nothing is sent
* ``STAGE``, ``APPLICATION``, ``SCM``, ``REPOSITORY_URL``,
  ``CURRENT_REVISION``, ``MAILGUN_PREVIOUS_REVISION``, ``DEPLOYER_USERNAME``
"""

from __future__ import annotations

import os
import re
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from deploy_mailgun.errors import ConfigurationError

DEFAULT_TEXT_TEMPLATE = "deploy_text"
DEFAULT_HTML_TEMPLATE = "deploy_html"

_TRUTHY = {"1", "true", "yes", "on"}

_MISSING_MESSAGES = {
    "api_key": "Please set mailgun_api_key accordingly",
    "domain": "Please set mailgun_domain accordingly",
    "from_address": "Please set mailgun_from to your desired From field",
    "recipients": "Please specify mailgun_recipients",
    "recipient_domain": "Please set mailgun_recipient_domain accordingly",
}


def default_subject(stage: str, application: str) -> str:
    """Return ``"[Deployment] <Stage> <Application> deploy completed"``."""
    parts = ["[Deployment]", stage.capitalize(), application.capitalize(), "deploy completed"]
    return re.sub(r"\s+", " ", " ".join(parts))


class NotifierConfig(BaseModel):
    """Everything the notifier reads from the deployment."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    api_key: Optional[str] = Field(default=None, alias="mailgun_api_key")
    domain: Optional[str] = Field(default=None, alias="mailgun_domain")
    api_host: str = Field(default="mailgun.net", alias="mailgun_api_host")
    timeout: float = Field(default=10.0, alias="mailgun_timeout")

    from_address: Optional[str] = Field(default=None, alias="mailgun_from")
    recipients: Optional[List[str]] = Field(default=None, alias="mailgun_recipients")
    cc: Optional[List[str]] = Field(default=None, alias="mailgun_cc")
    bcc: Optional[List[str]] = Field(default=None, alias="mailgun_bcc")
    recipient_domain: Optional[str] = Field(default=None, alias="mailgun_recipient_domain")
    subject: Optional[str] = Field(default=None, alias="mailgun_subject")

    text_template: Optional[str] = Field(default=DEFAULT_TEXT_TEMPLATE, alias="mailgun_text_template")
    html_template: Optional[str] = Field(default=DEFAULT_HTML_TEMPLATE, alias="mailgun_html_template")

    off: bool = Field(default=False, alias="mailgun_off")
    include_servers: bool = Field(default=False, alias="mailgun_include_servers")
    deploy_servers: Optional[List[str]] = Field(default=None, alias="mailgun_deploy_servers")

    stage: str = ""
    application: str = ""
    scm: str = ""
    repository_url: Optional[str] = None
    previous_revision: Optional[str] = Field(default=None, alias="mailgun_previous_revision")
    current_revision: Optional[str] = None
    deployer_username: Optional[str] = None

    @field_validator("recipients", "cc", "bcc", "deploy_servers", mode="before")
    @classmethod
    def _split_list(cls, value: Any) -> Any:
        if isinstance(value, str):
            items = [item.strip() for item in value.split(",")]
            return [item for item in items if item] or None
        return value

    @field_validator("text_template", "html_template", "subject", "repository_url", mode="before")
    @classmethod
    def _blank_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("off", "include_servers", mode="before")
    @classmethod
    def _parse_flag(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower() in _TRUTHY
        return value

    @model_validator(mode="after")
    def _fill_subject(self) -> "NotifierConfig":
        if self.subject is None:
            self.subject = default_subject(self.stage, self.application)
        return self

    @classmethod
    def variable_names(cls) -> Dict[str, str]:
        """Map deploy variable names to field names."""
        return {
            (info.alias or name): name for name, info in cls.model_fields.items()
        }

    @classmethod
    def from_variables(cls, variables: Mapping[str, Any]) -> "NotifierConfig":
        """Build a config from deploy tool variables such as ``mailgun_from``.

        Raises:
            ConfigurationError: If a variable has a value of the wrong type.
        """
        try:
            return cls.model_validate(dict(variables))
        except ValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in exc.errors()
            )
            raise ConfigurationError(f"Invalid configuration: {problems}") from exc

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "NotifierConfig":
        """Build a config from upper-cased variable names in the environment."""
        env = os.environ if environ is None else environ
        names = cls.variable_names()
        variables = {
            key.lower(): value
            for key, value in env.items()
            if key.lower() in names
        }
        return cls.from_variables(variables)

    def require(self, field: str) -> Any:
        """Return ``field`` or raise :class:`ConfigurationError` if unset."""
        value = getattr(self, field)
        if value is None or value == "" or value == []:
            message = _MISSING_MESSAGES.get(field, f"Please set {field} accordingly")
            raise ConfigurationError(message)
        return value


__all__ = [
    "DEFAULT_HTML_TEMPLATE",
    "DEFAULT_TEXT_TEMPLATE",
    "NotifierConfig",
    "default_subject",
]

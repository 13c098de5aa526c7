"""Recipient list normalisation.

Mailgun accepts a comma separated list in the ``to``, ``cc`` and ``bcc``
fields.  Deploy configurations usually list bare user names (``"spike"``)
next to full addresses, so unqualified entries get a default domain appended
before the list is deduplicated and sorted.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Union

from deploy_mailgun.errors import ConfigurationError

Recipients = Union[str, Iterable[str], None]

# An address is fully qualified once an ``@`` is followed by something.
_QUALIFIED = re.compile(r"@.")


def _as_list(recipients: Recipients) -> List[str]:
    if recipients is None:
        return []
    if isinstance(recipients, str):
        return [recipients]
    return list(recipients)


def is_qualified(recipient: str) -> bool:
    """Return ``True`` if ``recipient`` already carries a domain."""
    return _QUALIFIED.search(recipient) is not None


def build_recipients(
    recipients: Recipients,
    default_domain: Optional[str] = None,
    fallback_domain: Optional[str] = None,
) -> str:
    """Return a deduplicated, sorted, comma delimited recipient string.

    Args:
        recipients: A single address or a sequence of addresses.  Entries
            without a domain are qualified with ``default_domain``.
        default_domain: Domain appended to unqualified entries.
        fallback_domain: Used when ``default_domain`` is not given; the
            notifier passes the configured recipient domain here.

    Returns:
        The addresses joined with ``","`` and no spaces, e.g.
        ``"a@example.com,b@example.com"``.

    Raises:
        ConfigurationError: If an entry needs a domain and neither
            ``default_domain`` nor ``fallback_domain`` is set.
    """
    entries = _as_list(recipients)
    domain = default_domain or fallback_domain
    if not domain and not all(is_qualified(r) for r in entries):
        raise ConfigurationError(
            "Please set mailgun_recipient_domain accordingly"
        )

    qualified = [r if is_qualified(r) else f"{r}@{domain}" for r in entries]
    return ",".join(sorted(set(qualified)))


__all__ = ["Recipients", "build_recipients", "is_qualified"]

"""Abstract interface and implementation for delivering notifications.

This subpackage defines a common ``send`` interface and a concrete
implementation targeting the Mailgun HTTP API.  The notifier only depends on
the interface, so tests and alternative transports can supply their own
sender without changing the calling semantics.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping


class EmailSender(ABC):
    """Abstract base class for email senders.

    Implementations must provide a ``send`` method taking the already
    assembled message fields: ``to``, ``from``, ``subject`` and optionally
    ``cc``, ``bcc``, ``text``, ``html`` and any provider specific extras.
    """

    @abstractmethod
    def send(self, data: Mapping[str, Any]) -> Any:
        """Deliver a single message.

        Args:
            data: Form fields of the message.

        Raises:
            DeliveryError: If the message could not be handed over.
        """
        raise NotImplementedError


__all__ = ["EmailSender"]

"""Exception types raised by the notifier.

Configuration problems are fatal and surface before any request is built.
Delivery problems wrap the underlying ``requests`` exception.
"""

from __future__ import annotations


class DeployMailgunError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(DeployMailgunError):
    """Raised when a required setting is missing or invalid."""


class DeliveryError(DeployMailgunError):
    """Raised when the Mailgun API call fails."""


__all__ = ["DeployMailgunError", "ConfigurationError", "DeliveryError"]

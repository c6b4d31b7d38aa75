"""Abstract interface and result types for sending email messages.

This subpackage defines the ``EmailSender`` interface that transports
implement, the ``DispatchResult`` they return and the exceptions they raise.
The concrete Elastic Email transport lives in
:mod:`elasticemail_transport.mailer.elastic_sender`.  Client code depends on
``EmailSender`` so that a transport can be swapped without changing the
calling semantics.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from elasticemail_transport.message import OutboundMessage


class MailerError(RuntimeError):
    """Base class for failures raised by a sender."""


class TransportFailure(MailerError):
    """The HTTP call could not be completed (DNS, TCP, TLS, timeout)."""


class DeliveryError(MailerError):
    """The provider answered with an HTTP error status.

    The raw response body is embedded in the message verbatim so operators
    can see the provider's own diagnosis.
    """

    def __init__(self, status_code: int, body: str,
                 provider: Optional[str] = None) -> None:
        self.status_code = status_code
        self.body = body
        label = provider or "Provider"
        super().__init__(f"{label} API error ({status_code}): {body}")


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of one HTTP submission."""

    status_code: int
    body: str

    @property
    def ok(self) -> bool:
        return self.status_code < 400


class EmailSender(ABC):
    """Abstract base class for email senders.

    Implementations must provide a ``send`` method taking a fully assembled
    :class:`~elasticemail_transport.message.OutboundMessage`.
    """

    @abstractmethod
    def send(self, message: OutboundMessage) -> DispatchResult:
        """Send a single email message.

        Args:
            message: The message to deliver.

        Returns:
            The provider's status code and raw response body.

        Raises:
            TransportFailure: If the remote call could not be completed.
            DeliveryError: If the provider rejected the request.
        """
        raise NotImplementedError


__all__ = [
    "DeliveryError",
    "DispatchResult",
    "EmailSender",
    "MailerError",
    "TransportFailure",
]

"""Top‑level package for the Elastic Email transport.

This package turns an already assembled email into the JSON body expected by
the Elastic Email v4 HTTP API and submits it in a single request.  The
``message`` module holds the framework-neutral message types and the
``mailer`` subpackage holds the sender interface and the Elastic Email
implementation.

The most common names are re-exported here for convenience when using
``from elasticemail_transport import ...``.
"""

from __future__ import annotations

from elasticemail_transport.mailer import (
    DeliveryError,
    DispatchResult,
    EmailSender,
    MailerError,
    TransportFailure,
)
from elasticemail_transport.mailer.elastic_sender import ElasticEmailSender
from elasticemail_transport.message import (
    Address,
    Attachment,
    OutboundMessage,
    from_email_message,
)

__all__ = [
    "Address",
    "Attachment",
    "DeliveryError",
    "DispatchResult",
    "ElasticEmailSender",
    "EmailSender",
    "MailerError",
    "OutboundMessage",
    "TransportFailure",
    "from_email_message",
]

# SemVer version of the package
__version__: str = "0.1.0"

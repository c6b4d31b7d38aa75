"""Value objects describing an outbound email.

``OutboundMessage`` is the framework-neutral message handed to a sender.  It
carries everything the Elastic Email payload needs: the sender identity, the
To/Cc/Bcc and Reply-To address lists, the subject, the HTML and plain-text
bodies and any attachments.  Instances are immutable and built once per
send.

Callers that already hold a stdlib :class:`email.message.EmailMessage` can
use :func:`from_email_message` instead of building the object by hand.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import getaddresses, parseaddr
from typing import Any, Iterable, List, Optional, Sequence, Tuple

# Bare "type/subtype", no parameters or whitespace.
_MEDIA_TYPE = re.compile(r"^[\w.+-]+/[\w.+-]+$")


@dataclass(frozen=True)
class Address:
    """A mailbox: a bare address plus an optional display name."""

    address: str
    name: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.address:
            raise ValueError("address must not be empty")

    @classmethod
    def parse(cls, value: str) -> "Address":
        """Parse ``"Name <addr>"`` or a bare ``addr`` string."""
        name, address = parseaddr(value)
        return cls(address=address, name=name or None)

    def __str__(self) -> str:
        if self.name:
            return f"{self.name} <{self.address}>"
        return self.address


@dataclass(frozen=True)
class Attachment:
    """A file to embed in the message."""

    content: bytes
    filename: str
    content_type: str = "application/octet-stream"

    def __post_init__(self) -> None:
        if not _MEDIA_TYPE.match(self.content_type):
            raise ValueError(
                f"content_type must be 'type/subtype', got {self.content_type!r}"
            )

    @property
    def media_type(self) -> str:
        return self.content_type.split("/", 1)[0]

    @property
    def media_subtype(self) -> str:
        return self.content_type.split("/", 1)[1]

    def __repr__(self) -> str:
        return (
            f"Attachment(filename={self.filename!r}, "
            f"content_type={self.content_type!r}, size={len(self.content)})"
        )


@dataclass(frozen=True)
class OutboundMessage:
    """A fully assembled email ready to be dispatched.

    Only the first entry of ``sender`` is used when sending.  Recipient
    display names are kept on the object but are not transmitted.
    """

    sender: Tuple[Address, ...]
    subject: str = ""
    to: Tuple[Address, ...] = ()
    cc: Tuple[Address, ...] = ()
    bcc: Tuple[Address, ...] = ()
    reply_to: Tuple[Address, ...] = ()
    text_body: Optional[str] = None
    html_body: Optional[str] = None
    attachments: Tuple[Attachment, ...] = ()

    def __post_init__(self) -> None:
        # Address fields take an Address, a "Name <addr>" string, or a
        # sequence of either; everything is frozen into tuples of Address.
        for name in ("sender", "to", "cc", "bcc", "reply_to"):
            object.__setattr__(self, name, _as_addresses(getattr(self, name)))
        attachments = tuple(self.attachments)
        for att in attachments:
            if not isinstance(att, Attachment):
                raise TypeError(f"expected Attachment, got {type(att).__name__}")
        object.__setattr__(self, "attachments", attachments)
        if not self.sender:
            raise ValueError("a sender address is required")

    @property
    def from_address(self) -> Address:
        return self.sender[0]

    @property
    def has_body(self) -> bool:
        return bool(self.text_body) or bool(self.html_body)

    def to_addresses(self) -> List[str]:
        return [a.address for a in self.to]

    def cc_addresses(self) -> List[str]:
        return [a.address for a in self.cc]

    def bcc_addresses(self) -> List[str]:
        return [a.address for a in self.bcc]

    def reply_to_addresses(self) -> List[str]:
        return [a.address for a in self.reply_to]


def _as_address(value: Any) -> Address:
    if isinstance(value, Address):
        return value
    if isinstance(value, str):
        return Address.parse(value)
    raise TypeError(f"expected Address or str, got {type(value).__name__}")


def _as_addresses(value: Any) -> Tuple[Address, ...]:
    if isinstance(value, (Address, str)):
        return (_as_address(value),)
    items: Iterable[Any] = value
    return tuple(_as_address(v) for v in items)


def _addresses(msg: EmailMessage, header: str) -> Tuple[Address, ...]:
    values: Sequence[str] = msg.get_all(header, [])
    return tuple(
        Address(address=addr, name=name or None)
        for name, addr in getaddresses([str(v) for v in values])
        if addr
    )


def _body(msg: EmailMessage, subtype: str) -> Optional[str]:
    part = msg.get_body(preferencelist=(subtype,))
    if part is None or part.get_content_subtype() != subtype:
        return None
    return part.get_content()


def from_email_message(msg: EmailMessage) -> OutboundMessage:
    """Build an :class:`OutboundMessage` from a stdlib ``EmailMessage``.

    The message should be created with ``email.policy.default`` (the
    default for ``EmailMessage``) so that headers and parts expose the
    modern API.  Attachment parts without a filename are ignored.

    Raises:
        ValueError: If the message has no ``From`` header.
    """
    sender = _addresses(msg, "From")
    if not sender:
        raise ValueError("message has no From address")

    attachments: List[Attachment] = []
    for part in msg.iter_attachments():
        filename = part.get_filename()
        if not filename:
            continue
        payload = part.get_payload(decode=True) or b""
        attachments.append(
            Attachment(
                content=payload,
                filename=filename,
                content_type=part.get_content_type(),
            )
        )

    return OutboundMessage(
        sender=sender,
        subject=str(msg.get("Subject", "")),
        to=_addresses(msg, "To"),
        cc=_addresses(msg, "Cc"),
        bcc=_addresses(msg, "Bcc"),
        reply_to=_addresses(msg, "Reply-To"),
        text_body=_body(msg, "plain"),
        html_body=_body(msg, "html"),
        attachments=tuple(attachments),
    )


__all__ = ["Address", "Attachment", "OutboundMessage", "from_email_message"]

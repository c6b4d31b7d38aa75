import sys
from email.message import EmailMessage
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from elasticemail_transport.message import (
    Address,
    Attachment,
    OutboundMessage,
    from_email_message,
)


def test_address_parse_and_format() -> None:
    addr = Address.parse("Jane Doe <jane@x.com>")
    assert addr == Address("jane@x.com", "Jane Doe")
    assert str(addr) == "Jane Doe <jane@x.com>"
    assert str(Address.parse("jane@x.com")) == "jane@x.com"


def test_address_requires_value() -> None:
    with pytest.raises(ValueError):
        Address("")


@pytest.mark.parametrize(
    "content_type",
    ["text", "text/", "/plain", "a/b/c", "text/plain; charset=utf-8",
     "text/ plain"],
)
def test_attachment_rejects_malformed_content_type(content_type: str) -> None:
    with pytest.raises(ValueError):
        Attachment(b"x", "x.bin", content_type)


def test_attachment_media_parts() -> None:
    att = Attachment(b"\x89PNG", "logo.png", "image/png")
    assert (att.media_type, att.media_subtype) == ("image", "png")


def test_message_requires_sender() -> None:
    with pytest.raises(ValueError):
        OutboundMessage(sender=(), to=(Address("a@example.com"),))


def test_message_freezes_sequences() -> None:
    to = [Address("a@example.com")]
    message = OutboundMessage(sender=Address("s@example.com"), to=to)
    to.append(Address("b@example.com"))
    assert message.to_addresses() == ["a@example.com"]
    assert message.from_address.address == "s@example.com"
    assert message.has_body is False


def _mime_message() -> EmailMessage:
    msg = EmailMessage()
    msg["From"] = "Jane Doe <jane@x.com>"
    msg["To"] = "a@example.com, Bob <b@example.com>"
    msg["Cc"] = "c@example.com"
    msg["Reply-To"] = "Support <help@x.com>"
    msg["Subject"] = "Invoice"
    msg.set_content("hi\n")
    msg.add_alternative("<p>hi</p>\n", subtype="html")
    msg.add_attachment(
        b"%PDF-1.4", maintype="application", subtype="pdf",
        filename="invoice.pdf",
    )
    return msg


def test_from_email_message_maps_headers_and_bodies() -> None:
    message = from_email_message(_mime_message())

    assert message.from_address == Address("jane@x.com", "Jane Doe")
    assert message.to_addresses() == ["a@example.com", "b@example.com"]
    assert message.cc_addresses() == ["c@example.com"]
    assert message.bcc_addresses() == []
    assert message.reply_to_addresses() == ["help@x.com"]
    assert message.subject == "Invoice"
    assert message.text_body == "hi\n"
    assert message.html_body == "<p>hi</p>\n"


def test_from_email_message_collects_attachments() -> None:
    message = from_email_message(_mime_message())

    assert message.attachments == (
        Attachment(b"%PDF-1.4", "invoice.pdf", "application/pdf"),
    )


def test_from_email_message_plain_text_only() -> None:
    msg = EmailMessage()
    msg["From"] = "jane@x.com"
    msg["To"] = "a@example.com"
    msg["Subject"] = "Plain"
    msg.set_content("just text\n")

    message = from_email_message(msg)
    assert message.text_body == "just text\n"
    assert message.html_body is None
    assert message.attachments == ()


def test_from_email_message_requires_from() -> None:
    msg = EmailMessage()
    msg["To"] = "a@example.com"
    msg.set_content("x\n")
    with pytest.raises(ValueError):
        from_email_message(msg)


def test_message_parses_string_addresses() -> None:
    message = OutboundMessage(
        sender="Jane Doe <jane@x.com>",
        to=["a@example.com", Address("b@example.com")],
        reply_to="help@x.com",
    )
    assert message.sender == (Address("jane@x.com", "Jane Doe"),)
    assert message.to_addresses() == ["a@example.com", "b@example.com"]
    assert message.reply_to_addresses() == ["help@x.com"]


def test_message_rejects_non_address_entries() -> None:
    with pytest.raises(TypeError):
        OutboundMessage(sender=Address("jane@x.com"), cc=[42])
    with pytest.raises(TypeError):
        OutboundMessage(sender=Address("jane@x.com"), attachments=[b"raw"])


def test_from_email_message_skips_unnamed_attachments() -> None:
    msg = EmailMessage()
    msg["From"] = "jane@x.com"
    msg["To"] = "a@example.com"
    msg.set_content("see attached\n")
    msg.add_attachment(b"no name", maintype="application", subtype="octet-stream")
    msg.add_attachment(b"abc", maintype="application", subtype="octet-stream",
                       filename="named.bin")

    message = from_email_message(msg)
    assert message.attachments == (
        Attachment(b"abc", "named.bin", "application/octet-stream"),
    )

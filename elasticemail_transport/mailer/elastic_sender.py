"""Elastic Email based email sender implementation.

This module defines ``ElasticEmailSender``, which delivers an
:class:`~elasticemail_transport.message.OutboundMessage` through the Elastic
Email v4 ``/emails`` endpoint.  The message is mapped onto the provider's
JSON schema, posted once, and any HTTP status of 400 or above is turned into
a :class:`~elasticemail_transport.mailer.DeliveryError`.  Nothing is
retried.

Environment variables used by :meth:`ElasticEmailSender.from_env`:

* ``ELASTICEMAIL_API_KEY`` – API key sent in the ``X-ElasticEmail-ApiKey``
  header
* ``ELASTICEMAIL_API_URL`` – Optional endpoint override; defaults to the
  official v4 URL
* ``ELASTICEMAIL_TIMEOUT`` – Optional request timeout in seconds
"""

from __future__ import annotations

import base64
import json
import logging
import os
from typing import Any, Dict, List, Optional

import requests

from elasticemail_transport.mailer import (
    DeliveryError,
    DispatchResult,
    EmailSender,
    TransportFailure,
)
from elasticemail_transport.message import Attachment, OutboundMessage

ELASTIC_EMAIL_URL = "https://api.elasticemail.com/v4/emails"
API_KEY_HEADER = "X-ElasticEmail-ApiKey"
DEFAULT_TIMEOUT: float = 10.0

LOGGER = logging.getLogger(__name__)


def _encode_attachments(attachments: List[Attachment]) -> List[Dict[str, str]]:
    return [
        {
            "BinaryContent": base64.b64encode(att.content).decode("ascii"),
            "Name": att.filename,
            "ContentType": f"{att.media_type}/{att.media_subtype}",
        }
        for att in attachments
    ]


class ElasticEmailSender(EmailSender):
    """Elastic Email implementation of the ``EmailSender`` interface."""

    def __init__(
        self,
        api_key: str,
        *,
        url: str = ELASTIC_EMAIL_URL,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        verify: bool = True,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not api_key:
            raise ValueError("an Elastic Email API key is required")
        self._api_key = api_key
        self._url = url
        self._timeout = timeout
        self._verify = verify
        self._session = session

    @classmethod
    def from_env(cls) -> "ElasticEmailSender":
        """Build a sender from ``ELASTICEMAIL_*`` environment variables."""
        api_key = os.environ.get("ELASTICEMAIL_API_KEY", "")
        if not api_key:
            raise ValueError("ELASTICEMAIL_API_KEY must be set")
        url = os.environ.get("ELASTICEMAIL_API_URL") or ELASTIC_EMAIL_URL
        timeout_raw = os.environ.get("ELASTICEMAIL_TIMEOUT")
        timeout = DEFAULT_TIMEOUT
        if timeout_raw:
            try:
                timeout = float(timeout_raw)
            except ValueError as exc:
                raise ValueError("ELASTICEMAIL_TIMEOUT must be a number") from exc
        return cls(api_key, url=url, timeout=timeout)

    def __str__(self) -> str:
        return "elasticemail"

    def __repr__(self) -> str:
        # Never expose the key.
        return f"ElasticEmailSender(url={self._url!r})"

    @property
    def url(self) -> str:
        return self._url

    def build_payload(self, message: OutboundMessage) -> Dict[str, Any]:
        """Map ``message`` onto the Elastic Email v4 request body.

        Empty recipient categories, a missing Reply-To and an empty
        attachment list are left out of the payload rather than sent as
        empty values.  The HTML body entry always precedes the plain-text
        one.
        """
        recipients: Dict[str, List[str]] = {}
        for key, addresses in (
            ("To", message.to_addresses()),
            ("CC", message.cc_addresses()),
            ("BCC", message.bcc_addresses()),
        ):
            if addresses:
                recipients[key] = addresses

        body: List[Dict[str, str]] = []
        if message.html_body:
            body.append({"ContentType": "HTML", "Content": message.html_body})
        if message.text_body:
            body.append(
                {"ContentType": "PlainText", "Content": message.text_body}
            )

        content: Dict[str, Any] = {
            "Body": body,
            "From": str(message.from_address),
        }
        reply_to = message.reply_to_addresses()
        if reply_to:
            content["ReplyTo"] = reply_to[0]
        content["Subject"] = message.subject
        if message.attachments:
            content["Attachments"] = _encode_attachments(
                list(message.attachments)
            )

        return {"Recipients": recipients, "Content": content}

    def send(self, message: OutboundMessage) -> DispatchResult:
        """Send ``message`` through the Elastic Email API.

        Args:
            message: The message to deliver.

        Returns:
            The HTTP status code and raw body of the provider's reply.  The
            body is not parsed.

        Raises:
            TransportFailure: If the request could not be completed.
            DeliveryError: If the provider answered with status >= 400.
        """
        payload = self.build_payload(message)
        headers = {
            "Content-Type": "application/json",
            API_KEY_HEADER: self._api_key,
        }
        post = self._session.post if self._session is not None else requests.post

        LOGGER.debug(
            "Posting message to %s (%d recipients, %d attachments)",
            self._url,
            sum(len(v) for v in payload["Recipients"].values()),
            len(message.attachments),
        )
        try:
            response = post(
                self._url,
                data=json.dumps(payload),
                headers=headers,
                timeout=self._timeout,
                verify=self._verify,
            )
        except requests.RequestException as exc:
            raise TransportFailure(
                f"Failed to reach Elastic Email API at {self._url}: {exc}"
            ) from exc

        LOGGER.debug("Elastic Email API responded with %s", response.status_code)
        result = DispatchResult(status_code=response.status_code,
                                body=response.text)
        if not result.ok:
            raise DeliveryError(result.status_code, result.body,
                                provider="Elastic Email")
        return result


__all__ = [
    "API_KEY_HEADER",
    "DEFAULT_TIMEOUT",
    "ELASTIC_EMAIL_URL",
    "ElasticEmailSender",
]

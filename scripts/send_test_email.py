"""Send a single test email through Elastic Email.

Handy for checking an API key and sender domain after configuring a new
account.  Configuration comes from the environment::

    ELASTICEMAIL_API_KEY=... \\
    ELASTICEMAIL_FROM="Mailer <mailer@example.com>" \\
    ELASTICEMAIL_TO=me@example.com \\
    python scripts/send_test_email.py
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from elasticemail_transport import (  # noqa: E402
    Address,
    ElasticEmailSender,
    MailerError,
    OutboundMessage,
)


def main() -> int:
    sender_raw = os.environ.get("ELASTICEMAIL_FROM")
    to_raw = os.environ.get("ELASTICEMAIL_TO")
    if not sender_raw or not to_raw:
        print("ELASTICEMAIL_FROM and ELASTICEMAIL_TO must be set", file=sys.stderr)
        return 2

    message = OutboundMessage(
        sender=(Address.parse(sender_raw),),
        to=tuple(Address.parse(a) for a in to_raw.split(",") if a.strip()),
        subject="Elastic Email transport test",
        html_body="<p>This is a test message.</p>",
        text_body="This is a test message.",
    )
    try:
        result = ElasticEmailSender.from_env().send(message)
    except (MailerError, ValueError) as exc:
        print(f"Send failed: {exc}", file=sys.stderr)
        return 1
    print(f"Accepted with HTTP {result.status_code}")
    return 0


if __name__ == "__main__":  # pragma: no cover - manual invocation
    logging.basicConfig(level=logging.DEBUG)
    sys.exit(main())

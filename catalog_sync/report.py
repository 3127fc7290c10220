import html
import json
import smtplib
from email.message import EmailMessage
from typing import Sequence

from loguru import logger

from catalog_sync.entities import ApplyFailure, ApplyPhase

HTML_TEMPLATE = """\
<!DOCTYPE html>
<html lang="en">
<head><meta charset="UTF-8"><title>{title}</title></head>
<body style="font-family: sans-serif;">
  <h1>{title}</h1>
  <p>Phase <strong>{phase}</strong>: from <strong>{from_system}</strong>
  to <strong>{to_system}</strong></p>
  <h2>Errors ({count})</h2>
  <pre style="background: #f4f4f4; padding: 1rem;">{errors}</pre>
</body>
</html>
"""


class SyncReportMailer:
    def __init__(
            self, host: str, port: int, username: str | None,
            password: str | None, sender: str, recipient: str
    ):
        self._host = host
        self._port = port
        self._username = username
        self._password = password
        self._sender = sender
        self._recipient = recipient

    def send_report(
            self, phase: ApplyPhase, from_system: str, to_system: str,
            failures: Sequence[ApplyFailure]
    ) -> bool:
        message = self._build_message(phase, from_system, to_system, failures)

        logger.info(f"Sending the sync report of phase {phase} to "
                    f"{self._recipient}")
        try:
            with smtplib.SMTP(self._host, self._port) as smtp:
                smtp.starttls()
                if self._username:
                    smtp.login(self._username, self._password or "")
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as error:
            logger.error(f"Failed to send the sync report of phase {phase}: "
                         f"{error}")
            return False

        logger.info(f"Sync report of phase {phase} was sent")
        return True

    def _build_message(
            self, phase: ApplyPhase, from_system: str, to_system: str,
            failures: Sequence[ApplyFailure]
    ) -> EmailMessage:
        title = f"Product Sync Report: {from_system} → {to_system}"
        errors = json.dumps(
            [{"record": failure.record, "error": failure.error}
             for failure in failures],
            indent=2, ensure_ascii=False, default=str
        )

        message = EmailMessage()
        message["Subject"] = title
        message["From"] = self._sender
        message["To"] = self._recipient
        message.set_content(f"{title}\nPhase {phase}\n\n{errors}")
        message.add_alternative(HTML_TEMPLATE.format(
            title=html.escape(title),
            phase=html.escape(str(phase)),
            from_system=html.escape(from_system),
            to_system=html.escape(to_system),
            count=len(failures),
            errors=html.escape(errors)
        ), subtype="html")

        return message

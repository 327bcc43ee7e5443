from __future__ import annotations

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional, Protocol

from ..core.constants import DEFAULT_MAIL_SENDER

logger = logging.getLogger(__name__)


class Mailer(Protocol):
    def send(self, to_email: str, subject: str, body_text: str, body_html: Optional[str] = None) -> bool:
        raise NotImplementedError


class SmtpMailer(Mailer):
    """Send mail through an SMTP relay; without a host configured mail is only logged."""

    def __init__(
        self,
        host: str = "",
        port: int = 587,
        *,
        username: str = "",
        password: str = "",
        sender: str = DEFAULT_MAIL_SENDER,
        use_tls: bool = True,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender
        self.use_tls = use_tls

    def send(self, to_email: str, subject: str, body_text: str, body_html: Optional[str] = None) -> bool:
        if not self.host:
            logger.warning("SMTP not configured; mail not sent. [to: %s, subject: %s]", to_email, subject)
            return False

        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.sender
        msg["To"] = to_email
        msg.attach(MIMEText(body_text, "plain"))
        if body_html:
            msg.attach(MIMEText(body_html, "html"))

        with smtplib.SMTP(self.host, self.port) as server:
            if self.use_tls:
                server.starttls()
            if self.username:
                server.login(self.username, self.password)
            server.sendmail(self.sender, [to_email], msg.as_string())

        logger.info("Mail sent. [to: %s, subject: %s]", to_email, subject)
        return True

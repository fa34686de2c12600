import logging
import smtplib
from email.mime.text import MIMEText

from arkvault import config
from arkvault.errors import MailerError

logger = logging.getLogger(__name__)


class Mailer:
    """Sends plain-text mail through one SMTP server."""

    def __init__(self, host, port=587, user=None, password=None, use_tls=True, use_ssl=False,
                 sender=config.MAIL_FROM):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.use_tls = use_tls
        self.use_ssl = use_ssl
        self.sender = sender

    @classmethod
    def from_config(cls, config) -> "Mailer":
        return cls(
            config.SMTP_HOST,
            port=config.SMTP_PORT,
            user=config.SMTP_USER,
            password=config.SMTP_PASSWORD,
            use_tls=config.SMTP_USE_TLS,
            use_ssl=config.SMTP_SSL,
            sender=config.MAIL_FROM,
        )

    @classmethod
    def from_user_config(cls, row, cipher) -> "Mailer":
        """Build a mailer from a user's mailer_configuration row, decrypting its password."""
        password = cipher.decrypt(row.encrypted_password) if row.encrypted_password else None
        return cls(
            row.host,
            port=row.port,
            user=row.username,
            password=password,
            use_tls=row.use_tls,
            use_ssl=row.use_ssl,
            sender=row.sender or row.username or config.MAIL_FROM,
        )

    def _connect(self):
        # implicit TLS (port 465) vs plain SMTP with optional STARTTLS
        if self.use_ssl:
            return smtplib.SMTP_SSL(self.host, int(self.port), timeout=30)
        return smtplib.SMTP(self.host, int(self.port), timeout=30)

    def send(self, to: str, subject: str, body: str) -> None:
        if not self.host:
            raise MailerError("SMTP_HOST is not configured; cannot send mail.")

        msg = MIMEText(body, "plain", "utf-8")
        msg["Subject"] = subject
        msg["From"] = self.sender
        msg["To"] = to

        try:
            with self._connect() as server:
                if self.use_tls and not self.use_ssl:
                    server.starttls()
                if self.user and self.password:
                    server.login(self.user, self.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as ex:
            logger.warning("mail to %s failed: %s", to, ex)
            raise MailerError(f"Could not deliver mail: {ex}") from ex

        logger.info("mail sent to %s", to)


def share_message(sender_email: str, title: str, username: str, password: str, url=None, note=None):
    """Build the subject and body of a credential share email."""
    subject = f"{sender_email} shared '{title}' with you"
    lines = [
        f"{sender_email} shared a credential with you through ArkVault.",
        "",
        f"Title:    {title}",
        f"Username: {username}",
        f"Password: {password}",
    ]
    if url:
        lines.append(f"URL:      {url}")
    if note:
        lines += ["", note]
    return subject, "\n".join(lines)

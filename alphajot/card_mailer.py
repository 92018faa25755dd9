"""
Emails a confirmed card: subject line from the completion model, inline-styled
HTML body, SMTP relay. Sends run in the background after the confirm page has
already been returned, so outcomes are only logged.
"""
import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from .card_page import ATTRIBUTION
from .card_prompts import subject_prompt
from .completion import complete

logger = logging.getLogger("card_mailer")

DEFAULT_SUBJECT = "Merry Christmas!"

CARD_STYLE = (
    "font-family: Rockwell; width: 80%; aspect-ratio: 1; max-width: 600px; "
    "background-color: #FFFFFF; border-radius: 10px; box-shadow: 0px 5px 15px #666666; "
    "margin: auto; padding: 20px; display: flex; align-items: center; justify-content: center;"
)
GREETING_STYLE = "width: 80%; font-size: x-large; font-weight: bold; margin-bottom: 15px;"
ATTRIBUTION_STYLE = "font-size: x-small; font-weight: normal;"


def generate_subject(client, settings, message_html: str) -> str:
    try:
        subject = complete(client, settings, subject_prompt(message_html), temperature=0.5, max_tokens=20)
    except Exception as e:
        logger.warning("Subject generation failed, using default: %s", e)
        return DEFAULT_SUBJECT
    subject = " ".join(subject.split()).strip('"')
    return subject or DEFAULT_SUBJECT


def build_email_html(image_url: str, message_html: str) -> str:
    return (
        "<html><body>"
        f'<img class="card" style="{CARD_STYLE}" src="{image_url}"><br>'
        f'<div class="card" style="{CARD_STYLE}"><div class="greeting" style="{GREETING_STYLE}">'
        f"<p>{message_html}</p>"
        f'<p class="attribution" style="{ATTRIBUTION_STYLE}">{ATTRIBUTION}</p></div></div>'
        "</body></html>"
    )


def build_email_text(message_html: str) -> str:
    text = message_html.replace("</p>", "\n").replace("<p>", "\n")
    lines = [ln.strip() for ln in text.split("\n") if ln.strip()]
    return "\n\n".join(lines + [ATTRIBUTION])


class CardMailer:
    """Composes card emails and hands them to the SMTP relay."""

    def __init__(self, client, settings, smtp_factory=None):
        self.client = client
        self.settings = settings
        self.smtp_factory = smtp_factory or self._connect

    def _connect(self):
        s = self.settings
        if s.email_port == 465:
            return smtplib.SMTP_SSL(
                s.email_host, s.email_port, timeout=s.smtp_timeout, context=ssl.create_default_context()
            )
        server = smtplib.SMTP(s.email_host, s.email_port, timeout=s.smtp_timeout)
        server.starttls(context=ssl.create_default_context())
        return server

    def compose(self, email: str, image_url: str, message_html: str) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = generate_subject(self.client, self.settings, message_html)
        msg["From"] = self.settings.mail_from
        msg["To"] = email
        msg.attach(MIMEText(build_email_text(message_html), "plain", "utf-8"))
        msg.attach(MIMEText(build_email_html(image_url, message_html), "html", "utf-8"))
        return msg

    def send(self, email: str, image_url: str, message_html: str) -> str:
        """Compose and relay one card email. Returns the subject line used."""
        msg = self.compose(email, image_url, message_html)
        server = self.smtp_factory()
        try:
            if self.settings.email_user:
                server.login(self.settings.email_user, self.settings.email_password)
            server.sendmail(self.settings.mail_from, [email], msg.as_string())
        finally:
            server.quit()
        return msg["Subject"]


def _log_send_outcome(email: str):
    def _done(fut):
        err = fut.exception()
        if err is not None:
            logger.error("Email to %s failed: %r", email, err)
        else:
            logger.info("Email sent successfully to %s (subject: %s)", email, fut.result())
    return _done


def dispatch_card_email(executor, mailer: CardMailer, email: str, image_url: str, message_html: str):
    """Send in the background. The returned future is only for observers; callers need not wait."""
    fut = executor.submit(mailer.send, email, image_url, message_html)
    fut.add_done_callback(_log_send_outcome(email))
    return fut

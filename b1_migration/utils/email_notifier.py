# utils/email_notifier.py

import smtplib
import ssl
from email.message import EmailMessage
from email.utils import formataddr

from b1_migration.config.settings import get_email_context
from b1_migration.utils.logger_builder import global_logger as logger


def build_summary_message(outcome, total: int) -> str:
    """Plain-text body for the one summary mail sent per batch."""
    if outcome.succeeded:
        return f"Created {total} JEs successfully."

    lines = [
        f"Total: {total}, Success: 0, Failed: {total}",
        "Failures:",
    ]
    lines += [f"JE #{f.index + 1} | Memo='{f.memo}' | Error={f.error}" for f in outcome.failures]
    return "\n".join(lines)


def send_email(subject: str, body: str) -> bool:
    """
    Sends `body` as a plain-text mail, one message per SMTP_TO recipient.

    Returns False (and logs) when SMTP settings or recipients are missing.
    SMTP errors are logged and re-raised.
    """
    ctx = get_email_context()
    subject = subject or ctx["SUBJECT"]

    if not ctx["USER"] or not ctx["PASSWORD"] or not ctx["FROM"] or not ctx["TO"]:
        logger.error("❌ Email not sent: missing SMTP settings or no recipients.")
        return False

    sender = formataddr((ctx["FROM_NAME"], ctx["FROM"])) if ctx["FROM_NAME"] else ctx["FROM"]

    try:
        if ctx["PORT"] == 465:
            server = smtplib.SMTP_SSL(ctx["HOST"], ctx["PORT"], timeout=30, context=ssl.create_default_context())
        else:
            server = smtplib.SMTP(ctx["HOST"], ctx["PORT"], timeout=30)
        with server:
            if ctx["PORT"] != 465:
                server.starttls(context=ssl.create_default_context())
            server.login(ctx["USER"], ctx["PASSWORD"])
            for addr in ctx["TO"]:
                msg = EmailMessage()
                msg["Subject"] = subject
                msg["From"] = sender
                msg["To"] = addr
                msg.set_content(body or "")
                server.send_message(msg)
                logger.info(f"📧 Email sent to {addr}")
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"❌ Email send error: {e}")
        raise

    return True

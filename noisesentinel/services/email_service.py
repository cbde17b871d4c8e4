import asyncio
import logging
import smtplib
from email.message import EmailMessage
from email.utils import formataddr

from noisesentinel.config import settings

logger = logging.getLogger(__name__)


def _send_sync(message: EmailMessage) -> None:
    with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=30) as server:
        if settings.smtp_use_tls:
            server.starttls()
        if settings.smtp_app_password:
            server.login(settings.smtp_sender_email, settings.smtp_app_password)
        server.send_message(message)


async def send_email(to_email: str, subject: str, text_body: str, html_body: str | None = None) -> None:
    """Send an email, or log it when no SMTP host is configured.

    SMTP errors propagate; callers decide whether delivery is best effort.
    """
    if not settings.smtp_host:
        logger.info("SMTP disabled, email to %s not sent: %s", to_email, subject)
        return

    message = EmailMessage()
    message["Subject"] = subject
    message["From"] = formataddr((settings.smtp_sender_name, settings.smtp_sender_email))
    message["To"] = to_email
    message.set_content(text_body)
    if html_body:
        message.add_alternative(html_body, subtype="html")

    await asyncio.to_thread(_send_sync, message)
    logger.info("Email sent to %s: %s", to_email, subject)


def _html(title: str, body: str) -> str:
    return (
        "<html><body style=\"font-family: Arial, sans-serif;\">"
        f"<h2 style=\"color: #1f3b73;\">{title}</h2>{body}"
        "<p style=\"color: #777; font-size: 12px;\">NoiseSentinel - Traffic Noise Enforcement</p>"
        "</body></html>"
    )


async def send_password_reset_otp(to_email: str, full_name: str, otp: str) -> None:
    minutes = settings.otp_expiry_minutes
    text = (
        f"Dear {full_name},\n\nYour password reset code is {otp}. "
        f"It expires in {minutes} minutes.\n\nIf you did not request this, ignore this email."
    )
    html = _html(
        "Password Reset",
        f"<p>Dear {full_name},</p><p>Your password reset code is <b>{otp}</b>.</p>"
        f"<p>It expires in {minutes} minutes.</p>",
    )
    await send_email(to_email, "NoiseSentinel - Password Reset Code", text, html)


async def send_status_otp(to_email: str, full_name: str, otp: str) -> None:
    minutes = settings.otp_expiry_minutes
    text = (
        f"Dear {full_name},\n\nYour verification code to view your case status is {otp}. "
        f"It expires in {minutes} minutes."
    )
    html = _html(
        "Case Status Verification",
        f"<p>Dear {full_name},</p><p>Your verification code is <b>{otp}</b>.</p>"
        f"<p>It expires in {minutes} minutes.</p>",
    )
    await send_email(to_email, "NoiseSentinel - Case Status Verification Code", text, html)


async def send_case_statement_notification(
    to_email: str, full_name: str, case_no: str, statement_by: str, summary: str
) -> None:
    text = (
        f"Dear {full_name},\n\nA new statement was recorded in case {case_no} by {statement_by}:\n\n"
        f"{summary}\n\nYou can check the full status of your case on the NoiseSentinel public portal."
    )
    html = _html(
        f"New Statement in Case {case_no}",
        f"<p>Dear {full_name},</p><p>A new statement was recorded by <b>{statement_by}</b>:</p>"
        f"<blockquote>{summary}</blockquote>",
    )
    await send_email(to_email, f"NoiseSentinel - Case {case_no} Update", text, html)


async def send_account_created(to_email: str, full_name: str, username: str, role: str) -> None:
    text = (
        f"Dear {full_name},\n\nA NoiseSentinel {role} account was created for you. "
        f"Username: {username}\n\nPlease change your password after the first login."
    )
    html = _html(
        "Account Created",
        f"<p>Dear {full_name},</p><p>A <b>{role}</b> account was created for you.</p>"
        f"<p>Username: <b>{username}</b></p>",
    )
    await send_email(to_email, "NoiseSentinel - Account Created", text, html)

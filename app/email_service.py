"""
Unified Email Service using Custom SMTP or Resend (fallback)
Provides email functionality using MJML templates for responsive design
"""

import logging
import smtplib
import ssl
from datetime import datetime, timezone
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional, Union

import resend
from mjml import mjml_to_html

from . import config
from .config import BUSINESS_NAME, QUOTES_NOTIFY_TO
from .domain.quotes.schemas import QuoteRecord
from .email_templates import new_quote_notification_template, quote_confirmation_template
from .errors import NotificationError

logger = logging.getLogger(__name__)

# Initialize Resend as fallback
resend.api_key = config.RESEND_API_KEY


def send_via_smtp(
    to: list[str],
    subject: str,
    html_content: str,
    from_address: str,
) -> dict:
    """Send email via the configured SMTP server"""
    try:
        msg = MIMEMultipart("mixed")
        msg["Subject"] = subject
        msg["From"] = from_address
        msg["To"] = ", ".join(to)
        msg.attach(MIMEText(html_content, "html"))

        if config.SMTP_PORT == 465:
            context = ssl.create_default_context()
            server = smtplib.SMTP_SSL(config.SMTP_HOST, config.SMTP_PORT, context=context, timeout=30)
        else:
            server = smtplib.SMTP(config.SMTP_HOST, config.SMTP_PORT, timeout=30)
            if config.SMTP_USE_TLS:
                context = ssl.create_default_context()
                server.starttls(context=context)

        try:
            if config.SMTP_USERNAME:
                server.login(config.SMTP_USERNAME, config.SMTP_PASSWORD or "")
            server.sendmail(from_address.split("<")[-1].rstrip(">"), to, msg.as_string())
        finally:
            server.quit()

        logger.info(f"✅ SMTP email sent successfully via {config.SMTP_HOST}")
        return {"id": f"smtp-{datetime.now(timezone.utc).timestamp()}", "success": True}

    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"❌ SMTP send failed: {e}")
        raise NotificationError(f"SMTP failed: {str(e)}") from e


def compile_mjml_to_html(mjml_content: str) -> str:
    """Compile MJML template to production-ready HTML"""
    try:
        result = mjml_to_html(mjml_content)
    except Exception as e:
        logger.error(f"MJML compilation error: {e}")
        raise NotificationError(f"Failed to compile MJML template: {str(e)}") from e

    # mjml-python returns an object with .html and .errors
    errors = getattr(result, "errors", None)
    if errors:
        logger.warning(f"MJML compilation warnings: {errors}")
    return getattr(result, "html", None) or str(result)


async def send_email(
    to: Union[str, list[str]],
    subject: str,
    mjml_content: str,
    from_address: Optional[str] = None,
) -> dict:
    """
    Send an email using SMTP (if configured) or Resend (fallback)

    Args:
        to: Recipient email(s)
        subject: Email subject line
        mjml_content: MJML template content (will be compiled to HTML)
        from_address: Optional custom from address

    Returns:
        Send response dict

    Raises:
        NotificationError: no transport configured, or the transport failed
    """
    html_content = compile_mjml_to_html(mjml_content)

    recipients = [to] if isinstance(to, str) else to
    sender = from_address or config.EMAIL_FROM_ADDRESS

    if not config.EMAIL_DELIVERY_ENABLED:
        logger.info(
            f"📭 Email delivery disabled, not sending '{subject}' to {recipients} "
            f"({len(html_content)} bytes of HTML)"
        )
        logger.debug(html_content)
        return {"id": None, "success": True, "delivered": False}

    if config.SMTP_HOST:
        logger.info(f"📧 Sending email via SMTP: {config.SMTP_HOST}")
        return send_via_smtp(
            to=recipients,
            subject=subject,
            html_content=html_content,
            from_address=sender,
        )

    if not config.RESEND_API_KEY:
        logger.error("❌ No email service configured - RESEND_API_KEY missing and no SMTP host")
        raise NotificationError("Email service not configured")

    try:
        resend.api_key = config.RESEND_API_KEY
        logger.info(f"📧 Sending email via Resend to: {recipients}")
        response = resend.Emails.send(
            {
                "from": sender,
                "to": recipients,
                "subject": subject,
                "html": html_content,
            }
        )
        logger.info(f"✅ Email sent successfully via Resend: {response}")
        return response
    except Exception as e:
        logger.error(f"❌ Email send error to {recipients}: {e}")
        raise NotificationError(f"Failed to send email: {str(e)}") from e


# ============================================
# Quote emails
# ============================================


async def send_quote_notification_email(record: QuoteRecord) -> dict:
    """Notify the business of a new quote"""
    return await send_email(
        to=QUOTES_NOTIFY_TO,
        subject=f"New Cleaning Quote {record.id} - {record.customerDetails.name}",
        mjml_content=new_quote_notification_template(record),
    )


async def send_quote_confirmation_email(record: QuoteRecord) -> dict:
    """Send the customer their copy of the quote"""
    return await send_email(
        to=record.customerDetails.email,
        subject=f"Your {BUSINESS_NAME} Cleaning Quote {record.id}",
        mjml_content=quote_confirmation_template(record),
    )

"""
Email delivery for workshop notifications.
Uses the HTTP notification function when configured, Resend otherwise.
Templates are compiled from MJML for the Resend path.
"""

import logging
from typing import Optional, Union

import httpx
import resend
from mjml import mjml_to_html

from .config import (
    EMAIL_FROM_ADDRESS,
    NOTIFICATION_FUNCTION_URL,
    NOTIFICATION_TIMEOUT_SECONDS,
    RESEND_API_KEY,
)
from .email_templates import plain_text_template

logger = logging.getLogger(__name__)

resend.api_key = RESEND_API_KEY


class EmailDeliveryError(Exception):
    """Raised by send_email when no provider accepted the message"""


def compile_mjml_to_html(mjml_content: str) -> str:
    """Compile MJML template to production-ready HTML"""
    try:
        result = mjml_to_html(mjml_content)
        # mjml_to_html returns an object with 'html' and 'errors'
        errors = getattr(result, "errors", None) or (
            result.get("errors") if isinstance(result, dict) else None
        )
        if errors:
            logger.warning(f"MJML compilation warnings: {errors}")
        if isinstance(result, dict):
            return result.get("html", "")
        return getattr(result, "html", str(result))
    except Exception as e:
        logger.error(f"MJML compilation error: {e}")
        raise EmailDeliveryError(f"Failed to compile MJML template: {str(e)}") from e


async def send_email(
    to: Union[str, list[str]],
    subject: str,
    body: str,
    from_address: Optional[str] = None,
) -> dict:
    """
    Send a plain-text message through Resend, with the HTML layout alongside.

    Raises:
        EmailDeliveryError: when Resend is not configured or rejects the message
    """
    if not RESEND_API_KEY:
        logger.error("❌ No email service configured - RESEND_API_KEY missing")
        raise EmailDeliveryError("Email service not configured")

    recipients = [to] if isinstance(to, str) else to
    html_content = compile_mjml_to_html(plain_text_template(subject, body))

    try:
        logger.info(f"📧 Sending email via Resend to: {recipients}")
        response = resend.Emails.send(
            {
                "from": from_address or EMAIL_FROM_ADDRESS,
                "to": recipients,
                "subject": subject,
                "html": html_content,
                "text": body,
            }
        )
        logger.info(f"✅ Email sent successfully via Resend: {response}")
        return response
    except Exception as e:
        logger.error(f"❌ Email send error to {recipients}: {e}")
        raise EmailDeliveryError(f"Failed to send email: {str(e)}") from e


async def _post_to_notification_function(session, payload: dict) -> bool:
    async with httpx.AsyncClient(timeout=NOTIFICATION_TIMEOUT_SECONDS) as client:
        response = await client.post(
            NOTIFICATION_FUNCTION_URL,
            json=payload,
            headers={"Authorization": f"Bearer {session.access_token}"},
        )
    if response.status_code >= 400:
        logger.error(
            f"❌ Notification function rejected email to {payload['to']}: "
            f"HTTP {response.status_code} {response.text[:200]}"
        )
        return False
    logger.info(f"✅ Notification function accepted email to {payload['to']}")
    return True


async def send_notification_email(
    session,
    to: str,
    subject: str,
    body: str,
    repair_id: Optional[int] = None,
    client_name: Optional[str] = None,
) -> bool:
    """
    Send one notification email on behalf of an authenticated session.

    Never raises: network, authorization and provider failures are logged and
    reported as False.
    """
    if session is None:
        logger.error("❌ No active session for sending email")
        return False

    payload = {
        "to": to,
        "subject": subject,
        "body": body,
        "repairId": repair_id,
        "clientName": client_name,
    }

    try:
        if NOTIFICATION_FUNCTION_URL:
            return await _post_to_notification_function(session, payload)
        await send_email(to=to, subject=subject, body=body)
        return True
    except Exception as e:
        logger.error(f"❌ Error sending email to {to} (repair {repair_id}): {e}")
        return False

"""
Repair notification service
Sends the emails that accompany workflow events: the preliminary quote at
intake and the pickup/billing pair when a repair is completed
"""

import logging
from typing import Optional

from ..config import SHOP_NOTIFICATION_EMAIL
from ..domain.quotes.engine import QuoteBreakdown
from ..email_service import send_notification_email
from ..email_templates import (
    completion_client_email,
    completion_shop_email,
    preliminary_quote_email,
)
from ..models import Repair

logger = logging.getLogger(__name__)


async def send_completion_notifications(session, repair: Repair) -> dict:
    """
    Notify the client and the shop that a repair is completed.

    Both sends are attempted independently; a failed send never raises and
    never affects the repair itself.

    Args:
        session: Authenticated session the emails are sent on behalf of
        repair: The repair, with client and vehicle loaded

    Returns:
        Dict with client_email_sent (None when the client has no email) and
        shop_email_sent
    """
    result: dict[str, Optional[bool]] = {"client_email_sent": None, "shop_email_sent": False}

    client = repair.client
    vehicle_type = repair.vehicle.type if repair.vehicle else None
    client_name = client.name if client else "Unknown client"

    if client and client.email:
        logger.info(f"📧 Sending pickup email for repair {repair.id} to {client.email}")
        result["client_email_sent"] = await send_notification_email(
            session,
            to=client.email,
            subject="Your vehicle is ready",
            body=completion_client_email(client_name, vehicle_type),
            repair_id=repair.id,
            client_name=client_name,
        )
        if not result["client_email_sent"]:
            logger.error(f"❌ Pickup email failed for repair {repair.id}")
    else:
        logger.debug(f"⚠️ No email address for client of repair {repair.id}, skipping pickup email")

    result["shop_email_sent"] = await send_notification_email(
        session,
        to=SHOP_NOTIFICATION_EMAIL,
        subject=f"Repair completed - {client_name}",
        body=completion_shop_email(repair.id, client_name, vehicle_type, repair.final_quote),
        repair_id=repair.id,
        client_name=client_name,
    )
    if not result["shop_email_sent"]:
        logger.error(f"❌ Billing email failed for repair {repair.id}")

    logger.info(f"📬 Completion notifications for repair {repair.id}: {result}")
    return result


async def send_preliminary_quote(
    session,
    to: str,
    client_name: str,
    vehicle_type: str,
    vehicle_brand: Optional[str],
    vehicle_model: Optional[str],
    breakdown: QuoteBreakdown,
) -> bool:
    """Send a preliminary quote straight from the intake form, before any repair exists"""
    logger.info(f"📧 Sending preliminary quote of {breakdown.preliminary_quote} to {to}")
    return await send_notification_email(
        session,
        to=to,
        subject="Your repair quote",
        body=preliminary_quote_email(
            client_name=client_name,
            vehicle_type=vehicle_type,
            vehicle_brand=vehicle_brand,
            vehicle_model=vehicle_model,
            preliminary_quote=breakdown.preliminary_quote,
            estimated_minutes=breakdown.estimated_labor_minutes,
            defect_count=breakdown.defect_count,
        ),
        client_name=client_name,
    )

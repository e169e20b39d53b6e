"""
Tests for the completion notifications.
"""

from decimal import Decimal

import pytest

from app.config import SHOP_NOTIFICATION_EMAIL
from app.models import Client, Repair, Vehicle
from app.services.notification_service import send_completion_notifications


def build_repair(email="luc@example.com", vehicle_type="scooter", final_quote=None) -> Repair:
    client = Client(id=7, name="Luc Martin", email=email)
    vehicle = Vehicle(id=3, client_id=7, type=vehicle_type)
    return Repair(
        id=12,
        client_id=7,
        vehicle_id=3,
        vendor_name="Alex",
        client_issue="Battery drains",
        status="completed",
        final_quote=final_quote,
        client=client,
        vehicle=vehicle,
    )


@pytest.mark.asyncio
async def test_both_emails_are_sent(mock_send_notification, auth_session):
    result = await send_completion_notifications(auth_session, build_repair(final_quote=Decimal("140")))

    assert result == {"client_email_sent": True, "shop_email_sent": True}
    client_call, shop_call = mock_send_notification.await_args_list
    assert client_call.kwargs["to"] == "luc@example.com"
    assert "Your scooter is ready for pickup" in client_call.kwargs["body"]
    assert shop_call.kwargs["to"] == SHOP_NOTIFICATION_EMAIL
    assert "- Repair ID: 12" in shop_call.kwargs["body"]
    assert "- Vehicle: scooter" in shop_call.kwargs["body"]
    assert "- Final amount: 140.00 €" in shop_call.kwargs["body"]


@pytest.mark.asyncio
async def test_shop_email_sent_even_if_client_email_fails(mock_send_notification, auth_session):
    mock_send_notification.side_effect = [False, True]

    result = await send_completion_notifications(auth_session, build_repair())

    assert result == {"client_email_sent": False, "shop_email_sent": True}
    assert mock_send_notification.await_count == 2


@pytest.mark.asyncio
async def test_no_client_email_only_notifies_shop(mock_send_notification, auth_session):
    result = await send_completion_notifications(auth_session, build_repair(email=None))

    assert result["client_email_sent"] is None
    mock_send_notification.assert_awaited_once()
    assert "- Final amount: Not specified" in mock_send_notification.await_args.kwargs["body"]

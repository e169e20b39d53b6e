"""
Workshop email content.
Message bodies are plain text (the notification function delivers them as-is);
the Resend path wraps them in the MJML layout below.
"""

import html
from decimal import Decimal
from typing import Optional

from .config import SHOP_NAME
from .domain.quotes.engine import format_amount, format_labor_time

THEME = {
    "primary": "#1d4ed8",
    "background": "#f8fafc",
    "text_primary": "#0f172a",
    "text_secondary": "#334155",
    "text_muted": "#64748b",
    "border": "#e2e8f0",
}

VEHICLE_LABELS = {"bike": "bike", "scooter": "scooter"}


def vehicle_label(vehicle_type: Optional[str]) -> str:
    return VEHICLE_LABELS.get(vehicle_type or "", "vehicle")


def get_base_template(title: str, preview_text: str, content_sections: str) -> str:
    """Base MJML template wrapper for all emails"""
    return f"""
    <mjml>
      <mj-head>
        <mj-title>{title}</mj-title>
        <mj-preview>{preview_text}</mj-preview>
        <mj-attributes>
          <mj-all font-family="-apple-system, BlinkMacSystemFont, 'Segoe UI', 'Helvetica Neue', Arial, sans-serif" />
          <mj-text font-size="16px" line-height="1.6" color="{THEME['text_secondary']}" />
        </mj-attributes>
      </mj-head>
      <mj-body background-color="{THEME['background']}">
        <mj-section background-color="#ffffff" padding="32px 40px 0 40px">
          <mj-column>
            <mj-text font-size="20px" font-weight="700" color="{THEME['primary']}" padding="0">
              {html.escape(SHOP_NAME)}
            </mj-text>
            <mj-divider border-color="{THEME['border']}" border-width="1px" padding="24px 0 32px 0" />
          </mj-column>
        </mj-section>

        <!-- Main Content -->
        <mj-section background-color="#ffffff" padding="0 40px 48px 40px">
          <mj-column>
            <mj-text font-size="24px" font-weight="600" color="{THEME['text_primary']}" line-height="1.3" padding="0 0 16px 0">
              {title}
            </mj-text>

            {content_sections}
          </mj-column>
        </mj-section>

        <mj-section padding="24px 20px">
          <mj-column>
            <mj-text align="center" font-size="13px" color="#94a3b8" padding="0">
              {html.escape(SHOP_NAME)}
            </mj-text>
          </mj-column>
        </mj-section>
      </mj-body>
    </mjml>
    """


def plain_text_template(subject: str, body: str) -> str:
    """Wrap a plain-text message in the shop layout, one mj-text per paragraph"""
    paragraphs = [p for p in body.split("\n\n") if p.strip()]
    content = "\n".join(
        f"<mj-text>{html.escape(p.strip()).replace(chr(10), '<br/>')}</mj-text>"
        for p in paragraphs
    )
    preview = paragraphs[0].strip().splitlines()[0] if paragraphs else subject
    return get_base_template(
        title=html.escape(subject),
        preview_text=html.escape(preview),
        content_sections=content,
    )


def preliminary_quote_email(
    client_name: str,
    vehicle_type: str,
    vehicle_brand: Optional[str],
    vehicle_model: Optional[str],
    preliminary_quote: Decimal,
    estimated_minutes: int,
    defect_count: int,
) -> str:
    """Preliminary quote sent from the intake screen"""
    if vehicle_brand and vehicle_model:
        vehicle_info = f"{vehicle_brand} {vehicle_model}"
    else:
        vehicle_info = vehicle_label(vehicle_type)

    return f"""
Hello {client_name},

We have completed the diagnostic of your {vehicle_info}.

DIAGNOSTIC SUMMARY:
- Items to fix: {defect_count}
- Estimated repair time: {format_labor_time(estimated_minutes)}
- Estimated amount: {format_amount(preliminary_quote)}

This quote is preliminary and based on our initial diagnostic. The final amount may vary slightly depending on the parts actually needed.

We will contact you shortly to confirm your agreement and schedule the repair.

Best regards,
The {SHOP_NAME} team
""".strip()


def completion_client_email(client_name: str, vehicle_type: str) -> str:
    """Ready-for-pickup message for the client"""
    vehicle = vehicle_label(vehicle_type)
    return f"""
Hello {client_name},

Good news! Your {vehicle} is ready for pickup.

The repair has been completed successfully. You can collect your {vehicle} at our shop during opening hours.

Thank you for your trust.

Best regards,
The {SHOP_NAME} team
""".strip()


def completion_shop_email(
    repair_id: int,
    client_name: str,
    vehicle_type: str,
    final_quote: Optional[Decimal],
) -> str:
    """Ready-for-billing message for the shop mailbox"""
    quote_info = format_amount(final_quote) if final_quote is not None else "Not specified"
    return f"""
A repair has been marked as completed.

DETAILS:
- Repair ID: {repair_id}
- Client: {client_name}
- Vehicle: {vehicle_label(vehicle_type)}
- Final amount: {quote_info}

The work is done and ready for billing.
""".strip()

"""
MJML Email Templates
Quote notification emails using MJML for responsive, cross-client compatibility
"""

from typing import Optional

from .config import BUSINESS_NAME
from .domain.quotes.schemas import QuoteRecord
from .shared.money import format_gbp
from .utils.sanitization import sanitize_string

# KMI brand colors - Navy/Sky color scheme
THEME = {
    "primary": "#0369a1",
    "primary_dark": "#075985",
    "primary_light": "#e0f2fe",
    "background": "#f8fafc",
    "card_bg": "#ffffff",
    "text_primary": "#0f172a",
    "text_secondary": "#334155",
    "text_muted": "#64748b",
    "border": "#e2e8f0",
    "warning": "#f59e0b",
}

SITE_VISIT_TEXT = "A site visit needs to be arranged to finalize the quote."
PHOTOS_TEXT = "Please request the customer to send photos to help finalize the quote."
CUSTOMER_SITE_VISIT_TEXT = (
    "We will contact you to arrange a site visit so we can finalize your quote."
)
CUSTOMER_PHOTOS_TEXT = (
    "To help us finalize your quote, please reply to this email with a few photos of the property."
)


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
          <mj-table font-size="14px" color="{THEME['text_secondary']}" />
        </mj-attributes>
      </mj-head>
      <mj-body background-color="{THEME['background']}">
        <!-- Header -->
        <mj-section background-color="{THEME['primary']}" padding="24px 20px">
          <mj-column>
            <mj-text align="center" font-size="22px" font-weight="700" color="#ffffff" padding="0">
              {BUSINESS_NAME}
            </mj-text>
          </mj-column>
        </mj-section>

        <!-- Main Content -->
        <mj-section background-color="#ffffff" padding="32px 40px 48px 40px">
          <mj-column>
            <mj-text font-size="24px" font-weight="600" color="{THEME['text_primary']}" line-height="1.3" padding="0 0 16px 0">
              {title}
            </mj-text>

            {content_sections}
          </mj-column>
        </mj-section>

        <!-- Footer -->
        <mj-section padding="32px 20px">
          <mj-column>
            <mj-text align="center" font-size="13px" color="#94a3b8" padding="0">
              © {BUSINESS_NAME}. All rights reserved.
            </mj-text>
          </mj-column>
        </mj-section>
      </mj-body>
    </mjml>
    """


def _heading(text: str) -> str:
    return f"""
    <mj-text font-size="18px" font-weight="600" color="{THEME['text_primary']}" padding="24px 0 8px 0">
      {text}
    </mj-text>
    """


def _table(rows: list[tuple[str, str]], bold_last: bool = False) -> str:
    """Two-column label/value table. Values must already be escaped."""
    html_rows = []
    for i, (label, value) in enumerate(rows):
        weight = "600" if bold_last and i == len(rows) - 1 else "400"
        html_rows.append(
            f'<tr style="border-bottom: 1px solid {THEME["border"]};">'
            f'<td style="padding: 8px 0; color: {THEME["text_muted"]}; width: 45%;">{label}</td>'
            f'<td style="padding: 8px 0; font-weight: {weight};">{value}</td>'
            f"</tr>"
        )
    return f"""
    <mj-table padding="0">
      {''.join(html_rows)}
    </mj-table>
    """


def _customer_rows(record: QuoteRecord) -> list[tuple[str, str]]:
    c = record.customerDetails
    referral = c.referralSource
    if c.referralSource == "Other" and c.otherReferral:
        referral = f"Other: {c.otherReferral}"
    return [
        ("Name", sanitize_string(c.name)),
        ("Email", sanitize_string(c.email)),
        ("Phone", sanitize_string(c.phone)),
        ("Address", sanitize_string(c.address)),
        ("Preferred Date", c.preferredDate.strftime("%d/%m/%Y")),
        ("Preferred Time", sanitize_string(c.preferredTime)),
        ("Referral Source", sanitize_string(referral)),
    ]


def _service_rows(record: QuoteRecord) -> list[tuple[str, str]]:
    s = record.serviceDetails
    return [
        ("Service Type", sanitize_string(s.serviceType)),
        ("Property Size", sanitize_string(s.propertySize)),
        ("Soiling Level", s.soilingLevel.value),
        ("Estimated Time", f"{s.estimatedTime:g} hours"),
        ("Cleaners Required", str(s.cleanersRequired)),
    ]


def _cost_rows(record: QuoteRecord, include_internal: bool) -> list[tuple[str, str]]:
    cost = record.costDetails
    rows = []
    if include_internal:
        rows += [
            ("Labour Cost", format_gbp(cost.labourCost)),
            ("Material Cost", format_gbp(cost.materialCost)),
            ("Base Cost", format_gbp(cost.baseCost)),
        ]
    rows += [(sanitize_string(item.name), format_gbp(item.cost)) for item in cost.extrasBreakdown]
    if include_internal:
        rows += [
            ("Extras Total", format_gbp(cost.extrasCost)),
            ("Contractor Price", format_gbp(cost.contractorPrice)),
            ("Markup (30%)", format_gbp(cost.markup)),
        ]
    rows.append(("Final Price", format_gbp(cost.finalPrice)))
    return rows


def _notes_section(notes: Optional[str]) -> str:
    if not notes:
        return ""
    return _heading("Additional Notes") + f"""
    <mj-text font-size="14px">
      {sanitize_string(notes)}
    </mj-text>
    """


def _next_steps_section(text: str, closing: str) -> str:
    return _heading("Next Steps") + f"""
    <mj-text font-size="14px" color="{THEME['text_primary']}">
      {text}
    </mj-text>
    <mj-text font-size="14px" color="{THEME['text_muted']}">
      {closing}
    </mj-text>
    """


def new_quote_notification_template(record: QuoteRecord) -> str:
    """Business notification for a newly submitted quote (full cost breakdown)"""
    name = sanitize_string(record.customerDetails.name)
    site_visit = record.additionalInfo.siteVisitRequired

    content = f"""
    <mj-text color="{THEME['text_muted']}" padding="0 0 8px 0">
      Quote ID: <strong>{record.id}</strong><br/>
      Submitted: {record.timestamp.strftime("%d/%m/%Y %H:%M")} UTC
    </mj-text>
    """
    content += _heading("Customer Details") + _table(_customer_rows(record))
    content += _heading("Service Details") + _table(_service_rows(record))
    content += _heading("Cost Breakdown") + _table(
        _cost_rows(record, include_internal=True), bold_last=True
    )
    content += _notes_section(record.additionalInfo.notes)
    content += _heading("Site Visit") + f"""
    <mj-text font-size="14px">
      {"Required" if site_visit else "Not required"}
    </mj-text>
    """
    content += _next_steps_section(
        SITE_VISIT_TEXT if site_visit else PHOTOS_TEXT,
        f"This quote can be viewed and managed in the {BUSINESS_NAME} Quote Tracker system.",
    )

    return get_base_template(
        title=f"New Cleaning Quote {record.id}",
        preview_text=f"New quote from {name}: {format_gbp(record.costDetails.finalPrice)}",
        content_sections=content,
    )


def quote_confirmation_template(record: QuoteRecord) -> str:
    """Customer copy of the quote. Internal costs are left out."""
    name = sanitize_string(record.customerDetails.name)
    site_visit = record.additionalInfo.siteVisitRequired

    content = f"""
    <mj-text>
      Hi {name},
    </mj-text>
    <mj-text>
      Thank you for requesting a quote. Your quote reference is <strong>{record.id}</strong>.
    </mj-text>
    """
    content += _heading("Your Details") + _table(_customer_rows(record))
    content += _heading("Service Details") + _table(_service_rows(record))
    content += _heading("Your Quote") + _table(
        _cost_rows(record, include_internal=False), bold_last=True
    )
    content += _notes_section(record.additionalInfo.notes)
    content += _next_steps_section(
        CUSTOMER_SITE_VISIT_TEXT if site_visit else CUSTOMER_PHOTOS_TEXT,
        f"Thank you for your interest in {BUSINESS_NAME}. "
        "We will be in touch shortly to discuss your quote.",
    )

    return get_base_template(
        title=f"Your {BUSINESS_NAME} Cleaning Quote",
        preview_text=f"Quote {record.id}: {format_gbp(record.costDetails.finalPrice)}",
        content_sections=content,
    )

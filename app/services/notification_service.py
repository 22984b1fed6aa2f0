"""
Quote Notification Service
Sends the business notification and the customer confirmation for a stored quote.
Runs after the quote has been stored; failures are logged and reported, never raised.
"""

import logging

from ..domain.quotes.schemas import QuoteRecord
from ..email_service import send_quote_confirmation_email, send_quote_notification_email

logger = logging.getLogger(__name__)


async def dispatch_quote_notifications(record: QuoteRecord) -> dict:
    """
    Email the business and the customer about a newly stored quote

    Args:
        record: The stored quote

    Returns:
        Dict with business_sent / customer_sent flags and any error messages
    """
    result = {
        "business_sent": False,
        "customer_sent": False,
        "business_error": None,
        "customer_error": None,
    }

    try:
        logger.info(f"📧 Sending new quote notification for {record.id}")
        await send_quote_notification_email(record)
        result["business_sent"] = True
    except Exception as e:
        result["business_error"] = str(e)
        logger.error(f"❌ Failed to send new quote notification for {record.id}: {e}")

    customer_email = record.customerDetails.email
    if customer_email:
        try:
            logger.info(f"📧 Sending quote confirmation {record.id} to {customer_email}")
            await send_quote_confirmation_email(record)
            result["customer_sent"] = True
        except Exception as e:
            result["customer_error"] = str(e)
            logger.error(f"❌ Failed to send quote confirmation to {customer_email}: {e}")
    else:
        logger.debug(f"⚠️ No customer email on quote {record.id}, skipping confirmation")

    return result

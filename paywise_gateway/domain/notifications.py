"""Payment request notification content"""

import html
from datetime import date

from paywise_gateway.domain.history import format_amount
from paywise_gateway.domain.models import CommunicationMethod, DispatchOutcome, EmailMessage


def compose_payment_message(
    client_name: str,
    amount: float,
    description: str,
    link_url: str,
    due_date: date,
    currency_symbol: str,
) -> str:
    """Single message body shared by SMS and email"""
    return (
        f"Dear {client_name}, please complete your payment of {currency_symbol}{format_amount(amount)} "
        f'for "{description}" using this link: {link_url} Due: {due_date.isoformat()}'
    )


def compose_payment_email(to: str, description: str, message: str, from_name: str) -> EmailMessage:
    return EmailMessage(
        to=to,
        subject=f"Payment Request: {description}",
        html_body=f"<p>{html.escape(message)}</p><p>If you have any questions, please contact us.</p>",
        from_name=from_name,
    )


def dispatch_status_message(client_name: str, method: CommunicationMethod, outcome: DispatchOutcome) -> str:
    """
    Human-readable summary of a payment request.

    Example:
        both, SMS ok, email down ->
        "Payment link created for Ada. SMS sent. Email failed."
    """
    parts = [f"Payment link created for {client_name}."]
    if method.uses_sms:
        parts.append("SMS sent." if outcome.sms_sent else "SMS failed.")
    if method.uses_email:
        parts.append("Email sent." if outcome.email_sent else "Email failed.")
    return " ".join(parts)

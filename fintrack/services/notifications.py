"""
Email notifications through the Resend API.

Sending is best effort. A notifier never raises: every call returns a
NotificationOutcome so callers can report "sent", "failed (reason)" or
"skipped (nothing attempted)" next to an operation that itself succeeded.
"""

from enum import Enum
from typing import Optional

import requests
import structlog
from pydantic import BaseModel

from fintrack.core.config import settings

logger = structlog.get_logger(__name__)


class NotificationStatus(str, Enum):
    SENT = "sent"
    FAILED = "failed"
    SKIPPED = "skipped"


class NotificationOutcome(BaseModel):
    recipient: str
    status: NotificationStatus
    reason: Optional[str] = None
    message_id: Optional[str] = None

    @property
    def attempted(self) -> bool:
        return self.status != NotificationStatus.SKIPPED

    @classmethod
    def sent(cls, recipient: str, message_id: Optional[str] = None) -> "NotificationOutcome":
        return cls(recipient=recipient, status=NotificationStatus.SENT, message_id=message_id)

    @classmethod
    def failed(cls, recipient: str, reason: str) -> "NotificationOutcome":
        return cls(recipient=recipient, status=NotificationStatus.FAILED, reason=reason)

    @classmethod
    def skipped(cls, recipient: str, reason: str) -> "NotificationOutcome":
        return cls(recipient=recipient, status=NotificationStatus.SKIPPED, reason=reason)


class ExpenseNotification(BaseModel):
    """Tells a participant they were added to a shared expense."""
    to_email: str
    to_name: str
    from_name: str
    expense_title: str
    expense_description: Optional[str] = None
    total_amount: float
    amount_owed: float
    expense_date: str
    split_method: str


class SettlementNotification(BaseModel):
    """Confirms a payment to the other party."""
    to_email: str
    to_name: str
    from_name: str
    amount: float
    expense_title: str
    payment_method: str = "Not specified"
    notes: Optional[str] = None


def render_expense_email(n: ExpenseNotification) -> tuple[str, str, str]:
    """Return (subject, html, text) for an expense assignment."""
    subject = f"💰 New shared expense: {n.expense_title}"
    description = f"<p>{n.expense_description}</p>" if n.expense_description else ""
    html = (
        f"<h2>Hi {n.to_name},</h2>"
        f"<p><strong>{n.from_name}</strong> added you to a shared expense.</p>"
        f"<h3>{n.expense_title}</h3>{description}"
        f"<p>Total: ${n.total_amount:.2f}<br>"
        f"Your share: <strong>${n.amount_owed:.2f}</strong><br>"
        f"Date: {n.expense_date}<br>"
        f"Split: {n.split_method}</p>"
    )
    text = (
        f"Hi {n.to_name},\n\n"
        f"{n.from_name} added you to a shared expense: {n.expense_title}\n"
        + (f"{n.expense_description}\n" if n.expense_description else "")
        + f"Total: ${n.total_amount:.2f}\n"
        f"Your share: ${n.amount_owed:.2f}\n"
        f"Date: {n.expense_date}\n"
        f"Split: {n.split_method}\n"
    )
    return subject, html, text


def render_settlement_email(n: SettlementNotification) -> tuple[str, str, str]:
    """Return (subject, html, text) for a settlement confirmation."""
    subject = f"✅ Payment confirmed: {n.expense_title}"
    notes = f"<p>Notes: {n.notes}</p>" if n.notes else ""
    html = (
        f"<h2>Hi {n.to_name},</h2>"
        f"<p><strong>{n.from_name}</strong> confirmed a payment of "
        f"<strong>${n.amount:.2f}</strong> for {n.expense_title}.</p>"
        f"<p>Payment method: {n.payment_method}</p>{notes}"
    )
    text = (
        f"Hi {n.to_name},\n\n"
        f"{n.from_name} confirmed a payment of ${n.amount:.2f} for {n.expense_title}.\n"
        f"Payment method: {n.payment_method}\n"
        + (f"Notes: {n.notes}\n" if n.notes else "")
    )
    return subject, html, text


class EmailNotifier:
    """Sends templated emails with the Resend REST API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        sender: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.api_key = settings.RESEND_API_KEY if api_key is None else api_key
        self.api_url = api_url or settings.RESEND_API_URL
        self.sender = sender or settings.NOTIFICATION_SENDER
        self.timeout = timeout or settings.NOTIFICATION_TIMEOUT_SECONDS

    def send_expense_assignment(self, notification: ExpenseNotification) -> NotificationOutcome:
        subject, html, text = render_expense_email(notification)
        return self._send(notification.to_email, subject, html, text)

    def send_settlement_confirmation(self, notification: SettlementNotification) -> NotificationOutcome:
        subject, html, text = render_settlement_email(notification)
        return self._send(notification.to_email, subject, html, text)

    def _send(self, to_email: str, subject: str, html: str, text: str) -> NotificationOutcome:
        if not self.api_key:
            logger.info("notification_skipped", recipient=to_email, reason="no api key")
            return NotificationOutcome.skipped(to_email, "Email delivery is not configured")

        try:
            response = requests.post(
                self.api_url,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json={
                    "from": self.sender,
                    "to": [to_email],
                    "subject": subject,
                    "html": html,
                    "text": text,
                },
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.warning("notification_failed", recipient=to_email, error=str(e))
            return NotificationOutcome.failed(to_email, f"Email request failed: {e}")

        if not response.ok:
            try:
                detail = response.json().get("message", response.text)
            except ValueError:
                detail = response.text
            logger.warning(
                "notification_failed",
                recipient=to_email,
                status_code=response.status_code,
                error=detail,
            )
            return NotificationOutcome.failed(
                to_email, f"Email service error ({response.status_code}): {detail}"
            )

        try:
            message_id = response.json().get("id")
        except ValueError:
            message_id = None
        logger.info("notification_sent", recipient=to_email, message_id=message_id)
        return NotificationOutcome.sent(to_email, message_id)

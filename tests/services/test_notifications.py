from unittest.mock import MagicMock, patch

import requests

from fintrack.services.notifications import (
    EmailNotifier,
    ExpenseNotification,
    NotificationStatus,
    SettlementNotification,
    render_expense_email,
    render_settlement_email,
)


def _expense_notification(**kwargs):
    data = {
        "to_email": "bob@example.com",
        "to_name": "Bob",
        "from_name": "Alice",
        "expense_title": "Dinner",
        "total_amount": 90.0,
        "amount_owed": 30.0,
        "expense_date": "2024-03-01",
        "split_method": "equal",
    }
    data.update(kwargs)
    return ExpenseNotification(**data)


def _settlement_notification():
    return SettlementNotification(
        to_email="bob@example.com",
        to_name="Bob",
        from_name="Alice",
        amount=30,
        expense_title="Dinner",
    )


def test_expense_email_mentions_share_and_total():
    subject, html, text = render_expense_email(_expense_notification(expense_description="Friday"))

    assert "Dinner" in subject
    assert "$30.00" in html and "$90.00" in html
    assert "Friday" in text
    assert "Your share: $30.00" in text


def test_settlement_email_defaults_payment_method():
    _, html, text = render_settlement_email(_settlement_notification())

    assert "Not specified" in html
    assert "$30.00" in text
    assert "Notes" not in text


def test_no_api_key_skips_without_calling_out():
    notifier = EmailNotifier(api_key="")

    with patch("fintrack.services.notifications.requests.post") as mock_post:
        outcome = notifier.send_expense_assignment(_expense_notification())

    mock_post.assert_not_called()
    assert outcome.status == NotificationStatus.SKIPPED
    assert outcome.attempted is False


def test_successful_send_returns_message_id():
    notifier = EmailNotifier(api_key="re_test", api_url="https://mail.test/emails", sender="Bot <bot@test>")
    response = MagicMock(ok=True, status_code=200)
    response.json.return_value = {"id": "email-123"}

    with patch("fintrack.services.notifications.requests.post", return_value=response) as mock_post:
        outcome = notifier.send_settlement_confirmation(_settlement_notification())

    assert outcome.status == NotificationStatus.SENT
    assert outcome.message_id == "email-123"
    args, kwargs = mock_post.call_args
    assert args[0] == "https://mail.test/emails"
    assert kwargs["headers"]["Authorization"] == "Bearer re_test"
    assert kwargs["json"]["to"] == ["bob@example.com"]
    assert kwargs["json"]["from"] == "Bot <bot@test>"


def test_provider_error_is_reported_not_raised():
    notifier = EmailNotifier(api_key="re_test")
    response = MagicMock(ok=False, status_code=422, text="bad")
    response.json.return_value = {"message": "Invalid `to` field"}

    with patch("fintrack.services.notifications.requests.post", return_value=response):
        outcome = notifier.send_expense_assignment(_expense_notification())

    assert outcome.status == NotificationStatus.FAILED
    assert "422" in outcome.reason
    assert "Invalid `to` field" in outcome.reason


def test_network_error_is_reported_not_raised():
    notifier = EmailNotifier(api_key="re_test")

    with patch(
        "fintrack.services.notifications.requests.post",
        side_effect=requests.exceptions.ConnectionError("refused"),
    ):
        outcome = notifier.send_expense_assignment(_expense_notification())

    assert outcome.status == NotificationStatus.FAILED
    assert outcome.attempted is True

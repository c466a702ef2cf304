"""
Notification formatting component for the Carousell Watch system.

Builds the subject and plain-text body of alert and diagnostic messages.
"""

from typing import List, Sequence

from ..models.alert import Alert
from ..models.listing import Hit
from ..models.notification import Notification

SUBJECT_PREFIX = "Carousell"
EMPTY_BODY = "(no body text)"
TEST_SUBJECT = "Carousell Watch: SMTP test"
TEST_BODY = "If you can read this, SMTP is working."


class NotificationFormatter:
    """Formats alert hits into notifications."""

    def format_subject(self, alert: Alert, hits: Sequence[Hit]) -> str:
        return f"{SUBJECT_PREFIX}: {alert.id} ({len(hits)})"

    def format_hit(self, hit: Hit) -> str:
        return f"• {hit.text}\n{hit.url}\n(found on {hit.source})"

    def format_body(self, hits: Sequence[Hit]) -> str:
        """Join hit blocks with a blank line between them."""
        return "\n\n".join(self.format_hit(hit) for hit in hits) or EMPTY_BODY

    def format_alert(self, alert: Alert, hits: Sequence[Hit]) -> Notification:
        """
        Build the notification for one alert's hits.

        Args:
            alert: Alert the hits belong to
            hits: Hits in source/extraction order

        Returns:
            Notification addressed to the alert's recipients
        """
        notification = Notification(
            subject=self.format_subject(alert, hits),
            body=self.format_body(hits),
            recipients=list(alert.emails),
        )
        notification.validate()
        return notification

    def format_test_message(self, recipients: List[str]) -> Notification:
        """Build the fixed diagnostic message used to check delivery."""
        return Notification(subject=TEST_SUBJECT, body=TEST_BODY, recipients=list(recipients))

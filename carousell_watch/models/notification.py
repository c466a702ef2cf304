"""
Notification models.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class Notification:
    """A composed message ready for delivery."""

    subject: str
    body: str
    recipients: List[str] = field(default_factory=list)

    def validate(self) -> bool:
        """Validate notification data."""
        if not isinstance(self.subject, str) or not self.subject.strip():
            raise ValueError("subject cannot be empty")

        if "\n" in self.subject or "\r" in self.subject:
            raise ValueError("subject must be a single line")

        if not isinstance(self.body, str) or not self.body.strip():
            raise ValueError("body cannot be empty")

        if not isinstance(self.recipients, list):
            raise ValueError("recipients must be a list")

        return True

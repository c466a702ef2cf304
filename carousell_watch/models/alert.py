"""
Alert configuration models.
"""

from dataclasses import dataclass, field
from typing import List

from .rule import Rule


@dataclass(frozen=True)
class Alert:
    """A named watch: sources to check, a rule to filter, recipients to notify."""

    id: str
    sources: List[str]
    match: Rule = field(default_factory=Rule.empty)
    emails: List[str] = field(default_factory=list)

    def validate(self) -> bool:
        """Validate the alert configuration."""
        if not isinstance(self.id, str) or not self.id.strip():
            raise ValueError("Alert id cannot be empty")

        if not isinstance(self.sources, list) or not self.sources:
            raise ValueError(f"Alert '{self.id}' must have at least one source")

        for source in self.sources:
            if not isinstance(source, str) or not source.strip():
                raise ValueError(f"Alert '{self.id}' sources must be non-empty strings")

        if not isinstance(self.emails, list):
            raise ValueError(f"Alert '{self.id}' emails must be a list")

        for email in self.emails:
            if not isinstance(email, str) or not email.strip():
                raise ValueError(f"Alert '{self.id}' emails must be non-empty strings")

        if not isinstance(self.match, Rule):
            raise ValueError(f"Alert '{self.id}' match must be a Rule")

        try:
            self.match.validate()
        except ValueError as e:
            raise ValueError(f"Alert '{self.id}' has an invalid rule: {e}") from e

        return True

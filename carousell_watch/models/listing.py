"""
Listing data models.
"""

from dataclasses import dataclass

SEEN_KEY_SEPARATOR = "::"


@dataclass(frozen=True)
class Listing:
    """A candidate listing extracted from one rendered page."""

    url: str
    text: str


@dataclass(frozen=True)
class Hit:
    """A listing that passed rule matching and novelty checks."""

    url: str
    text: str
    source: str

    @classmethod
    def from_listing(cls, listing: Listing, source: str) -> "Hit":
        return cls(url=listing.url, text=listing.text, source=source)


def make_seen_key(alert_id: str, url: str) -> str:
    """Build the deduplication key for an (alert, listing URL) pair."""
    return f"{alert_id}{SEEN_KEY_SEPARATOR}{url}"

"""
Protocol interfaces for the Carousell Watch system.

This module defines the protocol interfaces that establish system boundaries
and enable dependency injection throughout the application.
"""

from typing import TYPE_CHECKING, List, Optional, Protocol, Set

from .models.alert import Alert
from .models.delivery import DeliveryResult
from .models.listing import Hit, Listing
from .models.notification import Notification
from .models.rule import Rule

if TYPE_CHECKING:
    from .components.listing_extractor import RenderedPage
    from .models.config import Configuration


class DomNode(Protocol):
    """Minimal tree-walking view of a rendered element."""

    @property
    def tag_name(self) -> str:
        """Lower-case tag name."""
        ...

    @property
    def parent(self) -> Optional["DomNode"]:
        """Parent element, or None at the top of the document."""
        ...

    def get_attribute(self, name: str) -> Optional[str]:
        """Attribute value, or None when absent."""
        ...

    def visible_text(self) -> str:
        """Human-visible text of the element and its descendants."""
        ...


class IPageRenderer(Protocol):
    """Protocol for the rendering collaborator."""

    async def render(self, url: str) -> "RenderedPage":
        """Navigate to a source URL and return the rendered page."""
        ...


class IListingExtractor(Protocol):
    """Protocol for extracting listings from a rendered page."""

    def extract(self, page: "RenderedPage") -> List[Listing]:
        """Extract listings de-duplicated by URL, in document order."""
        ...


class IRuleMatcher(Protocol):
    """Protocol for evaluating rule trees."""

    def matches(self, text: Optional[str], rule: Optional[Rule]) -> bool:
        """Return True if the text satisfies the rule."""
        ...


class ISeenStateStore(Protocol):
    """Protocol for persisted seen-state."""

    def load(self) -> Set[str]:
        """Load the seen set, empty on first run."""
        ...

    def save(self, seen: Set[str]) -> None:
        """Persist the seen set, replacing prior content."""
        ...


class IAlertEvaluator(Protocol):
    """Protocol for evaluating one alert across its sources."""

    async def evaluate(self, alert: Alert, seen: Set[str], force_all: bool = False) -> List[Hit]:
        """Return the hits for an alert."""
        ...


class IMessageDispatcher(Protocol):
    """Protocol for dispatching notifications."""

    def send_notification(self, notification: Notification) -> DeliveryResult:
        """Send a notification through the configured transport."""
        ...

    def test_connection(self) -> bool:
        """Test connection to the transport."""
        ...


class IConfigurationManager(Protocol):
    """Protocol for managing system configuration."""

    def load_config(self) -> "Configuration":
        """Load and validate configuration."""
        ...

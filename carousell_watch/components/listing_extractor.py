"""
Listing extraction components for the Carousell Watch system.

This module turns a rendered search page into a list of candidate listings:
it finds anchors pointing at listing detail pages, resolves them to absolute
URLs, and takes the display text from the surrounding listing card.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

from ..interfaces import DomNode
from ..models.listing import Listing
from .text_normalizer import collapse_whitespace

logger = logging.getLogger(__name__)

LISTING_PATH_MARKER = "/p/"
MAX_CARD_DEPTH = 6
CARD_TAGS = ("article", "li")
CARD_TESTID_FRAGMENTS = ("listing", "card")
CARD_CLASS_FRAGMENTS = ("Card", "card")
INVISIBLE_TAGS = ("script", "style", "noscript", "template")
# Elements whose boundaries separate words in rendered text.
BLOCK_TAGS = frozenset(
    {
        "address", "article", "aside", "blockquote", "br", "dd", "div", "dl", "dt",
        "fieldset", "figcaption", "figure", "footer", "form", "h1", "h2", "h3", "h4",
        "h5", "h6", "header", "hr", "li", "main", "nav", "ol", "p", "section",
        "table", "td", "th", "tr", "ul",
    }
)


@dataclass(frozen=True)
class RenderedPage:
    """Rendered page content as returned by the page renderer."""

    url: str
    html: str

    @property
    def origin(self) -> str:
        parsed = urlparse(self.url)
        return f"{parsed.scheme}://{parsed.netloc}"


class SoupNode:
    """DomNode adapter over a BeautifulSoup tag."""

    def __init__(self, tag: Tag):
        self._tag = tag

    @property
    def tag_name(self) -> str:
        return (self._tag.name or "").lower()

    @property
    def parent(self) -> Optional["SoupNode"]:
        parent = self._tag.parent
        if parent is None or isinstance(parent, BeautifulSoup):
            return None
        return SoupNode(parent)

    def get_attribute(self, name: str) -> Optional[str]:
        value = self._tag.get(name)
        if value is None:
            return None
        if isinstance(value, list):
            # multi-valued attributes such as class
            return " ".join(value)
        return str(value)

    def visible_text(self) -> str:
        """
        Text of the element as a browser would lay it out.

        Inline markup and comments do not split words; block elements and
        line breaks do.
        """
        parts: List[str] = []
        _collect_text(self._tag, parts)
        return "".join(parts)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, SoupNode) and other._tag is self._tag

    def __hash__(self) -> int:
        return id(self._tag)


def _collect_text(tag: Tag, parts: List[str]) -> None:
    for child in tag.children:
        if isinstance(child, Tag):
            block = child.name in BLOCK_TAGS
            if block:
                parts.append(" ")
            _collect_text(child, parts)
            if block:
                parts.append(" ")
        elif isinstance(child, NavigableString) and not isinstance(child, PreformattedString):
            # comments, CDATA and doctypes are not rendered
            parts.append(str(child))


def is_card_container(node: DomNode) -> bool:
    """Return True if the element looks like a listing card."""
    tag = node.tag_name
    if tag in CARD_TAGS:
        return True

    testid = node.get_attribute("data-testid") or ""
    if any(fragment in testid for fragment in CARD_TESTID_FRAGMENTS):
        return True

    if tag == "div":
        css_class = node.get_attribute("class") or ""
        if any(fragment in css_class for fragment in CARD_CLASS_FRAGMENTS):
            return True

    return False


def find_card_container(anchor: DomNode, max_depth: int = MAX_CARD_DEPTH) -> DomNode:
    """
    Find the listing card that holds an anchor.

    The anchor itself and up to ``max_depth - 1`` of its ancestors are
    checked, nearest first. Without a match the anchor's immediate parent is
    used, or the anchor when it has no parent.
    """
    current: Optional[DomNode] = anchor
    for _ in range(max_depth):
        if current is None:
            break
        if is_card_container(current):
            return current
        current = current.parent

    return anchor.parent or anchor


def resolve_listing_url(href: str, origin: str) -> str:
    """Resolve an anchor href against the page origin."""
    if href.startswith("http"):
        return href
    return urljoin(origin + "/", href)


class ListingExtractor:
    """Extracts listing URLs and card text from rendered pages."""

    def __init__(self, max_card_depth: int = MAX_CARD_DEPTH):
        """Initialize extractor with the ancestor walk ceiling."""
        self.max_card_depth = max_card_depth

    def extract(self, page: RenderedPage) -> List[Listing]:
        """
        Extract listings from a rendered page.

        Args:
            page: Rendered page content

        Returns:
            Listings de-duplicated by absolute URL, in document order
        """
        soup = BeautifulSoup(page.html, "html.parser")
        for invisible in soup.find_all(list(INVISIBLE_TAGS)):
            invisible.decompose()

        anchors = [SoupNode(tag) for tag in soup.select(f'a[href*="{LISTING_PATH_MARKER}"]')]
        listings = self.extract_from_anchors(anchors, page.origin)

        logger.debug(
            f"Extracted {len(listings)} listings from {len(anchors)} anchors on {page.url}"
        )
        return listings

    def extract_from_anchors(self, anchors: List[DomNode], origin: str) -> List[Listing]:
        """
        Build listings from anchor nodes.

        Anchors without a resolvable listing URL or without card text are
        dropped; the first remaining anchor for each URL wins.
        """
        by_url: Dict[str, Listing] = {}

        for anchor in anchors:
            href = anchor.get_attribute("href") or ""
            if not href:
                continue

            url = resolve_listing_url(href, origin)
            if LISTING_PATH_MARKER not in url:
                continue

            container = find_card_container(anchor, self.max_card_depth)
            text = collapse_whitespace(container.visible_text())
            if not text or url in by_url:
                continue

            by_url[url] = Listing(url=url, text=text)

        return list(by_url.values())

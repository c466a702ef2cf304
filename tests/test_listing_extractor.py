"""
Unit tests for listing extraction components.
"""

from carousell_watch.components.listing_extractor import (
    ListingExtractor,
    RenderedPage,
    SoupNode,
    find_card_container,
    is_card_container,
    resolve_listing_url,
)
from carousell_watch.components.rule_matcher import RuleMatcher
from carousell_watch.models.listing import Listing
from carousell_watch.models.rule import Rule
from tests.fakes import ORIGIN, SEARCH_URL, FakeNode, listing_page, simple_card


class TestCardHeuristic:
    """Test the card container heuristic on synthetic trees."""

    def test_card_tags(self):
        assert is_card_container(FakeNode("article")) is True
        assert is_card_container(FakeNode("li")) is True
        assert is_card_container(FakeNode("section")) is False

    def test_card_testid(self):
        assert is_card_container(FakeNode("div", {"data-testid": "listing-card-123"})) is True
        assert is_card_container(FakeNode("span", {"data-testid": "product-card"})) is True
        assert is_card_container(FakeNode("div", {"data-testid": "seller-info"})) is False

    def test_card_class_only_on_div(self):
        assert is_card_container(FakeNode("div", {"class": "D_ProductCard x"})) is True
        assert is_card_container(FakeNode("div", {"class": "cardWrapper"})) is True
        assert is_card_container(FakeNode("span", {"class": "card"})) is False

    def test_nearest_container_wins(self):
        outer = FakeNode("article", text="outer")
        inner = FakeNode("div", {"data-testid": "listing"}, text="inner", parent=outer)
        anchor = FakeNode("a", {"href": "/p/1"}, text="title", parent=inner)

        assert find_card_container(anchor) is inner

    def test_anchor_itself_can_be_container(self):
        anchor = FakeNode("a", {"href": "/p/1", "data-testid": "listing-link"})

        assert find_card_container(anchor) is anchor

    def test_walk_is_bounded(self):
        card = FakeNode("li", text="too far")
        node = card
        for _ in range(6):
            node = FakeNode("div", parent=node)
        anchor = FakeNode("a", parent=node)

        assert find_card_container(anchor) is anchor.parent

    def test_container_at_ceiling_is_found(self):
        card = FakeNode("li", text="card")
        node = card
        for _ in range(4):
            node = FakeNode("div", parent=node)
        anchor = FakeNode("a", parent=node)

        # anchor + 4 divs + li = 6 nodes checked
        assert find_card_container(anchor) is card

    def test_fallback_without_parent(self):
        anchor = FakeNode("a", text="lonely")

        assert find_card_container(anchor) is anchor


class TestResolveListingUrl:
    """Test URL resolution against the page origin."""

    def test_root_relative(self):
        assert resolve_listing_url("/p/bike-123", ORIGIN) == f"{ORIGIN}/p/bike-123"

    def test_relative_resolves_from_origin(self):
        assert resolve_listing_url("p/bike-123", ORIGIN) == f"{ORIGIN}/p/bike-123"

    def test_absolute_kept(self):
        assert resolve_listing_url("https://other.example/p/1", ORIGIN) == "https://other.example/p/1"

    def test_rendered_page_origin(self):
        page = RenderedPage(url="https://www.carousell.sg/search/car?page=2", html="")

        assert page.origin == ORIGIN


class TestListingExtractor:
    """Test cases for ListingExtractor."""

    def setup_method(self):
        self.extractor = ListingExtractor()

    def extract(self, html: str):
        return self.extractor.extract(RenderedPage(url=SEARCH_URL, html=html))

    def test_extracts_listings_in_document_order(self, car_page):
        assert self.extract(car_page) == [
            Listing(url=f"{ORIGIN}/p/u1", text="red car"),
            Listing(url=f"{ORIGIN}/p/u2", text="blue car"),
        ]

    def test_card_text_includes_siblings_and_is_collapsed(self):
        html = listing_page(
            """
            <div data-testid="listing-card-9">
              <div><a href="/p/honda-9"><img alt="">
                <p>Honda   Jazz</p></a></div>
              <p>S$ 12,000</p>
              <p>
                 Like new
              </p>
            </div>
            """
        )

        assert self.extract(html) == [Listing(url=f"{ORIGIN}/p/honda-9", text="Honda Jazz S$ 12,000 Like new")]

    def test_duplicate_urls_first_wins(self):
        html = listing_page(
            simple_card("/p/u1", "first card"),
            simple_card("/p/u1", "second card"),
            simple_card(f"{ORIGIN}/p/u1", "absolute duplicate"),
        )

        assert self.extract(html) == [Listing(url=f"{ORIGIN}/p/u1", text="first card")]

    def test_non_listing_links_ignored(self):
        html = listing_page(
            simple_card("/u/seller", "seller profile"),
            simple_card("/search/bike", "another search"),
            simple_card("/p/u3", "listing"),
        )

        assert [listing.url for listing in self.extract(html)] == [f"{ORIGIN}/p/u3"]

    def test_empty_text_dropped_and_later_anchor_used(self):
        html = listing_page(
            "<li><a href='/p/u4'><img src='x.jpg'></a></li>",
            simple_card("/p/u4", "has text"),
        )

        assert self.extract(html) == [Listing(url=f"{ORIGIN}/p/u4", text="has text")]

    def test_scripts_not_part_of_text(self):
        html = listing_page("<li><a href='/p/u5'>bike</a><script>var x = 1;</script></li>")

        assert self.extract(html) == [Listing(url=f"{ORIGIN}/p/u5", text="bike")]

    def test_fallback_to_parent_text(self):
        html = "<html><body><section><span>Loose</span> <a href='/p/u6'>listing</a></section></body></html>"

        assert self.extract(html) == [Listing(url=f"{ORIGIN}/p/u6", text="Loose listing")]

    def test_comment_inside_word_does_not_split_it(self):
        """Test text split by framework comment markers is rejoined."""
        html = listing_page("<li><a href='/p/u7'><p>iPhone 15</p><p>S$<!-- -->1,200</p></a></li>")

        assert self.extract(html) == [Listing(url=f"{ORIGIN}/p/u7", text="iPhone 15 S$1,200")]

    def test_inline_markup_does_not_split_words(self):
        html = listing_page("<li><a href='/p/u8'>Road<b>bike</b> frame</a></li>")

        assert self.extract(html) == [Listing(url=f"{ORIGIN}/p/u8", text="Roadbike frame")]

    def test_line_break_separates_words(self):
        html = listing_page("<li><a href='/p/u9'>Brompton<br>M6L</a></li>")

        assert self.extract(html) == [Listing(url=f"{ORIGIN}/p/u9", text="Brompton M6L")]

    def test_extracted_price_matches_contains_rule(self):
        html = listing_page("<li><a href='/p/u7'><p>iPhone 15</p><p>S$<!-- -->1,200</p></a></li>")

        [listing] = self.extract(html)

        assert RuleMatcher().matches(listing.text, Rule.contains("S$1,200")) is True
        assert RuleMatcher().matches(listing.text, Rule.phrase("iphone 15 s$1,200")) is True

    def test_no_listings(self):
        assert self.extract("<html><body><p>No results</p></body></html>") == []

    def test_extraction_is_idempotent(self, car_page):
        assert self.extract(car_page) == self.extract(car_page)


class TestSoupNode:
    """Test the BeautifulSoup DomNode adapter."""

    def test_multi_valued_class_joined(self):
        from bs4 import BeautifulSoup

        soup = BeautifulSoup("<div class='a ProductCard'><a href='/p/1'>x</a></div>", "html.parser")
        anchor = SoupNode(soup.a)

        assert anchor.parent.get_attribute("class") == "a ProductCard"
        assert anchor.parent.parent is None
        assert anchor.get_attribute("missing") is None

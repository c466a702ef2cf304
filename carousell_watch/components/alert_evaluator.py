"""Alert evaluator: runs one alert across its sources and collects new hits."""

import logging
from typing import List, Optional, Set

from ..interfaces import IListingExtractor, IPageRenderer, IRuleMatcher
from ..models.alert import Alert
from ..models.listing import Hit, make_seen_key
from ..utils.error_handling import (
    ErrorCategory,
    ErrorSeverity,
    ErrorTracker,
    get_error_tracker,
)
from .listing_extractor import ListingExtractor
from .rule_matcher import RuleMatcher
from .seen_state import SeenStateStore

logger = logging.getLogger(__name__)

SAMPLE_SIZE = 3
SAMPLE_TEXT_LENGTH = 120


class AlertEvaluator:
    """Evaluates alerts source by source against the shared seen set."""

    def __init__(
        self,
        renderer: IPageRenderer,
        extractor: Optional[IListingExtractor] = None,
        matcher: Optional[IRuleMatcher] = None,
        error_tracker: Optional[ErrorTracker] = None,
    ):
        self.renderer = renderer
        self.extractor = extractor or ListingExtractor()
        self.matcher = matcher or RuleMatcher()
        self.error_tracker = error_tracker or get_error_tracker()

    async def evaluate(self, alert: Alert, seen: Set[str], force_all: bool = False) -> List[Hit]:
        """
        Collect hits for an alert.

        Sources are processed in declaration order and listings in extraction
        order. A source that fails to render or parse is logged and skipped.

        In normal mode a matching listing is a hit only if its key is not in
        ``seen``, and its key is added. With ``force_all`` every matching
        listing is a hit and ``seen`` is left untouched, including for
        listings never seen before.

        Args:
            alert: Alert to evaluate
            seen: Seen set, mutated in normal mode
            force_all: Report every current match without recording it

        Returns:
            Hits tagged with their source
        """
        hits: List[Hit] = []

        for source in alert.sources:
            try:
                page = await self.renderer.render(source)
            except Exception as e:
                self._source_failed(alert, source, ErrorCategory.RENDERING, e)
                continue

            try:
                listings = self.extractor.extract(page)
            except Exception as e:
                self._source_failed(alert, source, ErrorCategory.EXTRACTION, e)
                continue

            logger.info(f"[{alert.id}] {source} -> items found: {len(listings)}")
            if listings:
                logger.info(
                    f"[{alert.id}] sample 1-{SAMPLE_SIZE}: "
                    f"{[listing.text[:SAMPLE_TEXT_LENGTH] for listing in listings[:SAMPLE_SIZE]]}"
                )

            for listing in listings:
                if not self.matcher.matches(listing.text, alert.match):
                    continue

                key = make_seen_key(alert.id, listing.url)
                if force_all:
                    hits.append(Hit.from_listing(listing, source))
                elif not SeenStateStore.has(seen, key):
                    hits.append(Hit.from_listing(listing, source))
                    SeenStateStore.add(seen, key)

        logger.info(f"[{alert.id}] hits: {len(hits)} (force_all={force_all})")
        return hits

    def _source_failed(
        self, alert: Alert, source: str, category: ErrorCategory, error: Exception
    ) -> None:
        logger.error(f"[{alert.id}] Source failed: {source} {error}")
        self.error_tracker.record_error(
            component="alert_evaluator",
            category=category,
            severity=ErrorSeverity.MEDIUM,
            message=f"Source failed for alert {alert.id}",
            exception=error,
            context={"alert_id": alert.id, "source": source},
        )

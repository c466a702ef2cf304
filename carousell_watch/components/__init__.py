"""
Core components for the Carousell Watch system.
"""

from .alert_evaluator import AlertEvaluator
from .listing_extractor import ListingExtractor, RenderedPage
from .rule_matcher import RuleMatcher
from .seen_state import SeenStateStore

__all__ = [
    "AlertEvaluator",
    "ListingExtractor",
    "RenderedPage",
    "RuleMatcher",
    "SeenStateStore",
]

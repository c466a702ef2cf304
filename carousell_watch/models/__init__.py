"""
Data models for the Carousell Watch system.

This module contains the data classes used throughout the application for
representing alerts, rule trees, listings, notifications and configuration.
"""

from .alert import Alert
from .config import (
    BrowserSettings,
    Configuration,
    RunFlags,
    SmtpSettings,
    TelegramSettings,
)
from .delivery import DeliveryResult
from .listing import SEEN_KEY_SEPARATOR, Hit, Listing, make_seen_key
from .notification import Notification
from .rule import Rule, RuleKind

__all__ = [
    "Alert",
    "BrowserSettings",
    "Configuration",
    "DeliveryResult",
    "Hit",
    "Listing",
    "Notification",
    "Rule",
    "RuleKind",
    "RunFlags",
    "SEEN_KEY_SEPARATOR",
    "SmtpSettings",
    "TelegramSettings",
    "make_seen_key",
]

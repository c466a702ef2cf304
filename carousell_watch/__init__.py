"""
Carousell Watch

A multi-alert watcher for classifieds listing pages: renders search pages,
extracts listing cards, filters them with per-alert boolean rules, suppresses
listings that were already reported, and emails a summary of new matches.
"""

__version__ = "0.1.0"
__author__ = "Carousell Watch Team"

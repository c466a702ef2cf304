"""
Services for the Carousell Watch system.
"""

from .config_manager import ConfigurationManager

__all__ = ["ConfigurationManager"]

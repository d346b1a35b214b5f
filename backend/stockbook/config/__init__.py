"""Configuration package for stockbook."""

from .settings import StockbookSettings, get_settings

__all__ = ["StockbookSettings", "get_settings"]

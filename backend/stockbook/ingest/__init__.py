"""Loaders turning exported trade books into transactions."""

from .exports import frame_to_transactions, load_transactions_csv

__all__ = ["frame_to_transactions", "load_transactions_csv"]

"""Paper crypto trading ledger."""

__version__ = "0.1.0"

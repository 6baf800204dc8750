"""Chat bot building blocks: levelling and ranks, plus UC Merced campus lookups."""

__version__ = "0.1.0"
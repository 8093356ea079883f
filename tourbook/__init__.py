"""tourbook - tour income, expense and preparation bookkeeping in TWD."""

__version__ = "0.1.0"

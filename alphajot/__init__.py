"""Alphajot - AI greeting cards."""

__version__ = "0.1.0"

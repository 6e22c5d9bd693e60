"""Floating side menu: settings cascade, stylesheet compiler and revision store."""

__version__ = "2.0.0"

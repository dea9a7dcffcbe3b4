"""Knockout Pairing - single-elimination tournament engine."""

__version__ = "0.1.0"

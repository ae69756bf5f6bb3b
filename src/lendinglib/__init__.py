"""Lending-state engine for a small library."""

__version__ = "0.1.0"

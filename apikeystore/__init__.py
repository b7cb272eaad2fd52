"""Storefront backend that sells API key plans."""

__version__ = "0.1.0"

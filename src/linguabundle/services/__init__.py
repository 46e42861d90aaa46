"""Stores, settings and the operations built on them."""

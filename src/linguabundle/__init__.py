"""LinguaBundle: multi-locale JSON translation bundles."""

__version__ = "0.1.0"

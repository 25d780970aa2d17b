"""Python style-conformance checker."""

__version__ = "0.1.0"

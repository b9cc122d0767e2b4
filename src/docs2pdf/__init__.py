"""Build a single PDF out of the latest published documentation set."""

__version__ = "0.1.0"

"""codestruct - structural definition extraction for source files."""

__version__ = "0.1.0"

"""compositectl: build-time validation and rendering of composite packages."""

__version__ = "0.1.0"

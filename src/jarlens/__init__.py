"""jarlens - fast class and method lookup across Maven dependency jars."""

__version__ = "0.1.0"

"""rulectl — AI coding-rules generator for a layered technology taxonomy."""

__version__ = "0.1.0"

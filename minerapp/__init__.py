"""Resource-mining economy engine."""

__version__ = "0.1.0"

"""JWT ID replay-prevention store."""

__version__ = "0.1.0"

"""Beauty Plaza salon and spa booking backend."""

__version__ = "1.0.0"

"""SDK version, kept out of the package root to avoid import cycles."""

__version__ = "0.1.0"

"""Course content, notes, progress and timemaps for a multi-organisation learning platform."""

__version__ = "0.1.0"
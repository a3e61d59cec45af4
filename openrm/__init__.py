"""Vision helpers for detecting and classifying armor plates."""

__version__ = "1.0.0"
"""nextup: pick the next task for the time and energy you have."""

__version__ = "0.1.0"

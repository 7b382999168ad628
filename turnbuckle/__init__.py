"""turnbuckle: pro-wrestling booking and career simulation engine."""

__version__ = "0.1.0"

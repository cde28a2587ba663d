"""Server-side engine for a Wild West social-deduction card game."""

__version__ = "1.0.0"

"""Marketing content studio: copy, posters and platform adaptations."""

__version__ = "1.0.0"

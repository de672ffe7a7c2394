"""mangafas: role-based trust and content-lifecycle engine for a manga reading site."""

__version__ = "0.1.0"

"""appseed -- scaffold a new web application from a template tree."""

__version__ = "0.1.0"

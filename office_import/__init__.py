"""Excel -> PostgreSQL office record importer."""

__version__ = "0.1.0"

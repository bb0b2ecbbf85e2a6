"""Trekify trek catalog: spreadsheet ingestion, in-memory catalog and store seeding."""

__version__ = "0.1.0"

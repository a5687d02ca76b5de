"""Command-line interface for the dictionary scraper."""

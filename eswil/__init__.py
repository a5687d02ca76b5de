"""Resilient concurrent scraper for the eswil.ijp.pan.pl dictionary."""

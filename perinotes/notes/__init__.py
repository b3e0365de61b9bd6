"""Periodic notes on disk: settings, store, records, creation, sections and done reviews."""

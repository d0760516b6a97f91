"""Rootmarks reading-tracker API."""

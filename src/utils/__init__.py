"""Utilities package for the Order Timeline application."""

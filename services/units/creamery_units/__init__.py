"""Unit catalogue and conversion service for the creamery dashboard."""

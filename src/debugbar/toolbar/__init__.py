"""Snapshot building, timeline layout and variable harvesting."""

"""Tk viewer for the aurora probability field."""

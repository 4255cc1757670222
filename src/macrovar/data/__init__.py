"""Bundled reference datasets."""

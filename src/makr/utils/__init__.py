"""Utility helpers for makr."""

"""Utility helpers for tagql."""

"""Utility helpers shared across ripzip modules."""

"""Adapters between the codec and the desktop environment."""

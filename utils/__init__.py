"""Utility modules for TeXClipper."""
